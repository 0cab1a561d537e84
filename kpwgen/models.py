"""Data model shared by the generation, history and settings layers."""

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from kpwgen import config


class AdvancedParams(BaseModel):
    """The non-secret generation parameters; safe to persist."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    version: int = Field(default=config.DEFAULT_VERSION, ge=1)
    length: int = Field(default=config.DEFAULT_LENGTH, ge=1, le=config.MAX_LENGTH)
    prefix: str = config.DEFAULT_PREFIX
    suffix: str = config.DEFAULT_SUFFIX
    raw_mode: bool = Field(default=config.DEFAULT_RAW_MODE, alias="rawMode")


@dataclass(frozen=True)
class GenerationRequest:
    """One validated submission.  Lives only for a single generation call."""

    secret: str = field(repr=False)
    platforms: tuple[str, ...]
    accounts: tuple[str, ...] = ()
    params: AdvancedParams = field(default_factory=AdvancedParams)


@dataclass(frozen=True)
class GenerationResult:
    platform: str
    account: str | None
    password: str = field(repr=False)


@dataclass(frozen=True)
class HistoryEntry:
    platform: str
    account: str | None
    password: str = field(repr=False)
    timestamp: datetime

    @classmethod
    def from_result(cls, result: GenerationResult, timestamp: datetime) -> "HistoryEntry":
        return cls(result.platform, result.account, result.password, timestamp)
