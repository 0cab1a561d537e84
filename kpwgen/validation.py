"""Input validation: raw text fields to a :class:`GenerationRequest`.

Pure functions only.  Callers re-run :func:`validate` whenever an input
changes; there is no incremental state to keep in sync.
"""

import logging

from kpwgen import config
from kpwgen.errors import AccountPlatformCountMismatch, EmptyPlatformList, SecretTooShort
from kpwgen.models import AdvancedParams, GenerationRequest

logger = logging.getLogger(__name__)


def split_tokens(text: str | None) -> list[str]:
    """Split on runs of whitespace, dropping empties, keeping order."""
    return (text or "").split()


def counts_mismatch(platforms: list[str], accounts: list[str]) -> bool:
    """True when accounts are given but do not pair one-to-one with platforms."""
    return bool(accounts) and len(accounts) != len(platforms)


def account_count_mismatch(platform_text: str, account_text: str) -> bool:
    """Live hint shown while typing; same rule as the submission gate."""
    return counts_mismatch(split_tokens(platform_text), split_tokens(account_text))


def progress_step(secret: str, platform_text: str) -> int:
    """0 = master key still too short, 1 = needs a platform, 2 = ready."""
    if len(secret) < config.MIN_SECRET_LENGTH:
        return 0
    if not split_tokens(platform_text):
        return 1
    return 2


def validate(
    platform_text: str,
    account_text: str,
    secret: str,
    params: AdvancedParams | None = None,
) -> GenerationRequest:
    """Validate raw inputs and return the request they describe.

    Raises :class:`SecretTooShort`, :class:`EmptyPlatformList` or
    :class:`AccountPlatformCountMismatch`, checked in that order.
    """
    if len(secret or "") < config.MIN_SECRET_LENGTH:
        logger.info("Rejected submission: secret too short")
        raise SecretTooShort()

    platforms = split_tokens(platform_text)
    if not platforms:
        logger.info("Rejected submission: no platforms")
        raise EmptyPlatformList()

    accounts = split_tokens(account_text)
    if counts_mismatch(platforms, accounts):
        logger.info(
            "Rejected submission: %d accounts for %d platforms",
            len(accounts), len(platforms),
        )
        raise AccountPlatformCountMismatch()

    return GenerationRequest(
        secret=secret,
        platforms=tuple(platforms),
        accounts=tuple(accounts),
        params=params or AdvancedParams(),
    )
