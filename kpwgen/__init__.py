"""kpwgen -- reproducible per-platform passwords from one master key.

The same master key, platform, account and advanced parameters always give
the same password.  This package validates input, runs the derivation for
each platform, keeps a session history, exports it as CSV or text, and
persists the non-secret parameters with an expiry.
"""

from kpwgen.derive import gen_password, normalize_platform
from kpwgen.errors import (
    AccountPlatformCountMismatch,
    EmptyPlatformList,
    GenerationFailure,
    KpwgenError,
    SecretTooShort,
    ValidationError,
)
from kpwgen.export import export_filename, render_export, to_csv, to_txt
from kpwgen.history import HistoryStore
from kpwgen.models import AdvancedParams, GenerationRequest, GenerationResult, HistoryEntry
from kpwgen.orchestrator import GenerationOrchestrator, derive_batch
from kpwgen.settings_store import (
    JsonFileStorage,
    MemoryStorage,
    PersistedSettingsStore,
    ReadResult,
    StoredAdvancedRecord,
)
from kpwgen.strength import score_strength
from kpwgen.validation import account_count_mismatch, progress_step, split_tokens, validate

__version__ = "1.0.0"

__all__ = [
    "AccountPlatformCountMismatch",
    "AdvancedParams",
    "EmptyPlatformList",
    "GenerationFailure",
    "GenerationOrchestrator",
    "GenerationRequest",
    "GenerationResult",
    "HistoryEntry",
    "HistoryStore",
    "JsonFileStorage",
    "KpwgenError",
    "MemoryStorage",
    "PersistedSettingsStore",
    "ReadResult",
    "SecretTooShort",
    "StoredAdvancedRecord",
    "ValidationError",
    "account_count_mismatch",
    "derive_batch",
    "export_filename",
    "gen_password",
    "normalize_platform",
    "progress_step",
    "render_export",
    "score_strength",
    "split_tokens",
    "to_csv",
    "to_txt",
    "validate",
]
