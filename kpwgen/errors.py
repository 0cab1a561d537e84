"""Exception taxonomy for kpwgen.

Every message here is a fixed, locally generated string.  None of them ever
embeds the master key or a derived password.
"""


class KpwgenError(Exception):
    """Base class for all kpwgen errors."""

    message = "Unexpected error."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


# ── Validation ─────────────────────────────────────────────────────────────


class ValidationError(KpwgenError):
    """Raised before any derivation when the inputs are unusable."""

    message = "Invalid input."


class SecretTooShort(ValidationError):
    message = "Master key must be at least 8 characters."


class EmptyPlatformList(ValidationError):
    message = "Platform must not be empty."


class AccountPlatformCountMismatch(ValidationError):
    message = "Number of Accounts must match the number of Platforms."


# ── Generation ─────────────────────────────────────────────────────────────


class GenerationFailure(KpwgenError):
    """The derivation primitive raised while producing a batch."""

    message = "Failed to generate password."
