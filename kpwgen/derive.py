"""Deterministic password derivation.

This is the default primitive the orchestrator calls.  Given identical
inputs it always returns the identical password: nothing here reads a clock
or a random source.
"""

import hashlib
import hmac
import re
import string

# ── Platform normalization ─────────────────────────────────────────────────

_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*://")
_NON_ALNUM = re.compile(r"[^a-z0-9]")

# Second-level labels that sit under a country code (bbc.co.uk, gov.br ...)
_GENERIC_SLD = {"ac", "co", "com", "edu", "gov", "net", "or", "org", "go", "my", "web"}


def normalize_platform(platform: str) -> str:
    """Reduce *platform* to the canonical token used for derivation.

    ``"https://accounts.Google.com/login"``, ``"google.com"`` and
    ``"Google"`` all map to ``"google"``.  The function is idempotent.
    """
    text = _SCHEME.sub("", platform.strip().lower())
    host = re.split(r"[/?#]", text, maxsplit=1)[0]
    host = host.rsplit("@", 1)[-1].split(":", 1)[0]
    if host.startswith("www."):
        host = host[4:]

    labels = [label for label in host.split(".") if label]
    if len(labels) >= 3 and len(labels[-1]) == 2 and labels[-2] in _GENERIC_SLD:
        name = labels[-3]
    elif len(labels) >= 2:
        name = labels[-2]
    else:
        name = labels[0] if labels else ""

    name = _NON_ALNUM.sub("", name)
    return name or _NON_ALNUM.sub("", text)


# ── Password derivation ────────────────────────────────────────────────────

SYMBOLS = "!@#$%^&*-_+=?"
ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits + SYMBOLS
_CLASSES = (string.ascii_lowercase, string.ascii_uppercase, string.digits, SYMBOLS)

MIN_BODY_LENGTH = len(_CLASSES)


def _keystream(key: bytes, message: bytes, size: int) -> bytes:
    """HMAC-SHA256 in counter mode, truncated to *size* bytes."""
    out = b""
    counter = 0
    while len(out) < size:
        block = message + counter.to_bytes(4, "big")
        out += hmac.new(key, block, hashlib.sha256).digest()
        counter += 1
    return out[:size]


def gen_password(
    secret: str,
    platform: str,
    account: str | None = None,
    version: int = 1,
    target_length: int = 18,
    prefix: str = "",
    suffix: str = "",
    normalize: bool = True,
) -> str:
    """Derive the password for *platform* (and *account*) from *secret*.

    The body between *prefix* and *suffix* always holds at least one
    lowercase letter, one uppercase letter, one digit and one symbol, so it
    is never shorter than four characters even when the affixes already
    exceed *target_length*.
    """
    if version < 1:
        raise ValueError("version must be at least 1")
    if target_length < 1:
        raise ValueError("target length must be at least 1")

    name = normalize_platform(platform) if normalize else platform.strip()
    message = "\x1f".join(["kpwgen", f"v{version}", name, account or ""]).encode("utf-8")
    body_length = max(target_length - len(prefix) - len(suffix), MIN_BODY_LENGTH)

    stream = _keystream(secret.encode("utf-8"), message, body_length * 2)

    chars = [cls[b % len(cls)] for cls, b in zip(_CLASSES, stream)]
    chars += [ALPHABET[b % len(ALPHABET)] for b in stream[MIN_BODY_LENGTH:body_length]]

    # Fisher-Yates driven by the second half of the stream
    for i in range(len(chars) - 1, 0, -1):
        j = stream[body_length + i] % (i + 1)
        chars[i], chars[j] = chars[j], chars[i]

    return prefix + "".join(chars) + suffix
