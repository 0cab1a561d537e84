"""Copy-to-clipboard with a fallback path and a transient "copied" marker.

Copying is a convenience: failures are logged and reported as ``False``,
never raised.
"""

import base64
import logging
import sys
import time
from collections.abc import Callable

import pyperclip

from kpwgen import config

logger = logging.getLogger(__name__)


def osc52_copy(text: str) -> None:
    """Ask the terminal to set the clipboard via the OSC 52 escape sequence."""
    if not sys.stdout.isatty():
        raise OSError("stdout is not a terminal")
    payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
    sys.stdout.write(f"\033]52;c;{payload}\a")
    sys.stdout.flush()


class CopiedIndicator:
    """Remembers which value was copied last, for a short while."""

    def __init__(
        self,
        duration: float = config.COPIED_INDICATOR_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.duration = duration
        self._clock = clock
        self._value: str | None = None
        self._since = 0.0

    def mark(self, value: str) -> None:
        self._value = value
        self._since = self._clock()

    def clear(self) -> None:
        self._value = None

    def is_copied(self, value: str) -> bool:
        if self._value is None or self._value != value:
            return False
        if self._clock() - self._since >= self.duration:
            self._value = None
            return False
        return True


def copy_text(
    text: str,
    indicator: CopiedIndicator | None = None,
    *,
    primary: Callable[[str], None] | None = None,
    fallback: Callable[[str], None] = osc52_copy,
) -> bool:
    """Copy *text* via *primary* (pyperclip by default), then *fallback*.

    Returns whether either path succeeded.
    """
    if not text:
        return False
    try:
        (primary or pyperclip.copy)(text)
    except Exception as exc:
        logger.info("Primary clipboard copy failed (%s); trying fallback", type(exc).__name__)
        try:
            fallback(text)
        except Exception as fallback_exc:
            logger.error("Fallback copy failed (%s)", type(fallback_exc).__name__)
            return False
    if indicator is not None:
        indicator.mark(text)
    return True
