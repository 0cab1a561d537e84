"""Advisory strength scoring for derived passwords.

Derived passwords are deterministic, so this never blocks anything; it only
tells the user how the chosen length and affixes play out.
"""

import math
import re

LABELS = ("weak", "medium", "strong", "excellent")
RECOMMENDED_LENGTH = 12


def score_strength(password: str) -> dict:
    """Return a report for *password*.

    Keys:
        checks  -- dict[str, bool]  (upper, lower, digit, symbol, min_length)
        score   -- int 0-5, number of checks passed
        label   -- "weak" (<= 2), "medium" (3), "strong" (4), "excellent" (5)
        entropy -- float (bits), pool size times length
    """
    checks = {
        "upper":      bool(re.search(r"[A-Z]", password)),
        "lower":      bool(re.search(r"[a-z]", password)),
        "digit":      bool(re.search(r"[0-9]", password)),
        "symbol":     bool(re.search(r"[^A-Za-z0-9]", password)),
        "min_length": len(password) >= RECOMMENDED_LENGTH,
    }
    score = sum(checks.values())

    if score <= 2:
        label = LABELS[0]
    elif score == 3:
        label = LABELS[1]
    elif score == 4:
        label = LABELS[2]
    else:
        label = LABELS[3]

    pool = sum([
        26 if checks["lower"] else 0,
        26 if checks["upper"] else 0,
        10 if checks["digit"] else 0,
        32 if checks["symbol"] else 0,
    ]) or 1
    entropy = len(password) * math.log2(pool) if password else 0.0

    return {
        "checks": checks,
        "score": score,
        "label": label,
        "entropy": round(entropy, 1),
    }
