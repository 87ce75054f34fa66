"""Convert between "H:MM:SS" / "M:SS" / "S" text and seconds."""

import math

# Place-value weights for 1, 2 and 3 colon-separated fields
_WEIGHTS = {
    1: (1,),
    2: (60, 1),
    3: (3600, 60, 1),
}


def _field(text: str) -> float:
    """One numeric field; anything unreadable counts as 0."""
    try:
        value = float(text)
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def parse_time(text) -> float:
    """Parse a time string into seconds.

    Accepts "H:MM:SS", "M:SS" or a bare number of seconds. Numbers pass
    through unchanged. Malformed or empty input yields 0; never raises.
    """
    if isinstance(text, bool) or text is None:
        return 0.0
    if isinstance(text, (int, float)):
        return float(text) if math.isfinite(text) and text > 0 else 0.0
    if not isinstance(text, str) or not text.strip():
        return 0.0

    parts = text.strip().split(":")
    weights = _WEIGHTS.get(len(parts))
    if weights is None:
        return 0.0

    total = sum(w * _field(p) for w, p in zip(weights, parts))
    return max(0.0, total)


def format_time(seconds: float) -> str:
    """Render seconds as "H:MM:SS" (with hours) or "M:SS".

    Rounds to the nearest whole second so parse_time(format_time(x))
    equals round(x).
    """
    total = max(0, int(round(seconds)))
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_ruler_time(seconds: float) -> str:
    """Compact ruler label: "45s", "2:05", "1:02:05"."""
    total = int(math.floor(seconds))
    if total < 60:
        return f"{total}s"
    m, s = divmod(total, 60)
    if total < 3600:
        return f"{m}:{s:02d}"
    h, mm = divmod(m, 60)
    return f"{h}:{mm:02d}:{s:02d}"
