"""Human-readable formatting for metric values."""

import math

_SCALES = {
    "numeric": (1000, ["", "k", "M", "G", "T", "P"]),
    "decimalBytes": (1000, ["B", "KB", "MB", "GB", "TB", "PB"]),
    "binaryBytes": (1024, ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]),
    "decimalBytesPerSec": (1000, ["B/s", "KB/s", "MB/s", "GB/s", "TB/s", "PB/s"]),
}

UNIT_KINDS = frozenset(_SCALES) | {"percentage"}


def _trim(number: float, precision: int) -> str:
    text = f"{number:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def humanize(value: float | None, kind: str = "numeric", precision: int = 1) -> str:
    if kind not in UNIT_KINDS:
        raise ValueError(f"Unknown unit kind {kind!r}. Supported: {sorted(UNIT_KINDS)}")
    if value is None or not math.isfinite(value):
        return "-"
    if kind == "percentage":
        return f"{_trim(value, precision)}%"

    divisor, suffixes = _SCALES[kind]
    scaled = float(value)
    index = 0
    while abs(scaled) >= divisor and index < len(suffixes) - 1:
        scaled /= divisor
        index += 1
    suffix = suffixes[index]
    number = _trim(scaled, precision)
    if kind == "numeric":
        return f"{number}{suffix}"
    return f"{number} {suffix}"


def humanize_limit(limit: float | None, kind: str = "numeric") -> str:
    if limit is None:
        return "None"
    return humanize(limit, kind)
