import logging
import re

logger = logging.getLogger(__name__)

# ────────────────────────────────
# Duration Parsing
# ────────────────────────────────

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # micro sign
    "μs": 1e-6,  # greek mu
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """
    Parse a Go-style duration string ("1s", "300ms", "1h2m3.5s") into seconds.
    A bare "0" is accepted. Raises ValueError on anything else.
    """
    text = value.strip()
    sign = 1.0
    if text[:1] in ("+", "-"):
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if text == "0":
        return 0.0
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    total = 0.0
    pos = 0
    while pos < len(text):
        m = _DURATION_PART.match(text, pos)
        if m is None:
            raise ValueError(f"invalid duration {value!r}")
        total += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()

    logger.debug(f"Parsed duration {value!r} → {sign * total}s")
    return sign * total


# ────────────────────────────────
# HTTP Helpers
# ────────────────────────────────

# RFC 7230 token characters
_METHOD_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def is_valid_method(method: str) -> bool:
    return bool(_METHOD_TOKEN.match(method))


# CR, LF, NUL and other control characters would split or corrupt the header block
_HEADER_FORBIDDEN = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


def is_valid_header_value(value: str) -> bool:
    return not _HEADER_FORBIDDEN.search(value)


# ────────────────────────────────
# Log Helpers
# ────────────────────────────────


def printable(text: str) -> str:
    """Render undecodable body bytes (kept as surrogates) as \\xNN escapes."""
    return text.encode("utf-8", errors="surrogateescape").decode(
        "utf-8", errors="backslashreplace"
    )
