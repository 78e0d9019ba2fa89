"""Deterministic hashing of JSON-like data.

The digest is Keccak-256 over the UTF-8 bytes of a canonical JSON string, the
same construction the EventRegistry contract and the web frontend use, so a
commitment computed here can be checked anywhere else.

Canonical form:

- mapping keys are sorted recursively, in UTF-16 code-unit order;
- array order is preserved;
- output is compact (no whitespace) and non-ASCII text is written as-is;
- unpaired UTF-16 surrogates are written as lowercase ``\\uXXXX`` escapes;
- numbers are rendered exactly as ``JSON.stringify`` renders them.
"""

import json
import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from eth_utils import keccak

HASH_PREFIX = "0x"

_SURROGATE = re.compile("[\ud800-\udfff]")


def _join_surrogate_pairs(text: str) -> str:
    # A high/low pair held as two code points becomes the one astral character it encodes.
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def has_unpaired_surrogate(text: str) -> bool:
    """True if ``text`` holds a UTF-16 surrogate that is not half of a valid pair."""
    return _SURROGATE.search(_join_surrogate_pairs(text)) is not None


def _quote(text: str) -> str:
    quoted = json.dumps(_join_surrogate_pairs(text), ensure_ascii=False)
    return _SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", quoted)


def _sort_key(key: str) -> bytes:
    # Code-unit order of UTF-16 differs from code-point order for astral characters.
    return key.encode("utf-16-be", "surrogatepass")


def _format_number(value: float) -> str:
    if not math.isfinite(value):
        return "null"
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = k + exponent

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        body = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + body


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _encode(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_number(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, datetime):
        return json.dumps(_format_datetime(value))
    if isinstance(value, date):
        return json.dumps(value.isoformat())
    if isinstance(value, dict):
        items = []
        for key in sorted(value, key=lambda k: _sort_key(str(k))):
            items.append(f"{_quote(str(key))}:{_encode(value[key])}")
        return "{" + ",".join(items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    raise TypeError(f"Object of type {type(value).__name__} cannot be canonicalized")


def canonicalize(value: Any) -> str:
    """Serialize ``value`` to its canonical JSON string."""
    return _encode(value)


def calculate_hash(value: Any) -> str:
    """Keccak-256 digest of the canonical form, as ``0x`` + 64 lowercase hex chars."""
    digest = keccak(canonicalize(value).encode("utf-8"))
    return HASH_PREFIX + digest.hex()


def verify_hash(value: Any, expected_hash: str) -> bool:
    """Check that ``value`` hashes to ``expected_hash`` (case-insensitive)."""
    return calculate_hash(value).lower() == expected_hash.lower()
