"""
Coercion of loosely-typed submitted values
Every value that arrives from a form post or a scraped page passes through here
before the rest of the code looks at it.
"""

import math
import re
from collections import namedtuple
from collections.abc import Mapping

MAPPING = 'mapping'
SEQUENCE = 'sequence'
SCALAR = 'scalar'

# Tagged wrapper around untyped input: kind is one of MAPPING, SEQUENCE, SCALAR
RawValue = namedtuple('RawValue', ['kind', 'value'])

FIR_VALUES = (
    'Hit',
    'MissedRight',
    'MissedLeft',
    'MissedShort',
    'MissedLong',
    'MissedUnspecified',
)

_NUMERIC_RE = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$')


def raw_value(value):
    """Classify a value once so callers can branch on kind instead of probing types"""
    if isinstance(value, RawValue):
        return value
    if isinstance(value, Mapping):
        return RawValue(MAPPING, value)
    if isinstance(value, (list, tuple)):
        return RawValue(SEQUENCE, value)
    return RawValue(SCALAR, value)


def raw_items(raw):
    """
    Key/value pairs of a container.
    Sequences are keyed by position, like a form-encoded array. Scalars have no items.
    """
    raw = raw_value(raw)
    if raw.kind == MAPPING:
        return list(raw.value.items())
    if raw.kind == SEQUENCE:
        return list(enumerate(raw.value))
    return []


def is_container(value):
    return raw_value(value).kind in (MAPPING, SEQUENCE)


def scalar_text(value):
    """Trimmed text form of a scalar; None, False and containers become ''"""
    if value is None or value is False:
        return ''
    if value is True:
        return '1'
    if is_container(value):
        return ''
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def is_numeric(value):
    """True for ints, finite floats and numeric-looking strings (never for booleans)"""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value))
    return False


def to_nullable_int(value):
    """
    Nullable integer coercion used for gross, putts and penalty.
    Empty or non-numeric input gives None; numbers are truncated, not rounded.
    """
    if value is None:
        return None
    text = scalar_text(value)
    if text == '' or not is_numeric(text):
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (OverflowError, ValueError):
        return None


def hole_index(key):
    """Integer index for a numeric-looking key, or None"""
    if not is_numeric(key):
        return None
    return to_nullable_int(key)


def sanitize_fir_enum(value):
    """Fairway result, only when it exactly matches one of FIR_VALUES"""
    text = scalar_text(value)
    if text == '':
        return None
    return text if text in FIR_VALUES else None


def to_checked_int1_or_null(value):
    """
    Return 1 if checked, else None.
    Checkboxes come through as True, 1, "1", "true" or "on". The destination has no
    "false", so anything else means the box was not recorded.
    """
    if value is True:
        return 1
    if scalar_text(value).lower() in ('1', 'true', 'on'):
        return 1
    return None


def is_filled(value):
    """Form-style emptiness check: None, False, 0, '', '0' and empty containers are empty"""
    if value is None or value is False:
        return False
    if is_container(value):
        return len(value) > 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    text = str(value)
    return text not in ('', '0')
