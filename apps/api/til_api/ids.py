"""ULID validation and timestamp decoding.

Note identifiers are ULIDs: 26 Crockford base-32 characters, the first 10 of
which encode a 48-bit millisecond timestamp. Upper-cased ULIDs sort
lexicographically in creation order, so callers can order notes by string
comparison without decoding.
"""

from __future__ import annotations

import re

from .domain.exceptions import InvalidIdentifierError
from .util import rfc3339_from_millis

ENCODING = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ULID_LENGTH = 26
TIME_LENGTH = 10
TIME_MAX = 2**48 - 1

_ULID_RE = re.compile(r"[0-9A-HJKMNP-TV-Z]{26}", re.IGNORECASE | re.ASCII)
_DECODE = {ch: i for i, ch in enumerate(ENCODING)}


def is_valid(value: object) -> bool:
    return isinstance(value, str) and _ULID_RE.fullmatch(value) is not None


def normalize(value: str) -> str:
    return value.upper()


def decode_timestamp(value: str) -> int:
    if not is_valid(value):
        raise InvalidIdentifierError(value)
    ms = 0
    for ch in normalize(value[:TIME_LENGTH]):
        ms = ms * 32 + _DECODE[ch]
    if ms > TIME_MAX:
        raise InvalidIdentifierError(value)
    return ms


def timestamp_iso(value: str) -> str:
    return rfc3339_from_millis(decode_timestamp(value))
