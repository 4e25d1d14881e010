"""
Caller identifiers and resolved identities.

Authorized callers address users by canonical UUID. Everybody else only ever
sees a positional index into the repository's ordered user list, which is a
pseudonym: it is only as stable as the repository's ordering and shifts when
an earlier user is deleted.
"""
import re
from dataclasses import dataclass
from typing import Optional, Union

from backend.features.users.domain.user_entity import User

MISSING_INDEX = -1
# No ordered user list gets anywhere near this long
MAX_INDEX_DIGITS = 18

_SIGNED_INT = re.compile(r'[+-]?([0-9]+)')


@dataclass(frozen=True)
class ByUUID:
    uuid: str


@dataclass(frozen=True)
class ByIndex:
    index: int


CallerIdentifier = Union[ByUUID, ByIndex]


def parse_signed_index(raw: Optional[str]) -> Optional[int]:
    """
    Strict integer parse: optional sign and ASCII digits, nothing else (no
    whitespace, underscores or non-ASCII digits). Returns None when `raw` is
    not an integer at all. Integers too long to be a position in any list
    come back as MISSING_INDEX.
    """
    if raw is None:
        return None
    match = _SIGNED_INT.fullmatch(str(raw))
    if match is None:
        return None
    if len(match.group(1).lstrip('0')) > MAX_INDEX_DIGITS:
        return MISSING_INDEX
    return int(match.group(0))


def parse_index(raw: Optional[str]) -> int:
    """
    Parse a non-negative index. Anything else becomes MISSING_INDEX, which
    no repository can satisfy.
    """
    index = parse_signed_index(raw)
    if index is None or index < 0:
        return MISSING_INDEX
    return index


def caller_identifier(raw_id: str, authorized: bool) -> CallerIdentifier:
    if authorized:
        return ByUUID(raw_id)
    return ByIndex(parse_index(raw_id))


@dataclass(frozen=True)
class ResolvedIdentity:
    """
    canonical_uuid keys every storage and cache lookup.
    exposed_identifier and user are what may be echoed to the caller; for
    index callers the user's uuid has already been replaced by the index.
    """
    canonical_uuid: str
    exposed_identifier: str
    user: User
