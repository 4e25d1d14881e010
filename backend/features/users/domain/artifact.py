"""
Image artifacts that can be derived for a user.
"""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Original:
    mimetype = 'image/png'


@dataclass(frozen=True)
class Badge:
    mimetype = 'image/bmp'


@dataclass(frozen=True)
class Resize:
    width: int
    height: int
    mimetype = 'image/png'


ArtifactKind = Union[Original, Badge, Resize]


def original_key(uuid: str) -> str:
    return f"{uuid}.png"


def resized_key(uuid: str, width: int, height: int) -> str:
    return f"{uuid}-{width}x{height}.png"
