"""
Profile image derivation.

Originals are stored once per user. Resized variants are rendered on first
request and cached forever under a deterministic key; a later change of the
original does not invalidate them. Concurrent first requests may both render,
which is harmless: the output is a pure function of the original and the last
atomic publish wins.
"""
import io
import re
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError
from backend.common.base.base_service import BaseService
from backend.common.errors import NotFoundError, UnsupportedSizeError
from backend.features.users.domain.artifact import ArtifactKind, Badge, Original, Resize, original_key, resized_key
from backend.features.users.repository.image_store import ImageStore
from backend.features.users.service.badge_composer import BadgeComposer
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)

ALLOWED_DIMENSIONS = (48, 256)
DEFAULT_DIMENSION = 256
SIZE_SEPARATOR = 'x'

# Numeric but too long to be an image size; outside any allow-list
OVERSIZED_DIMENSION = 0
MAX_DIMENSION_DIGITS = 6

_INT_PATTERN = re.compile(r'[+-]?([0-9]+)')


def _dimension(part: str) -> int:
    match = _INT_PATTERN.fullmatch(part)
    if match is None:
        return DEFAULT_DIMENSION
    if len(match.group(1).lstrip('0')) > MAX_DIMENSION_DIGITS:
        return OVERSIZED_DIMENSION
    return int(part)


def parse_size_token(token: str) -> Tuple[int, int]:
    """
    "WxH" -> (W, H) from the first two components; "S" -> (S, S).
    Non-numeric components default to 256.
    """
    if SIZE_SEPARATOR in token:
        width, height = [_dimension(part) for part in token.split(SIZE_SEPARATOR)[:2]]
        return width, height
    dim = _dimension(token)
    return dim, dim


def validate_size(width: int, height: int) -> None:
    if width != height or width not in ALLOWED_DIMENSIONS:
        raise UnsupportedSizeError(width, height)


def resize_image_bytes(data: bytes, width: int, height: int) -> bytes:
    """Stretch `data` to exactly width x height (no aspect preservation) as RGB PNG."""
    try:
        with Image.open(io.BytesIO(data)) as source:
            image = source.convert('RGB')
    except (UnidentifiedImageError, OSError) as e:
        raise NotFoundError(f"Original image unreadable: {e}") from e

    resized = image.resize((width, height), Image.Resampling.NEAREST)
    buffer = io.BytesIO()
    resized.save(buffer, format='PNG')
    return buffer.getvalue()


class ImageService(BaseService):
    def __init__(self, store: ImageStore, badge_composer: BadgeComposer):
        self.store = store
        self.badge_composer = badge_composer

    def store_original(self, uuid: str, data: bytes) -> None:
        self.store.put_atomic(original_key(uuid), data)

    def delete_original(self, uuid: str) -> bool:
        # Derived variants are left in place; see the staleness note in the module docstring.
        return self.store.delete(original_key(uuid))

    def fetch_original(self, uuid: str) -> bytes:
        data = self.store.get(original_key(uuid))
        if data is None:
            raise NotFoundError(f"No original image for {uuid}")
        return data

    def resize(self, uuid: str, width: int, height: int) -> str:
        """
        Ensure the resized variant exists and return its store key.
        The size is validated before any store access.
        """
        validate_size(width, height)
        key = resized_key(uuid, width, height)
        if self.store.exists(key):
            logger.debug("Resize cache hit", extra={"key": key})
            return key

        source = self.fetch_original(uuid)
        self.store.put_atomic(key, resize_image_bytes(source, width, height))
        logger.info("Resized profile image generated", extra={"key": key})
        return key

    def fetch_resized(self, uuid: str, width: int, height: int) -> bytes:
        key = self.resize(uuid, width, height)
        data = self.store.get(key)
        if data is None:
            raise NotFoundError(f"Resized image vanished: {key}")
        return data

    def fetch_badge(self, uuid: str, name: str) -> bytes:
        return self.badge_composer.compose(self.fetch_original(uuid), name)

    def derive_artifact(self, uuid: str, kind: ArtifactKind, name: Optional[str] = None) -> bytes:
        if isinstance(kind, Original):
            return self.fetch_original(uuid)
        if isinstance(kind, Resize):
            return self.fetch_resized(uuid, kind.width, kind.height)
        if isinstance(kind, Badge):
            return self.fetch_badge(uuid, name or "")
        raise TypeError(f"Unknown artifact kind: {kind!r}")
