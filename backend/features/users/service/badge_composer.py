"""
Badge rendering for the 296x128 e-paper name badge.

The badge is the bundled template, the user's profile picture scaled into
the left square, and the user's name with one token per line on the right.
Rendering is a pure function of (template, profile, name).
"""
import io
import threading
from typing import List, Optional, Tuple
from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError
from backend.common.errors import NotFoundError
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)

BADGE_SIZE = (296, 128)
PROFILE_BOX = (16, 16, 128 - 32, 128 - 32)  # x, y, width, height
TEXT_X = 124
TEXT_BASELINE = 54
LINE_HEIGHT = 40
FONT_SIZE = 34
TEXT_COLOR = (0, 0, 0)
PROFILE_RESAMPLE = Image.Resampling.BICUBIC


def badge_text_layout(name: str) -> List[Tuple[str, Tuple[int, int]]]:
    """Each name token with the (x, baseline) it is drawn at."""
    return [
        (part, (TEXT_X, TEXT_BASELINE + index * LINE_HEIGHT))
        for index, part in enumerate(name.split())
    ]


class BadgeComposer:
    def __init__(self, template_path: str, font_path: Optional[str] = None):
        self.template_path = template_path
        self.font_path = font_path
        self._lock = threading.Lock()
        self._template: Optional[Image.Image] = None
        self._font = None

    def _get_template(self) -> Image.Image:
        with self._lock:
            if self._template is None:
                with Image.open(self.template_path) as template:
                    self._template = template.convert('RGB').resize(BADGE_SIZE)
                logger.info("Badge template loaded", extra={"path": self.template_path})
            return self._template

    def _get_font(self):
        with self._lock:
            if self._font is None:
                self._font = self._load_font()
            return self._font

    def _load_font(self):
        candidates = [self.font_path] if self.font_path else []
        candidates.append("DejaVuSans.ttf")
        for candidate in candidates:
            try:
                return ImageFont.truetype(candidate, FONT_SIZE)
            except OSError:
                logger.debug("Badge font not loadable", extra={"font": candidate})
        return ImageFont.load_default(size=FONT_SIZE)

    def compose(self, profile_png: bytes, name: str) -> bytes:
        """
        Render the badge as BMP bytes.
        Raises NotFoundError when the profile picture cannot be decoded.
        """
        try:
            with Image.open(io.BytesIO(profile_png)) as source:
                profile = source.convert('RGB')
        except (UnidentifiedImageError, OSError) as e:
            raise NotFoundError(f"Profile image unreadable: {e}") from e

        badge = Image.new('RGB', BADGE_SIZE)
        badge.paste(self._get_template(), (0, 0))

        x, y, width, height = PROFILE_BOX
        badge.paste(profile.resize((width, height), PROFILE_RESAMPLE), (x, y))

        font = self._get_font()
        draw = ImageDraw.Draw(badge)
        anchor = 'ls' if isinstance(font, ImageFont.FreeTypeFont) else None
        for part, (text_x, baseline) in badge_text_layout(name):
            if anchor:
                draw.text((text_x, baseline), part, fill=TEXT_COLOR, font=font, anchor=anchor)
            else:
                # Bitmap fonts only support top-left anchoring
                draw.text((text_x, baseline - FONT_SIZE), part, fill=TEXT_COLOR, font=font)

        buffer = io.BytesIO()
        badge.save(buffer, format='BMP')
        return buffer.getvalue()
