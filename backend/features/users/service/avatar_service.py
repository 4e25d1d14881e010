import io
import hashlib
from PIL import Image, ImageDraw, ImageFont
from backend.common.base.base_service import BaseService
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)

PORTRAIT_SIZE = 256


class AvatarService(BaseService):
    """
    Renders the profile portrait for a newly created user: the name's initial
    over a two-tone diagonal pattern whose colours are hashed from the seed.
    """

    def _load_font(self, size: int):
        try:
            return ImageFont.truetype("DejaVuSans-Bold.ttf", size)
        except OSError:
            return ImageFont.load_default(size=size)

    def render_portrait(self, seed: str, name: str) -> bytes:
        digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()
        primary = f"#{digest[:6]}"
        secondary = f"#{digest[6:12]}"

        size = PORTRAIT_SIZE
        image = Image.new("RGB", (size, size), primary)
        draw = ImageDraw.Draw(image)
        for i in range(0, 2 * size, 16):
            draw.line([(i, 0), (0, i)], fill=secondary, width=3)

        letter = name.strip()[:1].upper() or "?"
        font = self._load_font(size // 2)
        left, top, right, bottom = draw.textbbox((0, 0), letter, font=font)
        position = ((size - (right - left)) / 2 - left, (size - (bottom - top)) / 2 - top)
        draw.text(position, letter, fill="white", font=font)

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        logger.debug("Profile portrait rendered", extra={"letter": letter})
        return buffer.getvalue()
