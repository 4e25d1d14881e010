import io

from PIL import Image

from backend.services.ai_handlers.content_generator import ContentGenerator

AUTH_TOKEN = "test-admin-token"
AUTH_HEADERS = {"Authorization": f"Bearer {AUTH_TOKEN}"}

ADA_UUID = "0b6c3a52-3f0e-4a53-9d7c-6c1f0f6d2a11"
GRACE_UUID = "7f1d2c9e-8b44-4c1b-a2a5-0e3d1c5b9f22"


def make_png(color=(200, 40, 40), size=(64, 64)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeContentGenerator(ContentGenerator):
    def __init__(self, name="Ada Lovelace"):
        self.name = name
        self.profile_png = make_png((10, 120, 200))

    def create_user_name(self) -> str:
        return self.name

    def create_user_description(self, name: str) -> str:
        return f"{name} writes the first program."

    def create_user_chat_phrase(self, name: str, description: str) -> str:
        return "Hello, engine!"

    def create_user_profile_image(self, uuid: str, name: str, description: str) -> bytes:
        return self.profile_png
