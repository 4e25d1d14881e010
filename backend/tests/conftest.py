import os
import tempfile

# Logging and rate limiting are configured at import time
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="zekompanion-test-logs-"))
os.environ["ENVIRONMENT"] = "test"
os.environ["RATELIMIT_ENABLED"] = "false"
os.environ.pop("GOOGLE_APPLICATION_CREDENTIALS", None)
for _var in ("FIREBASE_PROJECT_ID", "FIREBASE_CLIENT_EMAIL", "FIREBASE_PRIVATE_KEY"):
    os.environ.pop(_var, None)

import pytest

from backend.config.env_config import DEFAULT_BADGE_TEMPLATE
from backend.features.users.domain.artifact import original_key
from backend.features.users.domain.user_entity import User
from backend.features.users.repository.image_store import InMemoryImageStore
from backend.features.users.repository.user_repository import InMemoryUserRepository
from backend.features.users.service.badge_composer import BadgeComposer
from backend.features.users.service.image_service import ImageService
from backend.features.users.service.user_service import UserService
from backend.tests.helpers import ADA_UUID, AUTH_TOKEN, GRACE_UUID, FakeContentGenerator, make_png


@pytest.fixture
def ada():
    return User(uuid=ADA_UUID, name="Ada Lovelace", description="Analyst", profile_b64="QUJD", chat_phrase="Hi")


@pytest.fixture
def grace():
    return User(uuid=GRACE_UUID, name="Grace Brewster Hopper", description="Admiral", chat_phrase="Bug!")


@pytest.fixture
def user_repository(ada, grace):
    return InMemoryUserRepository([ada, grace])


@pytest.fixture
def image_store(ada, grace):
    store = InMemoryImageStore()
    store.put_atomic(original_key(ada.uuid), make_png((200, 40, 40)))
    store.put_atomic(original_key(grace.uuid), make_png((40, 200, 40), size=(80, 40)))
    store.writes = 0
    return store


@pytest.fixture
def badge_composer():
    return BadgeComposer(str(DEFAULT_BADGE_TEMPLATE))


@pytest.fixture
def image_service(image_store, badge_composer):
    return ImageService(image_store, badge_composer)


@pytest.fixture
def content_generator():
    return FakeContentGenerator()


@pytest.fixture
def user_service(user_repository, image_service, content_generator):
    return UserService(user_repository, image_service, content_generator)


@pytest.fixture
def app_config(tmp_path):
    return {
        "profiles_dir": str(tmp_path),
        "badge_template_path": str(DEFAULT_BADGE_TEMPLATE),
        "badge_font_path": None,
        "user_store": "file",
        "users_file": str(tmp_path / "users.json"),
        "auth_token": AUTH_TOKEN,
        "groq_api_keys": [],
        "groq_model": "test-model",
        "debug_mode": False,
    }


@pytest.fixture
def client(app_config, user_service):
    from backend.app import create_app

    app = create_app(config=app_config, user_service=user_service)
    app.config["TESTING"] = True
    return app.test_client()
