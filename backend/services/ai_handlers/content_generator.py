"""
Content generation for new users.

Produces the name, description, chat phrase and profile portrait of a newly
created companion user. Text comes from the Groq chat completions API,
rotating round-robin over the configured keys; the portrait is rendered
locally.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
from groq import Groq
from backend.common.errors import ContentGenerationError
from backend.features.users.service.avatar_service import AvatarService
from backend.services.system.logger_service import get_logger, log_error

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You write short, friendly content for fictional conference companions. "
    "Answer with the requested text only: no quotes, no explanations, no markdown."
)


class ContentGenerator(ABC):

    @abstractmethod
    def create_user_name(self) -> str:
        pass

    @abstractmethod
    def create_user_description(self, name: str) -> str:
        pass

    @abstractmethod
    def create_user_chat_phrase(self, name: str, description: str) -> str:
        pass

    @abstractmethod
    def create_user_profile_image(self, uuid: str, name: str, description: str) -> bytes:
        """PNG bytes of the user's profile portrait."""


class GroqContentGenerator(ContentGenerator):
    def __init__(self, api_keys: List[str], model: str, avatar_service: Optional[AvatarService] = None):
        self.model = model
        self.avatar_service = avatar_service or AvatarService()
        self.clients = []
        self.current_key_index = 0

        for i, api_key in enumerate(api_keys):
            try:
                self.clients.append(Groq(api_key=api_key))
                logger.info(f"Groq client {i+1} initialized", extra={"key_id": f"key_{i+1}"})
            except Exception as e:
                log_error(logger, e, {"context": f"Failed to initialize Groq client {i+1}"})

    def is_available(self) -> bool:
        return len(self.clients) > 0

    def _next_client(self) -> Groq:
        if not self.clients:
            raise ContentGenerationError("No Groq client configured")
        client = self.clients[self.current_key_index % len(self.clients)]
        self.current_key_index += 1
        return client

    def _complete(self, prompt: str, max_tokens: int) -> str:
        client = self._next_client()
        try:
            completion = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.9,
                max_tokens=max_tokens,
            )
        except Exception as e:
            log_error(logger, e, {"context": "Groq API exception", "model": self.model})
            raise ContentGenerationError(f"Groq request failed: {e}") from e

        text = (completion.choices[0].message.content or "").strip().strip('"').strip()
        if not text:
            raise ContentGenerationError("Groq returned an empty response")
        return text

    def create_user_name(self) -> str:
        name = self._complete("Invent a first and last name for a new companion.", max_tokens=16)
        return " ".join(name.split())

    def create_user_description(self, name: str) -> str:
        return self._complete(f"Describe {name} in two sentences.", max_tokens=160)

    def create_user_chat_phrase(self, name: str, description: str) -> str:
        return self._complete(
            f"{name} is described as: {description}\nWrite the one-line greeting {name} uses in chat.",
            max_tokens=60,
        )

    def create_user_profile_image(self, uuid: str, name: str, description: str) -> bytes:
        return self.avatar_service.render_portrait(uuid, name)
