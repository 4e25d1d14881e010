"""
User Domain Entity.
"""
from dataclasses import dataclass, replace
from typing import Optional

@dataclass(frozen=True)
class User:
    uuid: str
    name: str
    description: str = ""
    profile_b64: Optional[str] = None
    chat_phrase: str = ""

    def with_uuid(self, uuid: str) -> "User":
        return replace(self, uuid=uuid)

    @property
    def name_lines(self):
        """Badge text lines: one per whitespace-separated token of the name."""
        return self.name.split()
