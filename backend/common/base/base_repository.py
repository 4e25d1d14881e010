"""
Base Repository Class.
Provides abstract interface for data access.
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, List

T = TypeVar('T')

class BaseRepository(ABC, Generic[T]):
    """
    Abstract base class for all repositories.
    """

    @abstractmethod
    def find_by_id(self, id: str) -> Optional[T]:
        pass

    @abstractmethod
    def find_all(self) -> List[T]:
        pass

    @abstractmethod
    def save(self, entity: T) -> Optional[str]:
        """Persist a new entity; returns its id, or None when the store rejects it."""

    @abstractmethod
    def update(self, entity: T) -> bool:
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        pass
