from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List

from models.schemas import Stay


class StayStore(ABC):
    """Persistence collaborator: stay records keyed by id, owned by a user."""

    @abstractmethod
    def list_stays(self, user_id: str) -> List[Stay]:
        ...

    @abstractmethod
    def save_stays(self, user_id: str, stays: List[Stay]) -> None:
        ...

    @abstractmethod
    def delete_stay(self, user_id: str, stay_id: str) -> bool:
        ...


class InMemoryStayStore(StayStore):
    """
    Simple in-process store. Each user's stays are kept in insertion order and
    handed out as a fresh list so callers never share the stored one.
    """

    def __init__(self) -> None:
        self._stays: Dict[str, Dict[str, Stay]] = {}

    def list_stays(self, user_id: str) -> List[Stay]:
        return list(self._stays.get(user_id, {}).values())

    def save_stays(self, user_id: str, stays: List[Stay]) -> None:
        self._stays[user_id] = {stay.id: stay for stay in stays}

    def delete_stay(self, user_id: str, stay_id: str) -> bool:
        stays = self._stays.get(user_id, {})
        if stay_id not in stays:
            return False
        del stays[stay_id]
        return True
