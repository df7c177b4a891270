"""In-memory registry of Telegram chats the dashboard can broadcast to."""
from __future__ import annotations

import threading
import uuid
from dataclasses import asdict, dataclass, replace
from typing import Dict, Iterable, List, Optional

from .config import setup_logger
from .validators import validate_chat_id, validate_chat_name

logger = setup_logger(__name__)

DEFAULT_CHAT_NAME = "Chat Principal"


@dataclass(frozen=True)
class ChatDestination:
    id: str
    name: str
    chat_id: str
    is_active: bool = True

    def to_dict(self) -> dict:
        return asdict(self)


class ChatRegistry:
    """Thread-safe list of chat destinations; lives only as long as the process."""

    def __init__(self, chat_ids: Iterable[str] = ()) -> None:
        self._chats: Dict[str, ChatDestination] = {}
        self._lock = threading.Lock()
        for index, chat_id in enumerate(chat_ids):
            name = DEFAULT_CHAT_NAME if index == 0 else f"Chat {index + 1}"
            self.add(name, chat_id)

    def list(self) -> List[ChatDestination]:
        with self._lock:
            return list(self._chats.values())

    def get(self, entry_id: str) -> Optional[ChatDestination]:
        with self._lock:
            return self._chats.get(entry_id)

    def add(self, name: str, chat_id: str) -> ChatDestination:
        entry = ChatDestination(
            id=uuid.uuid4().hex[:12],
            name=validate_chat_name(name),
            chat_id=validate_chat_id(chat_id),
        )
        with self._lock:
            self._chats[entry.id] = entry
        logger.info("chat_added: %s (%s)", entry.name, entry.chat_id)
        return entry

    def remove(self, entry_id: str) -> bool:
        with self._lock:
            removed = self._chats.pop(entry_id, None)
        if removed is not None:
            logger.info("chat_removed: %s", removed.name)
        return removed is not None

    def toggle(self, entry_id: str) -> Optional[ChatDestination]:
        with self._lock:
            entry = self._chats.get(entry_id)
            if entry is None:
                return None
            entry = replace(entry, is_active=not entry.is_active)
            self._chats[entry_id] = entry
        return entry

    def active(self, entry_ids: Optional[Iterable[str]] = None) -> List[ChatDestination]:
        """Active chats, optionally limited to the given registry ids."""
        wanted = set(entry_ids) if entry_ids is not None else None
        return [
            chat
            for chat in self.list()
            if chat.is_active and (wanted is None or chat.id in wanted)
        ]
