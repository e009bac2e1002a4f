"""
Local persistence for conversations and messages.

Two logical collections live in a key-value backend as JSON strings:
- the conversation list under ``CONVERSATIONS_KEY``
- one message list per conversation under ``MESSAGES_KEY_PREFIX + id``

Every call re-reads the whole collection, mutates it and writes it back.
"""

import json
import logging
import os
import tempfile
from typing import Dict, List, Optional
from uuid import uuid4

from meditrans.models import Conversation, Message, now_ms

logger = logging.getLogger(__name__)

CONVERSATIONS_KEY = "healthcare_app_conversations"
MESSAGES_KEY_PREFIX = "healthcare_app_messages_"


class MemoryBackend:
    """Dict-backed key-value storage."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileBackend:
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, self._path(key))
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class ConversationStore:
    def __init__(self, backend):
        self.backend = backend

    # -----------------------------
    # Raw collection access
    # -----------------------------
    def _read_list(self, key: str) -> List[dict]:
        raw = self.backend.get(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable data under %s", key)
            return []
        if not isinstance(data, list):
            logger.warning("Expected a list under %s, got %s", key, type(data).__name__)
            return []
        return data

    def _write_list(self, key: str, items: List[dict]) -> None:
        self.backend.set(key, json.dumps(items))

    def _load(self, key: str, record_cls):
        records = []
        for index, item in enumerate(self._read_list(key)):
            try:
                records.append(record_cls.from_dict(item))
            except (KeyError, TypeError, AttributeError):
                logger.warning("Skipping malformed record %d under %s", index, key)
        return records

    # -----------------------------
    # Conversations
    # -----------------------------
    def list_conversations(self) -> List[Conversation]:
        """Return conversations, most recently touched first."""
        return self._load(CONVERSATIONS_KEY, Conversation)

    def _save_conversations(self, conversations: List[Conversation]) -> None:
        self._write_list(CONVERSATIONS_KEY, [c.to_dict() for c in conversations])

    def create_conversation(self) -> Conversation:
        conversations = self.list_conversations()
        conv = Conversation(id=str(uuid4()), created_at=now_ms())
        conversations.insert(0, conv)
        self._save_conversations(conversations)
        return conv

    def update_conversation_summary(self, conversation_id: str, summary: str) -> None:
        """Overwrite the stored summary. Unknown ids are ignored."""
        conversations = self.list_conversations()
        for conv in conversations:
            if conv.id == conversation_id:
                conv.summary = summary
                self._save_conversations(conversations)
                return

    # -----------------------------
    # Messages
    # -----------------------------
    def list_messages(self, conversation_id: str) -> List[Message]:
        """Return messages oldest -> newest."""
        return self._load(MESSAGES_KEY_PREFIX + conversation_id, Message)

    def append_message(
        self,
        conversation_id: str,
        role: str,
        original_text: str,
        translated_text: str,
        original_lang: str,
        target_lang: str,
        audio_data: Optional[str] = None,
    ) -> Message:
        """
        Append a message and bump its conversation to the front of the list.

        The message list is written before the conversation list, so a failed
        second write can only leave ``lastMessage`` stale, never lose a message.
        """
        messages = self.list_messages(conversation_id)
        msg = Message(
            id=str(uuid4()),
            conversation_id=conversation_id,
            role=role,
            original_text=original_text,
            translated_text=translated_text,
            original_lang=original_lang,
            target_lang=target_lang,
            created_at=now_ms(),
            audio_data=audio_data,
        )
        messages.append(msg)
        self._write_list(MESSAGES_KEY_PREFIX + conversation_id, [m.to_dict() for m in messages])

        conversations = self.list_conversations()
        for index, conv in enumerate(conversations):
            if conv.id == conversation_id:
                conv.last_message = original_text
                conversations.insert(0, conversations.pop(index))
                self._save_conversations(conversations)
                break

        return msg
