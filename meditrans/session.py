"""
In-memory state for the active conversation.

The store owns the durable copies; everything held here is a mirror that is
rebuilt from the store on load and after each mutation.
"""

import hashlib
import logging
from typing import Callable, List, Optional

from meditrans.ai import SUMMARY_FAILED
from meditrans.models import AUDIO_PLACEHOLDER, Conversation, Message, languages_for
from meditrans.storage import ConversationStore

logger = logging.getLogger(__name__)


def filter_conversations(conversations: List[Conversation], query: str) -> List[Conversation]:
    """Match on id (exact substring) or summary / last message (case-insensitive)."""
    needle = query.lower()
    return [
        c for c in conversations
        if query in c.id
        or (c.summary and needle in c.summary.lower())
        or (c.last_message and needle in c.last_message.lower())
    ]


def build_transcript(messages: List[Message]) -> str:
    return "\n".join(f"{m.role}: {m.original_text}" for m in messages)


class ConversationSession:
    def __init__(
        self,
        store: ConversationStore,
        translator,
        summarizer,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.store = store
        self.translator = translator
        self.summarizer = summarizer
        self.notify = notify or (lambda text: logger.warning("%s", text))

        self.conversations: List[Conversation] = []
        self.active: Optional[Conversation] = None
        self.messages: List[Message] = []
        self.summary = ""
        self.is_sending = False
        self.is_generating_summary = False
        self._last_audio = {}  # role -> digest of the last recording sent

    def start(self) -> None:
        """Load history and open the most recent conversation, or a new one."""
        self.conversations = self.store.list_conversations()
        if self.conversations:
            self.select_conversation(self.conversations[0])
        else:
            self.new_conversation()

    def select_conversation(self, conv: Conversation) -> None:
        # callers may hold a stale copy; the stored record wins
        stored = next((c for c in self.store.list_conversations() if c.id == conv.id), conv)
        self.active = stored
        self.messages = self.store.list_messages(stored.id)
        self.summary = stored.summary or ""

    def new_conversation(self) -> Conversation:
        conv = self.store.create_conversation()
        self.conversations = [conv] + self.conversations
        self.select_conversation(conv)
        return conv

    def search(self, query: str) -> List[Conversation]:
        return filter_conversations(self.conversations, query)

    def send_message(self, text: str, role: str, audio_data: Optional[str] = None) -> Optional[Message]:
        """
        Translate ``text`` and store it in the active conversation.

        The message is stored even when translation fails; the error text
        takes the place of the translation.
        """
        if self.active is None:
            return None

        source_lang, target_lang = languages_for(role)
        self.is_sending = True
        try:
            result = self.translator.translate(text, target_lang)
            translated_text = result.get("translatedText") or "Error: Empty translation"

            msg = self.store.append_message(
                self.active.id,
                role=role,
                original_text=text,
                translated_text=translated_text,
                original_lang=source_lang,
                target_lang=target_lang,
                audio_data=audio_data,
            )
        finally:
            self.is_sending = False

        self.messages.append(msg)
        self._refresh_conversations()
        return msg

    def send_audio(self, role: str, audio_data: str) -> Optional[Message]:
        """Send a recording; the same recording repeated for a role is ignored."""
        digest = hashlib.sha1(audio_data.encode("utf-8")).hexdigest()
        if self._last_audio.get(role) == digest:
            return None
        msg = self.send_message(AUDIO_PLACEHOLDER, role, audio_data)
        if msg is not None:
            self._last_audio[role] = digest
        return msg

    def build_transcript(self) -> str:
        return build_transcript(self.messages)

    def generate_summary(self) -> Optional[str]:
        """Summarize the active conversation; a failed attempt keeps the old summary."""
        if self.active is None or not self.messages:
            return None

        self.is_generating_summary = True
        try:
            summary = self.summarizer.summarize(self.build_transcript())
        finally:
            self.is_generating_summary = False

        if not summary or summary == SUMMARY_FAILED:
            self.notify("Failed to generate summary")
            return None

        self.store.update_conversation_summary(self.active.id, summary)
        self.summary = summary
        self._refresh_conversations()
        return summary

    def _refresh_conversations(self) -> None:
        self.conversations = self.store.list_conversations()
        # keep the active record in step with the reloaded list
        for conv in self.conversations:
            if self.active is not None and conv.id == self.active.id:
                self.active = conv
                break
