# chuk_ai_credit_manager/session_store.py
"""
SessionStore - the collection of chat threads and the active selection.

The store is never empty when observed: if it ever finds itself without
sessions (first use, corrupt load) it synthesizes a welcome session.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from chuk_ai_credit_manager.exceptions import LastSessionError, NotFound
from chuk_ai_credit_manager.models.chat_session import DEFAULT_SESSION_TITLE, ChatSession
from chuk_ai_credit_manager.models.message import ChatMessage, MessageRole
from chuk_ai_credit_manager.observable import Observable

logger = logging.getLogger(__name__)

WELCOME_SESSION_TITLE = "Getting started"


def welcome_session(user_name: str | None = None) -> ChatSession:
    """The default thread synthesized for an empty store."""
    greeting = f"Welcome, {user_name}!" if user_name else "Welcome!"
    message = ChatMessage.assistant(
        f"{greeting} I can help brainstorm, summarise research, write copy, and code review. "
        "Let me know what you need."
    )
    return ChatSession(
        title=WELCOME_SESSION_TITLE,
        created_at=message.timestamp,
        last_activity=message.timestamp,
        messages=[message],
    )


class SessionStore(Observable):
    """Ordered collection of chat sessions with one active session."""

    def __init__(
        self,
        sessions: Iterable[ChatSession] | None = None,
        active_id: str | None = None,
        user_name: str | None = None,
    ):
        super().__init__()
        self._sessions: dict[str, ChatSession] = {}
        for session in sessions or []:
            self._sessions[session.id] = session
        self._user_name = user_name
        self._active_id = active_id if active_id in self._sessions else None

    # --- Queries ---

    def __len__(self) -> int:
        self._heal()
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    @property
    def active_id(self) -> str:
        self._heal()
        if self._active_id not in self._sessions:
            self._active_id = self.list()[0].id
        return self._active_id

    @property
    def active(self) -> ChatSession:
        return self._sessions[self.active_id]

    def list(self) -> list[ChatSession]:
        """Sessions pinned-first, then most recently active first."""
        self._heal()
        return sorted(
            self._sessions.values(),
            key=lambda s: (not s.pinned, -s.last_activity.timestamp()),
        )

    def get(self, session_id: str) -> ChatSession:
        self._heal()
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFound("session", session_id)
        return session

    def find(self, session_id: str) -> ChatSession | None:
        """Like get() but returns None for a missing session."""
        return self._sessions.get(session_id)

    def get_message(self, session_id: str, message_id: str) -> ChatMessage:
        message = self.get(session_id).get_message(message_id)
        if message is None:
            raise NotFound("message", message_id)
        return message

    def last_user_message_before(self, session_id: str, message_id: str) -> ChatMessage:
        """
        Nearest user message at or before ``message_id``.

        Messages after the target are ignored. Raises NotFound when the
        target is missing or no user message precedes it.
        """
        session = self.get(session_id)
        index = session.find_index(message_id)
        if index is None:
            raise NotFound("message", message_id)
        for message in reversed(session.messages[: index + 1]):
            if message.role == MessageRole.USER:
                return message
        raise NotFound("user message", detail="No user prompt available to regenerate this reply.")

    def search(self, term: str = "", pinned_only: bool = False) -> list[ChatSession]:
        """Sessions whose title or any message contains ``term``, in list() order."""
        needle = term.strip().lower()
        results = []
        for session in self.list():
            if pinned_only and not session.pinned:
                continue
            if needle and needle not in session.title.lower() and not any(
                needle in m.content.lower() for m in session.messages
            ):
                continue
            results.append(session)
        return results

    def export_transcript(self, session_id: str) -> str:
        """Plain-text transcript of a session."""
        blocks = []
        for message in self.get(session_id).messages:
            speaker = "User" if message.role == MessageRole.USER else "Assistant"
            blocks.append(f"{speaker} ({message.timestamp.strftime('%H:%M')}):\n{message.content}\n")
        return "\n".join(blocks)

    # --- Mutations ---

    def create(
        self,
        seed_messages: Iterable[ChatMessage] | None = None,
        title: str = DEFAULT_SESSION_TITLE,
    ) -> ChatSession:
        """Create a session and make it active."""
        session = ChatSession(title=title, messages=list(seed_messages or []))
        if session.messages:
            session.touch(max(m.timestamp for m in session.messages))
        self._sessions[session.id] = session
        self._active_id = session.id
        logger.debug(f"Created session {session.id}")
        self._notify()
        return session

    def set_active(self, session_id: str) -> ChatSession:
        session = self.get(session_id)
        self._active_id = session.id
        self._notify()
        return session

    def delete(self, session_id: str) -> None:
        """Remove a session; the last remaining one cannot be deleted."""
        if session_id not in self._sessions:
            raise NotFound("session", session_id)
        if len(self._sessions) == 1:
            raise LastSessionError(session_id)

        del self._sessions[session_id]
        if self._active_id == session_id:
            self._active_id = self.list()[0].id
        logger.debug(f"Deleted session {session_id}")
        self._notify()

    def toggle_pin(self, session_id: str) -> ChatSession:
        session = self.get(session_id)
        session.pinned = not session.pinned
        session.touch()
        self._notify()
        return session

    def rename(self, session_id: str, title: str) -> ChatSession:
        title = title.strip()
        if not title:
            raise ValueError("session title cannot be blank")
        session = self.get(session_id)
        session.title = title
        session.touch()
        self._notify()
        return session

    def append_message(self, session_id: str, message: ChatMessage) -> ChatMessage:
        session = self.get(session_id)
        session.messages.append(message)
        session.touch(message.timestamp)
        self._notify()
        return message

    def replace_message(self, session_id: str, message: ChatMessage) -> ChatMessage:
        """Swap in an updated copy of an existing message, keeping its position."""
        session = self.get(session_id)
        index = session.find_index(message.id)
        if index is None:
            raise NotFound("message", message.id)
        session.messages[index] = message
        session.touch(message.regenerated_at or datetime.now(UTC))
        self._notify()
        return message

    def replace_all(self, sessions: Iterable[ChatSession], active_id: str | None = None, notify: bool = True) -> None:
        """Replace every session at once (reset or external re-ingest)."""
        self._sessions = {s.id: s for s in sessions}
        if active_id is not None:
            self._active_id = active_id
        if self._active_id not in self._sessions:
            self._active_id = None
        if notify:
            self._notify()

    def _heal(self) -> None:
        if self._sessions:
            return
        session = welcome_session(self._user_name)
        self._sessions[session.id] = session
        self._active_id = session.id
        logger.info(f"Session store was empty; created default session {session.id}")
        self._notify()
