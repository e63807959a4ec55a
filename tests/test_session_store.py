# tests/test_session_store.py
"""Tests for SessionStore ordering, lifecycle and self-healing."""

from datetime import UTC, datetime, timedelta

import pytest

from chuk_ai_credit_manager.exceptions import LastSessionError, NotFound
from chuk_ai_credit_manager.models.chat_session import DEFAULT_SESSION_TITLE, ChatSession
from chuk_ai_credit_manager.models.message import ChatMessage, MessageRole
from chuk_ai_credit_manager.session_store import WELCOME_SESSION_TITLE, SessionStore


def _at(minutes: int) -> datetime:
    return datetime(2024, 1, 1, 12, 0, tzinfo=UTC) + timedelta(minutes=minutes)


class TestSelfHealing:
    def test_empty_store_synthesizes_welcome_session(self):
        store = SessionStore()
        sessions = store.list()
        assert len(sessions) == 1
        assert sessions[0].title == WELCOME_SESSION_TITLE
        assert sessions[0].messages[0].role == MessageRole.ASSISTANT
        assert store.active_id == sessions[0].id

    def test_welcome_uses_user_name(self):
        store = SessionStore(user_name="Sam")
        assert "Welcome, Sam!" in store.active.messages[0].content

    def test_heal_notifies(self):
        store = SessionStore()
        seen = []
        store.subscribe(lambda s: seen.append(True))
        store.list()
        assert seen == [True]


class TestCreateAndList:
    def test_create_becomes_active(self, store):
        session = store.create()
        assert store.active_id == session.id
        assert session.title == DEFAULT_SESSION_TITLE

    def test_create_with_seed_messages(self, store):
        seed = [ChatMessage.user("hi")]
        session = store.create(seed_messages=seed, title="Seeded")
        assert session.messages == seed
        assert session.title == "Seeded"

    def test_pinned_first_then_recent(self, store):
        a = store.create(title="A")
        b = store.create(title="B")
        store.toggle_pin(b.id)
        assert [s.id for s in store.list()] == [b.id, a.id]

    def test_pin_overrides_recency(self, store):
        a = store.create(title="A")
        b = store.create(title="B")
        store.append_message(b.id, ChatMessage.user("newer"))
        store.toggle_pin(a.id)
        assert [s.id for s in store.list()] == [a.id, b.id]

    def test_recent_activity_first(self):
        old = ChatSession(title="old", last_activity=_at(0))
        new = ChatSession(title="new", last_activity=_at(5))
        store = SessionStore([old, new])
        assert [s.title for s in store.list()] == ["new", "old"]


class TestDelete:
    def test_cannot_delete_last_session(self, store):
        only = store.active
        with pytest.raises(LastSessionError):
            store.delete(only.id)
        assert len(store) == 1

    def test_delete_active_falls_to_next_listed(self):
        a = ChatSession(title="A", last_activity=_at(0))
        b = ChatSession(title="B", last_activity=_at(10))
        c = ChatSession(title="C", last_activity=_at(5))
        store = SessionStore([a, b, c], active_id=b.id)
        store.delete(b.id)
        assert store.active_id == c.id
        assert b.id not in store

    def test_delete_inactive_keeps_active(self, store):
        a = store.create(title="A")
        b = store.create(title="B")
        store.delete(a.id)
        assert store.active_id == b.id

    def test_delete_missing(self, store):
        store.create()
        store.create()
        with pytest.raises(NotFound):
            store.delete("chat-missing")

    def test_count_never_drops_below_one(self, store):
        ids = [store.create().id for _ in range(3)]
        for session_id in ids:
            try:
                store.delete(session_id)
            except LastSessionError:
                pass
            assert len(store) >= 1


class TestMutations:
    def test_append_touches_last_activity(self):
        session = ChatSession(last_activity=_at(0))
        store = SessionStore([session])
        message = ChatMessage(role=MessageRole.USER, content="hi", timestamp=_at(3))
        store.append_message(session.id, message)
        assert session.last_activity == _at(3)

    def test_last_activity_never_moves_backwards(self):
        session = ChatSession(last_activity=_at(10))
        store = SessionStore([session])
        store.append_message(session.id, ChatMessage(role=MessageRole.USER, content="x", timestamp=_at(1)))
        assert session.last_activity == _at(10)

    def test_toggle_pin_touches(self):
        session = ChatSession(last_activity=_at(0))
        store = SessionStore([session])
        store.toggle_pin(session.id)
        assert session.pinned is True
        assert session.last_activity > _at(0)
        store.toggle_pin(session.id)
        assert session.pinned is False

    def test_rename(self, store):
        session = store.create()
        store.rename(session.id, "  Launch plan  ")
        assert session.title == "Launch plan"

    def test_rename_blank_rejected(self, store):
        session = store.create()
        with pytest.raises(ValueError):
            store.rename(session.id, "   ")

    def test_replace_message_keeps_position(self, store):
        session = store.create()
        first = store.append_message(session.id, ChatMessage.user("q"))
        second = store.append_message(session.id, ChatMessage.assistant("a"))
        store.replace_message(session.id, second.model_copy(update={"content": "b"}))
        assert [m.id for m in session.messages] == [first.id, second.id]
        assert session.messages[1].content == "b"

    def test_mutations_on_missing_session(self, store):
        with pytest.raises(NotFound):
            store.append_message("chat-missing", ChatMessage.user("x"))
        with pytest.raises(NotFound):
            store.toggle_pin("chat-missing")

    def test_set_active(self, store):
        a = store.create()
        store.create()
        store.set_active(a.id)
        assert store.active_id == a.id


class TestLastUserMessageBefore:
    def test_finds_nearest_prior_user_message(self, store):
        session = store.create()
        store.append_message(session.id, ChatMessage.user("first"))
        second = store.append_message(session.id, ChatMessage.user("second"))
        reply = store.append_message(session.id, ChatMessage.assistant("answer"))
        store.append_message(session.id, ChatMessage.user("later"))
        assert store.last_user_message_before(session.id, reply.id).id == second.id

    def test_skips_system_messages(self, store):
        session = store.create()
        prompt = store.append_message(session.id, ChatMessage.user("q"))
        store.append_message(session.id, ChatMessage.system("oops"))
        reply = store.append_message(session.id, ChatMessage.assistant("a"))
        assert store.last_user_message_before(session.id, reply.id).id == prompt.id

    def test_no_prior_user_message(self, store):
        session = store.create()
        reply = store.append_message(session.id, ChatMessage.assistant("hello"))
        store.append_message(session.id, ChatMessage.user("after"))
        with pytest.raises(NotFound):
            store.last_user_message_before(session.id, reply.id)

    def test_unknown_message(self, store):
        session = store.create()
        with pytest.raises(NotFound):
            store.last_user_message_before(session.id, "msg-missing")


class TestSearchAndExport:
    def test_search_title_and_content(self, store):
        a = store.create(title="Roadmap")
        b = store.create(title="Other")
        store.append_message(b.id, ChatMessage.user("talk about the ROADMAP"))
        store.create(title="Unrelated")
        assert {s.id for s in store.search("roadmap")} == {a.id, b.id}

    def test_search_pinned_only(self, store):
        a = store.create(title="A")
        store.create(title="B")
        store.toggle_pin(a.id)
        assert [s.id for s in store.search(pinned_only=True)] == [a.id]

    def test_export_transcript(self):
        session = ChatSession(
            messages=[
                ChatMessage(role=MessageRole.USER, content="Hi", timestamp=_at(0)),
                ChatMessage(role=MessageRole.ASSISTANT, content="Hello", timestamp=_at(1)),
            ]
        )
        store = SessionStore([session])
        assert store.export_transcript(session.id) == "User (12:00):\nHi\n\nAssistant (12:01):\nHello\n"
