"""Unit tests for the in-memory session store."""

from unittest.mock import MagicMock

import pytest

from backend.api.services.session_store import SessionStore
from backend.core.errors import ConfigurationError


def fake_orchestrator(busy=False, has_story=True):
    orchestrator = MagicMock()
    orchestrator.is_busy = busy
    orchestrator.story = MagicMock() if has_story else None
    return orchestrator


class TestSessionStore:
    def test_create_and_get(self):
        store = SessionStore(lambda session_id: fake_orchestrator())

        session_id, orchestrator = store.create()

        assert store.get(session_id) is orchestrator
        assert len(store) == 1

    def test_sessions_are_isolated(self):
        store = SessionStore(lambda session_id: fake_orchestrator())

        first_id, first = store.create()
        second_id, second = store.create()

        assert first_id != second_id
        assert first is not second

    def test_delete(self):
        store = SessionStore(lambda session_id: fake_orchestrator())
        session_id, _ = store.create()

        assert store.delete(session_id) is True
        assert store.get(session_id) is None
        assert store.delete(session_id) is False

    def test_factory_error_registers_nothing(self):
        def failing_factory(session_id):
            raise ConfigurationError("no key")

        store = SessionStore(failing_factory)

        with pytest.raises(ConfigurationError):
            store.create()
        assert len(store) == 0

    def test_evicts_least_recently_used_idle_session_at_limit(self):
        orchestrators = iter([fake_orchestrator(busy=True), fake_orchestrator(), fake_orchestrator()])
        store = SessionStore(lambda session_id: next(orchestrators), max_sessions=2)
        busy_id, _ = store.create()
        idle_id, _ = store.create()

        newest_id, _ = store.create()

        assert store.get(busy_id) is not None
        assert store.get(idle_id) is None
        assert store.get(newest_id) is not None

    def test_reading_a_session_protects_it_from_eviction(self):
        store = SessionStore(lambda session_id: fake_orchestrator(), max_sessions=2)
        first_id, _ = store.create()
        second_id, _ = store.create()

        store.get(first_id)
        store.create()

        assert store.get(first_id) is not None
        assert store.get(second_id) is None

    def test_storyless_session_is_evicted_before_a_written_story(self):
        orchestrators = iter([
            fake_orchestrator(),
            fake_orchestrator(has_story=False),
            fake_orchestrator(),
        ])
        store = SessionStore(lambda session_id: next(orchestrators), max_sessions=2)
        story_id, _ = store.create()
        empty_id, _ = store.create()
        store.get(empty_id)

        store.create()

        assert store.get(story_id) is not None
        assert store.get(empty_id) is None

    def test_nothing_evicted_when_every_session_is_busy(self):
        store = SessionStore(lambda session_id: fake_orchestrator(busy=True), max_sessions=1)
        first_id, _ = store.create()

        store.create()

        assert store.get(first_id) is not None
        assert len(store) == 2
