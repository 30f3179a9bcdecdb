"""Testes do ciclo de vida do SessionStore (backend em memória)."""

from __future__ import annotations

import time

import pytest
from starlette.responses import Response

from firestore_sessions.domain.errors import (
    DecodingError,
    EncodingError,
    MaxLengthExceededError,
)
from firestore_sessions.domain.session import CookieOptions
from firestore_sessions.infra.session_cache import SessionCache
from firestore_sessions.infra.session_store_memory import InMemorySessionStore

NAME = "testname"


class TestNew:
    """Testes para new()."""

    def test_new_without_cookie_is_fresh(self, memory_store, make_request):
        """Sem cache e sem cookie, a sessão é nova e vazia."""
        session = memory_store.new(make_request(), NAME)

        assert session.is_new is True
        assert session.values == {}
        assert session.name == NAME
        assert session.identity

    def test_new_generates_distinct_identities(self, memory_store, make_request):
        first = memory_store.new(make_request(), NAME)
        second = memory_store.new(make_request(), NAME)

        assert first.identity != second.identity

    def test_new_accepts_missing_request(self, memory_store):
        assert memory_store.new(None, NAME).is_new is True

    def test_new_does_not_populate_cache(self, memory_store, make_request):
        memory_store.new(make_request(), NAME)

        assert NAME not in memory_store.cache

    def test_new_loads_document_from_cookie(self, make_request):
        """Sem cache, o cookie aponta para o documento persistido."""
        store = InMemorySessionStore()
        data = store.serializer.encode({"testkey": "testvalue"})
        store._write_document(NAME, "cookie-id", data)

        session = store.new(make_request({NAME: "cookie-id"}), NAME)

        assert session.is_new is False
        assert session.identity == "cookie-id"
        assert session.values == {"testkey": "testvalue"}

    def test_new_with_unknown_cookie_is_fresh(self, memory_store, make_request):
        """Cookie sem documento gera sessão nova com identity nova."""
        session = memory_store.new(make_request({NAME: "unknown-id"}), NAME)

        assert session.is_new is True
        assert session.values == {}
        assert session.identity != "unknown-id"

    def test_new_corrupted_document_raises(self, memory_store, make_request):
        """Documento corrompido deve propagar DecodingError, nunca sessão vazia."""
        memory_store._write_document(NAME, "bad-id", b'{"testkey": "trunc')

        with pytest.raises(DecodingError):
            memory_store.new(make_request({NAME: "bad-id"}), NAME)


class TestCookieResolution:
    """O cookie da request sempre decide qual sessão é carregada."""

    def _saved(self, store, make_request, **values):
        session = store.new(make_request(), NAME)
        session.values.update(values)
        store.save(make_request(), None, session)
        return session

    def test_cookie_wins_over_latest_saved(self, make_request):
        store = InMemorySessionStore()
        alice = self._saved(store, make_request, owner="alice")
        bob = self._saved(store, make_request, owner="bob")

        session = store.new(make_request({NAME: alice.identity}), NAME)

        assert session.identity == alice.identity
        assert session.values == {"owner": "alice"}
        assert store.new(make_request({NAME: bob.identity}), NAME).values == {"owner": "bob"}

    def test_unknown_cookie_never_gets_cached_session(self, make_request):
        store = InMemorySessionStore()
        alice = self._saved(store, make_request, owner="alice")

        session = store.new(make_request({NAME: "someone-else"}), NAME)

        assert session.is_new is True
        assert session.values == {}
        assert session.identity not in (alice.identity, "someone-else")

    def test_cookie_cache_hit_skips_document_read(self, make_request):
        store = InMemorySessionStore()
        alice = self._saved(store, make_request, owner="alice")
        store._documents.clear()

        session = store.new(make_request({NAME: alice.identity}), NAME)

        assert session.values == {"owner": "alice"}

    def test_without_share_by_name_no_cookie_is_fresh(self, make_request):
        store = InMemorySessionStore(share_by_name=False)
        alice = self._saved(store, make_request, owner="alice")

        session = store.new(make_request(), NAME)

        assert session.is_new is True
        assert session.values == {}
        assert session.identity != alice.identity
        assert store.new(make_request({NAME: alice.identity}), NAME).values == {"owner": "alice"}


class TestSaveAndGet:
    """Cenário principal: save seguido de get/new."""

    def test_save_then_get_and_cached_new(self, memory_store, make_request):
        request = make_request()
        session = memory_store.new(request, NAME)
        session.values["testkey"] = "testvalue"
        session.values["expire"] = int(time.time())

        memory_store.save(request, Response(), session)

        got = memory_store.get(make_request(), NAME)
        assert got.values == session.values
        assert got.is_new is False

        cached = memory_store.new(make_request(), NAME)
        assert cached.values == session.values
        assert cached.is_new is False

    def test_save_marks_session_persisted(self, memory_store, make_request):
        session = memory_store.new(make_request(), NAME)

        memory_store.save(make_request(), None, session)

        assert session.is_new is False
        assert NAME in memory_store.cache

    def test_cached_values_are_independent_copies(self, memory_store, make_request):
        """Mutar a sessão retornada não altera o cache."""
        session = memory_store.new(make_request(), NAME)
        session.values["items"] = ["a"]
        memory_store.save(make_request(), None, session)

        first = memory_store.new(make_request(), NAME)
        first.values["items"].append("b")
        second = memory_store.new(make_request(), NAME)

        assert second.values == {"items": ["a"]}

    def test_save_sets_cookie(self, make_request):
        store = InMemorySessionStore(cookie_options=CookieOptions(max_age=60, secure=True))
        session = store.new(make_request(), NAME)
        response = Response()

        store.save(make_request(), response, session)

        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"{NAME}={session.identity}")
        assert "Max-Age=60" in cookie
        assert "HttpOnly" in cookie
        assert "Secure" in cookie

    def test_persisted_document_survives_without_cache(self, make_request):
        """Com cache vazio (outro processo), o cookie recupera a sessão."""
        store = InMemorySessionStore()
        session = store.new(make_request(), NAME)
        session.values["testkey"] = "testvalue"
        store.save(make_request(), None, session)
        store.cache.clear()

        got = store.get(make_request({NAME: session.identity}), NAME)

        assert got.values == {"testkey": "testvalue"}
        assert got.is_new is False

    def test_get_returns_same_instance_within_request(self, memory_store, make_request):
        request = make_request()

        first = memory_store.get(request, NAME)
        second = memory_store.get(request, NAME)

        assert first is second
        assert memory_store.get(make_request(), NAME) is not first

    def test_shared_cache_between_stores(self, make_request):
        """Cache injetado é compartilhado entre instâncias."""
        cache = SessionCache()
        writer = InMemorySessionStore(cache=cache)
        reader = InMemorySessionStore(cache=cache)
        session = writer.new(make_request(), NAME)
        session.values["k"] = "v"

        writer.save(make_request(), None, session)

        assert reader.new(make_request(), NAME).values == {"k": "v"}

    def test_private_caches_are_isolated(self, make_request):
        writer = InMemorySessionStore()
        reader = InMemorySessionStore()
        session = writer.new(make_request(), NAME)
        writer.save(make_request(), None, session)

        assert reader.new(make_request(), NAME).is_new is True


class TestSaveFailures:
    """Save rejeitado não altera documento nem cache."""

    def test_max_length_error_propagates(self, memory_store, make_request):
        session = memory_store.new(make_request(), NAME)
        session.values["store"] = "firestore" * (1 << 20)

        with pytest.raises(MaxLengthExceededError) as exc_info:
            memory_store.save(make_request(), None, session)

        assert "max length" in str(exc_info.value)
        assert NAME not in memory_store.cache
        assert memory_store._read_document(NAME, session.identity) is None
        assert session.is_new is True

    def test_encoding_error_keeps_previous_state(self, memory_store, make_request):
        session = memory_store.new(make_request(), NAME)
        session.values["ok"] = 1
        memory_store.save(make_request(), None, session)

        session.values["bad"] = {1, 2}
        with pytest.raises(EncodingError):
            memory_store.save(make_request(), None, session)

        assert memory_store.new(make_request(), NAME).values == {"ok": 1}


class TestDelete:
    """Testes para delete, expiração via max_age e delete_all."""

    def test_delete_removes_document_and_cache(self, memory_store, make_request):
        session = memory_store.new(make_request(), NAME)
        memory_store.save(make_request(), None, session)

        memory_store.delete(session)

        assert NAME not in memory_store.cache
        assert memory_store._read_document(NAME, session.identity) is None

    def test_delete_keeps_other_sessions_of_same_name(self, memory_store, make_request):
        first = memory_store.new(make_request(), NAME)
        memory_store.save(make_request(), None, first)
        second = memory_store.new(make_request({NAME: "x"}), NAME)
        second.values["k"] = "v"
        memory_store.save(make_request(), None, second)

        memory_store.delete(first)

        assert (NAME, first.identity) not in memory_store.cache
        assert memory_store.new(make_request(), NAME).values == {"k": "v"}
        assert memory_store.new(make_request({NAME: second.identity}), NAME).identity == (
            second.identity
        )

    def test_save_with_non_positive_max_age_expires(self, make_request):
        store = InMemorySessionStore()
        session = store.new(make_request(), NAME)
        store.save(make_request(), None, session)

        session.options = CookieOptions(max_age=0)
        response = Response()
        store.save(make_request(), response, session)

        assert NAME not in store.cache
        assert store._read_document(NAME, session.identity) is None
        assert 'Max-Age=0' in response.headers["set-cookie"]

    def test_delete_all(self, memory_store, make_request):
        for _ in range(3):
            session = memory_store.new(make_request(), NAME)
            memory_store.save(make_request(), None, session)
        other = memory_store.new(make_request(), "other")
        memory_store.save(make_request(), None, other)

        deleted = memory_store.delete_all(NAME)

        assert deleted == 3
        assert NAME not in memory_store.cache
        assert memory_store._list_identities(NAME) == []
        assert memory_store._list_identities("other") == [other.identity]
