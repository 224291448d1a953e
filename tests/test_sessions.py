"""Tests for the server-side session store and cookie signer."""

import time

from nest_admin.sessions import SessionCookieSigner, SessionStore
from conftest import ADMIN


class TestSessionStore:

    def test_create_and_get(self):
        store = SessionStore(ttl_seconds=60)

        record = store.create(ADMIN)

        assert store.get(record.session_id) == record
        assert record.principal == ADMIN
        assert len(store) == 1

    def test_session_ids_are_unique(self):
        store = SessionStore(ttl_seconds=60)

        ids = {store.create(ADMIN).session_id for _ in range(50)}

        assert len(ids) == 50

    def test_expired_session_is_absent_and_evicted(self):
        store = SessionStore(ttl_seconds=0)

        record = store.create(ADMIN)

        assert store.get(record.session_id) is None
        assert len(store) == 0

    def test_destroy_is_idempotent(self):
        store = SessionStore(ttl_seconds=60)
        record = store.create(ADMIN)

        assert store.destroy(record.session_id) is True
        assert store.destroy(record.session_id) is False
        assert store.destroy(None) is False

    def test_get_none(self):
        assert SessionStore(ttl_seconds=60).get(None) is None

    def test_purge_expired(self):
        store = SessionStore(ttl_seconds=0)
        store.create(ADMIN)
        store.create(ADMIN)

        assert store.purge_expired() == 1
        assert len(store) == 0

    def test_create_drops_abandoned_sessions(self):
        store = SessionStore(ttl_seconds=0)
        abandoned = store.create(ADMIN)
        store.ttl_seconds = 60

        live = store.create(ADMIN)

        assert len(store) == 1
        assert store.get(live.session_id) == live
        assert store.destroy(abandoned.session_id) is False


class TestSessionCookieSigner:

    def test_round_trip(self):
        signer = SessionCookieSigner("secret", max_age=60)

        assert signer.unsign(signer.sign("abc")) == "abc"

    def test_rejects_other_secret(self):
        token = SessionCookieSigner("secret", max_age=60).sign("abc")

        assert SessionCookieSigner("other", max_age=60).unsign(token) is None

    def test_rejects_garbage_and_missing(self):
        signer = SessionCookieSigner("secret", max_age=60)

        assert signer.unsign("garbage") is None
        assert signer.unsign(None) is None
        assert signer.unsign("") is None

    def test_rejects_stale_signature(self):
        signer = SessionCookieSigner("secret", max_age=0)
        token = signer.sign("abc")
        time.sleep(1.1)

        assert signer.unsign(token) is None
