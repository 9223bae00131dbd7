"""
Tests for repo.py - referrer and referrer type stores.
"""

import pytest

from gac.errors import ConstraintViolationError
from gac.storage.models import Job, ReferrerType
from gac.storage.repo import DEFAULT_REFERRER_TYPES, ReferrerStore, ReferrerTypeStore


class TestEnsureDefaults:
    """Default referrer type seeding."""

    def test_second_call_is_noop(self, database):
        with database.session() as session:
            assert ReferrerTypeStore(session).ensure_defaults() == 0
            assert len(ReferrerTypeStore(session).list_all()) == len(DEFAULT_REFERRER_TYPES)

    def test_seeds_empty_table(self, database):
        with database.session() as session:
            session.query(ReferrerType).delete()

        with database.session() as session:
            assert ReferrerTypeStore(session).ensure_defaults() == len(DEFAULT_REFERRER_TYPES)

    def test_does_not_seed_when_custom_types_exist(self, database):
        with database.session() as session:
            session.query(ReferrerType).delete()
            ReferrerTypeStore(session).create("Custom")

        with database.session() as session:
            store = ReferrerTypeStore(session)
            assert store.ensure_defaults() == 0
            assert [t.name for t in store.list_all()] == ["Custom"]


class TestReferrerStore:
    """CRUD on ReferrerStore."""

    def test_create_and_get(self, database):
        with database.session() as session:
            referrer = ReferrerStore(session).create("Acme", 1)
            referrer_id = referrer.id

        with database.session() as session:
            loaded = ReferrerStore(session).get_by_id(referrer_id)
            assert loaded.name == "Acme"
            assert loaded.type_id == 1
            assert loaded.referrer_type.name == "Client Referral"

    def test_list_is_ordered_by_name(self, database):
        with database.session() as session:
            store = ReferrerStore(session)
            store.create("Zeta", 1)
            store.create("Acme", 2)
            assert [r.name for r in store.list_all()] == ["Acme", "Zeta"]

    def test_search_matches_partial_name(self, database):
        with database.session() as session:
            store = ReferrerStore(session)
            store.create("North Acme Supplies", 1)
            store.create("Zeta", 1)
            assert [r.name for r in store.search("ACME")] == ["North Acme Supplies"]

    def test_delete_blocked_by_job(self, database):
        with database.session() as session:
            referrer = ReferrerStore(session).create("Acme", 1)
            session.add(Job(title="Roof", referrer_id=referrer.id))
            referrer_id = referrer.id

        with database.session() as session:
            store = ReferrerStore(session)
            with pytest.raises(ConstraintViolationError):
                store.delete(store.get_by_id(referrer_id))

        with database.session() as session:
            assert ReferrerStore(session).get_by_id(referrer_id) is not None
            job = session.query(Job).one()
            assert job.referrer_id == referrer_id

    def test_count_jobs(self, database):
        with database.session() as session:
            store = ReferrerStore(session)
            referrer = store.create("Acme", 1)
            assert store.count_jobs(referrer.id) == 0
            session.add(Job(title="Roof", referrer_id=referrer.id))
            session.flush()
            assert store.count_jobs(referrer.id) == 1


class TestReferrerTypeStore:
    """CRUD on ReferrerTypeStore."""

    def test_delete_blocked_by_referrer(self, database):
        with database.session() as session:
            ReferrerStore(session).create("Acme", 3)

        with database.session() as session:
            store = ReferrerTypeStore(session)
            with pytest.raises(ConstraintViolationError):
                store.delete(store.get_by_id(3))

        with database.session() as session:
            assert ReferrerTypeStore(session).get_by_id(3) is not None

    def test_update(self, database):
        with database.session() as session:
            store = ReferrerTypeStore(session)
            updated = store.update(store.get_by_id(1), "Referral", "Existing client")
            assert (updated.name, updated.description) == ("Referral", "Existing client")
