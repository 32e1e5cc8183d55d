# tests/test_store.py

"""
Tests for the rule-enforcing DirectoryStore and the per-request Session.
"""

from unittest.mock import Mock

import pytest

from core.security_rules import PermissionDenied
from core.session import Session
from core.store import DirectoryStore, DocumentNotFound
from models.auth import Identity
from models.enums import Collection, Role
from tests.conftest import RESIDENT_1


# ============================================================
# Reads
# ============================================================
def test_anonymous_store_reads_nothing(store_for, fake_client):
    store = store_for(None)
    with pytest.raises(PermissionDenied):
        store.list(Collection.houses)
    with pytest.raises(PermissionDenied):
        store.get(Collection.residents, "resident-1")


def test_get_and_list(store_for):
    store = store_for("member-user-1")
    assert store.get(Collection.houses, "house-1")["houseNumber"] == "96A"
    assert store.get(Collection.houses, "missing") is None
    assert [h["id"] for h in store.list(Collection.houses, order_by="houseNumber")] == ["house-1", "house-2"]
    assert len(store.list(Collection.residents, filters={"houseId": "house-2"})) == 0


def test_users_are_private(store_for):
    store = store_for("member-user-1")
    assert store.get(Collection.users, "member-user-1")["role"] == "member"
    with pytest.raises(PermissionDenied):
        store.get(Collection.users, "head-user-1")
    with pytest.raises(PermissionDenied):
        store.list(Collection.users)


# ============================================================
# Writes are enforced before reaching the database
# ============================================================
def test_denied_create_is_never_sent():
    client = Mock()
    client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value = Mock(
        data=[{"id": "member-user-1", "role": "member", "houseId": "house-1"}]
    )
    store = DirectoryStore(client, "member-user-1")

    with pytest.raises(PermissionDenied):
        store.create(Collection.residents, {**RESIDENT_1, "createdBy": "member-user-1"})

    client.table.return_value.insert.assert_not_called()


def test_head_creates_resident(store_for, fake_client):
    store = store_for("head-user-1")
    doc = {**RESIDENT_1, "houseName": "Second", "createdBy": "head-user-1"}
    doc.pop("id")

    row = store.create(Collection.residents, doc)

    assert row["id"]
    assert fake_client.row("residents", row["id"])["houseName"] == "Second"


def test_head_cannot_write_into_other_house(store_for, fake_client):
    store = store_for("head-user-2")
    with pytest.raises(PermissionDenied):
        store.create(Collection.residents, {**RESIDENT_1, "id": "r-x", "createdBy": "head-user-2"})
    with pytest.raises(PermissionDenied):
        store.update(Collection.residents, "resident-1", {"houseName": "Hijacked"})
    with pytest.raises(PermissionDenied):
        store.delete(Collection.residents, "resident-1")

    assert fake_client.row("residents", "resident-1")["houseName"] == "Test House 1"
    assert fake_client.row("residents", "r-x") is None


def test_update_merges_changes(store_for, fake_client):
    store = store_for("head-user-1")
    row = store.update(Collection.residents, "resident-1", {"street": "New Street"})

    assert row["street"] == "New Street"
    assert fake_client.row("residents", "resident-1")["houseName"] == "Test House 1"


def test_delete_removes_row(store_for, fake_client):
    store_for("head-user-1").delete(Collection.residents, "resident-1")
    assert fake_client.row("residents", "resident-1") is None


def test_missing_document(store_for):
    with pytest.raises(DocumentNotFound):
        store_for("head-user-1").update(Collection.residents, "nope", {"street": "x"})
    with pytest.raises(DocumentNotFound):
        store_for("head-user-1").delete(Collection.residents, "nope")


def test_missing_document_denied_for_anonymous(store_for):
    with pytest.raises(PermissionDenied):
        store_for(None).delete(Collection.residents, "nope")


def test_user_record_create_refreshes_caller_context(store_for):
    store = store_for("new-user")
    assert store.auth_context().user is None

    store.create(
        Collection.users,
        {"phoneNumber": "9812345678", "role": "head", "houseId": "house-9"},
        doc_id="new-user",
    )

    assert store.auth_context().user["role"] == "head"


def test_payload_id_mismatch_on_user_create(store_for):
    store = store_for("new-user")
    with pytest.raises(PermissionDenied):
        store.create(Collection.users, {"id": "head-user-1", "role": "head"}, doc_id="new-user")


# ============================================================
# Session
# ============================================================
def test_session_for_registered_head(session_for):
    session = session_for("head-user-1")

    assert session.is_authenticated is True
    assert session.needs_registration is False
    assert session.user.role is Role.head
    assert session.permissions.editable_house_id == "house-1"


def test_session_for_unregistered_identity(session_for):
    session = session_for("new-user")

    assert session.is_authenticated is False
    assert session.needs_registration is True
    assert session.permissions.can_view_all_houses is False


def test_anonymous_session():
    session = Session()
    assert session.uid is None
    assert session.is_authenticated is False
    assert session.needs_registration is False
    assert session.snapshot().role_display_name == "Guest"


def test_session_open_records_login(store_for, fake_client):
    before = fake_client.row("users", "head-user-1")["lastLoginAt"]["seconds"]

    session = Session.open(Identity(uid="head-user-1"), store_for("head-user-1"))

    after = fake_client.row("users", "head-user-1")["lastLoginAt"]["seconds"]
    assert after > before
    assert session.user.last_login_at.seconds == after


def test_login_record_failure_does_not_block_session(store_for, monkeypatch):
    store = store_for("head-user-1")
    monkeypatch.setattr(store, "update", Mock(side_effect=RuntimeError("boom")))

    session = Session.open(Identity(uid="head-user-1"), store)

    assert session.is_authenticated is True


def test_malformed_user_record_is_treated_as_unregistered(store_for, fake_client):
    fake_client.row("users", "head-user-1")["role"] = "admin"
    session = Session.open(Identity(uid="head-user-1"), store_for("head-user-1"), record_login=False)

    assert session.user is None
    assert session.needs_registration is True


def test_session_clear(session_for):
    session = session_for("member-user-1")
    session.clear()

    assert session.identity is None
    assert session.user is None
    assert session.is_authenticated is False
