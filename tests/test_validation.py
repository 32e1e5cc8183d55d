# tests/test_validation.py

"""
Tests for core.validation and core.utils.sanitize_document.
"""

import string

import pytest
from hypothesis import given
from hypothesis import strategies as st

from core.utils import sanitize_document
from core.validation import (
    sanitize_house_number,
    sanitize_phone_number,
    validate_house_number,
    validate_house_data,
    validate_phone_number,
    validate_user_data,
    validate_user_house_association,
    validate_user_role,
)
from models.enums import Role
from models.house import House
from models.user import User


HOUSE_NUMBER_CHARS = set(string.ascii_letters + string.digits + "-")

house_number_text = st.text(
    alphabet=st.sampled_from(string.ascii_letters + string.digits + "- _/#.\t"),
    max_size=12,
)


# ============================================================
# House numbers
# ============================================================
@pytest.mark.parametrize("value", ["96", "96A", "B-12", "  96a  ", "-"])
def test_valid_house_numbers(value):
    assert validate_house_number(value) is True


@pytest.mark.parametrize("value", ["", "   ", "96 A", "96/A", "#12", None, 96, ["96"]])
def test_invalid_house_numbers(value):
    assert validate_house_number(value) is False


@given(house_number_text)
def test_house_number_valid_iff_trimmed_is_alnum_or_hyphen(value):
    trimmed = value.strip()
    expected = bool(trimmed) and set(trimmed) <= HOUSE_NUMBER_CHARS
    assert validate_house_number(value) is expected


def test_sanitize_house_number():
    assert sanitize_house_number("  96a ") == "96A"
    assert sanitize_house_number("b-12") == "B-12"
    assert sanitize_house_number(None) == ""
    assert sanitize_house_number(12) == ""


@given(house_number_text)
def test_sanitize_house_number_is_idempotent(value):
    once = sanitize_house_number(value)
    assert sanitize_house_number(once) == once


@given(house_number_text)
def test_sanitized_valid_house_number_stays_valid(value):
    if validate_house_number(value):
        assert validate_house_number(sanitize_house_number(value))


# ============================================================
# Phone numbers
# ============================================================
@pytest.mark.parametrize(
    "value",
    ["9400722590", "+919400722590", "919400722590", "+91 94007 22590", "6000000000"],
)
def test_valid_phone_numbers(value):
    assert validate_phone_number(value) is True


@pytest.mark.parametrize(
    "value",
    ["", None, "5400722590", "94007225", "+9194007225901", "+449400722590", "abc", 9400722590],
)
def test_invalid_phone_numbers(value):
    assert validate_phone_number(value) is False


@pytest.mark.parametrize(
    "value,expected",
    [
        ("+91 94007-22590", "9400722590"),
        ("919400722590", "9400722590"),
        ("9400722590", "9400722590"),
        # Eleven digits starting with 91 is not a country code prefix
        ("91940072259", "91940072259"),
        (None, ""),
    ],
)
def test_sanitize_phone_number(value, expected):
    assert sanitize_phone_number(value) == expected


@given(st.from_regex(r"[6-9][0-9]{9}", fullmatch=True), st.sampled_from(["", "91", "+91", "+91 "]))
def test_sanitized_phone_is_bare_local_number(local, prefix):
    phone = prefix + local
    assert validate_phone_number(phone)
    assert sanitize_phone_number(phone) == local


# Arabic-Indic and Devanagari digits are not dialable
@pytest.mark.parametrize("value", ["9" + "\u0660" * 9, "\u096F" * 10, "+91 9" + "\u0660" * 9])
def test_non_ascii_digits_are_rejected(value):
    assert validate_phone_number(value) is False
    assert validate_user_data({**VALID_USER, "phoneNumber": value}) is False


def test_sanitize_phone_drops_non_ascii_digits():
    assert sanitize_phone_number("9400722590\u0660\u0661") == "9400722590"


# ============================================================
# Roles
# ============================================================
def test_validate_user_role():
    assert validate_user_role("head") is Role.head
    assert validate_user_role("member") is Role.member
    assert validate_user_role(Role.head) is Role.head
    assert validate_user_role("admin") is None
    assert validate_user_role("Head") is None
    assert validate_user_role(None) is None
    assert validate_user_role(1) is None


# ============================================================
# Composite records
# ============================================================
VALID_USER = {
    "id": "head-user-1",
    "phoneNumber": "9400722590",
    "role": "head",
    "houseId": "house-1",
}


def test_validate_user_data_accepts_dict_and_model():
    assert validate_user_data(VALID_USER) is True
    assert validate_user_data(User.model_validate(VALID_USER)) is True


@pytest.mark.parametrize(
    "override",
    [
        {"id": ""},
        {"phoneNumber": "12345"},
        {"role": "admin"},
        {"houseId": None},
    ],
)
def test_validate_user_data_rejects_bad_fields(override):
    assert validate_user_data({**VALID_USER, **override}) is False


def test_validate_user_data_rejects_nothing():
    assert validate_user_data(None) is False
    assert validate_user_data({}) is False


def test_validate_house_data():
    house = {"id": "house-1", "houseNumber": "96A", "headOfFamilyId": "head-user-1", "memberIds": []}
    assert validate_house_data(house) is True
    assert validate_house_data({**house, "houseNumber": "96 A"}) is False
    assert validate_house_data({**house, "headOfFamilyId": ""}) is False
    assert validate_house_data(None) is False


HOUSE = {
    "id": "house-1",
    "houseNumber": "96A",
    "headOfFamilyId": "head-user-1",
    "memberIds": ["head-user-1", "member-user-1"],
}


def test_association_head_and_member():
    assert validate_user_house_association({"id": "head-user-1"}, HOUSE) is True
    assert validate_user_house_association({"id": "member-user-1"}, HOUSE) is True
    assert validate_user_house_association({"id": "head-user-2"}, HOUSE) is False


def test_association_accepts_models():
    user = User.model_validate({**VALID_USER, "id": "member-user-1", "role": "member"})
    assert validate_user_house_association(user, House.model_validate(HOUSE)) is True


def test_association_with_missing_inputs():
    assert validate_user_house_association(None, HOUSE) is False
    assert validate_user_house_association({"id": "head-user-1"}, None) is False
    assert validate_user_house_association({"id": ""}, HOUSE) is False


uids = st.sampled_from(["u-1", "u-2", "u-3", "u-4"])


@given(uid=uids, head=uids, members=st.lists(uids, max_size=4))
def test_association_iff_head_or_listed(uid, head, members):
    house = {"id": "h", "houseNumber": "1", "headOfFamilyId": head, "memberIds": members}
    expected = uid == head or uid in members
    assert validate_user_house_association({"id": uid}, house) is expected


# ============================================================
# Document sanitizing
# ============================================================
def test_sanitize_document_strips_nested_strings():
    doc = {
        "houseName": "  Rose Villa ",
        "headOfFamily": {"name": " John ", "emergencyContact": {"phone": " 9400722590 "}},
        "familyMembers": [{"name": " Ann "}],
        "totalFamilyMembers": "4",
        "count": 3,
    }
    assert sanitize_document(doc) == {
        "houseName": "Rose Villa",
        "headOfFamily": {"name": "John", "emergencyContact": {"phone": "9400722590"}},
        "familyMembers": [{"name": "Ann"}],
        "totalFamilyMembers": "4",
        "count": 3,
    }
