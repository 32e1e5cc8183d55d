# tests/test_config.py

import pytest

from core.config import settings
from core.config_validator import validate_config_on_startup, validate_required_config


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_SERVICE_ROLE_KEY", "service-key")
    monkeypatch.setattr(settings, "SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setattr(settings, "ENV", "production")


def test_complete_config_passes(configured):
    assert validate_required_config() == []
    validate_config_on_startup()


def test_anon_key_as_service_key_is_rejected(configured, monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_SERVICE_ROLE_KEY", "anon-key")
    assert validate_required_config() == ["SUPABASE_SERVICE_ROLE_KEY is set to the anon key"]


def test_plain_http_url_is_rejected(configured, monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", "http://example.supabase.co")
    assert validate_required_config() == ["SUPABASE_URL must be an https:// URL"]


def test_missing_config_raises_outside_development(configured, monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    with pytest.raises(RuntimeError):
        validate_config_on_startup()


def test_missing_config_only_warns_in_development(configured, monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    monkeypatch.setattr(settings, "ENV", "development")
    validate_config_on_startup()
