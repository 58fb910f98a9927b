"""Tests for Config class: settings persistence and retrieval."""

import json

import pytest

from rindang.config import Config, _as_bool, _load_settings


@pytest.fixture
def settings_file(tmp_path):
    """Temporary settings file for isolation."""
    return tmp_path / "settings.json"


@pytest.fixture(autouse=True)
def isolate_config(settings_file, monkeypatch):
    """Redirect settings I/O to temp file so tests don't touch real config."""
    import rindang.config as config_mod
    monkeypatch.setattr(config_mod, "_SETTINGS_FILE", settings_file)

    saved = {
        "SUPABASE_URL": Config.SUPABASE_URL,
        "SUPABASE_ANON_KEY": Config.SUPABASE_ANON_KEY,
        "REMOTE_TIMEOUT": Config.REMOTE_TIMEOUT,
        "MAX_RETRY_COUNT": Config.MAX_RETRY_COUNT,
        "AUTO_SYNC": Config.AUTO_SYNC,
    }
    yield
    for attr, val in saved.items():
        setattr(Config, attr, val)


class TestConfigDefaults:
    def test_max_retry_count_is_int(self):
        assert isinstance(Config.MAX_RETRY_COUNT, int)
        assert Config.MAX_RETRY_COUNT >= 1

    def test_remote_timeout_is_float(self):
        assert isinstance(Config.REMOTE_TIMEOUT, float)

    def test_auto_sync_is_bool(self):
        assert isinstance(Config.AUTO_SYNC, bool)

    def test_database_path_is_sqlite_file(self):
        assert Config.DATABASE_PATH.suffix == ".db"


class TestAsBool:
    @pytest.mark.parametrize("raw", ["true", "1", "YES", " on ", True])
    def test_truthy(self, raw):
        assert _as_bool(raw) is True

    @pytest.mark.parametrize("raw", ["false", "0", "no", "", False])
    def test_falsy(self, raw):
        assert _as_bool(raw) is False


class TestRemoteSettings:
    def test_update_sets_class_attributes(self):
        Config.update_remote_settings("https://x.supabase.co", "key", 7.5)
        assert Config.SUPABASE_URL == "https://x.supabase.co"
        assert Config.SUPABASE_ANON_KEY == "key"
        assert Config.REMOTE_TIMEOUT == 7.5

    def test_update_persists(self, settings_file):
        Config.update_remote_settings("https://x.supabase.co", "key", 7.5)
        saved = json.loads(settings_file.read_text(encoding="utf-8"))
        assert saved["supabase_url"] == "https://x.supabase.co"
        assert saved["remote_timeout"] == 7.5

    def test_is_remote_configured(self):
        Config.SUPABASE_URL = ""
        Config.SUPABASE_ANON_KEY = ""
        assert Config.is_remote_configured() is False
        Config.SUPABASE_URL = "https://x.supabase.co"
        Config.SUPABASE_ANON_KEY = "key"
        assert Config.is_remote_configured() is True


class TestSyncSettings:
    def test_update_and_persist(self):
        Config.update_sync_settings(5, False)
        assert Config.MAX_RETRY_COUNT == 5
        assert Config.AUTO_SYNC is False
        assert _load_settings() == {"max_retry_count": 5, "auto_sync": False}

    def test_rejects_zero_retries(self):
        with pytest.raises(ValueError):
            Config.update_sync_settings(0, True)

    def test_keeps_other_settings(self, settings_file):
        settings_file.write_text(json.dumps({"supabase_url": "u"}))
        Config.update_sync_settings(4, True)
        saved = json.loads(settings_file.read_text(encoding="utf-8"))
        assert saved["supabase_url"] == "u"
        assert saved["max_retry_count"] == 4


class TestLoadSettings:
    def test_missing_file_returns_empty(self):
        assert _load_settings() == {}

    def test_corrupt_file_returns_empty(self, settings_file):
        settings_file.write_text("{not json", encoding="utf-8")
        assert _load_settings() == {}
