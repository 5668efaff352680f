import pytest

from crm.config import runtime_config


def test_store_backend_defaults_to_memory(monkeypatch):
    monkeypatch.delenv("CRM_STORE_BACKEND", raising=False)
    assert runtime_config.get_store_backend() == runtime_config.STORE_BACKEND_MEMORY


def test_store_backend_rejects_unknown(monkeypatch):
    monkeypatch.setenv("CRM_STORE_BACKEND", "firestore")
    with pytest.raises(RuntimeError):
        runtime_config.get_store_backend()


def test_vertex_project_is_required(monkeypatch):
    monkeypatch.delenv("VERTEX_PROJECT", raising=False)
    with pytest.raises(RuntimeError, match="Missing env VERTEX_PROJECT"):
        runtime_config.get_vertex_project()


def test_defaults(monkeypatch):
    for name in ("PORT", "MONGO_URI", "MONGO_DB", "VERTEX_LOCATION"):
        monkeypatch.delenv(name, raising=False)
    assert runtime_config.get_port() == 8080
    assert runtime_config.get_mongo_uri() == "mongodb://localhost:27017"
    assert runtime_config.get_mongo_db() == "crm"
    assert runtime_config.get_vertex_location() == "us-central1"


def test_config_snapshot_reports_secrets_as_presence_only(monkeypatch):
    monkeypatch.setenv("YT_API_KEY", "yt-secret")
    monkeypatch.delenv("ELEVEN_API_KEY", raising=False)
    monkeypatch.setenv("CRM_STORE_BACKEND", "memory")
    runtime_config.config_snapshot.cache_clear()
    try:
        snapshot = runtime_config.config_snapshot()
    finally:
        runtime_config.config_snapshot.cache_clear()

    assert snapshot["store_backend"] == "memory"
    assert snapshot["youtube_search_enabled"] is True
    assert snapshot["eleven_enabled"] is False
    assert "yt-secret" not in repr(snapshot)
