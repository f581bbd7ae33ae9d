"""
Unit tests for environment configuration loading
"""
from quoteday.config.loader import ConfigLoader, load_config_for_environment
from quoteday.config.settings import Environment, build_settings


def test_missing_env_file_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    loaded = load_config_for_environment("staging")
    assert loaded.environment == Environment.STAGING
    assert loaded.quotes.page_size == 3


def test_env_file_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env.production").write_text("APP_NAME=Quotes Prod\nPORT=9001\n")
    loaded = load_config_for_environment("production")
    assert loaded.app_name == "Quotes Prod"
    assert loaded.port == 9001
    assert loaded.is_production()


def test_available_environments_ignore_unknown_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in (".env.testing", ".env.development", ".env.local"):
        (tmp_path / name).write_text("")
    assert ConfigLoader.get_available_environments() == ["development", "testing"]


def test_sample_env_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = ConfigLoader.create_sample_env_file("production")
    content = (tmp_path / path).read_text()
    assert path == ".env.production.sample"
    assert "ENVIRONMENT=production" in content
    assert "QUOTES_AI_SEARCHES_PER_DAY=10" in content
    assert "WORKERS=4" in content


def test_env_file_reaches_nested_groups(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env.production").write_text(
        "QUOTES_REPEAT_WINDOW_DAYS=7\nSECURITY_SESSION_TTL_HOURS=48\nREDIS_HOST=cache.internal\n"
    )
    loaded = load_config_for_environment("production")
    assert loaded.quotes.repeat_window_days == 7
    assert loaded.security.session_ttl_hours == 48
    assert loaded.redis.host == "cache.internal"


def test_environment_file_beats_base_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENVIRONMENT", "staging")
    (tmp_path / ".env").write_text("APP_NAME=Quotes Base\nQUOTES_REPEAT_WINDOW_DAYS=10\n")
    (tmp_path / ".env.staging").write_text("QUOTES_REPEAT_WINDOW_DAYS=14\n")
    loaded = build_settings()
    assert loaded.environment == Environment.STAGING
    assert loaded.app_name == "Quotes Base"
    assert loaded.quotes.repeat_window_days == 14
