from pathlib import Path

from jobseeker.config import DB_PATH, PROFILE_PATH, Settings, get_env, load_settings


def test_defaults(monkeypatch):
    for key in ("ADZUNA_APP_ID", "ADZUNA_APP_KEY", "ADZUNA_COUNTRY", "JOBSEEKER_DB", "JOBSEEKER_PROFILE"):
        monkeypatch.delenv(key, raising=False)
    settings = load_settings()
    assert settings.adzuna_country == "es"
    assert settings.db_path == DB_PATH
    assert settings.profile_path == PROFILE_PATH
    assert not settings.has_adzuna_credentials


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("ADZUNA_APP_ID", " abc ")
    monkeypatch.setenv("ADZUNA_APP_KEY", "xyz")
    monkeypatch.setenv("ADZUNA_COUNTRY", "GB")
    monkeypatch.setenv("JOBSEEKER_DB", str(tmp_path / "x.db"))
    settings = load_settings()
    assert settings.adzuna_app_id == "abc"
    assert settings.adzuna_country == "gb"
    assert settings.db_path == Path(tmp_path / "x.db")
    assert settings.has_adzuna_credentials


def test_get_env_default(monkeypatch):
    monkeypatch.delenv("JOBSEEKER_MISSING", raising=False)
    assert get_env("JOBSEEKER_MISSING", "fallback") == "fallback"
    assert not Settings(adzuna_app_id="only-id").has_adzuna_credentials
