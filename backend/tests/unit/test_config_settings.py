"""Unit tests for application settings configuration."""

from pathlib import Path

from portfolio.config import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_auto_without_credentials_runs_local_only():
    settings = _settings(remote_backend="auto", supabase_url="", supabase_key="", database_url="")
    assert settings.resolved_remote_backend() == "none"


def test_auto_prefers_supabase_over_database_url():
    settings = _settings(
        remote_backend="auto",
        supabase_url="https://abc.supabase.co",
        supabase_key="anon-key",
        database_url="sqlite:///./portfolio.db",
    )
    assert settings.resolved_remote_backend() == "postgrest"


def test_auto_uses_sql_when_only_database_url_is_set():
    settings = _settings(
        remote_backend="auto", supabase_url="", supabase_key="", database_url="sqlite:///./portfolio.db",
    )
    assert settings.resolved_remote_backend() == "sql"


def test_placeholder_supabase_credentials_count_as_unconfigured():
    settings = _settings(
        remote_backend="auto",
        supabase_url="https://your-project.supabase.co",
        supabase_key="your-anon-key",
        database_url="",
    )
    assert settings.supabase_configured is False
    assert settings.resolved_remote_backend() == "none"


def test_explicit_backend_choice_is_respected():
    settings = _settings(remote_backend="SQL", supabase_url="https://abc.supabase.co", supabase_key="k")
    assert settings.resolved_remote_backend() == "sql"


def test_unknown_backend_choice_falls_back_to_auto():
    settings = _settings(remote_backend="mongo", supabase_url="", supabase_key="", database_url="")
    assert settings.resolved_remote_backend() == "none"
