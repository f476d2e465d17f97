import pytest

from tgrelay.config import DEFAULT_TRUSTED_PATHS, Settings
from tgrelay.errors import ConfigError

BASE = {"TG_BOT_TOKEN": "123:abc", "TG_CHAT_ID": "-1001"}


def test_minimal_env():
    settings = Settings.from_env(BASE)

    assert settings.bot_token == "123:abc"
    assert settings.channel_id == "-1001"
    assert settings.store_enabled is False
    assert settings.trusted_paths == DEFAULT_TRUSTED_PATHS
    assert settings.http_timeout == 60.0


def test_full_env():
    env = dict(
        BASE,
        SUPABASE_URL="https://x.supabase.co",
        SUPABASE_ANON_KEY="anon",
        RATING_API_URL="https://rate.example.com/check",
        TRUSTED_PATHS="admin, /list ,",
        PUBLIC_BASE_URL="https://img.example.com/",
        HTTP_TIMEOUT="7.5",
        TASK_WORKERS="2",
        LOG_LEVEL="debug",
    )

    settings = Settings.from_env(env)

    assert settings.store_enabled is True
    assert settings.trusted_paths == ("/admin", "/list")
    assert settings.public_base_url == "https://img.example.com"
    assert settings.http_timeout == 7.5
    assert settings.task_workers == 2
    assert settings.log_level == "DEBUG"


def test_store_needs_both_values():
    assert Settings.from_env(dict(BASE, SUPABASE_URL="https://x.supabase.co")).store_enabled is False


@pytest.mark.parametrize("missing", ["TG_BOT_TOKEN", "TG_CHAT_ID"])
def test_missing_required_value(missing):
    env = dict(BASE)
    env[missing] = "  "

    with pytest.raises(ConfigError, match=missing):
        Settings.from_env(env)


def test_bad_number():
    with pytest.raises(ConfigError, match="HTTP_TIMEOUT"):
        Settings.from_env(dict(BASE, HTTP_TIMEOUT="soon"))
