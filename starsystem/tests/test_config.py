import pytest

from starsystem.config import DEFAULT_MAX_STEPS, G_DEFAULT, load_settings
from starsystem.errors import ConfigurationError


def test_defaults_without_environment():
    settings = load_settings({})
    assert settings.gravitational_constant == G_DEFAULT
    assert settings.step_size == 1.0
    assert settings.workers is None
    assert settings.log_level == "INFO"
    assert settings.max_steps == DEFAULT_MAX_STEPS


def test_environment_overrides():
    settings = load_settings(
        {
            "STARSYSTEM_G": "1.5",
            "STARSYSTEM_STEP_SIZE": "3600",
            "STARSYSTEM_WORKERS": "4",
            "STARSYSTEM_LOG_LEVEL": "debug",
            "STARSYSTEM_CORS_ORIGINS": "http://a.test, http://b.test",
            "UNRELATED": "ignored",
        }
    )
    assert settings.gravitational_constant == 1.5
    assert settings.step_size == 3600.0
    assert settings.workers == 4
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


@pytest.mark.parametrize(
    "key, value",
    [
        ("STARSYSTEM_G", "-1"),
        ("STARSYSTEM_STEP_SIZE", "0"),
        ("STARSYSTEM_WORKERS", "0"),
        ("STARSYSTEM_LOG_LEVEL", "loud"),
        ("STARSYSTEM_MAX_STEPS", "many"),
    ],
)
def test_invalid_environment_rejected(key, value):
    with pytest.raises(ConfigurationError):
        load_settings({key: value})
