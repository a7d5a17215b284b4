import pytest

from config.registry import SCORER_KEY, bind_model, get_model, is_bound, unbind_model
from config.settings import Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.DB_PATH.endswith(".db")
    assert (settings.SCORE_FLOOR, settings.SCORE_CEILING) == (70, 99)
    assert settings.HIGHLIGHT_QUOTE_CHARS == 100
    assert settings.SHARE_TTL_DAYS is None


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SCORING_SEED", "42")
    monkeypatch.setenv("SHARE_TOKEN_BYTES", "32")
    settings = Settings(_env_file=None)
    assert settings.SCORING_SEED == 42
    assert settings.SHARE_TOKEN_BYTES == 32


def test_registry_bind_and_retrieve():
    marker = object()
    bind_model(SCORER_KEY, lambda *_: marker)
    assert get_model(SCORER_KEY)() is marker
    unbind_model(SCORER_KEY)
    assert not is_bound(SCORER_KEY)
    with pytest.raises(KeyError):
        get_model(SCORER_KEY)
