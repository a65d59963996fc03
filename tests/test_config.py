import pytest
from pydantic import ValidationError

from symexpr.config import Settings, get_settings, reset_settings
from symexpr.equivalence import find_witnesses
from symexpr.expressions import var


@pytest.fixture
def fresh_settings(monkeypatch):
    yield monkeypatch
    monkeypatch.undo()
    reset_settings()


def test_defaults() -> None:
    settings = Settings()
    assert settings.witness_trials == 128
    assert settings.witness_bound == 5
    assert settings.witness_seed is None


def test_environment_overrides(fresh_settings) -> None:
    fresh_settings.setenv("SYMEXPR_WITNESS_TRIALS", "7")
    fresh_settings.setenv("SYMEXPR_WITNESS_SEED", "42")
    settings = reset_settings()
    assert settings.witness_trials == 7
    assert settings.witness_seed == 42
    assert get_settings() is settings


def test_invalid_values_are_rejected(fresh_settings) -> None:
    fresh_settings.setenv("SYMEXPR_WITNESS_BOUND", "0")
    with pytest.raises(ValidationError):
        reset_settings()


def test_witness_search_uses_configured_seed(fresh_settings) -> None:
    fresh_settings.setenv("SYMEXPR_WITNESS_SEED", "9")
    reset_settings()
    a, b = var("a"), var("b")
    first = find_witnesses(a * b, a + b)
    second = find_witnesses(a * b, a + b)
    assert first == second
