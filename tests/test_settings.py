from decimal import Decimal

import pytest
from pydantic import ValidationError

from settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.min_bet == 50
    assert settings.max_purchase == 10_000_000
    assert settings.house_fee_rate == Decimal("0.02")
    assert settings.loss_mistake_threshold == settings.max_mistakes == 12
    assert settings.pair_count == 6


def test_env_override(monkeypatch):
    monkeypatch.setenv("HERO_MATCH_MIN_BET", "100")
    monkeypatch.setenv("HERO_MATCH_RESOLUTION_DELAY_MS", "900")
    settings = Settings(_env_file=None)
    assert settings.min_bet == 100
    assert settings.resolution_delay_ms == 900


@pytest.mark.parametrize("overrides", [
    {"min_bet": 100, "max_bet": 50},
    {"pair_count": 0},
    {"pair_count": 7},
    {"log_capacity": 0},
    {"house_fee_rate": Decimal("1.5")},
    {"loss_mistake_threshold": 0},
])
def test_inconsistent_settings_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
