import json
from pathlib import Path

import config
from config import get_settings

CONFIG_JSON = Path(config.__file__).with_name("config.json")


def _settings():
    get_settings.cache_clear()
    return get_settings()


def test_defaults_from_config():
    data = json.loads(CONFIG_JSON.read_text())
    settings = _settings()
    assert settings.order_number_prefix == data["order_number_prefix"]
    assert settings.stock_alert_cooldown_secs == data["stock_alert_cooldown_secs"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ORDER_NUMBER_PREFIX", "ORD")
    monkeypatch.setenv("MAX_CART_LINES", "5")
    settings = _settings()
    assert settings.order_number_prefix == "ORD"
    assert settings.max_cart_lines == 5


def test_missing_key_uses_default(monkeypatch):
    original = CONFIG_JSON.read_text()
    monkeypatch.setattr(
        Path,
        "read_text",
        lambda self: json.dumps(
            {k: v for k, v in json.loads(original).items() if k != "max_line_quantity"}
        ),
    )
    assert _settings().max_line_quantity == 100
