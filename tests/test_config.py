from __future__ import annotations

import pytest

from cafeteria.api.utils import parse_stats_filter
from cafeteria.core.config import Settings


def test_non_dev_env_rejects_insecure_defaults():
    with pytest.raises(ValueError) as exc:
        Settings(env="prod", admin_password=None)

    assert "CAFE_ADMIN_PASSWORD" in str(exc.value)
    assert "CAFE_ADMIN_COOKIE_VALUE" in str(exc.value)

    settings = Settings(env="prod", admin_password="s3cret", admin_cookie_value="a-long-random-value")
    assert settings.admin_cookie_name == "admin_session"


def test_settings_read_prefixed_env(monkeypatch):
    monkeypatch.setenv("CAFE_STATS_TIMEZONE", "America/Santiago")
    monkeypatch.setenv("CAFE_ADMIN_COOKIE_MAX_AGE", "60")

    settings = Settings()

    assert settings.stats_timezone == "America/Santiago"
    assert settings.admin_cookie_max_age == 60


def test_parse_stats_filter_treats_blank_values_as_absent():
    stats_filter = parse_stats_filter("", " ", None)

    assert stats_filter.status is None
    assert stats_filter.day is None
    assert stats_filter.product_id is None

    parsed = parse_stats_filter("2024-01-01", "completed", "3")
    assert parsed.as_dict() == {"status": "completed", "date": "2024-01-01", "productId": 3}
