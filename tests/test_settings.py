"""Tests for bridggy/config/settings.py — Settings."""

from bridggy.config.settings import get_settings


class TestSettings:

    def test_defaults(self, override_settings):
        override_settings()
        s = get_settings()
        assert s.token == ""
        assert s.retry is True
        assert s.origin == ""
        assert s.proxy_domain == "bridggy.com"
        assert s.retry_delay == 2.0
        assert s.log_level == "INFO"

    def test_env_override(self, override_settings):
        override_settings(
            BRIDGGY_TOKEN="a.b.c",
            BRIDGGY_RETRY="false",
            BRIDGGY_RETRY_DELAY="0.5",
            BRIDGGY_ORIGIN="https://app.example.com",
        )
        s = get_settings()
        assert s.token == "a.b.c"
        assert s.retry is False
        assert s.retry_delay == 0.5
        assert s.origin == "https://app.example.com"

    def test_unprefixed_env_ignored(self, override_settings):
        override_settings(TOKEN="not-mine", RETRY_DELAY="9")
        s = get_settings()
        assert s.token == ""
        assert s.retry_delay == 2.0

    def test_cached(self, override_settings):
        override_settings()
        assert get_settings() is get_settings()
