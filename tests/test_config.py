"""Tests for per-brand WordPress credential lookup."""

import pytest

from sitejob.config import get_wp_credentials


class TestGetWpCredentials:
    def test_known_brand_prefix(self, monkeypatch):
        monkeypatch.setenv("BLA_WP_BASE_URL", "https://bla.example/")
        monkeypatch.setenv("BLA_WP_USERNAME", "bot")
        monkeypatch.setenv("BLA_WP_APP_PASSWORD", "secret")

        creds = get_wp_credentials("bestlife")

        assert creds.base_url == "https://bla.example"
        assert creds.username == "bot"
        assert creds.app_password == "secret"

    def test_other_brand_uses_upper_cased_name(self, monkeypatch):
        monkeypatch.setenv("ACME_CO_WP_BASE_URL", "https://acme.example")
        monkeypatch.setenv("ACME_CO_WP_USERNAME", "u")
        monkeypatch.setenv("ACME_CO_WP_APP_PASSWORD", "p")
        assert get_wp_credentials("acme-co").base_url == "https://acme.example"

    def test_missing_variable_names_all_expected(self, monkeypatch):
        monkeypatch.setenv("LLIF_WP_BASE_URL", "https://llif.example")
        monkeypatch.delenv("LLIF_WP_USERNAME", raising=False)
        monkeypatch.delenv("LLIF_WP_APP_PASSWORD", raising=False)
        with pytest.raises(ValueError, match="LLIF_WP_USERNAME"):
            get_wp_credentials("llif")

    def test_blank_brand(self):
        with pytest.raises(ValueError):
            get_wp_credentials("  ")
