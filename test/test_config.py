"""Tests for configuration parsing (config.py)"""

import pytest
from pydantic import ValidationError

from config import AppConfig, get_config


class TestAppConfig:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv('OPENAI_MODEL', raising=False)
        config = AppConfig(_env_file=None)
        assert config.openai_model == "gpt-4o-mini-search-preview"
        assert config.grounding_country == "NP"
        assert config.grounding_timezone == "Asia/Kathmandu"

    def test_bool_strings_parsed(self, monkeypatch):
        monkeypatch.setenv('HTTPS_ENABLED', 'off')
        monkeypatch.setenv('FLASK_DEBUG', 'yes')
        monkeypatch.setenv('RATE_LIMIT_ENABLED', 'false')
        config = AppConfig(_env_file=None)
        assert config.https_enabled is False
        assert config.flask_debug is True
        assert config.rate_limit_enabled is False

    def test_cors_origins_from_string(self):
        config = AppConfig(_env_file=None, cors_origins='http://a.test, http://b.test')
        assert config.cors_origins == ['http://a.test', 'http://b.test']

    def test_search_context_size_checked(self):
        with pytest.raises(ValidationError):
            AppConfig(_env_file=None, search_context_size='huge')

    def test_missing_openai_key_reported(self):
        config = AppConfig(_env_file=None, openai_api_key=None)
        assert config.validate_required_keys() == ["OPENAI_API_KEY"]

    def test_testing_flag_from_conftest(self):
        assert get_config().testing is True
