"""Tests for configuration loading."""

import pytest

from aqara_mcp.config import AqaraConfig, get_base_url, validate_environment
from aqara_mcp.infrastructure.errors import AqaraConfigurationError

FULL_ENV = {
    "AQARA_APP_ID": "app",
    "AQARA_APP_KEY": "key",
    "AQARA_KEY_ID": "K.1",
    "AQARA_APP_SECRET": "secret",
}


class TestBaseUrl:
    """Tests for region resolution."""

    @pytest.mark.parametrize(
        "region,expected",
        [
            ("cn", "https://open-cn.aqara.com"),
            ("usa", "https://open-usa.aqara.com"),
            ("eu", "https://open-ger.aqara.com"),
            ("kr", "https://open-kr.aqara.com"),
            ("ru", "https://open-ru.aqara.com"),
            ("sg", "https://open-sg.aqara.com"),
        ],
    )
    def test_known_regions(self, region, expected):
        """Each region maps to its endpoint."""
        assert get_base_url(region) == expected

    def test_region_is_case_insensitive(self):
        assert get_base_url("EU") == "https://open-ger.aqara.com"

    def test_unknown_region_falls_back_to_usa(self):
        """Unknown or missing regions use the USA endpoint."""
        assert get_base_url("mars") == "https://open-usa.aqara.com"
        assert get_base_url(None) == "https://open-usa.aqara.com"


class TestValidateEnvironment:
    """Tests for validate_environment."""

    def test_all_present(self):
        """No error when every required variable is set."""
        validate_environment(FULL_ENV)

    def test_lists_only_missing_variables(self):
        """The error names exactly the missing variables."""
        env = {"AQARA_APP_ID": "app", "AQARA_KEY_ID": "K.1"}

        with pytest.raises(AqaraConfigurationError) as exc_info:
            validate_environment(env)

        assert exc_info.value.missing == ["AQARA_APP_KEY", "AQARA_APP_SECRET"]
        assert "AQARA_APP_KEY, AQARA_APP_SECRET" in str(exc_info.value)
        assert "AQARA_APP_ID" not in str(exc_info.value)

    def test_empty_value_counts_as_missing(self):
        env = {**FULL_ENV, "AQARA_APP_SECRET": ""}

        with pytest.raises(AqaraConfigurationError) as exc_info:
            validate_environment(env)

        assert exc_info.value.missing == ["AQARA_APP_SECRET"]


class TestAqaraConfig:
    """Tests for AqaraConfig."""

    def test_from_env_defaults(self):
        """Region defaults to usa and no access token is set."""
        config = AqaraConfig.from_env(FULL_ENV)

        assert config.app_id == "app"
        assert config.app_key == "key"
        assert config.key_id == "K.1"
        assert config.app_secret == "secret"
        assert config.region == "usa"
        assert config.access_token is None
        assert config.base_url == "https://open-usa.aqara.com"

    def test_from_env_with_optional_values(self):
        env = {**FULL_ENV, "AQARA_REGION": "eu", "AQARA_ACCESS_TOKEN": "tok"}

        config = AqaraConfig.from_env(env)

        assert config.region == "eu"
        assert config.access_token == "tok"
        assert config.base_url == "https://open-ger.aqara.com"

    def test_from_env_empty_token_is_none(self):
        config = AqaraConfig.from_env({**FULL_ENV, "AQARA_ACCESS_TOKEN": ""})

        assert config.access_token is None

    def test_from_env_unknown_region(self):
        """An unknown region is kept but resolves to the USA endpoint."""
        config = AqaraConfig.from_env({**FULL_ENV, "AQARA_REGION": "mars"})

        assert config.region == "mars"
        assert config.base_url == "https://open-usa.aqara.com"

    def test_from_env_missing(self):
        with pytest.raises(AqaraConfigurationError):
            AqaraConfig.from_env({})

    def test_secrets_hidden_from_repr(self, config_with_token):
        """Secret and token never show up in the repr."""
        text = repr(config_with_token)

        assert "test-secret" not in text
        assert "AbCdEf123" not in text

    def test_config_is_immutable(self, config):
        with pytest.raises(Exception):
            config.region = "cn"
