"""Tests for configuration defaults and validation"""
import pytest

from progression import config
from progression.exceptions import ConfigurationError


class TestConfigDefaults:

    def test_storage_filename(self):
        assert config.storage_filename("@gamification_data") == "gamification_data.json"
        assert config.storage_filename("plain") == "plain.json"

    def test_default_rules(self):
        assert config.DAILY_CHALLENGE_COUNT == 3
        assert config.STREAK_BONUS_THRESHOLD == 7
        assert config.STREAK_BONUS_MULTIPLIER == 1.5

    def test_valid_configuration(self):
        config.validate_config()


class TestConfigValidation:

    @pytest.mark.parametrize("name,value,config_key", [
        ("STORAGE_KEY", "@", "PROGRESSION_STORAGE_KEY"),
        ("DAILY_CHALLENGE_COUNT", 0, "DAILY_CHALLENGE_COUNT"),
        ("STREAK_BONUS_THRESHOLD", 0, "STREAK_BONUS_THRESHOLD"),
        ("STREAK_BONUS_MULTIPLIER", 0.5, "STREAK_BONUS_MULTIPLIER"),
        ("LOG_LEVEL", "LOUD", "LOG_LEVEL"),
    ])
    def test_invalid_values_rejected(self, monkeypatch, name, value, config_key):
        """Test each bad value raises ConfigurationError naming its key"""
        monkeypatch.setattr(config, name, value)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == config_key
        assert exc_info.value.context == {"config_key": config_key}
        assert config_key in exc_info.value.message
