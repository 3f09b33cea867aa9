from pathlib import Path

import pytest

from healthcheck.settings import Settings

TEST_CONFIG_PATH = Path(__file__).parent / "config.test.toml"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings from the committed test config, without secrets."""
    return Settings(config_path=str(TEST_CONFIG_PATH), secrets_path="nonexistent.secrets.toml")
