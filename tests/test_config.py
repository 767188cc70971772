"""Tests for TOML configuration loading."""

import pytest

from shared.config import DecoderConfig, get_config


CONFIG_TOML = """
[global]
log_level = "DEBUG"
unknown_key = "ignored"

[number_theory]
prime_search_limit = 50
prime_index_method = "sieve"

[chronology]
astronomical_keywords = ["Eclipse"]

[match_index]
source_url = "https://example.test/data.csv"
max_retries = 5
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML, encoding="utf-8")
    return path


def test_defaults():
    config = DecoderConfig()
    assert config.number_theory.prime_search_limit == 1000
    assert config.number_theory.palindrome_search_limit == 2000
    assert config.number_theory.prime_index_method == "trial"
    assert config.chronology.astronomical_keywords == ["Eclipse", "Moon"]
    assert config.match_index.source_url.startswith("https://docs.google.com/")


def test_load_overrides_and_keeps_defaults(config_file):
    config = DecoderConfig.load(config_file)
    assert config.global_settings.log_level == "DEBUG"
    assert config.number_theory.prime_search_limit == 50
    assert config.number_theory.triangular_search_limit == 1000
    assert config.number_theory.prime_index_method == "sieve"
    assert config.chronology.astronomical_keywords == ["Eclipse"]
    assert config.chronology.astronomical_entity_type == "Astronomical"
    assert config.match_index.max_retries == 5


def test_missing_explicit_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        DecoderConfig.load(tmp_path / "absent.toml")


def test_to_dict(config_file):
    data = DecoderConfig.load(config_file).to_dict()
    assert data["number_theory"]["prime_search_limit"] == 50
    assert "unknown_key" not in data["global_settings"]


def test_get_config_caches(config_file):
    first = get_config(config_file)
    assert get_config() is first
