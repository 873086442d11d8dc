import pytest

from pegasus import config
from pegasus.models import Config, GeneralConfig, LLMConfig


def test_load_default_config_when_missing(config_path):
    cfg = config.load_config()
    assert isinstance(cfg, Config)
    assert cfg.llm_url == "http://127.0.0.1:8080"
    assert cfg.custom_dictionary_path == ""
    assert not config_path.exists()


def test_save_and_load_config(config_path):
    cfg = Config(
        llm=LLMConfig(url="http://llm.local:9000", model="llama3.2", api_key="secret"),
        general=GeneralConfig(custom_dictionary_path="/tmp/words.txt"),
    )
    config.save_config(cfg)

    loaded = config.load_config()
    assert loaded.llm_url == "http://llm.local:9000"
    assert loaded.llm_model == "llama3.2"
    assert loaded.llm_api_key == "secret"
    assert loaded.custom_dictionary_path == "/tmp/words.txt"


def test_absent_fields_fall_back_to_defaults_at_read_time(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[llm]\nmodel = \"qwen\"\n")

    cfg = config.load_config()
    assert cfg.llm.url is None
    assert cfg.llm_url == "http://127.0.0.1:8080"
    assert cfg.llm_model == "qwen"
    assert cfg.custom_dictionary_path == ""
    assert cfg.llm_timeout == 120.0
    assert cfg.probability_threshold == 0.5


def test_integer_values_are_accepted_for_numeric_keys(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[llm]\ntimeout = 30\n\n[general]\nprobability_threshold = 0.7\n")

    cfg = config.load_config()
    assert cfg.llm_timeout == 30.0
    assert cfg.probability_threshold == 0.7


def test_malformed_toml_raises_parse_error(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[llm\nurl = ")

    with pytest.raises(config.ConfigParseError) as excinfo:
        config.load_config()
    assert "Configuration file is invalid" in str(excinfo.value)


def test_unknown_key_raises_parse_error(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[llm]\nendpoint = \"http://x\"\n")

    with pytest.raises(config.ConfigParseError) as excinfo:
        config.load_config()
    assert "llm.endpoint" in str(excinfo.value)


def test_wrong_type_raises_parse_error(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[llm]\nurl = 8080\n")

    with pytest.raises(config.ConfigParseError):
        config.load_config()


def test_unreadable_config_raises_file_read_error(config_path):
    # A directory in place of the file cannot be read.
    config_path.mkdir(parents=True)

    with pytest.raises(config.ConfigFileReadError) as excinfo:
        config.load_config()
    assert isinstance(excinfo.value, config.ConfigError)


def test_reset_config_writes_defaults_and_creates_directories(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[llm]\nurl = \"http://elsewhere:1234\"\n")

    config.reset_config()

    content = config_path.read_text()
    assert "[llm]" in content
    assert 'url = "http://127.0.0.1:8080"' in content
    assert "[general]" in content
    assert 'custom_dictionary_path = ""' in content

    loaded = config.load_config()
    assert loaded.llm_url == "http://127.0.0.1:8080"
    assert loaded.custom_dictionary_path == ""


def test_loaded_config_is_immutable(config_path):
    cfg = config.load_config()
    try:
        cfg.llm = LLMConfig(url="http://other")  # type: ignore[misc]
    except AttributeError:
        pass
    else:
        raise AssertionError("Config should be frozen")
