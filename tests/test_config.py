import logging
from pathlib import Path

import pytest

from fastviterbi.config import AppConfig, DecodeLimits, load_config

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for suffix in (
        "ENV",
        "LOG_LEVEL",
        "DECODE_LOG_LEVEL",
        "DECODE_MAX_LAYERS",
        "DECODE_MAX_CANDIDATES",
        "API_HOST",
        "API_PORT",
        "API_WORKERS",
    ):
        monkeypatch.delenv(f"FASTVITERBI_{suffix}", raising=False)


def test_load_dev_profile() -> None:
    config = load_config("dev", config_dir=REPO_ROOT / "configs")

    assert config.env == "dev"
    assert config.log_level == "DEBUG"
    assert config.decode_log_level == "DEBUG"
    assert config.limits == DecodeLimits(max_layers=10_000, max_candidates=64)
    assert config.api_host == "127.0.0.1"
    assert config.api_port == 8000
    assert config.workers == 1


def test_env_override(monkeypatch) -> None:
    monkeypatch.setenv("FASTVITERBI_ENV", "prod")
    monkeypatch.setenv("FASTVITERBI_API_PORT", "9000")
    monkeypatch.setenv("FASTVITERBI_DECODE_MAX_LAYERS", "500")
    monkeypatch.setenv("FASTVITERBI_LOG_LEVEL", "info")

    config = load_config(config_dir=REPO_ROOT / "configs")

    assert config.env == "prod"
    assert config.api_port == 9000
    assert config.workers == 4
    assert config.log_level == "INFO"
    assert config.decode_log_level == "WARNING"
    assert config.limits == DecodeLimits(max_layers=500, max_candidates=32)


def test_missing_profile_uses_defaults(tmp_path: Path) -> None:
    config = load_config("staging", config_dir=tmp_path)

    assert config == AppConfig(env="staging")
    assert config.limits.max_candidates == 64


def test_partial_decode_table_keeps_other_limit_defaults(tmp_path: Path) -> None:
    (tmp_path / "dev.toml").write_text("[decode]\nmax_candidates = 8\n", encoding="utf-8")

    config = load_config("dev", config_dir=tmp_path)

    assert config.limits == DecodeLimits(max_layers=10_000, max_candidates=8)


def test_invalid_profile_values_raise(tmp_path: Path) -> None:
    (tmp_path / "dev.toml").write_text('[api]\nworkers = "many"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="dev.toml: api.workers must be an integer"):
        load_config("dev", config_dir=tmp_path)

    (tmp_path / "dev.toml").write_text("[decode]\nmax_layers = 0\n", encoding="utf-8")
    with pytest.raises(ValueError, match="dev.toml: decode.max_layers must be positive"):
        load_config("dev", config_dir=tmp_path)

    (tmp_path / "dev.toml").write_text("[api]\nhost = 8\n", encoding="utf-8")
    with pytest.raises(ValueError, match="api.host must be a string"):
        load_config("dev", config_dir=tmp_path)


def test_invalid_env_values_raise(monkeypatch) -> None:
    monkeypatch.setenv("FASTVITERBI_API_PORT", "http")
    with pytest.raises(ValueError, match="FASTVITERBI_API_PORT must be an integer"):
        load_config("prod", config_dir=REPO_ROOT / "configs")

    monkeypatch.delenv("FASTVITERBI_API_PORT")
    monkeypatch.setenv("FASTVITERBI_DECODE_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError, match="FASTVITERBI_DECODE_LOG_LEVEL must be one of"):
        load_config("prod", config_dir=REPO_ROOT / "configs")


def test_configure_logging_sets_decode_level() -> None:
    decode_logger = logging.getLogger("fastviterbi.decode")
    previous = decode_logger.level
    try:
        AppConfig(env="test", decode_log_level="ERROR").configure_logging(root=False)
        assert decode_logger.level == logging.ERROR
        assert not logging.getLogger("fastviterbi.decode.viterbi").isEnabledFor(logging.WARNING)
    finally:
        decode_logger.setLevel(previous)
