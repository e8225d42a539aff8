"""Tests for codec configuration."""
import pytest
from pydantic import ValidationError

from tagtree.config import CodecConfig, GzipMode
from tagtree.core.constants import EndiannessType


@pytest.mark.unit
def test_defaults_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TAGTREE_ENDIANNESS", "TAGTREE_GZIP", "LOG_LEVEL", "TAGTREE_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)

    config = CodecConfig.from_env()

    assert config.endianness is EndiannessType.BIG
    assert config.gzip is GzipMode.AUTO
    assert config.log_level == "INFO"
    assert config.log_json is False


@pytest.mark.unit
def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TAGTREE_ENDIANNESS", "LITTLE")
    monkeypatch.setenv("TAGTREE_GZIP", "never")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("TAGTREE_LOG_JSON", "true")

    config = CodecConfig.from_env()

    assert config.endianness is EndiannessType.LITTLE
    assert config.gzip is GzipMode.NEVER
    assert config.log_level == "DEBUG"
    assert config.log_json is True


@pytest.mark.unit
def test_invalid_endianness(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TAGTREE_ENDIANNESS", "middle")
    with pytest.raises(ValidationError):
        CodecConfig.from_env()


@pytest.mark.unit
def test_invalid_values_rejected() -> None:
    with pytest.raises(ValidationError):
        CodecConfig(gzip="sometimes")
    with pytest.raises(ValidationError):
        CodecConfig(log_level="LOUD")


@pytest.mark.unit
def test_endianness_parse() -> None:
    assert EndiannessType.parse("big") is EndiannessType.BIG
    assert EndiannessType.parse(EndiannessType.LITTLE) is EndiannessType.LITTLE
    with pytest.raises(ValueError, match="Invalid endianness"):
        EndiannessType.parse("pdp")
