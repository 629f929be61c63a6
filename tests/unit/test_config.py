import pytest

from txid_zkp.config import ServerConfig


def test_defaults(monkeypatch):
    for name in ("TXID_ZKP_HOST", "TXID_ZKP_PORT", "TXID_ZKP_CORS_ORIGINS", "TXID_ZKP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config = ServerConfig.from_env()
    assert config == ServerConfig()
    assert (config.host, config.port, config.cors_origins) == ("127.0.0.1", 5010, ["*"])


def test_from_env(monkeypatch):
    monkeypatch.setenv("TXID_ZKP_HOST", "0.0.0.0")
    monkeypatch.setenv("TXID_ZKP_PORT", "8080")
    monkeypatch.setenv("TXID_ZKP_CORS_ORIGINS", "http://localhost:3000, https://example.org")
    monkeypatch.setenv("TXID_ZKP_LOG_LEVEL", "debug")
    config = ServerConfig.from_env()
    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert config.cors_origins == ["http://localhost:3000", "https://example.org"]
    assert config.log_level == "DEBUG"


def test_bad_port(monkeypatch):
    monkeypatch.setenv("TXID_ZKP_PORT", "http")
    with pytest.raises(ValueError, match="TXID_ZKP_PORT"):
        ServerConfig.from_env()
