"""
Unit Tests for environment configuration
"""

from zoneinfo import ZoneInfo

import pytest

from zpool_status_exporter.config import ExporterConfig, get_config, reset_config


class TestDefaults:

    def test_defaults(self):
        config = ExporterConfig()
        assert config.log_level == "INFO"
        assert config.host == "127.0.0.1"
        assert config.port == 8976
        assert config.basic_auth_keys_file == ""
        assert config.server.allow_root is False
        assert config.zpool_command == "zpool"
        assert config.command_timeout == 30
        assert config.tzinfo is None

    def test_global_instance_is_cached(self):
        assert get_config() is get_config()
        first = get_config()
        reset_config()
        assert get_config() is not first


class TestEnvironment:

    def test_plain_variables(self, monkeypatch):
        monkeypatch.setenv("PORT", "9100")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ZPOOL_COMMAND", "/usr/sbin/zpool")

        config = ExporterConfig()

        assert config.port == 9100
        assert config.log_level == "DEBUG"
        assert config.zpool_command == "/usr/sbin/zpool"

    def test_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("ZPOOL_EXPORTER_HOST", "0.0.0.0")
        monkeypatch.setenv("ZPOOL_EXPORTER_COMMAND_TIMEOUT", "5")

        config = ExporterConfig()

        assert config.host == "0.0.0.0"
        assert config.command_timeout == 5

    def test_unprefixed_variable_wins(self, monkeypatch):
        monkeypatch.setenv("PORT", "9100")
        monkeypatch.setenv("ZPOOL_EXPORTER_PORT", "9200")
        assert ExporterConfig().port == 9100

    @pytest.mark.parametrize("value,expected", [
        ("true", True), ("1", True), ("yes", True), ("off", False), ("", False),
    ])
    def test_allow_root(self, monkeypatch, value, expected):
        monkeypatch.setenv("ALLOW_ROOT", value)
        assert ExporterConfig().server.allow_root is expected

    def test_timezone(self, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "UTC")
        assert ExporterConfig().tzinfo == ZoneInfo("UTC")


class TestValidation:

    def test_invalid_integer_uses_default(self, monkeypatch, caplog):
        monkeypatch.setenv("PORT", "eighty")
        assert ExporterConfig().port == 8976
        assert "Invalid integer value for PORT" in caplog.text

    def test_out_of_range_port(self, monkeypatch):
        monkeypatch.setenv("PORT", "70000")
        assert ExporterConfig().port == 8976

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert ExporterConfig().log_level == "INFO"

    def test_non_positive_timeout(self, monkeypatch):
        monkeypatch.setenv("COMMAND_TIMEOUT", "0")
        assert ExporterConfig().command_timeout == 30

    def test_unknown_timezone(self, monkeypatch, caplog):
        monkeypatch.setenv("TIMEZONE", "Mars/Olympus_Mons")
        config = ExporterConfig()
        assert config.tzinfo is None
        assert "Unknown timezone" in caplog.text


class TestListenAddress:

    @pytest.mark.parametrize("address,host,port", [
        ("127.0.0.1:9000", "127.0.0.1", 9000),
        (":9000", "0.0.0.0", 9000),
        ("[::1]:9000", "::1", 9000),
        ("exporter.local:8976", "exporter.local", 8976),
    ])
    def test_valid(self, address, host, port):
        config = ExporterConfig()
        config.apply_listen_address(address)
        assert (config.host, config.port) == (host, port)

    @pytest.mark.parametrize("address", ["127.0.0.1", "host:port", "host:0", "host:65536"])
    def test_invalid(self, address):
        with pytest.raises(ValueError):
            ExporterConfig().apply_listen_address(address)


def test_summary_hides_keys_path(monkeypatch):
    monkeypatch.setenv("BASIC_AUTH_KEYS_FILE", "/etc/zpool-exporter/keys")
    summary = ExporterConfig().get_summary()
    assert summary["server"]["basic_auth"] is True
    assert summary["zpool"]["timezone"] == "local"
    assert "/etc/zpool-exporter/keys" not in str(summary)
