"""Tests for configuration loading."""

from stockbook.utils.config import AppConfig


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults_without_yaml(self, tmp_path):
        config = AppConfig(config_path=tmp_path / "missing.yml")

        assert config.storage.backend == "json"
        assert config.dashboard.recent_sales_limit == 5
        assert config.is_production is False

    def test_yaml_values(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("storage:\n  data_dir: /srv/stock\n  indent: null\nserver:\n  port: 9000\n")

        config = AppConfig(config_path=path)

        assert config.storage.data_dir == "/srv/stock"
        assert config.storage.indent is None
        assert config.server.port == 9000

    def test_empty_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("")

        assert AppConfig(config_path=path).logging.level == "INFO"

    def test_environment_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yml"
        path.write_text("storage:\n  data_dir: from-yaml\n")
        monkeypatch.setenv("DATA_DIR", "from-env")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PORT", "8123")
        monkeypatch.setenv("ENVIRONMENT", "production")

        config = AppConfig(config_path=path)

        assert config.storage.data_dir == "from-env"
        assert config.logging.level == "DEBUG"
        assert config.server.port == 8123
        assert config.is_production is True
