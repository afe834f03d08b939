"""Unit tests for configuration loading and database URL building."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from retail_api.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    CORSConfig,
    DatabaseConfig,
)
from retail_api.runtime.config.config_template import (
    load_templated_yaml,
    substitute_env_vars,
)
from retail_api.runtime.context import get_config, with_context
from retail_api.runtime.settings import EnvironmentVariables

CONFIG_YAML = Path(__file__).resolve().parents[3] / "config.yaml"


class TestSubstituteEnvVars:
    """Placeholder substitution in config templates."""

    def test_default_used_when_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("host: ${DB_HOST:-localhost}") == "host: localhost"

    def test_environment_value_wins(self):
        with patch.dict(os.environ, {"DB_HOST": "db.internal"}, clear=True):
            assert substitute_env_vars("host: ${DB_HOST:-localhost}") == "host: db.internal"

    def test_empty_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("password: ${DB_PASSWORD:-}") == "password: "

    def test_required_variable_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="DB_HOST not set"):
                substitute_env_vars("${DB_HOST}")

    def test_required_variable_custom_message(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="needed for production"):
                substitute_env_vars("${DB_PASSWORD:?needed for production}")


class TestLoadTemplatedYaml:
    """The shipped config.yaml and its environment defaults."""

    def test_defaults_for_local_development(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(CONFIG_YAML)

        assert config.app.environment == "development"
        assert config.app.port == 3000
        assert config.app.cors.origins == ["*"]
        assert config.database.url is None
        assert config.database.host == "localhost"
        assert config.database.port == 5432
        assert config.database.name == "online_retail_db"
        assert config.database.user == "postgres"
        assert config.database.password is None
        assert config.database.pool_size == 20
        assert config.database.pool_timeout == 2
        assert config.logging.file is None

    def test_environment_overrides(self):
        env = {
            "PORT": "8080",
            "DB_HOST": "db",
            "DB_PORT": "6543",
            "DB_NAME": "retail",
            "DB_USER": "retail_app",
            "DB_PASSWORD": "s3cret",
            "CORS_ORIGINS": "http://a.test, http://b.test",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(CONFIG_YAML)

        assert config.app.port == 8080
        assert config.app.cors.origins == ["http://a.test", "http://b.test"]
        assert _rendered(config.database) == (
            "postgresql+psycopg2://retail_app:s3cret@db:6543/retail"
        )

    def test_dotenv_file_is_loaded(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("DB_NAME=from_dotenv\n")

        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(CONFIG_YAML, env_file=env_file)

        assert config.database.name == "from_dotenv"

    def test_invalid_configuration(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("config:\n  app:\n    port: not-a-port\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        with pytest.raises(ValueError):
            load_templated_yaml(path)


def _rendered(config: DatabaseConfig) -> str:
    return config.sqlalchemy_url().render_as_string(hide_password=False)


class TestDatabaseConfig:
    """Connection URL building."""

    def test_url_from_parts(self):
        config = DatabaseConfig(
            host="localhost", port=5432, name="online_retail_db", user="postgres",
            password="password_here",
        )
        assert _rendered(config) == (
            "postgresql+psycopg2://postgres:password_here"
            "@localhost:5432/online_retail_db"
        )
        assert config.is_sqlite is False

    def test_password_is_escaped(self):
        config = DatabaseConfig(password="p@ss:word")
        url = config.sqlalchemy_url()
        assert url.password == "p@ss:word"
        assert "p%40ss%3Aword" in _rendered(config)

    def test_explicit_url_wins(self):
        config = DatabaseConfig(url="sqlite:///./retail.db", host="ignored")
        assert _rendered(config) == "sqlite:///./retail.db"
        assert config.is_sqlite is True

    def test_default_driver_is_psycopg2(self):
        assert DatabaseConfig().sqlalchemy_url().drivername == "postgresql+psycopg2"

    def test_dump_has_no_rendered_url(self):
        dumped = ConfigData(database=DatabaseConfig(password="s3cret")).model_dump()
        assert "connection_string" not in dumped["database"]

    def test_empty_strings_mean_unset(self):
        config = DatabaseConfig(url="", password="")
        assert config.url is None
        assert config.password is None
        assert _rendered(config) == (
            "postgresql+psycopg2://postgres@localhost:5432/online_retail_db"
        )


class TestContext:
    """Context-scoped configuration overrides."""

    def test_with_context_restores_previous_config(self):
        original = get_config()
        override = ConfigData(app=AppConfig(environment="production", port=9000))

        with with_context(override):
            assert get_config().app.environment == "production"
            assert get_config().app.port == 9000

        assert get_config() is original

    def test_with_context_rejects_other_types(self):
        with pytest.raises(ValueError, match="must be ConfigData"):
            with with_context({"app": {}}):
                pass

    def test_cors_origins_accepts_list(self):
        assert CORSConfig(origins=["http://a.test"]).origins == ["http://a.test"]


class TestEnvironmentVariables:
    """Bootstrap settings."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            env = EnvironmentVariables(_env_file=None)
        assert env.config_file == Path("config.yaml")
        assert env.env_file == Path(".env")

    def test_config_file_override(self):
        with patch.dict(os.environ, {"APP_CONFIG_FILE": "/etc/retail/config.yaml"}, clear=True):
            env = EnvironmentVariables(_env_file=None)
        assert env.config_file == Path("/etc/retail/config.yaml")
