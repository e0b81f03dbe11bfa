"""
Persistence of the deployment configuration as a key/value file.
"""
import os
import re
from typing import Callable, Optional
from jinja2 import Environment
from pydantic import ValidationError
import click

from ..errors import ConfigError
from ..MODELS.deployment_config import DeploymentConfig, CONFIG_KEYS
from ..PARSERS.env_parser import EnvParser
from ..UTILS.prompter import Prompter, ClickPrompter

ENV_TEMPLATE = """\
# PostgreSQL Database Configuration
POSTGRES_DB={{ env.POSTGRES_DB | env_value }}
POSTGRES_USER={{ env.POSTGRES_USER | env_value }}
POSTGRES_PASSWORD={{ env.POSTGRES_PASSWORD | env_value }}

# Backend Database Connection
DATABASE_URL={{ env.DATABASE_URL | env_value }}

# Backend Server Configuration
PORT={{ env.PORT | env_value }}
NODE_ENV={{ env.NODE_ENV | env_value }}

# CORS Configuration
FRONTEND_URL={{ env.FRONTEND_URL | env_value }}

# Container Names
CONTAINER_DB={{ env.CONTAINER_DB | env_value }}
CONTAINER_BACKEND={{ env.CONTAINER_BACKEND | env_value }}
CONTAINER_FRONTEND={{ env.CONTAINER_FRONTEND | env_value }}

# Docker Network
NETWORK_NAME={{ env.NETWORK_NAME | env_value }}

# Docker Volume
VOLUME_NAME={{ env.VOLUME_NAME | env_value }}
"""

_NEEDS_QUOTES = re.compile(r"[\s#'\"\\]")


def env_value(value: str) -> str:
    """
    Formats a value for a .env line, double-quoting it only when it contains
    whitespace, quotes, backslashes or a comment marker.
    """
    value = str(value)
    if not _NEEDS_QUOTES.search(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class ConfigMaterializer:
    """
    Writes, loads and reuses the configuration file.
    """
    def __init__(self, prompter: Optional[Prompter] = None):
        self.prompter = prompter or ClickPrompter()
        environment = Environment(keep_trailing_newline=True, autoescape=False)
        environment.filters["env_value"] = env_value
        self.template = environment.from_string(ENV_TEMPLATE)

    def render(self, config: DeploymentConfig) -> str:
        """
        Renders the file content for a configuration.
        """
        return self.template.render(env=config.to_env())

    def materialize(self, path: str, config: DeploymentConfig):
        """
        Writes every configuration key, including the derived connection string, to ``path``.

        The file holds the database password, so it is created readable by the owner only.

        :param path: Target file.
        :param config: Configuration to persist.
        :raises ConfigError: If the directory or file cannot be written.
        """
        directory = os.path.dirname(path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(self.render(config))
        except OSError as e:
            raise ConfigError(f"Cannot write configuration file {path}: {e}") from e

    @staticmethod
    def load(path: str) -> DeploymentConfig:
        """
        Reads a configuration file.

        :raises ConfigError: If the file does not exist or lacks required keys.
        """
        if not os.path.exists(path):
            raise ConfigError(f"Configuration file {path} not found. Run the deployment first.")

        values = EnvParser.parse(path)
        required = [key for key in CONFIG_KEYS if key != "DATABASE_URL"]
        missing = EnvParser.missing_keys(values, required)
        if missing:
            raise ConfigError(f"Configuration file {path} is missing: {', '.join(missing)}")
        try:
            return DeploymentConfig.from_env(values)
        except (ValidationError, ValueError) as e:
            raise ConfigError(f"Configuration file {path} is invalid: {e}") from e

    def prepare(self, path: str, resolve: Callable[[], DeploymentConfig]) -> DeploymentConfig:
        """
        Reuses the existing configuration or replaces it with a freshly resolved one.
        Old and new configurations are never merged.

        :param path: Configuration file.
        :param resolve: Collects a new configuration when one is needed.
        :return: The configuration that later steps must use.
        """
        if os.path.exists(path):
            click.secho("Configuration file already exists", fg="yellow")
            if self.prompter.confirm("Use existing configuration?", default=True):
                click.echo("Using existing configuration file")
                return self.load(path)
            try:
                os.remove(path)
            except OSError as e:
                raise ConfigError(f"Cannot remove configuration file {path}: {e}") from e

        click.echo("Creating configuration file...")
        click.echo("")
        config = resolve()
        self.materialize(path, config)

        click.echo("")
        click.secho("✓ Configuration file created", fg="green")
        click.echo("")
        click.echo("Configuration:")
        click.echo(f"  Database: {config.db_name}")
        click.echo(f"  User: {config.db_user}")
        click.echo(f"  Frontend URL: {config.frontend_url}")
        click.echo("")
        return config
