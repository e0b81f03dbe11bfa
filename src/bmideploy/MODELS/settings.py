"""
Settings for the deployer itself, as opposed to the application it deploys.
"""
import os
from typing import Dict, Mapping, Optional
from pydantic import BaseModel

ENV_PREFIX = "BMIDEPLOY_"


class DeploySettings(BaseModel):
    """
    Paths, image names and timing knobs used by the deployment steps.

    Every field may be overridden with a ``BMIDEPLOY_<FIELD>`` environment variable.
    """
    project_root: str = "."
    env_file: str = "deployDocker/.env"
    backup_dir: str = "backups"

    # Images
    database_image: str = "postgres:15-alpine"
    backend_image: str = "bmi-backend:latest"
    frontend_image: str = "bmi-frontend:latest"
    backend_context: str = "backend"
    frontend_context: str = "frontend"
    init_scripts_dir: str = "database/migrations"

    # Networking
    public_port: int = 80
    probe_host: str = "localhost"

    # Timing
    metadata_timeout: float = 2.0
    probe_timeout: float = 5.0
    probe_attempts: int = 3
    grace_period: float = 3.0
    poll_attempts: int = 5
    poll_backoff: float = 1.0
    poll_backoff_max: float = 8.0

    @property
    def env_path(self) -> str:
        """Absolute path of the configuration file."""
        return os.path.abspath(os.path.join(self.project_root, self.env_file))

    @property
    def backup_path(self) -> str:
        return os.path.abspath(os.path.join(self.project_root, self.backup_dir))

    def resolve(self, relative: str) -> str:
        """
        Resolves a path relative to the project root.
        """
        return os.path.abspath(os.path.join(self.project_root, relative))

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "DeploySettings":
        """
        Builds settings from ``BMIDEPLOY_*`` environment variables.

        :param environ: Mapping to read from, defaults to ``os.environ``.
        :return: The settings, with defaults for anything not overridden.
        """
        environ = os.environ if environ is None else environ
        overrides: Dict[str, str] = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                overrides[name] = environ[key]
        return cls(**overrides)
