"""
Models for the resolved deployment configuration.
"""
from typing import Dict
from urllib.parse import quote
from pydantic import BaseModel, ConfigDict, Field

MIN_PASSWORD_LENGTH = 8

# Order in which keys are written to and expected in the configuration file.
CONFIG_KEYS = [
    "POSTGRES_DB",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "DATABASE_URL",
    "PORT",
    "NODE_ENV",
    "FRONTEND_URL",
    "CONTAINER_DB",
    "CONTAINER_BACKEND",
    "CONTAINER_FRONTEND",
    "NETWORK_NAME",
    "VOLUME_NAME",
]


class DeploymentConfig(BaseModel):
    """
    The single source of truth for one deployment target.

    Instances are immutable; reconfiguration produces a new instance.
    The connection string is always derived from its components.
    """
    model_config = ConfigDict(frozen=True)

    db_name: str = "bmi_health_db"
    db_user: str = "bmi_user"
    db_password: str = Field(min_length=MIN_PASSWORD_LENGTH, repr=False)
    db_port: int = 5432
    port: int = 3000
    node_env: str = "production"
    frontend_url: str = "http://localhost"

    container_db: str = "postgres-db"
    container_backend: str = "backend-api"
    container_frontend: str = "frontend-web"
    network_name: str = "bmi-health-network"
    volume_name: str = "postgres-data"

    @property
    def database_url(self) -> str:
        """
        Connection string for the backend, addressing the database by its container name.

        User and password are percent-encoded so reserved characters cannot break the URL.
        """
        return (
            f"postgresql://{quote(self.db_user, safe='')}:{quote(self.db_password, safe='')}"
            f"@{self.container_db}:{self.db_port}/{self.db_name}"
        )

    @property
    def container_names(self) -> Dict[str, str]:
        """Container name per tier."""
        return {
            "database": self.container_db,
            "backend": self.container_backend,
            "frontend": self.container_frontend,
        }

    def to_env(self) -> Dict[str, str]:
        """
        Flattens the configuration into the key/value pairs of the configuration file.
        """
        return {
            "POSTGRES_DB": self.db_name,
            "POSTGRES_USER": self.db_user,
            "POSTGRES_PASSWORD": self.db_password,
            "DATABASE_URL": self.database_url,
            "PORT": str(self.port),
            "NODE_ENV": self.node_env,
            "FRONTEND_URL": self.frontend_url,
            "CONTAINER_DB": self.container_db,
            "CONTAINER_BACKEND": self.container_backend,
            "CONTAINER_FRONTEND": self.container_frontend,
            "NETWORK_NAME": self.network_name,
            "VOLUME_NAME": self.volume_name,
        }

    @classmethod
    def from_env(cls, values: Dict[str, str]) -> "DeploymentConfig":
        """
        Builds a configuration from configuration file values.

        ``DATABASE_URL`` is not read back: it is re-derived from its components.
        The database port is taken from it when present so a non-default port survives a reload.

        :param values: Key/value pairs as read from the file.
        :raises KeyError: If a required key is absent.
        """
        db_port = 5432
        url = values.get("DATABASE_URL") or ""
        tail = url.rsplit("@", 1)[-1]
        if ":" in tail and "/" in tail:
            port_text = tail.split(":", 1)[1].split("/", 1)[0]
            if port_text.isdigit():
                db_port = int(port_text)

        return cls(
            db_name=values["POSTGRES_DB"],
            db_user=values["POSTGRES_USER"],
            db_password=values["POSTGRES_PASSWORD"],
            db_port=db_port,
            port=int(values["PORT"]),
            node_env=values["NODE_ENV"],
            frontend_url=values["FRONTEND_URL"],
            container_db=values["CONTAINER_DB"],
            container_backend=values["CONTAINER_BACKEND"],
            container_frontend=values["CONTAINER_FRONTEND"],
            network_name=values["NETWORK_NAME"],
            volume_name=values["VOLUME_NAME"],
        )
