"""
Operations on an existing deployment: stop, restart, backup, cleanup, logs and status.
"""
import os
from datetime import datetime
from typing import Dict, List, Optional
import click

from ..errors import BackupError, UserAbort
from ..MODELS.deployment_config import DeploymentConfig
from ..MODELS.settings import DeploySettings
from ..RUNNERS.docker_client import DockerClient
from ..UTILS.prompter import Prompter, ClickPrompter
from .network_manager import NetworkManager
from .volume_manager import VolumeManager

# Start order; stopping walks it backwards
TIER_ORDER = ["database", "backend", "frontend"]


class LifecycleOperations:
    """
    Idempotent operations over the containers, network and volume named in the configuration.
    """
    def __init__(self,
                 config: DeploymentConfig,
                 settings: Optional[DeploySettings] = None,
                 docker: Optional[DockerClient] = None,
                 prompter: Optional[Prompter] = None):
        self.config = config
        self.settings = settings or DeploySettings()
        self.docker = docker or DockerClient()
        self.prompter = prompter or ClickPrompter()
        self.network_manager = NetworkManager(self.docker)
        self.volume_manager = VolumeManager(self.docker)

    def _names(self, tiers: Optional[List[str]] = None) -> List[str]:
        names = self.config.container_names
        return [names[tier] for tier in (tiers or TIER_ORDER)]

    def stop(self) -> List[str]:
        """
        Stops the containers, frontend first. Missing containers are skipped.

        :return: Names of the containers that were stopped.
        """
        stopped = []
        for name in reversed(self._names()):
            if not self.docker.container_exists(name):
                print(f"Container {name} not found, skipping")
                continue
            print(f"Stopping {name}...")
            self.docker.stop_container(name)
            stopped.append(name)
        click.secho("✓ Containers stopped", fg="green")
        return stopped

    def restart(self) -> List[str]:
        """
        Restarts the containers in dependency order. Missing containers are reported and skipped.

        :return: Names of the containers that were restarted.
        """
        restarted = []
        for name in self._names():
            if not self.docker.container_exists(name):
                click.secho(f"⚠️  Container {name} not found; run a deployment first", fg="yellow")
                continue
            print(f"Restarting {name}...")
            self.docker.restart_container(name)
            restarted.append(name)
        click.secho("✓ Containers restarted", fg="green")
        return restarted

    def backup(self, now: Optional[datetime] = None) -> str:
        """
        Dumps the database into a timestamped SQL file under the backup directory.
        The file is created readable by the owner only.

        :param now: Timestamp for the file name; the current time if omitted.
        :return: Path of the written dump.
        :raises CommandError: If pg_dump fails inside the database container.
        :raises BackupError: If the dump cannot be written.
        """
        config = self.config
        stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
        path = os.path.join(self.settings.backup_path, f"{config.db_name}_{stamp}.sql")

        print(f"Backing up database {config.db_name} from {config.container_db}...")
        dump = self.docker.exec_capture(
            config.container_db, ["pg_dump", "-U", config.db_user, config.db_name]
        )
        try:
            os.makedirs(self.settings.backup_path, exist_ok=True)
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(dump)
        except OSError as e:
            raise BackupError(f"Cannot write backup {path}: {e}") from e

        click.secho(f"✓ Backup written to {path}", fg="green")
        return path

    def cleanup(self) -> Dict[str, bool]:
        """
        Removes the containers and network, and the volume after a second confirmation.

        :return: What was removed, keyed by resource kind.
        :raises UserAbort: If the operator declines the cleanup.
        """
        config = self.config
        click.secho("This removes all BMI Health Tracker containers and the network.", fg="yellow")
        if not self.prompter.confirm("Continue with cleanup?", default=False):
            raise UserAbort("Cleanup cancelled.")

        containers_removed = False
        for name in reversed(self._names()):
            if self.docker.remove_container(name):
                containers_removed = True
                print(f"Removed container: {name}")
        network_removed = self.network_manager.remove(config.network_name)

        volume_removed = False
        click.secho(
            f"Removing volume {config.volume_name} permanently deletes all database data.",
            fg="red",
        )
        if self.prompter.confirm(f"Remove volume {config.volume_name}?", default=False):
            volume_removed = self.volume_manager.remove(config.volume_name)
        else:
            print(f"Keeping volume {config.volume_name}")

        click.secho("✓ Cleanup complete", fg="green")
        return {"containers": containers_removed, "network": network_removed, "volume": volume_removed}

    def logs(self, tier: Optional[str] = None, tail: int = 50, follow: bool = False):
        """
        Shows recent log lines for one tier or for all of them.

        :param tier: database, backend or frontend; all tiers if omitted.
        :param tail: Number of lines per container.
        :param follow: Keep streaming (single tier only).
        """
        tiers = [tier] if tier else TIER_ORDER
        for name in self._names(tiers):
            click.echo("")
            click.echo(f"=== {name} (last {tail} lines) ===")
            self.docker.logs(name, tail=tail, follow=follow and len(tiers) == 1)

    def status(self) -> Dict[str, str]:
        """
        Returns the docker status of each configured container.
        """
        names = self._names()
        found = {}
        for row in self.docker.status_rows(names):
            name, _, rest = row.partition("\t")
            found[name] = rest.partition("\t")[0]
        return {name: found.get(name, "not created") for name in names}
