"""
Installation of the host tools the deployment depends on.
"""
import getpass
import shutil
from enum import Enum
from typing import Callable, Dict, List, Optional
from pydantic import BaseModel
import click

from ..errors import CommandError, PrerequisiteError
from ..RUNNERS.command_runner import CommandRunner


class InstallOutcome(str, Enum):
    """
    Result of ensuring a single tool.
    """
    INSTALLED = "installed"
    ALREADY_PRESENT = "already-present"


class Tool(BaseModel):
    """
    A host tool, the command proving it is installed, and the commands that install it.
    """
    name: str
    version_command: List[str]
    install_commands: List[List[str]] = []
    post_install_notice: Optional[str] = None


def default_tools(user: Optional[str] = None) -> List[Tool]:
    """
    The container runtime and the version-control client.

    :param user: Account added to the docker group; the current user if omitted.
    """
    user = user or getpass.getuser()
    return [
        Tool(
            name="docker",
            version_command=["docker", "--version"],
            install_commands=[
                ["sh", "-c", "curl -fsSL https://get.docker.com | sudo sh"],
                ["sudo", "usermod", "-aG", "docker", user],
            ],
            post_install_notice=(
                "Group changes applied. You may need to log out and log back in, "
                "or run: newgrp docker"
            ),
        ),
        Tool(
            name="git",
            version_command=["git", "--version"],
            install_commands=[
                ["sudo", "apt-get", "update"],
                ["sudo", "apt-get", "install", "-y", "git"],
            ],
        ),
    ]


class PrerequisiteInstaller:
    """
    Makes sure each required tool is present, installing it when missing.
    Safe to run on every deployment attempt.
    """
    def __init__(self,
                 runner: Optional[CommandRunner] = None,
                 tools: Optional[List[Tool]] = None,
                 which: Callable[[str], Optional[str]] = shutil.which):
        self.runner = runner or CommandRunner()
        self.tools = tools if tools is not None else default_tools()
        self.which = which

    def probe_version(self, tool: Tool) -> Optional[str]:
        """
        Returns the tool's version string, or None if it is not installed.
        """
        if self.which(tool.version_command[0]) is None:
            return None
        result = self.runner.run(tool.version_command, check=False)
        if not result.ok:
            return None
        return result.stdout.strip() or tool.name

    def ensure(self, tool: Tool) -> InstallOutcome:
        """
        Installs a tool unless it is already present.

        :param tool: The tool to ensure.
        :return: Whether the tool was installed or already there.
        :raises PrerequisiteError: If installation fails or leaves the tool missing.
        """
        version = self.probe_version(tool)
        if version:
            click.secho(f"✓ {tool.name} already installed", fg="green")
            click.echo(f"  {version}")
            return InstallOutcome.ALREADY_PRESENT

        if not tool.install_commands:
            raise PrerequisiteError(f"{tool.name} is not installed and no installer is known")

        click.echo(f"Installing {tool.name}...")
        for command in tool.install_commands:
            try:
                self.runner.run(command, capture=False)
            except CommandError as e:
                raise PrerequisiteError(f"Failed to install {tool.name}: {e}") from e

        version = self.probe_version(tool)
        if not version:
            raise PrerequisiteError(f"{tool.name} is still unavailable after installation")

        click.secho(f"✓ {tool.name} installed", fg="green")
        click.echo(f"  {version}")
        if tool.post_install_notice:
            click.echo("")
            click.secho(f"Important: {tool.post_install_notice}", fg="yellow")
        return InstallOutcome.INSTALLED

    def ensure_all(self) -> Dict[str, InstallOutcome]:
        """
        Ensures every configured tool, in order.
        """
        return {tool.name: self.ensure(tool) for tool in self.tools}
