"""
Thin wrapper over the docker CLI used by every deployment step.
"""
from typing import List, Optional

from ..MODELS.container_spec import ContainerSpec
from .command_runner import CommandRunner, CommandResult


class DockerClient:
    """
    Issues docker CLI commands through a CommandRunner.
    """
    def __init__(self, runner: Optional[CommandRunner] = None, binary: str = "docker"):
        """
        :param runner: Runner executing the commands; a default CommandRunner if omitted.
        :param binary: Name or path of the docker executable.
        """
        self.runner = runner or CommandRunner()
        self.binary = binary

    def _run(self, *args: str, **kwargs) -> CommandResult:
        return self.runner.run([self.binary, *args], **kwargs)

    def version(self) -> str:
        return self._run("--version").stdout.strip()

    # Networks

    def network_exists(self, name: str) -> bool:
        return self._run("network", "inspect", name, check=False).ok

    def create_network(self, name: str):
        self._run("network", "create", name)

    def remove_network(self, name: str) -> bool:
        return self._run("network", "rm", name, check=False).ok

    # Volumes

    def volume_exists(self, name: str) -> bool:
        return self._run("volume", "inspect", name, check=False).ok

    def create_volume(self, name: str):
        self._run("volume", "create", name)

    def remove_volume(self, name: str) -> bool:
        return self._run("volume", "rm", name, check=False).ok

    def inspect_volume(self, name: str) -> Optional[str]:
        """
        Returns a short human readable description of a volume, or None if it does not exist.
        """
        result = self._run(
            "volume", "inspect", name,
            "--format", "Name: {{.Name}}\nMountpoint: {{.Mountpoint}}\nDriver: {{.Driver}}",
            check=False,
        )
        return result.stdout.strip() if result.ok else None

    # Images

    def build_image(self, tag: str, context: str, dockerfile: Optional[str] = None):
        """
        Builds an image, streaming the build output to the terminal.
        """
        args = ["build", "-t", tag]
        if dockerfile:
            args += ["-f", dockerfile]
        args.append(context)
        self._run(*args, capture=False)

    def pull_image(self, reference: str):
        self._run("pull", reference, capture=False)

    # Containers

    @staticmethod
    def run_arguments(spec: ContainerSpec) -> List[str]:
        """
        Translates a container spec into ``docker run`` arguments.

        :param spec: The container to start.
        :return: Arguments following the ``docker`` executable.
        """
        args = ["run", "-d", "--name", spec.name, "--network", spec.network,
                "--restart", spec.restart_policy]
        for key, value in spec.environment:
            args += ["-e", f"{key}={value}"]
        for mount in spec.volumes:
            args += ["-v", mount.as_argument()]
        if spec.published_port is not None:
            args += ["-p", f"{spec.published_port}:{spec.internal_port}"]
        args.append(spec.image)
        return args

    def run_container(self, spec: ContainerSpec) -> str:
        """
        Starts a detached container.

        :return: The new container id.
        """
        return self._run(*self.run_arguments(spec)).stdout.strip()

    def remove_container(self, name: str) -> bool:
        """
        Force-removes a container. Returns False if there was nothing to remove.
        """
        return self._run("rm", "-f", name, check=False).ok

    def container_exists(self, name: str) -> bool:
        return self._run("container", "inspect", name, check=False).ok

    def stop_container(self, name: str):
        self._run("stop", name)

    def restart_container(self, name: str):
        self._run("restart", name)

    def running_names(self) -> List[str]:
        """
        Names of all running containers.
        """
        output = self._run("ps", "--format", "{{.Names}}").stdout
        return [line.strip() for line in output.splitlines() if line.strip()]

    def status_rows(self, names: List[str]) -> List[str]:
        """
        Tab separated name/status/ports rows for the given containers, running or not.
        """
        output = self._run(
            "ps", "-a", "--format", "{{.Names}}\t{{.Status}}\t{{.Ports}}", check=False
        ).stdout
        rows = []
        for line in output.splitlines():
            if line.split("\t", 1)[0] in names:
                rows.append(line)
        return rows

    def logs(self, name: str, tail: int = 50, follow: bool = False):
        """
        Streams a container's logs to the terminal.
        """
        args = ["logs", "--tail", str(tail)]
        if follow:
            args.append("-f")
        args.append(name)
        self._run(*args, capture=False)

    def exec_capture(self, name: str, command: List[str]) -> str:
        """
        Runs a command inside a running container and returns its stdout.
        """
        return self._run("exec", name, *command).stdout
