"""
Shared fakes for the deployment tests: a recording command runner, a scripted
prompter and a fixed public address detector.
"""
from typing import Callable, List
import pytest

from bmideploy.errors import CommandError
from bmideploy.MODELS.deployment_config import DeploymentConfig
from bmideploy.MODELS.settings import DeploySettings
from bmideploy.RUNNERS.command_runner import CommandRunner, CommandResult
from bmideploy.RUNNERS.docker_client import DockerClient
from bmideploy.UTILS.prompter import Prompter


class FakeRunner(CommandRunner):
    """Records commands instead of running them."""

    def __init__(self):
        self.calls: List[List[str]] = []
        self.handlers = []

    def on(self, predicate: Callable[[List[str]], bool], returncode: int = 0,
           stdout: str = "", stderr: str = ""):
        """Registers a canned response for commands matching ``predicate``. Later registrations win."""
        self.handlers.insert(0, (predicate, returncode, stdout, stderr))
        return self

    def run(self, command, check=True, capture=True, input=None, timeout=None):
        command = list(command)
        self.calls.append(command)
        result = CommandResult(command, 0)
        for predicate, returncode, stdout, stderr in self.handlers:
            if predicate(command):
                result = CommandResult(command, returncode, stdout, stderr)
                break
        if check and not result.ok:
            raise CommandError(command, result.returncode, result.stderr)
        return result

    def commands(self, *prefix: str) -> List[List[str]]:
        """Calls whose arguments start with ``prefix``."""
        return [c for c in self.calls if c[:len(prefix)] == list(prefix)]


class ScriptedPrompter(Prompter):
    """Answers prompts from pre-recorded queues."""

    def __init__(self, answers=None, secrets=None, confirms=None):
        self.answers = list(answers or [])
        self.secrets = list(secrets or [])
        self.confirms = list(confirms or [])
        self.asked: List[str] = []

    def ask(self, text, default=None):
        self.asked.append(text)
        answer = self.answers.pop(0) if self.answers else ""
        return answer or (default or "")

    def ask_secret(self, text):
        self.asked.append(text)
        return self.secrets.pop(0)

    def confirm(self, text, default=False):
        self.asked.append(text)
        return self.confirms.pop(0) if self.confirms else default


class FixedDetector:
    def __init__(self, address: str = "203.0.113.10"):
        self.address = address
        self.calls = 0

    def detect(self) -> str:
        self.calls += 1
        return self.address


def arg_is(position: int, value: str) -> Callable[[List[str]], bool]:
    return lambda command: len(command) > position and command[position] == value


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def docker(runner):
    return DockerClient(runner)


@pytest.fixture
def config():
    return DeploymentConfig(
        db_name="testdb",
        db_user="tester",
        db_password="longenough1",
        frontend_url="http://203.0.113.10",
    )


@pytest.fixture
def settings(tmp_path):
    (tmp_path / "backend").mkdir()
    (tmp_path / "frontend").mkdir()
    return DeploySettings(
        project_root=str(tmp_path),
        grace_period=0,
        poll_attempts=1,
        poll_backoff=0,
        probe_attempts=1,
    )
