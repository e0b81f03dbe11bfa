# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Advisory verification of a deployment: container liveness, HTTP probes and a summary report.
"""
import time
from typing import Callable, List, Optional
import click
from tenacity import Retrying, stop_after_attempt, wait_exponential, retry_if_result

from ..errors import CommandError
from ..MODELS.deployment_config import DeploymentConfig
from ..MODELS.settings import DeploySettings
from ..MODELS.verification_result import VerificationResult, VerificationOutcome
from ..RUNNERS.docker_client import DockerClient
from ..UTILS.address_detector import PublicAddressDetector, FALLBACK_ADDRESS
from ..UTILS import http_probe
from .volume_manager import VolumeManager


class DeploymentVerifier:
    """
    Checks a freshly deployed topology and reports what it finds.

    Verification never fails the deployment: every problem is downgraded to a
    warning and the pass always completes with a VerificationResult.
    """

    def __init__(
        self,
        settings: Optional[DeploySettings] = None,
        docker: Optional[DockerClient] = None,
        detector: Optional[PublicAddressDetector] = None,
        probe: Optional[Callable[..., bool]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initializes the verifier.

        :param settings: Grace period, polling and probe knobs.
        :param docker: Client used to list running containers.
        :param detector: Public address detector used for the final report.
        :param probe: Callable ``probe(url) -> bool``; retried HTTP GET by default.
        :param sleep: Sleep function, replaceable in tests.
        """
        self.settings = settings or DeploySettings()
        self.docker = docker or DockerClient()
        self.detector = detector or PublicAddressDetector(timeout=self.settings.metadata_timeout)
        self.probe = probe or self._default_probe
        self.sleep = sleep
        self.volume_manager = VolumeManager(self.docker)

    def _default_probe(self, url: str) -> bool:
        settings = self.settings
        return http_probe.probe_with_retries(
            url,
            timeout=settings.probe_timeout,
            attempts=settings.probe_attempts,
            backoff=settings.poll_backoff,
            backoff_max=settings.poll_backoff_max,
        )

    @property
    def base_url(self) -> str:
        settings = self.settings
        if settings.public_port == 80:
            return f"http://{settings.probe_host}"
        return f"http://{settings.probe_host}:{settings.public_port}"

    def running_containers(self, config: DeploymentConfig) -> List[str]:
        """
        Names of the configured containers that are running, matched exactly.
        """
        expected = list(config.container_names.values())
        try:
            running = set(self.docker.running_names())
        except CommandError as e:
            click.secho(f"⚠️  Could not list containers: {e}", fg="yellow")
            return []
        return [name for name in expected if name in running]

    def wait_for_containers(self, config: DeploymentConfig) -> List[str]:
        """
        Polls until all three containers run or the attempts are used up.

        :return: The running containers seen on the last poll.
        """
        settings = self.settings
        expected = len(config.container_names)
        retrying = Retrying(
            stop=stop_after_attempt(max(1, settings.poll_attempts)),
            wait=wait_exponential(multiplier=settings.poll_backoff, max=settings.poll_backoff_max),
            retry=retry_if_result(lambda names: len(names) < expected),
            retry_error_callback=lambda state: state.outcome.result(),
            sleep=self.sleep,
        )
        return retrying(self.running_containers, config)

    def verify(self, config: DeploymentConfig) -> VerificationResult:
        """
        Runs one verification pass.

        :param config: The deployment configuration.
        :return: Counts, probe outcomes and the public address.
        """
        click.echo("")
        click.echo("Checking container status...")
        self.sleep(self.settings.grace_period)

        running = self.wait_for_containers(config)
        expected = len(config.container_names)
        if len(running) == expected:
            click.secho(f"✓ All {expected} containers are running", fg="green")
        else:
            click.secho(f"⚠️  Only {len(running)}/{expected} containers running", fg="yellow")

        click.echo("")
        click.echo("Testing endpoints...")
        health_ok = self._check(f"{self.base_url}/health", "Health endpoint")
        root_ok = self._check(f"{self.base_url}/", "Frontend")

        click.echo("")
        click.echo("Detecting public IP...")
        try:
            address = self.detector.detect()
        except Exception as e:
            click.secho(f"⚠️  Could not detect public IP: {e}", fg="yellow")
            address = FALLBACK_ADDRESS
        click.echo(f"Detected IP: {address}")

        return VerificationResult(
            expected_count=expected,
            running_count=len(running),
            running_names=running,
            health_ok=health_ok,
            root_ok=root_ok,
            public_address=address,
        )

    def _check(self, url: str, label: str) -> bool:
        try:
            ok = bool(self.probe(url))
        except Exception as e:
            click.secho(f"⚠️  {label} probe error: {e}", fg="yellow")
            return False
        if ok:
            click.secho(f"✓ {label} responding", fg="green")
        else:
            click.secho(f"⚠️  {label} not responding (may need a moment to start)", fg="yellow")
        return ok

    def report(self, config: DeploymentConfig, result: VerificationResult):
        """
        Prints the deployment summary for the operator.
        """
        colour = {
            VerificationOutcome.PASS: "green",
            VerificationOutcome.PARTIAL: "yellow",
            VerificationOutcome.FAIL: "red",
        }[result.outcome]

        click.echo("")
        click.echo("=" * 42)
        click.secho(f"Deployment Complete! (verification: {result.outcome.value})", fg=colour)
        click.echo("=" * 42)
        click.echo("")
        click.echo("Application Information:")
        click.echo("------------------------")
        click.echo(f"  Public URL: http://{result.public_address}")
        click.echo(f"  Health Check: {self.base_url}/health")
        click.echo("")

        click.echo("Container Status:")
        click.echo("-----------------")
        names = list(config.container_names.values())
        try:
            rows = self.docker.status_rows(names)
        except CommandError:
            rows = []
        click.echo(f"  {'NAMES':20} {'STATUS':28} PORTS")
        for row in rows:
            name, _, rest = row.partition("\t")
            status, _, ports = rest.partition("\t")
            click.echo(f"  {name:20} {status:28} {ports}")

        click.echo("")
        click.echo("Volume Information:")
        click.echo("-------------------")
        try:
            volume = self.volume_manager.describe(config.volume_name)
        except CommandError:
            volume = None
        for line in (volume or f"Volume {config.volume_name} not found").splitlines():
            click.echo(f"  {line}")

        click.echo("")
        click.echo("Management Commands:")
        click.echo("--------------------")
        click.echo("  View logs:        bmideploy logs")
        click.echo("  Stop containers:  bmideploy stop")
        click.echo("  Restart:          bmideploy restart")
        click.echo("  Backup database:  bmideploy backup")
        click.echo("  Cleanup all:      bmideploy cleanup")

        click.echo("")
        click.echo("Security Group Check:")
        click.echo("---------------------")
        click.echo(f"  ⚠️  Ensure port {self.settings.public_port} (HTTP) is open in your instance's security group")

        if result.outcome != VerificationOutcome.PASS:
            click.echo("")
            click.echo("Troubleshooting:")
            click.echo("----------------")
            click.echo("  If application is not accessible:")
            click.echo("    - Check container logs: bmideploy logs <tier>")
            click.echo("    - Verify containers are running: bmideploy status")
            click.echo(f"    - Check that port {self.settings.public_port} is open")
            click.echo("    - Wait 30 seconds for containers to fully start")
        click.echo("")
