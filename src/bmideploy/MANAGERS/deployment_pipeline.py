"""
The end-to-end deployment workflow.
"""
from typing import Optional
import click

from ..errors import CommandError, UserAbort
from ..MODELS.settings import DeploySettings
from ..MODELS.verification_result import VerificationResult
from ..RUNNERS.docker_client import DockerClient
from ..UTILS.address_detector import PublicAddressDetector
from ..UTILS.prompter import Prompter, ClickPrompter
from .config_materializer import ConfigMaterializer
from .deployment_verifier import DeploymentVerifier
from .environment_resolver import EnvironmentResolver
from .prerequisite_installer import PrerequisiteInstaller
from .topology_deployer import TopologyDeployer

STEP_COUNT = 4


def banner(text: str):
    click.echo("")
    click.echo("=" * 42)
    click.echo(text)
    click.echo("=" * 42)


class DeploymentPipeline:
    """
    Sequences prerequisite installation, configuration, topology deployment and verification.

    Each step raises on failure and the pipeline lets infrastructure errors
    propagate; verification is advisory and never stops the run.
    """
    def __init__(self,
                 settings: Optional[DeploySettings] = None,
                 prompter: Optional[Prompter] = None,
                 docker: Optional[DockerClient] = None,
                 installer: Optional[PrerequisiteInstaller] = None,
                 resolver: Optional[EnvironmentResolver] = None,
                 materializer: Optional[ConfigMaterializer] = None,
                 deployer: Optional[TopologyDeployer] = None,
                 verifier: Optional[DeploymentVerifier] = None):
        self.settings = settings or DeploySettings()
        self.prompter = prompter or ClickPrompter()
        self.docker = docker or DockerClient()
        detector = PublicAddressDetector(timeout=self.settings.metadata_timeout)
        self.installer = installer or PrerequisiteInstaller()
        self.resolver = resolver or EnvironmentResolver(self.prompter, detector)
        self.materializer = materializer or ConfigMaterializer(self.prompter)
        self.deployer = deployer or TopologyDeployer(self.settings, self.docker)
        self.verifier = verifier or DeploymentVerifier(self.settings, self.docker, detector)

    def confirm_start(self):
        banner("BMI Health Tracker - Full Deployment")
        click.echo("")
        click.echo("This will:")
        click.echo("  1. Install Docker and Git")
        click.echo("  2. Configure environment variables")
        click.echo("  3. Deploy all containers")
        click.echo("  4. Verify deployment")
        click.echo("")
        if not self.prompter.confirm("Continue?", default=False):
            raise UserAbort("Deployment cancelled.")

    def run(self) -> VerificationResult:
        """
        Runs the full deployment.

        :return: The verification report.
        :raises UserAbort: If the operator declines to continue.
        :raises DeployError: If installation, configuration or deployment fails.
        """
        self.confirm_start()

        banner(f"[STEP 1/{STEP_COUNT}] Installing Docker and Git")
        self.installer.ensure_all()

        banner(f"[STEP 2/{STEP_COUNT}] Configuring Environment")
        config = self.materializer.prepare(self.settings.env_path, self.resolver.resolve)

        banner(f"[STEP 3/{STEP_COUNT}] Deploying Docker Containers")
        self.deployer.deploy(config)

        banner(f"[STEP 4/{STEP_COUNT}] Verifying Deployment")
        result = self.verifier.verify(config)
        self.verifier.report(config, result)

        if self.prompter.confirm("View container logs now?", default=False):
            for name in (config.container_backend, config.container_frontend):
                click.echo("")
                click.echo(f"=== {name} logs (last 20 lines) ===")
                try:
                    self.docker.logs(name, tail=20)
                except CommandError as e:
                    click.secho(f"⚠️  {e}", fg="yellow")

        return result
