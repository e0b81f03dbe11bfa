"""
Command Line Interface for BMI Deploy.
"""
import sys
import click
from ..errors import DeployError, UserAbort
from ..MODELS.settings import DeploySettings
from ..MANAGERS.config_materializer import ConfigMaterializer
from ..MANAGERS.deployment_pipeline import DeploymentPipeline
from ..MANAGERS.deployment_verifier import DeploymentVerifier
from ..MANAGERS.lifecycle_operations import LifecycleOperations, TIER_ORDER


def _fail(error: Exception):
    click.secho(f"✗ {error}", fg="red", err=True)
    sys.exit(1)


def _lifecycle(ctx) -> LifecycleOperations:
    settings = ctx.obj['settings']
    config = ConfigMaterializer.load(settings.env_path)
    return LifecycleOperations(config, settings)


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """
    BMI Deploy - provisions the BMI Health Tracker onto this Docker host.

    Without a command, runs the full interactive deployment.
    """
    ctx.ensure_object(dict)
    ctx.obj.setdefault('settings', DeploySettings.from_environ())
    if ctx.invoked_subcommand is None:
        try:
            DeploymentPipeline(ctx.obj['settings']).run()
        except UserAbort as e:
            click.echo(str(e))
            return
        except DeployError as e:
            _fail(e)


@cli.command()
@click.pass_context
def stop(ctx):
    """Stop all containers."""
    try:
        _lifecycle(ctx).stop()
    except DeployError as e:
        _fail(e)


@cli.command()
@click.pass_context
def restart(ctx):
    """Restart all containers in dependency order."""
    try:
        _lifecycle(ctx).restart()
    except DeployError as e:
        _fail(e)


@cli.command()
@click.pass_context
def backup(ctx):
    """Dump the database to the backups directory."""
    try:
        _lifecycle(ctx).backup()
    except DeployError as e:
        _fail(e)


@cli.command()
@click.pass_context
def cleanup(ctx):
    """Remove containers, network and (optionally) the data volume."""
    try:
        _lifecycle(ctx).cleanup()
    except UserAbort as e:
        click.echo(str(e))
    except DeployError as e:
        _fail(e)


@cli.command()
@click.argument('tier', required=False, type=click.Choice(TIER_ORDER))
@click.option('--tail', '-n', default=50, show_default=True, help='Lines to show per container')
@click.option('--follow', '-f', is_flag=True, help='Keep streaming (single tier only)')
@click.pass_context
def logs(ctx, tier, tail, follow):
    """Show container logs"""
    try:
        _lifecycle(ctx).logs(tier, tail=tail, follow=follow)
    except DeployError as e:
        _fail(e)


@cli.command()
@click.pass_context
def status(ctx):
    """List container status"""
    try:
        states = _lifecycle(ctx).status()
    except DeployError as e:
        _fail(e)
    click.echo(f"{'CONTAINER':20} {'STATUS':10}")
    click.echo("-" * 30)
    for name, state in states.items():
        click.echo(f"{name:20} {state:10}")


@cli.command()
@click.pass_context
def verify(ctx):
    """Re-run the deployment checks and print the report."""
    settings = ctx.obj['settings']
    try:
        config = ConfigMaterializer.load(settings.env_path)
    except DeployError as e:
        _fail(e)
    verifier = DeploymentVerifier(settings)
    verifier.report(config, verifier.verify(config))


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})

if __name__ == '__main__':
    main()
