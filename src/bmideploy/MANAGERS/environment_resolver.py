"""
Collection and validation of operator-supplied deployment settings.
"""
import re
from typing import Optional
import click

from ..errors import PasswordValidationError
from ..MODELS.deployment_config import DeploymentConfig, MIN_PASSWORD_LENGTH
from ..UTILS.address_detector import PublicAddressDetector
from ..UTILS.prompter import Prompter, ClickPrompter

DEFAULT_DB_NAME = "bmi_health_db"
DEFAULT_DB_USER = "bmi_user"

_SCHEME = re.compile(r"^https?://")


def validate_password(password: str, confirmation: str) -> str:
    """
    Checks a password against the minimum length and its confirmation.

    :return: The password, unchanged.
    :raises PasswordValidationError: If it is too short or the confirmation differs.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters. Try again."
        )
    if password != confirmation:
        raise PasswordValidationError("Passwords do not match. Try again.")
    return password


def normalize_url(url: str) -> str:
    """
    Prefixes ``http://`` to a URL that has no http(s) scheme.
    """
    url = url.strip()
    if not _SCHEME.match(url):
        url = f"http://{url}"
    return url


class EnvironmentResolver:
    """
    Turns operator answers and the detected public address into a DeploymentConfig.
    """
    def __init__(self,
                 prompter: Optional[Prompter] = None,
                 detector: Optional[PublicAddressDetector] = None):
        """
        :param prompter: Source of answers; the terminal if omitted.
        :param detector: Public address detector used for the default frontend URL.
        """
        self.prompter = prompter or ClickPrompter()
        self.detector = detector or PublicAddressDetector()

    def prompt_password(self) -> str:
        """
        Asks for the database password until a valid, confirmed one is entered.
        """
        while True:
            password = self.prompter.ask_secret(
                f"Database password (min {MIN_PASSWORD_LENGTH} characters)"
            )
            # Length is checked before asking for confirmation
            if len(password) >= MIN_PASSWORD_LENGTH:
                confirmation = self.prompter.ask_secret("Confirm password")
            else:
                confirmation = ""
            try:
                return validate_password(password, confirmation)
            except PasswordValidationError as e:
                click.secho(str(e), fg="red")

    def resolve(self) -> DeploymentConfig:
        """
        Collects the configuration interactively.

        :return: The finalized configuration.
        """
        click.echo("Detecting public IP...")
        address = self.detector.detect()

        click.secho("Please provide the following information:", fg="blue")
        click.echo("")

        db_name = self.prompter.ask("Database name", default=DEFAULT_DB_NAME) or DEFAULT_DB_NAME
        db_user = self.prompter.ask("Database user", default=DEFAULT_DB_USER) or DEFAULT_DB_USER
        db_password = self.prompt_password()

        click.echo("")
        click.echo(f"Detected public IP: {address}")
        default_url = f"http://{address}"
        frontend_url = self.prompter.ask("Frontend URL", default=default_url) or default_url

        return DeploymentConfig(
            db_name=db_name.strip(),
            db_user=db_user.strip(),
            db_password=db_password,
            frontend_url=normalize_url(frontend_url),
        )
