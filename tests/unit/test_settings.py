"""
Unit tests for deployer settings.
"""
import os
from bmideploy.MODELS.settings import DeploySettings


def test_defaults():
    settings = DeploySettings.from_environ({})
    assert settings.env_file == "deployDocker/.env"
    assert settings.database_image == "postgres:15-alpine"
    assert settings.public_port == 80

def test_environment_overrides():
    settings = DeploySettings.from_environ({
        "BMIDEPLOY_PROJECT_ROOT": "/srv/bmi",
        "BMIDEPLOY_PUBLIC_PORT": "8080",
        "BMIDEPLOY_GRACE_PERIOD": "0.5",
        "UNRELATED": "ignored",
    })
    assert settings.public_port == 8080
    assert settings.grace_period == 0.5
    assert settings.env_path == os.path.abspath("/srv/bmi/deployDocker/.env")
    assert settings.backup_path == os.path.abspath("/srv/bmi/backups")
