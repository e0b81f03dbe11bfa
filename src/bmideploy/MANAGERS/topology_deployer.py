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
Deployment of the three-tier container topology in dependency order.
"""
import os
from typing import List, Optional

from ..errors import CommandError, DeploymentError
from ..MODELS.container_spec import ContainerSpec, Tier, VolumeMount
from ..MODELS.deployment_config import DeploymentConfig
from ..MODELS.settings import DeploySettings
from ..BUILDERS.image_builder import ImageBuilder
from ..RUNNERS.dependency_resolver import DependencyResolver
from ..RUNNERS.docker_client import DockerClient
from .network_manager import NetworkManager
from .volume_manager import VolumeManager

POSTGRES_DATA_DIR = "/var/lib/postgresql/data"
POSTGRES_INIT_DIR = "/docker-entrypoint-initdb.d"
FRONTEND_INTERNAL_PORT = 80


class TopologyDeployer:
    """
    Brings up the database, backend and frontend containers on a shared network.

    Only the frontend publishes a port on the host; the database and backend
    are reachable solely through the internal network.
    """
    def __init__(self,
                 settings: Optional[DeploySettings] = None,
                 docker: Optional[DockerClient] = None):
        """
        Initializes the deployer.

        :param settings: Image names, build contexts and ports.
        :param docker: Client used to talk to the docker daemon.
        """
        self.settings = settings or DeploySettings()
        self.docker = docker or DockerClient()
        self.resolver = DependencyResolver()
        self.network_manager = NetworkManager(self.docker)
        self.volume_manager = VolumeManager(self.docker)
        self.image_builder = ImageBuilder(self.docker)

    def container_specs(self, config: DeploymentConfig) -> List[ContainerSpec]:
        """
        Declares the container for each tier.

        :param config: The deployment configuration.
        :return: One spec per tier.
        """
        settings = self.settings

        db_volumes = [VolumeMount(source=config.volume_name, target=POSTGRES_DATA_DIR)]
        init_scripts = settings.resolve(settings.init_scripts_dir)
        if os.path.isdir(init_scripts):
            db_volumes.append(VolumeMount(source=init_scripts, target=POSTGRES_INIT_DIR, read_only=True))

        database = ContainerSpec(
            tier=Tier.DATABASE,
            name=config.container_db,
            image=settings.database_image,
            internal_port=config.db_port,
            network=config.network_name,
            environment=[
                ("POSTGRES_DB", config.db_name),
                ("POSTGRES_USER", config.db_user),
                ("POSTGRES_PASSWORD", config.db_password),
            ],
            volumes=db_volumes,
        )
        backend = ContainerSpec(
            tier=Tier.BACKEND,
            name=config.container_backend,
            image=settings.backend_image,
            build_context=settings.resolve(settings.backend_context),
            internal_port=config.port,
            network=config.network_name,
            environment=[
                ("DATABASE_URL", config.database_url),
                ("PORT", str(config.port)),
                ("NODE_ENV", config.node_env),
                ("FRONTEND_URL", config.frontend_url),
            ],
            depends_on=[config.container_db],
        )
        # Static bundle; its proxy forwards /api/* to the backend by container name
        frontend = ContainerSpec(
            tier=Tier.FRONTEND,
            name=config.container_frontend,
            image=settings.frontend_image,
            build_context=settings.resolve(settings.frontend_context),
            internal_port=FRONTEND_INTERNAL_PORT,
            published_port=settings.public_port,
            network=config.network_name,
            depends_on=[config.container_backend],
        )
        return [database, backend, frontend]

    def deploy(self, config: DeploymentConfig) -> List[str]:
        """
        Deploys the full topology.

        Steps run in sequence and the first failure aborts the rest. Containers
        started before the failure are left running for inspection.

        :param config: The deployment configuration.
        :return: Names of the started containers, in start order.
        :raises DeploymentError: Carrying the stage that failed.
        """
        specs = self.resolver.resolve_order(self.container_specs(config))

        self._step("network", self.network_manager.ensure, config.network_name)
        self._step("volume", self.volume_manager.ensure, config.volume_name)

        for spec in specs:
            self._step(f"image:{spec.tier.value}", self.image_builder.prepare, spec)

        started = []
        for spec in specs:
            self._step(f"start:{spec.tier.value}", self.start_container, spec)
            started.append(spec.name)
        return started

    def start_container(self, spec: ContainerSpec):
        """
        Replaces any container of the same name with a fresh one.
        """
        if self.docker.remove_container(spec.name):
            print(f"[{spec.tier.value}] Removed existing container {spec.name}")
        print(f"[{spec.tier.value}] Starting container {spec.name}...")
        container_id = self.docker.run_container(spec)
        print(f"[{spec.tier.value}] Started {spec.name} ({container_id[:12]})")

    @staticmethod
    def _step(stage: str, action, *args):
        try:
            return action(*args)
        except (CommandError, FileNotFoundError) as e:
            raise DeploymentError(stage, str(e), cause=e) from e
