"""
Builders for producing the image each tier runs.
"""
import os
from typing import Optional
from ..MODELS.container_spec import ContainerSpec
from ..RUNNERS.docker_client import DockerClient

class ImageBuilder:
    """
    Builds an image from its build context, or pulls it when the tier has none.
    """
    def __init__(self, docker: DockerClient):
        """
        Initializes the ImageBuilder.

        :param docker: Client used to talk to the docker daemon.
        """
        self.docker = docker

    def prepare(self, spec: ContainerSpec):
        """
        Makes the image for a container spec available locally.

        :param spec: The tier's container spec.
        :raises FileNotFoundError: If the build context does not exist.
        :raises CommandError: If the build or pull fails.
        """
        if not spec.needs_build:
            print(f"[{spec.tier.value}] Pulling image {spec.image}...")
            self.docker.pull_image(spec.image)
            return

        if not os.path.isdir(spec.build_context):
            raise FileNotFoundError(f"Build context {spec.build_context} not found")

        dockerfile: Optional[str] = spec.dockerfile
        if dockerfile and not os.path.isabs(dockerfile):
            dockerfile = os.path.join(spec.build_context, dockerfile)

        print(f"[{spec.tier.value}] Building image {spec.image} from {spec.build_context}...")
        self.docker.build_image(spec.image, spec.build_context, dockerfile)
