"""
Volume management for the database's persistent storage.
"""
from typing import Optional
from ..RUNNERS.docker_client import DockerClient

class VolumeManager:
    """
    Creates, inspects and removes the named volume holding the database files.
    """
    def __init__(self, docker: DockerClient):
        """
        Initializes the volume manager.

        :param docker: Client used to talk to the docker daemon.
        """
        self.docker = docker

    def ensure(self, name: str) -> bool:
        """
        Creates the volume unless it already exists.

        :param name: Volume name.
        :return: True if the volume was created, False if it already existed.
        """
        if self.docker.volume_exists(name):
            print(f"Volume {name} already exists")
            return False
        print(f"Creating volume: {name}")
        self.docker.create_volume(name)
        return True

    def describe(self, name: str) -> Optional[str]:
        """
        Returns the volume's name, mountpoint and driver, or None if it does not exist.
        """
        return self.docker.inspect_volume(name)

    def remove(self, name: str) -> bool:
        """
        Removes the volume and the data on it. Returns False if it did not exist.
        """
        removed = self.docker.remove_volume(name)
        if removed:
            print(f"Removed volume: {name}")
        return removed
