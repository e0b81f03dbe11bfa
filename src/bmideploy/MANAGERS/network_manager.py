"""
Network management for the deployment's isolated docker network.
"""
from ..RUNNERS.docker_client import DockerClient

class NetworkManager:
    """
    Creates and removes the network the three tiers share.
    """
    def __init__(self, docker: DockerClient):
        """
        Initializes the network manager.

        :param docker: Client used to talk to the docker daemon.
        """
        self.docker = docker

    def ensure(self, name: str) -> bool:
        """
        Creates the network unless it already exists.

        :param name: Network name.
        :return: True if the network was created, False if it already existed.
        """
        if self.docker.network_exists(name):
            print(f"Network {name} already exists")
            return False
        print(f"Creating network: {name}")
        self.docker.create_network(name)
        return True

    def remove(self, name: str) -> bool:
        """
        Removes the network. Returns False if it did not exist.
        """
        removed = self.docker.remove_network(name)
        if removed:
            print(f"Removed network: {name}")
        return removed
