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
Unit tests for the docker network manager.
"""
from conftest import arg_is
from bmideploy.MANAGERS.network_manager import NetworkManager


class TestNetworkManager:
    """Tests for NetworkManager."""

    def test_ensure_creates_missing_network(self, runner, docker):
        """Test network creation."""
        runner.on(arg_is(2, "inspect"), returncode=1)
        assert NetworkManager(docker).ensure("bmi-health-network") is True
        assert runner.commands("docker", "network", "create") == [
            ["docker", "network", "create", "bmi-health-network"]
        ]

    def test_ensure_is_idempotent(self, runner, docker):
        """Test that an existing network is left alone."""
        mgr = NetworkManager(docker)
        assert mgr.ensure("bmi-health-network") is False
        assert mgr.ensure("bmi-health-network") is False
        assert runner.commands("docker", "network", "create") == []

    def test_remove(self, runner, docker):
        """Test network removal."""
        assert NetworkManager(docker).remove("bmi-health-network") is True

    def test_remove_missing(self, runner, docker):
        """Test removing a network that does not exist."""
        runner.on(arg_is(2, "rm"), returncode=1)
        assert NetworkManager(docker).remove("bmi-health-network") is False
