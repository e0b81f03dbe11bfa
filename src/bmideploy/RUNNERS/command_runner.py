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
Execution of external commands with captured output and failure reporting.
"""
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from ..errors import CommandError


@dataclass
class CommandResult:
    """Outcome of a finished command."""

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """
    Runs a single external command to completion.
    """
    def run(self,
            command: List[str],
            check: bool = True,
            capture: bool = True,
            input: Optional[str] = None,
            timeout: Optional[float] = None) -> CommandResult:
        """
        Runs a command and waits for it to exit.

        Args:
            command (List[str]): Command and arguments to execute.
            check (bool): Raise CommandError on a non-zero exit code.
            capture (bool): Capture stdout/stderr instead of streaming them to the terminal.
            input (Optional[str]): Text passed to the command's stdin.
            timeout (Optional[float]): Seconds before the command is killed.

        Returns:
            CommandResult: The exit code and captured output.

        Raises:
            CommandError: If the command cannot be started, times out, or fails with check set.
        """
        try:
            completed = subprocess.run(
                command,
                input=input,
                capture_output=capture,
                timeout=timeout,
                text=True,
                # Avoid shell=True for security reasons (CWE-78)
                shell=False,
            )
        except FileNotFoundError as e:
            raise CommandError(command, 127, str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(command, -1, f"timed out after {timeout}s") from e

        result = CommandResult(
            command=list(command),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if check and not result.ok:
            raise CommandError(result.command, result.returncode, result.stderr)
        return result
