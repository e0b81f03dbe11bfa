"""
Parsers for .env configuration files, supporting quotes and comments.
"""
import io
from typing import Dict, Iterable, List
from dotenv import dotenv_values

class EnvParser:
    """
    Parser for .env files.
    """
    @staticmethod
    def parse(env_path: str) -> Dict[str, str]:
        """
        Parses an .env file from a path.

        Args:
            env_path (str): Path to the .env file.

        Returns:
            Dict[str, str]: Dictionary of environment variables.
        """
        with open(env_path, 'r') as f:
            content = f.read()
        return EnvParser.parse_from_string(content)

    @staticmethod
    def parse_from_string(content: str) -> Dict[str, str]:
        """
        Parses environment variables from a string.
        Keys without a value are dropped; variable references are left as written.
        """
        values = dotenv_values(stream=io.StringIO(content), interpolate=False)
        return {key: value for key, value in values.items() if value is not None}

    @staticmethod
    def missing_keys(env: Dict[str, str], required: Iterable[str]) -> List[str]:
        """
        Lists the required keys that are absent or empty.
        """
        return [key for key in required if not env.get(key)]
