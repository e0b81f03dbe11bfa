"""
Interactive input collection, kept behind a small interface so workflow steps can run unattended.
"""
from typing import Optional
import click


class Prompter:
    """
    Source of operator answers used by the workflow steps.
    """
    def ask(self, text: str, default: Optional[str] = None) -> str:
        raise NotImplementedError

    def ask_secret(self, text: str) -> str:
        raise NotImplementedError

    def confirm(self, text: str, default: bool = False) -> bool:
        raise NotImplementedError


class ClickPrompter(Prompter):
    """
    Prompter reading from the terminal through click.
    """
    def ask(self, text: str, default: Optional[str] = None) -> str:
        # An empty answer falls back to the default
        return click.prompt(text, default=default or "", show_default=bool(default))

    def ask_secret(self, text: str) -> str:
        return click.prompt(text, hide_input=True, default="", show_default=False)

    def confirm(self, text: str, default: bool = False) -> bool:
        return click.confirm(text, default=default)
