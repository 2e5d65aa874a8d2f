"""User confirmation for interactive updates."""
from __future__ import annotations

from enum import Enum
from typing import Callable

from gvc.errors import UserCancelledError

Prompt = Callable[[str], str]
Echo = Callable[[str], None]


class UpdateCategory(Enum):
    """Kind of entry being confirmed."""
    VERSION = "Version"
    LIBRARY = "Library"
    PLUGIN = "Plugin"


class UpdateInteraction:
    """Confirmation state machine.

    The only state is whether "all" has been chosen; once it has, every later
    confirmation in the same run is accepted without asking. When disabled,
    every confirmation is accepted silently.
    """

    def __init__(self, enabled: bool, *, prompt: Prompt = input, echo: Echo = print):
        self.enabled = enabled
        self.apply_all = False
        self._prompt = prompt
        self._echo = echo

    def is_enabled(self) -> bool:
        return self.enabled

    def echo(self, message: str = "") -> None:
        self._echo(message)

    def ask(self, message: str) -> str:
        """Read one answer; end of input counts as quitting."""
        try:
            return self._prompt(message)
        except EOFError as exc:
            raise UserCancelledError() from exc

    def confirm(self, category: UpdateCategory, name: str, old: str, new: str) -> bool:
        """Ask whether to move ``name`` from ``old`` to ``new``.

        Raises:
            UserCancelledError: when the user answers "q"/"quit".
        """
        if not self.enabled:
            return True

        self.echo(f"\n[{category.value}] {name} from {old} to {new}")

        if self.apply_all:
            self.echo("Auto-applying (previously selected 'all').")
            return True

        while True:
            decision = self.ask("Apply this update? [Y/n/a/q]: ").strip().lower()
            if decision in ("", "y", "yes"):
                return True
            if decision in ("n", "no"):
                self.echo("Skipping this update.")
                return False
            if decision in ("a", "all"):
                self.echo("Applying this and all remaining updates.")
                self.apply_all = True
                return True
            if decision in ("q", "quit"):
                self.echo("Stopping update process at user request.")
                raise UserCancelledError()
            self.echo("Please answer with y(es), n(o), a(ll), or q(uit).")

    def confirm_version(self, name: str, old: str, new: str) -> bool:
        return self.confirm(UpdateCategory.VERSION, name, old, new)

    def confirm_library(self, name: str, old: str, new: str) -> bool:
        return self.confirm(UpdateCategory.LIBRARY, name, old, new)

    def confirm_plugin(self, name: str, old: str, new: str) -> bool:
        return self.confirm(UpdateCategory.PLUGIN, name, old, new)
