"""Interactive prompt collaborator.

The registry never talks to a UI directly. Selections, confirmations and
free-text input are requested through a Prompter; None is the "no
selection" sentinel callers must check and abort on.
"""

from typing import Protocol


class Prompter(Protocol):
    async def pick(self, items: list[str], placeholder: str) -> str | None:
        """Let the user pick one item; None when dismissed."""
        ...

    async def ask(self, prompt: str, placeholder: str = "", value: str | None = None) -> str | None:
        """Ask for free text; None when dismissed."""
        ...

    def show_info(self, message: str) -> None: ...

    def show_error(self, message: str) -> None: ...
