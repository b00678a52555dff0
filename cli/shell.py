"""Terminal presentation shell for the verifier"""

from typing import Optional

from fido2.client import UserInteraction
from rich.console import Console
from rich.status import Status

GENERIC_ERROR_TEXT = "Something went wrong. Please try again."


class ConsoleShell:
    """Renders loading and error state with Rich"""

    def __init__(self, console: Console):
        self.console = console
        self.error_visible = False
        self._status: Optional[Status] = None

    @property
    def is_loading(self) -> bool:
        return self._status is not None

    def set_loading(self, is_loading: bool) -> None:
        if is_loading:
            self.error_visible = False
            if self._status is None:
                self._status = self.console.status("[cyan]Verifying...[/cyan]")
                self._status.start()
        elif self._status is not None:
            self._status.stop()
            self._status = None

    def set_error(self) -> None:
        self.error_visible = True
        self.console.print(f"[red]{GENERIC_ERROR_TEXT}[/red]")


class TouchPrompt(UserInteraction):
    """Asks the user to touch the authenticator"""

    def __init__(self, console: Console):
        self.console = console

    def prompt_up(self):
        self.console.print("[bold]👈 Confirm you are a human:[/bold] touch your authenticator now")
