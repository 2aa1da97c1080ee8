"""CLI prompts for the interactive config wizard."""

from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.text import Text

Validator = Callable[[str], str]


class WizardPrompter:
    """Terminal prompts and spinners used by the config generator.

    Validators take the raw answer and return the accepted value, or
    raise ``ValueError`` with the message to show before asking again.
    """

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question."""
        return Confirm.ask(message, default=default, console=self.console)

    def ask(
        self,
        message: str,
        default: Optional[str] = None,
        validate: Optional[Validator] = None,
        help_text: Optional[str] = None,
    ) -> str:
        """Ask for a value until it passes validation."""
        if help_text:
            self.console.print(f"[dim]{help_text}[/dim]")

        while True:
            if default is None:
                answer = Prompt.ask(message, console=self.console)
            else:
                answer = Prompt.ask(message, default=default, console=self.console)
            answer = (answer or "").strip()

            if validate is None:
                return answer
            try:
                return validate(answer)
            except ValueError as e:
                self.console.print(Text(f"✗ {e}", style="red"))

    def select(self, message: str, options: List[str], help_text: Optional[str] = None) -> str:
        """Pick one option by number or by name."""
        if not options:
            raise ValueError("nothing to select from")

        if help_text:
            self.console.print(f"[dim]{help_text}[/dim]")

        self.console.print(f"\n[bold]{message}[/bold]")
        for index, option in enumerate(options, 1):
            self.console.print(Text.assemble((f"  {index}. ", "green"), option))

        while True:
            answer = Prompt.ask("Select", console=self.console).strip()
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return options[int(answer) - 1]
            if answer:
                return answer
            self.console.print(Text("✗ Value is required", style="red"))

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show a spinner on stderr while the block runs."""
        with self.err_console.status(f"[dim]{message}[/dim]"):
            yield
