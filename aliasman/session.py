"""Live shell session collaborators"""

import logging
import subprocess
from abc import ABC, abstractmethod

from rich.console import Console
from rich.markup import escape

from aliasman.errors import ShellError
from aliasman.shell_detector import ShellType

logger = logging.getLogger(__name__)


class ShellSession(ABC):
    """Where alias definitions and invocations are sent"""

    @abstractmethod
    def apply(self, statement: str) -> None:
        """Define or remove aliases in the live session (`alias ...`, `unalias ...`)."""
        ...

    @abstractmethod
    def execute(self, command: str) -> None:
        """Run a command, typically an alias invocation."""
        ...


class InteractiveShellSession(ShellSession):
    """Session for a terminal the process cannot type into.

    Definitions are printed for the user to paste into their shell;
    invocations run in a child interactive shell that loads the rc file,
    so aliases defined there expand.
    """

    def __init__(self, shell_type: ShellType, console: Console):
        self.shell_type = shell_type
        self.console = console

    @property
    def executable(self) -> str:
        if self.shell_type == ShellType.UNKNOWN:
            return "bash"
        return self.shell_type.value

    def apply(self, statement: str) -> None:
        self.console.print(f"[dim]   For current session, run: [/][cyan]{escape(statement)}[/]", highlight=False)

    def execute(self, command: str) -> None:
        logger.debug("Running %r in %s", command, self.executable)
        try:
            subprocess.run([self.executable, "-i", "-c", command])
        except OSError as e:
            raise ShellError(f"Cannot start {self.executable}: {e}") from e
