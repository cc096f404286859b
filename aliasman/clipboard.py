import logging
import platform
import subprocess
from abc import ABC, abstractmethod
from typing import List, Sequence

import pyperclip

logger = logging.getLogger(__name__)


class ClipboardBackend(ABC):
    @abstractmethod
    def copy(self, text: str) -> bool:
        """Copy text to clipboard. Return True on success or False otherwise."""
        ...


class PyperclipBackend(ClipboardBackend):
    def copy(self, text: str) -> bool:
        try:
            pyperclip.copy(text)
            return True
        except pyperclip.PyperclipException as e:
            logger.debug("pyperclip unavailable: %s", e)
            return False


class CommandBackend(ClipboardBackend):
    """Pipe text into the first working clipboard command of a platform"""

    def __init__(self, system: str, commands: Sequence[List[str]]):
        self.system = system
        self.commands = commands

    def copy(self, text: str) -> bool:
        if platform.system() != self.system:
            return False
        for cmd in self.commands:
            try:
                p = subprocess.Popen(cmd, stdin=subprocess.PIPE)
                p.communicate(text.encode("utf-8"))
            except OSError:
                continue
            if p.returncode == 0:
                return True
        return False


class ClipboardManager:
    def __init__(self):
        self.backends = [
            PyperclipBackend(),
            CommandBackend("Darwin", [["pbcopy"]]),
            CommandBackend("Windows", [["clip"]]),
            CommandBackend("Linux", [
                ["wl-copy"],
                ["xclip", "-selection", "clipboard"],
                ["xsel", "--clipboard", "--input"],
            ]),
        ]

    def copy(self, text: str) -> bool:
        for backend in self.backends:
            if backend.copy(text):
                return True
        return False
