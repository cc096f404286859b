"""Shell detection and rc file lookup"""

import os
import pwd
from enum import Enum
from pathlib import Path
from typing import Optional


class ShellType(Enum):
    """Supported shell types"""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    SH = "sh"
    UNKNOWN = "unknown"


class ShellDetector:
    """Detect the user's shell and the rc file that holds its aliases"""

    RC_FILES = {
        ShellType.ZSH: ".zshrc",
        ShellType.BASH: ".bashrc",
        ShellType.FISH: ".config/fish/config.fish",
        ShellType.SH: ".profile",
    }
    DEFAULT_RC_FILE = ".zshrc"

    def __init__(self, home_dir: Optional[Path] = None):
        """Initialize detector with home directory"""
        self.home_dir = home_dir or Path.home()

    @staticmethod
    def _shell_from_path(shell_path: str) -> Optional[ShellType]:
        shell_path = shell_path.lower()
        if "zsh" in shell_path:
            return ShellType.ZSH
        elif "bash" in shell_path:
            return ShellType.BASH
        elif "fish" in shell_path:
            return ShellType.FISH
        elif shell_path.endswith("sh"):
            return ShellType.SH
        return None

    def detect_current_shell(self) -> ShellType:
        """Detect the current shell from the environment"""
        # Method 1: SHELL environment variable
        shell = self._shell_from_path(os.environ.get("SHELL", ""))
        if shell:
            return shell

        # Method 2: the user's login shell from /etc/passwd
        try:
            shell = self._shell_from_path(pwd.getpwuid(os.getuid()).pw_shell)
            if shell:
                return shell
        except (KeyError, OSError):
            pass

        # Method 3: shell-specific environment variables
        if os.environ.get("ZSH_NAME") or os.environ.get("ZSH_VERSION"):
            return ShellType.ZSH
        elif os.environ.get("BASH_VERSION"):
            return ShellType.BASH

        return ShellType.UNKNOWN

    def default_store_path(self, shell_type: Optional[ShellType] = None) -> Path:
        """The rc file aliases are kept in for the given (or detected) shell"""
        if shell_type is None:
            shell_type = self.detect_current_shell()
        return self.home_dir / self.RC_FILES.get(shell_type, self.DEFAULT_RC_FILE)
