import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from aliasman.errors import StoreIOError
from aliasman.shell_detector import ShellDetector

logger = logging.getLogger(__name__)


class Config:
    """Manage aliasman configuration"""

    DEFAULT_CONFIG = {
        "store_path": None,
        "auto_backup": True,
        "max_backups": 10,
        "confirm_delete": True,
        "show_descriptions": True,
    }

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / ".aliasman"
        self.config_path = self.config_dir / "config.json"
        self.config = self.load()

    @property
    def groups_path(self) -> Path:
        return self.config_dir / "groups.json"

    @property
    def backup_dir(self) -> Path:
        return self.config_dir / "backups"

    def load(self) -> Dict[str, Any]:
        """Load configuration from file"""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    user_config = json.load(f)
                    return {**self.DEFAULT_CONFIG, **user_config}
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self.config_path, e)
        return self.DEFAULT_CONFIG.copy()

    def save(self) -> None:
        """Save configuration to file"""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            raise StoreIOError(f"Cannot write {self.config_path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value"""
        self.config[key] = value
        self.save()

    def get_store_path(self, override: Optional[str] = None) -> Path:
        """Resolve the store file: explicit override, configured path, then the shell's rc file"""
        configured = override or self.get("store_path")
        if configured:
            return Path(configured).expanduser()
        return ShellDetector().default_store_path()
