import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from aliasman.errors import AliasNotFoundError, StoreIOError
from aliasman.models import Alias
from aliasman.scanner import ALIAS_PATTERN, iter_alias_lines

logger = logging.getLogger(__name__)


class StoreFile:
    """Read and edit alias lines inside a shell rc file.

    Every edit re-reads the whole file, changes only the lines it targets
    and writes the whole file back. All other lines keep their exact text
    and order.
    """

    def __init__(self, path: Path, backup_dir: Optional[Path] = None, max_backups: int = 10):
        self.path = Path(path)
        self.backup_dir = backup_dir
        self.max_backups = max_backups

    def read(self) -> str:
        """Return the file content, or an empty string if it does not exist"""
        if not self.path.exists():
            logger.warning("Alias store %s does not exist", self.path)
            return ""
        try:
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StoreIOError(f"Cannot read {self.path}: {e}") from e

    def write(self, content: str) -> None:
        self.create_backup()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise StoreIOError(f"Cannot write {self.path}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(content), self.path)

    def create_backup(self) -> Optional[Path]:
        """Create timestamped backup of the store file"""
        if self.backup_dir is None or not self.path.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = self.backup_dir / f"{self.path.name.lstrip('.')}_{timestamp}.bak"

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self.path, backup_path)
        except OSError as e:
            raise StoreIOError(f"Cannot back up {self.path}: {e}") from e
        self.cleanup_old_backups()
        return backup_path

    def cleanup_old_backups(self) -> None:
        """Remove old backups, keeping only the most recent ones"""
        backups = sorted(self.backup_dir.glob(f"{self.path.name.lstrip('.')}_*.bak"))
        if len(backups) > self.max_backups:
            for backup in backups[:-self.max_backups]:
                backup.unlink()

    def scan(self) -> List[Tuple[int, Alias]]:
        return list(iter_alias_lines(self.read()))

    def aliases(self) -> List[Alias]:
        """All aliases in the file, in file order"""
        return [alias for _, alias in self.scan()]

    def append(self, statement: str) -> None:
        """Append one alias line, terminating the previous last line if needed"""
        content = self.read()
        if content and not content.endswith("\n"):
            content += "\n"
        self.write(f"{content}{statement.strip()}\n")

    def delete_matching(self, predicate: Callable[[Alias], bool]) -> int:
        """Remove every alias line whose alias satisfies predicate.

        Returns the number of removed lines; nothing is written when no
        line matches.
        """
        content = self.read()
        doomed = {index for index, alias in iter_alias_lines(content) if predicate(alias)}
        if not doomed:
            return 0

        lines = content.split("\n")
        kept = [line for index, line in enumerate(lines) if index not in doomed]
        self.write("\n".join(kept))
        logger.debug("Removed %d alias line(s) from %s", len(doomed), self.path)
        return len(doomed)

    def replace_one(self, old: Alias, statement: str) -> int:
        """Replace the first line defining `old` with statement, in place.

        The line keeps its indentation, trailing comment and line ending.
        Returns the index of the replaced line. Raises AliasNotFoundError
        when no line has the identity of `old`.
        """
        content = self.read()
        for index, alias in iter_alias_lines(content):
            if alias.is_same(old):
                break
        else:
            raise AliasNotFoundError(f"Alias {old} not found in {self.path}")

        lines = content.split("\n")
        line = lines[index]
        line_end = "\r" if line.endswith("\r") else ""
        indent = line[:len(line) - len(line.lstrip())]
        comment = ALIAS_PATTERN.match(line.strip()).group("comment") or ""
        lines[index] = f"{indent}{statement.strip()}{comment}{line_end}"
        self.write("\n".join(lines))
        return index
