from pathlib import Path
from unittest.mock import patch

import pytest
from freezegun import freeze_time

from aliasman.errors import AliasNotFoundError, StoreIOError
from aliasman.models import Alias
from aliasman.store import StoreFile


def test_read__missing_file(tmp_path):
    store = StoreFile(tmp_path / "nothing")

    assert store.read() == ""
    assert store.aliases() == []


def test_read__unreadable(store_path):
    store = StoreFile(store_path)

    with patch("aliasman.store.open", side_effect=PermissionError("denied")):
        with pytest.raises(StoreIOError):
            store.read()


def test_aliases(store):
    assert [alias.identity for alias in store.aliases()] == [
        ("nv", "node -v"),
        ("gs", "git status"),
        ("ll", "ls"),
    ]


def test_append(store, store_path, rc_content):
    store.append("alias dc='docker compose'")

    assert store_path.read_text() == rc_content + "alias dc='docker compose'\n"
    assert store.aliases()[-1] == Alias("dc", "docker compose")


def test_append__adds_missing_newline(tmp_path):
    path = tmp_path / ".bashrc"
    path.write_text("export A=1")

    StoreFile(path).append("alias a='b'")

    assert path.read_text() == "export A=1\nalias a='b'\n"


def test_append__creates_file(tmp_path):
    path = tmp_path / "new" / ".zshrc"

    StoreFile(path).append("alias a='b'")

    assert path.read_text() == "alias a='b'\n"


def test_append__unwritable(store, store_path, rc_content):
    real_open = open

    def read_only_open(path, mode="r", *args, **kwargs):
        if "w" in mode:
            raise PermissionError("denied")
        return real_open(path, mode, *args, **kwargs)

    with patch("aliasman.store.open", side_effect=read_only_open):
        with pytest.raises(StoreIOError):
            store.append("alias a='b'")

    assert store_path.read_text() == rc_content


def test_delete_matching__one(store, store_path, rc_content):
    removed = store.delete_matching(Alias("gs", "git status").is_same)

    assert removed == 1
    assert store_path.read_text() == rc_content.replace('alias gs="git status"\n', "")


def test_delete_matching__all(store, store_path):
    removed = store.delete_matching(lambda alias: True)

    assert removed == 3
    assert store_path.read_text() == (
        "# ~/.zshrc\n"
        'export PATH="$HOME/bin:$PATH"\n'
        "\n"
        "if [ -f ~/.local ]; then\n"
        "  source ~/.local\n"
        "fi\n"
    )


def test_delete_matching__duplicates(tmp_path):
    path = tmp_path / ".zshrc"
    path.write_text("alias a='b'\n# keep\nalias a='b'\nalias a='c'\n")

    removed = StoreFile(path).delete_matching(Alias("a", "b").is_same)

    assert removed == 2
    assert path.read_text() == "# keep\nalias a='c'\n"


def test_delete_matching__no_aliases_is_noop(tmp_path):
    path = tmp_path / ".zshrc"
    path.write_text("export A=1\n")
    store = StoreFile(path)

    with patch.object(StoreFile, "write") as mock_write:
        removed = store.delete_matching(lambda alias: True)

    assert removed == 0
    mock_write.assert_not_called()


def test_replace_one(store, store_path, rc_content):
    index = store.replace_one(Alias("gs", "git status"), "alias gst='git status'")

    assert index == 7
    assert store_path.read_text() == rc_content.replace('alias gs="git status"', "alias gst='git status'")


def test_replace_one__first_match_only(tmp_path):
    path = tmp_path / ".zshrc"
    path.write_text("alias a='b'\nalias a='b'\n")

    StoreFile(path).replace_one(Alias("a", "b"), "alias c='b'")

    assert path.read_text() == "alias c='b'\nalias a='b'\n"


def test_replace_one__keeps_crlf(tmp_path):
    path = tmp_path / ".zshrc"
    path.write_bytes(b"export A=1\r\nalias a='b'\r\n")

    StoreFile(path).replace_one(Alias("a", "b"), "alias a='c'")

    assert path.read_bytes() == b"export A=1\r\nalias a='c'\r\n"


def test_replace_one__keeps_indent_and_comment(tmp_path):
    path = tmp_path / ".zshrc"
    path.write_text("if true; then\n    alias nv='node -v' # node\nfi\n")

    StoreFile(path).replace_one(Alias("nv", "node -v"), "alias nodev='node -v'")

    assert path.read_text() == "if true; then\n    alias nodev='node -v' # node\nfi\n"


def test_replace_one__not_found(store, store_path, rc_content):
    with pytest.raises(AliasNotFoundError):
        store.replace_one(Alias("gs", "git stash"), "alias gs='git stash'")

    assert store_path.read_text() == rc_content


@freeze_time("2025-10-24 21:01:01")
def test_create_backup(store_path, tmp_path):
    backup_dir = tmp_path / "backups"
    store = StoreFile(store_path, backup_dir=backup_dir)

    backup_path = store.create_backup()

    assert backup_path == backup_dir / "zshrc_20251024_210101.bak"
    assert backup_path.read_text() == store_path.read_text()


def test_create_backup__disabled(store):
    assert store.create_backup() is None


def test_create_backup__no_store_file(tmp_path):
    store = StoreFile(tmp_path / ".zshrc", backup_dir=tmp_path / "backups")

    assert store.create_backup() is None


def test_cleanup_old_backups(store_path, tmp_path):
    backup_dir = tmp_path / "backups"
    backup_dir.mkdir()
    for day in range(10, 15):
        (backup_dir / f"zshrc_202510{day}_200000.bak").write_text("old")
    store = StoreFile(store_path, backup_dir=backup_dir, max_backups=3)

    store.cleanup_old_backups()

    assert sorted(path.name for path in backup_dir.iterdir()) == [
        "zshrc_20251012_200000.bak",
        "zshrc_20251013_200000.bak",
        "zshrc_20251014_200000.bak",
    ]


def test_write__backs_up_first(store_path, tmp_path):
    backup_dir = tmp_path / "backups"
    store = StoreFile(store_path, backup_dir=backup_dir)
    original = store_path.read_text()

    store.append("alias a='b'")

    backups = list(backup_dir.glob("*.bak"))
    assert len(backups) == 1
    assert backups[0].read_text() == original
