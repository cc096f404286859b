from pathlib import Path
from unittest.mock import Mock

import pytest

from aliasman.clipboard import ClipboardManager
from aliasman.groups import GroupStore, MemoryKeyValueStore
from aliasman.reconciler import Reconciler
from aliasman.session import ShellSession
from aliasman.store import StoreFile

RC_CONTENT = """# ~/.zshrc
export PATH="$HOME/bin:$PATH"

alias nv='node -v'
if [ -f ~/.local ]; then
  source ~/.local
fi
alias gs="git status"
alias ll=ls
"""


@pytest.fixture
def rc_content() -> str:
    return RC_CONTENT


@pytest.fixture
def store_path(tmp_path) -> Path:
    path = tmp_path / ".zshrc"
    path.write_text(RC_CONTENT, encoding="utf-8")
    return path


@pytest.fixture
def store(store_path) -> StoreFile:
    return StoreFile(store_path)


@pytest.fixture
def groups() -> GroupStore:
    return GroupStore(MemoryKeyValueStore())


@pytest.fixture
def session() -> Mock:
    return Mock(spec=ShellSession)


@pytest.fixture
def clipboard() -> Mock:
    clipboard = Mock(spec=ClipboardManager)
    clipboard.copy.return_value = True
    return clipboard


@pytest.fixture
def reconciler(store, groups, session, clipboard) -> Reconciler:
    reconciler = Reconciler(store, groups, session, clipboard)
    reconciler.refresh()
    return reconciler
