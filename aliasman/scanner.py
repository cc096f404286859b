"""Alias grammar: scanning, resolving and formatting `alias name=value` lines"""

import logging
import re
from typing import Iterable, Iterator, Optional, Tuple

from aliasman.errors import InvalidFormatError
from aliasman.models import Alias

logger = logging.getLogger(__name__)

# alias <name>=<'single' | "double" | bare-token> with an optional trailing comment
ALIAS_PATTERN = re.compile(
    r"""^alias\s+(?P<name>[^\s=]+)="""
    r"""(?P<value>'[^']*'|"(?:[^"\\]|\\.)*"|[^\s'"\\;&|<>()`$]+)"""
    r"""(?P<comment>\s+#.*)?$"""
)

# Backslash escapes that are meaningful inside double quotes
DOUBLE_QUOTE_ESCAPE = re.compile(r'\\([\\$`"])')
DOUBLE_QUOTE_SPECIAL = re.compile(r'([\\$`"])')


def _unquote(value: str) -> str:
    if value.startswith("'"):
        return value[1:-1]
    if value.startswith('"'):
        return DOUBLE_QUOTE_ESCAPE.sub(r"\1", value[1:-1])
    return value


def match_alias(line: str) -> Optional[Alias]:
    """Parse one line, returning None when it is not an alias definition"""
    match = ALIAS_PATTERN.match(line.strip())
    if not match:
        return None
    return Alias(name=match.group("name"), command=_unquote(match.group("value")))


def iter_alias_lines(text: str) -> Iterator[Tuple[int, Alias]]:
    """Yield (line index, alias) for every alias line, skipping everything else"""
    for index, line in enumerate(text.split("\n")):
        alias = match_alias(line)
        if alias is None:
            continue
        logger.debug("Line %d defines alias %s", index + 1, alias.name)
        yield index, alias


def normalize_statement(text: str) -> str:
    """Strip user input and prefix the `alias` keyword when it was left out"""
    text = text.strip()
    words = text.split(None, 1)
    if words and words[0] != "alias":
        text = f"alias {text}"
    return text


def resolve_alias(text: str) -> Alias:
    """Turn a user-typed statement such as `alias nv='node -v'` into an Alias.

    The leading `alias` keyword may be omitted. Raises InvalidFormatError
    when the input is empty or does not follow the alias grammar.
    """
    if not text or not text.strip():
        raise InvalidFormatError("Alias is mandatory to execute this action")
    if "\n" in text.strip() or "\r" in text.strip():
        raise InvalidFormatError("An alias must fit on a single line")

    alias = match_alias(normalize_statement(text))
    if alias is None:
        raise InvalidFormatError(f"Please check the format of the input content: {text.strip()}")
    return alias


def format_alias_statement(name: str, command: str) -> str:
    """Build an alias line that parses back to the same name and command"""
    if "'" not in command:
        return f"alias {name}='{command}'"
    escaped = DOUBLE_QUOTE_SPECIAL.sub(r"\\\1", command)
    return f'alias {name}="{escaped}"'


def format_unalias_command(aliases: Iterable[Alias]) -> str:
    """Build the command that removes aliases from a live shell session"""
    names = []
    for alias in aliases:
        if alias.name not in names:
            names.append(alias.name)
    if not names:
        return ""
    return "unalias " + " ".join(names)
