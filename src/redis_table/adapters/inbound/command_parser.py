"""Command parser for SQL-like store commands.

Turns one line of command text into a Command. The grammar is:

    command        := verb (WS argument)*
    argument       := quoted-literal | bare-token
    quoted-literal := '"' text '"' | "'" text "'"
    bare-token     := any maximal run of non-whitespace characters

Quoted literals are atomic tokens with their quotes stripped, so
``SET greeting "hello world"`` yields three tokens. There is no escape
syntax inside a literal: the first matching quote character closes it. A
quote with no partner is kept as an ordinary character of a bare token.

Examples:
    GET user:1                      -> Command("GET", ("user:1",))
    set k 'two words'               -> Command("SET", ("k", "two words"))
    HSET h f1 v1 f2 "v 2"           -> Command("HSET", ("h", "f1", "v1", "f2", "v 2"))
"""

from __future__ import annotations

import re

from redis_table.domain.errors import ParseError
from redis_table.domain.value_objects import Command

_QUOTED = re.compile(r'"([^"]*)"|\'([^\']*)\'')
_BARE = re.compile(r"\S+")


def tokenize(text: str) -> list[str]:
    """Split command text into tokens.

    Args:
        text: Raw command text.

    Returns:
        Tokens in source order, quotes stripped from quoted literals.

    Raises:
        ParseError: If the text is empty, whitespace-only, or yields no tokens.
    """
    if text is None or not text.strip():
        raise ParseError("Empty command")

    tokens: list[str] = []
    last_end = 0
    for match in _QUOTED.finditer(text):
        tokens.extend(_BARE.findall(text[last_end:match.start()]))
        double, single = match.group(1), match.group(2)
        tokens.append(double if double is not None else single)
        last_end = match.end()
    tokens.extend(_BARE.findall(text[last_end:]))

    if not tokens:
        raise ParseError("No tokens found in command")
    return tokens


class CommandParser:
    """Parses command text into Commands.

    Example:
        >>> parser = CommandParser()
        >>> parser.parse('set greeting "hello world"')
        Command(verb='SET', args=('greeting', 'hello world'))
    """

    def parse(self, text: str) -> Command:
        """Parse command text.

        The first token, upper-cased, becomes the verb; the remaining tokens
        become the arguments in their original order.

        Raises:
            ParseError: If the text holds no tokens.
        """
        tokens = tokenize(text)
        verb = tokens[0].upper()
        if not verb:
            # A leading empty literal such as '' GET
            raise ParseError("Command verb is empty")
        return Command(verb=verb, args=tuple(tokens[1:]))
