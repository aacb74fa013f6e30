"""Command value object.

A command is the normalized form of one line of command text: the verb
(upper-cased) plus its arguments in original order. It is created per
invocation, consumed once by dispatch and never retained.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Command:
    """A parsed store command.

    Attributes:
        verb: Canonical (upper-case) command keyword, e.g. ``HGETALL``.
        args: Arguments exactly as tokenized, quotes already stripped.

    Example:
        >>> cmd = Command("SET", ("greeting", "hello world"))
        >>> str(cmd)
        'SET greeting hello world'
    """

    verb: str
    args: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.verb:
            raise ValueError("verb must be non-empty")
        # Accept any sequence but store an immutable tuple.
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))
        if self.verb != self.verb.upper():
            object.__setattr__(self, "verb", self.verb.upper())

    @property
    def arg_count(self) -> int:
        return len(self.args)

    def __str__(self) -> str:
        return " ".join((self.verb, *self.args))
