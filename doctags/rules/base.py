"""Base abstractions for doctags rules."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """LSP diagnostic severity levels."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass
class Diagnostic:
    """A single diagnostic emitted by a rule.

    The message is kept as a template with positional ``{0}``-style
    placeholders plus its substitution values, so reporters can render or
    inspect the pieces separately.
    """

    rule_id: str
    template: str
    args: tuple[str, ...]
    line: int      # 1-indexed
    col: int       # 0-indexed
    end_line: int
    end_col: int
    severity: Severity

    @property
    def message(self) -> str:
        """The template with its arguments substituted."""
        return self.template.format(*self.args)


@dataclass(frozen=True)
class Declaration:
    """A class or interface declaration found in a source file."""

    name: str
    kind: str      # "class" or "interface"
    line: int      # 1-indexed
    nested: bool   # True when enclosed by another declaration


@dataclass(frozen=True)
class SourceFile:
    """The lines of a source file and the declarations found in it."""

    lines: tuple[str, ...]
    declarations: tuple[Declaration, ...] = field(default=())


class Rule(ABC):
    """Abstract base class for all doctags rules."""

    @abstractmethod
    def check(self, source: SourceFile) -> list[Diagnostic]:
        """Analyze the source file and return any diagnostics.

        Args:
            source: The file's lines together with its declarations.

        Returns:
            A list of Diagnostic instances. Returns an empty list if no issues
            are found.
        """

    def configure(
        self, options: dict[str, int | str | bool | dict[str, str]]
    ) -> "Rule":
        """Return a rule with *options* applied.

        Rules without options ignore them and return themselves.
        """
        return self
