"""Run rules over a Java source file and honour inline suppressions.

Two comment forms silence diagnostics::

    // doctags: noqa[: JDT001, ...]           the diagnostic's own line
    // doctags: disable-file[: JDT001, ...]   anywhere, for the whole file

Without a rule list every rule is silenced.
"""

from __future__ import annotations

import dataclasses
import re
import typing

from doctags import declarations

if typing.TYPE_CHECKING:
    from collections.abc import Sequence

    from doctags.rules import base

_DIRECTIVE_PAT = re.compile(
    r"//\s*doctags:\s*(?P<kind>noqa|disable-file)"
    r"(?::\s*(?P<ids>[A-Z0-9][A-Z0-9,\s]*))?",
    re.IGNORECASE,
)

# Stands for "every rule" in a suppression scope.
_ALL: frozenset[str] = frozenset({"*"})


def _scope(raw_ids: str | None) -> frozenset[str]:
    ids = frozenset(
        part.strip().upper() for part in (raw_ids or "").split(",") if part.strip()
    )
    return ids or _ALL


@dataclasses.dataclass
class _Suppressions:
    """Rule IDs silenced for the whole file and per 1-indexed line."""

    file_wide: frozenset[str] = frozenset()
    by_line: dict[int, frozenset[str]] = dataclasses.field(default_factory=dict)

    @classmethod
    def scan(cls, lines: Sequence[str]) -> _Suppressions:
        found = cls()
        for lineno, text in enumerate(lines, start=1):
            for match in _DIRECTIVE_PAT.finditer(text):
                scope = _scope(match.group("ids"))
                if match.group("kind").lower() == "noqa":
                    found.by_line[lineno] = scope
                else:
                    # A later directive replaces an earlier one.
                    found.file_wide = scope
        return found

    def hides(self, diag: base.Diagnostic) -> bool:
        return any(
            scope is _ALL or diag.rule_id in scope
            for scope in (self.file_wide, self.by_line.get(diag.line, frozenset()))
        )


class Analyzer:
    """Runs a fixed set of rules against Java source files."""

    def __init__(self, rules: list[base.Rule]) -> None:
        """Initialize with a list of rule instances.

        Args:
            rules: Rule instances to run on every analysis request.
        """
        self.rules = rules

    def analyze(self, text: str) -> list[base.Diagnostic]:
        """Return the unsuppressed diagnostics for *text*.

        Args:
            text: Raw Java source code to analyze.

        Returns:
            Diagnostics sorted by (line, col). Diagnostics sharing a position
            keep the order rules produced them.
        """
        source = declarations.parse_source(text)
        suppressions = _Suppressions.scan(source.lines)
        found = [
            diag
            for rule in self.rules
            for diag in rule.check(source)
            if not suppressions.hides(diag)
        ]
        return sorted(found, key=lambda diag: (diag.line, diag.col))
