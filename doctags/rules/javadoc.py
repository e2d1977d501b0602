"""Javadoc rules: JDT001."""

import re
import types
from collections.abc import Callable, Mapping, Sequence

from doctags.rules import base

NOT_FOUND: int = -1

_OPEN_COMMENT = "/**"
_CLOSE_COMMENT = "*/"

COMMENT_NOT_FOUND = "Problem finding class/interface comment"
MISSING_TAG = "Missing '@{0}' tag in class/interface comment"
BAD_PREFIX = "Line with '@{0}' does not start with a '{1}'"
TEXT_MISMATCH = "Tag text '{0}' does not match the pattern '{1}'"

TagTable = Mapping[str, re.Pattern[str]]


def make_tags(mapping: Mapping[str, str | re.Pattern[str]]) -> TagTable:
    """Return an immutable tag table built from *mapping*.

    Values may be pattern strings or already compiled patterns; order is
    preserved, and it is the order tags are checked in.

    Raises:
        re.error: If a pattern string is not a valid regular expression.
    """
    return types.MappingProxyType(
        {
            tag: pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
            for tag, pattern in mapping.items()
        }
    )


DEFAULT_TAGS: TagTable = make_tags(
    {
        "author": (
            r"^([A-Z](\.|[a-z]+) ){2,}"
            r"\([A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,4}\)$"
        ),
        "version": r"^\$Id.*\$$",
    }
)


def _diagnostic(
    lines: Sequence[str], line: int, template: str, *args: str
) -> base.Diagnostic:
    """Build a JDT001 diagnostic spanning the whole of 1-indexed *line*."""
    text = lines[line - 1] if 0 < line <= len(lines) else ""
    return base.Diagnostic(
        rule_id="JDT001",
        template=template,
        args=args,
        line=line,
        col=0,
        end_line=line,
        end_col=len(text),
        severity=base.Severity.WARNING,
    )


def last_line_matching(
    lines: Sequence[str], from_index: int, predicate: Callable[[str], bool]
) -> int:
    """Walk up from *from_index* and return the first line satisfying *predicate*.

    Returns NOT_FOUND when the walk passes index 0 without a match.
    """
    for pos in range(from_index, -1, -1):
        if predicate(lines[pos]):
            return pos
    return NOT_FOUND


def locate_comment_start(lines: Sequence[str], declaration_index: int) -> int:
    """Return the index of the nearest ``/**`` line above the declaration."""
    return last_line_matching(
        lines, declaration_index - 1, lambda line: line.strip() == _OPEN_COMMENT
    )


def locate_comment_end(lines: Sequence[str], declaration_index: int) -> int:
    """Return the index of the nearest ``*/`` line above the declaration."""
    return last_line_matching(
        lines, declaration_index - 1, lambda line: line.strip() == _CLOSE_COMMENT
    )


def find_tag_line(
    lines: Sequence[str], start: int, end: int, tag: str
) -> tuple[int, list[base.Diagnostic]]:
    """Find the line declaring *tag* between *start* and *end* inclusive.

    Only the first line mentioning ``@<tag> `` is considered. If it does not
    begin with `` * @<tag> `` a formatting diagnostic is produced at the
    comment start and the tag counts as absent, even when a well-formed
    occurrence follows further down.

    Args:
        lines: All lines of the file.
        start: Index of the comment's opening line.
        end: Index of the comment's closing line.
        tag: Tag name without the ``@``.

    Returns:
        The tag's line index (or NOT_FOUND) and any formatting diagnostics.
    """
    needle = f"@{tag} "
    prefix = f" * @{tag} "
    for pos in range(start, end + 1):
        line = lines[pos]
        if needle not in line:
            continue
        if not line.startswith(prefix):
            return NOT_FOUND, [_diagnostic(lines, start + 1, BAD_PREFIX, tag, prefix)]
        return pos, []
    return NOT_FOUND, []


def extract_tag_text(line: str) -> str:
    """Return the text following the first space after the first ``@``."""
    space = line.find(" ", max(line.find("@"), 0))
    return line[space + 1:]


def validate_tag(
    lines: Sequence[str],
    start: int,
    end: int,
    tag: str,
    pattern: re.Pattern[str],
) -> list[base.Diagnostic]:
    """Check that *tag* is present in the comment and its text fully matches."""
    found, diagnostics = find_tag_line(lines, start, end, tag)
    if found == NOT_FOUND:
        diagnostics.append(_diagnostic(lines, start + 1, MISSING_TAG, tag))
        return diagnostics
    text = extract_tag_text(lines[found])
    if pattern.fullmatch(text) is None:
        diagnostics.append(
            _diagnostic(lines, found + 1, TEXT_MISMATCH, text, pattern.pattern)
        )
    return diagnostics


def check_declaration(
    lines: Sequence[str],
    declaration_line: int,
    tags: TagTable = DEFAULT_TAGS,
) -> list[base.Diagnostic]:
    """Validate the documentation comment above a top-level declaration.

    Args:
        lines: All lines of the file.
        declaration_line: 1-indexed line of the class/interface declaration.
        tags: Tag names mapped to the pattern their text must match.

    Returns:
        Diagnostics in the order they were found. A comment that cannot be
        located (or has no content lines) yields a single diagnostic at the
        declaration and no tag checks.
    """
    declaration_index = declaration_line - 1
    start = locate_comment_start(lines, declaration_index)
    end = locate_comment_end(lines, declaration_index)
    if start == NOT_FOUND or end <= start + 1:
        return [_diagnostic(lines, declaration_line, COMMENT_NOT_FOUND)]
    diagnostics: list[base.Diagnostic] = []
    for tag, pattern in tags.items():
        diagnostics.extend(validate_tag(lines, start, end, tag, pattern))
    return diagnostics


class JDT001(base.Rule):
    """Require author and version tags in top-level type comments.

    Every top-level class or interface must be preceded by a ``/** ... */``
    comment with one line per configured tag, written as `` * @tag text``,
    whose text fully matches the tag's pattern. Nested types are not checked.

    Allowed:
        /**
         * Parses things.
         *
         * @author John Q. Public (jqp@example.com)
         * @version $Id$
         */
        public final class Parser {

    Flagged:
        /**
         * @author jqp
         */
        public final class Parser {     # bad author text, no version
    """

    def __init__(self, tags: TagTable = DEFAULT_TAGS) -> None:
        """Initialize with the tag table to enforce.

        Args:
            tags: Tag names mapped to the pattern their text must match.
        """
        self._tags = tags

    @property
    def tags(self) -> TagTable:
        """The tag table this rule enforces."""
        return self._tags

    def configure(
        self, options: dict[str, int | str | bool | dict[str, str]]
    ) -> base.Rule:
        """Return a new JDT001 with options applied.

        Args:
            options: Recognises ``tags`` (table of tag name to pattern).

        Returns:
            A new JDT001 enforcing the configured tags, or self if the option
            is absent, not a table, or holds a value that is not a valid
            pattern.
        """
        raw_tags = options.get("tags")
        if not isinstance(raw_tags, dict):
            return self
        try:
            return JDT001(tags=make_tags(raw_tags))
        except (re.error, TypeError):
            return self

    def check(self, source: base.SourceFile) -> list[base.Diagnostic]:
        """Return diagnostics for every top-level declaration's comment."""
        diagnostics: list[base.Diagnostic] = []
        for declaration in source.declarations:
            if declaration.nested:
                continue
            diagnostics.extend(
                check_declaration(source.lines, declaration.line, self._tags)
            )
        return diagnostics
