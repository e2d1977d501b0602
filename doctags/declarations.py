"""Locate class and interface declarations in Java source text.

This is not a parser: it blanks out comments and literals, counts braces, and
looks for the ``class``/``interface`` keywords. That is enough to tell
top-level declarations from nested ones and to know which line each starts
on, which is all the rules need.
"""

import re
from collections.abc import Iterator, Sequence

from doctags.rules import base

# ``.class`` literals and ``@interface`` annotation types are not declarations.
_DECLARATION_PAT = re.compile(r"(?<![\w.@$])(class|interface)\s+([A-Za-z_$][\w$]*)")

_TEXT_BLOCK = '"""'


def _blank(text: str) -> str:
    return " " * len(text)


def _code_only(lines: Sequence[str]) -> Iterator[str]:
    """Yield each line with comments and string/char literals blanked out.

    Block comments and text blocks may span lines; their state carries over.
    Column positions are preserved.
    """
    closer: str | None = None
    for line in lines:
        out: list[str] = []
        pos = 0
        while pos < len(line):
            if closer is not None:
                close = line.find(closer, pos)
                if close == -1:
                    out.append(_blank(line[pos:]))
                    pos = len(line)
                    continue
                end = close + len(closer)
                out.append(_blank(line[pos:end]))
                pos = end
                closer = None
                continue
            if line.startswith("//", pos):
                out.append(_blank(line[pos:]))
                break
            if line.startswith("/*", pos):
                closer = "*/"
                out.append("  ")
                pos += 2
                continue
            if line.startswith(_TEXT_BLOCK, pos):
                closer = _TEXT_BLOCK
                out.append(_blank(_TEXT_BLOCK))
                pos += len(_TEXT_BLOCK)
                continue
            char = line[pos]
            if char in "\"'":
                end = pos + 1
                while end < len(line) and line[end] != char:
                    end += 2 if line[end] == "\\" else 1
                end = min(end + 1, len(line))
                out.append(_blank(line[pos:end]))
                pos = end
                continue
            out.append(char)
            pos += 1
        yield "".join(out)


def _brace_delta(code: str) -> int:
    return code.count("{") - code.count("}")


def find_declarations(lines: Sequence[str]) -> list[base.Declaration]:
    """Return every class/interface declaration in *lines*, in source order.

    Args:
        lines: The file's lines, without line terminators.

    Returns:
        Declarations with 1-indexed keyword lines. ``nested`` is True when the
        keyword sits inside the braces of another declaration.
    """
    declarations: list[base.Declaration] = []
    depth = 0
    for lineno, code in enumerate(_code_only(lines), start=1):
        pos = 0
        for match in _DECLARATION_PAT.finditer(code):
            depth = max(depth + _brace_delta(code[pos:match.start()]), 0)
            declarations.append(
                base.Declaration(
                    name=match.group(2),
                    kind=match.group(1),
                    line=lineno,
                    nested=depth > 0,
                )
            )
            pos = match.start()
        depth = max(depth + _brace_delta(code[pos:]), 0)
    return declarations


def parse_source(text: str) -> base.SourceFile:
    """Split *text* into lines and locate its declarations."""
    lines = tuple(text.splitlines())
    return base.SourceFile(lines=lines, declarations=tuple(find_declarations(lines)))
