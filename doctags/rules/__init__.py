"""All doctags rules."""

from doctags.rules import base, javadoc

ALL_RULES: list[base.Rule] = [
    javadoc.JDT001(),
]

__all__ = ["ALL_RULES"]
