"""Read the ``[tool.doctags]`` table of the nearest pyproject.toml.

Recognised keys::

    [tool.doctags]
    select = ["JDT001"]        # run only these rules (default: all)
    ignore = []                # then drop these

    [tool.doctags.rules.JDT001.tags]
    author = '^.+$'            # replaces the default tag table
"""

from __future__ import annotations

import dataclasses
import pathlib
import tomllib
import typing

if typing.TYPE_CHECKING:
    from collections.abc import Iterable

    from doctags.rules import base

OptionValue = int | str | bool | dict[str, str]


@dataclasses.dataclass(frozen=True)
class Config:
    """Resolved doctags configuration.

    Attributes:
        select: Rule IDs to run. ``None`` means all registered rules are active.
        ignore: Rule IDs to exclude from the active set.
        rule_options: Per-rule option overrides keyed by rule ID.
    """

    select: frozenset[str] | None
    ignore: frozenset[str]
    rule_options: dict[str, dict[str, OptionValue]] = dataclasses.field(
        default_factory=dict, hash=False
    )

    @classmethod
    def from_section(cls, section: dict[str, typing.Any]) -> Config:
        """Build a Config from the contents of ``[tool.doctags]``."""
        select = section.get("select")
        rules_raw = section.get("rules", {})
        return cls(
            select=None if select is None else _upper_ids(select),
            ignore=_upper_ids(section.get("ignore", [])),
            rule_options={
                rule_id.upper(): _usable_options(opts)
                for rule_id, opts in rules_raw.items()
                if isinstance(opts, dict)
            },
        )


def _upper_ids(raw: Iterable[str]) -> frozenset[str]:
    return frozenset(rule_id.upper() for rule_id in raw)


def _is_string_table(value: object) -> bool:
    return isinstance(value, dict) and all(
        isinstance(key, str) and isinstance(val, str) for key, val in value.items()
    )


def _usable_options(opts: dict[str, object]) -> dict[str, OptionValue]:
    """Keep scalar options and string-to-string tables such as ``tags``."""
    return {
        key: dict(value) if isinstance(value, dict) else value
        for key, value in opts.items()
        if isinstance(value, int | str | bool) or _is_string_table(value)
    }


def _doctags_section(pyproject: pathlib.Path) -> dict[str, typing.Any]:
    """Return ``[tool.doctags]`` from *pyproject*, or {} if unreadable or absent."""
    try:
        with pyproject.open("rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return data.get("tool", {}).get("doctags", {})


def load_config(start: pathlib.Path | None = None) -> Config:
    """Return the Config for the project containing *start*.

    The first ``pyproject.toml`` met walking up from *start* (defaults to
    ``Path.cwd()``) decides; a missing file, a broken file or a missing
    section all give the default Config with every rule active.

    Args:
        start: Directory to begin the upward search.  Defaults to cwd.

    Returns:
        The resolved Config.
    """
    here = start if start is not None else pathlib.Path.cwd()
    for directory in (here, *here.parents):
        pyproject = directory / "pyproject.toml"
        if pyproject.is_file():
            return Config.from_section(_doctags_section(pyproject))
    return Config(select=None, ignore=frozenset())


def _rule_id(rule: base.Rule) -> str:
    return type(rule).__name__


def filter_rules(
    all_rules: list[base.Rule],
    config: Config,
) -> list[base.Rule]:
    """Return the rules *config* leaves switched on, in their original order.

    A rule is on when ``select`` is unset or names it, and ``ignore`` does
    not. Rule IDs are class names (``JDT001``).
    """
    return [
        rule
        for rule in all_rules
        if (config.select is None or _rule_id(rule) in config.select)
        and _rule_id(rule) not in config.ignore
    ]


def configure_rules(
    active_rules: list[base.Rule],
    config: Config,
) -> list[base.Rule]:
    """Hand each rule its ``[tool.doctags.rules.<ID>]`` options.

    Rules without options are passed through untouched.
    """
    configured: list[base.Rule] = []
    for rule in active_rules:
        opts = config.rule_options.get(_rule_id(rule))
        configured.append(rule.configure(opts) if opts else rule)
    return configured


def active_rules(all_rules: list[base.Rule], config: Config) -> list[base.Rule]:
    """Filter *all_rules* by *config*, then apply its per-rule options."""
    return configure_rules(filter_rules(all_rules, config), config)
