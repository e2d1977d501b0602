"""Tests for inline suppression: // doctags: noqa and // doctags: disable-file."""

import textwrap

from doctags import analyzer
from doctags.rules import javadoc

_jdt_analyzer = analyzer.Analyzer(rules=[javadoc.JDT001()])


def _jdt_lines(source: str) -> list[int]:
    return [diag.line for diag in _jdt_analyzer.analyze(textwrap.dedent(source))]


# ---------------------------------------------------------------------------
# Line-level suppression  —  // doctags: noqa[: RULE1,RULE2]
# ---------------------------------------------------------------------------


class TestLineSuppression:
    def test_noqa_bare_suppresses_all_rules_on_line(self) -> None:
        assert _jdt_lines("class A {}  // doctags: noqa") == []

    def test_noqa_specific_matching_rule_suppressed(self) -> None:
        assert _jdt_lines("class A {}  // doctags: noqa: JDT001") == []

    def test_noqa_specific_nonmatching_rule_not_suppressed(self) -> None:
        assert _jdt_lines("class A {}  // doctags: noqa: JDT999") == [1]

    def test_noqa_case_insensitive_rule_id(self) -> None:
        assert _jdt_lines("class A {}  // doctags: noqa: jdt001") == []

    def test_noqa_extra_whitespace_around_keyword(self) -> None:
        assert _jdt_lines("class A {}  //  doctags:  noqa") == []

    def test_noqa_multiple_comma_separated_rules(self) -> None:
        assert _jdt_lines("class A {}  // doctags: noqa: JDT999, JDT001") == []

    def test_noqa_only_affects_its_own_line(self) -> None:
        source = """\
            class A {}  // doctags: noqa
            class B {}
        """
        assert _jdt_lines(source) == [2]

    def test_noqa_on_tag_line(self) -> None:
        source = """\
            /**
             * @author jane // doctags: noqa
             * @version $Id$
             */
            class A {}
        """
        # The tag text now includes the comment, but the line is suppressed.
        assert _jdt_lines(source) == []

    def test_hash_comment_is_not_a_suppression(self) -> None:
        assert _jdt_lines("class A {}  # doctags: noqa") == [1]


# ---------------------------------------------------------------------------
# File-level suppression  —  // doctags: disable-file[: RULE1,RULE2]
# ---------------------------------------------------------------------------


class TestFileSuppression:
    def test_disable_file_bare_suppresses_all(self) -> None:
        source = """\
            // doctags: disable-file
            class A {}
            class B {}
        """
        assert _jdt_lines(source) == []

    def test_disable_file_specific_rule(self) -> None:
        source = """\
            // doctags: disable-file: JDT001
            class A {}
        """
        assert _jdt_lines(source) == []

    def test_disable_file_does_not_suppress_other_rules(self) -> None:
        source = """\
            // doctags: disable-file: JDT999
            class A {}
        """
        assert _jdt_lines(source) == [2]

    def test_disable_file_applies_regardless_of_position(self) -> None:
        source = """\
            class A {}
            // doctags: disable-file
        """
        assert _jdt_lines(source) == []

    def test_later_disable_file_replaces_earlier(self) -> None:
        source = """\
            // doctags: disable-file: JDT999
            class A {}
            // doctags: disable-file: JDT001
        """
        assert _jdt_lines(source) == []
