"""
Tests for delimiter safety: unmatched-delimiter scan, safe regions,
balance repair and the safe delete/copy/paste actions.
"""

import pytest

from sexpedit.reader import read
from sexpedit.safety import (
    balance,
    find_unmatched_delimiters,
    partition_safe_regions,
    safe_copy,
    safe_delete,
    safe_paste,
    scan_region,
)
from sexpedit.schemas import Span
from sexpedit.syntax import analyze


class TestUnmatchedDelimiters:
    """Delimiters in a span with no partner inside it."""

    def test_open_without_close(self, elisp, config):
        assert find_unmatched_delimiters("(foo bar)", (0, 5), elisp, config) == [0]

    def test_close_without_open(self, elisp, config):
        assert find_unmatched_delimiters("(foo bar)", (4, 9), elisp, config) == [8]

    def test_balanced_span(self, elisp, config):
        assert find_unmatched_delimiters("(a) (b)", (0, 7), elisp, config) == []

    def test_string_contents_ignored(self, elisp, config):
        assert find_unmatched_delimiters('(a "(" b)', (0, 9), elisp, config) == []

    def test_string_contents_counted_when_not_ignored(self, elisp, config):
        counted = config.replace(ignore_strings=False)
        assert find_unmatched_delimiters('(a "(" b)', (0, 9), elisp, counted) == [0]

    def test_comment_contents_ignored(self, elisp, config):
        assert find_unmatched_delimiters("(a ; )\n)", (0, 8), elisp, config) == []

    def test_cut_string_reports_its_quote(self, elisp, config):
        assert find_unmatched_delimiters('(a "bc") d', (0, 5), elisp, config) == [0, 3]

    def test_reversed_span(self, elisp, config):
        assert find_unmatched_delimiters("(foo bar)", (5, 0), elisp, config) == [0]


class TestScanReport:
    """complete=False means unknown, never balanced."""

    def test_complete_report(self, elisp, config):
        report = scan_region("(a b)", (0, 5), elisp, config)
        assert report.complete
        assert report.balanced
        assert report.span == (0, 5)

    def test_ceiling_skips_scan(self, elisp, config):
        report = scan_region("(foo bar)", (0, 9), elisp, config.replace(max_scan_length=3))
        assert not report.complete
        assert report.unmatched == []
        assert not report.balanced
        assert "max_scan_length" in report.reason


class TestPartition:
    """Safe sub-spans, in reverse order."""

    def test_single_region(self, elisp, config):
        assert partition_safe_regions("(foo bar)", (0, 5), elisp, config) == [Span(1, 5)]

    def test_regions_are_reversed(self, elisp, config):
        assert partition_safe_regions("(a) (b c)", (2, 7), elisp, config) == [Span(5, 7), Span(3, 4)]

    def test_unscanned_span_is_one_region(self, elisp, config):
        regions = partition_safe_regions("(foo bar)", (0, 9), elisp, config.replace(max_scan_length=3))
        assert regions == [Span(0, 9)]

    def test_comment_newline_is_protected(self, elisp, config):
        text = "(a ;; x\n b c)"
        assert partition_safe_regions(text, (5, 10), elisp, config) == [Span(8, 10), Span(5, 7)]

    def test_comment_newline_unprotected(self, elisp, config):
        text = "(a ;; x\n b c)"
        loose = config.replace(protect_comments=False)
        assert partition_safe_regions(text, (5, 10), elisp, loose) == [Span(5, 10)]


class TestSafeActions:
    """Balance-preserving delete, copy and paste."""

    def test_delete_keeps_stranded_opener(self, elisp, config):
        assert safe_delete("(foo bar)", (0, 5), elisp, config) == ("(bar)", 0)

    def test_delete_plain_when_disabled(self, elisp, config):
        plain = config.replace(safe_actions=False)
        assert safe_delete("(foo bar)", (0, 5), elisp, plain) == ("bar)", 0)

    def test_delete_does_not_comment_out_code(self, elisp, config):
        text, point = safe_delete("(a ;; x\n b c)", (5, 10), elisp, config)
        assert text == "(a ;;\n c)"
        assert point == 5
        read(text)

    @pytest.mark.parametrize("text,expected", [
        ("(a b ; )\n)", "(a ;)\n)"),
        ("(a b ; (\n)", "(a ;(\n)"),
    ])
    def test_delete_into_line_comment_keeps_comment_char(self, elisp, config, text, expected):
        deleted, point = safe_delete(text, (3, 7), elisp, config)
        assert deleted == expected
        assert point == 3
        assert analyze(deleted, elisp).balanced

    @pytest.mark.parametrize("text", [
        "(a b ; )\n)",
        "(defun f (x)\n  ;; (note)\n  (g \"(s)\" x))",
        "(a \"b ) c\" ; d (\n e)",
        "(let ((x 1)) ; c (\n  [y \"]\"])",
    ])
    def test_delete_never_unbalances(self, elisp, config, text):
        for start in range(len(text) + 1):
            for end in range(start, len(text) + 1):
                deleted, _ = safe_delete(text, (start, end), elisp, config)
                assert analyze(deleted, elisp).balanced, (start, end, deleted)

    def test_copy_drops_stranded_delimiters(self, elisp, config):
        assert safe_copy("(foo bar)", (0, 5), elisp, config) == "foo "

    def test_copy_plain_when_disabled(self, elisp, config):
        plain = config.replace(safe_actions=False)
        assert safe_copy("(foo bar)", (0, 5), elisp, plain) == "(foo "

    def test_paste_balances(self, elisp, config):
        assert safe_paste("(a )", 3, "b)", elisp, config) == ("(a (b))", 6)

    def test_paste_replaces_region(self, elisp, config):
        assert safe_paste("(a x)", 0, "y", elisp, config, region=(3, 4)) == ("(a y)", 4)


class TestBalance:
    """Minimal repair of arbitrary text."""

    @pytest.mark.parametrize("text,expected", [
        ("foo)", "(foo)"),
        ("(foo", "(foo)"),
        ("(a [b])", "(a [b])"),
        ("a) b]", "[(a) b]"),
        ("(a ]", "[(a )]"),
        ('(a "bc', '(a "bc")'),
        ("(a ; c", "(a ; c\n)"),
    ])
    def test_balance(self, elisp, text, expected):
        assert balance(text, elisp) == expected

    def test_block_comment_closed(self, scheme):
        assert balance("(a #| c", scheme) == "(a #| c|#)"

    @pytest.mark.parametrize("text", ["))((", "(a ; )", '"(', "[(]", "(a"])
    def test_result_always_reads(self, elisp, text):
        read(balance(text, elisp))
