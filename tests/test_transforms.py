"""
Tests for the structural transforms through the StructuralEditor facade.

Every operation either returns the transformed text with the point on the
same side of the result, or refuses and leaves the text unchanged.
"""

import pytest

from sexpedit.reader import print_tree, read
from sexpedit.syntax import analyze
from sexpedit.transform import StructuralEditor, slurp


@pytest.fixture
def editor(elisp, config):
    return StructuralEditor(elisp, config)


def assert_refused(result, text):
    assert not result.success
    assert result.text == text
    assert result.message


class TestSlurpBarf:
    """Grow or shrink a list by a neighbouring expression."""

    def test_slurp_forward(self, editor):
        result = editor.slurp("(foo (bar) baz)", 10)
        assert result.success
        assert result.text == "(foo (bar baz))"
        assert result.point == 14

    def test_slurp_backward(self, editor):
        result = editor.slurp("(foo (bar) baz)", 5)
        assert result.text == "((foo bar) baz)"
        assert result.point == 1

    def test_slurp_keeps_prefix(self, editor):
        assert editor.slurp("(a '(b) c)", 7).text == "(a '(b c))"

    def test_slurp_all(self, editor):
        result = editor.slurp("(a (b) c d)", 6, count=0)
        assert result.text == "(a (b c d))"
        assert result.point == 10

    def test_slurp_nothing_to_take(self, editor):
        assert_refused(editor.slurp("(a (b))", 6), "(a (b))")

    def test_barf_undoes_slurp(self, editor):
        slurped = editor.slurp("(foo (bar) baz)", 10)
        barfed = editor.barf(slurped.text, slurped.point)
        assert barfed.text == "(foo (bar) baz)"
        assert barfed.point == 10

    def test_barf_backward(self, editor):
        result = editor.barf("(a (b c) d)", 3)
        assert result.text == "(a b (c) d)"
        assert result.point == 5

    def test_barf_refuses_to_empty_list(self, editor):
        assert_refused(editor.barf("(a (b) c)", 6), "(a (b) c)")

    def test_clojure_vector(self, clojure, config):
        result = StructuralEditor(clojure, config).slurp("[a [b] c]", 6)
        assert result.text == "[a [b c]]"
        assert result.point == 8

    def test_functional_entry_point(self):
        assert slurp("(foo (bar) baz)", 10).text == "(foo (bar baz))"


class TestRaiseConvolute:
    """Move an expression outward."""

    def test_raise_replaces_enclosing_list(self, editor):
        result = editor.raise_sexp("(foo (bar) baz)", 6)
        assert result.text == "(foo bar baz)"
        assert result.point == 5

    def test_raise_at_top_level(self, editor):
        assert_refused(editor.raise_sexp("foo", 0), "foo")

    def test_raise_region(self, editor):
        result = editor.raise_sexp("(a (b c d))", (6, 9))
        assert result.text == "(a c d)"
        assert result.point == 6
        assert result.region == (3, 6)

    def test_convolute(self, editor):
        result = editor.convolute("(f (g x))", 6)
        assert result.text == "(g (f x))"
        assert result.point == 6

    def test_convolute_needs_two_lists(self, editor):
        assert_refused(editor.convolute("(foo)", 1), "(foo)")

    def test_raise_from_whitespace_uses_enclosing_list(self, editor):
        result = editor.raise_sexp("(foo (bar  baz) qux)", 10)
        assert result.success
        assert result.text == "(bar baz)"
        assert result.point == 0

    def test_convolute_from_whitespace(self, editor):
        result = editor.convolute("(f (g (a  b)))", 9)
        assert result.text == "(g (f (a b)))"
        assert result.point == 6

    def test_nothing_under_point_at_top_level(self, editor):
        assert_refused(editor.raise_sexp("a  b", 2), "a  b")


class TestSplice:
    """Remove delimiters, keep contents."""

    def test_splice(self, editor):
        result = editor.splice("(a (b c) d)", 3)
        assert result.text == "(a b c d)"
        assert result.point == 3

    def test_splice_from_inside(self, editor):
        assert editor.splice("(a (b c) d)", 5).text == "(a b c d)"

    def test_splice_removes_prefix(self, editor):
        assert editor.splice("(a '(b c))", 4).text == "(a b c)"
        assert editor.splice("(a '(b c))", 3).text == "(a b c)"

    def test_splice_empty_list(self, editor):
        assert editor.splice("(a () b)", 3).text == "(a b)"

    def test_splice_region(self, editor):
        result = editor.splice("(a (b) (c))", (3, 10))
        assert result.text == "(a b c)"
        assert result.region == (3, 6)

    def test_let_bindings_merge(self, editor):
        result = editor.splice("(let ((x 1)) (let ((y 2)) (+ x y)))", 13)
        assert result.text == "(let ((x 1) (y 2)) (+ x y))"
        assert result.point == 0

    def test_dependent_bindings_become_sequential(self, editor):
        result = editor.splice("(let ((x 1)) (let ((y x)) y))", 13)
        assert result.text == "(let* ((x 1) (y x)) y)"

    def test_splice_at_top_level(self, editor):
        assert_refused(editor.splice("foo bar", 1), "foo bar")


class TestJoinSplit:
    """Join neighbours or split one in two."""

    def test_join_lists(self, editor):
        result = editor.join("(a) (b)", 3)
        assert result.text == "(a b)"
        assert result.point == 5

    def test_join_strings(self, editor):
        result = editor.join('"ab" "cd"', 4)
        assert result.text == '"abcd"'

    def test_join_different_kinds(self, editor):
        assert_refused(editor.join("(a) [b]", 3), "(a) [b]")

    def test_split_list(self, editor):
        result = editor.split("(a b c)", 3)
        assert result.text == "(a) (b c)"
        assert result.point == 4

    def test_split_string(self, editor):
        result = editor.split('(f "abcd")', 6)
        assert result.text == '(f "ab" "cd")'
        assert result.point == 8

    def test_split_then_join_round_trips(self, editor):
        split = editor.split("(a b c)", 3)
        joined = editor.join(split.text, split.point)
        assert joined.text == "(a b c)"

    def test_split_refuses_comment(self, editor):
        text = "(a ; xy\n)"
        assert_refused(editor.split(text, 6), text)

    @pytest.mark.parametrize("point", [1, 6])
    def test_split_refuses_empty_half(self, editor, point):
        assert_refused(editor.split("(a b c)", point), "(a b c)")


class TestMove:
    """Reorder siblings and teleport into another list."""

    def test_move_up(self, editor):
        result = editor.move_up("(a b c)", 3)
        assert result.text == "(b a c)"
        assert result.point == 1

    def test_move_down(self, editor):
        result = editor.move_down("(a b c)", 1)
        assert result.text == "(b a c)"
        assert result.point == 3

    def test_move_down_repeated(self, editor):
        result = editor.move_down("(a b c)", 1, count=2)
        assert result.text == "(b c a)"
        assert result.point == 5

    def test_move_up_at_first(self, editor):
        assert_refused(editor.move_up("(a b c)", 1), "(a b c)")

    def test_move_region(self, editor):
        result = editor.move_up("(a b c)", (3, 6))
        assert result.text == "(b c a)"
        assert result.region == (1, 4)

    def test_teleport(self, editor):
        result = editor.teleport("(a (b)) (c d)", 3, target=8)
        assert result.text == "(a) (c (b) d)"
        assert result.point == 7

    def test_teleport_into_itself(self, editor):
        assert_refused(editor.teleport("(a (b)) (c)", 0, target=3), "(a (b)) (c)")

    def test_teleport_moves_one_expression_whatever_the_count(self, editor):
        result = editor.teleport("(a (b)) (c d)", 3, target=8, count=3)
        assert result.text == "(a) (c (b) d)"

    @pytest.mark.parametrize("op", ["move_up", "move_down"])
    def test_move_from_whitespace(self, editor, op):
        result = getattr(editor, op)("(foo (bar  baz) qux)", 10)
        expected = {"move_up": ("((bar baz) foo qux)", 1), "move_down": ("(foo qux (bar baz))", 9)}
        assert (result.text, result.point) == expected[op]


class TestPipeline:
    """Refusals, layout commands and safe actions on the facade."""

    def test_unbalanced_buffer_refused(self, editor):
        result = editor.slurp("(a (b) c", 6)
        assert_refused(result, "(a (b) c")
        assert "unbalanced" in result.message

    def test_point_out_of_range(self, editor):
        assert_refused(editor.slurp("(a)", 10), "(a)")

    def test_refusal_keeps_cursor(self, editor):
        result = editor.move_up("(a b c)", (1, 2))
        assert not result.success
        assert result.point == 2
        assert result.region == (1, 2)

    def test_oneline_at(self, editor):
        result = editor.oneline_at("(foo (bar\n baz))", 5)
        assert result.text == "(foo (bar baz))"
        assert result.operation == "normalize-oneline"

    def test_relayout_after_transform(self, editor):
        result = editor.raise_sexp("(when a\n      (list (foo\nbar)))", 20)
        assert result.text == "(when a\n  (foo\n   bar))"
        assert result.point == 10

    def test_no_relayout_when_disabled(self, elisp, config):
        editor = StructuralEditor(elisp, config.replace(reindent_mode="none"))
        result = editor.raise_sexp("(when a\n      (list (foo\nbar)))", 20)
        assert result.text == "(when a\n      (foo\nbar))"

    def test_delete_copy_paste(self, editor):
        assert editor.delete_region("(foo bar)", (0, 5)).text == "(bar)"
        assert editor.copy_region("(foo bar)", (0, 5)) == "foo "
        pasted = editor.paste("(a )", 3, "b)")
        assert pasted.text == "(a (b))"
        assert pasted.point == 6


OPERATIONS = ["slurp", "barf", "raise_sexp", "convolute", "splice", "join", "split", "move_up", "move_down"]

SOURCES = [
    "(foo (bar baz) 'qux)",
    "(a [b c] (d) \"e f\")",
    "(let ((x 1)) ; note\n  (let ((y x)) (f \"a b\" y)))",
    "(a) (b c)\n(d (e))",
]


class TestBalancePreservation:
    """Every operation at every point keeps the buffer readable or leaves it alone."""

    @pytest.mark.parametrize("op", OPERATIONS)
    @pytest.mark.parametrize("text", SOURCES)
    def test_result_is_balanced_or_unchanged(self, editor, op, text):
        for point in range(len(text) + 1):
            result = getattr(editor, op)(text, point)
            if not result.success:
                assert result.text == text
                continue
            assert analyze(result.text, editor.dialect).balanced, (point, result.text)
            assert print_tree(read(result.text)) == result.text
            assert 0 <= result.point <= len(result.text)

    @pytest.mark.parametrize("text,point", [
        ("(foo (bar) baz)", 10),
        ("(a (b c) d)", 8),
        ("((a b) c d)", 6),
        ("(x [y] z w)", 6),
    ])
    def test_barf_undoes_slurp_for_every_delimiter(self, editor, text, point):
        slurped = editor.slurp(text, point)
        assert slurped.success
        barfed = editor.barf(slurped.text, slurped.point)
        assert (barfed.text, barfed.point) == (text, point)
