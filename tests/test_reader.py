"""
Tests for the lossless reader and printer.
"""

import pytest

from sexpedit.exceptions import ReadError
from sexpedit.reader import (
    Atom,
    Escape,
    EscapeKind,
    NodeTransformer,
    Reader,
    SList,
    comments_of,
    fold,
    print_tree,
    read,
    strip_layout,
    to_data,
    walk,
)


ELISP_SOURCE = (
    ";;; sample.el --- test\n"
    "\n"
    "(defun f (x)\n"
    "  \"doc \\\"q\\\" (unbalanced\"\n"
    "  ;; comment with ) paren\n"
    "  (let ((y ?a) (z ?\\())\n"
    "    `(,x ,@y #'car #x1F #s(rec 1) [v 1.5] #<buffer b>)))\n"
)

CLOJURE_SOURCE = (
    "(ns demo.core)\n"
    "(defn f [x]\n"
    "  #{1 2} {:a 1, :b @x} #\"re(\" ^:private y\n"
    "  #?(:clj 1 :cljs 2) #_ignored `(~x ~@xs) \\a #'g #(inc %))\n"
)

SCHEME_SOURCE = "#| outer #| nested |# |#\n(define (f x) #;(skipped) #\\a 'x)\n"

COMMON_LISP_SOURCE = "(defun f () #+sbcl (a) #-sbcl b #.(c) #'car #\\Space #| x |#)\n"


class TestRoundTrip:
    """print_tree(read(text)) reproduces every byte."""

    def test_elisp(self, elisp):
        assert print_tree(read(ELISP_SOURCE, elisp)) == ELISP_SOURCE

    def test_clojure(self, clojure):
        assert print_tree(read(CLOJURE_SOURCE, clojure)) == CLOJURE_SOURCE

    def test_scheme(self, scheme):
        assert print_tree(read(SCHEME_SOURCE, scheme)) == SCHEME_SOURCE

    def test_common_lisp(self, common_lisp):
        assert print_tree(read(COMMON_LISP_SOURCE, common_lisp)) == COMMON_LISP_SOURCE

    @pytest.mark.parametrize("text", ["", "   ", "\n\n", "a", "()", "[]", "{}", ";; only\n"])
    def test_degenerate_inputs(self, text):
        assert print_tree(read(text)) == text

    def test_default_dialect_is_emacs_lisp(self):
        assert print_tree(read("?a")) == "?a"
        assert read("?a").children[0].kind is EscapeKind.CHAR


class TestTreeShape:
    """Node types produced by the reader."""

    def test_quoted_list(self):
        tree = read("'(a \"b\")")
        assert tree.children == [
            Escape(EscapeKind.QUOTE, SList("(", ")", [
                Atom("a"),
                Escape(EscapeKind.SPACE, " "),
                Escape(EscapeKind.STRING, "b"),
            ])),
        ]

    def test_string_payload_is_verbatim(self):
        tree = read('"a\\"b"')
        assert tree.children[0].payload == 'a\\"b'

    def test_number_literal(self, elisp):
        assert read("#x1F", elisp).children[0] == Escape(EscapeKind.NUMBER, "#x1F")

    def test_decimal_stays_atom(self, elisp):
        assert read("42", elisp).children[0] == Atom("42")

    def test_newline_marker(self):
        tree = read("a\nb")
        assert tree.children[1] == Escape(EscapeKind.NEWLINE)

    def test_stacked_prefixes(self):
        node = read("'#'car").children[0]
        assert node.kind is EscapeKind.QUOTE
        assert node.payload.kind is EscapeKind.FUNCTION
        assert node.payload.payload == Atom("car")

    def test_clojure_set_is_dispatch(self, clojure):
        node = read("#{1}", clojure).children[0]
        assert node.kind is EscapeKind.DISPATCH
        assert node.payload.opener == "{"

    def test_reader_instance_is_reusable(self, clojure):
        reader = Reader(clojure)
        assert print_tree(reader.read("[a]")) == "[a]"
        assert print_tree(reader.read("{:a 1}")) == "{:a 1}"


class TestReadErrors:
    """Unbalanced input fails loudly, never by truncation."""

    @pytest.mark.parametrize("text,position", [
        ("(a", 0),
        ("a)", 1),
        ("(a]", 2),
        ('(a "bc)', 3),
    ])
    def test_unbalanced(self, text, position):
        with pytest.raises(ReadError) as exc:
            read(text)
        assert exc.value.position == position

    def test_mismatch_message_names_opener(self):
        with pytest.raises(ReadError, match="mismatched"):
            read("(a]")

    def test_unterminated_block_comment(self, scheme):
        with pytest.raises(ReadError, match="block comment"):
            read("(a) #| never closed", scheme)

    def test_prefix_without_form(self, scheme):
        with pytest.raises(ReadError, match="reader macro") as exc:
            read("(a '#| c |#)", scheme)
        assert exc.value.position == 3


class TestPrefixLayout:
    """Comments between a prefix and its form stay inside the prefix."""

    def test_block_comment_after_quote(self, scheme):
        node = read("'#| c |# a", scheme).children[0]
        assert node.kind is EscapeKind.QUOTE
        assert node.payload == Atom("a")
        assert [n.kind for n in node.layout] == [EscapeKind.COMMENT, EscapeKind.SPACE]

    @pytest.mark.parametrize("text", [
        "'#| c |# a",
        "(f '#|x|#\n  (b c))",
        "#;#| skip |# (gone) kept",
        "`#|a|#,#|b|# x",
    ])
    def test_round_trip(self, scheme, text):
        assert print_tree(read(text, scheme)) == text

    def test_strip_layout_keeps_the_comment(self, scheme):
        assert strip_layout(read("'#| c |# a", scheme)) != strip_layout(read("'a", scheme))
        stripped = strip_layout(read("'#| c |#  a", scheme), drop_comments=True)
        assert stripped == strip_layout(read("'a", scheme))

    def test_comments_of_sees_prefix_layout(self, scheme):
        assert comments_of(read("'#| c |# a", scheme)) == ["#| c |#"]


class TestTreeUtilities:
    """Visitors, folds and layout stripping."""

    def test_strip_layout_ignores_whitespace(self):
        assert strip_layout(read("(a  b)")) == strip_layout(read("(a\n b)"))

    def test_strip_layout_can_drop_comments(self):
        with_comment = read("(a ; x\n b)")
        assert strip_layout(with_comment) != strip_layout(read("(a b)"))
        assert strip_layout(with_comment, drop_comments=True) == strip_layout(read("(a b)"))

    def test_comments_in_document_order(self):
        assert comments_of(read("; x\n(a ; y\n)")) == ["; x", "; y"]

    def test_to_data(self):
        assert to_data(read("'a")) == {"root": [{"escape": "quote", "payload": {"atom": "a"}}]}

    def test_transformer_skips_opaque_payloads(self):
        class Upper(NodeTransformer):
            def visit_Atom(self, node):
                return Atom(node.text.upper())

        assert print_tree(Upper().visit(read('(a "b" c)'))) == '(A "b" C)'

    def test_fold_counts_atoms(self):
        tree = read("(a (b c) 'd \"e\")")
        count = fold(tree, lambda node, kids: (1 if isinstance(node, Atom) else 0) + sum(kids))
        assert count == 4

    def test_walk_is_depth_first(self):
        atoms = [n.text for n in walk(read("(a (b) c)")) if isinstance(n, Atom)]
        assert atoms == ["a", "b", "c"]
