"""
Tests for lexeme classification.

Each lexeme is classified by the first rule that accepts it, so these tests
also pin down the rule order (rationals before floats before integers,
strings committing on a leading quote, symbols last).
"""

import random
import unittest

from kelp.reader.classifier import classify, classify_span
from kelp.reader.scanner import Span
from kelp.types import (
    INT64_MAX,
    INT64_MIN,
    Comment,
    Cons,
    Dot,
    EmptyList,
    Float,
    Integer,
    ListEnd,
    ListStart,
    Nil,
    QuotePrefix,
    Rational,
    String,
    Symbol,
    TokenClassificationError,
)


class TestNumbers(unittest.TestCase):
    """Test integer, float and rational literals."""

    def test_integer(self):
        self.assertEqual(classify("42"), Integer(42))
        self.assertEqual(classify("-42"), Integer(-42))
        self.assertEqual(classify("+7"), Integer(7))
        self.assertEqual(classify("007"), Integer(7))

    def test_random_digit_strings(self):
        """Every sign-optional digit string in range reads as its exact value."""
        rng = random.Random(1234)
        for _ in range(500):
            sign = rng.choice(["", "-", "+"])
            digits = "".join(rng.choice("0123456789") for _ in range(rng.randint(1, 18)))
            text = sign + digits
            with self.subTest(text=text):
                self.assertEqual(classify(text), Integer(int(text)))

    def test_integer_bounds(self):
        self.assertEqual(classify(str(INT64_MAX)), Integer(INT64_MAX))
        self.assertEqual(classify(str(INT64_MIN)), Integer(INT64_MIN))
        with self.assertRaises(TokenClassificationError):
            classify(str(INT64_MAX + 1))
        with self.assertRaises(TokenClassificationError):
            classify(str(INT64_MIN - 1))

    def test_float(self):
        self.assertEqual(classify("3.14159"), Float(3.14159))
        self.assertEqual(classify("1.5e3"), Float(1500.0))
        self.assertEqual(classify("2.0E-2"), Float(0.02))
        self.assertEqual(classify("-0.5"), Float(-0.5))

    def test_float_out_of_range(self):
        with self.assertRaises(TokenClassificationError):
            classify("1.0e999")

    def test_incomplete_floats_are_not_numbers(self):
        self.assertEqual(classify("3."), Symbol("3."))
        self.assertEqual(classify("1.2.3"), Symbol("1.2.3"))
        with self.assertRaises(TokenClassificationError):
            classify(".5")

    def test_rational(self):
        self.assertEqual(classify("2/3"), Rational(2, 3))
        self.assertEqual(classify("-2/4"), Rational(-2, 4))
        self.assertEqual(classify("13/74"), Rational(13, 74))


class TestStrings(unittest.TestCase):
    """Test string literals and escapes."""

    def test_empty_string(self):
        self.assertEqual(classify('""'), String(""))

    def test_string(self):
        self.assertEqual(classify('"Hello, World!"'), String("Hello, World!"))

    def test_escaped_quotes(self):
        self.assertEqual(
            classify('"Hello, \\"World!\\""'), String('Hello, "World!"')
        )
        self.assertEqual(classify('"a\\"b"'), String('a"b'))

    def test_escapes(self):
        self.assertEqual(
            classify('"\\\\ \\\' \\n \\r \\t"'), String("\\ ' \n \r \t")
        )

    def test_escape_resolved_once(self):
        self.assertEqual(classify('"\\\\n"'), String("\\n"))

    def test_unterminated_string(self):
        for text in ('"abc', '"', '"abc\\"', '"abc\\'):
            with self.subTest(text=text):
                with self.assertRaises(TokenClassificationError):
                    classify(text)

    def test_unknown_escape(self):
        with self.assertRaises(TokenClassificationError):
            classify('"\\q"')


class TestMarkersAndSymbols(unittest.TestCase):
    """Test structural markers, nil, comments and symbols."""

    def test_markers(self):
        self.assertEqual(classify("("), ListStart())
        self.assertEqual(classify(")"), ListEnd())
        self.assertEqual(classify("."), Dot())
        self.assertEqual(classify("nil"), Nil())

    def test_comment(self):
        self.assertEqual(classify("; commented"), Comment(1, " commented"))
        self.assertEqual(classify(";;; header"), Comment(3, " header"))
        self.assertEqual(classify(";"), Comment(1, ""))

    def test_symbols(self):
        for text in ("foobar", "symbol-42", "+", "-", "nil?", "#foo", "a'b"):
            with self.subTest(text=text):
                self.assertEqual(classify(text), Symbol(text))

    def test_rejected_lexemes(self):
        for text in ("", "..", ".foo", "a b", "a(b"):
            with self.subTest(text=text):
                with self.assertRaises(TokenClassificationError):
                    classify(text)

    def test_error_carries_lexeme(self):
        with self.assertRaises(TokenClassificationError) as cm:
            classify(".foo")
        self.assertEqual(cm.exception.lexeme, ".foo")


class TestQuotePrefixes(unittest.TestCase):
    """Test quote and function-quote lexemes."""

    def test_bare_prefixes(self):
        self.assertEqual(classify("'"), QuotePrefix("quote"))
        self.assertEqual(classify("#'"), QuotePrefix("function"))

    def test_quoted_atom(self):
        self.assertEqual(
            classify("'foobar"),
            Cons(Symbol("quote"), Cons(Symbol("foobar"), EmptyList())),
        )

    def test_sharp_quoted_atom(self):
        self.assertEqual(
            classify("#'foo-bar"),
            Cons(Symbol("function"), Cons(Symbol("foo-bar"), EmptyList())),
        )

    def test_quote_of_marker_fails(self):
        with self.assertRaises(TokenClassificationError):
            classify("'.")


class TestClassifySpan(unittest.TestCase):
    """Test location reporting."""

    def test_error_location(self):
        buffer = "(a\n  .foo)"
        with self.assertRaises(TokenClassificationError) as cm:
            classify_span(Span(5, 9, buffer))
        self.assertEqual((cm.exception.line, cm.exception.col), (2, 2))
        self.assertIn("line: 2", str(cm.exception))


if __name__ == "__main__":
    unittest.main()
