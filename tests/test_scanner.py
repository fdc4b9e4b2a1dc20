"""
Tests for the kelp scanner.

The scanner only splits text into spans; it never rejects input.
"""

import io
import unittest

from kelp.reader.scanner import Scanner, Span, scan, scan_stream


def lexemes(src: str) -> list[str]:
    return [span.text for span in scan(src)]


class TestSpan(unittest.TestCase):
    """Test span text and locations."""

    def test_text(self):
        span = Span(4, 10, "    foobar")
        self.assertEqual(span.text, "foobar")

    def test_location(self):
        buffer = "(a\n  bc)"
        span = Span(5, 7, buffer)
        self.assertEqual(span.text, "bc")
        loc = span.location
        self.assertEqual((loc.line, loc.col), (2, 2))

    def test_spans_share_buffer(self):
        src = "(one two)"
        spans = list(scan(src))
        self.assertTrue(all(span.buffer is src for span in spans))


class TestScanner(unittest.TestCase):
    """Test lexeme boundaries."""

    def test_empty(self):
        self.assertEqual(lexemes(""), [])

    def test_only_whitespace(self):
        self.assertEqual(lexemes("   \n\t "), [])

    def test_single_word(self):
        self.assertEqual(lexemes("foobar"), ["foobar"])

    def test_skips_initial_whitespace(self):
        self.assertEqual(lexemes("    foobar"), ["foobar"])

    def test_multiple_tokens(self):
        self.assertEqual(lexemes("  one two three  "), ["one", "two", "three"])

    def test_parens(self):
        self.assertEqual(lexemes(" ( "), ["("])
        self.assertEqual(lexemes(" ) "), [")"])
        self.assertEqual(lexemes(" () "), ["(", ")"])
        self.assertEqual(lexemes(" 42) "), ["42", ")"])
        self.assertEqual(lexemes(" foo-bar))"), ["foo-bar", ")", ")"])
        self.assertEqual(lexemes("(foo-bar)"), ["(", "foo-bar", ")"])
        self.assertEqual(lexemes("a(b"), ["a", "(", "b"])

    def test_strings(self):
        self.assertEqual(lexemes(' "this is a string" '), ['"this is a string"'])
        self.assertEqual(lexemes(' "" '), ['""'])

    def test_strings_with_escapes(self):
        src = ' "this string \\"contains\\" a string" '
        self.assertEqual(lexemes(src), ['"this string \\"contains\\" a string"'])

    def test_string_with_parens(self):
        self.assertEqual(lexemes('("a (b)")'), ["(", '"a (b)"', ")"])

    def test_unterminated_string_runs_to_end(self):
        self.assertEqual(lexemes('(x "abc def'), ["(", "x", '"abc def'])

    def test_trailing_backslash_in_string(self):
        self.assertEqual(lexemes('"abc\\'), ['"abc\\'])

    def test_quote(self):
        self.assertEqual(lexemes("'foo-bar"), ["'", "foo-bar"])
        self.assertEqual(lexemes("'(1 2)"), ["'", "(", "1", "2", ")"])

    def test_sharp_quote(self):
        self.assertEqual(lexemes("#'foo-bar"), ["#'", "foo-bar"])

    def test_sharp_without_quote_is_atom(self):
        self.assertEqual(lexemes("#foo"), ["#foo"])

    def test_comment_runs_to_end_of_line(self):
        self.assertEqual(
            lexemes("something ; commented\nsomething-else"),
            ["something", "; commented", "something-else"],
        )

    def test_escaped_paren_in_atom(self):
        self.assertEqual(lexemes("foo\\)bar)"), ["foo\\)bar", ")"])

    def test_dot(self):
        self.assertEqual(lexemes("(13 . 42)"), ["(", "13", ".", "42", ")"])


class TestScannerIteration(unittest.TestCase):
    """Test the iterator protocol."""

    def test_lazy_and_not_restartable(self):
        scanner = Scanner("a b")
        self.assertEqual(next(scanner).text, "a")
        self.assertEqual(next(scanner).text, "b")
        with self.assertRaises(StopIteration):
            next(scanner)
        self.assertEqual(list(scanner), [])

    def test_scan_stream(self):
        scanner = scan_stream(io.StringIO("(1 2)"))
        self.assertEqual([span.text for span in scanner], ["(", "1", "2", ")"])


if __name__ == "__main__":
    unittest.main()
