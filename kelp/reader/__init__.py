"""
kelp.reader - The kelp reader

Converts source text into token trees.

Phases:
1. Scan (scanner.py): Text -> lexeme spans
2. Classify (classifier.py): Lexeme -> leaf token or structural marker
3. Assemble (assembler.py): Tokens -> nested cons trees
"""

from kelp.reader.assembler import (
    DEFAULT_MAX_DEPTH,
    Reader,
    read_lisp,
    read_str,
    read_token,
)
from kelp.reader.classifier import classify, classify_span
from kelp.reader.reader_macros import QUOTE_OPERATORS, quote_form
from kelp.reader.scanner import Scanner, SourceLocation, Span, scan, scan_stream

__all__ = [
    # Scanner
    "Scanner",
    "SourceLocation",
    "Span",
    "scan",
    "scan_stream",
    # Classifier
    "classify",
    "classify_span",
    # Reader macros
    "QUOTE_OPERATORS",
    "quote_form",
    # Assembler
    "DEFAULT_MAX_DEPTH",
    "Reader",
    "read_str",
    "read_lisp",
    "read_token",
]
