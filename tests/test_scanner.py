"""
Test suite for the Ares scanner.

Tests cover:
- Reserved words, literals and symbols
- Longest-match operator recognition
- Numeric and string literal values
- Comments, newlines and position tracking
- Scanner errors and their diagnostics
"""

import unittest
import tempfile
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from ares.module import Module
from ares.lexer.scanner import Scanner, tokenize_string, tokenize_file
from ares.lexer.tokens import TokenType, OPERATORS, RESERVED_WORDS
from ares.lexer.errors import LexerError, CompileError, ERROR_CODES


class TestScanner(unittest.TestCase):
    """Test cases for the scanner."""

    def _scan(self, source: str):
        """Helper returning (text, type) pairs up to and including EOF."""
        return [(token.text, token.token_type) for token in tokenize_string(source, "test")]

    def _scan_error(self, source: str) -> LexerError:
        with self.assertRaises(LexerError) as context:
            tokenize_string(source, "test")
        return context.exception

    def test_reserved_words(self):
        """Test that every reserved word scans to its own token type."""
        tokens = self._scan("\nif elif else while until in for import")

        self.assertEqual(tokens, [
            ("\n", TokenType.NEWLINE),
            ("if", TokenType.IF),
            ("elif", TokenType.ELIF),
            ("else", TokenType.ELSE),
            ("while", TokenType.WHILE),
            ("until", TokenType.UNTIL),
            ("in", TokenType.IN),
            ("for", TokenType.FOR),
            ("import", TokenType.IMPORT),
            ("", TokenType.EOF),
        ])

    def test_reserved_word_table(self):
        for word, token_type in RESERVED_WORDS.items():
            with self.subTest(word=word):
                self.assertEqual(self._scan(word), [(word, token_type), ("", TokenType.EOF)])

    def test_datatypes(self):
        """Test literal tokens, mirroring a mixed source line by line."""
        tokens = self._scan("100 200.452 1. randomid \"Hello\" 'world'\n"
                            "true false nil 0x4129\n")

        self.assertEqual(tokens, [
            ("100", TokenType.INTEGER),
            ("200.452", TokenType.FLOAT),
            ("1.", TokenType.FLOAT),
            ("randomid", TokenType.IDENT),
            ("Hello", TokenType.STRING),
            ("world", TokenType.STRING),
            ("\n", TokenType.NEWLINE),
            ("true", TokenType.TRUE),
            ("false", TokenType.FALSE),
            ("nil", TokenType.NIL),
            ("0x4129", TokenType.INTEGER),
            ("\n", TokenType.NEWLINE),
            ("", TokenType.EOF),
        ])

    def test_symbols(self):
        tokens = self._scan("\n+ - * >>= <<= /= % %= [")

        self.assertEqual(tokens, [
            ("\n", TokenType.NEWLINE),
            ("+", TokenType.PLUS),
            ("-", TokenType.MINUS),
            ("*", TokenType.MUL),
            (">>=", TokenType.RIGHT_SHIFT_ASSIGN),
            ("<<=", TokenType.LEFT_SHIFT_ASSIGN),
            ("/=", TokenType.DIV_ASSIGN),
            ("%", TokenType.MODULO),
            ("%=", TokenType.MODULO_ASSIGN),
            ("[", TokenType.LBRACK),
            ("", TokenType.EOF),
        ])

    def test_every_operator_is_one_token(self):
        """Test that each operator lexeme scans as exactly one token."""
        for lexeme, token_type in OPERATORS.items():
            with self.subTest(lexeme=lexeme):
                self.assertEqual(self._scan(lexeme), [(lexeme, token_type), ("", TokenType.EOF)])

    def test_longest_match(self):
        self.assertEqual(self._scan("<<=")[0], ("<<=", TokenType.LEFT_SHIFT_ASSIGN))
        self.assertEqual(self._scan("&&")[0], ("&&", TokenType.LOGICAL_AND))
        self.assertEqual(self._scan("&=")[0], ("&=", TokenType.BITWISE_AND_ASSIGN))
        self.assertEqual(self._scan("=>")[0], ("=>", TokenType.ASSIGN_ARROW))

        tokens = self._scan("...")
        self.assertEqual(tokens[:2], [("..", TokenType.DOTDOT), (".", TokenType.DOT)])

        tokens = self._scan("a>>b")
        self.assertEqual([t for _, t in tokens],
                         [TokenType.IDENT, TokenType.RIGHT_SHIFT, TokenType.IDENT, TokenType.EOF])

    def test_range_after_integer(self):
        """Test that '..' after digits is a range, not a float."""
        tokens = self._scan("1..10")

        self.assertEqual(tokens, [
            ("1", TokenType.INTEGER),
            ("..", TokenType.DOTDOT),
            ("10", TokenType.INTEGER),
            ("", TokenType.EOF),
        ])

    def test_numeric_values(self):
        tokens = tokenize_string("0x4129 0XfF 200.452 1. 42", "test")

        self.assertEqual(tokens[0].value, 16681)
        self.assertEqual(tokens[1].value, 255)
        self.assertEqual(tokens[2].value, 200.452)
        self.assertEqual(tokens[3].value, 1.0)
        self.assertIsInstance(tokens[3].value, float)
        self.assertEqual(tokens[4].value, 42)
        self.assertIsInstance(tokens[4].value, int)

    def test_integer_limits(self):
        tokens = tokenize_string("9223372036854775807 0x7fffffffffffffff", "test")
        self.assertEqual(tokens[0].value, 2 ** 63 - 1)
        self.assertEqual(tokens[1].value, 2 ** 63 - 1)

    def test_integer_overflow(self):
        """Test that literals beyond the signed 64-bit range are rejected."""
        error = self._scan_error("x = 9223372036854775808")
        self.assertEqual(error.code, "L003")
        self.assertEqual(str(error), "test:1:5: number literal was too large")

        error = self._scan_error("0x8000000000000000")
        self.assertEqual(error.code, "L003")

    def test_malformed_hex(self):
        error = self._scan_error("0x")
        self.assertEqual(error.code, "L007")

    def test_boolean_values(self):
        tokens = tokenize_string("true false nil", "test")
        self.assertIs(tokens[0].value, True)
        self.assertIs(tokens[1].value, False)
        self.assertIsNone(tokens[2].value)

    def test_non_literal_tokens_have_no_value(self):
        for token in tokenize_string("abc + if (\n", "test"):
            with self.subTest(token=str(token)):
                self.assertIsNone(token.value)

    def test_string_escapes(self):
        tokens = tokenize_string('"a\\nb" "\\x41" \'it\\\'s\' "\\t\\r\\\\\\""', "test")

        self.assertEqual(tokens[0].value, "a\nb")
        self.assertEqual(tokens[0].text, "a\nb")
        self.assertEqual(tokens[1].value, "A")
        self.assertEqual(tokens[2].value, "it's")
        self.assertEqual(tokens[3].value, "\t\r\\\"")

    def test_string_with_other_quote(self):
        tokens = tokenize_string("'say \"hi\"' \"don't\"", "test")
        self.assertEqual(tokens[0].value, 'say "hi"')
        self.assertEqual(tokens[1].value, "don't")

    def test_unterminated_string(self):
        error = self._scan_error('a = "abc')
        self.assertEqual(error.code, "L002")
        self.assertEqual(str(error), "test:1:5: unterminated string literal")

        error = self._scan_error("'abc\"")
        self.assertEqual(error.code, "L002")

    def test_invalid_escape(self):
        error = self._scan_error('"\\q"')
        self.assertEqual(error.code, "L004")
        self.assertEqual(error.message, "invalid escape character q")

    def test_incomplete_hex_escape(self):
        for source in ('"\\x4"', '"\\xzz"', '"\\x'):
            with self.subTest(source=source):
                error = self._scan_error(source)
                self.assertEqual(error.code, "L005")
                self.assertEqual(error.message, "incomplete hex escape sequence")

    def test_newline_is_a_token(self):
        """Test that newlines are never collapsed into whitespace."""
        self.assertEqual(self._scan("a\nb"), [
            ("a", TokenType.IDENT),
            ("\n", TokenType.NEWLINE),
            ("b", TokenType.IDENT),
            ("", TokenType.EOF),
        ])

        types = [t for _, t in self._scan("a\n\n")]
        self.assertEqual(types, [TokenType.IDENT, TokenType.NEWLINE, TokenType.NEWLINE, TokenType.EOF])

    def test_positions(self):
        tokens = tokenize_string("a = 1\n  bb\t+ 2", "test")
        positions = [(t.text, t.line_num, t.line_pos) for t in tokens]

        self.assertEqual(positions, [
            ("a", 1, 1),
            ("=", 1, 3),
            ("1", 1, 5),
            ("\n", 1, 6),
            ("bb", 2, 3),
            ("+", 2, 6),
            ("2", 2, 8),
            ("", 2, 9),
        ])

    def test_positions_after_multiline_string(self):
        tokens = tokenize_string('"a\nb" c', "test")
        self.assertEqual((tokens[1].text, tokens[1].line_num, tokens[1].line_pos), ("c", 2, 4))

    def test_line_comments(self):
        self.assertEqual(self._scan("a # comment == 'x\nb"), [
            ("a", TokenType.IDENT),
            ("\n", TokenType.NEWLINE),
            ("b", TokenType.IDENT),
            ("", TokenType.EOF),
        ])

    def test_long_comments(self):
        tokens = tokenize_string("=== first\nsecond === a ===x===b", "test")

        self.assertEqual([(t.text, t.token_type) for t in tokens], [
            ("a", TokenType.IDENT),
            ("b", TokenType.IDENT),
            ("", TokenType.EOF),
        ])
        self.assertEqual((tokens[0].line_num, tokens[0].line_pos), (2, 12))

    def test_equality_is_not_a_comment(self):
        self.assertEqual(self._scan("a == b")[1], ("==", TokenType.EQL))

    def test_unterminated_long_comment(self):
        error = self._scan_error("a\n=== never closed")
        self.assertEqual(error.code, "L006")
        self.assertEqual(str(error), "test:2:1: unterminated long comment")

    def test_unrecognized_character(self):
        error = self._scan_error("a @")
        self.assertEqual(error.code, "L001")
        self.assertEqual(str(error), "test:1:3: unrecognized character '@'")
        self.assertIsInstance(error, CompileError)

    def test_non_printable_character_is_escaped(self):
        """Test that control characters appear escaped in the one-line diagnostic."""
        error = self._scan_error("\x00")
        self.assertEqual(str(error), "test:1:1: unrecognized character '\\x00'")

        error = self._scan_error("a\x1b")
        self.assertEqual(error.message, "unrecognized character '\\x1b'")
        self.assertIn("U+001B", error.diagnostic.help_text)

    def test_every_raised_code_is_documented(self):
        sources = ["@", '"abc', "9223372036854775808", '"\\q"', '"\\x4"', "=== open", "0x"]

        codes = {self._scan_error(source).code for source in sources}

        self.assertEqual(codes, set(ERROR_CODES))

    def test_identifiers_are_letters_and_underscores(self):
        self.assertEqual(self._scan("_snake_Case"), [("_snake_Case", TokenType.IDENT), ("", TokenType.EOF)])

    def test_eof_is_idempotent(self):
        """Test that scanning past the end keeps returning EOF."""
        scanner = Scanner("a", Module("test"))

        self.assertEqual(scanner.next_token().token_type, TokenType.IDENT)
        for _ in range(3):
            token = scanner.next_token()
            self.assertEqual(token.token_type, TokenType.EOF)
            self.assertEqual(token.text, "")

    def test_iteration_stops_after_eof(self):
        scanner = Scanner("a b", Module("test"))
        tokens = list(scanner)

        self.assertEqual(len(tokens), 3)
        self.assertEqual(tokens[-1].token_type, TokenType.EOF)

    def test_token_classification(self):
        tokens = tokenize_string("'s' x if <= % += (", "test")

        self.assertTrue(tokens[0].is_literal)
        self.assertTrue(tokens[1].is_literal)
        self.assertTrue(tokens[2].is_keyword)
        self.assertTrue(tokens[3].is_comparison)
        self.assertTrue(tokens[4].is_term_operator)
        self.assertTrue(tokens[5].is_assignment)
        self.assertFalse(tokens[6].is_literal or tokens[6].is_keyword)

    def test_module_name_in_locations(self):
        scanner = Scanner("x", Module("lib/util.ares"))
        self.assertEqual(str(scanner.next_token().location), "lib/util.ares:1:1")


class TestModule(unittest.TestCase):
    """Test module descriptors and reading modules from files."""

    def test_named_module_has_no_path(self):
        module = Module("repl")

        self.assertEqual(module.filename, "repl")
        self.assertIsNone(module.path)
        self.assertEqual(str(module), "repl")

    def test_module_from_path(self):
        module = Module.from_path(os.path.join("lib", "util.ares"))

        self.assertEqual(module.path, os.path.join("lib", "util.ares"))
        self.assertEqual(module.filename, module.path)

    def test_default_module(self):
        token = Scanner("x").next_token()
        self.assertEqual(token.location.filename, "<unknown>")

    def test_tokenize_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "main.ares")
            with open(path, 'w', encoding='utf-8') as f:
                f.write("a = 1\n")

            tokens = tokenize_file(path)

        self.assertEqual([t.token_type for t in tokens], [
            TokenType.IDENT, TokenType.ASSIGN, TokenType.INTEGER, TokenType.NEWLINE, TokenType.EOF,
        ])
        self.assertEqual(tokens[0].location.filename, path)


if __name__ == '__main__':
    unittest.main()
