"""
Ares Scanner - turns source text into tokens, one at a time.

The scanner keeps a single cursor into the source and hands out tokens on
demand through next_token(); the parser never sees more than two of them
at once. Newlines are tokens, not whitespace: they end statements.

Comments:
    # to end of line
    === anything, across lines ===
"""

import logging
import string
from typing import Iterator, List, Optional

from ..module import Module, UNKNOWN_MODULE
from .tokens import (
    Token, TokenType, SourceLocation, RESERVED_WORDS, OPERATORS,
    MAX_OPERATOR_LENGTH, INT64_MAX
)
from .errors import (
    create_unrecognized_character_error, create_unterminated_string_error,
    create_number_too_large_error, create_invalid_escape_error,
    create_incomplete_hex_escape_error, create_unterminated_comment_error,
    create_malformed_hex_error
)

logger = logging.getLogger(__name__)

EOF_CHAR = '\0'
LONG_COMMENT = '==='

LETTERS = frozenset(string.ascii_letters + '_')
DIGITS = frozenset(string.digits)
HEX_DIGITS = frozenset(string.hexdigits)

ESCAPE_SEQUENCES = {
    '"': '"',
    '\\': '\\',
    "'": "'",
    'n': '\n',
    'r': '\r',
    't': '\t',
}


class Scanner:
    """
    Ares lexical analyzer.

    Converts source text into a lazy stream of tokens. Any malformed input
    raises a LexerError pointing at the offending position; there is no
    recovery.
    """

    def __init__(self, source: str, module: Optional[Module] = None):
        """
        Initialize the scanner with source code.

        Args:
            source: Source code string
            module: Owning module, named in diagnostics
        """
        self.source = source
        self.module = module or UNKNOWN_MODULE
        self.pos = 0
        self.line = 1
        self.column = 1

    @property
    def filename(self) -> str:
        return self.module.filename

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the EOF token."""
        while True:
            token = self.next_token()
            yield token
            if token.token_type == TokenType.EOF:
                return

    def tokenize(self) -> List[Token]:
        """
        Tokenize the rest of the source.

        Returns:
            List of tokens ending with the EOF token
        """
        tokens = list(self)
        logger.debug("Scanned %d tokens from %s", len(tokens), self.filename)
        return tokens

    def next_token(self) -> Token:
        """
        Return the next token from the source.

        Once the end of input is reached every further call returns an
        EOF token.
        """
        self._skip_whitespace_and_comments()

        location = self._location()
        ch = self._current()

        if self._at_end():
            return Token(TokenType.EOF, "", None, location)

        if ch == '\n':
            self._advance()
            return Token(TokenType.NEWLINE, '\n', None, location)

        if ch in LETTERS:
            return self._tokenize_word(location)

        if ch == '0' and self._peek() in ('x', 'X'):
            return self._tokenize_hex_number(location)

        if ch in DIGITS:
            return self._tokenize_number(location)

        if ch in ('"', "'"):
            return self._tokenize_string(location)

        # Operators and punctuation (longest lexeme first)
        for op_len in range(MAX_OPERATOR_LENGTH, 0, -1):
            potential_op = self.source[self.pos:self.pos + op_len]
            if len(potential_op) == op_len and potential_op in OPERATORS:
                self._advance_by(op_len)
                return Token(OPERATORS[potential_op], potential_op, None, location)

        raise create_unrecognized_character_error(ch, location)

    def _tokenize_word(self, location: SourceLocation) -> Token:
        """Tokenize an identifier or a reserved word."""
        start_pos = self.pos
        while self._current() in LETTERS:
            self._advance()

        text = self.source[start_pos:self.pos]
        token_type = RESERVED_WORDS.get(text, TokenType.IDENT)

        value = None
        if token_type in (TokenType.TRUE, TokenType.FALSE):
            value = token_type == TokenType.TRUE

        return Token(token_type, text, value, location)

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """
        Tokenize a decimal integer or a float.

        A '.' turns the literal into a float unless it starts a '..'
        range operator, so `1.` is a float and `1..2` is a range.
        """
        start_pos = self.pos
        token_type = TokenType.INTEGER

        while self._current() in DIGITS:
            self._advance()

        if self._current() == '.' and self._peek() != '.':
            self._advance()
            while self._current() in DIGITS:
                self._advance()
            token_type = TokenType.FLOAT

        text = self.source[start_pos:self.pos]

        if token_type == TokenType.FLOAT:
            return Token(token_type, text, float(text), location)

        value = int(text)
        if value > INT64_MAX:
            raise create_number_too_large_error(location)
        return Token(token_type, text, value, location)

    def _tokenize_hex_number(self, location: SourceLocation) -> Token:
        """Tokenize a 0x / 0X prefixed integer."""
        start_pos = self.pos
        self._advance_by(2)

        while self._current() in HEX_DIGITS:
            self._advance()

        text = self.source[start_pos:self.pos]
        digits = text[2:]
        if not digits:
            raise create_malformed_hex_error(location)

        value = int(digits, 16)
        if value > INT64_MAX:
            raise create_number_too_large_error(location)
        return Token(TokenType.INTEGER, text, value, location)

    def _tokenize_string(self, location: SourceLocation) -> Token:
        """
        Tokenize a string delimited by matching single or double quotes.

        The token text is the decoded contents, without the delimiters.
        """
        delimiter = self._current()
        self._advance()  # Skip opening quote

        value_parts = []

        while True:
            if self._at_end():
                raise create_unterminated_string_error(location)

            ch = self._current()
            if ch == delimiter:
                break

            if ch == '\\':
                self._advance()  # Skip backslash
                value_parts.append(self._read_escape_sequence(delimiter, location))
            else:
                value_parts.append(ch)
                self._advance()

        self._advance()  # Skip closing quote

        value = ''.join(value_parts)
        return Token(TokenType.STRING, value, value, location)

    def _read_escape_sequence(self, delimiter: str, string_location: SourceLocation) -> str:
        """Decode the escape sequence following a backslash."""
        if self._at_end():
            raise create_unterminated_string_error(string_location)

        escape_char = self._current()

        if escape_char in ESCAPE_SEQUENCES:
            self._advance()
            return ESCAPE_SEQUENCES[escape_char]

        if escape_char == 'x':
            self._advance()
            return self._read_hex_escape(delimiter)

        raise create_invalid_escape_error(escape_char, self._location())

    def _read_hex_escape(self, delimiter: str) -> str:
        """Read exactly two hex digits of a \\xNN escape."""
        value = 0
        for _ in range(2):
            ch = self._current()
            if self._at_end() or ch == delimiter or ch not in HEX_DIGITS:
                raise create_incomplete_hex_escape_error(self._location())
            value = value * 16 + int(ch, 16)
            self._advance()
        return chr(value)

    def _skip_whitespace_and_comments(self):
        """Skip blanks, '#' line comments and '===' long comments."""
        while not self._at_end():
            ch = self._current()

            if ch in (' ', '\t', '\r'):
                self._advance()
                continue

            # Line comments stop before the newline, which is still a token
            if ch == '#':
                while not self._at_end() and self._current() != '\n':
                    self._advance()
                continue

            if self.source.startswith(LONG_COMMENT, self.pos):
                self._skip_long_comment()
                continue

            break

    def _skip_long_comment(self):
        location = self._location()
        self._advance_by(len(LONG_COMMENT))
        while not self.source.startswith(LONG_COMMENT, self.pos):
            if self._at_end():
                raise create_unterminated_comment_error(location)
            self._advance()
        self._advance_by(len(LONG_COMMENT))

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _current(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return EOF_CHAR

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        for _ in range(count):
            self._advance()

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return EOF_CHAR


def tokenize_string(source: str, name: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        name: Module name for error reporting

    Returns:
        List of tokens ending with EOF

    Raises:
        LexerError: If scanning fails
    """
    return Scanner(source, Module(name)).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If scanning fails
        OSError: If the file cannot be read
    """
    module = Module.from_path(filepath)
    with open(module.path, 'r', encoding='utf-8') as f:
        source = f.read()

    return Scanner(source, module).tokenize()
