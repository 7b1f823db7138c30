"""
Token definitions for the Ares scanner.

This module defines all token types the Ares front end knows about:
- Literals (strings, integers, floats, booleans, nil) and identifiers
- Reserved words
- Operators and punctuation, including compound assignments
- Imaginary tokens the parser manufactures to label tree nodes

Token kinds are grouped with explicit sets (LITERALS, KEYWORDS, ...) rather
than by their position in the enumeration.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional, Union


# Literal payload carried by STRING, INTEGER, FLOAT, TRUE and FALSE tokens
Value = Union[str, int, float, bool]

# Integer literals must fit in a signed 64-bit word
INT64_MAX = 2 ** 63 - 1


class TokenType(Enum):
    """
    Enumeration of all token types in Ares.

    Organized by band: literals, reserved words, symbols, assignments and
    imaginary node kinds.
    """

    # ========================================================================
    # Literals and identifiers
    # ========================================================================
    STRING = auto()                 # "hello", 'world'
    INTEGER = auto()                # 42, 0x2A
    FLOAT = auto()                  # 3.14, 1.
    TRUE = auto()                   # true
    FALSE = auto()                  # false
    NIL = auto()                    # nil
    IDENT = auto()                  # variable_name

    # ========================================================================
    # Reserved words
    # ========================================================================
    DEF = auto()                    # def
    IF = auto()                     # if
    ELIF = auto()                   # elif
    ELSE = auto()                   # else
    FOR = auto()                    # for
    WHILE = auto()                  # while
    UNTIL = auto()                  # until
    IN = auto()                     # in
    IMPORT = auto()                 # import
    DEBUG = auto()                  # debug
    RETURN = auto()                 # return

    # ========================================================================
    # Symbols
    # ========================================================================
    LOGICAL_OR = auto()             # ||
    LOGICAL_AND = auto()            # &&
    EQL = auto()                    # ==
    NOT_EQL = auto()                # !=
    LT = auto()                     # <
    LE = auto()                     # <=
    GT = auto()                     # >
    GE = auto()                     # >=
    BITWISE_OR = auto()             # |
    BITWISE_XOR = auto()            # ^
    BITWISE_AND = auto()            # &
    LEFT_SHIFT = auto()             # <<
    RIGHT_SHIFT = auto()            # >>
    DOT = auto()                    # .
    DOTDOT = auto()                 # .. (range)
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MUL = auto()                    # *
    DIV = auto()                    # /
    MODULO = auto()                 # %
    BANG = auto()                   # !
    COMPL = auto()                  # ~
    LPAREN = auto()                 # (
    RPAREN = auto()                 # )
    LBRACK = auto()                 # [
    RBRACK = auto()                 # ]
    LBRACE = auto()                 # {
    RBRACE = auto()                 # }
    COMMA = auto()                  # ,
    SEMICOLON = auto()              # ;
    ASSIGN_ARROW = auto()           # => (hash elements)
    NEWLINE = auto()                # \n (terminates statements)

    # ========================================================================
    # Assignments
    # ========================================================================
    ASSIGN = auto()                 # =
    BITWISE_OR_ASSIGN = auto()      # |=
    BITWISE_XOR_ASSIGN = auto()     # ^=
    BITWISE_AND_ASSIGN = auto()     # &=
    LEFT_SHIFT_ASSIGN = auto()      # <<=
    RIGHT_SHIFT_ASSIGN = auto()     # >>=
    PLUS_ASSIGN = auto()            # +=
    MINUS_ASSIGN = auto()           # -=
    MUL_ASSIGN = auto()             # *=
    DIV_ASSIGN = auto()             # /=
    MODULO_ASSIGN = auto()          # %=

    # ========================================================================
    # Imaginary tokens (never produced by the scanner)
    # ========================================================================
    BLOCK = auto()
    SUB_DECL = auto()
    SUB_LITERAL = auto()
    SUB_PARAMS = auto()
    ARRAY_DECL = auto()
    HASH_DECL = auto()
    HASH_ELEM = auto()
    CALL = auto()
    SUBSCRIPT = auto()
    ELIF_CLAUSES = auto()           # rendered as "ELIF"
    NEGATE = auto()                 # unary minus, retagged by the parser

    EOF = auto()                    # End of file


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    `filename` is the display name of the owning module, used verbatim
    in diagnostics.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of source

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Ares language.

    `text` is the exact source lexeme, except for strings (decoded contents)
    and imaginary tokens (their mnemonic). `value` is only set for literal
    tokens.
    """
    token_type: TokenType
    text: str
    value: Optional[Value]
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.text:
            return f"{self.token_type.name}({self.text!r} -> {self.value!r})"
        return f"{self.token_type.name}({self.text!r})"

    def __repr__(self) -> str:
        return (f"Token({self.token_type.name}, {self.text!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def line_num(self) -> int:
        return self.location.line

    @property
    def line_pos(self) -> int:
        return self.location.column

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal or an identifier."""
        return self.token_type in LITERALS

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a reserved word."""
        return self.token_type in KEYWORDS

    @property
    def is_comparison(self) -> bool:
        return self.token_type in COMPARISON_OPERATORS

    @property
    def is_term_operator(self) -> bool:
        return self.token_type in TERM_OPERATORS

    @property
    def is_assignment(self) -> bool:
        return self.token_type in ASSIGNMENT_OPERATORS

    @property
    def is_imaginary(self) -> bool:
        return self.token_type in IMAGINARY_TYPES


def imaginary_token(token_type: TokenType, location: SourceLocation) -> Token:
    """
    Create a token the scanner never produces, used to label a grammar
    construct in the tree. Its text is the mnemonic so that tree dumps
    stay readable.
    """
    return Token(token_type, IMAGINARY[token_type], None, location)


# Lookup tables used by the scanner and the parser

RESERVED_WORDS = {
    "def": TokenType.DEF,
    "if": TokenType.IF,
    "elif": TokenType.ELIF,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "while": TokenType.WHILE,
    "until": TokenType.UNTIL,
    "in": TokenType.IN,
    "import": TokenType.IMPORT,
    "debug": TokenType.DEBUG,
    "return": TokenType.RETURN,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "nil": TokenType.NIL,
}

# Longest lexemes are tried first by the scanner
OPERATORS = {
    # Logical
    "||": TokenType.LOGICAL_OR,
    "&&": TokenType.LOGICAL_AND,
    "!": TokenType.BANG,

    # Comparison
    "==": TokenType.EQL,
    "!=": TokenType.NOT_EQL,
    "<": TokenType.LT,
    "<=": TokenType.LE,
    ">": TokenType.GT,
    ">=": TokenType.GE,

    # Bitwise
    "|": TokenType.BITWISE_OR,
    "^": TokenType.BITWISE_XOR,
    "&": TokenType.BITWISE_AND,
    "~": TokenType.COMPL,
    "<<": TokenType.LEFT_SHIFT,
    ">>": TokenType.RIGHT_SHIFT,

    # Arithmetic
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MUL,
    "/": TokenType.DIV,
    "%": TokenType.MODULO,

    # Assignment
    "=": TokenType.ASSIGN,
    "|=": TokenType.BITWISE_OR_ASSIGN,
    "^=": TokenType.BITWISE_XOR_ASSIGN,
    "&=": TokenType.BITWISE_AND_ASSIGN,
    "<<=": TokenType.LEFT_SHIFT_ASSIGN,
    ">>=": TokenType.RIGHT_SHIFT_ASSIGN,
    "+=": TokenType.PLUS_ASSIGN,
    "-=": TokenType.MINUS_ASSIGN,
    "*=": TokenType.MUL_ASSIGN,
    "/=": TokenType.DIV_ASSIGN,
    "%=": TokenType.MODULO_ASSIGN,

    # Punctuation
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACK,
    "]": TokenType.RBRACK,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ".": TokenType.DOT,
    "..": TokenType.DOTDOT,
    "=>": TokenType.ASSIGN_ARROW,
}

MAX_OPERATOR_LENGTH = max(len(op) for op in OPERATORS)

LITERALS = frozenset({
    TokenType.STRING, TokenType.INTEGER, TokenType.FLOAT,
    TokenType.TRUE, TokenType.FALSE, TokenType.NIL, TokenType.IDENT,
})

KEYWORDS = frozenset({
    TokenType.DEF, TokenType.IF, TokenType.ELIF, TokenType.ELSE,
    TokenType.FOR, TokenType.WHILE, TokenType.UNTIL, TokenType.IN,
    TokenType.IMPORT, TokenType.DEBUG, TokenType.RETURN,
})

COMPARISON_OPERATORS = frozenset({
    TokenType.LT, TokenType.LE, TokenType.GT, TokenType.GE,
})

TERM_OPERATORS = frozenset({
    TokenType.MUL, TokenType.DIV, TokenType.MODULO,
})

ASSIGNMENT_OPERATORS = frozenset({
    TokenType.ASSIGN, TokenType.BITWISE_OR_ASSIGN, TokenType.BITWISE_XOR_ASSIGN,
    TokenType.BITWISE_AND_ASSIGN, TokenType.LEFT_SHIFT_ASSIGN,
    TokenType.RIGHT_SHIFT_ASSIGN, TokenType.PLUS_ASSIGN, TokenType.MINUS_ASSIGN,
    TokenType.MUL_ASSIGN, TokenType.DIV_ASSIGN, TokenType.MODULO_ASSIGN,
})

# Imaginary token kinds mapped to the text they render with
IMAGINARY = {
    TokenType.BLOCK: "BLOCK",
    TokenType.SUB_DECL: "SUB_DECL",
    TokenType.SUB_LITERAL: "SUB_LITERAL",
    TokenType.SUB_PARAMS: "SUB_PARAMS",
    TokenType.ARRAY_DECL: "ARRAY_DECL",
    TokenType.HASH_DECL: "HASH_DECL",
    TokenType.HASH_ELEM: "HASH_ELEM",
    TokenType.CALL: "CALL",
    TokenType.SUBSCRIPT: "SUBSCRIPT",
    TokenType.ELIF_CLAUSES: "ELIF",
}

IMAGINARY_TYPES = frozenset(IMAGINARY) | {TokenType.NEGATE}
