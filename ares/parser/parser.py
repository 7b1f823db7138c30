"""
Ares Recursive Descent Parser

Builds a homogeneous syntax tree from the scanner's token stream. Tokens
are pulled one at a time; the parser looks at the current token and, in
exactly one place (telling `def name(...)` from `def (...)`), at the token
after it.

Binary operators are parsed by precedence climbing: one loop parses a unary
operand, then folds every operator at or above the minimum precedence into
a new node by re-rooting the operand parsed so far.
"""

import dataclasses
import logging
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional
from enum import IntEnum

from ..module import Module
from ..lexer.scanner import Scanner
from ..lexer.tokens import Token, TokenType, imaginary_token
from .ast_nodes import Node
from .errors import (
    create_unexpected_token_error, create_invalid_assignment_error,
    create_return_outside_subroutine_error, create_expected_expression_error,
    create_nesting_too_deep_error
)

logger = logging.getLogger(__name__)


class Precedence(IntEnum):
    """Binary operator precedence levels, lowest first."""
    NONE = 0
    ASSIGNMENT = 1      # =, +=, <<=, etc. (right associative)
    RANGE = 2           # ..
    OR = 3              # ||
    AND = 4             # &&
    EQUALITY = 5        # ==, !=
    COMPARISON = 6      # <, <=, >, >=
    BITWISE_OR = 7      # |
    BITWISE_XOR = 8     # ^
    BITWISE_AND = 9     # &
    SHIFT = 10          # <<, >>
    TERM = 11           # +, -
    FACTOR = 12         # *, /, %
    UNARY = 13          # -, !, ~


# Operator precedence table for the left associative binary levels
PRECEDENCES = {
    TokenType.DOTDOT: Precedence.RANGE,
    TokenType.LOGICAL_OR: Precedence.OR,
    TokenType.LOGICAL_AND: Precedence.AND,
    TokenType.EQL: Precedence.EQUALITY,
    TokenType.NOT_EQL: Precedence.EQUALITY,
    TokenType.LT: Precedence.COMPARISON,
    TokenType.LE: Precedence.COMPARISON,
    TokenType.GT: Precedence.COMPARISON,
    TokenType.GE: Precedence.COMPARISON,
    TokenType.BITWISE_OR: Precedence.BITWISE_OR,
    TokenType.BITWISE_XOR: Precedence.BITWISE_XOR,
    TokenType.BITWISE_AND: Precedence.BITWISE_AND,
    TokenType.LEFT_SHIFT: Precedence.SHIFT,
    TokenType.RIGHT_SHIFT: Precedence.SHIFT,
    TokenType.PLUS: Precedence.TERM,
    TokenType.MINUS: Precedence.TERM,
    TokenType.MUL: Precedence.FACTOR,
    TokenType.DIV: Precedence.FACTOR,
    TokenType.MODULO: Precedence.FACTOR,
}

UNARY_OPERATORS = frozenset({TokenType.MINUS, TokenType.BANG, TokenType.COMPL})

# Only these can stand on the left of an assignment
ASSIGNABLE = frozenset({TokenType.IDENT, TokenType.SUBSCRIPT})

# Tokens after which a bare 'return' has no value
RETURN_TERMINATORS = frozenset({
    TokenType.NEWLINE, TokenType.SEMICOLON, TokenType.EOF, TokenType.RBRACE,
})

# Deepest allowed nesting of expressions and blocks
MAX_NESTING_DEPTH = 256

# Interpreter recursion limit while parsing; each nesting level takes at
# most about ten Python frames
RECURSION_LIMIT = MAX_NESTING_DEPTH * 10 + 1000


@contextmanager
def _recursion_limit(limit: int) -> Iterator[None]:
    """Raise the interpreter recursion limit to at least `limit` for the block."""
    previous = sys.getrecursionlimit()
    if previous >= limit:
        yield
        return

    sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


class Parser:
    """
    Ares recursive descent parser.

    Consumes a Scanner and produces the program tree. The first syntax
    error raises a ParseError; the scanner's LexerError propagates as is.
    """

    def __init__(self, scanner: Scanner, module: Optional[Module] = None):
        """
        Initialize parser and fill the two-token lookahead buffer.

        Args:
            scanner: Token source
            module: Owning module, defaults to the scanner's
        """
        self.scanner = scanner
        self.module = module or scanner.module
        self.current: Token = scanner.next_token()
        self.next: Token = scanner.next_token()
        self.in_subroutine = False
        self.depth = 0

    def parse_program(self) -> Node:
        """
        Parse the whole token stream.

        Returns:
            BLOCK node whose children are the top-level statements

        Raises:
            ParseError: On the first syntax error, or when the input nests
                deeper than MAX_NESTING_DEPTH
            LexerError: On the first scanner error
        """
        logger.debug("Parsing module %s", self.module.name)

        program = Node(imaginary_token(TokenType.BLOCK, self.current.location))
        self._skip_newlines()

        try:
            with _recursion_limit(RECURSION_LIMIT):
                while not self._check(TokenType.EOF):
                    program.add_child(self._parse_statement())
                    self._statement_trailer()
        except RecursionError:
            # Long unbracketed chains such as `- - - x` are not depth counted
            raise create_nesting_too_deep_error(self.current) from None

        logger.debug("Parsed %d top-level statements from %s",
                     len(program.children), self.module.name)
        return program

    # Statements

    def _parse_statement(self) -> Node:
        """Parse a statement."""
        if self._check(TokenType.DEF) and self.next.token_type != TokenType.LPAREN:
            return self._parse_subroutine(named=True)
        elif self._check(TokenType.IF):
            return self._parse_if_statement()
        elif self._check(TokenType.WHILE) or self._check(TokenType.UNTIL):
            return self._parse_loop_statement()
        elif self._check(TokenType.FOR):
            return self._parse_for_statement()
        elif self._check(TokenType.IMPORT) or self._check(TokenType.DEBUG):
            return self._parse_keyword_expression()
        elif self._check(TokenType.RETURN):
            return self._parse_return_statement()
        else:
            return self._parse_expression()

    def _statement_trailer(self):
        """Consume what ends a top-level statement: ';', newline(s) or EOF."""
        if self._check(TokenType.SEMICOLON):
            self._advance_and_skip_newlines()
        elif self._check(TokenType.NEWLINE):
            self._skip_newlines()
        else:
            self._consume(TokenType.EOF, "expected end-of-file")

    def _block_trailer(self):
        """Consume what ends a statement in a block: ';', newline(s) or the closing '}'."""
        if self._check(TokenType.SEMICOLON):
            self._advance_and_skip_newlines()
        elif self._check(TokenType.NEWLINE):
            self._skip_newlines()
        elif not self._check(TokenType.RBRACE):
            self._error("expected newline")

    def _parse_subroutine(self, named: bool) -> Node:
        """
        Parse `def name(params) { ... }` into SUB_DECL, or the anonymous
        `def (params) { ... }` into SUB_LITERAL.
        """
        def_token = self._advance()

        if named:
            node = Node(imaginary_token(TokenType.SUB_DECL, def_token.location))
            node.add_child(self._consume_identifier("expected identifier"))
        else:
            node = Node(imaginary_token(TokenType.SUB_LITERAL, def_token.location))

        params = Node(imaginary_token(TokenType.SUB_PARAMS, self.current.location))
        self._consume(TokenType.LPAREN, "expected '(' to open parameter list")
        self._skip_newlines()
        for param in self._parse_parameter_list():
            params.add_child(param)
        self._skip_newlines()
        self._consume(TokenType.RPAREN, "expected ')' to close parameter list")
        node.add_child(params)

        enclosing = self.in_subroutine
        self.in_subroutine = True
        node.add_child(self._parse_block())
        self.in_subroutine = enclosing

        return node

    def _parse_parameter_list(self) -> List[Node]:
        """Parse the identifiers between a subroutine's parentheses."""
        params = []

        if self._check(TokenType.RPAREN):
            return params

        while True:
            params.append(self._consume_identifier("expected identifier as argument"))
            if not self._check(TokenType.COMMA):
                break
            self._advance_and_skip_newlines()

        return params

    def _parse_if_statement(self) -> Node:
        """
        Parse an if statement.

        The node always has an ELIF child holding (condition, block) pairs,
        possibly none, followed by the else block when present.
        """
        node = Node(self._advance())
        node.add_child(self._parse_expression())
        node.add_child(self._parse_block())

        elif_clauses = Node(imaginary_token(TokenType.ELIF_CLAUSES, self.current.location))
        while self._match(TokenType.ELIF):
            elif_clauses.add_child(self._parse_expression())
            elif_clauses.add_child(self._parse_block())
        node.add_child(elif_clauses)

        if self._match(TokenType.ELSE):
            node.add_child(self._parse_block())

        return node

    def _parse_loop_statement(self) -> Node:
        """Parse a while or until loop."""
        node = Node(self._advance())
        node.add_child(self._parse_expression())
        node.add_child(self._parse_block())
        return node

    def _parse_for_statement(self) -> Node:
        node = Node(self._advance())
        node.add_child(self._consume_identifier("expected identifier"))
        self._consume(TokenType.IN, "expected keyword 'in' before expression")
        node.add_child(self._parse_expression())
        node.add_child(self._parse_block())
        return node

    def _parse_keyword_expression(self) -> Node:
        """
        Parse `import expr` or `debug expr`.

        debug prints the value of its expression during development and has
        no other meaning.
        """
        node = Node(self._advance())
        node.add_child(self._parse_expression())
        return node

    def _parse_return_statement(self) -> Node:
        if not self.in_subroutine:
            raise create_return_outside_subroutine_error(self.current)

        node = Node(self._advance())
        if self.current.token_type not in RETURN_TERMINATORS:
            node.add_child(self._parse_expression())
        return node

    def _parse_block(self) -> Node:
        """Parse a braced block of statements."""
        self._skip_newlines()
        open_token = self._consume(TokenType.LBRACE, "expected '{' to open block")

        node = Node(imaginary_token(TokenType.BLOCK, open_token.location))
        self._skip_newlines()

        with self._nested():
            while not self._check(TokenType.RBRACE) and not self._check(TokenType.EOF):
                node.add_child(self._parse_statement())
                self._block_trailer()

        self._consume(TokenType.RBRACE, "expected '}' to close block")
        return node

    # Expressions

    def _parse_expression(self) -> Node:
        with self._nested():
            return self._parse_assignment()

    def _parse_assignment(self) -> Node:
        """
        Parse an assignment or anything of higher precedence.

        Assignment is right associative and its target must be an
        identifier or a subscript.
        """
        left = self._parse_precedence(Precedence.RANGE)

        if self.current.is_assignment:
            if left.token_type not in ASSIGNABLE:
                raise create_invalid_assignment_error(self.current)
            left = left.reroot(Node(self.current))
            self._advance_and_skip_newlines()
            left.add_child(self._parse_assignment())

        return left

    def _parse_precedence(self, precedence: Precedence) -> Node:
        """
        Parse binary operators binding at least as tightly as `precedence`.

        The right operand of each operator is parsed one level higher, which
        keeps every binary level left associative.
        """
        left = self._parse_unary()

        while precedence <= self._get_precedence(self.current.token_type):
            operator_precedence = self._get_precedence(self.current.token_type)
            left = left.reroot(Node(self.current))
            self._advance_and_skip_newlines()
            left.add_child(self._parse_precedence(Precedence(operator_precedence + 1)))

        return left

    def _get_precedence(self, token_type: TokenType) -> Precedence:
        """Get precedence for a token type."""
        return PRECEDENCES.get(token_type, Precedence.NONE)

    def _parse_unary(self) -> Node:
        """
        Parse prefix '-', '!' and '~'.

        A prefix '-' is retagged NEGATE so later stages can tell it from
        subtraction.
        """
        if self.current.token_type not in UNARY_OPERATORS:
            return self._parse_trailers()

        token = self.current
        if token.token_type == TokenType.MINUS:
            token = dataclasses.replace(token, token_type=TokenType.NEGATE)

        node = Node(token)
        self._advance_and_skip_newlines()
        node.add_child(self._parse_unary())
        return node

    def _parse_trailers(self) -> Node:
        """Parse an atom followed by any number of subscripts and calls."""
        left = self._parse_atom()
        while True:
            if self._check(TokenType.LBRACK):
                left = self._parse_subscript(left)
            elif self._check(TokenType.LPAREN):
                left = self._parse_call(left)
            else:
                return left

    def _parse_atom(self) -> Node:
        """
        Parse a literal, identifier, collection literal, grouping or
        subroutine literal.

        Literal tokens already carry their value from the scanner, so they
        become leaves as they are.
        """
        if self.current.is_literal:
            return Node(self._advance())
        elif self._check(TokenType.LBRACK):
            return self._parse_array_literal()
        elif self._check(TokenType.LBRACE):
            return self._parse_hash_literal()
        elif self._check(TokenType.LPAREN):
            return self._parse_grouping()
        elif self._check(TokenType.DEF):
            return self._parse_subroutine(named=False)

        raise create_expected_expression_error(self.current)

    def _parse_grouping(self) -> Node:
        """Parse parenthesized expression."""
        self._advance_and_skip_newlines()
        node = self._parse_expression()
        self._skip_newlines()
        self._consume(TokenType.RPAREN, "expected ')'")
        return node

    def _parse_subscript(self, left: Node) -> Node:
        node = left.reroot(Node(imaginary_token(TokenType.SUBSCRIPT, self.current.location)))
        self._advance_and_skip_newlines()
        node.add_child(self._parse_expression())
        self._skip_newlines()
        self._consume(TokenType.RBRACK, "expected ']' to close subscript")
        return node

    def _parse_call(self, left: Node) -> Node:
        node = left.reroot(Node(imaginary_token(TokenType.CALL, self.current.location)))
        self._advance_and_skip_newlines()
        for arg in self._parse_expression_list(TokenType.RPAREN):
            node.add_child(arg)
        self._skip_newlines()
        self._consume(TokenType.RPAREN, "expected ')' to close the function call")
        return node

    def _parse_array_literal(self) -> Node:
        node = Node(imaginary_token(TokenType.ARRAY_DECL, self.current.location))
        self._advance_and_skip_newlines()
        for element in self._parse_expression_list(TokenType.RBRACK):
            node.add_child(element)
        self._skip_newlines()
        self._consume(TokenType.RBRACK, "expected ']' to close array literal")
        return node

    def _parse_hash_literal(self) -> Node:
        """Parse `{key => value, ...}`; a trailing comma is allowed."""
        node = Node(imaginary_token(TokenType.HASH_DECL, self.current.location))
        self._advance_and_skip_newlines()

        while not self._check(TokenType.RBRACE):
            element = Node(imaginary_token(TokenType.HASH_ELEM, self.current.location))
            element.add_child(self._parse_expression())
            self._consume(TokenType.ASSIGN_ARROW, "expected '=>'")
            self._skip_newlines()
            element.add_child(self._parse_expression())
            node.add_child(element)

            if not self._check(TokenType.COMMA):
                break
            self._advance_and_skip_newlines()

        self._skip_newlines()
        self._consume(TokenType.RBRACE, "expected '}' to close hash literal")
        return node

    def _parse_expression_list(self, end: TokenType) -> List[Node]:
        """Parse comma separated expressions up to (not including) `end`."""
        expressions = []

        if self._check(end):
            return expressions

        while True:
            expressions.append(self._parse_expression())
            if not self._check(TokenType.COMMA):
                break
            self._advance_and_skip_newlines()

        return expressions

    # Utility methods

    def _advance(self) -> Token:
        """Consume and return current token, shifting the lookahead buffer."""
        token = self.current
        self.current = self.next
        self.next = self.scanner.next_token()
        return token

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self.current.token_type == token_type

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        self._error(message)

    def _consume_identifier(self, message: str) -> Node:
        """Consume an identifier and return it as a leaf node."""
        if not self._check(TokenType.IDENT):
            self._error(message)
        return Node(self._advance())

    @contextmanager
    def _nested(self) -> Iterator[None]:
        """Count one level of expression or block nesting."""
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise create_nesting_too_deep_error(self.current)
        yield
        self.depth -= 1

    def _skip_newlines(self):
        while self._check(TokenType.NEWLINE):
            self._advance()

    def _advance_and_skip_newlines(self):
        self._advance()
        self._skip_newlines()

    def _error(self, message: str):
        raise create_unexpected_token_error(message, self.current)


def parse_string(source: str, name: str = "<string>") -> Node:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        name: Module name for error reporting

    Returns:
        Program tree

    Raises:
        CompileError: If scanning or parsing fails
    """
    module = Module(name)
    return Parser(Scanner(source, module), module).parse_program()


def parse_file(filepath: str) -> Node:
    """
    Convenience function to parse a source file.

    Raises:
        CompileError: If scanning or parsing fails
        OSError: If the file cannot be read
    """
    module = Module.from_path(filepath)
    with open(module.path, 'r', encoding='utf-8') as f:
        source = f.read()

    return Parser(Scanner(source, module), module).parse_program()
