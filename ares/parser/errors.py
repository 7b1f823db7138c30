"""
Error handling for the Ares parser.

Parser diagnostics name the offending token's category before the message,
so a missing brace at the end of input reads

    main.ares:3:1: unexpected end-of-file, expected '}' to close block
"""

import logging
from typing import Optional

from ..lexer.tokens import Token, TokenType
from ..lexer.errors import CompileError

logger = logging.getLogger(__name__)


class ParseError(CompileError):
    """
    Exception raised when the parser encounters a syntax error.

    Carries the offending token alongside the diagnostic.
    """

    def __init__(
        self,
        message: str,
        token: Token,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        super().__init__(message, token.location, code=code, help_text=help_text)
        self.token = token


# Parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Invalid assignment target",
    "P003": "Return outside subroutine",
    "P004": "Expected expression",
    "P005": "Nesting too deep",
}


def describe_unexpected(token: Token) -> str:
    """
    Build the prefix naming what kind of token was found where it was
    not expected.
    """
    if token.token_type == TokenType.NEWLINE:
        return "unexpected newline, "
    if token.token_type == TokenType.EOF:
        return "unexpected end-of-file, "
    if token.is_literal:
        return f"unexpected literal near '{token.text}', "
    if token.is_keyword:
        return f"unexpected keyword near '{token.text}', "
    return f"unexpected symbol near '{token.text}', "


# Helper functions for creating common parser errors

def create_parse_error(message: str, found: Token, code: str = "P001",
                       help_text: Optional[str] = None) -> ParseError:
    """Create a positioned error at the offending token."""
    error = ParseError(describe_unexpected(found) + message, found,
                       code=code, help_text=help_text)
    logger.debug("parse error %s at %s", code, error)
    return error


def create_unexpected_token_error(message: str, found: Token) -> ParseError:
    """Create an error for a token that does not fit the grammar here."""
    return create_parse_error(message, found, "P001")


def create_invalid_assignment_error(found: Token) -> ParseError:
    return create_parse_error(
        "invalid assignment target", found, "P002",
        "Only identifiers and subscripts can be assigned to."
    )


def create_return_outside_subroutine_error(found: Token) -> ParseError:
    return create_parse_error(
        "'return' outside subroutine", found, "P003",
        "'return' may only appear in the body of a 'def'."
    )


def create_expected_expression_error(found: Token) -> ParseError:
    return create_parse_error("expected expression", found, "P004")


def create_nesting_too_deep_error(found: Token) -> ParseError:
    return create_parse_error(
        "expression nested too deeply", found, "P005",
        "Split the expression or block into smaller pieces."
    )
