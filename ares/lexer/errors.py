"""
Error handling for the Ares scanner.

Every failure in the front end is raised as an exception carrying a
structured Diagnostic (code, severity, message, location). Rendering a
diagnostic gives the one-line compiler format

    <module>:<line>:<column>: <message>

which hosts embedding the front end can print as-is.
"""

import logging
from typing import Optional
from dataclasses import dataclass

from .tokens import SourceLocation

logger = logging.getLogger(__name__)


@dataclass
class Diagnostic:
    """A single positioned message produced by the scanner or the parser."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"

    def format_detailed(self) -> str:
        """Render the diagnostic with its code and help text, one item per line."""
        result = f"{self.severity.upper()}"
        if self.code:
            result += f"[{self.code}]"
        result += f": {self}\n"
        if self.help_text:
            result += f"  help: {self.help_text}\n"
        return result


class CompileError(Exception):
    """
    Base class for all front end failures.

    Catch this to handle scanner and parser errors uniformly.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text
        )

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)


class LexerError(CompileError):
    """
    Exception raised when the scanner meets input it cannot tokenize.
    """


# Scanner error codes for categorization
ERROR_CODES = {
    "L001": "Unrecognized character",
    "L002": "Unterminated string literal",
    "L003": "Number literal overflow",
    "L004": "Invalid escape sequence",
    "L005": "Incomplete hex escape sequence",
    "L006": "Unterminated long comment",
    "L007": "Malformed hexadecimal literal",
}


# Helper functions for creating common errors

def _error(message: str, location: SourceLocation, code: str,
           help_text: Optional[str] = None) -> LexerError:
    logger.debug("scanner error %s at %s: %s", code, location, message)
    return LexerError(message, location, code=code, help_text=help_text)


def create_unrecognized_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character that starts no token."""
    if char.isprintable():
        shown = char
        help_text = f"The character '{char}' is not valid outside strings and comments."
    else:
        shown = f"\\x{ord(char):02x}" if ord(char) <= 0xFF else f"\\u{ord(char):04x}"
        help_text = f"Non-printable character (U+{ord(char):04X}) is not allowed."
    return _error(f"unrecognized character '{shown}'", location, "L001", help_text)


def create_unterminated_string_error(location: SourceLocation) -> LexerError:
    return _error(
        "unterminated string literal", location, "L002",
        "String literals must be closed with the same quote they were opened with."
    )


def create_number_too_large_error(location: SourceLocation) -> LexerError:
    return _error(
        "number literal was too large", location, "L003",
        "Integer literals must fit in a signed 64-bit integer."
    )


def create_invalid_escape_error(char: str, location: SourceLocation) -> LexerError:
    return _error(
        f"invalid escape character {char}", location, "L004",
        "Valid escapes are \\\" \\\\ \\' \\n \\r \\t and \\xNN."
    )


def create_incomplete_hex_escape_error(location: SourceLocation) -> LexerError:
    return _error(
        "incomplete hex escape sequence", location, "L005",
        "A \\x escape takes exactly two hexadecimal digits."
    )


def create_unterminated_comment_error(location: SourceLocation) -> LexerError:
    return _error(
        "unterminated long comment", location, "L006",
        "Long comments opened with '===' must be closed with '==='."
    )


def create_malformed_hex_error(location: SourceLocation) -> LexerError:
    return _error(
        "malformed hexadecimal literal", location, "L007",
        "A '0x' prefix must be followed by at least one hexadecimal digit."
    )
