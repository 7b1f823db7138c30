"""
Ares Front End Package

Turns Ares source text into a syntax tree for later stages.

Architecture:
    ares/
    ├── lexer/           # Tokens and the scanner
    ├── parser/          # Recursive descent parser and tree nodes
    ├── module.py        # Compilation unit names used in diagnostics
    └── cli.py           # ares-parse command
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .module import Module
from .lexer import Scanner, Token, TokenType, CompileError, LexerError
from .parser import Parser, Node, NodeVisitor, ParseError, parse_string, parse_file

__all__ = [
    # Core classes
    "Module",
    "Scanner",
    "Parser",
    "Token",
    "TokenType",
    "Node",
    "NodeVisitor",

    # Errors
    "CompileError",
    "LexerError",
    "ParseError",

    # Convenience
    "parse_string",
    "parse_file",

    # Version info
    "__version__",
    "__license__",
]
