"""
Ares Lexer Package

Implements the scanner for the Ares scripting language: a character-level
state machine that hands out one token per call, with greedy longest-match
operator recognition and line/column tracking for diagnostics.
"""

from .tokens import Token, TokenType, SourceLocation, Value
from .scanner import Scanner, tokenize_string, tokenize_file
from .errors import CompileError, LexerError, Diagnostic

__all__ = [
    "Scanner",
    "Token",
    "TokenType",
    "SourceLocation",
    "Value",
    "CompileError",
    "LexerError",
    "Diagnostic",
    "tokenize_string",
    "tokenize_file",
]
