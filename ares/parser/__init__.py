"""
Ares Parser Package

Implements the recursive descent parser for the Ares scripting language.
Produces a homogeneous syntax tree: every node is a token plus its ordered
children, and the token type alone says what the node means.
"""

from .ast_nodes import Node, NodeVisitor
from .parser import Parser, Precedence, parse_string, parse_file
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser",
    "Precedence",
    "parse_string",
    "parse_file",

    # Tree
    "Node",
    "NodeVisitor",

    # Error handling
    "ParseError",
]
