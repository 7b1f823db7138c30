"""
Syntax tree node definitions for Ares.

Ares uses a homogeneous tree: every node is the same Node class holding one
token and an ordered list of children it owns. What a node means is decided
by its token type alone, e.g. a node whose token is `+` with two children is
an addition, and a node whose token is the imaginary BLOCK holds statements.
"""

from typing import Any, Iterator, List, Optional

from ..lexer.tokens import SourceLocation, Token, TokenType, Value


class Node:
    """A syntax tree node: one token plus owned children."""

    def __init__(self, token: Token, children: Optional[List['Node']] = None):
        self.token = token
        self.children: List['Node'] = list(children) if children else []

    def add_child(self, node: 'Node'):
        """Append a node as the last child."""
        self.children.append(node)

    def reroot(self, root: 'Node') -> 'Node':
        """
        Make `root` the new owner of this subtree.

        This node becomes the first child of `root`, which is returned. The
        parser uses it to fold an already parsed left operand under the
        operator node recognized after it.
        """
        root.children.insert(0, self)
        return root

    @property
    def text(self) -> str:
        return self.token.text

    @property
    def token_type(self) -> TokenType:
        return self.token.token_type

    @property
    def value(self) -> Optional[Value]:
        return self.token.value

    @property
    def location(self) -> SourceLocation:
        return self.token.location

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator['Node']:
        """Yield this node and all of its descendants, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, token_type: TokenType) -> List['Node']:
        """Get every node in this subtree with the given token type."""
        return [node for node in self.walk() if node.token_type == token_type]

    def to_string_tree(self) -> str:
        """
        Render the subtree as an S-expression.

        Leaves render as their token text, interior nodes as
        `(text child child ...)`.
        """
        if self.is_leaf:
            return self.text
        rendered = ' '.join(child.to_string_tree() for child in self.children)
        return f"({self.text} {rendered})"

    def __str__(self) -> str:
        return self.to_string_tree()

    def __repr__(self) -> str:
        return f"Node({self.token_type.name}, {self.text!r}, children={len(self.children)})"


class NodeVisitor:
    """
    Base class for walking a syntax tree.

    visit() dispatches to a `visit_<TOKEN_TYPE>` method (for example
    visit_SUB_DECL or visit_IDENT) and falls back to generic_visit(), which
    visits every child in order.
    """

    def visit(self, node: Node) -> Any:
        method = getattr(self, f"visit_{node.token_type.name}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: Node) -> Any:
        for child in node.children:
            self.visit(child)
