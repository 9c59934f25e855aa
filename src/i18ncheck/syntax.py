import enum
from dataclasses import dataclass
from typing import Callable, Iterator


class NodeKind(enum.Enum):
    SOURCE_FILE = "source_file"
    OBJECT_LITERAL = "object_literal"
    PROPERTY_ASSIGNMENT = "property_assignment"
    STRING_LITERAL = "string_literal"
    # template literal without substitutions
    TEMPLATE_LITERAL = "template_literal"
    TEMPLATE_EXPRESSION = "template_expression"
    NUMERIC_LITERAL = "numeric_literal"
    CALL_EXPRESSION = "call_expression"
    IDENTIFIER = "identifier"
    OTHER = "other"


LITERAL_KINDS = frozenset({NodeKind.STRING_LITERAL, NodeKind.TEMPLATE_LITERAL})


@dataclass(frozen=True)
class SyntaxNode:
    kind: NodeKind
    text: str
    line: int = 0
    children: tuple["SyntaxNode", ...] = ()
    # unescaped content of string and template literals
    value: str | None = None
    # text of the first source token the node spans
    token: str = ""

    @property
    def is_literal(self) -> bool:
        return self.kind in LITERAL_KINDS


def iter_nodes(root: SyntaxNode | None) -> Iterator[SyntaxNode]:
    """Yield every node below ``root`` (inclusive) in pre-order, depth first.

    Children are visited in source order. The walk keeps its own stack, so
    arbitrarily deep trees do not hit the interpreter recursion limit.
    """
    if root is None:
        return
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_first(root: SyntaxNode | None, kind: NodeKind) -> SyntaxNode | None:
    return next((node for node in iter_nodes(root) if node.kind == kind), None)


def visit_all(
    root: SyntaxNode | None, kind: NodeKind, on_each: Callable[[SyntaxNode], None]
) -> int:
    visited = 0
    for node in iter_nodes(root):
        if node.kind == kind:
            on_each(node)
            visited += 1
    return visited
