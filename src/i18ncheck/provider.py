import functools
import logging
import os
import pathlib
import re

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from i18ncheck.classes import Diagnostic, Project, SourceModule
from i18ncheck.config import Settings
from i18ncheck.errors import ProjectNotFoundError
from i18ncheck.syntax import NodeKind, SyntaxNode

logger = logging.getLogger(__name__)

TYPESCRIPT_SUFFIXES = frozenset({".ts", ".mts", ".cts"})

IDENTIFIER_TYPES = frozenset(
    {
        "identifier",
        "property_identifier",
        "private_property_identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "statement_identifier",
        "type_identifier",
    }
)

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|[\s\S])"
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}
_LINE_TERMINATORS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})


def _replace_escape(match: re.Match) -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        code_point = int(seq[2:-1], 16)
        return chr(code_point) if code_point <= 0x10FFFF else match.group(0)
    if seq[0] == "u" and len(seq) == 5:
        return chr(int(seq[1:], 16))
    if seq[0] == "x" and len(seq) == 3:
        return chr(int(seq[1:], 16))
    if seq[0] in "01234567":
        return chr(int(seq, 8))
    if seq in _LINE_TERMINATORS:
        return ""
    return _SIMPLE_ESCAPES.get(seq, seq)


def unescape(raw: str) -> str:
    """Decode JavaScript escape sequences in the body of a string literal."""
    if "\\" not in raw:
        return raw
    text = _ESCAPE_RE.sub(_replace_escape, raw)
    # \uD83D\uDE00 style pairs come out as two lone surrogates
    return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


@functools.cache
def get_parser(suffix: str) -> Parser:
    if suffix in TYPESCRIPT_SUFFIXES:
        language = Language(tree_sitter_typescript.language_typescript())
    else:
        language = Language(tree_sitter_typescript.language_tsx())
    return Parser(language)


def _text(node: Node) -> str:
    return node.text.decode("utf-8", "replace") if node.text is not None else ""


def _leading_token(node: Node) -> str:
    while node.child_count:
        node = node.children[0]
    return _text(node)


def _is_tagged_template(node: Node) -> bool:
    arguments = node.child_by_field_name("arguments")
    return arguments is None or arguments.type != "arguments"


def _pair_parts(node: Node) -> tuple[Node | None, Node | None]:
    return node.child_by_field_name("key"), node.child_by_field_name("value")


def _is_plain_pair(node: Node) -> bool:
    key, value = _pair_parts(node)
    return (
        key is not None and value is not None and key.type != "computed_property_name"
    )


def _children(node: Node) -> list[Node]:
    match node.type:
        case "string" | "number":
            return []
        case "template_string":
            return [c for c in node.named_children if c.type == "template_substitution"]
        case "pair":
            key, value = _pair_parts(node)
            return [c for c in (key, value) if c is not None]
        case "call_expression" if not _is_tagged_template(node):
            arguments = node.child_by_field_name("arguments")
            callee = node.child_by_field_name("function")
            return [callee] + [c for c in arguments.named_children if c.type != "comment"]
    return [c for c in node.named_children if c.type != "comment"]


def _make_node(node: Node, children: tuple[SyntaxNode, ...]) -> SyntaxNode:
    line = node.start_point[0]
    match node.type:
        case "program":
            return SyntaxNode(NodeKind.SOURCE_FILE, "", line, children)
        case "object":
            return SyntaxNode(NodeKind.OBJECT_LITERAL, "", line, children)
        case "pair" if _is_plain_pair(node):
            return SyntaxNode(NodeKind.PROPERTY_ASSIGNMENT, "", line, children)
        case "string":
            text = _text(node)
            return SyntaxNode(
                NodeKind.STRING_LITERAL, text, line, value=unescape(text[1:-1])
            )
        case "template_string" if not children:
            text = _text(node)
            return SyntaxNode(
                NodeKind.TEMPLATE_LITERAL, text, line, value=unescape(text[1:-1])
            )
        case "template_string":
            return SyntaxNode(NodeKind.TEMPLATE_EXPRESSION, "", line, children)
        case "number":
            return SyntaxNode(NodeKind.NUMERIC_LITERAL, _text(node), line)
        case "call_expression" if not _is_tagged_template(node):
            return SyntaxNode(
                NodeKind.CALL_EXPRESSION, "", line, children, token=_leading_token(node)
            )
        case node_type if node_type in IDENTIFIER_TYPES:
            text = _text(node)
            return SyntaxNode(NodeKind.IDENTIFIER, text, line, token=text)
    text = _text(node) if not node.child_count else ""
    return SyntaxNode(NodeKind.OTHER, text, line, children, token=text)


def lower(root: Node) -> SyntaxNode:
    """Convert a tree-sitter tree into an immutable ``SyntaxNode`` tree."""
    order: list[tuple[Node, int]] = []
    stack = [(root, -1)]
    while stack:
        node, parent = stack.pop()
        index = len(order)
        order.append((node, parent))
        for child in reversed(_children(node)):
            stack.append((child, index))

    # Build bottom-up: later siblings are finished first, so each child list
    # is collected in reverse source order.
    pending: list[list[SyntaxNode]] = [[] for _ in order]
    built: SyntaxNode | None = None
    for index in range(len(order) - 1, -1, -1):
        node, parent = order[index]
        built = _make_node(node, tuple(reversed(pending[index])))
        pending[index] = []
        if parent >= 0:
            pending[parent].append(built)
    return built


def collect_diagnostics(path: str, root: Node) -> list[Diagnostic]:
    if not root.has_error:
        return []
    diagnostics = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR":
            diagnostics.append(Diagnostic(path, node.start_point[0], "Syntax error"))
            continue
        if node.is_missing:
            diagnostics.append(
                Diagnostic(path, node.start_point[0], f'Missing "{node.type}"')
            )
            continue
        if node.has_error:
            stack.extend(reversed(node.children))
    return diagnostics


def parse_source(path: str, source: bytes) -> tuple[SourceModule, list[Diagnostic]]:
    suffix = pathlib.PurePosixPath(path).suffix.lower()
    tree = get_parser(suffix).parse(source)
    diagnostics = collect_diagnostics(path, tree.root_node)
    module = SourceModule(path, lower(tree.root_node), bool(diagnostics))
    return module, diagnostics


def discover_files(root: pathlib.Path, settings: Settings) -> list[pathlib.Path]:
    excluded = set(settings.exclude)
    extensions = {ext.lower() for ext in settings.extensions}
    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in sorted(filenames):
            if pathlib.Path(filename).suffix.lower() in extensions:
                files.append(pathlib.Path(dirpath, filename))
    return files


def load_project(project_path: str, settings: Settings) -> Project:
    root = pathlib.Path(project_path).resolve()
    if not root.is_dir():
        raise ProjectNotFoundError(f"Project directory {root} does not exist")

    files = discover_files(root, settings)
    if not files:
        raise ProjectNotFoundError(
            f"No source files matching {', '.join(settings.extensions)} found in {root}"
        )

    project = Project(root.as_posix())
    for file in files:
        path = file.as_posix()
        logger.debug(f"Parsing {path}")
        try:
            source = file.read_bytes()
        except OSError as ex:
            logger.error(f"Error reading {path}: {ex}")
            project.diagnostics.append(Diagnostic(path, 0, str(ex)))
            continue

        module, diagnostics = parse_source(path, source)
        for diagnostic in diagnostics:
            logger.warning(
                f"{diagnostic.message} in {file.relative_to(root).as_posix()}:{diagnostic.line}"
            )
        project.modules.append(module)
        project.diagnostics.extend(diagnostics)

    logger.info(
        f"Parsed {len(project.modules)} files, {len(project.modules_with_errors)} with syntax errors"
    )
    return project
