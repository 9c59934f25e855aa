import logging

import pytest

from i18ncheck import provider
from i18ncheck.config import Settings
from i18ncheck.errors import ProjectNotFoundError
from i18ncheck.syntax import NodeKind, find_first, iter_nodes


def _kinds(module, kind):
    return [node for node in iter_nodes(module.root) if node.kind == kind]


def test_lowers_object_literal(parse_module):
    module = parse_module(
        """
        export default {
            page: { title: "Welcome" },
        }
        """
    )
    assert module.root.kind == NodeKind.SOURCE_FILE
    obj = find_first(module.root, NodeKind.OBJECT_LITERAL)
    (prop,) = obj.children
    assert prop.kind == NodeKind.PROPERTY_ASSIGNMENT
    name, value = prop.children
    assert name.kind == NodeKind.IDENTIFIER
    assert name.text == "page"
    assert value.kind == NodeKind.OBJECT_LITERAL


def test_lowers_unsupported_members_as_other(parse_module):
    module = parse_module(
        """
        const rest = {}
        const key = "k"
        export default {
            [key]: "computed",
            ...rest,
            get accessor() { return "x" },
            plain: "ok",
        }
        """
    )
    # the first object in the file is ``rest``
    obj = _kinds(module, NodeKind.OBJECT_LITERAL)[1]
    kinds = [child.kind for child in obj.children]
    assert kinds == [NodeKind.OTHER, NodeKind.OTHER, NodeKind.OTHER, NodeKind.PROPERTY_ASSIGNMENT]


@pytest.mark.parametrize(
    "literal, expected",
    [
        (r'"plain"', "plain"),
        (r"'it\'s'", "it's"),
        (r'"line\nbreak"', "line\nbreak"),
        (r'"A\x42\u{43}"', "ABC"),
        (r'"\uD83D\uDE00"', "\U0001F600"),
        (r"`no substitution`", "no substitution"),
    ],
)
def test_literal_values_are_unescaped(parse_module, literal, expected):
    module = parse_module(f"const value = {literal}\n")
    (node,) = [
        node
        for node in iter_nodes(module.root)
        if node.kind in (NodeKind.STRING_LITERAL, NodeKind.TEMPLATE_LITERAL)
    ]
    assert node.value == expected


def test_template_with_substitution(parse_module):
    module = parse_module("const value = `hello ${t('name')}`\n")
    assert _kinds(module, NodeKind.TEMPLATE_LITERAL) == []
    (template,) = _kinds(module, NodeKind.TEMPLATE_EXPRESSION)
    assert find_first(template, NodeKind.CALL_EXPRESSION) is not None


def test_call_children_are_callee_and_arguments(parse_module):
    module = parse_module("t('a.b', 'fallback', { count: 1 })\n")
    (call,) = _kinds(module, NodeKind.CALL_EXPRESSION)
    assert call.token == "t"
    assert [child.kind for child in call.children] == [
        NodeKind.IDENTIFIER,
        NodeKind.STRING_LITERAL,
        NodeKind.STRING_LITERAL,
        NodeKind.OBJECT_LITERAL,
    ]


def test_member_call_leading_token(parse_module):
    module = parse_module("i18n.t('a.b')\n")
    (call,) = _kinds(module, NodeKind.CALL_EXPRESSION)
    assert call.token == "i18n"


def test_tagged_template_is_not_a_call(parse_module):
    module = parse_module("const value = t`a.b`\n")
    assert _kinds(module, NodeKind.CALL_EXPRESSION) == []


def test_tsx_files_parse_jsx(parse_module):
    module = parse_module(
        """
        export const Title = () => <h1>{t('page.title')}</h1>
        """,
        path="/project/src/Title.tsx",
    )
    assert not module.has_errors
    assert len(_kinds(module, NodeKind.CALL_EXPRESSION)) == 1


def test_lines_are_zero_based(parse_module):
    module = parse_module("const a = 1\nconst b = 2\nt('x.y')\n")
    (call,) = _kinds(module, NodeKind.CALL_EXPRESSION)
    assert call.line == 2


def test_syntax_errors_are_reported():
    module, diagnostics = provider.parse_source(
        "/project/src/broken.ts", b"const = ;\nconst ok = 1\n"
    )
    assert module.has_errors
    assert diagnostics
    assert all(diagnostic.path == "/project/src/broken.ts" for diagnostic in diagnostics)


def test_discover_files_skips_excluded_directories(make_project):
    root = make_project(
        {
            "src/app.ts": "t('a')\n",
            "src/view.tsx": "t('b')\n",
            "src/readme.md": "t('c')\n",
            "node_modules/lib/index.js": "t('d')\n",
        }
    )
    files = provider.discover_files(root, Settings())
    assert [file.relative_to(root).as_posix() for file in files] == [
        "src/app.ts",
        "src/view.tsx",
    ]


def test_load_project_logs_diagnostics_and_continues(make_project, caplog):
    caplog.set_level(logging.INFO)
    root = make_project(
        {
            "src/broken.ts": "const = ;\n",
            "src/app.ts": "t('a.b')\n",
        }
    )
    project = provider.load_project(str(root), Settings())
    assert project.root == root.resolve().as_posix()
    assert len(project.modules) == 2
    assert project.diagnostics
    assert "src/broken.ts" in caplog.text
    assert [module.path.rsplit("/", 1)[-1] for module in project.modules_with_errors] == [
        "broken.ts"
    ]
    assert "2 files, 1 with syntax errors" in caplog.text


def test_load_project_missing_directory(tmp_path):
    with pytest.raises(ProjectNotFoundError):
        provider.load_project(str(tmp_path / "nope"), Settings())


def test_load_project_without_sources(make_project):
    root = make_project({"README.md": "# nothing here\n"})
    with pytest.raises(ProjectNotFoundError):
        provider.load_project(str(root), Settings())
