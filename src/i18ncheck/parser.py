#!/usr/bin/python3
# Copyright (c) 2026 i18n-check contributors
import logging
from typing import Iterable, Iterator

from i18ncheck import matcher, provider, report
from i18ncheck.classes import (
    AnalysisResult,
    Project,
    SourceLocation,
    SourceModule,
    TranslationEntry,
    TranslationReference,
)
from i18ncheck.config import Settings
from i18ncheck.syntax import NodeKind, SyntaxNode, find_first, visit_all

logger = logging.getLogger(__name__)


def parse_language(path: str, marker: str) -> str | None:
    """Return the language tag encoded in a locale file path.

    ``shared/locales/en.ts`` is ``en``; the tag is whatever sits between the
    marker and the next ``.``. Paths without the marker give ``None``.
    """
    _, found, rest = path.partition(marker)
    if not found:
        return None
    return rest.split(".")[0] or None


def property_name(node: SyntaxNode) -> str | None:
    match node.kind:
        case NodeKind.STRING_LITERAL | NodeKind.TEMPLATE_LITERAL:
            return node.value
        case NodeKind.IDENTIFIER | NodeKind.NUMERIC_LITERAL:
            return node.text
        case _:
            return None


def flatten_object(
    node: SyntaxNode, separator: str, prefix: str = ""
) -> Iterator[tuple[str, SyntaxNode]]:
    """Yield ``(key_path, value_node)`` for every non-object leaf of an object literal.

    Properties come out in source declaration order, nested objects expanded
    in place. Anything that is not a plain ``name: value`` property (spreads,
    methods, accessors, shorthands, computed names) is skipped.
    """
    stack = [(prefix, iter(node.children))]
    while stack:
        path, members = stack[-1]
        member = next(members, None)
        if member is None:
            stack.pop()
            continue
        if member.kind != NodeKind.PROPERTY_ASSIGNMENT or len(member.children) != 2:
            continue

        name_node, value = member.children
        name = property_name(name_node)
        if name is None:
            continue
        key_path = f"{path}{separator}{name}" if path else name

        if value.kind == NodeKind.OBJECT_LITERAL:
            stack.append((key_path, iter(value.children)))
        else:
            yield key_path, value


def parse_translations(
    modules: Iterable[SourceModule], *, marker: str, separator: str
) -> list[TranslationEntry]:
    translations = []
    for module in modules:
        if marker not in module.path:
            continue

        language = parse_language(module.path, marker)
        if language is None:
            logger.debug(f"Skipping {module.path}: no language in file name")
            continue

        obj = find_first(module.root, NodeKind.OBJECT_LITERAL)
        if obj is None:
            continue

        for key_path, value in flatten_object(obj, separator):
            # numbers, arrays, calls and interpolated templates are not translations
            if not key_path or not value.is_literal:
                continue
            translations.append(
                TranslationEntry(
                    language,
                    key_path,
                    value.value,
                    SourceLocation(module.path, value.line),
                )
            )
    return translations


def normalize_key(key: str, *, separator: str, default_namespace: str) -> str:
    if separator in key or not default_namespace:
        return key
    return f"{default_namespace}{separator}{key}"


def parse_references(
    modules: Iterable[SourceModule],
    *,
    separator: str,
    default_namespace: str,
    function_name: str = "t",
) -> list[TranslationReference]:
    references: list[TranslationReference] = []

    for module in modules:

        def on_call(node: SyntaxNode, module: SourceModule = module) -> None:
            # Only calls spelled exactly like the translation function. Imports
            # and scopes are not resolved, so any local ``t`` counts as well.
            if node.token != function_name:
                return
            for child in node.children:
                if not child.is_literal:
                    continue
                key = normalize_key(
                    child.value, separator=separator, default_namespace=default_namespace
                )
                # only empty for t('') without a default namespace
                if not key:
                    continue
                references.append(
                    TranslationReference(key, SourceLocation(module.path, child.line))
                )

        visit_all(module.root, NodeKind.CALL_EXPRESSION, on_call)

    return references


def analyse(project: Project, settings: Settings) -> AnalysisResult:
    translations = parse_translations(
        project.modules,
        marker=settings.locale_directory_marker,
        separator=settings.namespace_separator,
    )
    logger.info(f"Found {len(translations)} translations")

    references = parse_references(
        project.modules,
        separator=settings.namespace_separator,
        default_namespace=settings.default_namespace,
        function_name=settings.translation_function_name,
    )
    logger.info(f"Found {len(references)} translation references")

    return matcher.match(translations, references, deduplicate=settings.deduplicate)


def run(*, project_path: str, settings: Settings) -> int:
    logger.info(f"Parsing {project_path}...")
    project = provider.load_project(project_path, settings)

    result = analyse(project, settings)

    if result.has_findings:
        logger.warning(
            f"{len(result.missing)} missing and {len(result.unused)} unused translations"
        )
    else:
        logger.info("No issues found")

    report.print_report(
        result,
        root=project.root,
        output_format=settings.output_format,
    )
    return result.exit_code(settings.fail_on_findings)
