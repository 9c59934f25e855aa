from typing import Iterable

from i18ncheck.classes import AnalysisResult, TranslationEntry, TranslationReference


def dedupe_translations(
    translations: Iterable[TranslationEntry],
) -> list[TranslationEntry]:
    seen: dict[tuple[str, str], TranslationEntry] = {}
    for translation in translations:
        seen.setdefault((translation.language, translation.key_path), translation)
    return list(seen.values())


def dedupe_references(
    references: Iterable[TranslationReference],
) -> list[TranslationReference]:
    seen: dict[str, TranslationReference] = {}
    for reference in references:
        seen.setdefault(reference.key_path, reference)
    return list(seen.values())


def find_missing(
    translations: Iterable[TranslationEntry], references: Iterable[TranslationReference]
) -> list[TranslationReference]:
    # a key defined in any language satisfies the reference
    defined = {translation.key_path for translation in translations}
    return [reference for reference in references if reference.key_path not in defined]


def find_unused(
    translations: Iterable[TranslationEntry], references: Iterable[TranslationReference]
) -> list[TranslationEntry]:
    used = {reference.key_path for reference in references}
    return [translation for translation in translations if translation.key_path not in used]


def match(
    translations: Iterable[TranslationEntry],
    references: Iterable[TranslationReference],
    *,
    deduplicate: bool = False,
) -> AnalysisResult:
    """Cross-reference definitions and call-sites by key path.

    Without ``deduplicate`` every call-site and every definition is reported
    on its own, so a key used twice shows up twice. With it, translations
    collapse on ``(language, key_path)`` and references on ``key_path``,
    keeping the first occurrence.
    """
    translations = list(translations)
    references = list(references)
    if deduplicate:
        translations = dedupe_translations(translations)
        references = dedupe_references(references)

    return AnalysisResult(
        entries=tuple(translations),
        references=tuple(references),
        missing=tuple(find_missing(translations, references)),
        unused=tuple(find_unused(translations, references)),
    )
