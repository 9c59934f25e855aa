import json

import click

from i18ncheck.classes import AnalysisResult, TranslationEntry, TranslationReference


def format_reference(reference: TranslationReference, root: str) -> str:
    location = reference.location
    return f"{reference.key_path} {location.relative_to(root)}:{location.line}"


def format_translation(translation: TranslationEntry) -> str:
    return str(translation)


def _heading(text: str) -> None:
    click.echo(click.style(text, fg="green", bold=True, underline=True))


def print_text(result: AnalysisResult, *, root: str) -> None:
    click.echo(f"Translations found: {len(result.entries)}")
    for translation in result.entries:
        click.echo(f"  {format_translation(translation)}")

    click.echo(f"References found: {len(result.references)}")
    for reference in result.references:
        click.echo(f"  {format_reference(reference, root)}")

    _heading("Missing translations:")
    for reference in result.missing:
        click.secho(format_reference(reference, root), fg="red")

    _heading("Unused translations:")
    for translation in result.unused:
        click.secho(format_translation(translation), fg="red")


def as_dict(result: AnalysisResult, *, root: str) -> dict:
    return {
        "translations": len(result.entries),
        "references": len(result.references),
        "missing": [
            {
                "key": reference.key_path,
                "file": reference.location.relative_to(root),
                "line": reference.location.line,
            }
            for reference in result.missing
        ],
        "unused": [
            {
                "language": translation.language,
                "key": translation.key_path,
                "file": translation.location.relative_to(root),
                "line": translation.location.line,
            }
            for translation in result.unused
        ],
    }


def print_report(
    result: AnalysisResult, *, root: str, output_format: str = "text"
) -> None:
    if output_format == "json":
        click.echo(json.dumps(as_dict(result, root=root), indent=2, ensure_ascii=False))
    else:
        print_text(result, root=root)
