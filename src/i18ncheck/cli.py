import logging
from typing import Any

import click
from click.core import ParameterSource

from i18ncheck import config, parser
from i18ncheck.errors import I18nCheckError

logger = logging.getLogger(__name__)

# CLI options that override the "i18n" section of config.yml
SETTING_OPTIONS = (
    "locale_directory_marker",
    "namespace_separator",
    "default_namespace",
    "translation_function_name",
    "deduplicate",
    "fail_on_findings",
    "output_format",
    "verbose",
)


@click.group()
@click.version_option(package_name="i18n-check")
def cli() -> None:
    pass


@cli.command("check")
@click.option(
    "--project",
    "project_path",
    default=".",
    type=click.Path(file_okay=False),
    help="Project root to scan.",
)
@click.option("--config-folder", default="config", help="Configuration folder path.")
@click.option(
    "--locales-marker",
    "locale_directory_marker",
    default="shared/locales/",
    help="Path fragment identifying locale files.",
)
@click.option(
    "--separator", "namespace_separator", default=".", help="Namespace separator."
)
@click.option(
    "--default-namespace",
    default="common",
    help="Namespace prepended to keys without a separator.",
)
@click.option(
    "--function-name",
    "translation_function_name",
    default="t",
    help="Name of the translation function.",
)
@click.option(
    "--dedupe/--no-dedupe",
    "deduplicate",
    default=False,
    help="Report every key once instead of once per occurrence.",
)
@click.option(
    "--fail-on-findings",
    is_flag=True,
    default=False,
    help="Exit with status 1 when missing or unused translations are found.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(config.OUTPUT_FORMATS),
    default="text",
    help="Report format.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log at DEBUG level.")
@click.version_option(package_name="i18n-check")
@click.pass_context
def check(
    ctx: click.Context, project_path: str, config_folder: str, **options: Any
) -> None:
    overrides = {
        name: value
        for name, value in options.items()
        if name in SETTING_OPTIONS
        and ctx.get_parameter_source(name) != ParameterSource.DEFAULT
    }

    try:
        settings = config.load_config(config_folder).replace(**overrides)
        config.configure_logging(settings.logging, verbose=settings.verbose)
        exit_code = parser.run(project_path=project_path, settings=settings)
    except I18nCheckError as ex:
        logger.error(str(ex))
        ctx.exit(2)

    ctx.exit(exit_code)
