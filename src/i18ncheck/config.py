import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Any

import yaml

from i18ncheck.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yml"

DEFAULT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts")
DEFAULT_EXCLUDE = ("node_modules", "dist", "build", ".git")
OUTPUT_FORMATS = ("text", "json")


@dataclass
class LoggingSettings:
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"


@dataclass
class Settings:
    locale_directory_marker: str = "shared/locales/"
    namespace_separator: str = "."
    default_namespace: str = "common"
    translation_function_name: str = "t"
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    deduplicate: bool = False
    fail_on_findings: bool = False
    output_format: str = "text"
    verbose: bool = False
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def __post_init__(self) -> None:
        for name in (
            "locale_directory_marker",
            "namespace_separator",
            "translation_function_name",
        ):
            if not getattr(self, name):
                raise ConfigError(f"Option {name!r} must not be empty")
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Unknown output format {self.output_format!r}, expected one of {', '.join(OUTPUT_FORMATS)}"
            )
        self.extensions = tuple(
            ext if ext.startswith(".") else f".{ext}" for ext in self.extensions
        )
        self.exclude = tuple(self.exclude)

    def replace(self, **overrides: Any) -> "Settings":
        overrides = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **overrides)


def _build(section: Any, cls: type, name: str) -> Any:
    if section is None:
        return cls()
    if not isinstance(section, dict):
        raise ConfigError(f'Section "{name}" must be a mapping')
    known = {f.name for f in dataclasses.fields(cls)} - {"logging"}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f'Unknown option(s) in section "{name}": {", ".join(unknown)}')
    try:
        return cls(**section)
    except TypeError as ex:
        raise ConfigError(f'Invalid section "{name}": {ex}') from ex


def settings_from_dict(raw: dict[str, Any] | None) -> Settings:
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping")
    unknown = sorted(set(raw) - {"logging", "i18n"})
    if unknown:
        raise ConfigError(f"Unknown configuration section(s): {', '.join(unknown)}")
    settings = _build(raw.get("i18n"), Settings, "i18n")
    settings.logging = _build(raw.get("logging"), LoggingSettings, "logging")
    return settings


def load_config(config_folder: str) -> Settings:
    config_file_path = os.path.join(os.path.abspath(config_folder), CONFIG_FILENAME)

    try:
        with open(config_file_path, "r", encoding="utf-8") as file:
            raw = yaml.safe_load(file)
    except FileNotFoundError:
        logger.warning(f"Config file {config_file_path} not found, using defaults")
        return Settings()
    except yaml.YAMLError as exc:
        raise ConfigError(f"Error parsing {config_file_path}: {exc}") from exc

    return settings_from_dict(raw)


def configure_logging(settings: LoggingSettings, verbose: bool = False) -> None:
    level = logging.getLevelName("DEBUG" if verbose else settings.level.upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown logging level {settings.level!r}")
    logging.basicConfig(level=level, format=settings.format, datefmt=settings.datefmt)
