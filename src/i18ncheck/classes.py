import pathlib
from dataclasses import dataclass, field

from i18ncheck.syntax import SyntaxNode


@dataclass(frozen=True)
class SourceLocation:
    path: str
    # zero-based
    line: int

    def relative_to(self, root: str) -> str:
        path = pathlib.PurePosixPath(self.path.replace("\\", "/"))
        if root:
            try:
                path = path.relative_to(root.replace("\\", "/"))
            except ValueError:
                # outside the project root, keep the full path
                pass
        return path.as_posix()


@dataclass(frozen=True)
class TranslationEntry:
    language: str
    key_path: str
    value: str
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.language} {self.key_path}"


@dataclass(frozen=True)
class TranslationReference:
    key_path: str
    location: SourceLocation


@dataclass(frozen=True)
class SourceModule:
    path: str
    root: SyntaxNode
    has_errors: bool = False


@dataclass(frozen=True)
class Diagnostic:
    path: str
    line: int
    message: str


@dataclass
class Project:
    root: str
    modules: list[SourceModule] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def modules_with_errors(self) -> list[SourceModule]:
        return [module for module in self.modules if module.has_errors]


@dataclass(frozen=True)
class AnalysisResult:
    entries: tuple[TranslationEntry, ...]
    references: tuple[TranslationReference, ...]
    missing: tuple[TranslationReference, ...]
    unused: tuple[TranslationEntry, ...]

    @property
    def has_findings(self) -> bool:
        return bool(self.missing or self.unused)

    def exit_code(self, fail_on_findings: bool) -> int:
        if fail_on_findings and self.has_findings:
            return 1
        return 0
