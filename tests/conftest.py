import textwrap

import pytest

from i18ncheck import provider


def parse(source: str, path: str = "/project/src/app.ts"):
    module, _ = provider.parse_source(path, textwrap.dedent(source).encode("utf-8"))
    return module


@pytest.fixture
def make_project(tmp_path):
    """Write ``{relative_path: source}`` below a temporary project root."""

    def _make(files: dict[str, str]):
        for relative, source in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source), encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture
def parse_module():
    return parse
