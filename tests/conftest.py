"""Shared fixtures: a small Python project laid out on disk."""
from __future__ import annotations

from pathlib import Path

import pytest

SAMPLE_PROJECT = {
    "src/pkg/__init__.py": "",
    "src/pkg/core.py": "def add(a, b):\n    return a + b\n",
    "src/pkg/api.py": "from pkg.core import add\n\n\ndef total(xs):\n    return sum(xs)\n",
    "src/pkg/util.py": "from . import core\n",
    "tests/test_api.py": "from pkg import api\n\n\ndef test_total():\n    assert api.total([1, 2]) == 3\n",
    "tests/test_util.py": "import pkg.util\n\n\ndef test_util():\n    assert pkg.util.core.add(1, 1) == 2\n",
    "tests/test_other.py": "import os\n\n\ndef test_other():\n    assert os.sep\n",
    "tests/test_broken.py": "def broken(:\n",
    "tests/smoke.robot": "*** Test Cases ***\nSmoke\n    Log    ok\n",
    "README.md": "sample\n",
}


def write_project(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return root


@pytest.fixture
def make_project(tmp_path: Path):
    """Factory fixture that writes ``{relative path: content}`` under tmp_path."""

    def _make(files: dict[str, str], name: str = "custom") -> Path:
        return write_project(tmp_path.resolve() / name, files)

    return _make


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Write the sample project and return its (resolved) root."""
    return write_project(tmp_path.resolve() / "project", SAMPLE_PROJECT)
