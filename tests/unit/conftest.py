"""Conftest for unit tests: import system isolation.

Loader tests import throwaway entry and platform modules from ``tmp_path``
and temporarily alter ``sys.meta_path``. ``isolated_imports`` snapshots
both and restores them after the test so names can be reused across tests.
"""

from __future__ import annotations

import importlib
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest


class ModuleWriter:
    """Writes importable modules into a directory on ``sys.path``."""

    def __init__(self, root: Path, native_source: str):
        self.root = root
        self.native_source = native_source

    def write(self, name: str, source: str) -> Path:
        path = self.root / f"{name}.py"
        path.write_text(source)
        importlib.invalidate_caches()
        return path

    def write_native(self, name: str) -> Path:
        """Write a module exposing the native evaluator primitives."""
        return self.write(name, self.native_source)


@pytest.fixture
def isolated_imports(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, native_source: str
) -> Iterator[ModuleWriter]:
    """Put ``tmp_path`` on sys.path and restore sys.modules/sys.meta_path afterwards."""
    modules_before = set(sys.modules)
    meta_path_before = list(sys.meta_path)
    monkeypatch.syspath_prepend(str(tmp_path))

    yield ModuleWriter(tmp_path, native_source)

    for name in set(sys.modules) - modules_before:
        del sys.modules[name]
    sys.meta_path[:] = meta_path_before
    importlib.invalidate_caches()
