"""
Native binding loader.

The generated entry module imports platform packages that are optional by
nature: only the one matching the current interpreter is ever installed.
When the entry module fails on one of those, the loader retries it once
with an import blocker in front of ``sys.meta_path`` that turns every
lookup of an uninstalled optional platform package into
OptionalPlatformPackageMissing, which the entry module knows how to skip.

Any other import failure propagates unchanged.
"""

from __future__ import annotations

import importlib
import importlib.abc
import logging
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from importlib.machinery import ModuleSpec
from types import ModuleType

from .config import BindingConfig
from .errors import OptionalPlatformPackageMissing

logger = logging.getLogger(__name__)


class PlatformPackageBlocker(importlib.abc.MetaPathFinder):
    """Meta path finder that fails fast on uninstalled optional platform packages.

    Installed platform packages resolve through the remaining finders as usual.
    """

    def __init__(self, config: BindingConfig):
        self.config = config

    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None = None,
        target: ModuleType | None = None,
    ) -> ModuleSpec | None:
        if not self.config.is_optional_platform_package(fullname):
            return None
        for finder in sys.meta_path:
            if finder is self or not hasattr(finder, "find_spec"):
                continue
            spec = finder.find_spec(fullname, path, target)
            if spec is not None:
                return spec
        raise OptionalPlatformPackageMissing(
            f"Optional platform package '{fullname}' is not installed",
            name=fullname,
        )


@contextmanager
def block_platform_packages(config: BindingConfig) -> Iterator[PlatformPackageBlocker]:
    """Install a PlatformPackageBlocker for the duration of the block.

    The blocker is removed on exit whether or not the block raised.
    """
    blocker = PlatformPackageBlocker(config)
    sys.meta_path.insert(0, blocker)
    try:
        yield blocker
    finally:
        if blocker in sys.meta_path:
            sys.meta_path.remove(blocker)


def purge_module(name: str) -> None:
    """Drop ``name`` and its submodules from ``sys.modules``."""
    prefix = f"{name}."
    for cached in [m for m in sys.modules if m == name or m.startswith(prefix)]:
        del sys.modules[cached]


def load_binding(config: BindingConfig | None = None) -> ModuleType:
    """
    Import the native evaluator entry module.

    Args:
        config: Binding settings; defaults to BindingConfig()

    Returns:
        The loaded entry module, exposing the evaluator primitives

    Raises:
        ModuleNotFoundError: A required module is missing (not an optional
            platform package), or the retry failed on one
        ImportError: Any other failure of the entry module, including the
            retry under the blocker
    """
    config = config or BindingConfig()

    try:
        module = importlib.import_module(config.entry_module)
    except ModuleNotFoundError as e:
        if not config.is_optional_platform_package(e.name):
            raise
        missing = e.name
    else:
        logger.debug(f"Loaded native binding from {config.entry_module}")
        return module

    logger.warning(
        f"Optional platform package '{missing}' is not installed; "
        f"retrying {config.entry_module} with platform packages blocked"
    )
    return _reload_with_platform_packages_blocked(config)


def _reload_with_platform_packages_blocked(config: BindingConfig) -> ModuleType:
    with block_platform_packages(config):
        purge_module(config.entry_module)
        module = importlib.import_module(config.entry_module)
    logger.debug(f"Loaded native binding from {config.entry_module} after fallback")
    return module
