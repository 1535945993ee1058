"""
Binding resolution settings.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ENTRY_MODULE = "skillet_lang._index"
DEFAULT_PLATFORM_PREFIX = "skillet_lang_"
DEFAULT_PLATFORM_FAMILIES = ("linux", "darwin", "win32", "freebsd", "android", "wasm32")


class BindingConfig(BaseModel):
    """
    Where the native evaluator lives and which packages are optional.

    Attributes:
        entry_module: Generated module that picks and re-exports the native binding
        platform_prefix: Distribution prefix shared by all platform packages
        platform_families: First segment of every known platform variant
    """

    entry_module: str = DEFAULT_ENTRY_MODULE
    platform_prefix: str = DEFAULT_PLATFORM_PREFIX
    platform_families: tuple[str, ...] = Field(default=DEFAULT_PLATFORM_FAMILIES)

    model_config = ConfigDict(frozen=True)

    def is_optional_platform_package(self, name: str | None) -> bool:
        """Return True if ``name`` (or its top-level package) is a platform package.

        ``skillet_lang_linux_x64_gnu`` and ``skillet_lang_darwin_arm64.native``
        match; ``skillet_lang`` and ``skillet_lang_tools`` do not.
        """
        if not name:
            return False
        top_level = name.partition(".")[0]
        if not top_level.startswith(self.platform_prefix):
            return False
        variant = top_level[len(self.platform_prefix) :]
        family, sep, suffix = variant.partition("_")
        return family in self.platform_families and bool(sep) and bool(suffix)
