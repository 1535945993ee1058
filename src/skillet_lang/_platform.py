"""
Platform variant detection for native package names.

Native builds are published as one package per platform, named
``skillet_lang_<variant>``, where the variant follows the usual
``<os>_<arch>[_<abi>]`` triple: ``linux_x64_gnu``, ``darwin_arm64``,
``win32_x64_msvc`` and so on.
"""

from __future__ import annotations

import glob
import platform
import sys

from .config import DEFAULT_PLATFORM_PREFIX

WASI_VARIANT = "wasm32_wasi"
MUSL_LOADER_GLOB = "/lib/ld-musl-*.so.1"

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
}


def detect_arch(machine: str | None = None) -> str:
    """Normalize ``platform.machine()`` to the arch names used in package names."""
    machine = (machine if machine is not None else platform.machine()).lower()
    return _ARCH_ALIASES.get(machine, machine)


def detect_libc() -> str:
    """Return ``gnu`` or ``musl`` for the running Linux interpreter.

    ``musl`` only on positive evidence: ``platform.libc_ver()`` reporting it,
    or a musl dynamic loader on disk. Anything else, including an unreadable
    interpreter binary, counts as glibc.
    """
    libc, _version = platform.libc_ver()
    if libc == "glibc":
        return "gnu"
    if libc == "musl" or glob.glob(MUSL_LOADER_GLOB):
        return "musl"
    return "gnu"


def platform_variant(
    system: str | None = None,
    machine: str | None = None,
    libc: str | None = None,
) -> str:
    """
    Compute the platform variant for a native package.

    Args:
        system: ``sys.platform`` value; detected when omitted
        machine: ``platform.machine()`` value; detected when omitted
        libc: ``gnu`` or ``musl``; only consulted on Linux

    Returns:
        Variant string such as ``linux_x64_gnu`` or ``win32_arm64_msvc``
    """
    system = system if system is not None else sys.platform
    arch = detect_arch(machine)

    if system.startswith("linux"):
        if arch == "arm":
            return "linux_arm_gnueabihf"
        return f"linux_{arch}_{libc or detect_libc()}"
    if system == "darwin":
        return f"darwin_{arch}"
    if system in ("win32", "cygwin"):
        return f"win32_{arch}_msvc"
    if system.startswith("freebsd"):
        return f"freebsd_{arch}"
    if system == "android":
        return f"android_{arch}"
    return f"{system}_{arch}"


def platform_candidates(prefix: str = DEFAULT_PLATFORM_PREFIX, variant: str | None = None) -> list[str]:
    """
    Ordered platform package names to try for this interpreter.

    The native variant comes first; macOS also accepts the universal build,
    and the WASI build is the last resort everywhere.
    """
    variant = variant or platform_variant()
    names = [f"{prefix}{variant}"]
    if variant.startswith("darwin_"):
        names.append(f"{prefix}darwin_universal")
    names.append(f"{prefix}{WASI_VARIANT}")
    return names
