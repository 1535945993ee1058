"""
Error types for the skillet-lang binding layer.

Formula evaluation errors are raised by the native engine and are never
wrapped here; only binding resolution has its own error types.
"""

from __future__ import annotations


class SkilletError(Exception):
    """Base exception for errors raised by skillet-lang itself."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BindingLoadError(SkilletError, ImportError):
    """
    Raised when no native evaluator could be imported.

    Examples:
    - No in-tree build and no platform package installed
    - Every platform package candidate was blocked as missing

    Attributes:
        candidates: Module names that were tried, in order
        errors: The import error raised for each candidate
    """

    def __init__(self, message: str, candidates: list[str], errors: list[ImportError]):
        self.candidates = candidates
        self.errors = errors
        super().__init__(self._format_message(message, candidates, errors))

    @staticmethod
    def _format_message(message: str, candidates: list[str], errors: list[ImportError]) -> str:
        lines = [message]
        for name, err in zip(candidates, errors):
            lines.append(f"  {name}: {err}")
        return "\n".join(lines)


class OptionalPlatformPackageMissing(ModuleNotFoundError):
    """
    Raised by the loader's temporary import blocker for optional platform packages.

    Subclasses ModuleNotFoundError so generic handlers still see a missing
    module, while the generated entry module can tell a blocked optional
    package apart from a broken install.
    """
