"""
The process-wide handle to the native evaluator.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, cast, runtime_checkable

from .config import BindingConfig
from .loader import load_binding

Variables = Mapping[str, Any]
Resolve = Callable[[Any], None]
CustomHandler = Callable[[Any, list[Any], Resolve], None]


@runtime_checkable
class EvaluatorBinding(Protocol):
    """What the native evaluator exposes.

    Custom handlers are called as ``handler(context, args, resolve)`` and
    must call ``resolve(result)`` exactly once. An evaluation whose handler
    never resolves never completes; the engine has no timeout.
    """

    def eval_formula(self, formula: str) -> Any: ...

    def eval_formula_with(self, formula: str, variables: Variables | None) -> Any: ...

    def eval_formula_with_custom(self, formula: str, variables: Variables | None) -> Awaitable[Any]: ...

    def register_function(
        self,
        name: str,
        handler: CustomHandler,
        min_args: int | None = None,
        max_args: int | None = None,
    ) -> None: ...

    def unregister_function(self, name: str) -> bool: ...

    def list_custom_functions(self) -> list[str]: ...

    def version(self) -> str: ...


# Global binding handle
_binding: EvaluatorBinding | None = None


def get_binding(config: BindingConfig | None = None) -> EvaluatorBinding:
    """
    Get the process-wide evaluator binding.

    Loads it on first call; later calls return the same handle and ignore
    ``config``. A failed load leaves the handle unset so the error repeats
    on the next call.
    """
    global _binding
    if _binding is None:
        _binding = cast(EvaluatorBinding, load_binding(config))
    return _binding
