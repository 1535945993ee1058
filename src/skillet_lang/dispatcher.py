"""
Unified evaluation entry point.

The engine has three evaluators: a plain one, one that takes variables, and
an async one that can call registered custom functions. ``evaluate`` picks
one per call:

1. any custom function registered -> async custom-aware evaluator
2. variables given (not None)     -> variable-aware evaluator
3. otherwise                      -> plain evaluator

The registry is queried on every call, so registering or unregistering a
function changes routing for the very next call. Engine errors propagate
unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

from .binding import CustomHandler, EvaluatorBinding, Variables, get_binding

logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes evaluations to one of the binding's three evaluators."""

    def __init__(self, binding: EvaluatorBinding):
        self.binding = binding

    async def evaluate(self, formula: str, variables: Variables | None = None) -> Any:
        """
        Evaluate a formula.

        Always a coroutine, even when the selected evaluator is synchronous.
        If a custom handler never calls its ``resolve`` callback, the
        returned coroutine never completes.

        Args:
            formula: Formula text, passed to the engine as-is
            variables: Name -> value mapping; None means no variables

        Returns:
            The value computed by the engine
        """
        custom_functions = self.binding.list_custom_functions()

        if len(custom_functions) > 0:
            logger.debug(f"Evaluating with {len(custom_functions)} custom function(s) registered")
            return await self.binding.eval_formula_with_custom(formula, variables)
        if variables is not None:
            return self.binding.eval_formula_with(formula, variables)
        return self.binding.eval_formula(formula)

    def register_function(
        self,
        name: str,
        handler: CustomHandler,
        min_args: int | None = None,
        max_args: int | None = None,
    ) -> None:
        """Register ``handler`` as ``name``, replacing any existing registration."""
        self.binding.register_function(name, handler, min_args, max_args)

    def unregister_function(self, name: str) -> bool:
        """Remove ``name``; False if it was not registered."""
        return self.binding.unregister_function(name)

    def list_custom_functions(self) -> list[str]:
        return self.binding.list_custom_functions()

    def version(self) -> str:
        return self.binding.version()


# =============================================================================
# Module-level API over the process-wide binding
# =============================================================================


def get_dispatcher() -> Dispatcher:
    """Dispatcher bound to the process-wide binding (loaded on first use)."""
    return Dispatcher(get_binding())


async def evaluate(formula: str, variables: Variables | None = None) -> Any:
    """Evaluate ``formula`` with the process-wide binding. See Dispatcher.evaluate."""
    return await get_dispatcher().evaluate(formula, variables)


def register_function(
    name: str,
    handler: CustomHandler,
    min_args: int | None = None,
    max_args: int | None = None,
) -> None:
    """
    Register a Python custom function with the engine.

    The handler is called as ``handler(context, args, resolve)`` and must
    call ``resolve(result)`` exactly once, possibly later from another task.

    Example:
        def add5(context, args, resolve):
            resolve(args[0] + 5)

        register_function("ADD5", add5, 1, 1)
    """
    get_dispatcher().register_function(name, handler, min_args, max_args)


def unregister_function(name: str) -> bool:
    return get_dispatcher().unregister_function(name)


def list_custom_functions() -> list[str]:
    return get_dispatcher().list_custom_functions()


def version() -> str:
    """Version of the native engine (not of this package)."""
    return get_dispatcher().version()


def eval_formula(formula: str) -> Any:
    return get_binding().eval_formula(formula)


def eval_formula_with(formula: str, variables: Variables | None) -> Any:
    return get_binding().eval_formula_with(formula, variables)


async def eval_formula_with_custom(formula: str, variables: Variables | None = None) -> Any:
    return await get_binding().eval_formula_with_custom(formula, variables)
