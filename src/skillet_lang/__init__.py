"""
skillet-lang - Python bindings for the Skillet micro expression language.

The native evaluator is loaded on first use. ``evaluate`` picks the right
engine entry point for you:

    import asyncio
    from skillet_lang import evaluate, register_function

    asyncio.run(evaluate("=2 + 3 * 4"))                   # 14
    asyncio.run(evaluate("=SUM(:a, :b)", {"a": 10, "b": 5}))  # 15

    register_function("ADD5", lambda ctx, args, resolve: resolve(args[0] + 5), 1, 1)
    asyncio.run(evaluate("=ADD5(:n)", {"n": 37}))          # 42

Custom functions are Python callables, so the Node package's
``registerJsFunction`` is ``register_function`` here; the other names are the
snake_case forms of the Node API (``unregister_function``,
``list_custom_functions``, ``eval_formula_with_custom``, ...).
"""

from __future__ import annotations

from ._version import get_version
from .binding import CustomHandler, EvaluatorBinding, get_binding
from .config import BindingConfig
from .dispatcher import (
    Dispatcher,
    eval_formula,
    eval_formula_with,
    eval_formula_with_custom,
    evaluate,
    get_dispatcher,
    list_custom_functions,
    register_function,
    unregister_function,
    version,
)
from .errors import BindingLoadError, OptionalPlatformPackageMissing, SkilletError
from .loader import load_binding

__version__ = get_version()

__all__ = [
    "__version__",
    "BindingConfig",
    "BindingLoadError",
    "CustomHandler",
    "Dispatcher",
    "EvaluatorBinding",
    "OptionalPlatformPackageMissing",
    "SkilletError",
    "eval_formula",
    "eval_formula_with",
    "eval_formula_with_custom",
    "evaluate",
    "get_binding",
    "get_dispatcher",
    "list_custom_functions",
    "load_binding",
    "register_function",
    "unregister_function",
    "version",
]
