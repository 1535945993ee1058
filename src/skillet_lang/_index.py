"""
Entry module for the native Skillet evaluator.

Picks the native extension for this interpreter and re-exports its
primitives. An in-tree build (``skillet_lang._skillet``) wins; otherwise
each platform package candidate is imported in turn.

A platform package that is not installed surfaces as a plain
ModuleNotFoundError. Only OptionalPlatformPackageMissing, raised while the
loader's import blocker is active, lets this module move on to the next
candidate. Load through ``skillet_lang.loader.load_binding``.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
from types import ModuleType

from ._platform import platform_candidates
from .errors import BindingLoadError, OptionalPlatformPackageMissing

logger = logging.getLogger(__name__)

LOCAL_BUILD = "skillet_lang._skillet"


def _load_native() -> ModuleType:
    if importlib.util.find_spec(LOCAL_BUILD) is not None:
        logger.debug(f"Using in-tree native build {LOCAL_BUILD}")
        return importlib.import_module(LOCAL_BUILD)

    tried: list[str] = []
    errors: list[ImportError] = []
    for name in platform_candidates():
        try:
            module = importlib.import_module(name)
        except OptionalPlatformPackageMissing as e:
            tried.append(name)
            errors.append(e)
            continue
        logger.debug(f"Using platform package {name}")
        return module

    raise BindingLoadError("No native Skillet evaluator is installed for this platform", tried, errors)


_native = _load_native()

eval_formula = _native.eval_formula
eval_formula_with = _native.eval_formula_with
eval_formula_with_custom = _native.eval_formula_with_custom
register_function = _native.register_function
unregister_function = _native.unregister_function
list_custom_functions = _native.list_custom_functions
version = _native.version
