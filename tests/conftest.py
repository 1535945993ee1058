"""Shared pytest fixtures for skillet-lang tests.

The native engine is not available in the test environment. FakeBinding
stands in for it: it records which evaluator each call reached and computes
small arithmetic formulas (``=2 + 3 * 4``, ``=SUM(:a, :b)``, custom calls)
so routing can be checked through real results.
"""
from __future__ import annotations

import ast
import asyncio
import concurrent.futures
import operator
import re
from collections.abc import Callable, Mapping
from typing import Any

import pytest

import skillet_lang.binding as binding_module

_VAR_RE = re.compile(r":([A-Za-z_]\w*)")
_VAR_PREFIX = "__var_"

_BINOPS: dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}


class FakeEngineError(Exception):
    """Raised by FakeBinding the way the native engine raises evaluation errors."""


def _flatten(values: list[Any]) -> list[Any]:
    flat: list[Any] = []
    for v in values:
        if isinstance(v, (list, tuple)):
            flat.extend(_flatten(list(v)))
        else:
            flat.append(v)
    return flat


def compute(formula: str, variables: Mapping[str, Any], call: Callable[[str, list[Any]], Any]) -> Any:
    """Evaluate a tiny formula subset: numbers, strings, :vars, + - * /, SUM and calls."""
    source = _VAR_RE.sub(rf"{_VAR_PREFIX}\1", formula.strip().removeprefix("=").strip())
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise FakeEngineError(f"Parse error: {e.msg}") from e
    return _compute_node(tree.body, variables, call)


def _compute_node(node: ast.AST, variables: Mapping[str, Any], call: Callable[[str, list[Any]], Any]) -> Any:
    if isinstance(node, ast.Constant):
        return node.value
    if isinstance(node, ast.Name) and node.id.startswith(_VAR_PREFIX):
        name = node.id[len(_VAR_PREFIX) :]
        if name not in variables:
            raise FakeEngineError(f"Unknown variable :{name}")
        return variables[name]
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.USub):
        return -_compute_node(node.operand, variables, call)
    if isinstance(node, ast.BinOp) and type(node.op) in _BINOPS:
        left = _compute_node(node.left, variables, call)
        right = _compute_node(node.right, variables, call)
        return _BINOPS[type(node.op)](left, right)
    if isinstance(node, ast.Call) and isinstance(node.func, ast.Name):
        args = [_compute_node(a, variables, call) for a in node.args]
        if node.func.id == "SUM":
            return sum(_flatten(args))
        return call(node.func.id, args)
    raise FakeEngineError(f"Unsupported expression: {ast.dump(node)}")


class FakeBinding:
    """In-memory stand-in for the native evaluator binding."""

    Error = FakeEngineError

    def __init__(self, engine_version: str = "0.5.1"):
        self.engine_version = engine_version
        self.calls: list[tuple[str, str, Any]] = []
        self.functions: dict[str, tuple[Any, int, int | None]] = {}

    @property
    def routes(self) -> list[str]:
        return [route for route, _formula, _variables in self.calls]

    def eval_formula(self, formula: str) -> Any:
        self.calls.append(("eval_formula", formula, None))
        return compute(formula, {}, self._unknown_function)

    def eval_formula_with(self, formula: str, variables: Mapping[str, Any] | None) -> Any:
        self.calls.append(("eval_formula_with", formula, variables))
        return compute(formula, dict(variables or {}), self._unknown_function)

    async def eval_formula_with_custom(self, formula: str, variables: Mapping[str, Any] | None) -> Any:
        self.calls.append(("eval_formula_with_custom", formula, variables))
        loop = asyncio.get_running_loop()

        def call(name: str, args: list[Any]) -> Any:
            if name not in self.functions:
                raise FakeEngineError(f"Unknown function: {name}")
            handler, min_args, max_args = self.functions[name]
            if len(args) < min_args or (max_args is not None and len(args) > max_args):
                raise FakeEngineError(f"{name} called with {len(args)} argument(s)")
            done: concurrent.futures.Future[Any] = concurrent.futures.Future()
            loop.call_soon_threadsafe(handler, None, list(args), done.set_result)
            return done.result()

        # The engine evaluates on a worker thread and calls handlers back on the loop.
        return await asyncio.to_thread(compute, formula, dict(variables or {}), call)

    def register_function(
        self,
        name: str,
        handler: Any,
        min_args: int | None = None,
        max_args: int | None = None,
    ) -> None:
        min_args = min_args or 0
        if max_args is not None and max_args < min_args:
            raise FakeEngineError(f"{name}: max_args must be >= min_args")
        self.functions[name] = (handler, min_args, max_args)

    def unregister_function(self, name: str) -> bool:
        return self.functions.pop(name, None) is not None

    def list_custom_functions(self) -> list[str]:
        return list(self.functions)

    def version(self) -> str:
        return self.engine_version

    @staticmethod
    def _unknown_function(name: str, args: list[Any]) -> Any:
        raise FakeEngineError(f"Unknown function: {name}")


_NATIVE_SOURCE = """
def eval_formula(formula):
    return "native:" + formula

def eval_formula_with(formula, variables):
    return "native:" + formula

async def eval_formula_with_custom(formula, variables):
    return "native:" + formula

def register_function(name, handler, min_args=None, max_args=None):
    pass

def unregister_function(name):
    return False

def list_custom_functions():
    return []

def version():
    return "9.9.9"
"""


@pytest.fixture
def engine() -> FakeBinding:
    """Return a fresh fake binding."""
    return FakeBinding()


@pytest.fixture
def installed_engine(engine: FakeBinding, monkeypatch: pytest.MonkeyPatch) -> FakeBinding:
    """Install the fake binding as the process-wide handle."""
    monkeypatch.setattr(binding_module, "_binding", engine)
    return engine


@pytest.fixture
def native_source() -> str:
    """Source of a minimal native module, for tests that import real module files."""
    return _NATIVE_SOURCE


@pytest.fixture(autouse=True)
def _reset_process_binding(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each test starts with no process-wide binding loaded."""
    monkeypatch.setattr(binding_module, "_binding", None)
