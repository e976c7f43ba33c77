"""Named arithmetic operators applied to a list of input values."""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from functools import reduce
from typing import Any, Iterable, Sequence

ADD = "add"
MUL = "mul"
SUBLR = "sublr"
SUBRL = "subrl"

SUPPORTED_OPERATORS = frozenset({ADD, MUL, SUBLR, SUBRL})


class UnsupportedOperatorError(ValueError):
    """Raised when an operator name is not known."""


class ExecutorChecker:
    """Checks operator names against a set of supported ones."""

    def __init__(self, supported: Iterable[str] = SUPPORTED_OPERATORS) -> None:
        self._supported = frozenset(supported)

    def check_op(self, op: str) -> bool:
        return op in self._supported

    def check_ops(self, ops: Iterable[str]) -> tuple[bool, str]:
        """Return (True, "") or (False, message) naming the first unsupported op."""
        for op in ops:
            if not self.check_op(op):
                return False, f"operator {op} not supported"
        return True, ""


class OperatorExecutor(ABC):
    """Runs one operator over at least two inputs."""

    name: str = ""

    def run_kernel(self, inputs: Iterable[Any]) -> Any:
        values = list(inputs)
        if len(values) < 2:
            raise ValueError(f"{self.name} need at least two input")
        return self._compute(values)

    @abstractmethod
    def _compute(self, values: Sequence[Any]) -> Any:
        """Combine the validated inputs."""


class AddExecutor(OperatorExecutor):
    name = ADD

    def _compute(self, values: Sequence[Any]) -> Any:
        return reduce(operator.add, values)


class MulExecutor(OperatorExecutor):
    name = MUL

    def _compute(self, values: Sequence[Any]) -> Any:
        return reduce(operator.mul, values)


class SublrExecutor(OperatorExecutor):
    """First input minus the second; further inputs are ignored."""

    name = SUBLR

    def _compute(self, values: Sequence[Any]) -> Any:
        return values[0] - values[1]


class SubrlExecutor(OperatorExecutor):
    """Second input minus the first; further inputs are ignored."""

    name = SUBRL

    def _compute(self, values: Sequence[Any]) -> Any:
        return values[1] - values[0]


_EXECUTORS: dict[str, type[OperatorExecutor]] = {
    ADD: AddExecutor,
    MUL: MulExecutor,
    SUBLR: SublrExecutor,
    SUBRL: SubrlExecutor,
}


def create_executor(op: str) -> OperatorExecutor:
    """Return an executor for the named operator."""
    try:
        return _EXECUTORS[op]()
    except KeyError:
        raise UnsupportedOperatorError(f"{op} not supported") from None


def run_execute(op: str, inputs: Iterable[Any]) -> Any:
    """Apply the named operator to the inputs."""
    return create_executor(op).run_kernel(inputs)