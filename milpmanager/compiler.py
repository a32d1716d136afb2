"""
Expression compiler.

Backends only accept linear rows, so every arithmetic operation is compiled
into one new anonymous variable plus one equality row pinning it to the
operation's result:

=================  ==================================
Operation          Row (``== 0``)
=================  ==================================
sum(a, b)          +1*a +1*b -1*result
negate(a)          -1*a -1*result
scale(a, k)        +k*a -1*result
divide(a, k)       +(1/k)*a -1*result
=================  ==================================

``k`` must be a known constant. Products of two decision variables are not
linear and are rejected.
"""

from typing import Union

import numpy as np

from .backend import RelOp
from .constraints import ConstraintEmitter, Row
from .domain import Domain
from .exceptions import DivisionByZeroError, NonlinearError
from .registry import VariableRegistry
from .variable import FREE, Constant, Variable

Factor = Union[Variable, int, float, np.number]


class ExpressionCompiler:
    """
    Linearizes arithmetic over variables into auxiliary columns and rows.

    Parameters
    ----------
    registry : VariableRegistry
        Allocates the result variables
    emitter : ConstraintEmitter
        Installs the defining rows
    """

    def __init__(self, registry: VariableRegistry, emitter: ConstraintEmitter):
        self._registry = registry
        self._emitter = emitter

    def sum(self, first: Variable, second: Variable, domain: Domain) -> Variable:
        """Variable equal to ``first + second``"""
        a = self._registry.column_of(first)
        b = self._registry.column_of(second)
        kind = FREE
        if first.is_constant and second.is_constant:
            kind = Constant(first.constant_value + second.constant_value)
        result = self._registry.create_anonymous(
            domain, kind, f"({first} + {second})")
        row = Row([(a, 1.0), (b, 1.0), (self._registry.column_of(result), -1.0)])
        self._emitter.emit(row, RelOp.EQ)
        return result

    def negate(self, variable: Variable, domain: Domain) -> Variable:
        """Variable equal to ``-variable``"""
        a = self._registry.column_of(variable)
        kind = Constant(-variable.constant_value) if variable.is_constant else FREE
        result = self._registry.create_anonymous(domain, kind, f"-{variable}")
        row = Row([(a, -1.0), (self._registry.column_of(result), -1.0)])
        self._emitter.emit(row, RelOp.EQ)
        return result

    def scale(self, variable: Variable, factor: Factor, domain: Domain) -> Variable:
        """Variable equal to ``variable * factor`` for a known constant factor"""
        a = self._registry.column_of(variable)
        k = self._constant_of(factor)
        kind = Constant(variable.constant_value * k) if variable.is_constant else FREE
        result = self._registry.create_anonymous(domain, kind, f"({variable} * {k:g})")
        row = Row([(a, k), (self._registry.column_of(result), -1.0)])
        self._emitter.emit(row, RelOp.EQ)
        return result

    def divide(self, variable: Variable, divisor: Factor, domain: Domain) -> Variable:
        """
        Variable equal to ``variable / divisor`` for a known constant divisor.

        Raises
        ------
        DivisionByZeroError
            If the divisor is zero; nothing is added to the model
        NonlinearError
            If the divisor is a free variable
        """
        a = self._registry.column_of(variable)
        k = self._constant_of(divisor)
        if k == 0:
            raise DivisionByZeroError(f"Cannot divide {variable} by zero")
        kind = Constant(variable.constant_value / k) if variable.is_constant else FREE
        result = self._registry.create_anonymous(domain, kind, f"({variable} / {k:g})")
        row = Row([(a, 1.0 / k), (self._registry.column_of(result), -1.0)])
        self._emitter.emit(row, RelOp.EQ)
        return result

    def _constant_of(self, factor: Factor) -> float:
        if isinstance(factor, Variable):
            self._registry.column_of(factor)
            if not isinstance(factor.kind, Constant):
                raise NonlinearError(
                    f"Cannot multiply or divide by free variable {factor.name}; "
                    "only known constants are linear")
            return factor.kind.value
        if isinstance(factor, (int, float, np.number)) and not isinstance(factor, bool):
            value = float(factor)
            if not np.isfinite(value):
                raise ValueError(f"Constant factor must be finite, got {value}")
            return value
        raise TypeError(f"Unsupported factor type: {type(factor).__name__}")
