"""
Decision variable handles.

A Variable is an opaque handle issued by a model's registry. It knows its
name, domain and whether it holds a known constant, but its column index can
only be resolved by the registry that created it.

Examples
--------
>>> from milpmanager import MilpModel, Domain
>>> with MilpModel() as model:
...     x = model.create('x', Domain.POSITIVE_OR_ZERO_INTEGER)
...     y = model.create('y', Domain.POSITIVE_OR_ZERO_INTEGER)
...     z = x + y          # one anonymous variable, one equality row
...     model.add_constraint(z <= 10)
...     model.add_goal(z)
...     result = model.solve()
"""

import math
from typing import Optional, Union

import numpy as np

from .backend import RelOp
from .domain import (Domain, divide_domain, negate_domain, scale_domain,
                     sum_domain)


class Free:
    """Kind of a variable whose value is decided by the solver"""

    __slots__ = ()

    def __repr__(self):
        return "Free()"

    def __eq__(self, other):
        return isinstance(other, Free)

    def __hash__(self):
        return hash(Free)


class Constant:
    """Kind of a variable known at build time to equal ``value``"""

    __slots__ = ('value',)

    def __init__(self, value: float):
        self.value = value

    def __repr__(self):
        return f"Constant({self.value})"

    def __eq__(self, other):
        return isinstance(other, Constant) and other.value == self.value

    def __hash__(self):
        return hash((Constant, self.value))


FREE = Free()

Number = (int, float, np.number)


class Variable:
    """
    Decision variable owned by a model.

    Arithmetic operators are compiled immediately by the owning model into
    new columns and rows. Comparison operators return a :class:`Relation`
    that is installed with :meth:`MilpModel.add_constraint`.

    Parameters
    ----------
    model : MilpModel
        Owning model
    name : str
        Variable name (synthesized for anonymous intermediates)
    domain : Domain
        Domain the variable was created with
    kind : Free or Constant, optional
        Whether the variable is a known constant (default: Free)
    expression : str, optional
        Diagnostic label describing how the variable was derived
    """

    __slots__ = ('_model', '_token', 'name', 'domain', 'kind', 'expression',
                 '__weakref__')

    def __init__(self, model, token: object, name: str, domain: Domain,
                 kind: Union[Free, Constant] = FREE,
                 expression: Optional[str] = None):
        self._model = model
        self._token = token
        self.name = name
        self.domain = domain
        self.kind = kind
        self.expression = expression

    @property
    def model(self):
        return self._model

    @property
    def is_constant(self) -> bool:
        return isinstance(self.kind, Constant)

    @property
    def constant_value(self) -> float:
        """Known value of a constant variable"""
        if isinstance(self.kind, Constant):
            return self.kind.value
        raise TypeError(f"Variable {self.name} is not a known constant")

    @property
    def value(self) -> float:
        """Solved value; only meaningful after an optimal solve"""
        return self._model.get_value(self)

    def __repr__(self):
        if isinstance(self.kind, Constant):
            return f"Variable({self.name}={self.kind.value})"
        return f"Variable({self.name})"

    def __str__(self):
        return self.expression or self.name

    __hash__ = object.__hash__

    # Arithmetic operations

    def _lift(self, other) -> 'Variable':
        if isinstance(other, Variable):
            return other
        if isinstance(other, Number) and not isinstance(other, bool):
            return self._model.from_constant(float(other))
        return NotImplemented

    def __add__(self, other):
        other = self._lift(other)
        if other is NotImplemented:
            return other
        return self._model.sum(self, other, sum_domain(self.domain, other.domain))

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = self._lift(other)
        if other is NotImplemented:
            return other
        return self + (-other)

    def __rsub__(self, other):
        other = self._lift(other)
        if other is NotImplemented:
            return other
        return other + (-self)

    def __neg__(self):
        return self._model.negate(self, negate_domain(self.domain))

    def __mul__(self, other):
        factor = _factor(other)
        if factor is None:
            return NotImplemented
        return self._model.multiply(self, other, scale_domain(self.domain, factor))

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        factor = _factor(other)
        if factor is None:
            return NotImplemented
        return self._model.divide(self, other, divide_domain(self.domain, factor))

    # Comparison operators build relations; nothing reaches the model until
    # the relation is passed to MilpModel.add_constraint

    def _relation(self, other, sense: RelOp):
        if isinstance(other, Variable) or (isinstance(other, Number)
                                           and not isinstance(other, bool)):
            return Relation(self, other, sense)
        return NotImplemented

    def __le__(self, other):
        return self._relation(other, RelOp.LE)

    def __ge__(self, other):
        return self._relation(other, RelOp.GE)

    def __eq__(self, other):
        return self._relation(other, RelOp.EQ)

    def __ne__(self, other):
        raise TypeError("Variables do not support '!='; a linear model cannot "
                        "express that two values differ")


class Relation:
    """
    Relation written with a comparison operator, not yet in the model.

    ``x <= y``, ``x >= 5`` and ``x == y`` build a Relation; it is installed
    as one row by :meth:`MilpModel.add_constraint`. The right-hand side may be
    a variable or a number. The truth value of an ``==`` relation is the
    identity of its two sides, so variables can be looked up in lists.
    """

    __slots__ = ('variable', 'bound', 'sense')

    def __init__(self, variable: Variable, bound: Union[Variable, float], sense: RelOp):
        self.variable = variable
        self.bound = bound
        self.sense = sense

    def __bool__(self):
        if self.sense is RelOp.EQ:
            return self.variable is self.bound
        raise TypeError("Truth value of an inequality is undefined; "
                        "add it to the model with add_constraint()")

    def __repr__(self):
        return f"Relation({self.variable} {self.sense.value} {self.bound})"


def _factor(other) -> Optional[float]:
    """Numeric value of a scale/divide operand, or None if unsupported"""
    if isinstance(other, Variable):
        # Free variables are rejected by the compiler with NonlinearError.
        return other.kind.value if isinstance(other.kind, Constant) else math.nan
    if isinstance(other, Number):
        return float(other)
    return None
