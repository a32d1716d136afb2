"""
Sparse rows, constraint records and the constraint emitter
"""

import logging
import math
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .backend import Backend, RelOp, call_directive
from .domain import Domain
from .registry import VariableRegistry
from .variable import Constant, Variable

logger = logging.getLogger(__name__)


class Row:
    """
    Sparse linear form: mapping from 1-based column id to coefficient.

    Coefficients added for the same column accumulate; exact zeros are
    dropped when the row is read.

    Examples
    --------
    >>> row = Row([(1, 1.0), (2, 1.0), (3, -1.0)])
    >>> dict(row.items())
    {1: 1.0, 2: 1.0, 3: -1.0}
    """

    __slots__ = ('_coefficients',)

    def __init__(self, terms: Optional[Iterable[Tuple[int, float]]] = None):
        self._coefficients: Dict[int, float] = {}
        for column, coefficient in terms or ():
            self.add(column, coefficient)

    def add(self, column: int, coefficient: float) -> 'Row':
        self._coefficients[column] = self._coefficients.get(column, 0.0) + float(coefficient)
        return self

    def get(self, column: int) -> float:
        return self._coefficients.get(column, 0.0)

    def items(self) -> Iterator[Tuple[int, float]]:
        return ((k, v) for k, v in self._coefficients.items() if v != 0.0)

    def to_dict(self) -> Dict[int, float]:
        return dict(self.items())

    def __len__(self):
        return sum(1 for _ in self.items())

    def __repr__(self):
        terms = [f"{v:+g}*c{k}" for k, v in sorted(self.items())]
        return f"Row({' '.join(terms) or '0'})"


class Constraint:
    """
    Constraint installed in the backend: ``row <sense> rhs``.

    Attributes
    ----------
    row : Row
        Left-hand side
    sense : RelOp
        Relational operator
    rhs : float
        Right-hand side
    index : int
        1-based row number in the backend
    """

    __slots__ = ('row', 'sense', 'rhs', 'index')

    def __init__(self, row: Row, sense: RelOp, rhs: float = 0.0, index: int = 0):
        self.row = row
        self.sense = sense
        self.rhs = rhs
        self.index = index

    def __repr__(self):
        return f"Constraint(#{self.index}: {self.row} {self.sense.value} {self.rhs:g})"


class ConstraintEmitter:
    """
    Turns relations between variables into backend rows.

    Every relation ``variable <op> bound`` is emitted as the single row
    ``+1*variable -1*bound <op> 0``. :meth:`emit` is the only place rows reach
    the backend, so the row counter always equals the number of emitting
    calls made.
    """

    def __init__(self, backend: Backend, registry: VariableRegistry):
        self._backend = backend
        self._registry = registry
        self._constraints: List[Constraint] = []
        self.rows = 0

    @property
    def constraints(self) -> List[Constraint]:
        return list(self._constraints)

    def emit(self, row: Row, sense: RelOp = RelOp.EQ, rhs: float = 0.0) -> Constraint:
        """Install one row; the counter advances even if the backend rejects it"""
        self.rows += 1
        constraint = Constraint(row, sense, float(rhs), self.rows)
        call_directive(self._backend.add_constraint_row, row.to_dict(), sense, float(rhs))
        self._constraints.append(constraint)
        logger.debug("Added row %d: %s %s %g", self.rows, row, sense.value, rhs)
        return constraint

    def relate(self, variable: Variable, bound: Variable, sense: RelOp) -> Constraint:
        row = Row()
        row.add(self._registry.column_of(variable), 1.0)
        row.add(self._registry.column_of(bound), -1.0)
        return self.emit(row, sense)

    def set_less_or_equal(self, variable: Variable, bound: Variable) -> Constraint:
        return self.relate(variable, bound, RelOp.LE)

    def set_greater_or_equal(self, variable: Variable, bound: Variable) -> Constraint:
        return self.relate(variable, bound, RelOp.GE)

    def set_equal(self, variable: Variable, bound: Variable) -> Constraint:
        return self.relate(variable, bound, RelOp.EQ)

    def from_constant(self, value: Union[int, float], domain: Domain,
                      name: Optional[str] = None) -> Variable:
        """
        Create a variable pinned to ``value`` by an equality row.

        Parameters
        ----------
        value : int or float
            Finite constant
        domain : Domain
            Domain of the new variable
        name : str, optional
            Variable name; synthesized when omitted

        Returns
        -------
        Variable
            Variable of kind ``Constant(value)``
        """
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Constant must be finite, got {value}")
        kind = Constant(value)
        label = f"{value:g}"
        if name is None:
            variable = self._registry.create_anonymous(domain, kind, label)
        else:
            variable = self._registry.create(name, domain, kind, label)
        self.emit(Row([(self._registry.column_of(variable), 1.0)]), RelOp.EQ, value)
        return variable
