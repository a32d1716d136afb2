"""
MilpModel: the model-building facade
"""
import functools
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import numpy as np

from .backend import Backend
from .compiler import ExpressionCompiler, Factor
from .constraints import Constraint, ConstraintEmitter, Row
from .domain import Domain, infer_domain
from .exceptions import BackendError, ModelStateError
from .objective import ObjectiveManager
from .parameters import Parameters
from .registry import VariableRegistry
from .results import Results
from .solver import SolutionReader, SolutionStatus, SolveOrchestrator
from .variable import Relation, Variable

logger = logging.getLogger(__name__)


def _constant_domain(value) -> Domain:
    """Constant domain of ``value``: integer if integral, nonnegative if >= 0"""
    value = float(value)
    integral = value.is_integer()
    if value >= 0:
        return (Domain.POSITIVE_OR_ZERO_CONSTANT_INTEGER if integral
                else Domain.POSITIVE_OR_ZERO_CONSTANT_REAL)
    return Domain.ANY_CONSTANT_INTEGER if integral else Domain.ANY_CONSTANT_REAL


def _building(method):
    """Guard a model-mutating method: usable model, not solved, broken on failure"""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        self._check_usable()
        if self._orchestrator.status is not SolutionStatus.UNSOLVED:
            raise ModelStateError("Model is solved and can no longer be modified")
        try:
            return method(self, *args, **kwargs)
        except BackendError:
            self._broken = True
            raise
    return wrapper


class MilpModel:
    """
    Mixed-integer linear model built from operations over variables.

    The model owns one backend for its whole life. Arithmetic on variables is
    compiled on the spot into auxiliary columns and equality rows; relations
    become inequality or equality rows; one objective is maximized.

    Parameters
    ----------
    backend : Backend, optional
        Backend to build into. If None, a
        :class:`~milpmanager.scipy_backend.ScipyBackend` is created.
    param : Parameters, optional
        Parameters for the default backend (ignored when ``backend`` is given)

    Attributes
    ----------
    rows : int
        Number of constraint rows emitted
    columns : int
        Number of columns (variables) allocated
    status : SolutionStatus
        Current lifecycle / solution status

    Examples
    --------
    >>> from milpmanager import MilpModel, Domain
    >>> with MilpModel() as model:
    ...     x = model.create('x', Domain.POSITIVE_OR_ZERO_INTEGER)
    ...     y = model.create('y', Domain.POSITIVE_OR_ZERO_INTEGER)
    ...     z = model.sum(x, y, Domain.ANY_INTEGER)
    ...     model.set_less_or_equal(z, model.from_constant(10))
    ...     model.add_goal(z)
    ...     result = model.solve()
    ...     print(result.status, model.get_value(z))
    SolutionStatus.OPTIMAL 10.0
    """

    def __init__(self, backend: Optional[Backend] = None,
                 param: Optional[Parameters] = None):
        if backend is None:
            from .scipy_backend import ScipyBackend
            backend = ScipyBackend(param)
        self._backend = backend
        self._closed = False
        self._broken = False
        self._wire()

    def _wire(self):
        self._registry = VariableRegistry(self._backend, self)
        self._emitter = ConstraintEmitter(self._backend, self._registry)
        self._compiler = ExpressionCompiler(self._registry, self._emitter)
        self._objective = ObjectiveManager(self._backend, self._registry)
        self._orchestrator = SolveOrchestrator(self._backend)
        self._reader = SolutionReader(self._backend, self._registry, self._orchestrator)

    # State

    @property
    def rows(self) -> int:
        """Number of constraint rows"""
        return self._emitter.rows

    @property
    def columns(self) -> int:
        """Number of columns"""
        return self._registry.columns

    @property
    def status(self) -> SolutionStatus:
        return self._orchestrator.status

    @property
    def constraints(self) -> List[Constraint]:
        return self._emitter.constraints

    @property
    def variables(self) -> List[Variable]:
        return list(self._registry)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._registry)

    def get_variable(self, name: str) -> Variable:
        variable = self._registry.get(name)
        if variable is None:
            raise KeyError(f"No variable named {name!r}")
        return variable

    def _check_usable(self):
        if self._closed:
            raise ModelStateError("Model has been closed")
        if self._broken:
            raise ModelStateError("Model is unusable after a backend failure")

    # Variables

    @_building
    def create(self, name: str, domain: Union[Domain, str]) -> Variable:
        """
        Create a named variable.

        Parameters
        ----------
        name : str
            Unique name without whitespace
        domain : Domain or str
            Variable domain

        Returns
        -------
        Variable
            Handle for the new column
        """
        return self._registry.create(name, domain)

    @_building
    def create_anonymous(self, domain: Union[Domain, str]) -> Variable:
        """Create a variable with a synthesized name"""
        return self._registry.create_anonymous(domain)

    @_building
    def from_constant(self, value: Union[int, float],
                      domain: Optional[Union[Domain, str]] = None,
                      name: Optional[str] = None) -> Variable:
        """
        Create a variable pinned to ``value`` by an equality row.

        When ``domain`` is omitted it is derived from the value: integer for
        integral values, nonnegative for values >= 0, always constant.
        """
        domain = _constant_domain(value) if domain is None else Domain.coerce(domain)
        return self._emitter.from_constant(value, domain, name)

    # Arithmetic

    @_building
    def sum(self, first: Variable, second: Variable,
            domain: Union[Domain, str]) -> Variable:
        """Variable equal to ``first + second``"""
        return self._compiler.sum(first, second, Domain.coerce(domain))

    @_building
    def negate(self, variable: Variable, domain: Union[Domain, str]) -> Variable:
        """Variable equal to ``-variable``"""
        return self._compiler.negate(variable, Domain.coerce(domain))

    @_building
    def multiply(self, variable: Variable, factor: Factor,
                 domain: Union[Domain, str]) -> Variable:
        """Variable equal to ``variable * factor``; ``factor`` must be a known constant"""
        return self._compiler.scale(variable, factor, Domain.coerce(domain))

    scale = multiply

    @_building
    def divide(self, variable: Variable, divisor: Factor,
               domain: Union[Domain, str]) -> Variable:
        """
        Variable equal to ``variable / divisor``.

        Raises
        ------
        DivisionByZeroError
            If ``divisor`` is zero; the model is left untouched
        """
        return self._compiler.divide(variable, divisor, Domain.coerce(domain))

    # Relations

    @_building
    def set_less_or_equal(self, variable: Variable, bound: Variable) -> Constraint:
        return self._emitter.set_less_or_equal(variable, bound)

    @_building
    def set_greater_or_equal(self, variable: Variable, bound: Variable) -> Constraint:
        return self._emitter.set_greater_or_equal(variable, bound)

    @_building
    def set_equal(self, variable: Variable, bound: Variable) -> Constraint:
        return self._emitter.set_equal(variable, bound)

    @_building
    def add_constraint(self, relation: Relation) -> Constraint:
        """
        Install a relation built with ``<=``, ``>=`` or ``==``.

        A numeric right-hand side is first turned into a constant variable,
        as :meth:`from_constant` does.

        Examples
        --------
        >>> model.add_constraint(x + y <= 10)
        """
        if not isinstance(relation, Relation):
            raise TypeError(f"Expected a relation such as 'x <= y', got {relation!r}")
        bound = relation.bound
        if not isinstance(bound, Variable):
            bound = self._emitter.from_constant(bound, _constant_domain(bound))
        return self._emitter.relate(relation.variable, bound, relation.sense)

    # Objective

    @_building
    def add_goal(self, target: Variable, *terms: Variable):
        """
        Maximize ``target`` (plus any extra ``terms``).

        Replaces the previous objective.
        """
        return self._objective.set_objective(target, *terms)

    # Solving

    def solve(self) -> Results:
        """
        Solve the model with the backend.

        Returns
        -------
        Results
            Status, column values and objective

        Raises
        ------
        ModelStateError
            If the model is closed, broken or already solved
        BackendError
            If the backend failed; the model is unusable afterwards
        """
        self._check_usable()
        try:
            status = self._orchestrator.solve()
        except BackendError:
            self._broken = True
            raise

        result = Results()
        result.status = status
        result.backend_status = self._orchestrator.backend_status
        result.time = self._orchestrator.time
        result.message = getattr(self._backend, 'message', '')
        if status is SolutionStatus.OPTIMAL:
            result.x = self._reader.column_values()
            result.objective = self.get_objective_value()
        return result

    def get_status(self) -> SolutionStatus:
        return self._orchestrator.status

    def get_value(self, variable: Variable) -> float:
        """
        Solved value of ``variable``.

        Only meaningful after an OPTIMAL solve; for other terminal statuses the
        value is whatever the backend reports.
        """
        self._check_usable()
        return self._reader.get_value(variable)

    def get_values(self, variables) -> np.ndarray:
        self._check_usable()
        return self._reader.get_values(variables)

    def get_objective_value(self) -> float:
        """Objective value after solving"""
        self._check_usable()
        row = self._objective.row
        if row is None:
            return 0.0
        buffer = self._reader.buffer()
        return float(sum(coef * buffer[column - 1] for column, coef in row.items()))

    # Persistence

    def save_model(self, path: Union[str, Path]) -> None:
        """Save through the backend; the format follows the file extension"""
        self._check_usable()
        self._backend.save_model(path)

    def load_model(self, path: Union[str, Path]) -> None:
        """
        Replace this model with one stored at ``path``.

        Previously issued variables become foreign; look the loaded ones up
        with :meth:`get_variable`.
        """
        self._check_usable()
        try:
            self._backend.load_model(path)
        except (FileNotFoundError, ValueError):
            raise
        except Exception as e:
            self._broken = True
            raise BackendError(f"Backend failed to load {path}: {e}") from e

        self._rebuild(self._backend.row_count)
        logger.info("Model loaded from %s: %d columns, %d rows",
                    path, self.columns, self.rows)

    def _rebuild(self, rows: int):
        """Recreate the bookkeeping from what the backend currently holds"""
        self._wire()
        domains = [infer_domain(is_integer, lower, upper)
                   for is_integer, lower, upper in self._backend.column_info()]
        self._registry.rebuild(self._backend.column_names(), domains)
        self._emitter.rows = rows
        objective = self._backend.objective_row()
        if objective:
            self._objective.row = Row(objective.items())

    def snapshot(self) -> Dict[str, int]:
        """Bookkeeping state of the model builder itself"""
        return {'rows': self.rows, 'columns': self.columns}

    def restore(self, snapshot: Dict[str, int]) -> None:
        """
        Reinstate counters saved by :meth:`snapshot` after the backend state
        was restored by other means.
        """
        self._check_usable()
        rows, columns = int(snapshot['rows']), int(snapshot['columns'])
        if columns != self._backend.column_count or rows != self._backend.row_count:
            raise ValueError(
                f"Snapshot ({rows} rows, {columns} columns) does not match backend "
                f"({self._backend.row_count} rows, {self._backend.column_count} columns)")
        self._rebuild(rows)

    # Resource management

    def close(self):
        """
        Release the backend.

        After calling this method, the model cannot be used anymore.
        """
        if not self._closed:
            self._backend.close()
            self._closed = True

    def __del__(self):
        """Release the backend when the model is garbage collected"""
        if not getattr(self, '_closed', True):
            self.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - release the backend"""
        self.close()
        return False

    def __repr__(self):
        if self._closed:
            return "<MilpModel (closed)>"
        return (f"<MilpModel columns={self.columns} rows={self.rows} "
                f"status={self.status.value}>")
