"""
Backend abstraction consumed by the model builder.

A backend owns the solver-side representation of a model: columns with
bounds, integrality and names, linear constraint rows, one objective row and
the solve itself. Column ids are 1-based everywhere in this interface.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Mapping, Tuple, Union

import numpy as np

from .exceptions import BackendError


class RelOp(Enum):
    """Relational operator of a constraint row"""
    LE = '<='  # Less than or equal
    EQ = '=='  # Equal
    GE = '>='  # Greater than or equal


def call_directive(method, *args, checked: bool = True):
    """
    Call a backend directive and raise BackendError if it reports failure.

    Backends report failure by returning a falsy value (``False``, ``0`` or
    ``None``) or by raising; both are surfaced as BackendError.

    Returns
    -------
    object
        Whatever the directive returned
    """
    directive = getattr(method, '__name__', repr(method))
    detail = f"({', '.join(map(repr, args))})" if args else '()'
    try:
        result = method(*args)
    except BackendError:
        raise
    except Exception as e:
        raise BackendError(f"Backend rejected {directive}{detail}: {e}") from e
    if checked and (result is None or result is False or result == 0):
        raise BackendError(f"Backend rejected {directive}{detail}")
    return result


class Backend(ABC):
    """
    Minimal surface a solver backend exposes to the model builder.

    Subclasses map each directive onto their native API and return ``True``
    on success. Raising from a directive is also allowed; the model builder
    wraps any exception in BackendError.

    Attributes
    ----------
    OPTIMAL, INFEASIBLE, UNBOUNDED : int
        Native result codes returned by :meth:`solve` for those outcomes.
        Every other code is reported as an unknown status.
    """

    OPTIMAL = 0
    INFEASIBLE = 2
    UNBOUNDED = 3

    # Columns

    @abstractmethod
    def add_column(self) -> int:
        """Append a column; return its 1-based id, or 0 on failure"""

    @abstractmethod
    def set_column_name(self, column: int, name: str) -> bool:
        ...

    @abstractmethod
    def set_column_integer(self, column: int, is_integer: bool) -> bool:
        ...

    @abstractmethod
    def set_column_binary(self, column: int) -> bool:
        """Make the column integer with bounds [0, 1]"""

    @abstractmethod
    def set_column_bounds(self, column: int, lower: float, upper: float) -> bool:
        """Set both bounds; ``-np.inf`` / ``np.inf`` mean unbounded"""

    def set_column_lower_bound(self, column: int, lower: float) -> bool:
        """Set the lower bound, keeping the backend's default upper bound"""
        return self.set_column_bounds(column, lower, np.inf)

    def set_column_unbounded(self, column: int) -> bool:
        return self.set_column_bounds(column, -np.inf, np.inf)

    # Rows and objective

    @abstractmethod
    def add_constraint_row(self, row: Mapping[int, float], sense: RelOp,
                           rhs: float) -> bool:
        """Append ``sum(coef * x[column]) <sense> rhs``"""

    @abstractmethod
    def set_objective_row(self, row: Mapping[int, float]) -> bool:
        """Replace the objective coefficients"""

    @abstractmethod
    def set_maximize(self) -> None:
        ...

    # Solving

    @abstractmethod
    def solve(self) -> int:
        """Run the solver and return its native result code"""

    @abstractmethod
    def get_solution_values(self) -> np.ndarray:
        """
        Dense solution buffer of length ``column_count + 1``.

        Entry ``i`` holds the value of column ``i + 1``; the trailing entry is
        reserved.
        """

    # Introspection

    @property
    @abstractmethod
    def column_count(self) -> int:
        ...

    @property
    @abstractmethod
    def row_count(self) -> int:
        ...

    @abstractmethod
    def column_names(self) -> List[str]:
        ...

    @abstractmethod
    def column_info(self) -> Iterable[Tuple[bool, float, float]]:
        """``(is_integer, lower, upper)`` for every column in id order"""

    def objective_row(self) -> Mapping[int, float]:
        """Current objective coefficients; empty if the backend cannot tell"""
        return {}

    # Persistence

    @abstractmethod
    def save_model(self, path: Union[str, Path]) -> None:
        ...

    @abstractmethod
    def load_model(self, path: Union[str, Path]) -> None:
        """Replace the backend's model with the one stored at ``path``"""

    def close(self) -> None:
        """Release native resources held by the backend"""
