"""
Backend solving models with HiGHS through ``scipy.optimize.milp``
"""

import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
from scipy import sparse
from scipy.optimize import Bounds, LinearConstraint, milp

from .backend import Backend, RelOp
from .model_io import read_model, write_model
from .parameters import Parameters
from .standard_form import StandardForm

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSION = '.npz'


class ScipyBackend(Backend):
    """
    In-memory model solved with HiGHS.

    Columns and rows are accumulated incrementally and assembled into a
    :class:`~milpmanager.standard_form.StandardForm` only when the model is
    solved or saved.

    Result codes are the ones of ``scipy.optimize.milp``:
    0 optimal, 1 iteration or time limit, 2 infeasible, 3 unbounded, 4 other.
    HiGHS often cannot tell an unbounded integer model from an infeasible one
    and returns 4 for it, which the model reports as an unknown status.

    Parameters
    ----------
    param : Parameters, optional
        Solver parameters. If None, default parameters are used.
    name : str, optional
        Model name written to saved files

    Examples
    --------
    >>> backend = ScipyBackend()
    >>> backend.add_column()
    1
    >>> backend.set_column_bounds(1, 0.0, 4.0)
    True
    >>> backend.set_objective_row({1: 1.0}); backend.set_maximize()
    True
    >>> backend.solve()
    0
    """

    OPTIMAL = 0
    INFEASIBLE = 2
    UNBOUNDED = 3

    def __init__(self, param: Optional[Parameters] = None, name: str = "MILP_Model"):
        self.param = param if param is not None else Parameters()
        self.name = name
        self._reset()

    def _reset(self):
        self._names: List[str] = []
        self._lower: List[float] = []
        self._upper: List[float] = []
        self._integer: List[int] = []
        # Rows in COO form plus AL <= A*x <= AU bounds
        self._rows: List[int] = []
        self._cols: List[int] = []
        self._data: List[float] = []
        self._AL: List[float] = []
        self._AU: List[float] = []
        self._objective: Mapping[int, float] = {}
        self._maximize = False
        self._result = None
        self._closed = False

    def _valid(self, column: int) -> bool:
        return 1 <= column <= len(self._names)

    # Columns

    def add_column(self) -> int:
        self._names.append(f"C{len(self._names) + 1}")
        self._lower.append(0.0)
        self._upper.append(np.inf)
        self._integer.append(0)
        return len(self._names)

    def set_column_name(self, column: int, name: str) -> bool:
        if not self._valid(column) or not name:
            return False
        self._names[column - 1] = name
        return True

    def set_column_integer(self, column: int, is_integer: bool) -> bool:
        if not self._valid(column):
            return False
        self._integer[column - 1] = 1 if is_integer else 0
        return True

    def set_column_binary(self, column: int) -> bool:
        if not self._valid(column):
            return False
        self._integer[column - 1] = 1
        self._lower[column - 1] = 0.0
        self._upper[column - 1] = 1.0
        return True

    def set_column_bounds(self, column: int, lower: float, upper: float) -> bool:
        if not self._valid(column) or lower > upper:
            return False
        self._lower[column - 1] = float(lower)
        self._upper[column - 1] = float(upper)
        return True

    def set_column_lower_bound(self, column: int, lower: float) -> bool:
        if not self._valid(column) or lower > self._upper[column - 1]:
            return False
        self._lower[column - 1] = float(lower)
        return True

    # Rows and objective

    def add_constraint_row(self, row: Mapping[int, float], sense: RelOp,
                           rhs: float) -> bool:
        if not all(self._valid(column) for column in row):
            return False
        if not np.isfinite(rhs):
            return False
        index = len(self._AL)
        for column, coefficient in row.items():
            self._rows.append(index)
            self._cols.append(column - 1)
            self._data.append(float(coefficient))
        if sense is RelOp.LE:
            self._AL.append(-np.inf)
            self._AU.append(rhs)
        elif sense is RelOp.GE:
            self._AL.append(rhs)
            self._AU.append(np.inf)
        elif sense is RelOp.EQ:
            self._AL.append(rhs)
            self._AU.append(rhs)
        else:
            return False
        return True

    def set_objective_row(self, row: Mapping[int, float]) -> bool:
        if not all(self._valid(column) for column in row):
            return False
        self._objective = {column: float(value) for column, value in row.items()}
        return True

    def set_maximize(self) -> None:
        self._maximize = True

    # Standard form

    def to_standard_form(self) -> StandardForm:
        """Assemble the accumulated columns and rows into arrays"""
        n = len(self._names)
        m = len(self._AL)
        A = sparse.coo_matrix((self._data, (self._rows, self._cols)), shape=(m, n)).tocsr()
        c = np.zeros(n)
        for column, value in self._objective.items():
            c[column - 1] = value
        return StandardForm(A, self._AL, self._AU, self._lower, self._upper, c,
                            self._integer, names=self._names,
                            maximize=self._maximize, name=self.name)

    def _load_standard_form(self, form: StandardForm):
        self._reset()
        self.name = form.name
        self._names = list(form.names)
        self._lower = form.l.tolist()
        self._upper = form.u.tolist()
        self._integer = form.integrality.tolist()
        A = form.A.tocoo()
        self._rows = A.row.tolist()
        self._cols = A.col.tolist()
        self._data = A.data.tolist()
        self._AL = form.AL.tolist()
        self._AU = form.AU.tolist()
        self._objective = {j + 1: float(v) for j, v in enumerate(form.c) if v != 0}
        self._maximize = form.maximize

    # Solving

    def solve(self) -> int:
        form = self.to_standard_form()
        if form.n == 0:
            raise ValueError("Model has no variables")

        # milp minimizes
        c = -form.c if form.maximize else form.c
        constraints = LinearConstraint(form.A, form.AL, form.AU) if form.m else None
        self._result = milp(
            c,
            integrality=form.integrality,
            bounds=Bounds(form.l, form.u),
            constraints=constraints,
            options=self.param.to_scipy_options(),
        )
        logger.debug("HiGHS finished: status=%s message=%s",
                     self._result.status, self._result.message)
        return int(self._result.status)

    def get_solution_values(self) -> np.ndarray:
        n = len(self._names)
        buffer = np.full(n + 1, np.nan)
        if self._result is not None and self._result.x is not None:
            buffer[:n] = self._result.x
        return buffer

    @property
    def objective_value(self) -> Optional[float]:
        if self._result is None or self._result.fun is None:
            return None
        return -float(self._result.fun) if self._maximize else float(self._result.fun)

    @property
    def message(self) -> str:
        return "" if self._result is None else str(self._result.message)

    # Introspection

    @property
    def column_count(self) -> int:
        return len(self._names)

    @property
    def row_count(self) -> int:
        return len(self._AL)

    def column_names(self) -> List[str]:
        return list(self._names)

    def column_info(self) -> Iterable[Tuple[bool, float, float]]:
        return [(bool(i), lo, up) for i, lo, up in zip(self._integer, self._lower, self._upper)]

    def objective_row(self) -> Mapping[int, float]:
        return dict(self._objective)

    # Persistence

    def save_model(self, path: Union[str, Path]) -> None:
        """
        Save the model; the extension picks the format: ``.lp`` for LP,
        ``.npz`` for a numpy archive, anything else for free MPS.
        """
        form = self.to_standard_form()
        if Path(path).suffix.lower() == ARCHIVE_EXTENSION:
            form.save_npz(path)
        else:
            write_model(path, form)
        logger.info("Saved model to %s (%d rows, %d columns)", path, form.m, form.n)

    def load_model(self, path: Union[str, Path]) -> None:
        if Path(path).suffix.lower() == ARCHIVE_EXTENSION:
            form = StandardForm.load_npz(path)
        else:
            form = read_model(path)
        self._load_standard_form(form)
        logger.info("Loaded model from %s (%d rows, %d columns)", path, form.m, form.n)

    def close(self) -> None:
        if not self._closed:
            self._reset()
            self._closed = True

    def __repr__(self):
        return f"<ScipyBackend columns={self.column_count} rows={self.row_count}>"
