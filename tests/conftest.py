"""
Shared fixtures: a recording backend and models built on top of it
"""

import numpy as np
import pytest

from milpmanager import Backend, MilpModel, ScipyBackend


class RecordingBackend(Backend):
    """
    Backend that records every directive instead of solving.

    Directives named in ``reject`` return False. ``solve()`` returns
    ``status_code`` and ``get_solution_values()`` returns ``solution`` padded
    to ``columns + 1`` entries.
    """

    OPTIMAL = 1
    INFEASIBLE = 2
    UNBOUNDED = 3

    def __init__(self, reject=(), status_code=1, solution=None):
        self.calls = []
        self.reject = set(reject)
        self.status_code = status_code
        self.solution = solution
        self.names = []
        self.info = []
        self.rows = []
        self.objective = None
        self.maximize = False
        self.closed = False
        self.saved = []

    def _record(self, directive, *args):
        self.calls.append((directive,) + args)
        return directive not in self.reject

    def add_column(self):
        if not self._record('add_column'):
            return 0
        self.names.append(f"C{len(self.names) + 1}")
        self.info.append([False, 0.0, np.inf])
        return len(self.names)

    def set_column_name(self, column, name):
        if self._record('set_column_name', column, name):
            self.names[column - 1] = name
            return True
        return False

    def set_column_integer(self, column, is_integer):
        if self._record('set_column_integer', column, is_integer):
            self.info[column - 1][0] = is_integer
            return True
        return False

    def set_column_binary(self, column):
        if self._record('set_column_binary', column):
            self.info[column - 1] = [True, 0.0, 1.0]
            return True
        return False

    def set_column_bounds(self, column, lower, upper):
        if self._record('set_column_bounds', column, lower, upper):
            self.info[column - 1][1:] = [lower, upper]
            return True
        return False

    def set_column_lower_bound(self, column, lower):
        if self._record('set_column_lower_bound', column, lower):
            self.info[column - 1][1] = lower
            return True
        return False

    def set_column_unbounded(self, column):
        if self._record('set_column_unbounded', column):
            self.info[column - 1][1:] = [-np.inf, np.inf]
            return True
        return False

    def add_constraint_row(self, row, sense, rhs):
        if self._record('add_constraint_row', dict(row), sense, rhs):
            self.rows.append((dict(row), sense, rhs))
            return True
        return False

    def set_objective_row(self, row):
        if self._record('set_objective_row', dict(row)):
            self.objective = dict(row)
            return True
        return False

    def set_maximize(self):
        self._record('set_maximize')
        self.maximize = True

    def solve(self):
        self._record('solve')
        return self.status_code

    def get_solution_values(self):
        buffer = np.zeros(len(self.names) + 1)
        if self.solution is not None:
            buffer[:len(self.solution)] = self.solution
        return buffer

    @property
    def column_count(self):
        return len(self.names)

    @property
    def row_count(self):
        return len(self.rows)

    def column_names(self):
        return list(self.names)

    def column_info(self):
        return [tuple(info) for info in self.info]

    def objective_row(self):
        return dict(self.objective or {})

    def save_model(self, path):
        self._record('save_model', str(path))
        self.saved.append(str(path))

    def load_model(self, path):
        self._record('load_model', str(path))

    def close(self):
        self.closed = True

    def directives(self, column=None):
        """Names of recorded directives, optionally only those for ``column``"""
        return [call[0] for call in self.calls
                if column is None or (len(call) > 1 and call[1] == column)]


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def model(backend):
    with MilpModel(backend) as m:
        yield m


@pytest.fixture
def solver_model():
    """Model backed by scipy/HiGHS"""
    with MilpModel(ScipyBackend()) as m:
        yield m


@pytest.fixture
def backend_factory():
    return RecordingBackend
