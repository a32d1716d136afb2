"""
Solve orchestration, status translation and solution reading
"""

import logging
import time
from enum import Enum
from typing import Dict, Iterable, Optional

import numpy as np

from .backend import Backend
from .exceptions import BackendError, ModelStateError
from .registry import VariableRegistry
from .variable import Variable

logger = logging.getLogger(__name__)


class SolutionStatus(Enum):
    """Portable model status"""
    UNSOLVED = 'unsolved'
    SOLVING = 'solving'
    OPTIMAL = 'optimal'
    INFEASIBLE = 'infeasible'
    UNBOUNDED = 'unbounded'
    UNKNOWN = 'unknown'

    @property
    def is_terminal(self) -> bool:
        return self not in (SolutionStatus.UNSOLVED, SolutionStatus.SOLVING)


def status_table(backend: Backend) -> Dict[int, SolutionStatus]:
    """Closed mapping from the backend's result codes to portable statuses"""
    return {
        backend.OPTIMAL: SolutionStatus.OPTIMAL,
        backend.UNBOUNDED: SolutionStatus.UNBOUNDED,
        backend.INFEASIBLE: SolutionStatus.INFEASIBLE,
    }


def translate_status(backend: Backend, code) -> SolutionStatus:
    """Map a backend result code; unrecognized codes become UNKNOWN"""
    status = status_table(backend).get(code)
    if status is None:
        logger.warning("Unrecognized backend status code %r", code)
        return SolutionStatus.UNKNOWN
    return status


class SolveOrchestrator:
    """
    Runs the backend exactly once and records the resulting status.

    State machine: ``UNSOLVED -> SOLVING -> {OPTIMAL, INFEASIBLE, UNBOUNDED,
    UNKNOWN}``.
    """

    def __init__(self, backend: Backend):
        self._backend = backend
        self.status = SolutionStatus.UNSOLVED
        self.backend_status = None
        self.time = 0.0

    def solve(self) -> SolutionStatus:
        """
        Blocking call into the backend.

        Raises
        ------
        ModelStateError
            If the model was already solved
        BackendError
            If the backend raised while solving
        """
        if self.status is not SolutionStatus.UNSOLVED:
            raise ModelStateError(f"Model already solved (status: {self.status.value})")

        self.status = SolutionStatus.SOLVING
        logger.info("Solving model: %d columns, %d rows",
                    self._backend.column_count, self._backend.row_count)
        start = time.perf_counter()
        try:
            code = self._backend.solve()
        except Exception as e:
            self.status = SolutionStatus.UNKNOWN
            raise BackendError(f"Backend failed to solve: {e}") from e
        finally:
            self.time = time.perf_counter() - start

        self.backend_status = code
        self.status = translate_status(self._backend, code)
        logger.info("Solve finished in %.3fs: %s (backend code %r)",
                    self.time, self.status.value, code)
        return self.status


class SolutionReader:
    """
    Reads solved values from the backend's dense solution buffer.

    The buffer stores column ``id`` at offset ``id - 1``.
    """

    def __init__(self, backend: Backend, registry: VariableRegistry,
                 orchestrator: SolveOrchestrator):
        self._backend = backend
        self._registry = registry
        self._orchestrator = orchestrator
        self._buffer: Optional[np.ndarray] = None

    def buffer(self) -> np.ndarray:
        if not self._orchestrator.status.is_terminal:
            raise ModelStateError("Model has not been solved yet")
        if self._buffer is None:
            self._buffer = np.asarray(self._backend.get_solution_values(),
                                      dtype=np.float64)
        return self._buffer

    def get_value(self, variable: Variable) -> float:
        column = self._registry.column_of(variable)
        return float(self.buffer()[column - 1])

    def get_values(self, variables: Iterable[Variable]) -> np.ndarray:
        buffer = self.buffer()
        return np.array([buffer[self._registry.column_of(v) - 1] for v in variables],
                        dtype=np.float64)

    def column_values(self) -> np.ndarray:
        """Values of all columns in id order"""
        return self.buffer()[:self._registry.columns].copy()
