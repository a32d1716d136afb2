"""
Objective installation (maximization only)
"""

import logging
from typing import Optional

from .backend import Backend, call_directive
from .constraints import Row
from .registry import VariableRegistry
from .variable import Variable

logger = logging.getLogger(__name__)


class ObjectiveManager:
    """Installs the single objective row and the maximize direction"""

    def __init__(self, backend: Backend, registry: VariableRegistry):
        self._backend = backend
        self._registry = registry
        self.row: Optional[Row] = None

    def set_objective(self, *terms: Variable) -> Row:
        """
        Replace the objective with ``maximize sum(terms)``.

        Raises
        ------
        ValueError
            If no term is given
        BackendError
            If the backend rejects the objective row
        """
        if not terms:
            raise ValueError("Objective needs at least one variable")
        row = Row((self._registry.column_of(term), 1.0) for term in terms)
        call_directive(self._backend.set_maximize, checked=False)
        call_directive(self._backend.set_objective_row, row.to_dict())
        self.row = row
        logger.debug("Objective set: maximize %s", row)
        return row
