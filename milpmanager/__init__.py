"""
milpmanager Python Package

Build mixed-integer linear programs from arithmetic over typed variables and
solve them with a pluggable backend (HiGHS via scipy by default).
"""

import logging

from .backend import Backend, RelOp
from .constraints import Constraint, Row
from .domain import Domain, NumericKind, RangeKind
from .exceptions import (
    MilpError, BackendError, DomainError, ForeignVariableError,
    DivisionByZeroError, NonlinearError, DuplicateNameError, InvalidNameError,
    ModelStateError
)
from .model import MilpModel
from .parameters import Parameters
from .results import Results
from .scipy_backend import ScipyBackend
from .solver import SolutionStatus
from .variable import Variable, Free, Constant, Relation

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'MilpModel',
    'Variable',
    'Free',
    'Constant',
    'Relation',
    'Domain',
    'NumericKind',
    'RangeKind',
    'Row',
    'Constraint',
    'RelOp',
    'SolutionStatus',
    'Backend',
    'ScipyBackend',
    'Parameters',
    'Results',
    '__version__',
    # Errors
    'MilpError',
    'BackendError',
    'DomainError',
    'ForeignVariableError',
    'DivisionByZeroError',
    'NonlinearError',
    'DuplicateNameError',
    'InvalidNameError',
    'ModelStateError',
]
