"""
Exception types raised by milpmanager
"""


class MilpError(Exception):
    """Base class for all milpmanager errors"""


class BackendError(MilpError, RuntimeError):
    """
    A backend directive (column, bound, row, objective or name) was rejected.

    The model that raised it is left partially built and must be discarded.
    """


class DomainError(MilpError, ValueError):
    """Unrecognized or unsupported variable domain"""


class ForeignVariableError(MilpError, ValueError):
    """Variable handle was not issued by this model"""


class DivisionByZeroError(MilpError, ZeroDivisionError):
    """Division of a variable by a constant equal to zero"""


class NonlinearError(MilpError, TypeError):
    """Operation would need a product of two decision variables"""


class InvalidNameError(MilpError, ValueError):
    """Variable name is empty, contains whitespace or starts with '*'"""


class DuplicateNameError(MilpError, ValueError):
    """Variable name already registered in the model"""


class ModelStateError(MilpError, RuntimeError):
    """Operation not allowed in the model's current lifecycle state"""
