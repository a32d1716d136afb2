"""
Variable registry: column allocation and handle resolution
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Union

from .backend import Backend, call_directive
from .domain import Domain, apply_domain
from .exceptions import (BackendError, DuplicateNameError, ForeignVariableError,
                         InvalidNameError)
from .variable import FREE, Constant, Free, Variable

logger = logging.getLogger(__name__)

ANONYMOUS_PREFIX = '_anon'


class VariableRegistry:
    """
    Allocates columns and issues variable handles.

    The registry is the only component that can turn a Variable into its
    backend column id (see :meth:`column_of`). Column ids are assigned
    1, 2, 3, ... in creation order and never reused.

    Parameters
    ----------
    backend : Backend
        Backend receiving column directives
    owner : MilpModel
        Model the issued variables belong to
    """

    def __init__(self, backend: Backend, owner=None):
        self._backend = backend
        self._owner = owner
        self._columns: Dict[object, int] = {}
        self._variables: List[Variable] = []
        self._names: Dict[str, Variable] = {}
        self._anonymous_counter = 0

    @property
    def columns(self) -> int:
        """Number of columns allocated so far"""
        return len(self._variables)

    def __len__(self):
        return len(self._variables)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables)

    def __contains__(self, variable) -> bool:
        return isinstance(variable, Variable) and variable._token in self._columns

    def get(self, name: str) -> Optional[Variable]:
        return self._names.get(name)

    def create(self, name: str, domain: Union[Domain, str],
               kind: Union[Free, Constant] = FREE,
               expression: Optional[str] = None) -> Variable:
        """
        Allocate the next column and install its name and domain directives.

        Parameters
        ----------
        name : str
            Unique, non-empty name without whitespace
        domain : Domain or str
            Variable domain
        kind : Free or Constant, optional
            Known-constant marker for the new variable
        expression : str, optional
            Diagnostic label

        Returns
        -------
        Variable
            Handle for the new column

        Raises
        ------
        DomainError
            Unrecognized domain (checked before the column is allocated)
        InvalidNameError
            ``name`` is empty, contains whitespace or starts with '*'
        DuplicateNameError
            ``name`` already used in this model
        BackendError
            Column allocation or a directive was rejected
        """
        domain = Domain.coerce(domain)
        self._check_name(name)
        column = self._add_column()

        token = object()
        variable = Variable(self._owner, token, name, domain, kind, expression)
        self._columns[token] = column
        self._variables.append(variable)
        self._names[name] = variable

        call_directive(self._backend.set_column_name, column, name)
        apply_domain(self._backend, column, domain)
        logger.debug("Created column %d %s (%s)", column, name, domain.value)
        return variable

    def create_anonymous(self, domain: Union[Domain, str],
                         kind: Union[Free, Constant] = FREE,
                         expression: Optional[str] = None) -> Variable:
        """Same as :meth:`create` with a synthesized name"""
        return self.create(self._next_anonymous_name(), domain, kind, expression)

    def column_of(self, variable: Variable) -> int:
        """
        Resolve a handle issued by this registry to its 1-based column id.

        Raises
        ------
        ForeignVariableError
            ``variable`` belongs to another model, or to this model before
            its backend state was reloaded
        """
        if not isinstance(variable, Variable):
            raise ForeignVariableError(
                f"Expected a Variable, got {type(variable).__name__}")
        column = self._columns.get(variable._token)
        if column is None:
            raise ForeignVariableError(
                f"Variable {variable.name} does not belong to this model")
        return column

    def rebuild(self, names: Sequence[str], domains: Sequence[Domain]) -> None:
        """
        Forget every issued handle and register columns already present in
        the backend, e.g. after a model was loaded from a file.
        """
        self._columns.clear()
        self._variables.clear()
        self._names.clear()
        for column, (name, domain) in enumerate(zip(names, domains), start=1):
            token = object()
            variable = Variable(self._owner, token, name, domain)
            self._columns[token] = column
            self._variables.append(variable)
            self._names[name] = variable
        logger.debug("Registry rebuilt with %d columns", len(self._variables))

    def _add_column(self) -> int:
        expected = len(self._variables) + 1
        column = call_directive(self._backend.add_column)
        if column is not True and column != expected:
            raise BackendError(
                f"Backend allocated column {column}, expected {expected}")
        return expected

    def _check_name(self, name: str):
        # A leading '*' starts a comment line in MPS files
        if (not isinstance(name, str) or not name or name.startswith('*')
                or any(c.isspace() for c in name)):
            raise InvalidNameError(f"Invalid variable name: {name!r}")
        if name in self._names:
            raise DuplicateNameError(f"Variable name already used: {name}")

    def _next_anonymous_name(self) -> str:
        while True:
            self._anonymous_counter += 1
            name = f"{ANONYMOUS_PREFIX}{self._anonymous_counter}"
            if name not in self._names:
                return name
