"""
Variable domains and the policy that turns them into backend directives.

A domain crosses three independent axes: the numeric kind (integer or real),
the range kind (unconstrained, nonnegative or binary) and the constancy (free
or known-constant). Constancy never changes the bounds installed on a column;
it only records that the variable is expected to hold a fixed value.
"""

from enum import Enum
from typing import Tuple, Union

import numpy as np

from .backend import Backend, call_directive
from .exceptions import DomainError


class NumericKind(Enum):
    """Numeric kind of a variable"""
    INTEGER = 'integer'
    REAL = 'real'


class RangeKind(Enum):
    """Range restriction of a variable"""
    UNCONSTRAINED = 'unconstrained'
    NONNEGATIVE = 'nonnegative'
    BINARY = 'binary'


class Domain(Enum):
    """
    Domain of a decision variable.

    Examples
    --------
    >>> Domain.POSITIVE_OR_ZERO_INTEGER.is_integer
    True
    >>> Domain.BINARY_INTEGER.bounds
    (0.0, 1.0)
    >>> Domain.coerce('any_real')
    <Domain.ANY_REAL: 'any_real'>
    """
    ANY_INTEGER = 'any_integer'
    ANY_REAL = 'any_real'
    POSITIVE_OR_ZERO_INTEGER = 'positive_or_zero_integer'
    POSITIVE_OR_ZERO_REAL = 'positive_or_zero_real'
    BINARY_INTEGER = 'binary_integer'
    ANY_CONSTANT_INTEGER = 'any_constant_integer'
    ANY_CONSTANT_REAL = 'any_constant_real'
    POSITIVE_OR_ZERO_CONSTANT_INTEGER = 'positive_or_zero_constant_integer'
    POSITIVE_OR_ZERO_CONSTANT_REAL = 'positive_or_zero_constant_real'
    BINARY_CONSTANT_INTEGER = 'binary_constant_integer'

    @classmethod
    def coerce(cls, value: Union['Domain', str]) -> 'Domain':
        """Return ``value`` as a Domain, accepting member values as strings"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise DomainError(f"Unrecognized domain: {value!r}")

    @classmethod
    def from_kinds(cls, numeric_kind: NumericKind, range_kind: RangeKind,
                   constant: bool = False) -> 'Domain':
        """Look up the domain for a combination of axes"""
        try:
            return _BY_AXES[(numeric_kind, range_kind, constant)]
        except KeyError:
            raise DomainError(
                f"No domain for {numeric_kind.value} {range_kind.value}"
                f"{' constant' if constant else ''}"
            ) from None

    @property
    def numeric_kind(self) -> NumericKind:
        return _AXES[self][0]

    @property
    def range_kind(self) -> RangeKind:
        return _AXES[self][1]

    @property
    def is_constant(self) -> bool:
        return _AXES[self][2]

    @property
    def is_integer(self) -> bool:
        """True for integer and binary domains"""
        return self.numeric_kind is NumericKind.INTEGER

    @property
    def is_binary(self) -> bool:
        return self.range_kind is RangeKind.BINARY

    @property
    def is_nonnegative(self) -> bool:
        """True for nonnegative and binary domains"""
        return self.range_kind is not RangeKind.UNCONSTRAINED

    @property
    def bounds(self) -> Tuple[float, float]:
        return bounds_for(self)

    def as_constant(self) -> 'Domain':
        return Domain.from_kinds(self.numeric_kind, self.range_kind, True)

    def as_free(self) -> 'Domain':
        return Domain.from_kinds(self.numeric_kind, self.range_kind, False)


_I, _R = NumericKind.INTEGER, NumericKind.REAL
_ANY, _NONNEG, _BIN = RangeKind.UNCONSTRAINED, RangeKind.NONNEGATIVE, RangeKind.BINARY

_AXES = {
    Domain.ANY_INTEGER: (_I, _ANY, False),
    Domain.ANY_REAL: (_R, _ANY, False),
    Domain.POSITIVE_OR_ZERO_INTEGER: (_I, _NONNEG, False),
    Domain.POSITIVE_OR_ZERO_REAL: (_R, _NONNEG, False),
    Domain.BINARY_INTEGER: (_I, _BIN, False),
    Domain.ANY_CONSTANT_INTEGER: (_I, _ANY, True),
    Domain.ANY_CONSTANT_REAL: (_R, _ANY, True),
    Domain.POSITIVE_OR_ZERO_CONSTANT_INTEGER: (_I, _NONNEG, True),
    Domain.POSITIVE_OR_ZERO_CONSTANT_REAL: (_R, _NONNEG, True),
    Domain.BINARY_CONSTANT_INTEGER: (_I, _BIN, True),
}

_BY_AXES = {axes: domain for domain, axes in _AXES.items()}


def bounds_for(domain: Domain) -> Tuple[float, float]:
    """
    Column bounds implied by a domain.

    Parameters
    ----------
    domain : Domain
        Variable domain

    Returns
    -------
    tuple of float
        ``(lower, upper)``; infinite bounds are ``-np.inf`` / ``np.inf``

    Raises
    ------
    DomainError
        If ``domain`` is not a Domain member
    """
    if not isinstance(domain, Domain):
        raise DomainError(f"Unrecognized domain: {domain!r}")
    range_kind = domain.range_kind
    if range_kind is RangeKind.BINARY:
        return 0.0, 1.0
    if range_kind is RangeKind.NONNEGATIVE:
        return 0.0, np.inf
    return -np.inf, np.inf


def apply_domain(backend: Backend, column: int, domain: Domain) -> None:
    """
    Install the integrality and bound directives for a freshly added column.

    Directives are issued in a fixed order: the integer flag first (integer
    and binary domains), then either the binary {0, 1} range, or an unbounded
    range, or a zero lower bound with the backend's default upper bound.

    Parameters
    ----------
    backend : Backend
        Backend owning the column
    column : int
        1-based column id
    domain : Domain
        Domain of the variable stored in the column

    Raises
    ------
    DomainError
        If ``domain`` is not a Domain member; raised before any directive
    BackendError
        If the backend rejects a directive
    """
    if not isinstance(domain, Domain):
        raise DomainError(f"Unrecognized domain: {domain!r}")

    if domain.is_integer:
        call_directive(backend.set_column_integer, column, True)

    range_kind = domain.range_kind
    if range_kind is RangeKind.BINARY:
        call_directive(backend.set_column_binary, column)
        return
    if range_kind is RangeKind.UNCONSTRAINED:
        call_directive(backend.set_column_unbounded, column)
    elif range_kind is RangeKind.NONNEGATIVE:
        call_directive(backend.set_column_lower_bound, column, 0.0)
    else:
        raise DomainError(f"Unsupported range kind: {range_kind!r}")


def infer_domain(is_integer: bool, lower: float, upper: float) -> Domain:
    """Best matching free domain for a column read back from a backend"""
    if is_integer and lower == 0 and upper == 1:
        return Domain.BINARY_INTEGER
    numeric_kind = NumericKind.INTEGER if is_integer else NumericKind.REAL
    range_kind = RangeKind.NONNEGATIVE if lower >= 0 else RangeKind.UNCONSTRAINED
    return Domain.from_kinds(numeric_kind, range_kind)


# Result domains used by the operator overloads on Variable.
# Binary is never inferred: a sum of two binaries can reach 2.

def _combine(is_integer: bool, is_nonnegative: bool) -> Domain:
    return Domain.from_kinds(
        NumericKind.INTEGER if is_integer else NumericKind.REAL,
        RangeKind.NONNEGATIVE if is_nonnegative else RangeKind.UNCONSTRAINED,
    )


def sum_domain(first: Domain, second: Domain) -> Domain:
    return _combine(first.is_integer and second.is_integer,
                    first.is_nonnegative and second.is_nonnegative)


def negate_domain(domain: Domain) -> Domain:
    return _combine(domain.is_integer, False)


def scale_domain(domain: Domain, factor: float) -> Domain:
    return _combine(domain.is_integer and float(factor).is_integer(),
                    domain.is_nonnegative and factor >= 0)


def divide_domain(domain: Domain, divisor: float) -> Domain:
    return _combine(domain.is_integer and abs(divisor) == 1,
                    domain.is_nonnegative and divisor > 0)
