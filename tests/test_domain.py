"""
Tests for domains and the domain-to-directive policy
"""

import numpy as np
import pytest

from milpmanager import Domain, DomainError, NumericKind, RangeKind
from milpmanager.domain import (apply_domain, bounds_for, divide_domain,
                                infer_domain, negate_domain, scale_domain,
                                sum_domain)


def _directives_for(backend, domain):
    column = backend.add_column()
    backend.calls.clear()
    apply_domain(backend, column, domain)
    return backend.calls


def test_unconstrained_domains_install_unbounded_range(backend):
    assert _directives_for(backend, Domain.ANY_REAL) == [('set_column_unbounded', 1)]
    assert _directives_for(backend, Domain.ANY_INTEGER) == [
        ('set_column_integer', 2, True),
        ('set_column_unbounded', 2),
    ]


def test_nonnegative_domains_install_only_lower_bound(backend):
    assert _directives_for(backend, Domain.POSITIVE_OR_ZERO_REAL) == [
        ('set_column_lower_bound', 1, 0.0)]
    assert _directives_for(backend, Domain.POSITIVE_OR_ZERO_INTEGER) == [
        ('set_column_integer', 2, True),
        ('set_column_lower_bound', 2, 0.0),
    ]
    assert backend.info[1] == [True, 0.0, np.inf]


def test_binary_installs_integer_flag_then_binary_range_only(backend):
    calls = _directives_for(backend, Domain.BINARY_INTEGER)
    assert calls == [('set_column_integer', 1, True), ('set_column_binary', 1)]
    assert backend.info[0] == [True, 0.0, 1.0]


@pytest.mark.parametrize("constant, free", [
    (Domain.ANY_CONSTANT_INTEGER, Domain.ANY_INTEGER),
    (Domain.ANY_CONSTANT_REAL, Domain.ANY_REAL),
    (Domain.POSITIVE_OR_ZERO_CONSTANT_INTEGER, Domain.POSITIVE_OR_ZERO_INTEGER),
    (Domain.POSITIVE_OR_ZERO_CONSTANT_REAL, Domain.POSITIVE_OR_ZERO_REAL),
    (Domain.BINARY_CONSTANT_INTEGER, Domain.BINARY_INTEGER),
])
def test_constant_domains_share_bounds_with_free_twin(backend_factory, constant, free):
    first, second = backend_factory(), backend_factory()
    calls_constant = _directives_for(first, constant)
    calls_free = _directives_for(second, free)
    assert calls_constant == calls_free
    assert constant.is_constant and not free.is_constant
    assert constant.as_free() is free
    assert free.as_constant() is constant


def test_unrecognized_domain_fails_before_any_directive(backend):
    column = backend.add_column()
    backend.calls.clear()
    with pytest.raises(DomainError):
        apply_domain(backend, column, 'integer-ish')
    with pytest.raises(ValueError):
        apply_domain(backend, column, 42)
    assert backend.calls == []


def test_bounds_table():
    assert bounds_for(Domain.ANY_REAL) == (-np.inf, np.inf)
    assert bounds_for(Domain.POSITIVE_OR_ZERO_INTEGER) == (0.0, np.inf)
    assert bounds_for(Domain.BINARY_INTEGER) == (0.0, 1.0)
    assert Domain.BINARY_CONSTANT_INTEGER.bounds == (0.0, 1.0)


def test_axes():
    assert Domain.BINARY_INTEGER.numeric_kind is NumericKind.INTEGER
    assert Domain.BINARY_INTEGER.range_kind is RangeKind.BINARY
    assert Domain.BINARY_INTEGER.is_integer
    assert Domain.POSITIVE_OR_ZERO_REAL.is_nonnegative
    assert not Domain.ANY_INTEGER.is_nonnegative
    assert Domain.from_kinds(NumericKind.REAL, RangeKind.NONNEGATIVE, True) \
        is Domain.POSITIVE_OR_ZERO_CONSTANT_REAL


def test_real_binary_does_not_exist():
    with pytest.raises(DomainError):
        Domain.from_kinds(NumericKind.REAL, RangeKind.BINARY)


def test_coerce_accepts_member_values():
    assert Domain.coerce('Positive_Or_Zero_Integer') is Domain.POSITIVE_OR_ZERO_INTEGER
    assert Domain.coerce(Domain.ANY_REAL) is Domain.ANY_REAL
    with pytest.raises(DomainError):
        Domain.coerce('natural')
    with pytest.raises(DomainError):
        Domain.coerce(None)


def test_infer_domain_from_column_state():
    assert infer_domain(True, 0.0, 1.0) is Domain.BINARY_INTEGER
    assert infer_domain(True, 0.0, np.inf) is Domain.POSITIVE_OR_ZERO_INTEGER
    assert infer_domain(False, -np.inf, np.inf) is Domain.ANY_REAL
    assert infer_domain(False, 0.0, 1.0) is Domain.POSITIVE_OR_ZERO_REAL


def test_result_domains():
    nn_int = Domain.POSITIVE_OR_ZERO_INTEGER
    assert sum_domain(nn_int, nn_int) is nn_int
    assert sum_domain(Domain.BINARY_INTEGER, Domain.BINARY_INTEGER) is nn_int
    assert sum_domain(nn_int, Domain.ANY_REAL) is Domain.ANY_REAL
    assert negate_domain(nn_int) is Domain.ANY_INTEGER
    assert scale_domain(nn_int, 3) is nn_int
    assert scale_domain(nn_int, -0.5) is Domain.ANY_REAL
    assert divide_domain(nn_int, 2) is Domain.POSITIVE_OR_ZERO_REAL
    assert divide_domain(Domain.ANY_INTEGER, -1) is Domain.ANY_INTEGER
