"""
End-to-end models solved with HiGHS
"""

import pytest

from milpmanager import (DivisionByZeroError, Domain, MilpModel, Parameters,
                         SolutionStatus)


def test_bounded_sum(solver_model):
    model = solver_model
    x = model.create('x', Domain.POSITIVE_OR_ZERO_INTEGER)
    y = model.create('y', Domain.POSITIVE_OR_ZERO_INTEGER)
    z = model.sum(x, y, Domain.ANY_INTEGER)
    model.set_less_or_equal(z, model.from_constant(10))
    model.add_goal(z)

    result = model.solve()

    assert result.status is SolutionStatus.OPTIMAL
    assert model.get_value(z) == pytest.approx(10.0)
    assert abs(model.get_value(z) - (model.get_value(x) + model.get_value(y))) < 1e-6
    assert result.objective == pytest.approx(10.0)
    assert len(result.x) == model.columns


def test_negated_constant(solver_model):
    model = solver_model
    n = model.negate(model.from_constant(5), Domain.ANY_INTEGER)
    model.add_goal(n)

    assert model.solve().is_optimal()
    assert model.get_value(n) == pytest.approx(-5.0)


def test_division_by_constant(solver_model):
    model = solver_model
    half = model.divide(model.from_constant(9), 2, Domain.ANY_REAL)
    model.add_goal(half)

    assert model.solve().is_optimal()
    assert model.get_value(half) == pytest.approx(4.5)


def test_division_by_zero_keeps_model_solvable(solver_model):
    model = solver_model
    a = model.from_constant(6)
    with pytest.raises(DivisionByZeroError):
        model.divide(a, model.from_constant(0), Domain.ANY_REAL)
    model.add_goal(a)

    assert model.solve().is_optimal()
    assert model.get_value(a) == pytest.approx(6.0)


def test_binary_knapsack_with_operators(solver_model):
    model = solver_model
    a = model.create('a', Domain.BINARY_INTEGER)
    b = model.create('b', Domain.BINARY_INTEGER)
    c = model.create('c', Domain.BINARY_INTEGER)
    weight = 4 * a + 3 * b + 2 * c
    value = 5 * a + 4 * b + 3 * c
    model.add_constraint(weight <= 5)
    model.add_goal(value)

    result = model.solve()

    assert result.is_optimal()
    assert result.objective == pytest.approx(7.0)
    assert [round(v) for v in model.get_values([a, b, c])] == [0, 1, 1]


def test_free_variable_reaches_negative_values(solver_model):
    model = solver_model
    x = model.create('x', Domain.ANY_REAL)
    model.set_greater_or_equal(x, model.from_constant(-3))
    model.set_less_or_equal(x, model.from_constant(-1))
    model.add_goal(-x)

    assert model.solve().is_optimal()
    assert model.get_value(x) == pytest.approx(-3.0)


def test_nonnegative_domain_makes_model_infeasible(solver_model):
    model = solver_model
    x = model.create('x', Domain.POSITIVE_OR_ZERO_REAL)
    model.set_less_or_equal(x, model.from_constant(-1))
    model.add_goal(x)

    result = model.solve()

    assert result.status is SolutionStatus.INFEASIBLE
    assert result.x is None


def test_parameters_reach_solver():
    param = Parameters()
    param.time_limit = 30.0
    param.mip_rel_gap = 0.0
    with MilpModel(param=param) as model:
        x = model.create('x', Domain.POSITIVE_OR_ZERO_INTEGER)
        model.set_less_or_equal(x * 2, model.from_constant(7))
        model.add_goal(x)
        assert model.solve().is_optimal()
        assert model.get_value(x) == pytest.approx(3.0)
