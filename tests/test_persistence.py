"""
Tests for saving, loading, snapshot and restore
"""

import numpy as np
import pytest

from milpmanager import (Domain, ForeignVariableError, MilpModel,
                         ModelStateError, ScipyBackend, SolutionStatus)
from milpmanager.model_io import read_model, write_model
from milpmanager.standard_form import StandardForm


def _build(model):
    x = model.create('x', Domain.POSITIVE_OR_ZERO_INTEGER)
    y = model.create('y', Domain.ANY_INTEGER)
    flag = model.create('flag', Domain.BINARY_INTEGER)
    r = model.create('r', Domain.ANY_REAL)
    total = model.sum(x, y, Domain.ANY_INTEGER)
    model.set_less_or_equal(total, model.from_constant(8))
    model.set_greater_or_equal(y, model.from_constant(-2))
    model.set_equal(r, model.divide(x, 4, Domain.POSITIVE_OR_ZERO_REAL))
    score = model.sum(total, flag, Domain.ANY_INTEGER)
    model.add_goal(score)
    return score


@pytest.mark.parametrize("filename", ['model.mps', 'model.npz'])
def test_round_trip_preserves_model(tmp_path, filename):
    path = tmp_path / filename
    with MilpModel(ScipyBackend()) as original:
        _build(original)
        original.save_model(path)
        rows, columns = original.rows, original.columns
        names = [v.name for v in original]
        expected = original.solve().objective

    with MilpModel(ScipyBackend()) as loaded:
        loaded.load_model(path)
        assert (loaded.rows, loaded.columns) == (rows, columns)
        assert [v.name for v in loaded] == names
        assert loaded.get_variable('x').domain is Domain.POSITIVE_OR_ZERO_INTEGER
        assert loaded.get_variable('y').domain is Domain.ANY_INTEGER
        assert loaded.get_variable('flag').domain is Domain.BINARY_INTEGER
        assert loaded.get_variable('r').domain is Domain.ANY_REAL

        result = loaded.solve()
        assert result.status is SolutionStatus.OPTIMAL
        assert result.objective == pytest.approx(expected)
        assert result.objective == pytest.approx(9.0)


def test_lp_round_trip_keeps_names_and_domains(tmp_path):
    path = tmp_path / 'model.lp'
    with MilpModel(ScipyBackend()) as original:
        _build(original)
        original.save_model(path)
        rows, columns = original.rows, original.columns
        names = sorted(v.name for v in original)

    assert 'max' in path.read_text().lower()

    with MilpModel(ScipyBackend()) as loaded:
        loaded.load_model(path)
        # LP files list columns by first appearance, so ids may change
        assert (loaded.rows, loaded.columns) == (rows, columns)
        assert sorted(v.name for v in loaded) == names
        assert loaded.get_variable('x').domain is Domain.POSITIVE_OR_ZERO_INTEGER
        assert loaded.get_variable('y').domain is Domain.ANY_INTEGER
        assert loaded.get_variable('flag').domain is Domain.BINARY_INTEGER
        assert loaded.get_variable('r').domain is Domain.ANY_REAL

        result = loaded.solve()
        assert result.status is SolutionStatus.OPTIMAL
        assert result.objective == pytest.approx(9.0)


def test_mps_file_written_by_highs(tmp_path):
    path = tmp_path / 'layout.mps'
    with MilpModel(ScipyBackend(name='layout')) as model:
        x = model.create('x', Domain.BINARY_INTEGER)
        model.create('w', Domain.ANY_REAL)
        model.add_goal(x)
        model.save_model(path)

    text = path.read_text()
    assert 'layout' in text
    assert 'MARKER' in text
    assert text.rstrip().endswith('ENDATA')


def test_model_file_keeps_ranged_rows(tmp_path):
    path = tmp_path / 'ranged.mps'
    form = StandardForm(np.array([[1.0, 2.0]]), [1.0], [4.0], [0.0, 0.0],
                        [np.inf, 3.0], [1.0, 1.0], [1, 0], names=['a', 'b'],
                        maximize=True, name='ranged')
    write_model(path, form)

    loaded = read_model(path)
    assert (loaded.m, loaded.n) == (1, 2)
    assert loaded.names == ['a', 'b']
    assert loaded.AL.tolist() == [1.0]
    assert loaded.AU.tolist() == [4.0]
    assert loaded.u.tolist() == [np.inf, 3.0]
    assert loaded.integrality.tolist() == [1, 0]
    assert loaded.A.toarray().tolist() == [[1.0, 2.0]]
    assert loaded.maximize


@pytest.mark.parametrize("filename", ['missing.npz', 'missing.mps', 'missing.lp'])
def test_loading_missing_file_keeps_model_usable(tmp_path, filename):
    with MilpModel(ScipyBackend()) as model:
        x = model.create('x', Domain.ANY_REAL)
        with pytest.raises(FileNotFoundError):
            model.load_model(tmp_path / filename)
        model.create('y', Domain.ANY_REAL)
        assert model.get_variable('x') is x


def test_loaded_model_issues_new_handles(tmp_path):
    path = tmp_path / 'handles.npz'
    with MilpModel(ScipyBackend()) as model:
        x = model.create('x', Domain.POSITIVE_OR_ZERO_INTEGER)
        model.set_less_or_equal(x, model.from_constant(3))
        model.add_goal(x)
        model.save_model(path)

        model.load_model(path)
        with pytest.raises(ForeignVariableError):
            model.get_value(x)
        reloaded = model.get_variable('x')
        assert reloaded is not x
        model.solve()
        assert model.get_value(reloaded) == pytest.approx(3.0)


def test_model_grows_after_load(tmp_path):
    path = tmp_path / 'grow.npz'
    with MilpModel(ScipyBackend()) as model:
        model.create('x', Domain.ANY_REAL)
        model.create_anonymous(Domain.ANY_REAL)
        model.save_model(path)

    with MilpModel(ScipyBackend()) as model:
        model.load_model(path)
        extra = model.create_anonymous(Domain.ANY_REAL)
        assert extra.name == '_anon2'
        assert model._registry.column_of(extra) == 3


def test_save_forwards_path_to_backend(model, backend, tmp_path):
    model.create('x', Domain.ANY_REAL)
    model.save_model(tmp_path / 'out.lp')
    assert backend.saved == [str(tmp_path / 'out.lp')]


def test_snapshot_and_restore(backend_factory):
    with MilpModel(backend_factory()) as model:
        x = model.create('x', Domain.POSITIVE_OR_ZERO_INTEGER)
        model.set_less_or_equal(x, model.from_constant(2))
        snapshot = model.snapshot()
        assert snapshot == {'rows': 2, 'columns': 2}

        model.restore(snapshot)
        assert (model.rows, model.columns) == (2, 2)
        assert model.get_variable('x') is not x

        with pytest.raises(ValueError):
            model.restore({'rows': 5, 'columns': 2})


def test_restore_on_closed_model_fails(backend_factory):
    model = MilpModel(backend_factory())
    snapshot = model.snapshot()
    model.close()
    with pytest.raises(ModelStateError):
        model.restore(snapshot)
