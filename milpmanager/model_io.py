"""
LP and MPS model files, read and written by HiGHS through ``highspy``.

The file format follows the extension: ``.lp`` is CPLEX LP, anything else is
free MPS. HiGHS writes MPS columns in id order; LP files only list columns
in the order they first appear, so an LP round trip keeps the column names
and counts but not necessarily their ids.
"""

import logging
from pathlib import Path
from typing import Union

import highspy
import numpy as np
from scipy import sparse

from .standard_form import StandardForm

logger = logging.getLogger(__name__)


def _highs() -> highspy.Highs:
    h = highspy.Highs()
    h.setOptionValue('output_flag', False)
    return h


def _to_highs_lp(form: StandardForm) -> highspy.HighsLp:
    A = form.A.tocsc()
    lp = highspy.HighsLp()
    lp.num_col_ = form.n
    lp.num_row_ = form.m
    lp.col_cost_ = form.c.tolist()
    lp.col_lower_ = form.l.tolist()
    lp.col_upper_ = form.u.tolist()
    lp.row_lower_ = form.AL.tolist()
    lp.row_upper_ = form.AU.tolist()
    lp.a_matrix_.format_ = highspy.MatrixFormat.kColwise
    lp.a_matrix_.num_col_ = form.n
    lp.a_matrix_.num_row_ = form.m
    lp.a_matrix_.start_ = A.indptr.tolist()
    lp.a_matrix_.index_ = A.indices.tolist()
    lp.a_matrix_.value_ = A.data.tolist()
    lp.integrality_ = [highspy.HighsVarType.kInteger if flag else highspy.HighsVarType.kContinuous
                       for flag in form.integrality]
    lp.sense_ = highspy.ObjSense.kMaximize if form.maximize else highspy.ObjSense.kMinimize
    lp.col_names_ = list(form.names)
    lp.row_names_ = [f"R{i + 1}" for i in range(form.m)]
    lp.model_name_ = form.name
    return lp


def _from_highs_lp(lp: highspy.HighsLp) -> StandardForm:
    n, m = lp.num_col_, lp.num_row_
    matrix = lp.a_matrix_
    arrays = (np.asarray(matrix.value_, dtype=np.float64),
              np.asarray(matrix.index_, dtype=np.int32),
              np.asarray(matrix.start_, dtype=np.int32))
    if matrix.format_ == highspy.MatrixFormat.kRowwise:
        A = sparse.csr_matrix(arrays, shape=(m, n))
    else:
        A = sparse.csc_matrix(arrays, shape=(m, n))

    if len(lp.integrality_):
        integrality = [1 if t == highspy.HighsVarType.kInteger else 0 for t in lp.integrality_]
    else:
        integrality = [0] * n
    names = list(lp.col_names_) if len(lp.col_names_) == n else None
    return StandardForm(A, lp.row_lower_, lp.row_upper_, lp.col_lower_, lp.col_upper_,
                        lp.col_cost_, integrality, names=names,
                        maximize=lp.sense_ == highspy.ObjSense.kMaximize,
                        name=lp.model_name_ or "MILP_Model")


def write_model(filename: Union[str, Path], form: StandardForm) -> None:
    """
    Write ``form`` as LP (``.lp``) or free MPS (any other extension).

    Raises
    ------
    ValueError
        If HiGHS cannot write the model
    """
    h = _highs()
    if h.passModel(_to_highs_lp(form)) == highspy.HighsStatus.kError:
        raise ValueError(f"HiGHS rejected the model for {filename}")
    if h.writeModel(str(filename)) == highspy.HighsStatus.kError:
        raise ValueError(f"HiGHS failed to write {filename}")
    logger.debug("Wrote %s: %d rows, %d columns", filename, form.m, form.n)


def read_model(filename: Union[str, Path]) -> StandardForm:
    """
    Read an LP or MPS file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    ValueError
        If HiGHS cannot parse the file
    """
    if not Path(filename).exists():
        raise FileNotFoundError(f"Model file not found: {filename}")
    h = _highs()
    if h.readModel(str(filename)) == highspy.HighsStatus.kError:
        raise ValueError(f"HiGHS failed to read {filename}")
    form = _from_highs_lp(h.getLp())
    logger.debug("Read %s: %d rows, %d columns", filename, form.m, form.n)
    return form
