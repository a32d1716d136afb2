"""
Array form of a MILP and its native ``.npz`` serialization.

The model is stored as::

    maximize (or minimize)  c'*x
    subject to              AL <= A*x <= AU
                            l <= x <= u
                            x[j] integer where integrality[j] == 1
"""
import numpy as np
from scipy import sparse
from typing import List, Optional, Union
from pathlib import Path


def _ensure_contiguous_int32(arr):
    """Ensure array is contiguous int32"""
    if not isinstance(arr, np.ndarray):
        arr = np.array(arr, dtype=np.int32)
    if arr.dtype != np.int32:
        arr = arr.astype(np.int32)
    return np.ascontiguousarray(arr)


def _ensure_contiguous_float64(arr):
    """Ensure array is contiguous float64"""
    if not isinstance(arr, np.ndarray):
        arr = np.array(arr, dtype=np.float64)
    if arr.dtype != np.float64:
        arr = arr.astype(np.float64)
    return np.ascontiguousarray(arr)


class StandardForm:
    """
    Dense/sparse array snapshot of a model.

    Attributes
    ----------
    A : scipy.sparse.csr_matrix
        Constraint matrix (m x n)
    AL, AU : np.ndarray
        Row bounds (length m); ``-inf`` / ``inf`` for one-sided rows
    l, u : np.ndarray
        Column bounds (length n)
    c : np.ndarray
        Objective coefficients (length n), in the direction given by
        ``maximize``
    integrality : np.ndarray
        1 for integer columns, 0 for continuous ones (length n)
    names : list of str
        Column names (length n)
    maximize : bool
        Optimization direction
    name : str
        Model name
    """

    def __init__(self, A, AL, AU, l, u, c, integrality,
                 names: Optional[List[str]] = None,
                 maximize: bool = False, name: str = "MILP_Model"):
        if sparse.issparse(A):
            A = sparse.csr_matrix(A)
        elif isinstance(A, np.ndarray):
            A = sparse.csr_matrix(A)
        else:
            raise TypeError("A must be a numpy array or scipy sparse matrix")

        m, n = A.shape
        self.A = A
        self.AL = _ensure_contiguous_float64(AL)
        self.AU = _ensure_contiguous_float64(AU)
        self.l = _ensure_contiguous_float64(l)
        self.u = _ensure_contiguous_float64(u)
        self.c = _ensure_contiguous_float64(c)
        self.integrality = _ensure_contiguous_int32(integrality)
        self.names = list(names) if names is not None else [f"C{j + 1}" for j in range(n)]
        self.maximize = bool(maximize)
        self.name = name

        # Validate dimensions
        if len(self.AL) != m or len(self.AU) != m:
            raise ValueError(f"AL and AU must have length {m} (number of constraints)")
        if (len(self.l) != n or len(self.u) != n or len(self.c) != n
                or len(self.integrality) != n or len(self.names) != n):
            raise ValueError(f"l, u, c, integrality and names must have length {n} "
                             f"(number of variables)")

    @property
    def m(self) -> int:
        """Number of constraints"""
        return self.A.shape[0]

    @property
    def n(self) -> int:
        """Number of variables"""
        return self.A.shape[1]

    def save_npz(self, filename: Union[str, Path]):
        """Write the arrays to a compressed ``.npz`` archive"""
        A = self.A.tocsr()
        np.savez_compressed(
            str(filename),
            A_data=A.data, A_indices=A.indices, A_indptr=A.indptr,
            A_shape=np.array(A.shape, dtype=np.int64),
            AL=self.AL, AU=self.AU, l=self.l, u=self.u, c=self.c,
            integrality=self.integrality,
            names=np.array(self.names, dtype=str),
            maximize=np.array(self.maximize),
            name=np.array(self.name),
        )

    @classmethod
    def load_npz(cls, filename: Union[str, Path]) -> 'StandardForm':
        """Read an archive written by :meth:`save_npz`"""
        filename = str(filename)
        if not Path(filename).exists():
            raise FileNotFoundError(f"Model file not found: {filename}")

        with np.load(filename, allow_pickle=False) as data:
            shape = tuple(int(s) for s in data['A_shape'])
            A = sparse.csr_matrix(
                (data['A_data'], data['A_indices'], data['A_indptr']), shape=shape)
            return cls(A, data['AL'], data['AU'], data['l'], data['u'], data['c'],
                       data['integrality'],
                       names=[str(s) for s in data['names']],
                       maximize=bool(data['maximize']),
                       name=str(data['name']))

    def __repr__(self):
        sense = 'max' if self.maximize else 'min'
        return f"<StandardForm {self.name!r} {sense} m={self.m} n={self.n}>"
