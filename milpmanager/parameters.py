"""
Parameters class for the shipped scipy/HiGHS backend
"""


class Parameters:
    """
    Configuration parameters for :class:`~milpmanager.scipy_backend.ScipyBackend`.

    Unset limits (``None``) leave the solver's own default in place.

    Attributes
    ----------
    time_limit : float or None
        Maximum solve time in seconds (default: None, unlimited)
    mip_rel_gap : float or None
        Relative MIP optimality gap (default: None, HiGHS default)
    node_limit : int or None
        Maximum number of branch-and-bound nodes (default: None)
    presolve : bool
        Let HiGHS presolve the model (default: True)
    disp : bool
        Print solver progress to stdout (default: False)

    Examples
    --------
    >>> param = Parameters()
    >>> param.time_limit = 10.0
    >>> param.mip_rel_gap = 1e-6
    """

    def __init__(self):
        self.time_limit = None
        self.mip_rel_gap = None
        self.node_limit = None
        self.presolve = True
        self.disp = False

    def __repr__(self):
        return (f"Parameters(time_limit={self.time_limit}, "
                f"mip_rel_gap={self.mip_rel_gap}, "
                f"node_limit={self.node_limit}, "
                f"presolve={self.presolve})")

    def to_scipy_options(self):
        """Convert to the ``options`` dict of ``scipy.optimize.milp``"""
        options = {
            'disp': bool(self.disp),
            'presolve': bool(self.presolve),
        }
        if self.time_limit is not None:
            options['time_limit'] = float(self.time_limit)
        if self.mip_rel_gap is not None:
            options['mip_rel_gap'] = float(self.mip_rel_gap)
        if self.node_limit is not None:
            options['node_limit'] = int(self.node_limit)
        return options

    @classmethod
    def from_dict(cls, d):
        """Create Parameters from dictionary"""
        param = cls()
        for key, value in d.items():
            if hasattr(param, key):
                setattr(param, key, value)
        return param

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'time_limit': self.time_limit,
            'mip_rel_gap': self.mip_rel_gap,
            'node_limit': self.node_limit,
            'presolve': self.presolve,
            'disp': self.disp,
        }
