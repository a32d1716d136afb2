"""
Results class returned by MilpModel.solve()
"""
import numpy as np
from typing import Optional, Dict, Any

from .solver import SolutionStatus


class Results:
    """
    Outcome of a solve.

    Attributes
    ----------
    status : SolutionStatus
        Portable status (OPTIMAL, INFEASIBLE, UNBOUNDED or UNKNOWN)
    backend_status : int or None
        Native result code reported by the backend
    x : np.ndarray or None
        Column values in id order (column 1 first); None without a solution
    objective : float or None
        Objective value of the maximization
    message : str
        Backend message, if any
    time : float
        Wall-clock solve time in seconds

    Methods
    -------
    is_optimal()
        Check if solution is optimal
    to_dict()
        Convert results to dictionary
    """

    def __init__(self):
        self.status: SolutionStatus = SolutionStatus.UNKNOWN
        self.backend_status: Optional[int] = None
        self.x: Optional[np.ndarray] = None
        self.objective: Optional[float] = None
        self.message: str = ""
        self.time: float = 0.0

    def is_optimal(self) -> bool:
        """Check if solution is optimal"""
        return self.status is SolutionStatus.OPTIMAL

    def __repr__(self):
        n_vars = len(self.x) if self.x is not None else 0
        return (f"Results(status='{self.status.value}', "
                f"objective={self.objective}, "
                f"time={self.time:.3f}s, "
                f"n_vars={n_vars})")

    def __str__(self):
        lines = [
            "MILP Results",
            "=" * 50,
            f"Status:          {self.status.value}",
            f"Backend status:  {self.backend_status}",
            f"Time:            {self.time:.3f} seconds",
        ]
        if self.objective is not None:
            lines.append(f"Objective:       {self.objective:.6e}")
        if self.message:
            lines.append(f"Message:         {self.message}")
        if self.x is not None:
            lines.append(f"Variables:       {len(self.x)}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert results to dictionary"""
        return {
            'status': self.status.value,
            'backend_status': self.backend_status,
            'x': self.x.tolist() if self.x is not None else None,
            'objective': self.objective,
            'message': self.message,
            'time': self.time,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]):
        """Create Results from dictionary"""
        results = cls()
        for key, value in d.items():
            if key == 'status':
                results.status = SolutionStatus(value)
            elif key == 'x' and value is not None:
                results.x = np.array(value, dtype=np.float64)
            elif hasattr(results, key):
                setattr(results, key, value)
        return results
