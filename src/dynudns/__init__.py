"""dynudns - Dynu DNS TXT record reconciliation for ACME DNS-01 challenges."""

from dynudns.client import DynuClient
from dynudns.solver import DynuSolver

__all__ = ["DynuClient", "DynuSolver"]
__version__ = "0.1.0"
