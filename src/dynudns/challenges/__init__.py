"""ACME challenge solver interfaces."""

from dynudns.challenges.base import ChallengeSolver
from dynudns.challenges.dns01 import node_name_for

__all__ = ["ChallengeSolver", "node_name_for"]
