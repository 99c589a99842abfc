"""Base class for challenge solvers."""

from abc import ABC, abstractmethod

from dynudns.models import ChallengeRequest


class ChallengeSolver(ABC):
    """Abstract base class for DNS-01 challenge solvers.

    The challenge host may call present() and cleanup() any number of
    times with the same request; implementations must tolerate that.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Solver name, unique within a host deployment."""
        ...

    @abstractmethod
    def present(self, request: ChallengeRequest) -> None:
        """Ensure the challenge TXT record exists.

        Args:
            request: The challenge to present.
        """
        ...

    @abstractmethod
    def cleanup(self, request: ChallengeRequest) -> None:
        """Ensure the challenge TXT record is removed.

        Only the record carrying request.key is removed, so other
        validations for the same name may run concurrently.

        Args:
            request: The challenge to clean up.
        """
        ...
