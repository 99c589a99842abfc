"""Dynu API and solver exceptions."""

import httpx
from pydantic import ValidationError

from dynudns.models import Domain


class DynuError(Exception):
    """Base exception for dynudns errors.

    Every error names the stage of the reconciliation that failed and,
    where one was involved, the HTTP status and target URL.
    """

    stage = "unknown"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class DomainResolutionError(DynuError):
    """Hostname could not be mapped to a Dynu domain ID."""

    stage = "resolve"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        exception_type: str | None = None,
        exception_message: str | None = None,
    ):
        self.exception_type = exception_type
        self.exception_message = exception_message
        super().__init__(message, status_code=status_code, url=url)

    @classmethod
    def from_response(cls, response: httpx.Response, url: str) -> "DomainResolutionError":
        """Create a DomainResolutionError from a failed getroot response.

        The body is parsed only to pull out the provider's exception
        fields; an unparseable body leaves them empty.

        Args:
            response: The getroot HTTP response.
            url: The requested URL.

        Returns:
            DomainResolutionError instance.
        """
        exception_type = exception_message = None
        try:
            domain = Domain.model_validate_json(response.content)
        except ValidationError:
            pass
        else:
            if domain.exception is not None:
                exception_type = domain.exception.type
                exception_message = domain.exception.message

        return cls(
            (
                f"Unable to find Domain ID ({response.status_code}) for {url}: "
                f"Error Type: {exception_type or 'unknown'}, "
                f"Error: {exception_message or 'unknown'}"
            ),
            status_code=response.status_code,
            url=url,
            exception_type=exception_type,
            exception_message=exception_message,
        )


class RecordNotFoundError(DynuError):
    """No DNS record matched the requested node name and text data."""

    stage = "find"

    def __init__(
        self,
        domain_id: int,
        status_code: int | None = None,
        url: str | None = None,
    ):
        self.domain_id = domain_id
        super().__init__(
            f"Unable to find DNS Records for Domain ID: {domain_id}",
            status_code=status_code,
            url=url,
        )


class RecordCreateError(DynuError):
    """DNS record creation was rejected by the provider."""

    stage = "create"


class RecordDeleteError(DynuError):
    """DNS record deletion was rejected by the provider."""

    stage = "delete"


class TransportError(DynuError):
    """Network, timeout or response parse failure."""

    stage = "transport"


class SolverConfigError(DynuError):
    """Per-issuer solver configuration could not be decoded."""

    stage = "config"


class CredentialError(DynuError):
    """API key could not be resolved."""

    stage = "config"
