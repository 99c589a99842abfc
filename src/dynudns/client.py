"""Dynu DNS API client for ACME DNS-01 TXT records."""

import httpx
from pydantic import ValidationError

from dynudns._logging import Timer, get_logger, get_zone_extra, redact_headers
from dynudns.exceptions import (
    DomainResolutionError,
    RecordCreateError,
    RecordDeleteError,
    RecordNotFoundError,
    TransportError,
)
from dynudns.models import DnsRecord, DnsRecordResponse, DnsRecords, Domain
from dynudns.pacing import FixedDelayPacer, Pacer

logger = get_logger(__name__)

DYNU_API_URL = "https://api.dynu.com/v2"
DEFAULT_USER_AGENT = "dynudns/0.1.0"


class DynuClient:
    """Reconcile TXT records for a single zone through the Dynu API.

    Nothing is cached between calls: every operation resolves the domain
    ID and looks records up by (node name, text data) afresh.

    Args:
        hostname: Zone hostname as known to Dynu (e.g., "example.com").
        api_key: Dynu API key, sent in the API-Key header.
        user_agent: User-Agent header value.
        api_url: Base URL of the Dynu API including version.
        pacer: Pacing policy applied before every request
               (default: FixedDelayPacer with a 5 second delay).
        timeout: HTTP request timeout in seconds (default: 30).
        http_client: Shared httpx.Client. When omitted the client creates
                     and owns one.
    """

    def __init__(
        self,
        hostname: str,
        api_key: str,
        user_agent: str = DEFAULT_USER_AGENT,
        api_url: str = DYNU_API_URL,
        pacer: Pacer | None = None,
        timeout: float = 30,
        http_client: httpx.Client | None = None,
    ):
        self.hostname = hostname
        self.api_key = api_key
        self.user_agent = user_agent
        self.api_url = api_url.rstrip("/")
        self.pacer = pacer if pacer is not None else FixedDelayPacer()
        self.timeout = timeout

        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.Client()

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "DynuClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DynuClient(hostname={self.hostname!r}, api_url={self.api_url!r})"

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
            "API-Key": self.api_key,
        }

    def _request(self, url: str, method: str, body: bytes | None = None) -> httpx.Response:
        """Send a paced, authenticated request to the Dynu API.

        Args:
            url: The endpoint URL.
            method: HTTP method.
            body: Raw JSON request body, if any.

        Returns:
            The HTTP response, whatever its status.

        Raises:
            TransportError: If the request could not be completed.
        """
        self.pacer.wait()

        headers = self._headers()
        logger.debug(
            "Sending Dynu API request",
            extra={"method": method, "url": url, "headers": redact_headers(headers)},
        )
        try:
            with Timer() as timer:
                response = self._http.request(
                    method,
                    url,
                    content=body,
                    headers=headers,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as exc:
            logger.error(
                "Dynu API request failed",
                extra={"method": method, "url": url, "error": str(exc)},
            )
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc

        logger.debug(
            "Dynu API response",
            extra={
                "method": method,
                "url": url,
                "status_code": response.status_code,
                "elapsed_ms": round(timer.elapsed_ms, 1),
            },
        )
        return response

    def get_domain_id(self) -> int:
        """Resolve the Dynu domain ID for this client's hostname.

        Returns:
            The provider-assigned domain ID.

        Raises:
            DomainResolutionError: On a non-200 status or unparseable body.
            TransportError: If the request could not be completed.
        """
        url = f"{self.api_url}/dns/getroot/{self.hostname}"
        response = self._request(url, "GET")

        if response.status_code != httpx.codes.OK:
            error = DomainResolutionError.from_response(response, url)
            logger.error(
                "Domain resolution failed",
                extra={
                    **get_zone_extra(),
                    "hostname": self.hostname,
                    "status_code": response.status_code,
                    "exception_type": error.exception_type,
                },
            )
            raise error

        try:
            domain = Domain.model_validate_json(response.content)
        except ValidationError as exc:
            raise DomainResolutionError(
                f"Unable to parse domain for {self.hostname}: {exc}",
                status_code=response.status_code,
                url=url,
            ) from exc

        logger.debug(
            "Domain resolved",
            extra={**get_zone_extra(), "hostname": self.hostname, "domain_id": domain.id},
        )
        return domain.id

    def get_dns_record(self, domain_id: int, node_name: str, text_data: str) -> DnsRecordResponse:
        """Find the first record under a domain with matching node name and text.

        Args:
            domain_id: Dynu domain ID.
            node_name: Record node name relative to the zone.
            text_data: TXT record value.

        Returns:
            The first matching record.

        Raises:
            RecordNotFoundError: If no record matches or the list call
                returns a non-200 status.
            TransportError: If the request failed or the body is unparseable.
        """
        url = f"{self.api_url}/dns/{domain_id}/record"
        response = self._request(url, "GET")

        if response.status_code != httpx.codes.OK:
            logger.warning(
                "DNS record list failed",
                extra={
                    **get_zone_extra(),
                    "domain_id": domain_id,
                    "status_code": response.status_code,
                },
            )
            raise RecordNotFoundError(domain_id, status_code=response.status_code, url=url)

        try:
            records = DnsRecords.model_validate_json(response.content)
        except ValidationError as exc:
            raise TransportError(
                f"Unable to parse DNS records for Domain ID {domain_id}: {exc}",
                status_code=response.status_code,
                url=url,
            ) from exc

        for record in records.dns_records:
            if record.matches(node_name, text_data):
                return record

        raise RecordNotFoundError(domain_id, status_code=response.status_code, url=url)

    def create_dns_record(self, record: DnsRecord) -> int:
        """Create a DNS record unless an identical one already exists.

        Safe to call repeatedly: an existing record with the same node
        name and text data is reused and nothing is written.

        Args:
            record: The record to ensure.

        Returns:
            ID of the existing or newly created record.

        Raises:
            DomainResolutionError: If the domain ID cannot be resolved.
            RecordCreateError: If the provider rejects the new record.
            TransportError: If a request failed or a body is unparseable.
        """
        logger.info(
            "Creating DNS record",
            extra={**get_zone_extra(), "hostname": self.hostname, "node_name": record.node_name},
        )
        domain_id = self.get_domain_id()

        try:
            existing = self.get_dns_record(domain_id, record.node_name, record.text_data)
        except RecordNotFoundError:
            pass
        else:
            logger.info(
                "DNS record already present",
                extra={
                    **get_zone_extra(),
                    "node_name": record.node_name,
                    "record_id": existing.id,
                },
            )
            return existing.id

        url = f"{self.api_url}/dns/{domain_id}/record"
        response = self._request(url, "POST", record.to_json_bytes())

        if response.status_code != httpx.codes.OK:
            logger.error(
                "DNS record creation rejected",
                extra={**get_zone_extra(), "url": url, "status_code": response.status_code},
            )
            raise RecordCreateError(
                f"{response.status_code} {response.reason_phrase} received for {url}",
                status_code=response.status_code,
                url=url,
            )

        try:
            created = DnsRecordResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise TransportError(
                f"Unable to parse created DNS record from {url}: {exc}",
                status_code=response.status_code,
                url=url,
            ) from exc

        logger.info(
            "DNS record created",
            extra={**get_zone_extra(), "node_name": record.node_name, "record_id": created.id},
        )
        return created.id

    def remove_dns_record(self, node_name: str, text_data: str) -> None:
        """Delete the record matching node name and text data, if any.

        A missing record counts as already removed.

        Args:
            node_name: Record node name relative to the zone.
            text_data: TXT record value.

        Raises:
            DomainResolutionError: If the domain ID cannot be resolved.
            RecordDeleteError: If the provider rejects the deletion.
            TransportError: If a request failed or a body is unparseable.
        """
        logger.info(
            "Removing DNS record",
            extra={**get_zone_extra(), "hostname": self.hostname, "node_name": node_name},
        )
        domain_id = self.get_domain_id()

        try:
            record = self.get_dns_record(domain_id, node_name, text_data)
        except RecordNotFoundError as exc:
            logger.info(
                "DNS record not found, nothing to remove",
                extra={**get_zone_extra(), "node_name": node_name, "domain_id": exc.domain_id},
            )
            return

        url = f"{self.api_url}/dns/{domain_id}/record/{record.id}"
        response = self._request(url, "DELETE")

        if response.status_code != httpx.codes.OK:
            status = f"{response.status_code} {response.reason_phrase}"
            logger.error(
                "DNS record deletion rejected",
                extra={**get_zone_extra(), "url": url, "status_code": response.status_code},
            )
            raise RecordDeleteError(status, status_code=response.status_code, url=url)

        logger.info(
            "DNS record removed",
            extra={**get_zone_extra(), "node_name": node_name, "record_id": record.id},
        )
