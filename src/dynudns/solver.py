"""Dynu DNS-01 challenge solver."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from dynudns._logging import get_logger, reset_zone, set_zone
from dynudns.challenges.base import ChallengeSolver
from dynudns.challenges.dns01 import node_name_for
from dynudns.client import DEFAULT_USER_AGENT, DYNU_API_URL, DynuClient
from dynudns.exceptions import CredentialError, SolverConfigError
from dynudns.models import ChallengeRequest, DnsRecord, RecordType, SolverConfig
from dynudns.pacing import FixedDelayPacer, Pacer

logger = get_logger(__name__)


class SecretStore(ABC):
    """Read access to namespaced secrets, such as Kubernetes Secrets."""

    @abstractmethod
    def get_secret_data(self, namespace: str, name: str) -> Mapping[str, bytes]:
        """Return the data of a secret.

        Args:
            namespace: Namespace the secret lives in.
            name: Secret name.

        Returns:
            Mapping of secret keys to raw values.

        Raises:
            KeyError: If the secret does not exist.
        """
        ...


def load_config(raw: Mapping[str, Any] | str | bytes | None) -> SolverConfig:
    """Decode per-issuer solver configuration.

    Args:
        raw: Decoded JSON object, raw JSON text, or None when the issuer
             carries no configuration.

    Returns:
        The validated SolverConfig.

    Raises:
        SolverConfigError: If the configuration cannot be decoded.
    """
    if raw is None:
        return SolverConfig()
    try:
        if isinstance(raw, str | bytes):
            return SolverConfig.model_validate_json(raw)
        return SolverConfig.model_validate(raw)
    except ValidationError as exc:
        raise SolverConfigError(f"error decoding solver config: {exc}") from exc


class DynuSolver(ChallengeSolver):
    """Present and clean up DNS-01 TXT records at Dynu.

    Holds no per-challenge state: each call builds a fresh DynuClient and
    finds its record by node name and key, so calls for different
    challenges never interfere.

    Args:
        secret_store: Source for API keys referenced by apikeySecretKeyRef.
        user_agent: User-Agent header sent to the Dynu API.
        api_url: Base URL of the Dynu API.
        pacer: Pacing policy shared by all clients this solver creates.
        http_client: Shared httpx.Client. When omitted the solver creates
                     and owns one.
    """

    def __init__(
        self,
        secret_store: SecretStore | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        api_url: str = DYNU_API_URL,
        pacer: Pacer | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.secret_store = secret_store
        self.user_agent = user_agent
        self.api_url = api_url
        self.pacer = pacer if pacer is not None else FixedDelayPacer()

        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.Client()

    @property
    def name(self) -> str:
        return "dynu"

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "DynuSolver":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def get_api_key(self, config: SolverConfig, namespace: str) -> str:
        """Resolve the Dynu API key from inline config or a secret reference.

        Args:
            config: Decoded solver configuration.
            namespace: Namespace of the issuing resource.

        Returns:
            The API key.

        Raises:
            CredentialError: If no key can be resolved.
        """
        if config.api_key:
            return config.api_key

        ref = config.api_key_secret_key_ref
        if ref is None:
            raise CredentialError("no apiKey or apikeySecretKeyRef configured")
        if self.secret_store is None:
            raise CredentialError(f"no secret store available to load secret {namespace}/{ref.name}")

        try:
            data = self.secret_store.get_secret_data(namespace, ref.name)
        except KeyError as exc:
            raise CredentialError(f"failed to load secret {namespace}/{ref.name}") from exc

        if ref.key not in data:
            raise CredentialError(f"no key {ref.key!r} in secret {namespace}/{ref.name}")

        try:
            api_key = data[ref.key].decode().strip()
        except UnicodeDecodeError as exc:
            raise CredentialError(
                f"key {ref.key!r} in secret {namespace}/{ref.name} is not valid UTF-8"
            ) from exc
        if not api_key:
            raise CredentialError(f"key {ref.key!r} in secret {namespace}/{ref.name} is empty")
        return api_key

    def new_client(self, request: ChallengeRequest) -> tuple[DynuClient, SolverConfig]:
        """Build a DynuClient for the challenge's zone.

        Args:
            request: The challenge request.

        Returns:
            Tuple of (client, decoded config).

        Raises:
            SolverConfigError: If the config blob is invalid.
            CredentialError: If no API key can be resolved.
        """
        config = load_config(request.config)
        api_key = self.get_api_key(config, request.resource_namespace)

        client = DynuClient(
            hostname=request.resolved_zone.rstrip("."),
            api_key=api_key,
            user_agent=self.user_agent,
            api_url=self.api_url,
            pacer=self.pacer,
            http_client=self._http,
        )
        return client, config

    def _node_name(self, request: ChallengeRequest) -> str:
        try:
            return node_name_for(request.resolved_fqdn, request.resolved_zone)
        except ValueError as exc:
            raise SolverConfigError(str(exc)) from exc

    def present(self, request: ChallengeRequest) -> None:
        """Create the challenge TXT record, reusing an identical existing one."""
        client, config = self.new_client(request)
        node_name = self._node_name(request)

        token = set_zone(client.hostname)
        try:
            logger.info(
                "Presenting DNS-01 challenge",
                extra={"fqdn": request.resolved_fqdn, "node_name": node_name},
            )
            record = DnsRecord(
                node_name=node_name,
                record_type=RecordType.TXT,
                text_data=request.key,
                ttl=str(config.ttl),
                state=True,
            )
            record_id = client.create_dns_record(record)
            logger.info(
                "DNS-01 challenge presented",
                extra={"fqdn": request.resolved_fqdn, "record_id": record_id},
            )
        finally:
            reset_zone(token)

    def cleanup(self, request: ChallengeRequest) -> None:
        """Remove the challenge TXT record if it is still there."""
        client, _ = self.new_client(request)
        node_name = self._node_name(request)

        token = set_zone(client.hostname)
        try:
            logger.info(
                "Cleaning up DNS-01 challenge",
                extra={"fqdn": request.resolved_fqdn, "node_name": node_name},
            )
            client.remove_dns_record(node_name, request.key)
        finally:
            reset_zone(token)


def decode_request(raw: Mapping[str, Any] | str | bytes) -> ChallengeRequest:
    """Decode a challenge request sent by the host as JSON.

    Raises:
        SolverConfigError: If the request is malformed.
    """
    try:
        if isinstance(raw, str | bytes):
            return ChallengeRequest.model_validate_json(raw)
        return ChallengeRequest.model_validate(raw)
    except ValidationError as exc:
        raise SolverConfigError(f"error decoding challenge request: {exc}") from exc
