"""Pydantic models for Dynu API resources and solver input."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

# =============================================================================
# Enums
# =============================================================================


class RecordType(StrEnum):
    """DNS record types used by the solver."""

    TXT = "TXT"


class ChallengeAction(StrEnum):
    """Actions a challenge host may request."""

    PRESENT = "Present"
    CLEANUP = "CleanUp"


# =============================================================================
# Dynu API Models
# =============================================================================


class ApiException(BaseModel):
    """Error details embedded in a Dynu API response."""

    status_code: int | None = Field(default=None, alias="statusCode")
    type: str | None = None
    message: str | None = None

    model_config = {"populate_by_name": True}


class Domain(BaseModel):
    """Root domain returned by GET /dns/getroot/{hostname}."""

    status_code: int | None = Field(default=None, alias="statusCode")
    id: int = 0
    hostname: str | None = None
    domain_name: str | None = Field(default=None, alias="domainName")
    node: str | None = None
    exception: ApiException | None = None

    model_config = {"populate_by_name": True}


class DnsRecord(BaseModel):
    """Request body for POST /dns/{domainId}/record.

    The TTL travels as a string on the way in; optional fields are left
    out of the body when unset.
    """

    node_name: str = Field(alias="nodeName")
    record_type: RecordType = Field(default=RecordType.TXT, alias="recordType")
    text_data: str = Field(alias="textData")
    ttl: str
    domain_id: int | None = Field(default=None, alias="domainId")
    state: bool | None = None

    model_config = {"populate_by_name": True}

    def to_json_bytes(self) -> bytes:
        """Serialize to the JSON body the API expects."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode()


class DnsRecordResponse(BaseModel):
    """DNS record as returned by the Dynu API."""

    status_code: int | None = Field(default=None, alias="statusCode")
    id: int
    domain_id: int | None = Field(default=None, alias="domainId")
    domain_name: str | None = Field(default=None, alias="domainName")
    node_name: str = Field(default="", alias="nodeName")
    hostname: str | None = None
    record_type: str | None = Field(default=None, alias="recordType")
    ttl: int | None = None
    state: bool | None = None
    content: str | None = None
    updated_on: str | None = Field(default=None, alias="updatedOn")
    text_data: str | None = Field(default=None, alias="textData")

    model_config = {"populate_by_name": True}

    @field_validator("node_name", mode="before")
    @classmethod
    def _null_node_name(cls, value: Any) -> Any:
        # Dynu sends null node names for some apex records
        return "" if value is None else value

    def matches(self, node_name: str, text_data: str) -> bool:
        """Check whether this record carries the given node name and text."""
        return self.node_name == node_name and self.text_data == text_data


class DnsRecords(BaseModel):
    """Record list returned by GET /dns/{domainId}/record."""

    status_code: int | None = Field(default=None, alias="statusCode")
    dns_records: list[DnsRecordResponse] = Field(default_factory=list, alias="dnsRecords")

    model_config = {"populate_by_name": True}

    @field_validator("dns_records", mode="before")
    @classmethod
    def _null_records(cls, value: Any) -> Any:
        return [] if value is None else value


# =============================================================================
# Solver Models
# =============================================================================


class SecretKeySelector(BaseModel):
    """Reference to a single key inside a named secret."""

    name: str
    key: str


class SolverConfig(BaseModel):
    """Per-issuer solver configuration."""

    api_key: str = Field(default="", alias="apiKey")
    ttl: int = 300
    api_key_secret_key_ref: SecretKeySelector | None = Field(
        default=None, alias="apikeySecretKeyRef"
    )

    model_config = {"populate_by_name": True}


class ChallengeRequest(BaseModel):
    """DNS-01 challenge request handed over by the challenge host."""

    uid: str | None = None
    action: ChallengeAction | None = None
    type: str | None = None
    dns_name: str | None = Field(default=None, alias="dnsName")
    key: str
    resource_namespace: str = Field(default="", alias="resourceNamespace")
    resolved_fqdn: str = Field(alias="resolvedFQDN")
    resolved_zone: str = Field(alias="resolvedZone")
    allow_ambient_credentials: bool = Field(default=False, alias="allowAmbientCredentials")
    config: dict[str, Any] | None = None

    model_config = {"populate_by_name": True}
