"""
Pydantic Schemas - Data Validation Models

Defines the Pydantic schemas used throughout the mapper:
- Broker channel messages (headers + body)
- Request metadata taken from headers
- Canonical payload and publication event

Field names follow the wire format (camelCase), so model_dump() output is
what gets serialized.

Usage:
    from utils.schemas import BrokerMessage

    message = BrokerMessage(**raw_message)
    origin = message.headers.get("Origin-System-Id")
"""

from pydantic import BaseModel, ConfigDict, Field


class BrokerMessage(BaseModel):
    """Message travelling on a Redis channel.

    Standard format for inbound and outbound traffic:
    {
        "headers": {"X-Request-Id": "tid_123", "Message-Timestamp": "...", ...},
        "body": "{\\"uuid\\": \\"...\\", ...}"
    }
    """

    headers: dict[str, str] = Field(default_factory=dict, description="Message headers")
    body: str = Field(default="", description="Raw message body")


class RequestContext(BaseModel):
    """Out-of-band request metadata, read from message or HTTP headers."""

    model_config = ConfigDict(frozen=True)

    publishReference: str = Field(..., min_length=1, description="X-Request-Id header")
    lastModified: str = Field(..., min_length=1, description="Message-Timestamp header")


class VideoFields(BaseModel):
    """Fields extracted from a native Brightcove video record."""

    model_config = ConfigDict(frozen=True)

    uuid: str
    id: str
    publishedDate: str
    fileName: str = ""


class Identifier(BaseModel):
    """Source-system identifier of a video."""

    model_config = ConfigDict(frozen=True)

    authority: str
    identifierValue: str


class Payload(BaseModel):
    """Canonical video description."""

    model_config = ConfigDict(frozen=True)

    uuid: str
    identifiers: tuple[Identifier, ...]
    publishedDate: str
    mediaType: str
    publishReference: str
    lastModified: str


class PublicationEvent(BaseModel):
    """Envelope carrying a serialized Payload plus routing metadata."""

    model_config = ConfigDict(frozen=True)

    contentUri: str
    payload: str = Field(..., description="Serialized Payload JSON")
    lastModified: str
