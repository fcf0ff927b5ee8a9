"""
Video Mapper - Brightcove Video to Publication Event

Turns a native Brightcove video record into a serialized publication event.
Both the broker consumer and the HTTP API call into VideoMapper.map_video, so
validation and output are identical on every delivery path.

Usage:
    from apps.video_mapper.mapper import VideoMapper

    mapper = VideoMapper(logger)
    record = parse_record(body)
    context = context_from_headers(headers)
    event_bytes = mapper.map_video(record, context)
"""

import logging
import posixpath
from typing import Any, Mapping

import orjson
from pydantic import ValidationError

from utils.errors import (
    MalformedInputError,
    MissingFieldError,
    MissingMetadataError,
    SerializationError,
)
from utils.schemas import (
    Identifier,
    Payload,
    PublicationEvent,
    RequestContext,
    VideoFields,
)

VIDEO_CONTENT_URI_BASE = "http://video-mapper-iw-uk-p.svc.ft.com/video/model/"
BRIGHTCOVE_AUTHORITY = "http://api.ft.com/system/BRIGHTCOVE"
VIDEO_MEDIA_TYPE_BASE = "video/"
BRIGHTCOVE_ORIGIN = "http://cmdb.ft.com/systems/brightcove"

ORIGIN_HEADER = "Origin-System-Id"
REQUEST_ID_HEADER = "X-Request-Id"
TIMESTAMP_HEADER = "Message-Timestamp"

# (record key, VideoFields attribute), in validation order
REQUIRED_FIELDS = (
    ("uuid", "uuid"),
    ("id", "id"),
    ("updated_at", "publishedDate"),
)
FILE_NAME_KEY = "name"


def parse_record(body: str | bytes) -> dict[str, Any]:
    """
    Decode a raw request/message body into a native video record.

    Raises:
        MalformedInputError: If the body is not JSON or not a JSON object
    """
    try:
        record = orjson.loads(body)
    except orjson.JSONDecodeError as e:
        raise MalformedInputError(
            f"Video JSON from Brightcove couldn't be unmarshalled. Skipping invalid JSON: {e}"
        ) from e

    if not isinstance(record, dict):
        raise MalformedInputError(
            f"Video JSON from Brightcove is not an object (got {type(record).__name__}). Skipping message."
        )
    return record


def context_from_headers(headers: Mapping[str, str]) -> RequestContext:
    """
    Read the correlation id and timestamp from message or HTTP headers.

    Header lookup goes through headers.get, so case-insensitive mappings
    (such as Starlette's Headers) are honoured.

    Raises:
        MissingMetadataError: If either header is absent or empty
    """
    publish_reference = headers.get(REQUEST_ID_HEADER) or ""
    if not publish_reference:
        raise MissingMetadataError(REQUEST_ID_HEADER)

    last_modified = headers.get(TIMESTAMP_HEADER) or ""
    if not last_modified:
        raise MissingMetadataError(TIMESTAMP_HEADER)

    return RequestContext(publishReference=publish_reference, lastModified=last_modified)


def build_identifier(source_id: str) -> Identifier:
    """Identifier of a video in Brightcove."""
    return Identifier(authority=BRIGHTCOVE_AUTHORITY, identifierValue=source_id)


def resolve_media_type(file_name: str) -> str:
    """
    Derive the media type from a file name extension.

    "clip.mp4" gives "video/mp4". Extension case is kept as given. A name
    without an extension gives the bare "video/" prefix.
    """
    _, dot, extension = posixpath.basename(file_name).rpartition(".")
    return VIDEO_MEDIA_TYPE_BASE + (extension if dot else "")


def content_uri(uuid: str) -> str:
    return VIDEO_CONTENT_URI_BASE + uuid


def _serialize(model: Payload | PublicationEvent) -> bytes:
    try:
        return orjson.dumps(model.model_dump(mode="json"))
    except (TypeError, orjson.JSONEncodeError) as e:
        raise SerializationError(
            f"Couldn't marshal {type(model).__name__} {model!r}, skipping message: {e}"
        ) from e


def assemble_payload(
    fields: VideoFields,
    identifier: Identifier,
    media_type: str,
    context: RequestContext,
) -> bytes:
    """
    Build and serialize the canonical payload of a video.

    Raises:
        SerializationError: If the payload cannot be encoded
    """
    try:
        payload = Payload(
            uuid=fields.uuid,
            identifiers=(identifier,),
            publishedDate=fields.publishedDate,
            mediaType=media_type,
            publishReference=context.publishReference,
            lastModified=context.lastModified,
        )
    except ValidationError as e:
        raise SerializationError(f"Couldn't build payload, skipping message: {e}") from e
    return _serialize(payload)


def build_event(uuid: str, payload: bytes, last_modified: str) -> bytes:
    """
    Wrap a serialized payload into a publication event and serialize it.

    Raises:
        SerializationError: If the event cannot be encoded
    """
    try:
        event = PublicationEvent(
            contentUri=content_uri(uuid),
            payload=payload.decode("utf-8"),
            lastModified=last_modified,
        )
    except (UnicodeDecodeError, ValidationError) as e:
        raise SerializationError(f"Couldn't build event, skipping message: {e}") from e
    return _serialize(event)


class VideoMapper:
    """
    Maps native Brightcove video records to publication events.

    Holds no per-record state; one instance is shared by every adapter.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """
        Initialize mapper.

        Args:
            logger: Logger for warnings raised while extracting fields
        """
        self.logger = logger or logging.getLogger(__name__)

    def extract_fields(self, record: Mapping[str, Any]) -> VideoFields:
        """
        Pull the fields the mapper needs out of a native video record.

        Required fields are checked in order (uuid, id, updated_at) and the
        first invalid one is reported. A missing "name" only logs a warning.

        Args:
            record: Decoded native video JSON

        Returns:
            Extracted fields

        Raises:
            MissingFieldError: If a required field is absent, empty or not a string
        """
        values: dict[str, str] = {}
        for key, attribute in REQUIRED_FIELDS:
            value = record.get(key)
            if not isinstance(value, str) or not value:
                raise MissingFieldError(key)
            values[attribute] = value

        file_name = record.get(FILE_NAME_KEY)
        if not isinstance(file_name, str) or not file_name:
            self.logger.warning(
                "filename field of native brightcove video JSON is null, type will be %s",
                VIDEO_MEDIA_TYPE_BASE,
                extra={"uuid": values["uuid"]},
            )
            file_name = ""

        return VideoFields(fileName=file_name, **values)

    def map_video(self, record: Mapping[str, Any], context: RequestContext) -> bytes:
        """
        Map a native video record to a serialized publication event.

        Args:
            record: Decoded native video JSON
            context: Request id and timestamp of the inbound request

        Returns:
            Publication event JSON bytes

        Raises:
            MissingFieldError: If a required field is invalid
            SerializationError: If the payload or event cannot be encoded
        """
        fields = self.extract_fields(record)
        identifier = build_identifier(fields.id)
        media_type = resolve_media_type(fields.fileName)

        payload = assemble_payload(fields, identifier, media_type, context)
        return build_event(fields.uuid, payload, context.lastModified)
