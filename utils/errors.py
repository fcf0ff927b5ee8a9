"""
Mapping Errors - Rejection Taxonomy

Every rejection raised while turning a native video record into a publication
event derives from MappingError. Adapters decide how each one is surfaced
(dropped with a log line on the broker path, an HTTP status on the API path).
"""


class MappingError(Exception):
    """Base class for record rejections.

    Attributes:
        code: Machine-readable reason
        message: Human-readable description
    """

    code = "mapping_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedInputError(MappingError):
    """Body is not a well-formed JSON object."""

    code = "malformed_input"


class MissingMetadataError(MappingError):
    """A required request header (correlation id or timestamp) is absent."""

    code = "missing_header"

    def __init__(self, header: str) -> None:
        super().__init__(f"{header} not found in message headers. Skipping message.")
        self.header = header


class MissingFieldError(MappingError):
    """A required field of the native video record is absent, empty or not a string."""

    code = "missing_field"

    def __init__(self, field: str) -> None:
        super().__init__(
            f"{field} field of native brightcove video JSON is null. Skipping message."
        )
        self.field = field


class SerializationError(MappingError):
    """An already validated structure could not be encoded."""

    code = "serialization_failure"
