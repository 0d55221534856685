# =============================================================================
# lib/media_types.py - Media Type Parsing and Matching
# =============================================================================
# Parses Content-Type values and decides which bodies are safe to render
# as text in debug logs.
#
# Usage:
#   from lib.media_types import MediaType, is_visible
#
#   MediaType.parse("application/*+json").includes(
#       MediaType.parse("application/problem+json")
#   )  # True
#
#   is_visible("application/json; charset=utf-8")  # True
#   is_visible("image/png")                         # False
# =============================================================================

from dataclasses import dataclass, field

from lib.utils import ApplicationError

WILDCARD = "*"


class InvalidMediaTypeError(ApplicationError):
    """Raised when a Content-Type value cannot be parsed."""

    def __init__(self, value: str, reason: str):
        super().__init__(
            message=f"Invalid media type '{value}': {reason}",
            code="INVALID_MEDIA_TYPE",
            suggestion="Use the form type/subtype, e.g. application/json",
            details={"value": value, "reason": reason},
        )


@dataclass(frozen=True)
class MediaType:
    """
    An immutable media type such as ``text/plain; charset=utf-8``.

    Type and subtype are stored lowercase. Parameter names are lowercase,
    parameter values keep their case with surrounding quotes removed.
    """

    type: str
    subtype: str
    parameters: dict[str, str] = field(default_factory=dict, compare=False)

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, value: str) -> "MediaType":
        """
        Parse a Content-Type header value.

        Args:
            value: Raw header value, e.g. "application/json; charset=UTF-8"

        Returns:
            MediaType: The parsed media type

        Raises:
            InvalidMediaTypeError: If the value is empty or malformed
        """
        if not value or not value.strip():
            raise InvalidMediaTypeError(value or "", "media type must not be empty")

        full_type, *raw_params = value.split(";")
        full_type = full_type.strip().lower()

        # A bare "*" is shorthand for "*/*"
        if full_type == WILDCARD:
            full_type = "*/*"

        if "/" not in full_type:
            raise InvalidMediaTypeError(value, "does not contain '/'")

        type_, _, subtype = full_type.partition("/")
        if not type_ or not subtype:
            raise InvalidMediaTypeError(value, "type and subtype must not be empty")
        if "/" in subtype:
            raise InvalidMediaTypeError(value, "subtype must not contain '/'")
        if type_ == WILDCARD and subtype != WILDCARD:
            raise InvalidMediaTypeError(value, "wildcard type is legal only in '*/*'")

        parameters: dict[str, str] = {}
        for raw in raw_params:
            raw = raw.strip()
            if not raw:
                continue
            name, sep, param_value = raw.partition("=")
            if not sep or not name.strip():
                raise InvalidMediaTypeError(value, f"malformed parameter '{raw}'")
            parameters[name.strip().lower()] = param_value.strip().strip('"')

        return cls(type=type_, subtype=subtype, parameters=parameters)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def charset(self) -> str | None:
        """The charset parameter, if declared."""
        return self.parameters.get("charset")

    @property
    def is_wildcard_type(self) -> bool:
        return self.type == WILDCARD

    @property
    def is_wildcard_subtype(self) -> bool:
        """True for "*" and suffix wildcards such as "*+json"."""
        return self.subtype == WILDCARD or self.subtype.startswith("*+")

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def includes(self, other: "MediaType") -> bool:
        """
        Check whether this media type includes another.

        Examples:
            text/*            includes text/plain
            application/*+xml includes application/soap+xml
            application/json  does not include application/*
        """
        if self.is_wildcard_type:
            return True
        if self.type != other.type:
            return False
        if self.subtype == other.subtype:
            return True
        if not self.is_wildcard_subtype:
            return False

        this_plus = self.subtype.rfind("+")
        if this_plus == -1:
            return True

        other_plus = other.subtype.rfind("+")
        if other_plus == -1:
            return False

        this_prefix = self.subtype[:this_plus]
        this_suffix = self.subtype[this_plus + 1:]
        other_suffix = other.subtype[other_plus + 1:]
        return this_prefix == WILDCARD and this_suffix == other_suffix

    def __str__(self) -> str:
        result = f"{self.type}/{self.subtype}"
        for name, value in self.parameters.items():
            result += f";{name}={value}"
        return result


# =============================================================================
# Visible Types
# =============================================================================
# Bodies of these types are rendered as text in debug logs.
# Anything else (images, octet streams, archives) is never rendered.

VISIBLE_TYPES: tuple[MediaType, ...] = (
    MediaType.parse("text/*"),
    MediaType.parse("application/x-www-form-urlencoded"),
    MediaType.parse("application/json"),
    MediaType.parse("application/xml"),
    MediaType.parse("application/*+json"),
    MediaType.parse("application/*+xml"),
    MediaType.parse("multipart/form-data"),
)


def is_visible(content_type: str | None) -> bool:
    """
    Check whether a body with this Content-Type may be logged as text.

    Absent, empty, or malformed content types are never visible.
    """
    if not content_type:
        return False
    try:
        media_type = MediaType.parse(content_type)
    except InvalidMediaTypeError:
        return False
    return any(visible.includes(media_type) for visible in VISIBLE_TYPES)
