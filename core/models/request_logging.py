# =============================================================================
# core/models/request_logging.py - Request Logging & CORS Schemas
# =============================================================================
# These models are the explicit configuration handed to the HTTP middleware
# at startup:
# - RequestLoggingConfig: What the request/response logging middleware records
# - CorsRule: One row of the static path-scoped CORS table
#
# Both are immutable; configuration does not change while the app runs.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_PAYLOAD_LENGTH = 10_000


class RequestLoggingConfig(BaseModel):
    """
    Configuration for the request/response logging middleware.

    Message layout (before/after request):
        <prefix><METHOD> <path>[?<query>]
        <Header-Name>: <value>          (one line per header value)
        client=<addr>;session=<id>;user=<id>
        payload=
        <body text>
        <suffix>

    Example:
        {
            "include_headers": true,
            "include_payload": false,
            "exclude_paths": ["/health"]
        }
    """

    model_config = ConfigDict(frozen=True)

    # -------------------------------------------------------------------------
    # What to include
    # -------------------------------------------------------------------------

    include_client_info: bool = Field(
        default=True,
        description="Log client address, session id and authenticated user"
    )

    include_query_string: bool = Field(
        default=True,
        description="Append the query string to the logged path"
    )

    include_headers: bool = Field(
        default=True,
        description="Log one line per request/response header value"
    )

    include_payload: bool = Field(
        default=True,
        description="Capture and log request/response bodies"
    )

    # Bytes beyond this limit are dropped from the capture, never an error
    max_payload_length: int = Field(
        default=DEFAULT_MAX_PAYLOAD_LENGTH,
        ge=0,
        description="Maximum number of body bytes captured and logged"
    )

    # -------------------------------------------------------------------------
    # Message markers
    # -------------------------------------------------------------------------

    before_message_prefix: str = "Before request ["
    before_message_suffix: str = "]"
    after_message_prefix: str = "After request ["
    after_message_suffix: str = "]"
    response_message_prefix: str = "After response ["
    response_message_suffix: str = "]"

    # -------------------------------------------------------------------------
    # Exclusions
    # -------------------------------------------------------------------------

    exclude_paths: tuple[str, ...] = Field(
        default=(),
        description="Glob patterns of paths that are never logged (e.g. '/health')"
    )


class CorsRule(BaseModel):
    """
    CORS policy for one path pattern.

    Example:
        {
            "path": "/v2/api-docs",
            "allowed_origins": ["*"],
            "allowed_methods": ["GET"],
            "allowed_headers": ["Origin", "Content-Type", "Accept"],
            "allow_credentials": true
        }
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(
        ...,
        min_length=1,
        description="Glob pattern of the paths this rule applies to"
    )
    allowed_origins: tuple[str, ...] = Field(
        default=("*",),
        description="Allowed origins; '*' allows any origin"
    )
    allowed_methods: tuple[str, ...] = Field(
        default=("GET",),
        description="HTTP methods allowed cross-origin"
    )
    allowed_headers: tuple[str, ...] = Field(
        default=(),
        description="Request headers allowed cross-origin"
    )
    allow_credentials: bool = Field(
        default=False,
        description="Whether cookies/credentials are allowed"
    )

    @property
    def allows_any_origin(self) -> bool:
        return "*" in self.allowed_origins
