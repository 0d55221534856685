# =============================================================================
# app/middleware/cors.py - Path-Scoped CORS Middleware
# =============================================================================
# Starlette's CORSMiddleware applies one policy to every path. This module
# keeps a static table of CorsRule entries and hands each request to the
# CORSMiddleware built for the first rule whose path pattern matches.
# Requests matching no rule get no CORS headers at all.
#
# Usage:
#   app.add_middleware(UrlBasedCorsMiddleware, rules=settings.cors_rules)
# =============================================================================

import logging
from typing import Sequence

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from core.models import CorsRule
from lib.utils import path_matches

logger = logging.getLogger(__name__)

# Matches every origin; used instead of "*" for credentialed rules so the
# caller's Origin is echoed back
ANY_ORIGIN_REGEX = ".*"


class RuleCorsMiddleware(CORSMiddleware):
    """
    CORSMiddleware that allows exactly the rule's request headers.

    Starlette always adds the CORS-safelisted headers (Accept-Language,
    Content-Language, ...) to the allowed set; a rule with an explicit
    header list admits and advertises only those headers.
    """

    def __init__(self, app: ASGIApp, rule: CorsRule, **kwargs) -> None:
        super().__init__(app, allow_headers=list(rule.allowed_headers), **kwargs)
        if rule.allowed_headers and "*" not in rule.allowed_headers:
            self.allow_headers = [header.lower() for header in rule.allowed_headers]
            self.preflight_headers["Access-Control-Allow-Headers"] = ", ".join(
                sorted(rule.allowed_headers)
            )


def build_cors_policy(app: ASGIApp, rule: CorsRule) -> CORSMiddleware:
    """Create the Starlette CORS middleware enforcing a single rule."""
    origins = [origin for origin in rule.allowed_origins if origin != "*"]
    origin_regex = None

    if rule.allows_any_origin:
        if rule.allow_credentials:
            origin_regex = ANY_ORIGIN_REGEX
        else:
            origins = ["*"]

    return RuleCorsMiddleware(
        app,
        rule,
        allow_origins=origins,
        allow_origin_regex=origin_regex,
        allow_methods=list(rule.allowed_methods),
        allow_credentials=rule.allow_credentials,
    )


class UrlBasedCorsMiddleware:
    """
    ASGI middleware applying CORS policies from a static (path, policy) table.
    """

    def __init__(self, app: ASGIApp, rules: Sequence[CorsRule] = ()) -> None:
        self.app = app
        self.policies = [(rule.path, build_cors_policy(app, rule)) for rule in rules]
        for rule in rules:
            logger.info(
                f"CORS rule for {rule.path}: origins={list(rule.allowed_origins)} "
                f"methods={list(rule.allowed_methods)}"
            )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            for pattern, policy in self.policies:
                if path_matches(scope["path"], [pattern]):
                    await policy(scope, receive, send)
                    return

        await self.app(scope, receive, send)
