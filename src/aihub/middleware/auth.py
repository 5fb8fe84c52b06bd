"""Authentication middleware guarding the AI and provider endpoints."""

import hmac
import logging
from typing import Callable

import jwt
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from aihub.config import Settings
from aihub.utils.errors import ErrorCode, create_error_response


logger = logging.getLogger(__name__)

# Probe endpoints stay reachable without credentials
PUBLIC_PATHS = frozenset({"/health", "/health/live", "/health/ready"})


def extract_bearer_token(request: Request) -> str | None:
    """Return the token from an ``Authorization: Bearer`` header, if any."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[len("Bearer ") :] or None
    return None


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware to handle authentication based on configured mode.

    Supports three authentication modes:
    - none: No authentication required (development only)
    - api_key: API key via X-API-Key header or Authorization Bearer
    - jwt: JWT token via Authorization Bearer header
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings
        self.auth_mode = settings.auth.mode

        if self.auth_mode == "none":
            logger.warning(
                "Authentication is DISABLED. This should only be used in development.",
            )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Reject the request with 401 unless it carries valid credentials."""
        if request.url.path in PUBLIC_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        if self.auth_mode == "none":
            return await call_next(request)

        if self.auth_mode == "api_key":
            authenticated = self._validate_api_key(request)
        elif self.auth_mode == "jwt":
            authenticated = self._validate_jwt(request)
        else:
            logger.error(f"Unknown auth mode: {self.auth_mode}")
            return JSONResponse(
                status_code=500,
                content={"detail": "Server configuration error"},
            )

        if not authenticated:
            error = create_error_response(
                ErrorCode.AUTH_INVALID,
                request_id=getattr(request.state, "request_id", None),
            )
            return JSONResponse(status_code=401, content=error.model_dump(mode="json"))

        return await call_next(request)

    def _validate_api_key(self, request: Request) -> bool:
        """Check the presented key against the configured keys."""
        api_key = request.headers.get("X-API-Key") or extract_bearer_token(request)
        if not api_key:
            logger.debug("No API key provided in request")
            return False

        for key_config in self.settings.auth.api_keys:
            if hmac.compare_digest(key_config.key, api_key):
                logger.debug(f"API key validated: {key_config.name}")
                return True

        logger.warning("Invalid API key provided")
        return False

    def _validate_jwt(self, request: Request) -> bool:
        """Decode and verify the bearer JWT."""
        token = extract_bearer_token(request)
        if not token:
            logger.debug("No Bearer token provided in request")
            return False

        jwt_settings = self.settings.auth.jwt
        if not jwt_settings.secret:
            logger.error("JWT secret not configured")
            return False

        try:
            payload = jwt.decode(
                token,
                jwt_settings.secret,
                algorithms=[jwt_settings.algorithm],
                issuer=jwt_settings.issuer,
                audience=jwt_settings.audience,
            )
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token has expired")
            return False
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid JWT token: {e}")
            return False

        logger.debug(f"JWT validated for subject {payload.get('sub')}")
        return True
