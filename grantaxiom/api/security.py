from __future__ import annotations

import os
import secrets

from fastapi import FastAPI, HTTPException, Request
from fastapi.openapi.utils import get_openapi

PROTECTED_PATH_PREFIX = "/sessions"
READ_METHODS = {"get", "head"}


def api_key_configured() -> str | None:
    return os.getenv("GRANTAXIOM_API_KEY") or os.getenv("API_KEY")


def read_auth_required() -> bool:
    return os.getenv("GRANTAXIOM_REQUIRE_AUTH_FOR_READS", "false").strip().lower() == "true"


def is_protected_operation(method: str, path: str) -> bool:
    if not path.startswith(PROTECTED_PATH_PREFIX):
        return False
    if method.lower() in READ_METHODS:
        return read_auth_required()
    return True


def require_api_key_if_configured(request: Request, *, for_read: bool = False) -> None:
    expected = api_key_configured()
    if not expected:
        return
    if for_read and not read_auth_required():
        return

    provided = request.headers.get("x-api-key") or ""
    if not secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=401, detail="Unauthorized")


def install_openapi_api_key_security(app: FastAPI) -> None:
    """Advertise the optional X-API-Key scheme on session operations."""

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=(
                f"{app.description}\n\n"
                "Optional API key auth: set `GRANTAXIOM_API_KEY` on the server and send "
                "`X-API-Key` with session changes. Session reads also need it when "
                "`GRANTAXIOM_REQUIRE_AUTH_FOR_READS=true`."
            ),
            routes=app.routes,
        )
        schema.setdefault("components", {}).setdefault("securitySchemes", {})["ApiKeyAuth"] = {
            "type": "apiKey",
            "in": "header",
            "name": "X-API-Key",
        }
        for path, methods in (schema.get("paths") or {}).items():
            for method_name, operation in methods.items():
                if isinstance(operation, dict) and is_protected_operation(method_name, path):
                    operation["security"] = [{"ApiKeyAuth": []}]

        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi
