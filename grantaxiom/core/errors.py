from __future__ import annotations

from typing import Any, List, Literal, Optional

InvalidResponseKind = Literal["invalid_json", "invalid_schema"]


class GrantAxiomError(Exception):
    """Base class for workbench errors."""


class OracleUnavailableError(GrantAxiomError):
    """Raised when no oracle credentials are configured."""


class InvalidOracleResponseError(GrantAxiomError):
    """The oracle answered, but the payload is not a usable audit report."""

    def __init__(self, kind: InvalidResponseKind, detail: str, errors: Optional[List[Any]] = None) -> None:
        super().__init__(f"{kind}: {detail}")
        self.kind = kind
        self.detail = detail
        self.errors = list(errors or [])
