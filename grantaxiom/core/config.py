# grantaxiom/core/config.py

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_optional_float(name: str) -> Optional[float]:
    raw = str(os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_bool(name: str, default: str) -> bool:
    return _env(name, default).strip().lower() == "true"


class OracleSettings(BaseModel):
    """Oracle model and per-call tuning."""

    model: str = "o4-mini"
    temperature: Optional[float] = None
    reasoning_effort_enabled: bool = True
    timeout_s: Optional[float] = None
    audit_reasoning_budget: int = 2048
    simulation_reasoning_budget: int = 4096


class WorkbenchSettings(BaseModel):
    """Limits applied to proposal context and uploaded references."""

    snippet_chars: int = 300
    max_upload_mb: int = 10
    simulation_proposal_chars: int = 5000
    simulation_reference_limit: int = 5
    simulation_snippet_chars: int = 200


class GrantAxiomConfig(BaseModel):
    oracle: OracleSettings = OracleSettings()
    workbench: WorkbenchSettings = WorkbenchSettings()
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    @classmethod
    def from_env(cls) -> "GrantAxiomConfig":
        """Loads configuration from environment variables."""
        return cls(
            oracle=OracleSettings(
                model=_env("GRANTAXIOM_MODEL", "o4-mini"),
                temperature=_env_optional_float("GRANTAXIOM_TEMPERATURE"),
                reasoning_effort_enabled=_env_bool("GRANTAXIOM_REASONING_EFFORT_ENABLED", "true"),
                timeout_s=_env_optional_float("GRANTAXIOM_LLM_TIMEOUT_S"),
                audit_reasoning_budget=int(_env("GRANTAXIOM_AUDIT_REASONING_BUDGET", "2048")),
                simulation_reasoning_budget=int(_env("GRANTAXIOM_SIMULATION_REASONING_BUDGET", "4096")),
            ),
            workbench=WorkbenchSettings(
                snippet_chars=int(_env("GRANTAXIOM_SNIPPET_CHARS", "300")),
                max_upload_mb=int(_env("GRANTAXIOM_MAX_UPLOAD_MB", "10")),
            ),
            api_host=_env("GRANTAXIOM_API_HOST", "0.0.0.0"),
            api_port=int(_env("GRANTAXIOM_API_PORT", "8000")),
            debug=_env_bool("GRANTAXIOM_DEBUG", "false"),
        )


config = GrantAxiomConfig.from_env()
