"""Application configuration read from the environment."""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CORS_ORIGINS = ["http://localhost:5173"]


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


@dataclass
class AppConfig:
    """Settings for the HTTP app.

    Attributes:
        default_tenant_id: Tenant used when a request names none
        require_tenant: Reject requests that resolve no tenant
        metadata_path: Directory holding entities/*.yaml, if any
        cors_origins: Origins allowed by the CORS middleware
    """

    default_tenant_id: str | None = None
    require_tenant: bool = False
    metadata_path: Path | None = None
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create config from ADMINKIT_* environment variables."""
        metadata_path = os.environ.get("ADMINKIT_METADATA_PATH")
        origins = os.environ.get("ADMINKIT_CORS_ORIGINS")
        return cls(
            default_tenant_id=os.environ.get("ADMINKIT_DEFAULT_TENANT_ID") or None,
            require_tenant=_env_flag("ADMINKIT_REQUIRE_TENANT"),
            metadata_path=Path(metadata_path) if metadata_path else None,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()]
            if origins
            else list(DEFAULT_CORS_ORIGINS),
        )
