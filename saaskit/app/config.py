"""Environment driven settings for the subscription core."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from dotenv import load_dotenv

from .entitlements.models import PlanKey


@dataclass(frozen=True)
class Settings:
    """Configuration for catalog pricing, roles, sessions and persistence."""

    price_ids: Dict[PlanKey, str]
    admin_role: str
    database_url: Optional[str]
    db_connect_timeout: int
    allowed_origins: Tuple[str, ...]
    session_cookie_name: str = "session"


_PRICE_ID_VARIABLES: Dict[PlanKey, str] = {
    PlanKey.BASIC: "STRIPE_BASIC_PRICE_ID",
    PlanKey.PRO: "STRIPE_PRO_PRICE_ID",
    PlanKey.ENTERPRISE: "STRIPE_ENTERPRISE_PRICE_ID",
}


def _to_int(value: Optional[str], *, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected integer value, got {value!r}") from exc


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Load :class:`Settings` from environment variables.

    When ``env`` is omitted the process environment is used, after merging
    any ``.env`` file found next to the working directory.
    """

    if env is None:
        load_dotenv()
        env_mapping: Mapping[str, str] = os.environ
    else:
        env_mapping = env

    price_ids = {
        plan_key: (env_mapping.get(variable) or f"price_{plan_key.value}_placeholder").strip()
        for plan_key, variable in _PRICE_ID_VARIABLES.items()
    }
    admin_role = (env_mapping.get("ADMIN_ROLE") or "admin").strip().lower() or "admin"
    database_url = env_mapping.get("DATABASE_URL") or None
    db_connect_timeout = max(1, _to_int(env_mapping.get("DB_CONNECT_TIMEOUT"), default=5))
    allowed_origins = tuple(
        origin.strip()
        for origin in env_mapping.get("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    )
    session_cookie_name = (env_mapping.get("SESSION_COOKIE_NAME") or "session").strip() or "session"

    return Settings(
        price_ids=price_ids,
        admin_role=admin_role,
        database_url=database_url,
        db_connect_timeout=db_connect_timeout,
        allowed_origins=allowed_origins,
        session_cookie_name=session_cookie_name,
    )
