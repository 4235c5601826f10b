import os
from typing import Literal, Mapping

from pydantic import BaseModel, Field

MAX_ROLLS_PER_CLIENT = 1000


def _flag(value: str | None) -> bool:
    if value is None:
        return False
    return value.lower() == "true"


class Settings(BaseModel):
    PORT: int = Field(3000, ge=1, le=65535)
    HOST: str = "0.0.0.0"

    # Roll log
    STORE_ROLLS: bool = False
    ADMIN_TOKEN: str = ""

    # Outer surface
    ALLOW_ORIGIN: str = "*"
    STATIC_DIR: str = "public"
    LOG_LEVEL: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"

    # Rate limiting (opt-in)
    RATE_LIMIT_ENABLED: bool = False
    ROLL_RATE_LIMIT: str = "600/minute"
    ADMIN_RATE_LIMIT: str = "60/minute"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        data = {
            "STORE_ROLLS": _flag(env.get("STORE_ROLLS")),
            "ADMIN_TOKEN": env.get("ADMIN_TOKEN") or "",
            "ALLOW_ORIGIN": env.get("ALLOW_ORIGIN") or "*",
            "RATE_LIMIT_ENABLED": _flag(env.get("RATE_LIMIT_ENABLED")),
        }
        if env.get("LOG_LEVEL"):
            data["LOG_LEVEL"] = env["LOG_LEVEL"].upper()
        for key in ("PORT", "HOST", "STATIC_DIR", "ROLL_RATE_LIMIT", "ADMIN_RATE_LIMIT"):
            if env.get(key):
                data[key] = env[key]
        return cls(**data)
