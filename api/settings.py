"""Runtime configuration read from the environment (and an optional .env file)."""

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    database_url: Optional[str] = None
    pg_host: str = "localhost"
    pg_port: int = 5432
    pg_database: str = "round_stats"
    pg_user: str = "postgres"
    pg_password: str = ""
    pool_min_size: int = Field(1, ge=1)
    pool_max_size: int = Field(10, ge=1)
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    log_level: str = "INFO"
    apply_schema: bool = False

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        if load_dotenv_file:
            load_dotenv()
        env = os.environ
        origins = env.get("CORS_ORIGINS")
        return cls(
            database_url=env.get("DATABASE_URL") or None,
            pg_host=env.get("PGHOST", "localhost"),
            pg_port=int(env.get("PGPORT", "5432")),
            pg_database=env.get("PGDATABASE", "round_stats"),
            pg_user=env.get("PGUSER", "postgres"),
            pg_password=env.get("PGPASSWORD", ""),
            pool_min_size=int(env.get("DB_POOL_MIN_SIZE", "1")),
            pool_max_size=int(env.get("DB_POOL_MAX_SIZE", "10")),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins else ["http://localhost:5173"]
            ),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            apply_schema=env.get("APPLY_SCHEMA", "").lower() in ("1", "true", "yes"),
        )
