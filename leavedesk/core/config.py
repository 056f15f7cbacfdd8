import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class Config(BaseModel):
    app_name: str = "Leave Desk"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./leavedesk.db")

    # Auth
    secret_key: str = os.getenv("SECRET_KEY", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    auth_rate_limit: str = os.getenv("AUTH_RATE_LIMIT", "20/minute")

    # Supporting documents
    upload_dir: str = os.getenv("UPLOAD_DIR", "./uploads")
    upload_base_url: str = os.getenv("UPLOAD_BASE_URL", "/files")
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

    # Request lifecycle
    # Off: a decision on an already-decided request overwrites it (last write wins).
    enforce_pending_transitions: bool = os.getenv("ENFORCE_PENDING_TRANSITIONS", "false").lower() == "true"
    permission_max_minutes: int = 60

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:8081,http://localhost:19006,http://127.0.0.1:8081",
            ).split(",")
            if o.strip()
        ]
    )

settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if "dev-only" in settings.secret_key:
        raise RuntimeError(
            "FATAL: SECRET_KEY must be set for non-development environments. "
            "Set it as an environment variable."
        )
elif "dev-only" in settings.secret_key:
    _logger.warning("⚠ Using insecure default SECRET_KEY; only acceptable in development.")
