import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_database: str = "alumni-networking"
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60
    uploads_bucket: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    firebase_credentials: Optional[str] = None
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    enable_test_routes: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
        return cls(
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_database=os.getenv("MONGO_DATABASE", "alumni-networking"),
            jwt_secret=os.getenv("JWT_SECRET", ""),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expire_minutes=int(os.getenv("JWT_EXPIRE_MINUTES", "60")),
            uploads_bucket=os.getenv("UPLOADS_BUCKET", "uploads"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
            firebase_credentials=os.getenv("FIREBASE_CREDENTIALS") or None,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            enable_test_routes=_env_bool("ENABLE_TEST_ROUTES", True),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
