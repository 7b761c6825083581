import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./comicshelf.db")
DATABASE_ECHO = _env_bool("DATABASE_ECHO", False)

SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")

AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
# Set for S3-compatible providers (MinIO, Supabase storage, R2 ...)
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL") or None
CHAPTERS_BUCKET = os.getenv("CHAPTERS_BUCKET", "comic-chapters")

STORAGE_PUBLIC_BASE = os.getenv(
    "STORAGE_PUBLIC_BASE",
    f"https://{CHAPTERS_BUCKET}.s3.{AWS_REGION}.amazonaws.com",
).rstrip("/")

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "*").split(",")
    if o.strip()
]

AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "5/minute")
RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", True)


def log_level_name() -> str:
    return (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
