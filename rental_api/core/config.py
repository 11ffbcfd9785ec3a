from pathlib import Path
from typing import List

from pydantic import EmailStr, Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# -------------------------------------------------
# Explicitly load .env
# -------------------------------------------------

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH)


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ENVIRONMENT: str = "development"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ALGORITHM: str = "HS256"

    # SQL echo is noisy; enable only while debugging queries
    DB_ECHO: bool = False

    # Lower in tests to keep hashing fast
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # Seeded on startup when no admin account exists; must pass login email validation
    DEFAULT_ADMIN_EMAIL: EmailStr = "admin@example.com"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    class Config:
        extra = "ignore"
        env_file = str(ENV_PATH)
        env_file_encoding = "utf-8"


settings = Settings()
