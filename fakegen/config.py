"""
Service configuration, loaded from environment variables / .env
"""

from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ===== Service =====
    SERVICE_NAME: str = Field(default="fakegen")
    SERVICE_VERSION: str = Field(default="0.1.0")
    HOST: str = Field(default="127.0.0.1")
    PORT: int = Field(default=8000)
    LOG_LEVEL: str = Field(default="info")
    DEBUG: bool = Field(default=False)

    # ===== Corpus =====
    CORPUS_PATH: Optional[str] = Field(default=None, description="Text file, one sentence per line")
    CORPUS_ENCODING: str = Field(default="utf-8")

    # ===== Generation =====
    DEFAULT_TARGET: int = Field(default=20, ge=0)
    CANDIDATES: int = Field(default=49, ge=1)
    LENGTH_UNIT: Literal["chars", "words"] = Field(default="chars")
    TOKSET_BACKEND: Literal["buffer", "hash"] = Field(default="buffer")
    RANDOM_SEED: Optional[int] = Field(default=None)

    # ===== Worker =====
    WORKER_QUEUE_SIZE: int = Field(default=100, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
