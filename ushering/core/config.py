from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+pysqlite:///./ushering.db"
    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    ENVIRONMENT: str = "local"
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    LOG_LEVEL: str = "INFO"

    FEATURE_GATE_PROVIDER: Literal["local", "statsig"] = "local"
    LOCAL_FEATURE_GATES: list[str] = []
    STATSIG_API_URL: str = "https://api.statsig.com/v1"
    STATSIG_SERVER_SECRET: str | None = None
    FEATURE_GATE_TIMEOUT_SECONDS: float = 5.0

    NO_MULTI_SUBMIT: bool = True
    WEEKDAY_SUBMISSION_ONLY: bool = False
    USHER_REQUIRED_PPG: int = 2
    USHER_REQUIRED_KOLEKTE: int = 3
    USHER_MIN_TOTAL: int = 6

    class Config:
        env_file = ".env"


settings = Settings()
