from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"

    DATABASE_URL: str = "sqlite:///./quizmaker.db"
    SQL_ECHO: bool = False
    PROJECT_NAME: str = "Quizmaker Backend"

    LOG_LEVEL: str = "INFO"

    # Frontend origins allowed by CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Header carrying the authenticated user id, set by the auth proxy
    USER_ID_HEADER: str = "X-User-Id"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
