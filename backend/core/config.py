"""
Sprint Coach Configuration

Application settings loaded from environment variables (prefix SPRINT_)
or a .env file.
"""

from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Sprint Coach API"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",      # React dev server
        "http://localhost:5173",      # Vite dev server
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Pose detection
    DETECTOR_BACKEND: Literal["mediapipe", "static"] = "mediapipe"
    USE_ACCURATE_MODEL: bool = False

    # Frames below this overall confidence are not analysed
    MIN_POSE_CONFIDENCE: float = 0.5

    model_config = SettingsConfigDict(
        env_prefix="SPRINT_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
