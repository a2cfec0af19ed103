from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # GitHub content store
    GITHUB_TOKEN: str = ""
    GITHUB_OWNER: str = ""
    GITHUB_REPO: str = ""
    GITHUB_BRANCH: Optional[str] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TIMEOUT: float = 10.0

    # Blog
    POSTS_PATH: str = "posts"
    FETCH_CONCURRENCY: int = 1

    # Admin gate
    ADMIN_PASSWORD: str = ""
    SESSION_SECRET: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def repo_url(self) -> str:
        return f"{self.GITHUB_API_URL.rstrip('/')}/repos/{self.GITHUB_OWNER}/{self.GITHUB_REPO}"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
