"""Unified settings for robyn-uploadfiles."""

import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict."""
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(base_dir: Path) -> str:
    """Get version from git tags or fallback to package metadata."""
    try:
        import git

        repo = git.Repo(base_dir, search_parent_directories=True)
        latest_tag = max(repo.tags, key=lambda t: t.commit.committed_datetime, default=None)
        return str(latest_tag) if latest_tag else "0.0.0"
    except Exception:
        try:
            import importlib.metadata

            return importlib.metadata.version("robyn-uploadfiles")
        except Exception:
            return "0.0.0"


class Settings(BaseSettings):
    """Unified settings for the upload service."""

    DEBUG: bool = True
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "robyn-uploadfiles")
    API_DESCRIPTION: ClassVar[str] = PROJECT.get("project", {}).get("description", "Multipart upload service")
    API_VERSION: ClassVar[str] = get_version(BASE_DIR)

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Paths
    DATA_PATH: ClassVar[Path] = BASE_DIR / "data"
    UPLOADS_PATH: ClassVar[Path] = DATA_PATH / "uploads"

    # Uploads
    UPLOAD_DESTINATION: str = str(UPLOADS_PATH / "%Y" / "%m" / "%d" / "%g_%f")
    UPLOAD_MAX_TOTAL_SIZE: int = 100 * 1024 * 1024
    UPLOAD_MAX_FILE_SIZE: int = 20 * 1024 * 1024
    UPLOAD_MAX_FILES: int = 0
    UPLOAD_PERM: int = 0o644
    UPLOAD_OVERWRITE: bool = False
    UPLOAD_UNIQUE: bool = True

    @property
    def api_url(self) -> str:
        return f"http://{self.API_HOST}:{self.API_PORT}"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
