"""Unified settings for formdata."""

import importlib.metadata
import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict, empty when not shipped."""
    if not pyproject_path.is_file():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(project: dict) -> str:
    """Get version from pyproject or fallback to package metadata."""
    if version := project.get("project", {}).get("version"):
        return str(version)
    try:
        return importlib.metadata.version("formdata")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


class Settings(BaseSettings):
    """Unified settings for the formdata encoder."""

    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    PROJECT_VERSION: ClassVar[str] = get_version(PROJECT)

    # Encoding
    CHUNK_SIZE: PositiveInt = 64 * 1024
    HEADER_ENCODING: Literal["utf-8", "ascii", "latin-1"] = "utf-8"

    model_config = SettingsConfigDict(env_prefix="FORMDATA_", env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
