"""Runtime configuration loaded from the environment."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"


class Settings(BaseModel):
    """Settings for the analyzer, CLI and HTTP server."""

    github_token: str | None = None
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    llm_timeout: float = 60.0


def load_settings() -> Settings:
    """Build Settings from environment variables.

    A .env file in the working directory is loaded first if present.
    Empty values are treated as unset.
    """
    load_dotenv()

    values: dict = {
        "github_token": os.environ.get("GITHUB_TOKEN") or None,
        "gemini_api_key": os.environ.get("GEMINI_API_KEY") or None,
    }
    if os.environ.get("GEMINI_MODEL"):
        values["gemini_model"] = os.environ["GEMINI_MODEL"]
    if os.environ.get("HOST"):
        values["host"] = os.environ["HOST"]
    if os.environ.get("PORT"):
        values["port"] = os.environ["PORT"]
    if os.environ.get("CORS_ORIGINS"):
        values["cors_origins"] = [
            origin.strip() for origin in os.environ["CORS_ORIGINS"].split(",") if origin.strip()
        ]
    if os.environ.get("LLM_TIMEOUT"):
        values["llm_timeout"] = os.environ["LLM_TIMEOUT"]

    return Settings(**values)
