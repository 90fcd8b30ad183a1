from typing import Dict, Literal, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # The scripted tool every new session runs
    TOOL_PATH: str = "chat.gpt"

    # Engine Configuration (shared by all runs of a session)
    ENGINE_SUB_TOOL: Optional[str] = None
    ENGINE_WORKSPACE: Optional[str] = None
    ENGINE_DISABLE_CACHE: bool = False
    ENGINE_ENV: Dict[str, str] = Field(default_factory=dict)

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

# Singleton instance
settings = Settings()
