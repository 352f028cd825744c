"""
Canvas Copilot Engine Configuration
"""

from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    """Configuration settings for the Canvas Copilot reconciliation engine"""

    # Service Configuration
    SERVICE_NAME: str = "canvas-copilot"
    LOG_LEVEL: str = "INFO"

    # Text Patching
    PATCH_MIN_SIMILARITY: float = 0.8

    # Graph Synthesis
    REMOVE_ORPHAN_NODES: bool = True
    LAYOUT_GAP: float = 30.0
    LAYOUT_MAX_ITERATIONS: int = 50

    # Canvas Merge
    # Note: host canvases draw edges left-to-right when the model omits sides
    DEFAULT_FROM_SIDE: Literal["top", "right", "bottom", "left"] = "right"
    DEFAULT_TO_SIDE: Literal["top", "right", "bottom", "left"] = "left"
    NODE_COLOR_OVERRIDE: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
