from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Application configuration loaded from environment variables."""

    batch_concurrency: int = Field(default=4, description="Max concurrent conversions in bind-file")
    output_encoding: str = Field(default="utf-8", description="Encoding for files written with --out")
    skip_conjunctions: bool = Field(
        default=True, description="Skip And/Or/But continuation lines in bind-file instead of reporting them"
    )

    # Lines of a feature file that bind-file treats as steps
    step_prefixes: List[str] = Field(
        default_factory=lambda: ["given", "when", "then", "and", "or", "but"]
    )

    class Config:
        env_file = ".env"
        env_prefix = "STEP_BINDER_"
        extra = "ignore"
