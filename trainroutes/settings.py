from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Validated settings (env-driven) for loading and querying route graphs."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Text graph file served by the API and used as the CLI default.
    graph_path: str = Field(default="", alias="GRAPH_PATH")
    graph_strict_edges: bool = Field(default=True, alias="GRAPH_STRICT_EDGES")

    # Upper bound on expansion-tree size for a single enumeration call.
    expansion_max_nodes: int = Field(default=1_000_000, ge=1, alias="EXPANSION_MAX_NODES")

    out_dir: str = Field(default="out", alias="OUT_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file_enabled: bool = Field(default=False, alias="LOG_FILE_ENABLED")

    @model_validator(mode="after")
    def _normalise(self) -> "Settings":
        self.graph_path = (self.graph_path or "").strip()
        self.log_level = (self.log_level or "INFO").strip().upper() or "INFO"
        return self


settings = Settings()
