"""Casegraph configuration via environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CASEGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Logging ---
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # --- Hierarchy inference ---
    DEFAULT_LEADER_COUNT: int = 3
    LEADER_FRACTION: float = 0.1
    BETWEENNESS_WEIGHT: float = 0.7
    DEGREE_WEIGHT: float = 0.3
    SCORE_FLOOR: float = 0.001

    # --- Community detection ---
    LOUVAIN_SEED: int = 42
    LOUVAIN_RESOLUTION: float = 1.0

    # --- Presentation ---
    CENTRALITY_TOP_N: int = 10

    # --- Size advisory (betweenness and Louvain are super-linear) ---
    LARGE_GRAPH_WARNING: int = 2_000

    @field_validator("LEADER_FRACTION", "BETWEENNESS_WEIGHT", "DEGREE_WEIGHT")
    @classmethod
    def _unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("must be between 0 and 1")
        return v

    @field_validator("SCORE_FLOOR")
    @classmethod
    def _positive_floor(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @model_validator(mode="after")
    def _weights_sum(self) -> "Settings":
        total = self.BETWEENNESS_WEIGHT + self.DEGREE_WEIGHT
        if abs(total - 1.0) > 1e-9:
            raise ValueError(
                f"BETWEENNESS_WEIGHT + DEGREE_WEIGHT must equal 1 (got {total:.3f})"
            )
        return self


settings = Settings()
