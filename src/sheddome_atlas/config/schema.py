"""Pydantic models for SheddomeAtlas configuration."""

import hashlib
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class StoreConfig(BaseModel):
    """Curated record store location."""

    curated_path: Path | None = Field(
        default=None,
        description="YAML file of curated records (None = bundled store)",
    )

    @field_validator("curated_path")
    @classmethod
    def check_yaml_suffix(cls, v: Path | None) -> Path | None:
        """Curated stores are YAML documents."""
        if v is not None and v.suffix.lower() not in (".yaml", ".yml"):
            raise ValueError(f"curated_path must be a .yaml/.yml file, got {v}")
        return v


class AIServiceConfig(BaseModel):
    """Configuration for the generative annotation/generation service."""

    annotate_uploads: bool = Field(
        default=False,
        description="Ask the service for domains when an upload has no curated match",
    )
    generate_on_miss: bool = Field(
        default=False,
        description="Generate an (unverified) record when a search has no curated match",
    )
    model: str = Field(
        default="gemini-2.5-flash",
        description="Generative model name",
    )
    api_key_env: str = Field(
        default="GEMINI_API_KEY",
        description="Environment variable holding the API key",
    )
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="REST API base URL",
    )
    timeout_seconds: int = Field(
        default=30,
        ge=1,
        description="Request timeout in seconds (single attempt, no retry)",
    )

    @property
    def enabled(self) -> bool:
        return self.annotate_uploads or self.generate_on_miss


class OutputConfig(BaseModel):
    """Export settings."""

    output_dir: Path = Field(
        default=Path("output"),
        description="Directory for record and atlas exports",
    )


class AtlasConfig(BaseModel):
    """Main application configuration."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    ai_service: AIServiceConfig = Field(default_factory=AIServiceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values, recorded in
        export provenance sidecars.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
