"""Clients for external services."""

from sheddome_atlas.api_clients.gemini import GeminiClient, build_annotation_prompt

__all__ = ["GeminiClient", "build_annotation_prompt"]
