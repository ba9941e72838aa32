"""Gemini REST client for structural annotation and record generation.

Implements the AnnotationCollaborator and GenerationCollaborator contracts
against the generateContent endpoint in JSON response mode. Each call is a
single attempt bounded by the configured timeout: no retries.
"""

import json
import os
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from sheddome_atlas.annotation.collaborator import (
    AnnotationRequest,
    AnnotationResponse,
    GeneratedRecord,
)
from sheddome_atlas.config.schema import AIServiceConfig
from sheddome_atlas.errors import CollaboratorError
from sheddome_atlas.records.models import DataSources, ProteinRecord

logger = structlog.get_logger()

GENERATION_SYSTEM_INSTRUCTION = """
You are an expert bioinformatics database specialized in proteomic shedding.
Generate realistic JSON data for the requested protein.

SCORING LOGIC:
1. If role is 'Substrate' or 'Sheddase', 'ectoCtoRatio' should be HIGH (>5.0).
2. If role is 'Unknown' or non-shedding, 'ectoCtoRatio' should be LOW (~1.0).
3. 'sheddingScore' is a 0-10 value based on (fluidEctoAbundance / tissueAbundance) * ectoCtoRatio.
4. Provide specific cleavage sites with amino acid positions.
5. Cite realistic dataset names in 'dataSources'.

Abundances should be between 1,000 and 10,000,000.
Respond with an object {"data": <record>, "interpretation": <text>} where the
record uses the keys name, geneSymbol, uniprotId, role, knownSubstrates,
description, length, sheddingScore, fluidEctoAbundance, tissueAbundance,
ectoCtoRatio, dataSources, domains, peptides, cleavageSites.
"""

GENERATED_DATA_SOURCES = DataSources(
    fluid="AI Generated",
    tissue="AI Generated",
    method="Generative Model (unverified)",
)


def build_annotation_prompt(request: AnnotationRequest) -> str:
    """Prompt asking only for structural metadata; uploaded peptides are trusted."""
    sample = json.dumps([span.model_dump() for span in request.sample_peptides])
    return f"""
I have experimental peptide data for the protein: "{request.identifier}".

I need the BIOLOGICAL ANNOTATIONS to visualize this data.
1. Provide the 'domains' (Signal Peptide, Extracellular, Transmembrane, Cytoplasmic)
   with UniProt amino acid positions and a 'type' of Extracellular, Transmembrane
   or Intracellular.
2. Provide the 'length' of the protein.
3. Provide 'cleavageSites' known in literature (position, protease, evidence).
4. Provide a 'description'.
5. Determine the 'role' (Sheddase, Substrate, Both or Unknown) and 'knownSubstrates'.
6. Provide the 'uniprotId'.

Respond with an object {{"metadata": {{...}}, "interpretation": "..."}}.

Here is a sample of the peptides (start/end positions):
{sample}
"""


def extract_response_text(payload: dict[str, Any]) -> str:
    """Pull the first candidate's text out of a generateContent response.

    Raises:
        CollaboratorError: If the response carries no text
    """
    try:
        parts = payload["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError) as e:
        raise CollaboratorError("Generative service returned no content") from e

    if not text.strip():
        raise CollaboratorError("Generative service returned no content")
    return text


class GeminiClient:
    """Single-attempt JSON-mode client for the Gemini generateContent API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
    ):
        """
        Args:
            api_key: API key (opaque credential)
            model: Model name
            base_url: REST API base URL
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: AIServiceConfig) -> "GeminiClient":
        """
        Create client from service configuration.

        Raises:
            CollaboratorError: If the API key environment variable is unset
        """
        api_key = os.environ.get(config.api_key_env)
        if not api_key:
            raise CollaboratorError(
                f"Environment variable {config.api_key_env} is not set; "
                "it must hold the generative service API key"
            )
        return cls(
            api_key=api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
        )

    def generate_json(self, prompt: str, system_instruction: str | None = None) -> dict[str, Any]:
        """Send one generateContent request and decode the JSON answer.

        Raises:
            CollaboratorError: On transport errors, HTTP errors, timeouts or
                a non-JSON answer
        """
        url = f"{self.base_url}/models/{self.model}:generateContent"
        body: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        logger.info("generative_request_start", model=self.model)

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    url,
                    json=body,
                    headers={"x-goog-api-key": self.api_key},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise CollaboratorError(
                f"Generative service returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise CollaboratorError(f"Generative service request failed: {e}") from e
        except ValueError as e:
            raise CollaboratorError("Generative service returned invalid JSON") from e

        text = extract_response_text(payload)
        try:
            answer = json.loads(text)
        except json.JSONDecodeError as e:
            raise CollaboratorError("Generative service answer is not valid JSON") from e

        if not isinstance(answer, dict):
            raise CollaboratorError("Generative service answer is not a JSON object")

        logger.info("generative_request_complete", model=self.model)
        return answer

    def annotate(self, request: AnnotationRequest) -> AnnotationResponse:
        """Structural metadata for request.identifier (AnnotationCollaborator)."""
        answer = self.generate_json(build_annotation_prompt(request))
        metadata = answer.get("metadata", answer)
        if not isinstance(metadata, dict):
            raise CollaboratorError("Annotation answer has no metadata object")

        try:
            return AnnotationResponse.model_validate({
                **metadata,
                "interpretation": answer.get("interpretation") or "",
            })
        except ValidationError as e:
            raise CollaboratorError(
                f"Annotation answer failed validation ({e.error_count()} error(s))"
            ) from e

    def generate(self, identifier: str) -> GeneratedRecord:
        """Generate a full, unverified record (GenerationCollaborator)."""
        prompt = (
            f'Generate detailed shedding data for protein: "{identifier}". '
            "Ensure geneSymbol is provided."
        )
        answer = self.generate_json(prompt, system_instruction=GENERATION_SYSTEM_INSTRUCTION)

        data = answer.get("data")
        if not isinstance(data, dict):
            raise CollaboratorError("Generation answer has no data object")
        data.setdefault("dataSources", GENERATED_DATA_SOURCES.model_dump(by_alias=True))

        try:
            record = ProteinRecord.model_validate(data)
        except ValidationError as e:
            raise CollaboratorError(
                f"Generated record failed validation ({e.error_count()} error(s))"
            ) from e

        return GeneratedRecord(
            record=record,
            interpretation=answer.get("interpretation") or "",
        )
