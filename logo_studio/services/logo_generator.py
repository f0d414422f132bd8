import asyncio
import logging
from typing import List

from openai import AsyncOpenAI

from ..config import ANALYSIS_MAX_TOKENS, ANALYSIS_MODEL, CONCEPT_MAX_TOKENS, CONCEPT_MODEL
from ..errors import GenerationFailure
from ..prompts import LOGO_SYSTEM_PROMPT, logo_prompt, transcript_analysis_prompt
from ..schemas import LOGO_TYPES, BrandAnalysis, GeneratedLogo, LogoType, TranscriptEntry
from ..transcripts import format_transcript
from .model_client import ModelClient, parse_brand_analysis, parse_logo_response

logger = logging.getLogger(__name__)


class LogoGenerator:
    """Encapsulates the analysis and logo generation flow."""

    def __init__(self, analysis_client: ModelClient, concept_client: ModelClient):
        self.analysis_client = analysis_client
        self.concept_client = concept_client

    @classmethod
    def from_openai(cls, client: AsyncOpenAI) -> "LogoGenerator":
        return cls(
            analysis_client=ModelClient(client, ANALYSIS_MODEL, max_output_tokens=ANALYSIS_MAX_TOKENS),
            concept_client=ModelClient(client, CONCEPT_MODEL, max_output_tokens=CONCEPT_MAX_TOKENS),
        )

    async def analyze(self, transcript: List[TranscriptEntry]) -> BrandAnalysis:
        prompt = transcript_analysis_prompt(format_transcript(transcript))
        analysis = await self.analysis_client.request_json(
            prompt,
            parse_brand_analysis,
            label="analyze transcript",
        )
        logger.info("Analyzed transcript for %s (%s)", analysis.company_name, analysis.industry)
        return analysis

    async def generate(
        self,
        logo_type: LogoType,
        brand_analysis: BrandAnalysis,
        variant: int = 1,
    ) -> GeneratedLogo:
        return await self.concept_client.request_json(
            logo_prompt(logo_type, brand_analysis, variant),
            lambda payload: parse_logo_response(payload, logo_type),
            label=f"generate {logo_type.value} logo",
            instructions=LOGO_SYSTEM_PROMPT,
        )

    async def generate_all(self, brand_analysis: BrandAnalysis) -> List[GeneratedLogo]:
        """
        Generate one concept per logo type concurrently.

        Failures are isolated per type: the successful subset is returned, and
        only when every type fails is an aggregate GenerationFailure raised.
        """
        results = await asyncio.gather(
            *(self.generate(logo_type, brand_analysis) for logo_type in LOGO_TYPES),
            return_exceptions=True,
        )

        logos: List[GeneratedLogo] = []
        errors: List[str] = []
        for logo_type, result in zip(LOGO_TYPES, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("%s generation failed: %s", logo_type.value, result)
                errors.append(f"{logo_type.value}: {result}")
            else:
                logos.append(result)

        if not logos:
            raise GenerationFailure(
                "generate any logo concept",
                self.concept_client.max_attempts,
                "; ".join(errors),
            )
        return logos
