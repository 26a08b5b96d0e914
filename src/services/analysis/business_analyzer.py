"""
Artisan business analysis and WhatsApp copywriting.

Turns a voice-memo transcript into a validated ``BusinessAnalysis`` and
composes marketing copy from the analysed business context, using the
configured LLM provider.
"""

import logging

from pydantic import ValidationError

from src.core.exceptions import AnalysisParseError, MessageGenerationError, UpstreamUnavailableError
from src.core.models import BusinessAnalysis
from src.core.utils import strip_code_fences
from src.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """\
Analyze the following business description from an artisan. Your task is to \
extract key information and return it as a valid JSON object.

**Business Description:**
"{transcript}"

**JSON Output Format:**
{{
  "businessType": "A short, descriptive category like 'Pottery & Ceramics', \
'Handmade Jewelry', or 'Textile Arts'.",
  "detectedFocus": "A string of comma-separated keywords of products or services \
mentioned, like 'ceramic bowls, vases, custom orders'.",
  "topProblems": [
    "A key challenge or problem the user mentioned.",
    "Another challenge if mentioned."
  ],
  "recommendedSolutions": {{
    "primary": {{
      "id": "whatsapp | instagram | website",
      "reason": "A brief, compelling reason why this is the best first step for the user."
    }},
    "secondary": {{
      "id": "whatsapp | instagram | website",
      "reason": "A brief reason for the second-best option."
    }}
  }},
  "confidence": "An integer between 80 and 95 representing your confidence in this analysis."
}}

The primary and secondary ids must be different.

**CRITICAL:** Only return the JSON object. Do not include any other text, \
explanations, or markdown formatting like ```json.
"""

MESSAGE_PROMPT = """\
You are an expert marketing copywriter for small craft businesses.
Your task is to generate a professional, friendly, and engaging WhatsApp Business message.

**Business Context:**
- Type: {business_type}
- Products/Focus: {detected_focus}
- User's own words: "{transcript}"

**Instructions:**
- Start with a friendly greeting.
- Use emojis to make the message visually appealing.
- Briefly introduce the business and its specialty.
- Use bullet points to highlight key features or products.
- End with a clear call-to-action, encouraging the customer to reply.
- Keep the message concise and easy to read.

Generate the message now.
"""


def build_analysis_prompt(transcript: str) -> str:
    return ANALYSIS_PROMPT.format(transcript=transcript)


def build_message_prompt(business_type: str, detected_focus: str, transcript: str) -> str:
    return MESSAGE_PROMPT.format(
        business_type=business_type,
        detected_focus=detected_focus,
        transcript=transcript,
    )


def parse_analysis(raw_response: str) -> BusinessAnalysis:
    """Strip code fences and validate model output as a ``BusinessAnalysis``.

    There is no repair step: anything that is not exactly the expected
    shape is rejected.

    Raises:
        AnalysisParseError: If the text is not JSON or does not match the schema.
    """
    cleaned = strip_code_fences(raw_response)
    try:
        return BusinessAnalysis.model_validate_json(cleaned)
    except ValidationError as exc:
        raise AnalysisParseError(
            detail=f"Invalid analysis from model: {exc.error_count()} error(s); "
            f"output starts with {cleaned[:200]!r}"
        ) from exc


class BusinessAnalyzer:
    """Runs the analysis and copywriting prompts against an LLM provider."""

    def __init__(self, llm: BaseLLM) -> None:
        """Initialize with the configured LLM provider.

        Args:
            llm: An LLM provider implementing ``BaseLLM``.
        """
        self._llm = llm

    async def analyze(self, transcript: str) -> BusinessAnalysis:
        """Extract a structured business analysis from a transcript.

        Args:
            transcript: Recognised text of the voice memo.

        Returns:
            A fully validated BusinessAnalysis.

        Raises:
            UpstreamUnavailableError: If the model endpoint cannot be reached.
            AnalysisParseError: If the model output is not a valid analysis.
        """
        logger.info("Analyzing transcript (%d chars)", len(transcript))
        raw_response = await self._llm.generate(build_analysis_prompt(transcript))
        analysis = parse_analysis(raw_response)
        logger.info(
            "Analysis complete: %s (primary=%s, secondary=%s)",
            analysis.business_type,
            analysis.recommended_solutions.primary.id,
            analysis.recommended_solutions.secondary.id,
        )
        return analysis

    async def compose_message(
        self, business_type: str, detected_focus: str, transcript: str
    ) -> str:
        """Generate a WhatsApp Business marketing message.

        The model text is returned as-is, without JSON parsing.

        Raises:
            UpstreamUnavailableError: If the model endpoint cannot be reached.
            MessageGenerationError: If generation fails or returns nothing.
        """
        prompt = build_message_prompt(business_type, detected_focus, transcript)
        try:
            message = await self._llm.generate(prompt)
        except UpstreamUnavailableError:
            raise
        except Exception as exc:
            raise MessageGenerationError(detail=f"LLM call failed: {exc}") from exc

        if not message.strip():
            raise MessageGenerationError(detail="Model returned an empty message")
        return message
