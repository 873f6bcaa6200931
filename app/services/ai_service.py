"""
AI service backed by Anthropic Claude: video search queries and summaries.
"""
import time

import anthropic

from app.core.config import settings
from app.core.logging_config import get_logger

logger = get_logger(__name__)

QUERY_TEXT_CHARS = 1800
QUERY_TOPIC_HINTS = 10
SUMMARY_TEXT_CHARS = 12000


def get_anthropic_client() -> anthropic.Anthropic:
    """Get configured Anthropic client."""
    if not settings.anthropic_api_key:
        logger.error("Anthropic API key not configured")
        raise ValueError("ANTHROPIC_API_KEY not configured")
    return anthropic.Anthropic(api_key=settings.anthropic_api_key)


async def generate_content(
    prompt: str,
    system_prompt: str = "You are a study assistant helping students learn effectively.",
    max_tokens: int = 1000,
    temperature: float = 0.3,
) -> str:
    """
    Generate content using Anthropic Claude API.

    Args:
        prompt: The user prompt
        system_prompt: The system context for the model
        max_tokens: Maximum tokens in response
        temperature: Creativity level (0-1)

    Returns:
        Generated text content
    """
    start_time = time.time()
    logger.info(f"Starting AI content generation | model={settings.claude_model} | max_tokens={max_tokens}")
    logger.debug(f"Prompt length: {len(prompt)} chars")

    try:
        client = get_anthropic_client()
        message = client.messages.create(
            model=settings.claude_model,
            max_tokens=max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )

        duration_ms = (time.time() - start_time) * 1000
        content = message.content[0].text
        logger.info(
            f"AI generation completed | duration={duration_ms:.2f}ms | "
            f"input_tokens={message.usage.input_tokens} | output_tokens={message.usage.output_tokens}"
        )
        return content.strip()

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(f"AI generation failed | duration={duration_ms:.2f}ms | error={str(e)}")
        raise


async def generate_youtube_queries(text: str, topic_hints: list[str]) -> str:
    """
    Ask the model for YouTube search queries covering a document.

    Returns the raw reply, expected to be a JSON array of strings. Parsing and
    fallbacks are left to the caller.
    """
    hints = [h for h in topic_hints if h][:QUERY_TOPIC_HINTS]
    logger.info(f"Generating video queries | text_chars={len(text)} | hints={len(hints)}")
    topic_lines = "\n".join(f"- {h}" for h in hints) or "- (no extracted topics)"

    prompt = f"""Based on the following document excerpt and topics, produce up to 5 concise YouTube search queries a student would type to learn the same material.
Keep each query under 80 characters, specific, and remove duplicates.

**Document excerpt:**
{text[:QUERY_TEXT_CHARS]}

**Topics:**
{topic_lines}

Return ONLY a JSON array of strings, no other text."""

    system_prompt = (
        "You are a helpful study assistant that finds good educational videos. "
        "Always return valid JSON."
    )
    return await generate_content(prompt, system_prompt, max_tokens=400, temperature=0.3)


async def summarize_text(text: str, max_sentences: int = 5) -> str:
    """Summarize free text in at most ``max_sentences`` sentences."""
    if not text or not text.strip():
        return ""
    logger.info(f"Summarizing text | chars={len(text)} | max_sentences={max_sentences}")

    prompt = f"""Summarize the following content in at most {max_sentences} sentences.
Keep it clear, factual, and study-friendly.

**Content:**
{text[:SUMMARY_TEXT_CHARS]}"""

    system_prompt = (
        "You are an educational assistant that writes short, accurate summaries. "
        "Do not add information that is not in the original content."
    )
    return await generate_content(prompt, system_prompt, max_tokens=600, temperature=0.2)


class ClaudeQueryGenerator:
    """Query generation capability handed to the recommendation aggregator."""

    async def generate_queries(self, text: str, topic_hints: list[str]) -> str:
        return await generate_youtube_queries(text, topic_hints)
