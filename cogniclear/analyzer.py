"""
Bias analysis client backed by a hosted Ollama model.
"""

import logging
import re
from typing import Optional

import httpx
import ollama
from pydantic import ValidationError

from cogniclear.exceptions import (
    AnalysisServiceError,
    EmptyResponseError,
    MissingCredentialError,
)
from cogniclear.models.analysis import FALLBACK_RESULT, AnalysisResult
from cogniclear.models.decision import ScenarioContext
from cogniclear.prompts import RESPONSE_SCHEMA, build_messages
from cogniclear.settings import Settings, get_settings

logger = logging.getLogger(__name__)

_FENCED = re.compile(r"^```[\w+-]*[ \t]*\n?(.*?)\n?[ \t]*```$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around ``text``, if any."""
    text = text.strip()
    match = _FENCED.match(text)
    if match:
        return match.group(1).strip()
    return text


def parse_bias_response(text: str) -> AnalysisResult:
    """
    Parse a model reply into an ``AnalysisResult``.

    Any reply that is not valid JSON matching the result schema yields
    ``FALLBACK_RESULT``; this function never raises on bad payloads.
    """
    cleaned = strip_code_fences(text)
    try:
        return AnalysisResult.model_validate_json(cleaned)
    except ValidationError as e:
        logger.warning(
            "Failed to parse analysis response (%d error(s)): %s",
            e.error_count(),
            e,
        )
        return FALLBACK_RESULT


def build_client(settings: Settings) -> ollama.AsyncClient:
    """Build an Ollama client for the configured hosted endpoint."""
    return ollama.AsyncClient(
        host=settings.ollama_host,
        headers={"Authorization": f"Bearer {settings.ollama_api_key}"},
        timeout=settings.request_timeout,
    )


def _log_unquoted_triggers(result: AnalysisResult, text: str) -> None:
    for bias in result.biases:
        if bias.trigger_phrase not in text:
            logger.debug(
                "Trigger phrase for %s is not a verbatim quote: %r",
                bias.name,
                bias.trigger_phrase,
            )


async def _request_analysis(
    client, text: str, context: ScenarioContext, settings: Settings
) -> str:
    try:
        response = await client.chat(
            model=settings.analysis_model,
            messages=build_messages(text, context),
            format=RESPONSE_SCHEMA,
            options={"temperature": settings.temperature},
        )
    except ollama.ResponseError as e:
        logger.error("Analysis service error (%s): %s", e.status_code, e.error)
        raise AnalysisServiceError(
            f"Analysis service error: {e.error}", status_code=e.status_code
        ) from e
    except (httpx.HTTPError, ConnectionError) as e:
        logger.error("Analysis service unreachable: %s", e)
        raise AnalysisServiceError(f"Analysis service unreachable: {e}") from e

    return response["message"]["content"]


async def analyze_decision_bias(
    text: str,
    context: ScenarioContext = ScenarioContext.NONE,
    settings: Optional[Settings] = None,
    client=None,
) -> AnalysisResult:
    """
    Ask the analysis model to audit ``text`` for cognitive biases.

    Args:
        text: Decision narrative, already trimmed and non-empty.
        context: Situational pressure to mention in the prompt.
        settings: Configuration; defaults to ``get_settings()``.
        client: Ollama client to use. When omitted, one is built for this
            call and closed before returning; a passed-in client is left open.

    Returns:
        The parsed result, or ``FALLBACK_RESULT`` when the reply is malformed.

    Raises:
        MissingCredentialError: No API key is configured.
        AnalysisServiceError: The service rejected the call or was unreachable.
        EmptyResponseError: The service replied with an empty body.
    """
    settings = settings or get_settings()
    if not settings.ollama_api_key:
        raise MissingCredentialError("OLLAMA_API_KEY is not set.")

    logger.info(
        "Requesting bias analysis: model=%s context=%s chars=%d",
        settings.analysis_model,
        context.value,
        len(text),
    )

    if client is not None:
        content = await _request_analysis(client, text, context, settings)
    else:
        async with build_client(settings) as owned_client:
            content = await _request_analysis(owned_client, text, context, settings)

    if not content or not content.strip():
        logger.error("Analysis service returned an empty response")
        raise EmptyResponseError("Empty response from analysis service")

    logger.debug("Analysis response (%d chars): %s", len(content), content)

    result = parse_bias_response(content)
    if not result.is_fallback:
        _log_unquoted_triggers(result, text)
    return result
