"""
Post-call extraction of customer details.

When a call ends, its transcript is sent to the Chat Completions API with a
strict JSON schema asking for the customer's name, availability and any special
notes. The parsed result is posted unchanged to the automation webhook.

Each step is its own failure domain: a failure is logged and stops the
pipeline for that call. Nothing is retried.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from call_relay.config import settings
from call_relay.config.constants import (
    CHAT_COMPLETIONS_URL,
    EXTRACTION_SCHEMA_NAME,
    EXTRACTION_SYSTEM_PROMPT,
    LOGGER_NAME,
)
from call_relay.models.openai_schemas import CUSTOMER_DETAILS_SCHEMA, CustomerDetails

logger = logging.getLogger(LOGGER_NAME)


class ExtractionError(Exception):
    """Raised when the structured-extraction completion call fails."""


def build_completion_request(transcript: str, model: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the Chat Completions request body for a transcript.

    Args:
        transcript: The full call transcript
        model: Completion model, defaults to the configured extraction model

    Returns:
        The JSON request body
    """
    return {
        "model": model or settings.EXTRACTION_MODEL,
        "messages": [
            {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
            {"role": "user", "content": transcript},
        ],
        "response_format": {
            "type": "json_schema",
            "json_schema": {
                "name": EXTRACTION_SCHEMA_NAME,
                "schema": CUSTOMER_DETAILS_SCHEMA,
            },
        },
    }


async def make_chat_completion(transcript: str) -> Dict[str, Any]:
    """
    Request a structured extraction of customer details from a transcript.

    Args:
        transcript: The full call transcript

    Returns:
        The decoded completion object

    Raises:
        ExtractionError: On network failure, a non-success status, or a non-JSON body
    """
    logger.info("Starting ChatGPT API call...")
    try:
        response = await asyncio.to_thread(
            requests.post,
            CHAT_COMPLETIONS_URL,
            headers={
                "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
                "Content-Type": "application/json"
            },
            json=build_completion_request(transcript),
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        raise ExtractionError(f"Completion request failed: {e}") from e

    logger.info(f"ChatGPT API response status: {response.status_code}")
    if not response.ok:
        raise ExtractionError(f"Completion request returned {response.status_code}: {response.text}")

    try:
        data = response.json()
    except ValueError as e:
        raise ExtractionError(f"Completion response is not JSON: {e}") from e

    logger.debug(f"Full ChatGPT API response: {json.dumps(data, indent=2)}")
    return data


async def send_to_webhook(payload: Dict[str, Any], url: Optional[str] = None) -> bool:
    """
    Post extracted details to the automation webhook.

    Args:
        payload: The parsed extraction result, sent verbatim
        url: Webhook URL, defaults to the configured WEBHOOK_URL

    Returns:
        bool: True if the webhook accepted the payload, False otherwise
    """
    url = url or settings.WEBHOOK_URL
    logger.info(f"Sending data to webhook: {json.dumps(payload, indent=2)}")
    try:
        response = await asyncio.to_thread(
            requests.post,
            url,
            headers={"Content-Type": "application/json"},
            json=payload,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error(f"Error sending data to webhook: {e}")
        return False

    logger.info(f"Webhook response status: {response.status_code}")
    if response.ok:
        logger.info("Data successfully sent to webhook.")
        return True
    logger.error(f"Failed to send data to webhook: {response.status_code} {response.reason}")
    return False


def parse_completion_content(result: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Extract and decode the JSON payload from a completion object.

    Args:
        result: The decoded completion object

    Returns:
        The parsed JSON object, or None if it is missing or malformed
    """
    try:
        content = result["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.error("Unexpected response structure from ChatGPT API")
        return None

    if not content:
        logger.error("Unexpected response structure from ChatGPT API")
        return None

    try:
        parsed_content = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing JSON from ChatGPT response: {e} Content: {content}")
        return None

    if not isinstance(parsed_content, dict):
        logger.error(f"Unexpected JSON structure in ChatGPT response: {parsed_content}")
        return None

    try:
        CustomerDetails.model_validate(parsed_content)
    except ValidationError as e:
        logger.warning(f"Extracted details do not match the expected schema: {e}")

    return parsed_content


async def process_transcript_and_send(transcript: str, call_id: Optional[str] = None) -> bool:
    """
    Extract customer details from a finished call and forward them to the webhook.

    Args:
        transcript: The full call transcript
        call_id: Identifier of the call, used for logging

    Returns:
        bool: True if the details reached the webhook, False if any step failed
    """
    logger.info(f"Starting transcript processing for call {call_id}...")
    try:
        result = await make_chat_completion(transcript)
    except ExtractionError as e:
        logger.error(f"Error making ChatGPT completion call for call {call_id}: {e}")
        return False

    parsed_content = parse_completion_content(result)
    if parsed_content is None:
        return False

    logger.info(f"Parsed content: {json.dumps(parsed_content, indent=2)}")
    sent = await send_to_webhook(parsed_content)
    if sent:
        logger.info(f"Extracted and sent customer details for call {call_id}: {parsed_content}")
    return sent
