"""
LLM Helpers Module

Shared plumbing for every Gemini call: client construction, schema conversion,
the generate_content call itself and strict parsing of structured responses.
Gateways build prompts and map failures to their own error types; they do not
talk to google-genai directly for one-shot calls.

Example Usage:
    from careerpath.utils.llm_helpers import call_model, create_client

    client = create_client(api_key)
    text = await call_model(
        client,
        model="gemini-2.5-flash",
        contents=prompt,
        response_schema=to_genai_schema(schema),
    )
"""

import json
import time
from typing import Any, Optional, Type

import structlog
from google import genai
from google.genai import types

from careerpath.errors import CareerPathError, ConfigurationError
from careerpath.utils.validator import ResponseValidator, SchemaValidationError

logger = structlog.get_logger(__name__)

_GENAI_TYPES = {
    "object": types.Type.OBJECT,
    "array": types.Type.ARRAY,
    "string": types.Type.STRING,
    "integer": types.Type.INTEGER,
    "number": types.Type.NUMBER,
    "boolean": types.Type.BOOLEAN,
}


def create_client(api_key: str) -> genai.Client:
    """
    Create the google-genai client shared by all gateways.

    Created once at startup and passed to each gateway. It holds no exclusive
    resource, so it is never closed explicitly.

    Args:
        api_key: Gemini API key

    Returns:
        genai.Client

    Raises:
        ConfigurationError: If api_key is empty
    """
    if not api_key or not api_key.strip():
        raise ConfigurationError("Gemini API key is empty")
    return genai.Client(api_key=api_key.strip())


def to_genai_schema(schema: dict[str, Any]) -> types.Schema:
    """
    Convert a Draft 7 JSON schema into a google-genai Schema.

    Only the keywords the response schemas use are mapped: type, description,
    enum, properties (kept in declaration order), required, items, minItems
    and maxItems.

    Args:
        schema: JSON schema dictionary

    Returns:
        Equivalent types.Schema

    Raises:
        ConfigurationError: If the schema uses an unsupported type
    """
    json_type = schema.get("type")
    if json_type not in _GENAI_TYPES:
        raise ConfigurationError(f"Unsupported schema type: {json_type!r}")

    kwargs: dict[str, Any] = {"type": _GENAI_TYPES[json_type]}

    if "description" in schema:
        kwargs["description"] = schema["description"]
    if "enum" in schema:
        kwargs["enum"] = list(schema["enum"])
    if "properties" in schema:
        kwargs["properties"] = {
            name: to_genai_schema(sub_schema)
            for name, sub_schema in schema["properties"].items()
        }
        kwargs["property_ordering"] = list(schema["properties"].keys())
    if "required" in schema:
        kwargs["required"] = list(schema["required"])
    if "items" in schema:
        kwargs["items"] = to_genai_schema(schema["items"])
    if "minItems" in schema:
        kwargs["min_items"] = schema["minItems"]
    if "maxItems" in schema:
        kwargs["max_items"] = schema["maxItems"]

    return types.Schema(**kwargs)


async def call_model(
    client: genai.Client,
    model: str,
    contents: Any,
    response_schema: Optional[types.Schema] = None,
    correlation_id: Optional[str] = None,
) -> Optional[str]:
    """
    Make a single generate_content call. No retries.

    Args:
        client: Shared genai client
        model: Model identifier
        contents: Prompt string or list of parts
        response_schema: If given, the response is constrained to JSON of this shape
        correlation_id: Optional correlation ID for logging

    Returns:
        Response text, or None when the model returned no text

    Raises:
        Exception: Whatever google-genai raised; callers wrap it
    """
    log = logger.bind(correlation_id=correlation_id) if correlation_id else logger

    config = None
    if response_schema is not None:
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_schema,
        )

    log.info("llm_request_start", model=model, structured=response_schema is not None)
    start_time = time.monotonic()

    try:
        response = await client.aio.models.generate_content(
            model=model,
            contents=contents,
            config=config,
        )
    except Exception as e:
        log.error(
            "llm_request_failed",
            model=model,
            error=str(e),
            error_type=type(e).__name__,
            latency_ms=(time.monotonic() - start_time) * 1000,
        )
        raise

    text = response.text
    log.info(
        "llm_request_complete",
        model=model,
        response_length=len(text) if text else 0,
        latency_ms=(time.monotonic() - start_time) * 1000,
    )
    return text


def parse_structured_response(
    response_text: Optional[str],
    schema_name: str,
    validator: ResponseValidator,
    error_cls: Type[CareerPathError],
    correlation_id: Optional[str] = None,
) -> dict[str, Any]:
    """
    Strictly parse and validate a structured model response.

    No repair is attempted: missing text, malformed JSON and schema violations
    are all reported the same way, as error_cls.

    Args:
        response_text: Raw response text (may be None)
        schema_name: Schema filename the payload must satisfy
        validator: ResponseValidator used for the schema check
        error_cls: Error type to raise on failure
        correlation_id: Optional correlation ID for logging

    Returns:
        Decoded JSON object

    Raises:
        error_cls: If there is no text, it is not JSON, or it breaks the schema
    """
    log = logger.bind(correlation_id=correlation_id, schema_name=schema_name)

    if not response_text or not response_text.strip():
        log.error("LLM returned empty response")
        raise error_cls("Model returned no content")

    try:
        payload = json.loads(response_text)
    except json.JSONDecodeError as e:
        log.error(
            "Failed to parse JSON from LLM response",
            error=str(e),
            response=response_text[:200],
        )
        raise error_cls(f"Model returned invalid JSON: {e}") from e

    try:
        validator.validate(payload, schema_name)
    except SchemaValidationError as e:
        log.error(
            "LLM response violates contract",
            errors=e.messages,
            response=response_text[:200],
        )
        raise error_cls(str(e)) from e

    return payload
