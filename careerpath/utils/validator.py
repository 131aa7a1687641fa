"""
Response Validator Module
Validates model responses against the JSON schemas shipped in careerpath/schemas/.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from jsonschema import Draft7Validator, ValidationError

from careerpath.errors import ConfigurationError

logger = structlog.get_logger(__name__)

DEFAULT_SCHEMA_DIR = Path(__file__).parent.parent / "schemas"

PARTIAL_PROFILE_SCHEMA = "partial_profile_schema.json"
CAREER_ANALYSIS_SCHEMA = "career_analysis_schema.json"


class SchemaValidationError(ValueError):
    """Raised when a payload does not satisfy its response schema."""

    def __init__(self, schema_name: str, messages: List[str]):
        self.schema_name = schema_name
        self.messages = messages
        super().__init__(
            f"Response does not match {schema_name}: " + "; ".join(messages)
        )


class ResponseValidator:
    """Validates structured model output against JSON schemas."""

    def __init__(self, schema_dir: Optional[Path] = None):
        """
        Initialize validator with schema directory.

        Args:
            schema_dir: Directory containing JSON schemas (defaults to careerpath/schemas/)
        """
        self.schema_dir = schema_dir or DEFAULT_SCHEMA_DIR
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load JSON schema from file.

        Args:
            schema_name: Schema filename (e.g., "career_analysis_schema.json")

        Returns:
            Loaded schema dictionary

        Raises:
            ConfigurationError: If schema file not found or invalid
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self.schema_dir / schema_name
        if not schema_path.exists():
            logger.error(
                "schema_not_found",
                schema_name=schema_name,
                schema_path=str(schema_path),
            )
            raise ConfigurationError(f"Schema file not found: {schema_path}")

        try:
            with open(schema_path, "r", encoding="utf-8") as f:
                schema = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("schema_invalid_json", schema_name=schema_name, error=str(e))
            raise ConfigurationError(
                f"Invalid JSON in schema {schema_name}: {e}"
            ) from e

        self._schemas[schema_name] = schema
        logger.debug("schema_loaded", schema_name=schema_name)
        return schema

    def validate(self, payload: Any, schema_name: str) -> None:
        """
        Validate a decoded response against a schema.

        Args:
            payload: Decoded JSON value
            schema_name: Schema filename to validate against

        Raises:
            SchemaValidationError: If validation fails, with one message per error
        """
        schema = self.load_schema(schema_name)
        validator = Draft7Validator(schema)

        errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
        if not errors:
            logger.debug("validation_passed", schema_name=schema_name)
            return

        messages = self._format_validation_errors(errors)
        logger.warning(
            "validation_failed",
            schema_name=schema_name,
            error_count=len(errors),
            errors=messages,
        )
        raise SchemaValidationError(schema_name, messages)

    def _format_validation_errors(self, errors: List[ValidationError]) -> List[str]:
        """
        Format validation errors into readable messages.

        Args:
            errors: List of validation errors from jsonschema

        Returns:
            List of formatted error messages
        """
        messages = []

        for error in errors:
            path = " -> ".join(str(p) for p in error.absolute_path) or "(root)"

            if error.validator == "required":
                messages.append(f"missing required field at {path}: {error.message}")
            elif error.validator == "type":
                messages.append(
                    f"type mismatch at '{path}': expected {error.validator_value}"
                )
            elif error.validator in ("minItems", "maxItems"):
                count = len(error.instance) if isinstance(error.instance, list) else 0
                bound = "at least" if error.validator == "minItems" else "at most"
                messages.append(
                    f"'{path}' has {count} entries, expected {bound} {error.validator_value}"
                )
            else:
                messages.append(f"validation error at '{path}': {error.message}")

        return messages
