"""Shared helpers: logging, credentials, prompts, schema validation and the Gemini client."""
