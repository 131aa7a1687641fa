"""
Credential Manager Module
Loads the Gemini API key from the environment or .env and prompts for it on
the command line when it is missing.
"""

import os
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv, set_key
from rich.console import Console
from rich.prompt import Prompt

from careerpath.errors import ConfigurationError

console = Console()
logger = structlog.get_logger(__name__)

# First match wins. GEMINI_API_KEY is what google-genai itself reads.
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")


class CredentialManager:
    """Manages the API credential with .env storage and CLI prompting."""

    def __init__(self, env_file: Path = Path(".env")):
        """
        Initialize credential manager.

        Args:
            env_file: Path to .env file for credential storage
        """
        self.env_file = Path(env_file)
        logger.info("credential_manager_initialized", env_file=str(self.env_file))
        self._load_credentials()

    def _load_credentials(self) -> None:
        """Load existing credentials from .env file."""
        if self.env_file.exists():
            load_dotenv(self.env_file)
            logger.info("credentials_loaded_from_env", env_file=str(self.env_file))
            self._set_secure_permissions()
            return

        example_file = Path(".env.example")
        if example_file.exists():
            console.print(
                "[yellow][i] No .env file found. Creating from .env.example...[/yellow]"
            )
            logger.info("creating_env_from_example")
            self.env_file.write_text(
                example_file.read_text(encoding="utf-8"), encoding="utf-8"
            )
            self._set_secure_permissions()
        else:
            logger.warning("no_env_file_or_example_found")

    def _set_secure_permissions(self) -> None:
        """Set secure file permissions on .env file (Unix only)."""
        if os.name == "nt":
            logger.debug("skipping_permissions_windows", env_file=str(self.env_file))
            return

        try:
            os.chmod(self.env_file, 0o600)
            logger.info(
                "secure_permissions_set", env_file=str(self.env_file), mode="0600"
            )
        except OSError as e:
            console.print(
                f"[yellow][!] Could not set secure permissions on .env: {e}[/yellow]"
            )
            logger.warning(
                "failed_to_set_permissions",
                env_file=str(self.env_file),
                error=str(e),
            )

    def get_api_key(self) -> Optional[str]:
        """
        Look up the API key in the environment.

        Returns:
            The first non-empty value among API_KEY_ENV_VARS, or None
        """
        for key in API_KEY_ENV_VARS:
            value = os.getenv(key, "").strip()
            if value:
                logger.debug("credential_found_in_env", key=key)
                return value
        return None

    def require_api_key(self) -> str:
        """
        Return the API key or fail.

        Returns:
            API key

        Raises:
            ConfigurationError: If no API key is configured
        """
        value = self.get_api_key()
        if value is None:
            logger.critical("api_key_missing", checked=list(API_KEY_ENV_VARS))
            raise ConfigurationError(
                "No Gemini API key configured. Set GEMINI_API_KEY in the "
                f"environment or in {self.env_file}."
            )
        return value

    def prompt_for_api_key(self) -> str:
        """
        Return the API key, asking for it on the command line when missing.

        A key entered at the prompt is saved to the .env file.

        Returns:
            API key

        Raises:
            ConfigurationError: If the user enters nothing
        """
        value = self.get_api_key()
        if value:
            return value

        logger.info("prompting_for_credential", key=API_KEY_ENV_VARS[0])
        console.print(f"\n[yellow][*] Credential Required: {API_KEY_ENV_VARS[0]}[/yellow]")
        console.print("   Gemini API key from Google AI Studio\n")

        value = Prompt.ask("   Enter value", password=True).strip()
        if not value:
            logger.error("required_credential_not_provided", key=API_KEY_ENV_VARS[0])
            raise ConfigurationError(
                f"Required credential not provided: {API_KEY_ENV_VARS[0]}"
            )

        self._save_credential(API_KEY_ENV_VARS[0], value)
        return value

    def _save_credential(self, key: str, value: str) -> None:
        """
        Save credential to .env file.

        Args:
            key: Environment variable name
            value: Credential value
        """
        try:
            set_key(self.env_file, key, value)
        except OSError as e:
            console.print(f"   [red][X] Failed to save credential: {e}[/red]\n")
            logger.error("failed_to_save_credential", key=key, error=str(e))
            raise

        os.environ[key] = value
        console.print(f"   [green][+] Saved {key} to {self.env_file}[/green]\n")
        logger.info("credential_saved", key=key, env_file=str(self.env_file))

    @staticmethod
    def mask_credential(value: str, show_chars: int = 3) -> str:
        """
        Mask credential for display.

        Args:
            value: Credential value to mask
            show_chars: Number of characters to show at start

        Returns:
            Masked credential (e.g., "abc***")
        """
        if not value or len(value) <= show_chars:
            return "***"
        return f"{value[:show_chars]}{'*' * (len(value) - show_chars)}"
