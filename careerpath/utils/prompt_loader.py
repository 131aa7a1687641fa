"""
Jinja2-based prompt template loading and rendering.

This module loads and renders the LLM prompt templates shipped in the
careerpath/prompts/ directory. Templates support Jinja2 features including:
- Variable substitution
- Conditional logic ({% if %})
- Loops ({% for %})

Usage:
    from careerpath.utils.prompt_loader import get_default_loader

    prompt = get_default_loader().render(
        "analysis/career_plan.j2",
        profile=profile,
    )
"""

from pathlib import Path
from typing import Any, Iterable, Optional

import structlog
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    Undefined,
    UndefinedError,
)

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).parent.parent / "prompts"


class PromptLoader:
    """
    Manages loading and rendering of Jinja2 prompt templates.

    Templates are loaded from careerpath/prompts/ unless another directory is
    given. Supports custom filters and error handling.
    """

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        strict_undefined: bool = True,
    ) -> None:
        """
        Initialize PromptLoader with Jinja2 environment.

        Args:
            template_dir: Base directory for templates (defaults to careerpath/prompts/)
            strict_undefined: If True, raise error for undefined variables (default: True)
        """
        self.template_dir = template_dir or DEFAULT_TEMPLATE_DIR
        self.strict_undefined = strict_undefined

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,  # Prompts are text, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined if strict_undefined else Undefined,
        )

        self.env.filters["join_list"] = self._join_list_filter

        logger.debug(
            "PromptLoader initialized",
            template_dir=str(self.template_dir),
            strict_undefined=strict_undefined,
        )

    def render(
        self,
        template_name: str,
        correlation_id: Optional[str] = None,
        **variables: Any,
    ) -> str:
        """
        Render a template with provided variables.

        Args:
            template_name: Path to template relative to the template dir (e.g., "analysis/career_plan.j2")
            correlation_id: Optional correlation ID for logging
            **variables: Template variables as keyword arguments

        Returns:
            Rendered prompt string

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has syntax errors
            UndefinedError: If strict_undefined=True and variable is missing
        """
        log = logger.bind(
            template_name=template_name,
            correlation_id=correlation_id,
        )

        try:
            template = self.env.get_template(template_name)
            rendered = template.render(**variables)
            log.debug(
                "Template rendered",
                rendered_length=len(rendered),
                variables_provided=list(variables.keys()),
            )
            return rendered

        except TemplateNotFound as e:
            log.error(
                "Template not found",
                template_dir=str(self.template_dir),
                error=str(e),
            )
            raise

        except TemplateSyntaxError as e:
            log.error("Template syntax error", error=str(e), lineno=e.lineno)
            raise

        except UndefinedError as e:
            log.error(
                "Undefined variable in template",
                error=str(e),
                variables_provided=list(variables.keys()),
            )
            raise

    def get_system_prompt(
        self,
        prompt_type: str,
        correlation_id: Optional[str] = None,
        **variables: Any,
    ) -> str:
        """
        Load and render a system instruction template from chat/.

        Args:
            prompt_type: Type of system prompt (e.g., "consultant")
            correlation_id: Optional correlation ID for logging
            **variables: Template variables as keyword arguments

        Returns:
            Rendered system instruction
        """
        template_name = f"chat/{prompt_type}_system.j2"
        return self.render(template_name, correlation_id=correlation_id, **variables)

    @staticmethod
    def _join_list_filter(items: Iterable[str], separator: str = ", ") -> str:
        """
        Join list items for display in a prompt.

        Args:
            items: Strings to join
            separator: Separator between items

        Returns:
            Joined string, or "None provided" when empty
        """
        values = [str(item) for item in items if str(item).strip()]
        if not values:
            return "None provided"
        return separator.join(values)


_default_loader: Optional[PromptLoader] = None


def get_default_loader() -> PromptLoader:
    """
    Get or create the default PromptLoader instance.

    Returns:
        Shared PromptLoader instance
    """
    global _default_loader
    if _default_loader is None:
        _default_loader = PromptLoader()
    return _default_loader
