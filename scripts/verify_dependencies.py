#!/usr/bin/env python3
"""
Dependency Verification Script
Checks that runtime and test dependencies import and that the prompt
templates and response schemas were installed with the package.
"""

import sys
from importlib import import_module
from pathlib import Path

# (import name, distribution name on the index)
DEPENDENCIES = [
    ("google.genai", "google-genai"),
    ("pydantic", "pydantic"),
    ("structlog", "structlog"),
    ("jinja2", "jinja2"),
    ("jsonschema", "jsonschema"),
    ("dotenv", "python-dotenv"),
    ("rich", "rich"),
    ("typer", "typer"),
    ("pytest", "pytest"),
    ("pytest_asyncio", "pytest-asyncio"),
    ("pytest_mock", "pytest-mock"),
]

PACKAGE_DATA = [
    "prompts/extraction/cv_profile.j2",
    "prompts/analysis/career_plan.j2",
    "prompts/chat/consultant_system.j2",
    "prompts/chat/greeting.j2",
    "schemas/partial_profile_schema.json",
    "schemas/career_analysis_schema.json",
]


def missing_package_data() -> list:
    """Return bundled files that are not present next to the careerpath package."""
    try:
        package = import_module("careerpath")
    except ImportError:
        return list(PACKAGE_DATA)
    root = Path(package.__file__).parent
    return [name for name in PACKAGE_DATA if not (root / name).is_file()]


def verify_imports():
    """Verify all dependencies import and package data is present."""
    failed = []

    print("Verifying dependencies...\n")

    for module_name, display_name in DEPENDENCIES:
        try:
            import_module(module_name)
            print(f"[OK] {display_name}")
        except ImportError as e:
            print(f"[FAILED] {display_name}: {e}")
            failed.append(display_name)

    for name in missing_package_data():
        print(f"[FAILED] careerpath/{name} not installed")
        failed.append(name)

    print(f"\n{'='*60}")

    if failed:
        print(f"[ERROR] {len(failed)} checks failed:")
        for name in failed:
            print(f"   - {name}")
        sys.exit(1)
    else:
        print("[SUCCESS] All dependencies verified successfully!")
        sys.exit(0)


if __name__ == "__main__":
    verify_imports()
