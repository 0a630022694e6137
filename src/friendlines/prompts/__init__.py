"""Prompt management module.

Externalizes prompts to versioned text files for easy iteration.
Prompts can be overridden by placing files in the working directory.
Templates use ``{{placeholder}}`` markers.
"""

import re
from functools import lru_cache
from pathlib import Path

# Default prompts directory (package location)
_PROMPTS_DIR = Path(__file__).parent

# Bump together with new interview_/generation_ template files.
PROMPT_VERSION = "v1"

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: friendlines/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text content

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8")

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8")

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def interpolate_prompt(template: str, variables: dict[str, str]) -> str:
    """Replace ``{{name}}`` markers. Unknown or empty names are left as-is."""
    return _PLACEHOLDER.sub(lambda m: variables.get(m.group(1)) or m.group(0), template)


def build_interview_system_prompt(
    user_name: str,
    time_of_day: str,
    day_of_week: str,
    interview_type: str,
    language_name: str,
) -> str:
    return interpolate_prompt(
        load_prompt(f"interview_{PROMPT_VERSION}").strip(),
        {
            "userName": user_name,
            "timeOfDay": time_of_day,
            "dayOfWeek": day_of_week,
            "interviewType": interview_type,
            "languageName": language_name,
        },
    )


def build_generation_system_prompt(
    user_name: str,
    transcript: str,
    language_name: str,
    feedback: str | None = None,
) -> str:
    """Build the newsflash writer prompt.

    When ``feedback`` is given, editor notes asking for another take are
    appended to the template.
    """
    template = load_prompt(f"generation_{PROMPT_VERSION}").strip()
    variables = {
        "userName": user_name,
        "transcript": transcript,
        "languageName": language_name,
    }
    if feedback:
        template += "\n" + load_prompt("regeneration_feedback").rstrip()
        variables["feedback"] = feedback
    return interpolate_prompt(template, variables)


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "PROMPT_VERSION",
    "load_prompt",
    "interpolate_prompt",
    "build_interview_system_prompt",
    "build_generation_system_prompt",
    "clear_cache",
]
