"""Prompt templates for the hostdesk chat assistant."""

from pathlib import Path

PROMPT_DIR = Path(__file__).parent


def load_prompt(name: str, **kwargs) -> str:
    """Load a markdown prompt template and fill in its placeholders.

    Args:
        name: Template file name without the .md extension
        **kwargs: Values for the template's {placeholders}

    Returns:
        Rendered prompt

    Example:
        >>> load_prompt("chat_assistant", restaurant_name="Trattoria Roma", ...)
    """
    prompt_file = PROMPT_DIR / f"{name}.md"

    if not prompt_file.exists():
        raise FileNotFoundError(f"Prompt template not found: {prompt_file}")

    return prompt_file.read_text(encoding="utf-8").format(**kwargs)


__all__ = ["load_prompt"]
