"""Recovering JSON from model text output."""

import re

_FENCE_START = re.compile(r"^```(?:json|markdown)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    return _FENCE_END.sub("", _FENCE_START.sub("", text.strip())).strip()


def extract_json_text(text: str) -> str:
    """
    Cut the JSON object out of model output.

    Models occasionally wrap JSON in a code fence or prepend reasoning text.
    Takes the span from the first ``{`` to the last ``}``; when there is no
    such span, falls back to stripping code fences.
    """
    first_open = text.find("{")
    last_close = text.rfind("}")
    if first_open != -1 and last_close > first_open:
        return text[first_open : last_close + 1]
    return strip_code_fences(text)
