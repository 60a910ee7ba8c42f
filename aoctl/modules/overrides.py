"""Parsing of ``--overrides`` arguments."""
import json
from typing import Any, Dict, Iterable

from aoctl.errors import ValidationError


def parse_overrides(values: Iterable[str]) -> Dict[str, Any]:
    """Parse overrides in the form ``[env/]file:{<json override>}``.

    Returns:
        Mapping of file name to the decoded JSON override

    Raises:
        ValidationError: If an override has no file part or is not valid JSON
    """
    overrides: Dict[str, Any] = {}
    for value in values:
        file_name, sep, raw = value.partition(":")
        if not sep or not file_name.strip():
            raise ValidationError(f"Override '{value}' must be in the form [env/]file:<json>")
        try:
            overrides[file_name.strip()] = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"{raw} is not a valid json") from e
    return overrides
