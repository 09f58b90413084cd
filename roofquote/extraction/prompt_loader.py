import json
from functools import lru_cache
from pathlib import Path

from roofquote.extraction.exceptions import ExtractionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


@lru_cache(maxsize=None)
def load_prompt(name: str, prompt_dir: Path = _DEFAULT_PROMPT_DIR) -> str:
    """Load the system prompt ``{name}_prompt.txt``.

    Raises:
        ExtractionError: if the file cannot be read.
    """
    path = prompt_dir / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(f"Failed to load prompt '{name}': {exc}") from exc


@lru_cache(maxsize=None)
def load_schema(name: str, prompt_dir: Path = _DEFAULT_PROMPT_DIR) -> dict[str, object]:
    """Load the JSON schema ``{name}_schema.json``.

    Raises:
        ExtractionError: if the file cannot be read or is not a JSON object.
    """
    path = prompt_dir / f"{name}_schema.json"
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ExtractionError(f"Failed to load schema '{name}': {exc}") from exc
    if not isinstance(schema, dict):
        raise ExtractionError(f"Schema '{name}' must be a JSON object")
    return schema
