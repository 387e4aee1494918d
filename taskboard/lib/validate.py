"""
JSON Schema checks for board records.

Each record kind (feature, story, task, agent, retro, validation_failure)
has a schema in taskboard/schemas/<kind>.schema.json. The store calls
validate_before_write on every save, so a bad record never reaches disk.
"""

import json
from functools import lru_cache
from pathlib import Path

import jsonschema
from jsonschema.exceptions import best_match

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


class ValidationError(Exception):
    """A record does not match its schema."""

    def __init__(self, schema_name: str, message: str, path: str = None):
        self.schema_name = schema_name
        self.message = message
        self.path = path
        super().__init__(f"[{schema_name}] {message}" + (f" at {path}" if path else ""))


@lru_cache(maxsize=None)
def _validator(schema_name: str) -> jsonschema.Draft202012Validator:
    schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        raise ValidationError(schema_name, f"Schema file not found: {schema_path}")
    schema = json.loads(schema_path.read_text())
    jsonschema.Draft202012Validator.check_schema(schema)
    return jsonschema.Draft202012Validator(schema)


def validate(data: dict, schema_name: str) -> None:
    """
    Check a record against its schema.

    When several fields are wrong, the most relevant error is reported.

    Raises:
        ValidationError: with the offending field path ("(root)" for the record itself)
    """
    error = best_match(_validator(schema_name).iter_errors(data))
    if error is None:
        return
    path = ".".join(str(p) for p in error.absolute_path) or "(root)"
    raise ValidationError(schema_name, error.message, path)


def validate_file(filepath: Path, schema_name: str) -> dict:
    """Read a record file and check it. Returns the parsed record.

    Raises:
        ValidationError: if the file is missing, not JSON, or doesn't match
    """
    try:
        text = filepath.read_text()
    except FileNotFoundError:
        raise ValidationError(schema_name, f"File not found: {filepath}") from None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(schema_name, f"Invalid JSON in {filepath}: {e}") from None

    validate(data, schema_name)
    return data


def validate_before_write(data: dict, schema_name: str, filepath: Path) -> None:
    try:
        validate(data, schema_name)
    except ValidationError as e:
        raise ValidationError(schema_name, f"Refusing to write {filepath.name}: {e.message}", e.path) from None
