"""Read API description files and detect their OpenAPI flavour."""

from pathlib import Path

import yaml

from openapi_to_graphql.errors import DocumentLoadError


def read_document(file_path: Path) -> dict:
    """Parse a YAML or JSON file into a plain mapping."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(f"Cannot read {file_path}: {e}") from e

    # JSON is a subset of YAML, one parser covers both
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"{file_path} is not valid YAML or JSON: {e}") from e

    if not isinstance(data, dict):
        raise DocumentLoadError(f"{file_path} does not contain a mapping at the top level")
    return data


def detect_version(data: dict) -> str:
    """Detect the flavour of a parsed API document.

    Returns: 'openapi3' or 'swagger2'.
    """
    if "openapi" in data:
        version = str(data["openapi"])
        if version.startswith("3."):
            return "openapi3"
        raise DocumentLoadError(f"Unsupported OpenAPI version: {version}")
    if "swagger" in data:
        version = str(data["swagger"])
        if version.startswith("2"):
            return "swagger2"
        raise DocumentLoadError(f"Unsupported Swagger version: {version}")
    raise DocumentLoadError("Document has neither an 'openapi' nor a 'swagger' version field")
