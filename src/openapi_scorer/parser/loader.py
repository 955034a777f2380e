"""OpenAPI document loader.

Reads a document from a local file or an http(s) URL, parses JSON or YAML,
and builds a Document model.
"""

import json
import logging
from pathlib import Path
from urllib.parse import urlparse

import requests
import yaml
from pydantic import ValidationError

from .base import Document

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 10
ACCEPT_HEADER = "application/json, application/yaml, text/yaml, text/plain"


class LoadError(Exception):
    """Raised when a document cannot be read, fetched, or parsed."""


def is_url(source: str) -> bool:
    parsed = urlparse(source)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def load_spec(source: str) -> dict:
    """Load the raw document mapping from a file path or URL."""
    logger.info("Loading OpenAPI document from %s", source)
    if is_url(source):
        text = _fetch(source)
    else:
        text = _read_file(Path(source))
    return parse_content(text, source)


def load_document(source: str) -> Document:
    """Load and build a Document in one step (no structural validation)."""
    return build_document(load_spec(source))


def build_document(raw: dict) -> Document:
    try:
        return Document.model_validate(raw)
    except ValidationError as e:
        raise LoadError(f"Document does not match the expected OpenAPI shape: {e}") from e


def parse_content(text: str, source: str) -> dict:
    """Parse JSON (text starting with ``{``) or YAML into a mapping."""
    try:
        if text.lstrip().startswith("{"):
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise LoadError(f"Failed to parse OpenAPI document from {source}: {e}") from e

    if not isinstance(data, dict):
        raise LoadError(f"Failed to parse OpenAPI document from {source}: top level is not a mapping")
    return data


def _fetch(url: str) -> str:
    try:
        response = requests.get(url, timeout=FETCH_TIMEOUT, headers={"Accept": ACCEPT_HEADER})
        response.raise_for_status()
    except requests.RequestException as e:
        raise LoadError(f"Failed to load from URL {url}: {e}") from e
    logger.debug("Fetched %d bytes from %s (%s)", len(response.content), url,
                 response.headers.get("Content-Type", "unknown type"))
    return response.text


def _read_file(file_path: Path) -> str:
    if not file_path.exists():
        raise LoadError(f"File not found: {file_path}")
    if not file_path.is_file():
        raise LoadError(f"Path is not a file: {file_path}")
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Failed to read file {file_path}: {e}") from e
