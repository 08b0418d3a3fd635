"""Load configuration documents from disk or from a shared URL."""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests
import yaml

PACKAGE_NAME_REGEX = re.compile(r"^[a-z0-9][a-z0-9-_@/.]*$", re.IGNORECASE)

FETCH_TIMEOUT = 15
YAML_SUFFIXES = (".yml", ".yaml")


class DocumentLoadError(Exception):
    """Raised when a configuration document cannot be read or parsed."""


def is_safe_url(url: str) -> bool:
    """Only plain http(s) URLs may be fetched or opened."""
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError):
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_package_name(name: str) -> bool:
    return isinstance(name, str) and bool(PACKAGE_NAME_REGEX.match(name)) and len(name) <= 128


def _looks_like_url(source: str) -> bool:
    return "://" in source


def _parse(text: str, name: str) -> Any:
    try:
        if name.lower().endswith(YAML_SUFFIXES):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DocumentLoadError(f"Failed to parse {name}: {exc}") from exc


def load_document(source: str) -> Any:
    """Read a JSON or YAML document from a file path or an http(s) URL."""
    if _looks_like_url(source):
        if not is_safe_url(source):
            raise DocumentLoadError(f"Refusing to fetch non-http(s) URL: {source}")
        try:
            resp = requests.get(source, timeout=FETCH_TIMEOUT)
        except requests.RequestException as exc:
            raise DocumentLoadError(f"Failed to fetch {source}: {exc}") from exc
        if resp.status_code != 200:
            raise DocumentLoadError(f"Failed to fetch {source}: HTTP {resp.status_code}")
        return _parse(resp.text, urlparse(source).path)

    path = Path(source)
    if not path.is_file():
        raise DocumentLoadError(f"File not found: {source}")
    try:
        text = path.read_text()
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentLoadError(f"Cannot read {source}: {exc}") from exc
    return _parse(text, path.name)
