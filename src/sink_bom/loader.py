"""
Input handling for order and catalog JSON.

This module abstracts where the JSON comes from (pasted text, an uploaded
file object, a path on disk, or a URL) from the code that consumes it. It
never raises for bad input: failures are returned as error strings so a
caller can report them next to the input they came from.
"""

import json
import logging
import os
from typing import Any

import requests

logger = logging.getLogger(__name__)

METHODS = ("Paste Text", "From URL", "Upload File", "File Path")


def _decode(content: bytes | str, source_name: str) -> Any:
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"{source_name} is not valid JSON (line {e.lineno}, column {e.colno})"
        ) from e


def load_json_input(
    method: str, data: Any, source_name: str
) -> tuple[Any | None, list[str]]:
    """
    Unified handler for Text, File, Path and URL inputs.

    Args:
        method: One of "Paste Text", "From URL", "Upload File", "File Path".
        data: The raw data for the method (string, file-like object, path or
              URL).
        source_name: A display name for logging and error messages.

    Returns:
        A tuple containing:
            - The decoded JSON payload, or None on failure.
            - A list of error messages (empty on success).
    """
    # 1. Handle empty data case
    if not data:
        return None, [f"No data provided for {source_name}"]

    # 2. Dispatch based on method
    try:
        # A. PASTE TEXT
        if method == "Paste Text":
            return _decode(str(data), source_name), []

        # B. URL
        elif method == "From URL":
            url = str(data).strip()
            response = requests.get(url, timeout=10)
            response.raise_for_status()
            return _decode(response.content, source_name), []

        # C. UPLOAD FILE
        elif method == "Upload File":
            # data is expected to be a file-like object
            if hasattr(data, "getvalue"):
                content = data.getvalue()
            elif hasattr(data, "read"):
                content = data.read()
            else:
                raise ValueError("Invalid file object provided.")
            return _decode(content, source_name), []

        # D. FILE PATH
        elif method == "File Path":
            path = os.fspath(data)
            with open(path, "rb") as f:
                return _decode(f.read(), source_name), []

    except (requests.RequestException, OSError, ValueError) as e:
        logger.error(f"Error loading {source_name}: {e}")
        return None, [str(e)]

    return None, [f"Unknown Method: {method}"]
