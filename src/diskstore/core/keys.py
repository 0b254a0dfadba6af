"""
Deterministic key -> file name mapping for diskstore.

Keys are identified by their str() form: 1 and "1" map to the same file.

Key Policy:
- file name: percent-encoded str(key), with no safe characters, so path
  separators and "%" never appear literally
- "." and ".." are encoded as "%2E" and "%2E%2E" (quote leaves dots alone)
- the mapping is injective: distinct key strings never share a file name
"""

from pathlib import Path
from typing import Hashable
from urllib.parse import quote, unquote

_DOT_NAMES = {".": "%2E", "..": "%2E%2E"}


def key_to_filename(key: Hashable) -> str:
    """
    Render a key as a file name. Distinct str(key) values never share a name.

    Args:
        key: Application key; rendered with str()

    Returns:
        File name safe to place directly under the store root

    Raises:
        ValueError: If the key renders to an empty string, or to a string
            that is not encodable as UTF-8 (lone surrogates)
    """
    text = str(key)
    if not text:
        raise ValueError("Key must not render to an empty string")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError(f"Key {text!r} is not valid UTF-8 text") from e

    if text in _DOT_NAMES:
        return _DOT_NAMES[text]
    return quote(text, safe="")


def filename_to_key(filename: str) -> str:
    """
    Recover the string form of a key from its file name.

    Args:
        filename: Name produced by key_to_filename

    Returns:
        str(key) of the original key
    """
    return unquote(filename)


def key_to_path(root: Path, key: Hashable) -> Path:
    """Map a key to its file path directly under root."""
    return root / key_to_filename(key)
