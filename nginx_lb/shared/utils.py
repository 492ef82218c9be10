"""Common utility functions for the nginx load balancer."""

import hashlib
import re
from typing import Optional, Union


_WORD_RE = re.compile(r'[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+')


def checksum(content: Union[str, bytes]) -> str:
    """SHA1 hex digest of text or bytes."""
    if isinstance(content, str):
        content = content.encode()
    return hashlib.sha1(content).hexdigest()


def file_checksum(path: str) -> Optional[str]:
    """SHA1 hex digest of a file, or None if it does not exist."""
    try:
        with open(path, 'rb') as f:
            return checksum(f.read())
    except FileNotFoundError:
        return None


def snake_case(value: str) -> str:
    """Normalize a service hostname to a safe upstream identifier.

    "web-api.stack" -> "web_api_stack", "myService2" -> "my_service_2"
    """
    return '_'.join(word.lower() for word in _WORD_RE.findall(value))


def unescape_newlines(value: str) -> str:
    """Turn literal backslash-n sequences into real newlines."""
    return value.replace('\\n', '\n')


def split_csv(value: Optional[str]) -> list:
    """Split a comma separated value, trimming each entry.

    Empty entries are kept so positional pairing between lists survives.
    """
    if value is None:
        return []
    return [part.strip() for part in value.split(',')]
