"""Instance identity: derive count index / for_each key from a module name.

A module produced by ``count`` is named ``<base>[N]`` and one produced by
``for_each`` is named ``<base>["k"]``. Keys are written the way Terraform
writes them in addresses: double-quoted with backslash escapes, so
``a"b`` appears as ``["a\\"b"]``. The patterns below are compiled once at
import time; compiled patterns hold no match state, so they are safe to share
between threads.

The two patterns cannot both match the same name: a counted name ends in an
ASCII digit followed by ``]`` while a keyed name ends in an unescaped ``"]``.
"""

import json
import re
from typing import Optional

COUNT_PATTERN = re.compile(r"\[([0-9]+)\]\Z")
FOR_EACH_PATTERN = re.compile(r'\[("(?:[^"\\]|\\.)*")\]\Z', re.DOTALL)


def parse_index(name: str) -> Optional[int]:
    """Return the count index encoded in ``name``, or None."""
    match = COUNT_PATTERN.search(name)
    if match is None:
        return None

    try:
        return int(match.group(1))
    except ValueError:
        return None


def parse_key(name: str) -> Optional[str]:
    """Return the for_each key encoded in ``name``, or None.

    An empty key (``vpc[""]``) returns ``""``, not None. A quoted key with an
    invalid escape sequence is treated as no key.
    """
    match = FOR_EACH_PATTERN.search(name)
    if match is None:
        return None

    try:
        return json.loads(match.group(1))
    except ValueError:
        return None


def instance_suffix(name: str) -> Optional[str]:
    """Return the trailing ``[N]`` or ``["k"]`` part of ``name``, if any."""
    for pattern in (COUNT_PATTERN, FOR_EACH_PATTERN):
        match = pattern.search(name)
        if match is not None:
            return match.group(0)
    return None


def strip_instance(name: str) -> str:
    """Return ``name`` without its instance suffix."""
    suffix = instance_suffix(name)
    if suffix is None:
        return name
    return name[: -len(suffix)]


def format_instance_name(base: str, index: Optional[int] = None, key: Optional[str] = None) -> str:
    """
    Build an instance name from a base name and an index or key.
    
    Args:
        base: Name as written in the module call
        index: count index
        key: for_each key; quotes, backslashes and control characters are escaped
        
    Returns:
        ``base[index]``, ``base["key"]`` or ``base`` when neither is given
        
    Raises:
        ValueError: If both index and key are given or the index is negative
    """
    if index is not None and key is not None:
        raise ValueError("A module instance cannot have both a count index and a for_each key")
    if index is not None:
        if index < 0:
            raise ValueError(f"Count index must be non-negative, got {index}")
        return f"{base}[{index}]"
    if key is not None:
        return f"{base}[{json.dumps(key, ensure_ascii=False)}]"
    return base
