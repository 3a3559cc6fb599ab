"""
Reference paths into a JSON-shaped document.

A path is rooted at ``$`` (the document itself) and continues with ``.key``
members and ``[n]`` list indices, e.g. ``$.order.items[0].sku``.

``read`` never fails on a missing segment. ``write`` is copy-on-path: only the
containers along the path are copied, every sibling subtree is shared with the
input document and left untouched.
"""

import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from statesim.domain.exception import InvalidPathError

ROOT = "$"

Segment = str | int

_segment_pattern = re.compile(r"\.([^.\[\]]+)|\[(\d+)\]")


def parse_path(path: str) -> tuple[Segment, ...]:
    """
    Split a reference path into its member names and list indices.

    :param path: A path such as ``$`` or ``$.a.b[2]``
    :type path: str
    :returns: The segments after the root, e.g. ``("a", "b", 2)``
    :rtype: tuple[str | int, ...]
    :raises InvalidPathError: If the path is not a string rooted at ``$`` or is malformed
    """
    if not isinstance(path, str):
        raise InvalidPathError(repr(path), "paths must be strings")
    return _parse(path)


@lru_cache(maxsize=512)
def _parse(path: str) -> tuple[Segment, ...]:
    if not path.startswith(ROOT):
        raise InvalidPathError(path, f"paths must start with '{ROOT}'")
    segments: list[Segment] = []
    pos = len(ROOT)
    while pos < len(path):
        match = _segment_pattern.match(path, pos)
        if match is None:
            raise InvalidPathError(path, f"unexpected character at position {pos}")
        key, index = match.groups()
        segments.append(key if key is not None else int(index))
        pos = match.end()
    return tuple(segments)


def read(document: Any, path: str, default: Any = None) -> Any:
    """
    Return the value at ``path`` or ``default`` if any segment is absent.

    :param document: The document to navigate
    :type document: Any
    :param path: The reference path
    :type path: str
    :param default: Value returned when the path does not resolve
    :type default: Any
    :returns: The value found at the path
    :rtype: Any
    """
    current = document
    for segment in parse_path(path):
        if isinstance(segment, int):
            if not isinstance(current, list) or segment >= len(current):
                return default
            current = current[segment]
        elif isinstance(current, Mapping) and segment in current:
            current = current[segment]
        else:
            return default
    return current


def write(document: Any, path: str, value: Any) -> Any:
    """
    Return a new document equal to ``document`` except that ``path`` holds ``value``.

    Missing (or null) intermediate members are created as empty objects.
    Writing at ``$`` replaces the whole document.

    :param document: The document to copy
    :type document: Any
    :param path: The reference path to write
    :type path: str
    :param value: The value to place at the path
    :type value: Any
    :returns: The updated copy
    :rtype: Any
    :raises InvalidPathError: If the path crosses a scalar or an out-of-range index
    """
    return _assign(document, parse_path(path), value, path)


def _assign(node: Any, segments: tuple[Segment, ...], value: Any, path: str) -> Any:
    if not segments:
        return value
    head, rest = segments[0], segments[1:]

    if isinstance(head, int):
        if not isinstance(node, list):
            raise InvalidPathError(path, f"index [{head}] applied to a non-list value")
        if head >= len(node):
            raise InvalidPathError(path, f"index [{head}] is out of range")
        copied_list = list(node)
        copied_list[head] = _assign(node[head], rest, value, path)
        return copied_list

    if node is None:
        node = {}
    if not isinstance(node, Mapping):
        raise InvalidPathError(path, f"member '{head}' applied to a non-object value")
    copied = dict(node)
    copied[head] = _assign(node.get(head), rest, value, path)
    return copied
