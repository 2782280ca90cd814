"""Path codec for nested props trees.

Flattens the subtree found at an attribute path into a mapping of FlatKey to
leaf value, and writes values from such a mapping back into a tree of the same
shape.

FlatKey escaping:
    Each literal ``_`` inside a path segment is doubled, and segments are joined
    with the two-character separator ``_.``::

        foo.bar      -> foo_.bar
        foo_bar      -> foo__bar
        a_.b         -> a___.b
        a._b         -> a_.__b

    Every ``_`` in a FlatKey is followed by either ``_`` or ``.``, so the
    encoding is a prefix code and distinct segment sequences never share a
    FlatKey (see ``from_flat_key`` for the inverse).

Only mappings and lists/tuples are treated as structure. Everything else,
strings included, is a leaf.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any, Callable, List, Optional, Tuple

from rendervault.shared.constants import FlatKeyConfig
from rendervault.shared.errors import (
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    create_flat_key_collision_error,
)
from rendervault.shared.types import AttributePath, FlatKey

Segments = Tuple[str, ...]
ShapeLog = List[Tuple[FlatKey, int]]


class _Missing:
    """Sentinel for a path segment that is not present in the tree."""

    _instance: Optional[_Missing] = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self


MISSING: Any = _Missing()


def parse_path(path: AttributePath) -> Segments:
    """Split a dotted attribute path into its segments.

    Raises:
        ConfigurationError: If the path is empty.
    """
    if not path:
        raise ConfigurationError(
            ErrorCode.INVALID_ATTRIBUTE_PATH,
            "Attribute path must be a non-empty string",
            ErrorContext(operation="parse_path"),
        )
    return tuple(path.split(FlatKeyConfig.PATH_SEPARATOR))


def escape_segment(segment: str) -> str:
    """Escape a single path segment for use inside a FlatKey."""
    return segment.replace(
        FlatKeyConfig.LITERAL_UNDERSCORE,
        FlatKeyConfig.ESCAPED_UNDERSCORE,
    )


def to_flat_key(segments: Iterable[str]) -> FlatKey:
    """Build the FlatKey for a sequence of path segments."""
    return FlatKeyConfig.SEGMENT_SEPARATOR.join(escape_segment(s) for s in segments)


def from_flat_key(flat_key: FlatKey) -> Segments:
    """Decode a FlatKey back into its path segments.

    Raises:
        ValueError: If ``flat_key`` was not produced by ``to_flat_key``.
    """
    segments: list[str] = []
    current: list[str] = []
    index = 0
    while index < len(flat_key):
        char = flat_key[index]
        if char != "_":
            current.append(char)
            index += 1
            continue
        follower = flat_key[index + 1] if index + 1 < len(flat_key) else ""
        if follower == "_":
            current.append("_")
        elif follower == ".":
            segments.append("".join(current))
            current = []
        else:
            msg = f"Malformed FlatKey {flat_key!r} at offset {index}"
            raise ValueError(msg)
        index += 2
    segments.append("".join(current))
    return tuple(segments)


def is_sequence(value: Any) -> bool:
    """Return True for values the codec walks by index."""
    return isinstance(value, (list, tuple))


def _resolve_key(node: Any, segment: str) -> Any:
    """Return the key or index ``segment`` addresses in ``node``, or MISSING."""
    if isinstance(node, Mapping):
        if segment in node:
            return segment
        # props built in code may use integer keys
        if segment.isdigit() and int(segment) in node:
            return int(segment)
        return MISSING
    if is_sequence(node):
        if not segment.isdigit():
            return MISSING
        index = int(segment)
        return index if index < len(node) else MISSING
    return MISSING


def read_segments(root: Any, segments: Segments) -> Any:
    """Read the value at ``segments``; absent paths yield MISSING, never raise."""
    node = root
    for segment in segments:
        key = _resolve_key(node, segment)
        if key is MISSING:
            return MISSING
        node = node[key]
    return node


def read_path(root: Any, path: AttributePath, default: Any = MISSING) -> Any:
    """Read the value at a dotted attribute path."""
    value = read_segments(root, parse_path(path))
    return default if value is MISSING else value


def _flatten_into(
    value: Any,
    segments: Segments,
    flat: dict[FlatKey, Any],
    shapes: ShapeLog | None,
) -> None:
    if isinstance(value, Mapping):
        for key, child in value.items():
            _flatten_into(child, segments + (str(key),), flat, shapes)
    elif is_sequence(value):
        if shapes is not None:
            shapes.append((to_flat_key(segments), len(value)))
        for index, child in enumerate(value):
            _flatten_into(child, segments + (str(index),), flat, shapes)
    else:
        flat[to_flat_key(segments)] = value


def flatten(
    root: Any,
    path: AttributePath,
    shapes: ShapeLog | None = None,
) -> dict[FlatKey, Any]:
    """Flatten the subtree at ``path`` into FlatKey -> leaf value.

    Args:
        root: Props tree to read from.
        path: Dotted attribute path of the subtree.
        shapes: Optional accumulator; every sequence met on the way appends
            ``(flat_prefix, length)`` in depth-first order.

    Returns:
        Mapping of FlatKey to leaf value. An absent path yields a single entry
        whose value is MISSING.
    """
    segments = parse_path(path)
    flat: dict[FlatKey, Any] = {}
    _flatten_into(read_segments(root, segments), segments, flat, shapes)
    return flat


def _substitute(value: Any, segments: Segments, table: Mapping[FlatKey, Any]) -> Any:
    if isinstance(value, Mapping):
        target = value if isinstance(value, MutableMapping) else dict(value)
        for key in list(target.keys()):
            target[key] = _substitute(target[key], segments + (str(key),), table)
        return target
    if isinstance(value, list):
        for index, child in enumerate(value):
            value[index] = _substitute(child, segments + (str(index),), table)
        return value
    if isinstance(value, tuple):
        return tuple(
            _substitute(child, segments + (str(index),), table)
            for index, child in enumerate(value)
        )
    return table.get(to_flat_key(segments))


def _replace_at(node: Any, segments: Segments, replace: Callable[[Any], Any]) -> Any:
    if not segments:
        return replace(node)
    key = _resolve_key(node, segments[0])
    if key is MISSING:
        return node
    child = node[key]
    new_child = _replace_at(child, segments[1:], replace)
    if new_child is child:
        return node
    if isinstance(node, tuple):
        return node[:key] + (new_child,) + node[key + 1 :]
    if not isinstance(node, MutableMapping) and isinstance(node, Mapping):
        node = dict(node)
    node[key] = new_child
    return node


def unflatten(tree: Any, path: AttributePath, table: Mapping[FlatKey, Any]) -> Any:
    """Write values from ``table`` into ``tree`` at ``path``.

    Walks the structure currently found at ``path`` and replaces each leaf with
    ``table[flat_key]`` (``None`` when the table has no entry). Lists and
    mutable mappings are updated in place; tuples and read-only mappings are
    rebuilt. An absent path leaves the tree untouched.

    Returns:
        The updated tree (the same object unless the root itself was rebuilt).
    """
    segments = parse_path(path)
    return _replace_at(
        tree,
        segments,
        lambda value: _substitute(value, segments, table),
    )


def _assign(node: Any, segments: Segments, value: Any) -> Any:
    if not segments:
        return value
    segment, rest = segments[0], segments[1:]
    if is_sequence(node) and segment.isdigit():
        index = int(segment)
        items = node if isinstance(node, list) else list(node)
        if index >= len(items):
            items.extend([None] * (index + 1 - len(items)))
        items[index] = _assign(items[index], rest, value)
        return items if isinstance(node, list) else tuple(items)
    if isinstance(node, MutableMapping):
        target = node
    elif isinstance(node, Mapping):
        target = dict(node)
    else:
        target = {}
    key = _resolve_key(target, segment)
    if key is MISSING:
        key = segment
    target[key] = _assign(target.get(key), rest, value)
    return target


def assign_path(tree: Any, path: AttributePath, value: Any) -> Any:
    """Set ``value`` at ``path``, creating whatever the path lacks.

    Missing intermediates become dicts and short lists are padded with
    ``None``. A leaf standing where the path needs a container is replaced.

    Returns:
        The updated tree (a new dict when ``tree`` itself was not a container).
    """
    return _assign(tree, parse_path(path), value)


def copy_tree(value: Any) -> Any:
    """Copy the mapping/sequence skeleton of a props tree, sharing leaves."""
    if isinstance(value, Mapping):
        return {key: copy_tree(child) for key, child in value.items()}
    if isinstance(value, list):
        return [copy_tree(child) for child in value]
    if isinstance(value, tuple):
        return tuple(copy_tree(child) for child in value)
    return value


def _canonical(segments: Segments) -> Segments:
    return tuple(str(int(s)) if s.isdigit() else s for s in segments)


def check_collisions(
    paths: Iterable[AttributePath],
    component: str | None = None,
) -> dict[AttributePath, FlatKey]:
    """Verify that configured attribute paths address distinct FlatKeys.

    Paths that only differ in how an index is spelled (``items.0`` and
    ``items.00``) address the same slot under different FlatKeys and are
    reported, as are duplicated entries and paths nested inside another
    configured path (``data`` and ``data.items``), whose leaves would be
    flattened twice.

    Returns:
        Mapping of each path to its FlatKey.

    Raises:
        ConfigurationError: On the first collision found.
    """
    seen: dict[Segments, AttributePath] = {}
    by_flat_key: dict[FlatKey, AttributePath] = {}
    result: dict[AttributePath, FlatKey] = {}
    for path in paths:
        segments = parse_path(path)
        flat_key = to_flat_key(segments)
        canonical = _canonical(segments)
        if flat_key in by_flat_key:
            raise create_flat_key_collision_error(
                flat_key, by_flat_key[flat_key], path, component
            )
        if canonical in seen:
            raise create_flat_key_collision_error(
                to_flat_key(canonical), seen[canonical], path, component
            )
        for other, other_path in seen.items():
            shorter, longer = sorted((other, canonical), key=len)
            if longer[: len(shorter)] == shorter:
                raise create_flat_key_collision_error(
                    to_flat_key(longer), other_path, path, component
                )
        by_flat_key[flat_key] = path
        seen[canonical] = path
        result[path] = flat_key
    return result
