"""Templatization of cached render output.

On a miss the host renderer is run once against a copy of the props in which
every template attribute leaf is replaced by a ``${FlatKey}`` placeholder. The
resulting markup is compiled into a Template: literal chunks interleaved with
named slots. On every call (the miss included) the slots are filled with the
current, escaped values of the template attributes.

Only placeholders for FlatKeys known at compile time become slots. Any other
``${...}`` text in the markup stays literal.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from rendervault.core.path_codec import (
    MISSING,
    ShapeLog,
    assign_path,
    copy_tree,
    flatten,
    parse_path,
    read_path,
    to_flat_key,
    unflatten,
)
from rendervault.shared.constants import FlatKeyConfig
from rendervault.shared.errors import ErrorCode, ErrorContext, TemplateError
from rendervault.shared.types import AttributePath, FlatKey


def escape_text(value: Any) -> str:
    """Escape a leaf value for inclusion in markup text content.

    Absent and None values become the empty string; booleans use their
    lowercase markup spelling.
    """
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    return html.escape(text, quote=True)


def placeholder(flat_key: FlatKey) -> str:
    """Return the substitution token for a FlatKey."""
    return f"{FlatKeyConfig.PLACEHOLDER_PREFIX}{flat_key}{FlatKeyConfig.PLACEHOLDER_SUFFIX}"


@dataclass
class TemplateValues:
    """Escaped template attribute values of one call plus their shape log."""

    values: dict[FlatKey, str] = field(default_factory=dict)
    shapes: ShapeLog = field(default_factory=list)


def collect_values(props: Any, template_attrs: Iterable[AttributePath]) -> TemplateValues:
    """Flatten every template attribute of ``props`` into escaped values."""
    collected = TemplateValues()
    for path in template_attrs:
        for flat_key, value in flatten(props, path, collected.shapes).items():
            collected.values[flat_key] = escape_text(value)
    return collected


def templatize(props: Any, template_attrs: Iterable[AttributePath]) -> Any:
    """Return a copy of ``props`` with template leaves replaced by placeholders.

    An attribute absent from ``props`` is created in the copy and holds a
    single placeholder, so the compiled template still has a slot for it.
    The caller's props are left untouched.
    """
    tokenized = copy_tree(props)
    for path in template_attrs:
        if read_path(tokenized, path) is MISSING:
            tokenized = assign_path(tokenized, path, placeholder(to_flat_key(parse_path(path))))
            continue
        tokens = {flat_key: placeholder(flat_key) for flat_key in flatten(tokenized, path)}
        tokenized = unflatten(tokenized, path, tokens)
    return tokenized


class Template:
    """Compiled markup: literal chunks separated by named slots."""

    __slots__ = ("_chunks", "_slots")

    def __init__(self, chunks: tuple[str, ...], slots: tuple[FlatKey, ...]) -> None:
        if len(chunks) != len(slots) + 1:
            raise TemplateError(
                ErrorCode.TEMPLATE_COMPILE_FAILED,
                f"Template needs one more chunk than slots, got {len(chunks)} and {len(slots)}",
                ErrorContext(operation="compile_template"),
            )
        self._chunks = chunks
        self._slots = slots

    @property
    def slots(self) -> tuple[FlatKey, ...]:
        return self._slots

    def render(self, values: Mapping[FlatKey, str]) -> str:
        """Fill every slot from ``values``; missing slots render empty."""
        parts = [self._chunks[0]]
        for slot, chunk in zip(self._slots, self._chunks[1:]):
            parts.append(values.get(slot, ""))
            parts.append(chunk)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Template(slots={list(self._slots)!r})"


def compile_template(markup: str, flat_keys: Iterable[FlatKey]) -> Template:
    """Compile rendered markup containing placeholders into a Template.

    Placeholders are recognized both verbatim and in their escaped form, in
    case the host renderer escaped them along with the surrounding text.
    """
    tokens: dict[str, FlatKey] = {}
    for flat_key in flat_keys:
        token = placeholder(flat_key)
        tokens[token] = flat_key
        tokens.setdefault(html.escape(token, quote=True), flat_key)
    if not tokens:
        return Template((markup,), ())

    pattern = re.compile(
        "|".join(re.escape(token) for token in sorted(tokens, key=len, reverse=True))
    )
    chunks: list[str] = []
    slots: list[FlatKey] = []
    position = 0
    for match in pattern.finditer(markup):
        chunks.append(markup[position : match.start()])
        slots.append(tokens[match.group(0)])
        position = match.end()
    chunks.append(markup[position:])
    return Template(tuple(chunks), tuple(slots))


def restore(template: Template, values: TemplateValues | Mapping[FlatKey, str]) -> str:
    """Splice the current call's values back into a cached template."""
    if isinstance(values, TemplateValues):
        values = values.values
    return template.render(values)


def rewrite_instance_id(
    markup: str,
    old_id: str | None,
    new_id: str | None,
    attribute: str,
) -> str:
    """Rewrite the host renderer's instance id marker.

    Matches ``attribute="<old_id>`` as a prefix so ids derived from the root
    id (``root.0.1``) follow it.
    """
    if old_id is None or new_id is None or old_id == new_id:
        return markup
    return markup.replace(f'{attribute}="{old_id}', f'{attribute}="{new_id}')
