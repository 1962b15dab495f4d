"""
Single-file component splitting: locate <script> blocks, the top-level
<template> element, and mustache interpolations in a .vue file.

The markup is parsed with the tree-sitter HTML grammar. Interpolation bodies
(``{{ items.filter(x => x > 1) }}``) are not valid HTML text, so they are
found first by a small tag-aware scanner and blanked out before the markup
parse. Script content is parsed over a copy of the whole file in which every
byte outside the script blocks is blanked, which keeps tree-sitter positions
identical to file positions.

Typical usage:
    from vuehealth.sfc import split_component

    component = split_component(source)
    for block in component.scripts:
        print(block.lang, block.setup, block.start_byte, block.end_byte)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from tree_sitter import Node as TSNode
from tree_sitter import Tree

from vuehealth.parser import create_parser, parse_bytes

logger = logging.getLogger(__name__)

_TAG_OPEN_RE = re.compile(rb"</?[A-Za-z]")
_TAG_NAME_RE = re.compile(rb"</?([A-Za-z][\w:.-]*)")

# Elements whose content is raw text, never markup
_RAW_TEXT_TAGS = frozenset({b"script", b"style"})


@dataclass(frozen=True)
class ScriptBlock:
    """Byte range of one <script> block's content plus its attributes."""

    start_byte: int
    end_byte: int
    lang: Optional[str] = None
    setup: bool = False


@dataclass
class ComponentSource:
    """A .vue file split into its blocks."""

    source: bytes
    markup_tree: Tree
    scripts: list[ScriptBlock] = field(default_factory=list)
    template_node: Optional[TSNode] = None
    interpolations: list[tuple[int, int]] = field(default_factory=list)

    @property
    def lang(self) -> Optional[str]:
        """lang attribute of the first script block that declares one."""
        for block in self.scripts:
            if block.lang:
                return block.lang
        return None


def blank(source: bytes) -> bytes:
    """Replace every byte except line breaks with a space."""
    return re.sub(rb"[^\r\n]", b" ", source)


def keep_ranges(source: bytes, ranges: list[tuple[int, int]]) -> bytes:
    """Blank everything in source outside the given byte ranges."""
    out = bytearray(blank(source))
    for start, end in ranges:
        out[start:end] = source[start:end]
    return bytes(out)


def _end_of_tag(source: bytes, start: int) -> int:
    """Index just past the '>' closing the tag opened at start, honoring quotes."""
    quote = None
    i = start + 1
    n = len(source)
    while i < n:
        ch = source[i : i + 1]
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in (b'"', b"'"):
            quote = ch
        elif ch == b">":
            return i + 1
        i += 1
    return n


def find_interpolations(source: bytes) -> list[tuple[int, int]]:
    """
    Return (start, end) byte ranges of mustache interpolation bodies.

    Ranges exclude the braces. Tags, comments and raw-text elements are
    skipped so braces inside attribute values or scripts never match.
    """
    spans: list[tuple[int, int]] = []
    i = 0
    n = len(source)
    while i < n:
        if source.startswith(b"<!--", i):
            end = source.find(b"-->", i + 4)
            i = n if end < 0 else end + 3
        elif source.startswith(b"<", i) and _TAG_OPEN_RE.match(source, i):
            match = _TAG_NAME_RE.match(source, i)
            closing = source.startswith(b"</", i)
            i = _end_of_tag(source, i)
            name = match.group(1).lower() if match else b""
            if not closing and name in _RAW_TEXT_TAGS:
                close = source.lower().find(b"</" + name, i)
                i = n if close < 0 else close
        elif source.startswith(b"{{", i):
            end = source.find(b"}}", i + 2)
            if end < 0:
                break
            spans.append((i + 2, end))
            i = end + 2
        else:
            i += 1
    return spans


def _tag_node(element: TSNode) -> Optional[TSNode]:
    for child in element.children:
        if child.type in ("start_tag", "self_closing_tag"):
            return child
    return None


def tag_name(element: TSNode) -> Optional[str]:
    """Lowercased tag name of an element node, or None."""
    tag = _tag_node(element)
    if tag is None:
        return None
    for child in tag.children:
        if child.type == "tag_name" and child.text is not None:
            return child.text.decode("utf-8", errors="replace").lower()
    return None


def attribute_value_node(attribute: TSNode) -> Optional[TSNode]:
    """The attribute_value node of an attribute, quoted or not."""
    for child in attribute.children:
        if child.type == "attribute_value":
            return child
        if child.type == "quoted_attribute_value":
            for sub in child.children:
                if sub.type == "attribute_value":
                    return sub
    return None


def _script_attributes(element: TSNode) -> tuple[Optional[str], bool]:
    lang = None
    setup = False
    tag = _tag_node(element)
    if tag is None:
        return lang, setup
    for attr in tag.children:
        if attr.type != "attribute":
            continue
        name_node = next((c for c in attr.children if c.type == "attribute_name"), None)
        if name_node is None or name_node.text is None:
            continue
        name = name_node.text.decode("utf-8", errors="replace").lower()
        if name == "setup":
            setup = True
        elif name == "lang":
            value = attribute_value_node(attr)
            if value is not None and value.text is not None:
                lang = value.text.decode("utf-8", errors="replace")
    return lang, setup


def split_component(source: bytes) -> ComponentSource:
    """Split .vue source into script blocks, template element and interpolations."""
    interpolations = find_interpolations(source)
    masked = bytearray(source)
    for start, end in interpolations:
        masked[start:end] = blank(source[start:end])

    tree = parse_bytes(bytes(masked), parser=create_parser("html"))
    component = ComponentSource(source=source, markup_tree=tree)

    for node in tree.root_node.children:
        if node.type == "script_element":
            lang, setup = _script_attributes(node)
            raw = next((c for c in node.children if c.type == "raw_text"), None)
            if raw is None:
                logger.debug("Skipping empty script block at byte %d", node.start_byte)
                continue
            component.scripts.append(
                ScriptBlock(start_byte=raw.start_byte, end_byte=raw.end_byte, lang=lang, setup=setup)
            )
        elif node.type == "element" and component.template_node is None and tag_name(node) == "template":
            component.template_node = node

    if component.template_node is not None:
        t_start = component.template_node.start_byte
        t_end = component.template_node.end_byte
        component.interpolations = [
            (start, end) for start, end in interpolations if t_start <= start and end <= t_end
        ]

    logger.debug(
        "Split component: %d script block(s), template=%s, %d interpolation(s)",
        len(component.scripts),
        component.template_node is not None,
        len(component.interpolations),
    )
    return component
