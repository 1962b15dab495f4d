# Template body tree: elements, attributes, directives and parsed template expressions.
# Built from the HTML parse of a component's <template>; expressions are parsed with
# the JavaScript grammar and positioned at their line/column in the component file.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from tree_sitter import Node as TSNode
from tree_sitter import Parser, Tree

from vuehealth.parser import create_parser, parse_bytes
from vuehealth.sfc import ComponentSource, attribute_value_node, tag_name

logger = logging.getLogger(__name__)

_V_FOR_RE = re.compile(r"^\s*(.*?)\s+(?:in|of)\s+(.*?)\s*$", re.DOTALL)
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")

# Shorthand prefixes for v-bind / v-on / v-slot
_SHORTHANDS = {":": "bind", ".": "bind", "@": "on", "#": "slot"}


@dataclass
class TemplateExpression:
    """
    A JavaScript expression embedded in the template (interpolation or directive value).

    The expression is parsed on its own, prefixed with line breaks and spaces so
    that node start points equal the expression's position in the component file.
    Byte offsets of nodes are relative to ``source``, not to the component file.
    """

    kind: str  # "interpolation" | "directive" | "v-for-collection"
    text: str
    source: bytes
    tree: Tree
    start_byte: int

    @property
    def root_node(self) -> TSNode:
        return self.tree.root_node

    def expression_node(self) -> Optional[TSNode]:
        """The single top-level expression, or None for statements/empty text."""
        statements = [c for c in self.tree.root_node.named_children if c.type != "comment"]
        if len(statements) != 1 or statements[0].type != "expression_statement":
            return None
        inner = [c for c in statements[0].named_children if c.type != "comment"]
        return inner[0] if len(inner) == 1 else None

    def bare_identifier(self) -> Optional[str]:
        """Name when the expression is nothing but an identifier reference."""
        node = self.expression_node()
        if node is None or node.type != "identifier" or node.text is None:
            return None
        return node.text.decode("utf-8", errors="replace")


@dataclass
class VForExpression:
    """Parsed v-for value: ``(item, index) in items``."""

    attribute: "TemplateAttribute"
    aliases: list[str]
    collection: Optional[TemplateExpression]

    @property
    def node(self) -> TSNode:
        return self.attribute.node

    def alias_identifier(self, position: int) -> Optional[str]:
        """Alias at position when it is a plain identifier (not a pattern)."""
        if position >= len(self.aliases):
            return None
        alias = self.aliases[position]
        return alias if _IDENTIFIER_RE.match(alias) else None


@dataclass
class TemplateAttribute:
    """An attribute on a template element, with directive parts when it is one."""

    node: TSNode
    element: "TemplateElement"
    name: str
    value: Optional[str] = None
    directive: Optional[str] = None
    argument: Optional[str] = None
    modifiers: tuple[str, ...] = ()
    expression: Optional[TemplateExpression] = None
    v_for: Optional[VForExpression] = None


@dataclass
class TemplateElement:
    """An element of the template body; children keep document order."""

    node: TSNode
    name: str
    parent: Optional["TemplateElement"] = None
    attributes: list[TemplateAttribute] = field(default_factory=list)
    children: list[Union["TemplateElement", TemplateExpression]] = field(default_factory=list)

    def iter_elements(self) -> Iterator["TemplateElement"]:
        yield self
        for child in self.children:
            if isinstance(child, TemplateElement):
                yield from child.iter_elements()


@dataclass
class TemplateBody:
    """The markup-side tree of a component, rooted at its <template> element."""

    root: TemplateElement
    source: bytes


def parse_directive(name: str) -> Optional[tuple[str, Optional[str], tuple[str, ...]]]:
    """
    Split an attribute name into (directive, argument, modifiers).

    ``:key`` and ``v-bind:key`` give ("bind", "key", ()); ``@click.stop``
    gives ("on", "click", ("stop",)); plain attributes give None.
    """
    if name.startswith("v-"):
        body = name[2:]
        head, sep, rest = body.partition(":")
        if sep:
            directive = head
        else:
            directive, _, rest = body.partition(".")
            rest = "." + rest if rest else ""
            return directive, None, _modifiers(rest)
    elif name[:1] in _SHORTHANDS:
        directive = _SHORTHANDS[name[0]]
        rest = name[1:]
        if name[0] == ".":
            return directive, rest.split(".")[0] or None, ("prop",)
    else:
        return None
    if rest.startswith("["):
        close = rest.find("]")
        if close >= 0:
            return directive, rest[: close + 1], _modifiers(rest[close + 1 :])
    argument, _, mods = rest.partition(".")
    return directive, argument or None, tuple(m for m in mods.split(".") if m)


def _modifiers(rest: str) -> tuple[str, ...]:
    return tuple(m for m in rest.split(".") if m)


def _split_top_level(text: str) -> list[str]:
    """Split on commas that are not nested inside brackets."""
    parts: list[str] = []
    depth = 0
    current = []
    for ch in text:
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def _parse_v_for_aliases(left: str) -> list[str]:
    left = left.strip()
    if left.startswith("(") and left.endswith(")"):
        left = left[1:-1]
    return _split_top_level(left)


class _TemplateBuilder:
    """Converts the HTML parse of a <template> element into a TemplateBody."""

    def __init__(self, component: ComponentSource, parser: Optional[Parser] = None) -> None:
        self.component = component
        self.source = component.source
        self.parser = parser if parser is not None else create_parser("javascript")

    def parse_expression(self, kind: str, start: int, end: int) -> TemplateExpression:
        text = self.source[start:end]
        row = self.source.count(b"\n", 0, start)
        col = start - (self.source.rfind(b"\n", 0, start) + 1)
        padded = b"\n" * row + b" " * col + text
        tree = parse_bytes(padded, parser=self.parser)
        return TemplateExpression(
            kind=kind,
            text=text.decode("utf-8", errors="replace"),
            source=padded,
            tree=tree,
            start_byte=start,
        )

    def build(self, node: TSNode) -> TemplateBody:
        root = self._element(node, None)
        for start, end in self.component.interpolations:
            owner = self._innermost(root, start, end)
            owner.children.append(self.parse_expression("interpolation", start, end))
        for element in root.iter_elements():
            element.children.sort(key=_child_start)
        return TemplateBody(root=root, source=self.source)

    def _innermost(self, element: TemplateElement, start: int, end: int) -> TemplateElement:
        for child in element.children:
            if isinstance(child, TemplateElement):
                if child.node.start_byte <= start and end <= child.node.end_byte:
                    return self._innermost(child, start, end)
        return element

    def _element(self, node: TSNode, parent: Optional[TemplateElement]) -> TemplateElement:
        element = TemplateElement(node=node, name=tag_name(node) or "", parent=parent)
        for child in node.children:
            if child.type in ("start_tag", "self_closing_tag"):
                for attr in child.children:
                    if attr.type == "attribute":
                        element.attributes.append(self._attribute(attr, element))
            elif child.type == "element":
                element.children.append(self._element(child, element))
        return element

    def _attribute(self, node: TSNode, element: TemplateElement) -> TemplateAttribute:
        name_node = next((c for c in node.children if c.type == "attribute_name"), None)
        name = name_node.text.decode("utf-8", errors="replace") if name_node is not None and name_node.text else ""
        value_node = attribute_value_node(node)
        value = None
        if value_node is not None:
            value = self.source[value_node.start_byte : value_node.end_byte].decode("utf-8", errors="replace")
        attribute = TemplateAttribute(node=node, element=element, name=name, value=value)

        parts = parse_directive(name)
        if parts is None:
            return attribute
        attribute.directive, attribute.argument, attribute.modifiers = parts
        if value_node is None or attribute.directive == "slot":
            return attribute

        if attribute.directive == "for":
            attribute.v_for = self._v_for(attribute, value_node)
        else:
            attribute.expression = self.parse_expression("directive", value_node.start_byte, value_node.end_byte)
        return attribute

    def _v_for(self, attribute: TemplateAttribute, value_node: TSNode) -> VForExpression:
        text = attribute.value or ""
        match = _V_FOR_RE.match(text)
        if match is None:
            logger.debug("Unrecognized v-for expression: %r", text)
            return VForExpression(attribute=attribute, aliases=[], collection=None)
        aliases = _parse_v_for_aliases(match.group(1))
        offset = value_node.start_byte + len(text[: match.start(2)].encode("utf-8"))
        end = offset + len(match.group(2).encode("utf-8"))
        collection = self.parse_expression("v-for-collection", offset, end)
        return VForExpression(attribute=attribute, aliases=aliases, collection=collection)


def _child_start(child: Union[TemplateElement, TemplateExpression]) -> int:
    if isinstance(child, TemplateElement):
        return child.node.start_byte
    return child.start_byte


def build_template_body(component: ComponentSource, parser: Optional[Parser] = None) -> Optional[TemplateBody]:
    """Template body of a split component, or None when it has no <template>."""
    if component.template_node is None:
        return None
    return _TemplateBuilder(component, parser=parser).build(component.template_node)
