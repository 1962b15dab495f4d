# Rule interface (abstract base class): defines the contract all rules must implement.
# Concrete rules (no_reactive_destructure, no_index_as_key, etc.) subclass Rule and
# implement create(), returning visitors keyed by tree-sitter node type.

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from jsonschema import Draft202012Validator
from tree_sitter import Node as TSNode

from vuehealth.context import FileContext, get_line_col
from vuehealth.findings.models import Finding, Location, Severity
from vuehealth.template import TemplateElement, TemplateExpression

PLUGIN_NAME = "vue-health"

Visitor = Callable[[Any], None]

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")
_SNIPPET_MAX_CHARS = 120


class RuleConfigurationError(ValueError):
    """Raised when a rule is activated with options that fail its schema."""


def format_message(template: str, data: Optional[Mapping[str, str]] = None) -> str:
    """Substitute ``{{ name }}`` placeholders; unknown names are left as written."""
    if not data:
        return template

    def repl(m: re.Match[str]) -> str:
        key = m.group(1)
        return str(data[key]) if key in data else m.group(0)

    return _PLACEHOLDER_RE.sub(repl, template)


def node_text(node: Optional[TSNode]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def callee_name(call_node: TSNode) -> Optional[str]:
    """Name of the called function when the callee is a bare identifier (e.g. 'ref')."""
    if call_node.type != "call_expression":
        return None
    fn = call_node.child_by_field_name("function")
    if fn is None or fn.type != "identifier":
        return None
    return node_text(fn)


def member_method_name(call_node: TSNode) -> Optional[str]:
    """Property name for calls of the form obj.method(...), else None."""
    if call_node is None or call_node.type != "call_expression":
        return None
    fn = call_node.child_by_field_name("function")
    if fn is None or fn.type != "member_expression":
        return None
    prop = fn.child_by_field_name("property")
    if prop is None or prop.type not in ("property_identifier", "identifier"):
        return None
    return node_text(prop)


def call_arguments(call_node: TSNode) -> list[TSNode]:
    """Argument nodes of a call, comments excluded."""
    args = call_node.child_by_field_name("arguments")
    if args is None:
        return []
    return [c for c in args.named_children if c.type != "comment"]


class RuleContext:
    """
    Per-run state handed to a rule's create(): the file, the validated options
    and the list the rule reports into. A fresh RuleContext is built for every
    file, so visitor closures never share state across files.
    """

    def __init__(self, rule: "Rule", file: FileContext) -> None:
        self.rule = rule
        self.file = file
        self.findings: list[Finding] = []

    @property
    def options(self) -> Sequence[Any]:
        return self.rule.options

    def report(self, node: Any, message_id: str, data: Optional[Mapping[str, str]] = None) -> None:
        """Record a finding bound to node (a tree-sitter node or a template wrapper)."""
        ts_node: TSNode = getattr(node, "node", node)
        line, col = get_line_col(ts_node)
        text = node_text(ts_node).strip()
        snippet = text.splitlines()[0][:_SNIPPET_MAX_CHARS] if text else None
        self.findings.append(
            Finding(
                rule_id=self.rule.id,
                message_id=message_id,
                message=format_message(self.rule.messages[message_id], data),
                location=Location(path=self.file.path, line=line, column=col, snippet=snippet),
                severity=self.rule.severity,
                data=dict(data or {}),
            )
        )


def _traverse(root: TSNode, handlers: Mapping[str, Visitor]) -> None:
    """Depth-first walk calling `type` handlers on enter and `type:exit` on leave."""
    stack: list[tuple[TSNode, bool]] = [(root, False)]
    while stack:
        node, leaving = stack.pop()
        if leaving:
            handler = handlers.get(f"{node.type}:exit")
            if handler is not None:
                handler(node)
            continue
        handler = handlers.get(node.type)
        if handler is not None:
            handler(node)
        stack.append((node, True))
        for child in reversed(node.children):
            stack.append((child, False))


def _traverse_template(element: TemplateElement, handlers: Mapping[str, Visitor]) -> None:
    """Walk elements, attributes, v-for expressions and embedded expression trees."""

    def call(key: str, target: Any) -> None:
        handler = handlers.get(key)
        if handler is not None:
            handler(target)

    def expression(expr: Optional[TemplateExpression]) -> None:
        if expr is not None:
            _traverse(expr.root_node, handlers)

    call("element", element)
    for attr in element.attributes:
        call("attribute", attr)
        if attr.v_for is not None:
            call("v_for_expression", attr.v_for)
            expression(attr.v_for.collection)
            call("v_for_expression:exit", attr.v_for)
        expression(attr.expression)
        call("attribute:exit", attr)
    for child in element.children:
        if isinstance(child, TemplateElement):
            _traverse_template(child, handlers)
        else:
            expression(child)
    call("element:exit", element)


class Rule(ABC):
    """
    Abstract base class for all static analysis rules.

    Subclasses must define:
    - id: str - rule identifier within the plugin (e.g. "no-index-as-key")
    - name: str - human-readable rule name
    - messages: dict - message id -> template, with ``{{ name }}`` placeholders
    - create(context) -> visitors keyed by node type ("call_expression",
      "call_expression:exit", "program", ...)

    Optional:
    - schema: list of JSON schemas, one per positional option
    - create_template(context) -> visitors over the template body, keyed by
      "element", "attribute", "v_for_expression" and node types found inside
      template expressions. Only called when the file has a template body.

    Options are validated once, when the rule is constructed.
    """

    id: str
    name: str
    description: str = ""
    messages: dict[str, str] = {}
    schema: list[dict[str, Any]] = []
    default_severity: Severity = "warning"
    category: str = "Best Practices"

    def __init__(self, options: Optional[Sequence[Any]] = None, severity: Optional[Severity] = None) -> None:
        self.options: list[Any] = list(options or [])
        self.severity: Severity = severity or self.default_severity
        self._validate_options()

    @property
    def qualified_id(self) -> str:
        return f"{PLUGIN_NAME}/{self.id}"

    def _validate_options(self) -> None:
        schema = {"type": "array", "prefixItems": self.schema, "items": False}
        errors: Iterable[Any] = Draft202012Validator(schema).iter_errors(self.options)
        messages = [error.message for error in errors]
        if messages:
            raise RuleConfigurationError(f"Invalid options for rule {self.qualified_id}: {'; '.join(messages)}")

    @abstractmethod
    def create(self, context: RuleContext) -> dict[str, Visitor]:
        """Return script visitors for one file."""
        ...

    def create_template(self, context: RuleContext) -> dict[str, Visitor]:
        return {}

    def run(self, context: FileContext, config: Any) -> list[Finding]:
        """
        Analyze one file and return any findings.

        Args:
            context: Per-file state (path, source bytes, AST tree, template body).
            config: Scanner config; rules read their own options, not this.

        Returns:
            List of Finding objects for each issue found in this file.
        """
        rule_context = RuleContext(self, context)
        handlers = self.create(rule_context)
        if handlers:
            _traverse(context.root_node, handlers)
        if context.template_body is not None:
            template_handlers = self.create_template(rule_context)
            if template_handlers:
                _traverse_template(context.template_body.root, template_handlers)
        return rule_context.findings
