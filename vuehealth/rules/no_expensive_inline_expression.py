# Expensive inline expression detection: chained array transforms in template expressions

from __future__ import annotations

from tree_sitter import Node as TSNode

from vuehealth.rules.base import Rule, RuleContext, Visitor, member_method_name

EXPENSIVE_METHODS = frozenset({"filter", "map", "reduce", "sort", "flatMap", "find", "some", "every"})


def _is_chained_transform(node: TSNode) -> bool:
    """True for `a.filter(...).map(...)`: a transform call whose receiver is one too."""
    if member_method_name(node) not in EXPENSIVE_METHODS:
        return False
    fn = node.child_by_field_name("function")
    receiver = fn.child_by_field_name("object") if fn is not None else None
    return receiver is not None and member_method_name(receiver) in EXPENSIVE_METHODS


class NoExpensiveInlineExpressionRule(Rule):
    """Template-only: flags chained filter/map/reduce/... calls evaluated on every render."""

    id = "no-expensive-inline-expression"
    name = "Expensive inline expression"
    description = "Disallow chained array methods (filter/map/reduce/sort) in template expressions"
    messages = {
        "noExpensiveInline": (
            "Chained array operations in templates re-run on every render. Extract to a computed property."
        ),
    }
    default_severity = "warning"
    category = "Performance"

    def create(self, context: RuleContext) -> dict[str, Visitor]:
        return {}

    def create_template(self, context: RuleContext) -> dict[str, Visitor]:
        def call_expression(node: TSNode) -> None:
            if _is_chained_transform(node):
                context.report(node, "noExpensiveInline")

        return {"call_expression": call_expression}
