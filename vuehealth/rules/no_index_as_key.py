# Index-as-key detection: v-for index bound to :key breaks DOM reuse on reorder

from __future__ import annotations

from vuehealth.rules.base import Rule, RuleContext, Visitor
from vuehealth.template import VForExpression


class NoIndexAsKeyRule(Rule):
    """
    Template-only: for `v-for="(item, index) in items"`, flags a `:key` on the
    same element whose value is exactly `index`. The key attribute is reported.
    """

    id = "no-index-as-key"
    name = "Index as key"
    description = "Disallow using v-for index as :key, which causes rendering issues"
    messages = {
        "noIndexKey": (
            "Avoid using v-for index as :key, it causes incorrect DOM reuse when list order changes. "
            "Use a unique identifier instead."
        ),
    }
    default_severity = "warning"
    category = "Performance"

    def create(self, context: RuleContext) -> dict[str, Visitor]:
        return {}

    def create_template(self, context: RuleContext) -> dict[str, Visitor]:
        def v_for_expression(node: VForExpression) -> None:
            index_name = node.alias_identifier(1)
            if index_name is None:
                return
            for attr in node.attribute.element.attributes:
                if attr.directive != "bind" or attr.argument != "key" or attr.expression is None:
                    continue
                if attr.expression.bare_identifier() == index_name:
                    context.report(attr, "noIndexKey")

        return {"v_for_expression": v_for_expression}
