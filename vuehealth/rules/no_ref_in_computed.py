# Ref-in-computed detection: ref() created inside computed() on every re-evaluation

from __future__ import annotations

from tree_sitter import Node as TSNode

from vuehealth.rules.base import Rule, RuleContext, Visitor, callee_name

REF_FUNCTIONS = frozenset({"ref", "shallowRef", "customRef", "toRef"})


class NoRefInComputedRule(Rule):
    """
    Flags ref-like primitives created lexically inside a computed() call.

    Enclosing computed() calls are kept on a stack, so computed-in-computed
    still reports refs in either level and leaving the inner call does not
    end the outer scope.
    """

    id = "no-ref-in-computed"
    name = "Ref in computed"
    description = "Disallow creating ref() inside computed(), which causes memory leaks"
    messages = {
        "noRefInComputed": (
            "Creating {{ name }}() inside computed() causes a new ref on every re-evaluation. Move it outside."
        ),
    }
    default_severity = "error"
    category = "Correctness"

    def create(self, context: RuleContext) -> dict[str, Visitor]:
        enclosing: list[TSNode] = []

        def enter(node: TSNode) -> None:
            name = callee_name(node)
            if name == "computed":
                enclosing.append(node)
            elif enclosing and name in REF_FUNCTIONS:
                context.report(node, "noRefInComputed", {"name": name})

        def leave(node: TSNode) -> None:
            if enclosing and callee_name(node) == "computed":
                enclosing.pop()

        return {"call_expression": enter, "call_expression:exit": leave}
