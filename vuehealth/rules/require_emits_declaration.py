# Emits declaration check: emit() calls without defineEmits() in the same program

from __future__ import annotations

from tree_sitter import Node as TSNode

from vuehealth.rules.base import Rule, RuleContext, Visitor, call_arguments, callee_name


class RequireEmitsDeclarationRule(Rule):
    """
    Collects every `emit(...)` call with at least one argument; when the program
    ends without any `defineEmits(...)` call, each collected call is reported.
    """

    id = "require-emits-declaration"
    name = "Emits declaration"
    description = "Require defineEmits() when using emit() in <script setup>"
    messages = {
        "requireEmits": (
            "emit() is called but defineEmits() is not declared. Add defineEmits() to document component events."
        ),
    }
    default_severity = "warning"
    category = "Best Practices"

    def create(self, context: RuleContext) -> dict[str, Visitor]:
        has_define_emits = False
        emit_calls: list[TSNode] = []

        def program(node: TSNode) -> None:
            nonlocal has_define_emits
            has_define_emits = False
            emit_calls.clear()

        def call_expression(node: TSNode) -> None:
            nonlocal has_define_emits
            if callee_name(node) == "defineEmits":
                has_define_emits = True

        def call_expression_exit(node: TSNode) -> None:
            if callee_name(node) == "emit" and call_arguments(node):
                emit_calls.append(node)

        def program_exit(node: TSNode) -> None:
            if has_define_emits:
                return
            for call in emit_calls:
                context.report(call, "requireEmits")

        return {
            "program": program,
            "call_expression": call_expression,
            "call_expression:exit": call_expression_exit,
            "program:exit": program_exit,
        }
