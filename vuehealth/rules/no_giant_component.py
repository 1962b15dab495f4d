# Giant component detection: script blocks over a line threshold

from __future__ import annotations

from tree_sitter import Node as TSNode

from vuehealth.rules.base import Rule, RuleContext, Visitor

DEFAULT_THRESHOLD = 300


class NoGiantComponentRule(Rule):
    """
    Flags a program unit whose source text has more lines than the threshold.

    For a .vue file the unit is its script content; for a plain script, the
    whole file. Lines are counted by splitting on line feeds, so a trailing
    newline counts as one more line.
    """

    id = "no-giant-component"
    name = "Giant component"
    description = "Disallow Vue SFC script blocks exceeding a line threshold"
    messages = {
        "tooLarge": (
            "Script block has {{ lines }} lines (threshold: {{ threshold }}). "
            "Consider splitting into smaller composables or components."
        ),
    }
    schema = [
        {
            "type": "object",
            "properties": {
                "threshold": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": False,
        }
    ]
    default_severity = "warning"
    category = "Best Practices"

    @property
    def threshold(self) -> int:
        if self.options and isinstance(self.options[0], dict):
            return self.options[0].get("threshold", DEFAULT_THRESHOLD)
        return DEFAULT_THRESHOLD

    def create(self, context: RuleContext) -> dict[str, Visitor]:
        threshold = self.threshold

        def program(node: TSNode) -> None:
            lines = len(context.file.program_text.split("\n"))
            if lines > threshold:
                context.report(node, "tooLarge", {"lines": str(lines), "threshold": str(threshold)})

        return {"program": program}
