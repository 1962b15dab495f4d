"""Normalizers that convert analyzer output into canonical :class:`Diagnostic` records.

Three analyzers report in three shapes:

* the native linter's compact JSON (``{"diagnostics": [...]}``, codes like
  ``vue(no-v-html)``),
* the rule engine's message list (``LintResult``, ids like
  ``vue-health/no-index-as-key``),
* the dead-code detector's nested issue map
  (``issues[type][workspace][filePath] -> issue``).
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, ValidationError

from vuehealth.findings.models import Diagnostic, LintResult, Severity

logger = logging.getLogger(__name__)

ERROR_PREVIEW_LENGTH_CHARS = 200
SOURCE_FILE_PATTERN = re.compile(r"\.(?:vue|jsx?|tsx?|mjs|cjs|mts|cts)$")

_RULE_CODE_RE = re.compile(r"^(.+)\((.+)\)$")

PLUGIN_CATEGORY_MAP: dict[str, str] = {
    "vue": "Correctness",
    "jsx-a11y": "Accessibility",
    "unicorn": "Best Practices",
    "import": "Best Practices",
}

ENGINE_PLUGIN_CATEGORY_MAP: dict[str, str] = {
    "vue": "Best Practices",
    "vue-health": "Best Practices",
}

RULE_CATEGORY_MAP: dict[str, str] = {
    # vue-health rules
    "vue-health/no-reactive-destructure": "Correctness",
    "vue-health/no-ref-in-computed": "Correctness",
    "vue-health/no-async-watcheffect": "Correctness",
    "vue-health/no-index-as-key": "Performance",
    "vue-health/no-expensive-inline-expression": "Performance",
    "vue-health/no-giant-component": "Best Practices",
    "vue-health/no-secrets-in-client": "Security",
    "vue-health/require-emits-declaration": "Best Practices",
    # Vue essentials (error prevention)
    "vue/no-arrow-functions-in-watch": "Correctness",
    "vue/no-async-in-computed-properties": "Correctness",
    "vue/no-child-content": "Correctness",
    "vue/no-computed-properties-in-data": "Correctness",
    "vue/no-dupe-keys": "Correctness",
    "vue/no-dupe-v-else-if": "Correctness",
    "vue/no-dupe-v-for-key": "Correctness",
    "vue/no-duplicate-attributes": "Correctness",
    "vue/no-export-in-script-setup": "Correctness",
    "vue/no-lifecycle-after-await": "Correctness",
    "vue/no-mutating-props": "Correctness",
    "vue/no-parsing-error": "Correctness",
    "vue/no-ref-as-operand": "Correctness",
    "vue/no-ref-object-reactivity-loss": "Correctness",
    "vue/no-reserved-component-names": "Correctness",
    "vue/no-reserved-keys": "Correctness",
    "vue/no-reserved-props": "Correctness",
    "vue/no-setup-props-reactivity-loss": "Correctness",
    "vue/no-shared-component-data": "Correctness",
    "vue/no-side-effects-in-computed-properties": "Correctness",
    "vue/no-template-key": "Correctness",
    "vue/no-textarea-mustache": "Correctness",
    "vue/no-undef-components": "Correctness",
    "vue/no-unused-components": "Dead Code",
    "vue/no-unused-vars": "Dead Code",
    "vue/no-use-computed-property-like-method": "Correctness",
    "vue/no-use-v-if-with-v-for": "Performance",
    "vue/no-useless-template-attributes": "Best Practices",
    "vue/no-v-text-v-html-on-component": "Correctness",
    "vue/no-watch-after-await": "Correctness",
    "vue/require-component-is": "Correctness",
    "vue/require-prop-type-constructor": "Correctness",
    "vue/require-render-return": "Correctness",
    "vue/require-v-for-key": "Correctness",
    "vue/require-valid-default-prop": "Correctness",
    "vue/return-in-computed-property": "Correctness",
    "vue/use-v-on-exact": "Correctness",
    "vue/valid-attribute-name": "Correctness",
    "vue/valid-define-emits": "Correctness",
    "vue/valid-define-props": "Correctness",
    "vue/valid-next-tick": "Correctness",
    "vue/valid-template-root": "Correctness",
    "vue/valid-v-bind": "Correctness",
    "vue/valid-v-else-if": "Correctness",
    "vue/valid-v-else": "Correctness",
    "vue/valid-v-for": "Correctness",
    "vue/valid-v-if": "Correctness",
    "vue/valid-v-model": "Correctness",
    "vue/valid-v-on": "Correctness",
    "vue/valid-v-slot": "Correctness",
    # Style and structure
    "vue/prefer-use-template-ref": "Best Practices",
    "vue/require-explicit-emits": "Best Practices",
    "vue/component-api-style": "Best Practices",
    "vue/define-macros-order": "Best Practices",
    "vue/block-order": "Best Practices",
    "vue/no-empty-component-block": "Best Practices",
    # Security
    "vue/no-v-html": "Security",
}

# Keyed by bare rule id; used when the analyzer supplies no help text
RULE_HELP_MAP: dict[str, str] = {
    "no-arrow-functions-in-watch": "Use regular functions in watch so `this` refers to the component instance",
    "no-async-in-computed-properties": (
        "Move async logic to methods or watchers, computed properties must be synchronous"
    ),
    "no-child-content": "Remove child content when using v-html or v-text, it will be overwritten",
    "no-computed-properties-in-data": "Use computed properties or methods instead of referencing computed in data()",
    "no-dupe-keys": "Rename the duplicate key; property names must be unique across data, computed, and methods",
    "no-mutating-props": (
        "Use `emit('update:propName', newValue)` or a local data copy instead of mutating props directly"
    ),
    "no-ref-as-operand": "Use `.value` to access ref values in script: `count.value++` instead of `count++`",
    "no-setup-props-reactivity-loss": "Use `toRefs(props)` or `computed(() => props.x)` to maintain reactivity",
    "no-shared-component-data": "Return a new object from data(): `data() { return { ... } }` to avoid shared state",
    "no-side-effects-in-computed-properties": "Move side effects to watchers or methods; computed should be pure",
    "no-unused-components": "Remove the unused component import or use it in the template",
    "no-unused-vars": "Remove the unused variable or prefix with `_` to indicate intentional non-use",
    "no-use-v-if-with-v-for": "Move v-if to a wrapper element or use computed to filter the list before v-for",
    "no-v-html": "v-html can lead to XSS attacks; sanitize content or use text interpolation instead",
    "no-watch-after-await": "Move watch() calls before any await in setup(), they won't be registered after await",
    "no-lifecycle-after-await": (
        "Move lifecycle hooks before any await in setup(), they won't be registered after await"
    ),
    "require-v-for-key": "Add a unique `:key` binding to v-for elements for efficient DOM updates",
    "return-in-computed-property": "Computed properties must return a value; add a return statement",
    "valid-v-model": "v-model requires a valid writable expression: a data property or computed with getter/setter",
    "no-reactive-destructure": "Keep the reactive object intact, or wrap it: `const { a } = toRefs(state)`",
    "no-ref-in-computed": "Create the ref once in setup and read it inside computed()",
    "no-async-watcheffect": "Keep the effect callback synchronous and start async work from inside it",
    "no-index-as-key": "Bind :key to a stable id of the item, e.g. `:key=\"item.id\"`",
    "no-expensive-inline-expression": "Move the chained transform into a computed() and reference it in the template",
    "no-giant-component": "Extract composables or child components until the script block is smaller",
    "no-secrets-in-client": "Move the value to a server-side secret or an environment variable and rotate it",
    "require-emits-declaration": "Declare events with `const emit = defineEmits(['change'])`",
}

KNIP_RECORD_TYPES = ("exports", "types", "duplicates", "dependencies", "devDependencies", "unlisted")

KNIP_MESSAGE_MAP: dict[str, str] = {
    "files": "Unused file",
    "exports": "Unused export",
    "types": "Unused type",
    "duplicates": "Duplicate export",
    "dependencies": "Unused dependency",
    "devDependencies": "Unused devDependency",
    "unlisted": "Unlisted dependency",
}

KNIP_FILES_HELP = "This file is not imported by any other file in the project."


class AnalyzerOutputError(RuntimeError):
    """Raised when an analyzer payload cannot be decoded; carries a bounded preview."""

    def __init__(self, analyzer: str, payload: str, reason: str = "") -> None:
        self.analyzer = analyzer
        self.preview = payload[:ERROR_PREVIEW_LENGTH_CHARS]
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Failed to parse {analyzer} output{detail}: {self.preview}")


# --- compact JSON payload models ------------------------------------------------


class OxlintSpan(BaseModel):
    offset: int = 0
    length: int = 0
    line: int = 0
    column: int = 0


class OxlintLabel(BaseModel):
    label: Optional[str] = None
    span: OxlintSpan


class OxlintDiagnostic(BaseModel):
    message: str = ""
    code: Optional[str] = None
    severity: Union[str, int] = "warning"
    help: Optional[str] = None
    url: Optional[str] = None
    filename: str = ""
    labels: list[OxlintLabel] = Field(default_factory=list)


class OxlintOutput(BaseModel):
    diagnostics: list[OxlintDiagnostic] = Field(default_factory=list)
    number_of_files: int = 0
    number_of_rules: int = 0


# --- rule identifiers ------------------------------------------------------------


def parse_rule_code(code: str) -> tuple[str, str]:
    """Split ``plugin(rule)`` into (plugin, rule); unparseable codes give ("unknown", code)."""
    match = _RULE_CODE_RE.match(code)
    if match is None:
        return "unknown", code
    return re.sub(r"^eslint-plugin-", "", match.group(1)), match.group(2)


def parse_rule_id(rule_id: Optional[str]) -> tuple[str, str]:
    """Split ``namespace/rule`` on the last slash; bare ids belong to plugin ``eslint``."""
    if not rule_id:
        return "eslint", "unknown"
    if "/" not in rule_id:
        return "eslint", rule_id
    plugin, _, rule = rule_id.rpartition("/")
    return plugin, rule


def map_severity(severity: Union[int, str, None]) -> Severity:
    """Numeric 2 -> error, other numbers -> warning; error/warning strings pass through."""
    if severity in ("error", "warning"):
        return severity  # type: ignore[return-value]
    return "error" if severity == 2 else "warning"


def resolve_category(plugin: str, rule: str, plugin_defaults: Mapping[str, str] = PLUGIN_CATEGORY_MAP) -> str:
    return RULE_CATEGORY_MAP.get(f"{plugin}/{rule}") or plugin_defaults.get(plugin) or "Other"


def resolve_help(rule: str, help_text: Optional[str] = None) -> str:
    return help_text or RULE_HELP_MAP.get(rule, "")


# --- analyzers -------------------------------------------------------------------


def _decode_json(analyzer: str, payload: str) -> Any:
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise AnalyzerOutputError(analyzer, payload, str(e)) from e


def normalize_oxlint_output(payload: Union[str, Mapping[str, Any]]) -> list[Diagnostic]:
    """
    Convert the native linter's JSON report into diagnostics.

    Diagnostics without a code, or whose filename is not a plausible source
    file, are dropped. An empty text payload means no diagnostics.
    """
    if isinstance(payload, str):
        text = payload.strip()
        if not text:
            return []
        data = _decode_json("oxlint", text)
    else:
        text = json.dumps(payload, default=str)
        data = payload

    try:
        output = OxlintOutput.model_validate(data)
    except ValidationError as e:
        raise AnalyzerOutputError("oxlint", text, f"{e.error_count()} validation error(s)") from e

    diagnostics: list[Diagnostic] = []
    for item in output.diagnostics:
        if not item.code or not SOURCE_FILE_PATTERN.search(item.filename):
            logger.debug("Dropping oxlint diagnostic code=%r file=%r", item.code, item.filename)
            continue
        plugin, rule = parse_rule_code(item.code)
        primary = item.labels[0].span if item.labels else None
        diagnostics.append(
            Diagnostic(
                file_path=item.filename,
                plugin=plugin,
                rule=rule,
                severity=map_severity(item.severity),
                message=item.message,
                help=resolve_help(rule, item.help),
                line=primary.line if primary is not None else 0,
                column=primary.column if primary is not None else 0,
                category=resolve_category(plugin, rule),
            )
        )
    logger.info("Normalized %d oxlint diagnostic(s)", len(diagnostics))
    return diagnostics


def _relative(path: str, root: Optional[str]) -> str:
    if root and os.path.isabs(path):
        return os.path.relpath(path, root)
    return path


def normalize_lint_results(results: Iterable[LintResult], root: Optional[str] = None) -> list[Diagnostic]:
    """Convert engine messages (one LintResult per file) into diagnostics."""
    diagnostics: list[Diagnostic] = []
    for result in results:
        file_path = _relative(result.file_path, root)
        for msg in result.messages:
            plugin, rule = parse_rule_id(msg.rule_id)
            diagnostics.append(
                Diagnostic(
                    file_path=file_path,
                    plugin=plugin,
                    rule=rule,
                    severity=map_severity(msg.severity),
                    message=msg.message,
                    help=resolve_help(rule),
                    line=max(msg.line, 0),
                    column=max(msg.column, 0),
                    category=resolve_category(plugin, rule, ENGINE_PLUGIN_CATEGORY_MAP),
                )
            )
    logger.info("Normalized %d engine diagnostic(s)", len(diagnostics))
    return diagnostics


def _dead_code_diagnostic(file_path: str, issue_type: str, message: str, help_text: str = "") -> Diagnostic:
    return Diagnostic(
        file_path=file_path,
        plugin="knip",
        rule=issue_type,
        severity="warning",
        message=message,
        help=help_text,
        line=0,
        column=0,
        category="Dead Code",
        weight=1,
    )


def normalize_knip_results(payload: Union[str, Mapping[str, Any]], root: Optional[str] = None) -> list[Diagnostic]:
    """
    Flatten the dead-code issue map into one diagnostic per leaf issue.

    ``issues.files`` lists unused files; every record type maps
    workspace -> file path -> ``{filePath, symbol, type}``.
    """
    if isinstance(payload, str):
        text = payload.strip()
        data = _decode_json("knip", text) if text else {}
    else:
        text = json.dumps(payload, default=str)
        data = payload

    if not isinstance(data, Mapping):
        raise AnalyzerOutputError("knip", text, "expected an object")
    issues = data.get("issues", {})
    if not isinstance(issues, Mapping):
        raise AnalyzerOutputError("knip", text, "issues must be an object")

    diagnostics: list[Diagnostic] = []
    files: Sequence[str] = list(issues.get("files") or [])
    for unused in files:
        diagnostics.append(
            _dead_code_diagnostic(_relative(str(unused), root), "files", KNIP_MESSAGE_MAP["files"], KNIP_FILES_HELP)
        )

    for issue_type in KNIP_RECORD_TYPES:
        records = issues.get(issue_type) or {}
        if not isinstance(records, Mapping):
            raise AnalyzerOutputError("knip", text, f"{issue_type} must be an object")
        for workspace_issues in records.values():
            if not isinstance(workspace_issues, Mapping):
                continue
            for file_key, issue in workspace_issues.items():
                if not isinstance(issue, Mapping):
                    continue
                file_path = str(issue.get("filePath") or file_key)
                symbol = issue.get("symbol", "")
                diagnostics.append(
                    _dead_code_diagnostic(
                        _relative(file_path, root),
                        issue_type,
                        f"{KNIP_MESSAGE_MAP[issue_type]}: {symbol}",
                    )
                )
    logger.info("Normalized %d dead code diagnostic(s)", len(diagnostics))
    return diagnostics
