# Hardcoded secrets detection: API keys, tokens and passwords in client-side string literals

from __future__ import annotations

import re
from typing import Optional

from tree_sitter import Node as TSNode

from vuehealth.rules.base import Rule, RuleContext, Visitor, node_text

MIN_LITERAL_LENGTH = 8

# Ordered; the first pattern that matches a literal decides the report
SECRET_PATTERNS = (
    re.compile(r"(?:api[_-]?key|apikey)\s*[:=]\s*[\"'`][A-Za-z0-9_\-]{16,}", re.IGNORECASE),
    re.compile(r"(?:secret|token|password|passwd|pwd)\s*[:=]\s*[\"'`][A-Za-z0-9_\-/.+]{8,}", re.IGNORECASE),
    re.compile(r"(?:access[_-]?key|private[_-]?key)\s*[:=]\s*[\"'`][A-Za-z0-9_\-/.+]{16,}", re.IGNORECASE),
    re.compile(r"\bsk[-_](?:live|test)[-_][A-Za-z0-9]{20,}"),  # Stripe
    re.compile(r"\bAIza[A-Za-z0-9_\\-]{35}"),  # Google API
    re.compile(r"\bghp_[A-Za-z0-9]{36}"),  # GitHub PAT
    re.compile(r"\bnpm_[A-Za-z0-9]{36}"),  # npm token
)

_STRING_ESCAPE_RE = re.compile(r"\\(u\{[0-9A-Fa-f]+\}|u[0-9A-Fa-f]{4}|x[0-9A-Fa-f]{2}|\r\n|.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_LINE_CONTINUATIONS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})
_MAX_CODE_POINT = 0x10FFFF


def _decode_escape(match: re.Match[str]) -> str:
    escape = match.group(1)
    if escape in _LINE_CONTINUATIONS:
        return ""
    if len(escape) > 1:
        code_point = int(escape.lstrip("ux").strip("{}"), 16)
        if code_point > _MAX_CODE_POINT:
            return match.group(0)
        return chr(code_point)
    return _ESCAPES.get(escape, escape)


def _unquote_string_literal(raw: str) -> Optional[str]:
    """Value of a quoted string literal with escapes decoded, or None when raw is not one."""
    if len(raw) < 2 or raw[0] not in "\"'" or raw[-1] != raw[0]:
        return None
    return _STRING_ESCAPE_RE.sub(_decode_escape, raw[1:-1])


def _template_quasis(node: TSNode) -> list[str]:
    """Static text segments of a template string, split at each ${...}."""
    source = node.text or b""
    base = node.start_byte
    cursor = 1
    quasis = []
    for child in node.children:
        if child.type == "template_substitution":
            quasis.append(source[cursor : child.start_byte - base])
            cursor = child.end_byte - base
    quasis.append(source[cursor : max(cursor, len(source) - 1)])
    return [q.decode("utf-8", errors="replace") for q in quasis]


def find_secret(value: str) -> Optional[re.Pattern[str]]:
    """First pattern in SECRET_PATTERNS matching value, or None."""
    for pattern in SECRET_PATTERNS:
        if pattern.search(value):
            return pattern
    return None


class NoSecretsInClientRule(Rule):
    """Flags string literals and template strings that look like embedded credentials."""

    id = "no-secrets-in-client"
    name = "Secrets in client code"
    description = "Disallow hardcoded API keys, tokens, and secrets in client-side code"
    messages = {
        "noSecret": (
            "Possible hardcoded secret detected. Use environment variables (e.g. import.meta.env.VITE_*) instead."
        ),
    }
    default_severity = "error"
    category = "Security"

    def create(self, context: RuleContext) -> dict[str, Visitor]:
        def string(node: TSNode) -> None:
            value = _unquote_string_literal(node_text(node))
            if value is None or len(value) < MIN_LITERAL_LENGTH:
                return
            if find_secret(value) is not None:
                context.report(node, "noSecret")

        def template_string(node: TSNode) -> None:
            for quasi in _template_quasis(node):
                if find_secret(quasi) is not None:
                    context.report(node, "noSecret")
                    return

        return {"string": string, "template_string": template_string}
