# Tree-sitter setup and AST parsing: parse script and markup source into AST trees.

import logging
from pathlib import Path
from typing import Optional

import tree_sitter
import tree_sitter_html
import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language

logger = logging.getLogger(__name__)

# Grammars: wrap the language capsules for use with tree_sitter.Parser
_LANGUAGES = {
    "javascript": Language(tree_sitter_javascript.language()),
    "typescript": Language(tree_sitter_typescript.language_typescript()),
    "tsx": Language(tree_sitter_typescript.language_tsx()),
    "html": Language(tree_sitter_html.language()),
}

_SUFFIX_DIALECTS = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

# <script lang="..."> values
_LANG_DIALECTS = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "tsx",
}


def get_language(dialect: str = "javascript") -> Language:
    """Return the Tree-sitter Language object for a dialect name."""
    try:
        return _LANGUAGES[dialect]
    except KeyError:
        raise ValueError(f"Unsupported dialect: {dialect}") from None


def dialect_for_path(path: Path) -> str:
    """Script dialect for a plain source file; unknown suffixes parse as JavaScript."""
    return _SUFFIX_DIALECTS.get(path.suffix.lower(), "javascript")


def dialect_for_lang(lang: Optional[str]) -> str:
    """Script dialect for the lang attribute of a <script> block."""
    if not lang:
        return "javascript"
    return _LANG_DIALECTS.get(lang.strip().lower(), "javascript")


def create_parser(dialect: str = "javascript") -> tree_sitter.Parser:
    """Create and return a Tree-sitter Parser configured for the dialect."""
    parser = tree_sitter.Parser(get_language(dialect))
    return parser


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse source bytes into an AST.

    Args:
        source: UTF-8 encoded source code.
        parser: Optional parser instance; if None, a JavaScript parser is created.

    Returns:
        The parse tree. Check tree.root_node for errors (e.g. ERROR nodes).
    """
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.warning(
            "Parse completed with errors: root=%s",
            tree.root_node.type,
        )
    else:
        logger.debug(
            "Parse succeeded: root=%s",
            tree.root_node.type,
        )
    return tree

