# Per-file analysis context: store file path, source code, script AST, template body,
# and helper methods. Handles reading/parsing .vue and script files, error handling for
# unreadable/malformed files, and logging of node/call counts so ASTs are ready for rules.

import logging
from pathlib import Path
from typing import Optional

from tree_sitter import Node as TSNode
from tree_sitter import Tree

from vuehealth.parser import create_parser, dialect_for_lang, dialect_for_path, parse_bytes
from vuehealth.sfc import keep_ranges, split_component
from vuehealth.template import TemplateBody, build_template_body

logger = logging.getLogger(__name__)


def _count_nodes(node: TSNode) -> int:
    """Count all descendants of node (including node itself)."""
    count = 1
    for child in node.children:
        count += _count_nodes(child)
    return count


def _count_calls(root: TSNode) -> int:
    """Count call_expression nodes under root."""
    count = 0
    if root.type == "call_expression":
        count += 1
    for child in root.children:
        count += _count_calls(child)
    return count


def count_tree_stats(root: TSNode) -> tuple[int, int]:
    """
    Return (total node count, call expression count) for the tree.

    Useful for logging how much was parsed (nodes and calls).
    """
    return _count_nodes(root), _count_calls(root)


class FileContext:
    """
    Per-file state for static analysis: path, raw source bytes, script AST and,
    for single-file components, the template body.

    Rules use context.path, context.source and context.tree. Template-aware
    rules additionally need context.template_body, which is None for plain
    script files and for components without a <template>. program_text is the
    source of the top-level program unit (the script blocks of a component).
    """

    def __init__(
        self,
        path: Path,
        source: bytes,
        tree: Tree,
        *,
        template_body: Optional[TemplateBody] = None,
        program_text: Optional[str] = None,
        has_parse_errors: bool = False,
    ) -> None:
        self.path = path
        self.source = source
        self.tree = tree
        self.template_body = template_body
        if program_text is None:
            program_text = source.decode("utf-8", errors="replace")
        self.program_text = program_text
        self.has_parse_errors = has_parse_errors

    @property
    def root_node(self) -> TSNode:
        """Convenience access to the AST root."""
        return self.tree.root_node


def get_line_col(node: TSNode, one_based: bool = True) -> tuple[int, int]:
    """
    Return (line, column) for the node's start position.

    Tree-sitter uses 0-based (row, col). If one_based=True (default),
    returns 1-based line and column for display.
    """
    row, col = node.start_point
    if one_based:
        return row + 1, col + 1
    return row, col


def is_component(path: Path) -> bool:
    return path.suffix.lower() == ".vue"


def build_context(path: Path, source: bytes) -> FileContext:
    """
    Parse source into a FileContext without touching the file system.

    .vue files are split into script blocks and template; the script AST is
    parsed over the blanked component so positions match the file. Other
    files are parsed whole with the grammar matching their suffix.
    """
    if not is_component(path):
        tree = parse_bytes(source, parser=create_parser(dialect_for_path(path)))
        return FileContext(path=path, source=source, tree=tree, has_parse_errors=tree.root_node.has_error)

    component = split_component(source)
    ranges = [(block.start_byte, block.end_byte) for block in component.scripts]
    script_source = keep_ranges(source, ranges)
    tree = parse_bytes(script_source, parser=create_parser(dialect_for_lang(component.lang)))

    if ranges:
        program_text = source[ranges[0][0] : ranges[-1][1]].decode("utf-8", errors="replace")
    else:
        program_text = ""

    template_body = build_template_body(component)
    has_errors = tree.root_node.has_error or component.markup_tree.root_node.has_error
    return FileContext(
        path=path,
        source=source,
        tree=tree,
        template_body=template_body,
        program_text=program_text,
        has_parse_errors=has_errors,
    )


def create_context(path: Path) -> Optional[FileContext]:
    """
    Read a component or script file and parse it into a FileContext.

    - Unreadable file (permission, missing): returns None and logs error.
    - Malformed source (syntax errors): still returns a FileContext with the tree
      and sets has_parse_errors=True; logs a warning and node/call counts.
    - Success: returns FileContext and logs node count and call count.

    Returns:
        FileContext if the file was read (and parsed), None if the file
        could not be read.
    """
    try:
        source = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        return None

    ctx = build_context(path, source)
    if ctx.has_parse_errors:
        logger.warning("File %s parsed with syntax errors; AST may be incomplete", path)

    node_count, call_count = count_tree_stats(ctx.root_node)
    logger.info(
        "Parsed %s: %d nodes, %d call(s)%s%s",
        path,
        node_count,
        call_count,
        ", with template" if ctx.template_body is not None else "",
        " (with parse errors)" if ctx.has_parse_errors else "",
    )
    return ctx


def load_contexts(paths: list[Path]) -> list[FileContext]:
    """
    Read and parse multiple files into FileContexts (ASTs in memory).

    Unreadable or missing files are skipped (logged); malformed files still
    get a context with has_parse_errors=True.

    Args:
        paths: List of paths (e.g. from traversal.find_source_files).

    Returns:
        List of FileContext instances, one per file that could be read.
        Order matches input order; failed files are omitted.
    """
    contexts: list[FileContext] = []
    for path in paths:
        ctx = create_context(path)
        if ctx is not None:
            contexts.append(ctx)
    return contexts
