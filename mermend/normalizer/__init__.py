"""Source normalizer — repairs common defects in diagram text."""

from mermend.normalizer.normalizer import (
    DEFAULT_PREFIX,
    DIAGRAM_PREFIXES,
    RULES,
    canonicalize_flowchart,
    close_labeled_edges,
    drop_orientation_terminator,
    ensure_diagram_prefix,
    expand_escaped_newlines,
    normalize,
    space_ampersands,
    space_arrows,
    strip_fences,
)

__all__ = [
    "DEFAULT_PREFIX",
    "DIAGRAM_PREFIXES",
    "RULES",
    "canonicalize_flowchart",
    "close_labeled_edges",
    "drop_orientation_terminator",
    "ensure_diagram_prefix",
    "expand_escaped_newlines",
    "normalize",
    "space_ampersands",
    "space_arrows",
    "strip_fences",
]
