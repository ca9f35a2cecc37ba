"""Text repair for diagram sources before they reach the render engine.

Each rule is a plain ``str -> str`` function so it can be exercised on its
own. ``normalize`` applies them in order and repeats the pass until the text
stops changing, which keeps the whole operation idempotent even when one
rule exposes input for an earlier one (e.g. an escaped newline that turns
``graph\\nTD;`` into a real orientation line).
"""

from __future__ import annotations

import re
from collections.abc import Callable

DEFAULT_PREFIX = "graph TD"

# Diagram declarations the engine accepts. Each must stand as a whole token.
DIAGRAM_PREFIXES: tuple[str, ...] = (
    "graph",
    "flowchart",
    "sequenceDiagram",
    "classDiagram",
    "pie",
)

_MAX_PASSES = 8

_DIAGRAM_PREFIX_RE = re.compile(
    r"(?:graph|flowchart)[ \t]|(?:sequenceDiagram|classDiagram|pie)(?=\s|$)"
)
_FENCE_OPEN_RE = re.compile(r"```(?:mermaid|diagram)[ \t]*\n?")
_ORIENTATION_TERMINATOR_RE = re.compile(r"\b((?:graph|flowchart)\s+[A-Z]{2});+")
_BARE_ARROW_RE = re.compile(r"(?<=[A-Za-z0-9_])-->(?=[A-Za-z0-9_])")
_OPEN_LABELED_EDGE_RE = re.compile(r"(?<=[A-Za-z0-9_])--\|([^|\n]+)\|(?=[A-Za-z0-9_])")
# Skips HTML entities such as &amp; or &#35; inside labels.
_AMPERSAND_RE = re.compile(r"(?<=[A-Za-z0-9_])[ \t]*&(?![A-Za-z0-9_#]+;)[ \t]*(?=[A-Za-z0-9_])")


def strip_fences(text: str) -> str:
    """Remove markdown code-fence markers and trim surrounding whitespace."""
    text = _FENCE_OPEN_RE.sub("", text)
    return text.replace("```", "").strip()


def drop_orientation_terminator(text: str) -> str:
    """``graph TD;`` -> ``graph TD``. Semicolons elsewhere are left alone."""
    return _ORIENTATION_TERMINATOR_RE.sub(r"\1", text)


def space_arrows(text: str) -> str:
    """``A-->B`` -> ``A --> B``."""
    return _BARE_ARROW_RE.sub(" --> ", text)


def close_labeled_edges(text: str) -> str:
    """``A--|yes|B`` -> ``A --|yes|--> B``."""
    return _OPEN_LABELED_EDGE_RE.sub(r" --|\1|--> ", text)


def expand_escaped_newlines(text: str) -> str:
    r"""Turn literal ``\n`` sequences into real line breaks."""
    return text.replace("\\n", "\n")


def space_ampersands(text: str) -> str:
    """``A&B`` -> ``A & B``."""
    return _AMPERSAND_RE.sub(" & ", text)


def ensure_diagram_prefix(text: str) -> str:
    """Prepend the default top-down graph declaration when none is present."""
    if _DIAGRAM_PREFIX_RE.match(text):
        return text
    if not text.strip():
        return DEFAULT_PREFIX
    return f"{DEFAULT_PREFIX}\n{text}"


def canonicalize_flowchart(text: str) -> str:
    """A leading ``flowchart `` keyword becomes ``graph ``."""
    if text.startswith("flowchart "):
        return "graph " + text[len("flowchart "):]
    return text


RULES: tuple[Callable[[str], str], ...] = (
    strip_fences,
    drop_orientation_terminator,
    space_arrows,
    close_labeled_edges,
    expand_escaped_newlines,
    space_ampersands,
    ensure_diagram_prefix,
    canonicalize_flowchart,
)


def _apply_rules(text: str) -> str:
    for rule in RULES:
        text = rule(text)
    return text.strip()


def normalize(raw: str | None) -> str:
    """Repair common syntax defects in a diagram source.

    Total and deterministic: ``None`` and blank input produce the
    default-prefixed empty graph, and ``normalize(normalize(x)) ==
    normalize(x)`` for every input.
    """
    text = raw or ""
    for _ in range(_MAX_PASSES):
        repaired = _apply_rules(text)
        if repaired == text:
            break
        text = repaired
    return text
