"""Recognized workflow variables and the patterns used to find them."""

import re
from typing import Dict, List, Tuple


# Token -> short description, in display order
RECOGNIZED_VARIABLES: Dict[str, str] = {
    "$json": "JSON data of the current input item",
    "$node": "Output of another node, accessed as $node[\"Node Name\"]",
    "$input": "Input helpers of the current node ($input.item, $input.all())",
    "$items": "Items returned by another node, $items(\"Node Name\", output, run)",
    "$workflow": "Workflow metadata (id, name, active)",
    "$execution": "Execution metadata (id, mode, resumeUrl)",
    "$now": "Current timestamp",
    "$today": "Timestamp of the start of the current day",
    "$itemIndex": "Index of the item currently being processed",
    "$runIndex": "Index of the current run of the node",
    "$env": "Environment variables",
    "$prevNode": "Node that ran before the current one (name, outputIndex, runIndex)",
    "$parameter": "Parameters of the current node",
}

BARE_VARIABLE_NAMES: Tuple[str, ...] = tuple(token[1:] for token in RECOGNIZED_VARIABLES)


def _alternation(names) -> str:
    # Longest first so that itemIndex wins over items
    return "|".join(re.escape(name) for name in sorted(names, key=len, reverse=True))


VARIABLE_TOKEN_PATTERN = re.compile(
    r"\$(?:" + _alternation(BARE_VARIABLE_NAMES) + r")(?![\w$])"
)

MISSING_PREFIX_PATTERN = re.compile(
    r"(?<![\w$.])(" + _alternation(BARE_VARIABLE_NAMES) + r")(?=\s*[.\[(])"
)

NODE_ACCESS_PATTERN = re.compile(r"""\$node\[\s*(["'])(.*?)\1\s*\]""")
ITEMS_CALL_PATTERN = re.compile(r"""\$items\(\s*(["'])(.*?)\1""")

INPUT_PATTERN = re.compile(r"\$input(?![\w$])")
JSON_PATTERN = re.compile(r"\$json(?![\w$])")

TEMPLATE_LITERAL_PATTERN = re.compile(r"\$\{")
OPTIONAL_CHAINING_PATTERN = re.compile(r"\?\.(?!\d)")
SINGLE_QUOTE_ACCESS_PATTERN = re.compile(r"\[\s*'[^']*'\s*\]")


def find_variables(text: str) -> List[str]:
    """Return recognized variable tokens in order of first appearance."""
    found: List[str] = []
    for match in VARIABLE_TOKEN_PATTERN.finditer(text):
        token = match.group(0)
        if token not in found:
            found.append(token)
    return found


def find_node_references(text: str) -> List[str]:
    """Return node names passed to $node[...] or $items(...), in order."""
    references = [
        (match.start(), match.group(2))
        for pattern in (NODE_ACCESS_PATTERN, ITEMS_CALL_PATTERN)
        for match in pattern.finditer(text)
    ]
    names: List[str] = []
    for _, name in sorted(references, key=lambda ref: ref[0]):
        if name not in names:
            names.append(name)
    return names
