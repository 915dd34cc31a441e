"""
Merkle Tree Visualisation
Graphviz DOT export of a tree, optionally highlighting one proof.

Rendering reads the tree through its public accessors only. Nodes are
named by their position in the packed array, so the output mirrors the
index arithmetic used by proofs:
- raw leaf values are ovals feeding their leaf digest node
- padding slots are drawn with the zero digest
- every node has an edge to its parent (position // 2)

With a proof, the proven value is cyan, the proof siblings are yellow
and the nodes on the path from the leaf up to the root are grey.
"""
from __future__ import annotations

from pathlib import Path
from typing import Protocol

from core.merkle.merkle_proofs import MerkleProof
from core.merkle.merkle_tree import MerkleTree


VALUE_COLOR = "#00FFFF"
PROOF_COLOR = "#FFFF00"
PATH_COLOR = "#C0C0C0"


class Formatter(Protocol):
    """Turns a byte value into a node label."""

    def format(self, data: bytes) -> str:
        ...


class TruncatedHexFormatter:
    """Shows only the first and last two bytes as hex."""

    def format(self, data: bytes) -> str:
        if len(data) <= 4:
            return data.hex()
        return f"{data[:2].hex()}…{data[-2:].hex()}"


class HexFormatter:
    """Shows the entire value as hex."""

    def format(self, data: bytes) -> str:
        return data.hex()


class StringFormatter:
    """Shows the value as UTF-8 text."""

    def format(self, data: bytes) -> str:
        return data.decode("utf-8", errors="replace")


FORMATTERS: dict[str, type] = {
    "truncated": TruncatedHexFormatter,
    "hex": HexFormatter,
    "string": StringFormatter,
}


def get_formatter(name: str) -> Formatter:
    """Look up a formatter by name ("truncated", "hex" or "string")."""
    try:
        return FORMATTERS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown formatter: {name!r} (available: {', '.join(sorted(FORMATTERS))})"
        ) from None


def _quote(label: str) -> str:
    return '"' + label.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _fill(color: str) -> str:
    return f' style=filled fillcolor="{color}"'


def to_dot(
    tree: MerkleTree,
    proof: MerkleProof | None = None,
    leaf_formatter: Formatter | None = None,
    branch_formatter: Formatter | None = None,
) -> str:
    """
    Render a tree as a Graphviz digraph.

    Args:
        tree: Tree to render
        proof: Optional proof to highlight (must come from this tree)
        leaf_formatter: Labels raw leaf values (default: truncated hex)
        branch_formatter: Labels digests (default: truncated hex)

    Returns:
        DOT source
    """
    lf = leaf_formatter or TruncatedHexFormatter()
    bf = branch_formatter or TruncatedHexFormatter()

    nodes = tree.nodes
    leaves = tree.leaves
    branches = tree.branches

    value_indices: set[int] = set()
    proof_positions: set[int] = set()
    path_positions: set[int] = set()

    if proof is not None:
        value_indices.add(proof.index)
        position = proof.index + branches
        path_positions.add(position)
        for _ in proof.siblings:
            proof_positions.add(position ^ 1)
            position //= 2
            path_positions.add(position)

    def node_attrs(position: int) -> str:
        if position in proof_positions:
            return _fill(PROOF_COLOR)
        if position in path_positions:
            return _fill(PATH_COLOR)
        return ""

    out: list[str] = [
        "digraph MerkleTree {",
        "rankdir = TB;",
        'node [shape=rectangle margin="0.2,0.2"];',
    ]
    rank: list[str] = []

    for i in range(branches):
        position = branches + i
        if i < len(leaves):
            value_id = f"v{i}"
            value_attrs = _fill(VALUE_COLOR) if i in value_indices else ""
            out.append(
                f"{value_id} [label={_quote(lf.format(leaves[i]))} shape=oval{value_attrs}];"
            )
            out.append(f"{value_id}->{position};")
        out.append(f"{position} [label={_quote(bf.format(nodes[position]))}{node_attrs(position)}];")
        if i > 0:
            out.append(f"{position - 1}->{position} [style=invis arrowhead=none];")
        if branches > 1:
            out.append(f"{position}->{position // 2};")
        rank.append(str(position))

    out.append("{rank=same;" + ";".join(rank) + "};")

    for position in range(branches - 1, 0, -1):
        out.append(f"{position} [label={_quote(bf.format(nodes[position]))}{node_attrs(position)}];")
        if position > 1:
            out.append(f"{position}->{position // 2};")

    out.append("}")
    return "\n".join(out)


def write_dot(
    path: str | Path,
    tree: MerkleTree,
    proof: MerkleProof | None = None,
    leaf_formatter: Formatter | None = None,
    branch_formatter: Formatter | None = None,
) -> Path:
    """Render a tree with to_dot() and write it to path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        to_dot(tree, proof, leaf_formatter, branch_formatter),
        encoding="utf-8",
    )
    return path


__all__ = [
    "Formatter",
    "TruncatedHexFormatter",
    "HexFormatter",
    "StringFormatter",
    "FORMATTERS",
    "get_formatter",
    "to_dot",
    "write_dot",
]
