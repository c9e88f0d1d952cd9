"""
NodeId codec.

A NodeId addresses a node by its index path from the template root:
``[]`` is ``root`` and ``[0, 2]`` is ``root.children[0].children[2]``.
NodeIds are for diagnostics and lookups only, never for content identity.
"""

import re

ROOT_NODE_ID = "root"

_SEGMENT_RE = re.compile(r"children\[(\d+)\]")
_NODE_ID_RE = re.compile(r"^root(\.children\[\d+\])*$")


def generate_node_id(path: list[int] | tuple[int, ...]) -> str:
    """Build a NodeId from a root-relative index path."""
    if not path:
        return ROOT_NODE_ID
    return ROOT_NODE_ID + "".join(f".children[{index}]" for index in path)


def parse_node_id(node_id: str) -> list[int]:
    """
    Recover the index path from a NodeId.

    Exact inverse of ``generate_node_id`` for valid ids.

    Raises:
        ValueError: If ``node_id`` is not a well-formed NodeId
    """
    if not is_valid_node_id(node_id):
        raise ValueError(f"Invalid node id: {node_id!r}")
    return [int(match) for match in _SEGMENT_RE.findall(node_id)]


def is_valid_node_id(node_id: str) -> bool:
    return bool(_NODE_ID_RE.match(node_id))


def child_node_id(parent_id: str, index: int) -> str:
    """NodeId of the ``index``-th child of ``parent_id``."""
    return f"{parent_id}.children[{index}]"
