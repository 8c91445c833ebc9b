"""
Expression tree node and its post-order linearization.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .priority import UNARY_MINUS


@dataclass
class OperationNode:
    """
    A node of the binary expression tree.

    Leaves hold a numeric literal and have no children. Unary nodes hold the
    unary minus marker and only a right child. Binary nodes hold a
    one-character operator and both children.
    """
    label: str
    left: Optional[OperationNode] = None
    right: Optional[OperationNode] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def is_unary(self) -> bool:
        return self.left is None and self.right is not None

    def traverse(self, out: Optional[List[str]] = None) -> List[str]:
        """
        Append labels in post-order (left, right, self).

        Args:
            out: Optional list to extend; a new list is used if omitted.

        Returns:
            The evaluation sequence.
        """
        if out is None:
            out = []
        # Explicit stack; left-leaning trees from long formulas are deep
        stack = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                out.append(node.label)
                continue
            stack.append((node, True))
            if node.right is not None:
                stack.append((node.right, False))
            if node.left is not None:
                stack.append((node.left, False))
        return out

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        if self.is_leaf:
            return {"value": self.label}
        return {
            "op": "neg" if self.label == UNARY_MINUS else self.label,
            "left": self.left.to_dict() if self.left else None,
            "right": self.right.to_dict() if self.right else None,
        }
