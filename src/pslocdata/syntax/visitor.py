"""Tree walking for the PowerShell AST.

Subclasses add ``visit_<NodeClass>`` methods, named after the node class
exactly as in ``ast.NodeVisitor`` (``visit_CommandInvocation``, not
``visit_command_invocation``). Nodes without a handler fall through to
generic_visit, which descends into child nodes in source order.

Python 3.13+.
"""

from collections.abc import Callable
from dataclasses import Field, fields
from typing import ClassVar

from pslocdata.constants import MAX_TREE_DEPTH
from pslocdata.core.depth_guard import DepthGuard

from .ast import ASTNode, Span

__all__ = ["ASTVisitor"]

_SCALARS = (str, int, float, bool, Span)


def _is_node(value: object) -> bool:
    return hasattr(value, "__dataclass_fields__") and not isinstance(value, Span)


class ASTVisitor[T = ASTNode]:
    """Dispatching visitor, generic over the handler return type.

    Handler names are collected once per subclass; the bound method chosen
    for each node type is remembered per instance. Every generic_visit
    level passes through a DepthGuard.

    Example:
        >>> class CallCounter(ASTVisitor):
        ...     def __init__(self):
        ...         super().__init__()
        ...         self.calls = 0
        ...
        ...     def visit_CommandInvocation(self, node):
        ...         self.calls += 1
        ...         return self.generic_visit(node)
        ...
        >>> counter = CallCounter()
        >>> counter.visit(script)
    """

    __slots__ = ("_depth_guard", "_instance_dispatch_cache")

    _class_visit_methods: ClassVar[dict[str, str]] = {}
    _fields_cache: ClassVar[dict[type, tuple[Field[object], ...]]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._class_visit_methods = {
            name.removeprefix("visit_"): name
            for name in dir(cls)
            if name.startswith("visit_")
        }

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Subclasses overriding __init__ must call this.

        Args:
            max_depth: Deepest generic_visit nesting allowed
                (default: MAX_TREE_DEPTH)
        """
        self._depth_guard = DepthGuard(
            max_depth=MAX_TREE_DEPTH if max_depth is None else max_depth
        )
        self._instance_dispatch_cache: dict[type, Callable[[ASTNode], T]] = {}

    def visit(self, node: ASTNode) -> T:
        """Call the handler for node's class, or generic_visit when there is none."""
        node_type = type(node)
        handler = self._instance_dispatch_cache.get(node_type)
        if handler is None:
            method_name = self._class_visit_methods.get(node_type.__name__)
            handler = getattr(self, method_name) if method_name else self.generic_visit
            self._instance_dispatch_cache[node_type] = handler
        return handler(node)

    @staticmethod
    def _node_fields(node_type: type) -> tuple[Field[object], ...]:
        cached = ASTVisitor._fields_cache.get(node_type)
        if cached is None:
            cached = ASTVisitor._fields_cache[node_type] = fields(node_type)
        return cached

    def generic_visit(self, node: ASTNode) -> T:
        """Visit each child node of node and return node unchanged.

        Child nodes are dataclass fields holding a node or a tuple of
        nodes. Spans and scalar values are skipped.

        Raises:
            DepthLimitExceededError: Nesting deeper than max_depth
        """
        with self._depth_guard:
            for field in self._node_fields(type(node)):
                value = getattr(node, field.name)
                if value is None or isinstance(value, _SCALARS):
                    continue
                if isinstance(value, tuple):
                    for item in value:
                        if _is_node(item):
                            self.visit(item)
                elif _is_node(value):
                    self.visit(value)

        return node  # type: ignore[return-value]  # T defaults to ASTNode
