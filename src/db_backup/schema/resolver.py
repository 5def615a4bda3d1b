"""Foreign-key dependency graph and table emission order.

The graph maps each table to the tables it references.  The emission
order lists every table after the tables it depends on, so CREATE and
INSERT statements can run top to bottom.

Usage:
    from db_backup.schema.resolver import build_dependency_graph, resolve_emission_order

    graph = build_dependency_graph(tables, foreign_keys)
    order = resolve_emission_order(tables, graph)
    for table in order.tables:
        ...
"""

import logging
from collections.abc import Iterable, Mapping

from pydantic import BaseModel, Field

from db_backup.catalog.models import ForeignKeyEdge
from db_backup.errors import CycleDetectedError

logger = logging.getLogger(__name__)

DependencyGraph = dict[str, tuple[str, ...]]

_IN_PROGRESS = "in_progress"
_DONE = "done"


class EmissionOrder(BaseModel):
    """Resolved table order plus any foreign-key cycles met on the way.

    Each cycle is the path of tables that closed it, first table
    repeated at the end (``["a", "b", "a"]``).

    Example:
        >>> order = EmissionOrder(tables=["customers", "orders"])
        >>> order.has_cycles
        False
    """

    tables: list[str]
    cycles: list[list[str]] = Field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        """True if at least one cycle forced an order that breaks an edge."""
        return bool(self.cycles)


def build_dependency_graph(
    tables: Iterable[str],
    foreign_keys: Mapping[str, Iterable[ForeignKeyEdge]],
) -> DependencyGraph:
    """Build the table -> referenced tables graph.

    Referenced tables are deduplicated in the order the catalog reported
    them, which keeps the emission order reproducible.  Every table gets
    an entry, possibly empty.

    Args:
        tables: Validated table names.
        foreign_keys: Foreign-key edges per table.  Tables missing from
            the mapping have no dependencies.

    Returns:
        Dict mapping each table to a tuple of referenced table names.

    Example:
        >>> edge = ForeignKeyEdge(source_table="orders", source_column="customer_id",
        ...                       referenced_table="customers", referenced_column="id")
        >>> build_dependency_graph(["customers", "orders"], {"orders": [edge]})
        {'customers': (), 'orders': ('customers',)}
    """
    graph: DependencyGraph = {}
    for table in tables:
        referenced = dict.fromkeys(
            edge.referenced_table for edge in foreign_keys.get(table, ())
        )
        graph[table] = tuple(referenced)
    return graph


def resolve_emission_order(
    tables: list[str],
    graph: Mapping[str, Iterable[str]],
    strict: bool = False,
) -> EmissionOrder:
    """Order tables so that each one follows the tables it references.

    Depth-first post-order walk with three-color marking (unvisited,
    in progress, done) on an explicit stack.  Roots are taken in
    ``tables`` order, dependencies in graph order.

    Reaching a table that is still in progress means a cycle.  The
    cycle is recorded and the walk moves on, so every table is still
    emitted exactly once, but one edge of the cycle is necessarily
    violated.  Self-references are not cycles: a table can be created
    with a constraint on itself.  References to tables outside
    ``tables`` are ignored.

    Args:
        tables: Validated table names in catalog order.
        graph: Dependency graph from ``build_dependency_graph``.
        strict: Raise instead of recording when a cycle is found.

    Returns:
        EmissionOrder covering every table in ``tables`` exactly once.

    Raises:
        CycleDetectedError: If ``strict`` and the graph has a cycle.
    """
    known = set(tables)
    state: dict[str, str] = {}
    ordered: list[str] = []
    cycles: list[list[str]] = []

    for root in tables:
        if root in state:
            continue

        state[root] = _IN_PROGRESS
        stack = [(root, iter(graph.get(root, ())))]

        while stack:
            table, dependencies = stack[-1]
            for dep in dependencies:
                if dep == table:
                    continue
                if dep not in known:
                    logger.debug(f"{table} references unknown table {dep}, ignored for ordering")
                    continue

                dep_state = state.get(dep)
                if dep_state is None:
                    state[dep] = _IN_PROGRESS
                    stack.append((dep, iter(graph.get(dep, ()))))
                    break
                if dep_state == _IN_PROGRESS:
                    path = [name for name, _ in stack]
                    cycle = path[path.index(dep):] + [dep]
                    cycles.append(cycle)
                    logger.warning(f"Foreign-key cycle: {' -> '.join(cycle)}")
            else:
                stack.pop()
                state[table] = _DONE
                ordered.append(table)

    if strict and cycles:
        raise CycleDetectedError(cycles)

    return EmissionOrder(tables=ordered, cycles=cycles)
