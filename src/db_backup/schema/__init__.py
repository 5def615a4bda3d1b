"""Schema ordering and DDL rendering.

Provides the foreign-key dependency graph and emission order
(``build_dependency_graph``, ``resolve_emission_order``) and the
CREATE TABLE / CREATE INDEX renderers.

Usage:
    from db_backup.schema import build_dependency_graph, resolve_emission_order
    from db_backup.schema import render_create_table, render_create_index
"""

from db_backup.schema.ddl import (
    render_create_composite_index,
    render_create_index,
    render_create_table,
)
from db_backup.schema.resolver import (
    DependencyGraph,
    EmissionOrder,
    build_dependency_graph,
    resolve_emission_order,
)

__all__ = [
    "build_dependency_graph",
    "resolve_emission_order",
    "DependencyGraph",
    "EmissionOrder",
    "render_create_table",
    "render_create_index",
    "render_create_composite_index",
]
