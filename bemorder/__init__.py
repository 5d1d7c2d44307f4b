"""bemorder: order BEM build artifacts by their dependencies.

Dependencies come from ``mustDeps`` declarations and from the BEM naming
convention itself (``block__elem`` needs ``block``).

Example:
    from bemorder import build_graph, normalize_declaration, order

    declarations = {
        "admin-post": normalize_declaration({"mustDeps": [{"block": "mixins"}]}),
    }
    graph = build_graph(declarations, ["admin-post", "mixins"])
    order(graph, ["admin-post", "mixins"])  # ["mixins", "admin-post"]
"""

__version__ = "0.9.0"

from .artifacts import Artifact, stem_from_path
from .declarations import flatten_declaration, normalize_declaration
from .errors import (
    CircularDependencyError,
    DeclarationFileError,
    GraphError,
    GraphNamingError,
    NamingError,
    OrderError,
    OrderNamingError,
)
from .graph import ROOT, DependencyGraph, build_graph, merge_declarations
from .naming import (
    NamingRecord,
    ancestor_chain,
    is_entity_only,
    parse_identifier,
    strip_facet,
    to_stem_id,
)
from .ordering import (
    BfsOrderer,
    Orderer,
    WeightOrderer,
    get_orderer,
    order,
)
from .pipeline import aorder_files, order_artifacts, order_files
from .sources import load_declaration_file, load_declarations

__all__ = [
    "__version__",
    # Naming
    "NamingRecord",
    "parse_identifier",
    "is_entity_only",
    "to_stem_id",
    "strip_facet",
    "ancestor_chain",
    # Declarations
    "normalize_declaration",
    "flatten_declaration",
    # Graph
    "ROOT",
    "DependencyGraph",
    "build_graph",
    "merge_declarations",
    # Ordering
    "Orderer",
    "BfsOrderer",
    "WeightOrderer",
    "get_orderer",
    "order",
    # Artifacts and files
    "Artifact",
    "stem_from_path",
    "load_declaration_file",
    "load_declarations",
    "order_artifacts",
    "order_files",
    "aorder_files",
    # Errors
    "NamingError",
    "GraphError",
    "GraphNamingError",
    "OrderError",
    "CircularDependencyError",
    "OrderNamingError",
    "DeclarationFileError",
]
