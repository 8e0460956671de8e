from .mat_specs import (
    calculate_profile, compute_matrix_properties, get_bandwidth,
    is_structurally_symmetric,
)
from .graph_struct import (
    adjacency_structure, build_adjacency_graph, component_summary, vertex_degrees,
)
