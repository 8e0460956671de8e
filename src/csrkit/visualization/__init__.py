from .dense import format_dense, print_dense
