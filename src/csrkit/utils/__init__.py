from .loader import generate_random_sparse_matrix, load_matrix, load_or_generate, save_matrix
