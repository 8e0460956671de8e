from .kernel import (
    SpMVKernel, analyze_spmv_characteristics, create_spmv_kernel, multiply,
    multiply_with_vector, spmv,
)
from .benchmark import SpMVBenchmark, generate_benchmark_report
