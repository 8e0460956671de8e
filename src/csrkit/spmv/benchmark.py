import json
import logging
import time

import numpy as np

from ..config import DEFAULT_CONFIG
from ..matrix import as_csr_matrix
from .kernel import create_spmv_kernel

log = logging.getLogger(__name__)


class SpMVBenchmark:
    #Timing harness for y = A*x under the available kernel strategies.

    def __init__(self, warmup_iterations=None, benchmark_iterations=None, config=DEFAULT_CONFIG):
        self.config = config
        self.warmup_iterations = (config.benchmark_warmup
                                  if warmup_iterations is None else warmup_iterations)
        self.benchmark_iterations = (config.benchmark_iterations
                                     if benchmark_iterations is None else benchmark_iterations)
        if self.benchmark_iterations < 1:
            raise ValueError(f"benchmark_iterations must be positive, got {self.benchmark_iterations}")
        self.results = {}

    def benchmark_spmv(self, matrix, vector=None, strategies=None, random_state=None):
        A = as_csr_matrix(matrix)

        if vector is None:
            vector = np.random.default_rng(random_state).random(A.num_cols)

        if strategies is None:
            strategies = ['serial', 'threaded', 'scipy']

        results = self._time_kernels(A, vector, strategies)
        self.results['spmv'] = results
        return results

    def _time_kernels(self, A, vector, strategies):
        results = {}

        for strategy in strategies:
            kernel = create_spmv_kernel(A, strategy, num_workers=self.config.num_workers)

            # Warmup
            for _ in range(self.warmup_iterations):
                kernel.spmv(vector)

            # Benchmark
            start_time = time.perf_counter()
            for _ in range(self.benchmark_iterations):
                kernel.spmv(vector)
            end_time = time.perf_counter()

            avg_time = (end_time - start_time) / self.benchmark_iterations

            results[strategy] = {
                'avg_time_ms': avg_time * 1000,
                'gflops': (2 * A.nnz) / (avg_time * 1e9) if avg_time > 0 else 0.0,
                'matrix_shape': A.shape,
                'nnz': A.nnz,
            }
            log.debug("SpMV %s: %.4f ms", strategy, avg_time * 1000)

        return results

    def benchmark_reordering_impact(self, original_matrix, reordered_matrices, strategy='serial',
                                    random_state=None):
        """Time SpMV on the original matrix and on each reordered version.

        A reordered matrix has the same shape, so one random vector serves
        all of them; only the timing is compared.
        """
        A = as_csr_matrix(original_matrix)
        vector = np.random.default_rng(random_state).random(A.num_cols)

        results = {'original': self._time_kernels(A, vector, [strategy])[strategy]}

        for method_name, reordered in reordered_matrices.items():
            results[method_name] = self._time_kernels(as_csr_matrix(reordered), vector, [strategy])[strategy]

        # Calculate improvements
        original_time = results['original']['avg_time_ms']

        for method_name in reordered_matrices:
            new_time = results[method_name]['avg_time_ms']
            if original_time > 0:
                improvement = (original_time - new_time) / original_time * 100
                results[method_name]['improvement_percent'] = improvement

        self.results['reordering_impact'] = results
        return results

    def save_results(self, filename, results=None):

        if results is None:
            results = self.results

        # Convert numpy types to Python types for JSON serialization
        def convert_numpy(obj):
            if isinstance(obj, np.integer):
                return int(obj)
            elif isinstance(obj, np.floating):
                return float(obj)
            elif isinstance(obj, np.ndarray):
                return obj.tolist()
            return obj

        def recursive_convert(obj):
            if isinstance(obj, dict):
                return {k: recursive_convert(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [recursive_convert(item) for item in obj]
            else:
                return convert_numpy(obj)

        with open(filename, 'w') as f:
            json.dump(recursive_convert(results), f, indent=2)
        log.info("Saved benchmark results to %s", filename)


def generate_benchmark_report(results):
    """Render benchmark results as plain text."""
    lines = ["=== csrkit SpMV Benchmark Report ===", ""]

    if 'spmv' in results:
        lines.append("SpMV Strategy Comparison:")
        for strategy, result in results['spmv'].items():
            lines.append(f"  {strategy}: {result['avg_time_ms']:.3f} ms, "
                         f"{result['gflops']:.2f} GFLOPS")
        lines.append("")

    if 'reordering_impact' in results:
        lines.append("Reordering Impact:")
        for method, result in results['reordering_impact'].items():
            if method != 'original' and 'improvement_percent' in result:
                lines.append(f"  {method}: {result['improvement_percent']:+.2f}% faster")
        lines.append("")

    return "\n".join(lines)
