import json
import tempfile
import unittest
from dataclasses import replace
import numpy as np
import scipy.sparse

# Import modules to test
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from csrkit.config import DEFAULT_CONFIG
from csrkit.errors import DimensionMismatch
from csrkit.matrix import CSRMatrix, create
from csrkit.spmv.kernel import (
    SpMVKernel, analyze_spmv_characteristics, create_spmv_kernel, multiply, spmv
)
from csrkit.spmv.benchmark import SpMVBenchmark, generate_benchmark_report
from csrkit.utils.loader import generate_random_sparse_matrix


class TestMultiply(unittest.TestCase):
    """Test cases for y = A*x."""

    def setUp(self):
        """Set up test matrices and vectors."""
        self.test_matrix = create(3, 3, [0, 0, 1, 1, 2, 2], [0, 1, 1, 2, 0, 2],
                                  [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

        self.rect_matrix = CSRMatrix.from_scipy(np.array([
            [1.0, 0.0, 2.0, 0.0],
            [0.0, 3.0, 0.0, 4.0],
        ]))

        np.random.seed(42)
        self.large_scipy = scipy.sparse.random(300, 200, density=0.05, format='csr')
        self.large_matrix = CSRMatrix.from_scipy(self.large_scipy)

    def test_ones_vector(self):
        y = multiply(self.test_matrix, [1.0, 1.0, 1.0])
        np.testing.assert_array_equal(y, [3.0, 7.0, 11.0])

    def test_rectangular(self):
        y = multiply(self.rect_matrix, [1.0, 2.0, 3.0, 4.0])
        self.assertEqual(y.shape, (2,))
        np.testing.assert_array_almost_equal(y, [7.0, 22.0])

    def test_matches_scipy(self):
        x = np.random.rand(200)
        np.testing.assert_allclose(multiply(self.large_matrix, x), self.large_scipy.dot(x))

    def test_linearity(self):
        rng = np.random.default_rng(0)
        x1 = rng.random(200)
        x2 = rng.random(200)

        np.testing.assert_allclose(
            multiply(self.large_matrix, x1 + x2),
            multiply(self.large_matrix, x1) + multiply(self.large_matrix, x2),
        )

    def test_empty_rows_give_zero(self):
        A = create(4, 2, [0, 3], [1, 0], [2.0, 5.0])
        np.testing.assert_array_equal(multiply(A, [1.0, 1.0]), [2.0, 0.0, 0.0, 5.0])

    def test_empty_matrix(self):
        A = create(3, 3, [], [], [])
        np.testing.assert_array_equal(multiply(A, np.ones(3)), np.zeros(3))

    def test_wrong_vector_length(self):
        with self.assertRaises(DimensionMismatch):
            multiply(self.test_matrix, [1.0, 1.0])
        with self.assertRaises(DimensionMismatch):
            multiply(self.rect_matrix, [1.0, 1.0])

    def test_accepts_scipy_input(self):
        y = multiply(self.test_matrix.to_scipy(), [1.0, 1.0, 1.0])
        np.testing.assert_array_equal(y, [3.0, 7.0, 11.0])


class TestGeneralSpMV(unittest.TestCase):

    def setUp(self):
        self.A = create(3, 3, [0, 0, 1, 1, 2, 2], [0, 1, 1, 2, 0, 2],
                        [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        self.x = np.array([1.0, -1.0, 2.0])
        self.y = np.array([0.5, 1.0, -2.0])

    def test_full_form(self):
        w = spmv(2.0, self.A, self.x, beta=3.0, y=self.y, gamma=1.0)
        expected = 2.0 * self.A.to_dense() @ self.x + 3.0 * self.y + 1.0
        np.testing.assert_allclose(w, expected)

    def test_alpha_only(self):
        np.testing.assert_allclose(spmv(-1.0, self.A, self.x),
                                   -(self.A.to_dense() @ self.x))

    def test_y_length_checked(self):
        with self.assertRaises(DimensionMismatch):
            spmv(1.0, self.A, self.x, beta=1.0, y=[1.0, 2.0])


class TestSpMVKernel(unittest.TestCase):
    """Test cases for the kernel strategies."""

    def setUp(self):
        self.matrix = generate_random_sparse_matrix(101, 0.1, 'random', random_state=3)
        self.vector = np.random.default_rng(1).random(101)
        self.expected = self.matrix.to_dense() @ self.vector

    def test_strategies_agree(self):
        for strategy in ['serial', 'threaded', 'scipy']:
            with self.subTest(strategy=strategy):
                kernel = SpMVKernel(self.matrix, strategy=strategy, num_workers=4)
                np.testing.assert_allclose(kernel.spmv(self.vector), self.expected)

    def test_threaded_small_blocks(self):
        kernel = SpMVKernel(self.matrix, strategy='threaded', num_workers=3, block_size=7)
        blocks = kernel._row_blocks()

        self.assertEqual(blocks[0][0], 0)
        self.assertEqual(blocks[-1][1], self.matrix.num_rows)
        for (_, hi), (lo, _) in zip(blocks, blocks[1:]):
            self.assertEqual(hi, lo)
        np.testing.assert_allclose(kernel.spmv(self.vector), self.expected)

    def test_threaded_single_worker(self):
        kernel = SpMVKernel(self.matrix, strategy='threaded', num_workers=1)
        np.testing.assert_allclose(kernel.spmv(self.vector), self.expected)

    def test_output_buffer(self):
        kernel = SpMVKernel(self.matrix, strategy='serial')
        y = np.full(101, 7.0)
        result = kernel.spmv(self.vector, y)

        self.assertIs(result, y)
        np.testing.assert_allclose(y, self.expected)

    def test_output_buffer_length_checked(self):
        kernel = SpMVKernel(self.matrix, strategy='serial')
        with self.assertRaises(DimensionMismatch):
            kernel.spmv(self.vector, np.zeros(5))

    def test_output_buffer_as_list(self):
        kernel = SpMVKernel(self.matrix, strategy='serial')
        result = kernel.spmv(self.vector, [0.0] * 101)
        np.testing.assert_allclose(result, self.expected)

        with self.assertRaises(DimensionMismatch):
            kernel.spmv(self.vector, [0.0] * 5)

    def test_auto_selection(self):
        kernel = create_spmv_kernel(self.matrix)
        self.assertEqual(kernel.strategy, 'serial')

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            SpMVKernel(self.matrix, strategy='gpu')

    def test_analyze_spmv_characteristics(self):
        analysis = analyze_spmv_characteristics(self.matrix)

        for key in ['matrix_shape', 'nnz', 'avg_row_length', 'max_row_length',
                    'memory_irregularity', 'density', 'recommendations']:
            self.assertIn(key, analysis)
        self.assertEqual(analysis['nnz'], self.matrix.nnz)
        self.assertIsInstance(analysis['recommendations'], list)

    def test_characteristics_use_given_config(self):
        config = replace(DEFAULT_CONFIG, threaded_nnz_threshold=1)
        analysis = analyze_spmv_characteristics(self.matrix, config=config)
        self.assertIn('threaded', analysis['recommendations'])
        self.assertNotIn('threaded', analyze_spmv_characteristics(self.matrix)['recommendations'])


class TestSpMVBenchmark(unittest.TestCase):

    def setUp(self):
        self.matrix = generate_random_sparse_matrix(50, 0.1, 'shuffled_banded', random_state=0)
        self.benchmark = SpMVBenchmark(warmup_iterations=0, benchmark_iterations=2)

    def test_benchmark_spmv(self):
        results = self.benchmark.benchmark_spmv(self.matrix, random_state=0)

        self.assertEqual(set(results), {'serial', 'threaded', 'scipy'})
        for result in results.values():
            self.assertGreaterEqual(result['avg_time_ms'], 0)
            self.assertEqual(result['nnz'], self.matrix.nnz)

    def test_reordering_impact_keeps_spmv_results(self):
        self.benchmark.benchmark_spmv(self.matrix, strategies=['serial', 'scipy'])
        impact = self.benchmark.benchmark_reordering_impact(self.matrix, {'same': self.matrix})

        self.assertIn('original', impact)
        self.assertIn('same', impact)
        self.assertEqual(set(self.benchmark.results['spmv']), {'serial', 'scipy'})

        report = generate_benchmark_report(self.benchmark.results)
        self.assertIn('serial', report)
        self.assertIn('Reordering Impact', report)

    def test_save_results(self):
        self.benchmark.benchmark_spmv(self.matrix, strategies=['serial'])
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'results.json')
            self.benchmark.save_results(path)
            with open(path) as f:
                data = json.load(f)
        self.assertEqual(data['spmv']['serial']['matrix_shape'], [50, 50])

    def test_invalid_iterations(self):
        with self.assertRaises(ValueError):
            SpMVBenchmark(benchmark_iterations=0)


if __name__ == '__main__':
    unittest.main()
