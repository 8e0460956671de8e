"""
csrkit - command line interface

Usage:
    csrkit demo
    csrkit analyze <matrix_file>
    csrkit reorder <matrix_file> --output reordered.mtx --plot rcm.png
    csrkit benchmark <matrix_file> --iterations 100
"""

import argparse
import logging
import sys
from dataclasses import replace

from .analysis.mat_specs import compute_matrix_properties, get_bandwidth
from .config import config_from_env
from .errors import CSRError
from .reordering.rcm import reorder_matrix
from .spmv.benchmark import SpMVBenchmark, generate_benchmark_report
from .utils.loader import load_or_generate, save_matrix
from .visualization.dense import print_dense

log = logging.getLogger(__name__)


def _improvement(before, after):
    if before == 0:
        return 0.0
    return (before - after) / before * 100


def cmd_demo(args, config):
    """Run a quick demonstration."""
    print("=== csrkit Quick Demo ===")

    matrix = load_or_generate('demo', config)
    print(f"Generated demo matrix: {matrix.num_rows}x{matrix.num_cols} with {matrix.nnz} NNZ")

    original_bw = get_bandwidth(matrix)
    print(f"Original bandwidth: {original_bw:,}")

    reordered, perm, _ = reorder_matrix(matrix)
    new_bw = get_bandwidth(reordered)
    print(f"RCM bandwidth:      {new_bw:,} ({_improvement(original_bw, new_bw):+.1f}%)")
    print(f"First rows of the new order: {perm[:10].tolist()}")


def cmd_analyze(args, config):
    """Analyze matrix properties."""
    matrix = load_or_generate(args.matrix, config)
    props = compute_matrix_properties(matrix)

    print(f"Matrix Properties ({args.matrix}):")
    print(f"  Shape: {props['shape']}")
    print(f"  Non-zeros: {props['nnz']:,}")
    print(f"  Density: {props['density']:.6f}%")
    print(f"  Bandwidth: {props['bandwidth']:,}")
    print(f"  Profile: {props['profile']:,}")
    print(f"  Avg NNZ per row: {props['avg_nnz_per_row']:.2f}")
    print(f"  Max NNZ per row: {props['max_nnz_per_row']}")
    print(f"  Structurally symmetric: {props['is_structurally_symmetric']}")
    if 'num_components' in props:
        print(f"  Connected components: {props['num_components']}")

    if args.dense:
        print_dense(matrix, precision=config.dense_precision)


def cmd_reorder(args, config):
    """Apply RCM reordering."""
    matrix = load_or_generate(args.matrix, config)
    reordered, perm, inverse_perm = reorder_matrix(matrix)

    original_bw = get_bandwidth(matrix)
    new_bw = get_bandwidth(reordered)

    print(f"{'Matrix':<15} {'Bandwidth':<10} {'Improvement'}")
    print("-" * 40)
    print(f"{'Original':<15} {original_bw:<10,} {'-'}")
    print(f"{'RCM':<15} {new_bw:<10,} {_improvement(original_bw, new_bw):+6.1f}%")

    if args.dense:
        print_dense(reordered, precision=config.dense_precision)

    if args.output:
        written = save_matrix(reordered, args.output)
        print(f"Reordered matrix written to {written}")

    if args.plot:
        # Deferred so that matplotlib is only imported when a plot is requested
        from .visualization.plots import compare_matrices_sparsity, save_plot
        fig = compare_matrices_sparsity({'Original': matrix, 'RCM': reordered})
        save_plot(fig, args.plot)
        print(f"Sparsity comparison written to {args.plot}")


def cmd_benchmark(args, config):
    """Time SpMV before and after RCM reordering."""
    matrix = load_or_generate(args.matrix, config)
    reordered, _, _ = reorder_matrix(matrix)

    benchmark = SpMVBenchmark(benchmark_iterations=args.iterations, config=config)
    benchmark.benchmark_spmv(matrix, random_state=config.demo_seed)
    benchmark.benchmark_reordering_impact(matrix, {'rcm': reordered},
                                          random_state=config.demo_seed)

    print(generate_benchmark_report(benchmark.results))
    if args.output:
        benchmark.save_results(args.output)
        print(f"Results written to {args.output}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog='csrkit',
        description='csrkit - CSR matrices and Reverse Cuthill-McKee reordering',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  csrkit demo
  csrkit analyze demo --dense
  csrkit reorder matrix.mtx --output matrix_rcm.mtx --plot rcm.png
  csrkit benchmark demo --iterations 100
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('demo', help='Run quick demonstration')

    analyze_parser = subparsers.add_parser('analyze', help='Analyze matrix properties')
    analyze_parser.add_argument('matrix', help='Matrix file path (.mtx/.npz) or "demo"')
    analyze_parser.add_argument('--dense', action='store_true', help='Print the matrix in dense form')

    reorder_parser = subparsers.add_parser('reorder', help='Apply RCM reordering')
    reorder_parser.add_argument('matrix', help='Matrix file path (.mtx/.npz) or "demo"')
    reorder_parser.add_argument('--output', help='Write the reordered matrix to this file')
    reorder_parser.add_argument('--plot', help='Write a before/after sparsity plot to this file')
    reorder_parser.add_argument('--dense', action='store_true', help='Print the reordered matrix in dense form')

    benchmark_parser = subparsers.add_parser('benchmark', help='Time SpMV before and after reordering')
    benchmark_parser.add_argument('matrix', help='Matrix file path (.mtx/.npz) or "demo"')
    benchmark_parser.add_argument('--iterations', type=int, default=None,
                                  help='Timed iterations per measurement')
    benchmark_parser.add_argument('--workers', type=int, default=None,
                                  help='Worker threads for the threaded kernel')
    benchmark_parser.add_argument('--output', help='Write results as JSON to this file')

    return parser


COMMANDS = {
    'demo': cmd_demo,
    'analyze': cmd_analyze,
    'reorder': cmd_reorder,
    'benchmark': cmd_benchmark,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = config_from_env()
        workers = getattr(args, 'workers', None)
        if workers is not None:
            if workers < 1:
                raise ValueError(f"--workers must be positive, got {workers}")
            config = replace(config, num_workers=workers)
        COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130
    except (CSRError, OSError, ValueError) as e:
        log.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
