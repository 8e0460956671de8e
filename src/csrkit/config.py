"""Default parameters shared by the library and the command line tool."""

import os
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class CsrkitConfig:
    # Demo matrix generated by `csrkit demo` and the "demo" matrix name
    demo_size: int = 200
    demo_density: float = 0.02
    demo_pattern: str = 'shuffled_banded'
    demo_seed: int = 42

    # SpMV kernel selection
    threaded_nnz_threshold: int = 200_000
    num_workers: Optional[int] = None

    # Benchmarks
    benchmark_warmup: int = 3
    benchmark_iterations: int = 50

    # Dense printer
    dense_precision: int = 3


def config_from_env(base: CsrkitConfig = None) -> CsrkitConfig:
    """Return ``base`` with overrides read from ``CSRKIT_*`` environment variables."""
    base = base or CsrkitConfig()
    workers = os.environ.get('CSRKIT_NUM_WORKERS')
    if workers:
        try:
            num_workers = int(workers)
        except ValueError:
            raise ValueError(f"CSRKIT_NUM_WORKERS must be an integer, got {workers!r}")
        if num_workers < 1:
            raise ValueError(f"CSRKIT_NUM_WORKERS must be positive, got {num_workers}")
        base = replace(base, num_workers=num_workers)
    return base


# Environment overrides are applied by the command line tool, not on import
DEFAULT_CONFIG = CsrkitConfig()
