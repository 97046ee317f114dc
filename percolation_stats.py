import argparse
import logging
import math
import sys
from concurrent.futures import ProcessPoolExecutor
from itertools import repeat
from typing import NamedTuple

import numpy as np
from scipy.stats import linregress, norm

from percolation import Percolation
from union_find import (
    STRATEGIES,
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvalidSizeError,
    QuickUnionUF,
)

logger = logging.getLogger(__name__)

# site percolation threshold of the infinite square lattice
SQUARE_LATTICE_PC = 0.592746


def spawn_seeds(seed, count: int):
    """
    Returns 'count' independent child SeedSequences drawn from 'seed', which
    may be None, an int, a numpy SeedSequence or a numpy Generator.
    """
    if isinstance(seed, np.random.Generator):
        seed = seed.bit_generator.seed_seq
    if not isinstance(seed, np.random.SeedSequence):
        seed = np.random.SeedSequence(seed)
    return seed.spawn(count)


def run_trial(n: int, seed, uf_class=QuickUnionUF):
    """
    Opens the sites of a fresh n-by-n grid in a uniformly random order until
    it percolates.

    :param n: The grid size.
    :param seed: Seed of this trial's own random generator.
    :param uf_class: Union-find strategy backing the grid.
    :return: (fraction of sites open when percolation occurred, the grid)
    """
    rng = np.random.default_rng(seed)
    simulator = Percolation(n, uf_class)

    # a fully open grid always percolates, so the loop always breaks
    for site in rng.permutation(simulator.gridSquare):
        row, col = divmod(int(site), n)
        simulator.open_site(row, col)
        if simulator.percolates():
            break

    return simulator.openSitesRatio(), simulator


def _trial_ratio(n, seed, uf_class):
    ratio, _ = run_trial(n, seed, uf_class)
    return ratio


class PercolationStats:
    """
    Monte Carlo estimate of the percolation threshold of an n-by-n grid.

    Every trial gets its own grid, union-find and random generator, so the
    trials can run on separate worker processes. With workers > 1 all trials
    but the last are sent to a process pool; the last one always runs here
    so that its grid is kept in 'lastGrid'. Results do not depend on the
    number of workers for a fixed seed.
    """

    def __init__(self, n: int, trials: int, seed=None, uf_class=QuickUnionUF, workers: int = 1):
        if n <= 0 or trials <= 0:
            raise InvalidSizeError(
                f"grid size n and trials count must be positive integers, got n={n}, trials={trials}"
            )
        if workers <= 0:
            raise InvalidArgumentError(f"workers must be a positive integer, got {workers}")

        self.gridSize = n
        self.trialCount = trials
        self.trialResults = []

        seeds = spawn_seeds(seed, trials)

        if workers > 1 and trials > 1:
            logger.debug("dispatching %d trials of n=%d to %d workers", trials - 1, n, workers)
            with ProcessPoolExecutor(max_workers=workers) as executor:
                self.trialResults.extend(
                    executor.map(_trial_ratio, repeat(n), seeds[:-1], repeat(uf_class))
                )
        else:
            for t, trial_seed in enumerate(seeds[:-1]):
                self.trialResults.append(_trial_ratio(n, trial_seed, uf_class))
                if (t + 1) % 50 == 0:
                    logger.debug("n=%d progress: %d/%d trials", n, t + 1, trials)

        ratio, self.lastGrid = run_trial(n, seeds[-1], uf_class)
        self.trialResults.append(ratio)

    def trials_mean(self) -> float:
        return float(np.mean(self.trialResults))

    def trials_std(self) -> float:
        # sample standard deviation, undefined for a single trial
        if self.trialCount == 1:
            return 0.0
        return float(np.std(self.trialResults, ddof=1))

    def confidence_interval(self, level: float = 0.95):
        if not 0.0 < level < 1.0:
            raise InvalidArgumentError(f"confidence level must be in (0, 1), got {level}")
        z = norm.ppf(0.5 + level / 2)
        half_width = z * self.trials_std() / math.sqrt(self.trialCount)
        mean = self.trials_mean()
        return mean - half_width, mean + half_width

    def report(self, level: float = 0.95):
        print("=" * 60)
        print(f"STATS REPORT (n = {self.gridSize}, trials = {self.trialCount})")
        print("=" * 60)

        print(f"mean value of critical value pc = {self.trials_mean(): .6f}")
        print(f"std value of critical value pc = {self.trials_std(): .6f}")
        lo, hi = self.confidence_interval(level)
        print(f"the {level:.0%} confidence interval is {lo:.6f} ~ {hi:.6f}")
        print("=" * 60)


def estimate_threshold(grid_size: int, trial_count: int, seed=None, uf_class=QuickUnionUF,
                       workers: int = 1) -> float:
    """
    Returns the mean fraction of open sites at which an n-by-n grid first
    percolates, over 'trial_count' independent trials.
    """
    return PercolationStats(grid_size, trial_count, seed, uf_class, workers).trials_mean()


class ScalingFit(NamedTuple):
    pc_inf: float
    slope: float
    r_squared: float


def sweep(sizes, trials: int, seed=None, uf_class=QuickUnionUF, workers: int = 1):
    """
    Runs PercolationStats for every grid size in 'sizes', each size with
    its own child seed. Returns the list of PercolationStats in order.
    """
    results = []
    for L, size_seed in zip(sizes, spawn_seeds(seed, len(sizes))):
        logger.debug("simulate n = %d", L)
        results.append(PercolationStats(L, trials, size_seed, uf_class, workers))
    return results


def extrapolate_threshold(sizes, means, exponent: float = -3 / 4) -> ScalingFit:
    """
    Finite-size scaling extrapolation: fits the mean threshold against
    L**exponent with a straight line. The intercept at L**exponent = 0 is
    the estimate of pc for the infinite lattice.

    :param sizes: Grid sizes L.
    :param means: Mean threshold estimate for each L.
    :param exponent: Scaling exponent, -1/nu with nu = 4/3 in two dimensions.
    """
    sizes = np.asarray(sizes, dtype=float)
    means = np.asarray(means, dtype=float)

    if sizes.shape != means.shape:
        raise InvalidArgumentError("sizes and means must have the same length")
    if len(np.unique(sizes)) < 2:
        raise InvalidArgumentError("extrapolation needs at least two distinct grid sizes")

    fit = linregress(sizes ** exponent, means)
    return ScalingFit(float(fit.intercept), float(fit.slope), float(fit.rvalue ** 2))


def build_parser():
    parser = argparse.ArgumentParser(
        description="Estimate the site percolation threshold of an n-by-n grid by Monte Carlo simulation."
    )

    parser.add_argument(
        '-n',
        type=int,
        default=10,
        help="Size of the square grid (n x n). Smallest size when sweeping."
    )

    parser.add_argument(
        '-t',
        type=int,
        default=100,
        help="The number of Monte Carlo trials to perform per grid size."
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help="Seed for the random site orderings. Random when omitted."
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=1,
        help="Number of worker processes running trials."
    )

    parser.add_argument(
        '--uf',
        choices=sorted(STRATEGIES),
        default="quick-union",
        help="Union-find strategy backing the grid."
    )

    parser.add_argument(
        '--Lmax',
        type=int,
        default=None,
        help="Sweep grid sizes from n to Lmax and extrapolate pc for the infinite lattice."
    )

    parser.add_argument(
        '--Lstep',
        type=int,
        default=10,
        help="Step size for increasing the grid size when sweeping."
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help="Log trial progress."
    )

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.Lstep <= 0:
        parser.error("--Lstep must be a positive integer")

    uf_class = STRATEGIES[args.uf]

    try:
        if args.Lmax is None:
            stats = PercolationStats(args.n, args.t, args.seed, uf_class, args.workers)
            stats.report()
            return 0

        sizes = list(range(args.n, args.Lmax + 1, args.Lstep))
        print("Starting Monte Carlo Percolation Analysis...")
        print(f"System sizes (n): {args.n} to {args.Lmax}, step {args.Lstep}")
        print(f"Trials per size: {args.t}")

        results = sweep(sizes, args.t, args.seed, uf_class, args.workers)
        for stats in results:
            stats.report()

        fit = extrapolate_threshold(sizes, [stats.trials_mean() for stats in results])
        print(f"\n--- Extrapolation Results ---")
        print(f"pc(infinity) = {fit.pc_inf:.6f}, R^2 = {fit.r_squared:.4f}")
        print(f"Theory: pc = {SQUARE_LATTICE_PC}")
        return 0
    except (InvalidArgumentError, IndexOutOfRangeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
