import pytest

from percolation import Percolation
from union_find import (
    IndexOutOfRangeError,
    InvalidSizeError,
    QuickFindUF,
    QuickUnionUF,
    WeightedQuickUnionUF,
)

ALL_STRATEGIES = [QuickFindUF, QuickUnionUF, WeightedQuickUnionUF]


@pytest.mark.parametrize("n", [0, -3])
def test_non_positive_grid_size_is_rejected(n):
    with pytest.raises(InvalidSizeError):
        Percolation(n)


def test_new_grid_is_blocked():
    grid = Percolation(4)
    assert isinstance(grid.uf, QuickUnionUF)
    assert grid.uf.count() == 4 * 4 + 2
    assert not any(grid.isOpen(r, c) for r in range(4) for c in range(4))
    assert grid.numberOfOpenSites() == 0
    assert grid.openSitesRatio() == 0.0
    assert not grid.percolates()


@pytest.mark.parametrize("row, col", [(-1, 0), (0, -1), (3, 0), (0, 3), (5, 5)])
def test_out_of_bounds_coordinates_are_rejected(row, col):
    grid = Percolation(3)
    with pytest.raises(IndexOutOfRangeError):
        grid.open_site(row, col)
    with pytest.raises(IndexOutOfRangeError):
        grid.isOpen(row, col)
    with pytest.raises(IndexOutOfRangeError):
        grid.isConnectedTopAndBottom(row, col)


def test_opening_twice_is_a_no_op():
    grid = Percolation(3)
    grid.open_site(1, 1)
    ratio = grid.openSitesRatio()
    grid.open_site(1, 1)
    assert grid.openSitesRatio() == ratio
    assert grid.numberOfOpenSites() == 1


@pytest.mark.parametrize("uf_class", ALL_STRATEGIES)
def test_single_site_grid_percolates_once_open(uf_class):
    grid = Percolation(1, uf_class)
    assert not grid.percolates()
    grid.open_site(0, 0)
    assert grid.percolates()
    assert grid.isConnectedTopAndBottom(0, 0)


@pytest.mark.parametrize("uf_class", ALL_STRATEGIES)
def test_open_column_percolates(uf_class):
    grid = Percolation(3, uf_class)
    for row in range(3):
        grid.open_site(row, 0)

    assert grid.percolates()
    assert grid.isConnectedTopAndBottom(2, 0)
    for row in range(3):
        for col in (1, 2):
            assert not grid.isOpen(row, col)
            assert not grid.isConnectedTopAndBottom(row, col)


def test_full_top_row_does_not_percolate():
    grid = Percolation(2)
    grid.open_site(0, 0)
    grid.open_site(0, 1)
    assert not grid.percolates()


def test_diagonal_sites_are_not_neighbours():
    grid = Percolation(2)
    grid.open_site(0, 0)
    grid.open_site(1, 1)
    assert not grid.percolates()
    grid.open_site(1, 0)
    assert grid.percolates()


def test_full_site_is_weaker_than_top_and_bottom():
    grid = Percolation(3)
    grid.open_site(0, 0)
    grid.open_site(1, 0)

    assert grid.isFull(1, 0)
    assert not grid.isConnectedTopAndBottom(1, 0)

    grid.open_site(2, 2)
    assert not grid.isFull(2, 2)

    grid.open_site(2, 0)
    assert grid.isConnectedTopAndBottom(1, 0)
    assert not grid.isConnectedTopAndBottom(1, 1)


def test_bottom_row_sites_join_through_virtual_bottom():
    grid = Percolation(3)
    grid.open_site(2, 2)
    for row in range(3):
        grid.open_site(row, 0)

    # (2, 2) has no open neighbour but shares the virtual bottom
    assert grid.percolates()
    assert grid.isFull(2, 2)
    assert grid.isConnectedTopAndBottom(2, 2)


def test_blocked_site_is_never_full():
    grid = Percolation(2)
    assert not grid.isFull(0, 0)
    assert not grid.isConnectedTopAndBottom(0, 0)


def test_open_sites_ratio_counts_distinct_sites():
    n = 5
    grid = Percolation(n, WeightedQuickUnionUF)
    sites = [(0, 0), (1, 3), (4, 4), (2, 2), (1, 3), (0, 0), (3, 1)]
    for row, col in sites:
        grid.open_site(row, col)
    assert grid.openSitesRatio() == len(set(sites)) / (n * n)


def test_open_site_stays_open():
    grid = Percolation(3)
    grid.open_site(1, 2)
    for row, col in [(0, 0), (2, 2), (1, 1)]:
        grid.open_site(row, col)
    assert grid.isOpen(1, 2)


def test_fully_open_grid_percolates():
    n = 6
    grid = Percolation(n)
    for row in range(n):
        for col in range(n):
            grid.open_site(row, col)
    assert grid.percolates()
    assert grid.openSitesRatio() == 1.0
