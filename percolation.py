import numpy as np

from union_find import IndexOutOfRangeError, InvalidSizeError, QuickUnionUF


class Percolation:
    """
    An n-by-n grid of sites, each blocked or open. The system percolates
    when some path of open sites joins the top row to the bottom row.

    Connectivity is kept in one union-find instance of n*n + 2 elements:
    site (row, col) maps to row * n + col, and the two extra elements are
    a virtual top joined to every open site of row 0 and a virtual bottom
    joined to every open site of row n-1.

    The default 'uf_class' is the naive QuickUnionUF (no weighting, no
    path compression). Pass WeightedQuickUnionUF for large grids.
    """

    # up, down, left, right
    NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))

    # create a n by n grid with all sites blocked
    def __init__(self, n: int, uf_class=QuickUnionUF):
        if n <= 0:
            raise InvalidSizeError(f"grid size must be a positive integer, got {n}")

        self.gridSize = n
        self.gridSquare = n * n
        self.grid = np.zeros((n, n), dtype=bool)

        self.uf = uf_class(self.gridSquare + 2)

        self.virtualTop = self.gridSquare
        self.virtualBottom = self.gridSquare + 1

        self.openSite = 0

    # open the site[row, col] if it's not open yet
    def open_site(self, row: int, col: int):
        self.validState(row, col)

        if self.grid[row, col]:
            return

        self.grid[row, col] = True
        self.openSite += 1

        flatIndex = self.flattenGrid(row, col)

        ## top row
        if row == 0:
            self.uf.union(flatIndex, self.virtualTop)

        ## bottom row
        if row == self.gridSize - 1:
            self.uf.union(flatIndex, self.virtualBottom)

        ## open neighbours
        for dRow, dCol in self.NEIGHBOURS:
            adjRow, adjCol = row + dRow, col + dCol
            if self.isOnGrid(adjRow, adjCol) and self.grid[adjRow, adjCol]:
                self.uf.union(flatIndex, self.flattenGrid(adjRow, adjCol))

    # is site[row, col] open?
    def isOpen(self, row: int, col: int) -> bool:
        self.validState(row, col)
        return bool(self.grid[row, col])

    # is site[row, col] open and connected to the top row?
    def isFull(self, row: int, col: int) -> bool:
        if not self.isOpen(row, col):
            return False
        return self.uf.connected(self.flattenGrid(row, col), self.virtualTop)

    def isConnectedTopAndBottom(self, row: int, col: int) -> bool:
        """
        True iff site (row, col) is open and connected to both the virtual
        top and the virtual bottom, i.e. it lies on a percolating cluster.
        This is stricter than isFull and can only hold once the grid
        percolates.
        """
        if not self.isOpen(row, col):
            return False
        flatIndex = self.flattenGrid(row, col)
        return (self.uf.connected(flatIndex, self.virtualTop)
                and self.uf.connected(flatIndex, self.virtualBottom))

    def percolates(self) -> bool:
        return self.uf.connected(self.virtualTop, self.virtualBottom)

    def numberOfOpenSites(self) -> int:
        return self.openSite

    def openSitesRatio(self) -> float:
        return self.openSite / self.gridSquare

    def validState(self, row: int, col: int):
        if not self.isOnGrid(row, col):
            raise IndexOutOfRangeError(
                f"({row}, {col}) is outside grid bounds [0, {self.gridSize})"
            )

    def flattenGrid(self, row: int, col: int) -> int:
        return self.gridSize * row + col

    def isOnGrid(self, row: int, col: int) -> bool:
        return 0 <= row < self.gridSize and 0 <= col < self.gridSize
