from typing import Protocol, runtime_checkable


class InvalidArgumentError(ValueError):
    """
    Raised when an argument is outside the values an operation accepts.
    """


class InvalidSizeError(InvalidArgumentError):
    """
    Raised when an element count, grid size or trial count is not positive.
    """


class IndexOutOfRangeError(IndexError):
    """
    Raised when an element index or grid coordinate is outside its domain.
    """


@runtime_checkable
class DisjointSet(Protocol):
    """
    The union / same-set capability shared by every union-find strategy
    over a fixed universe of elements 0 through n-1.
    """

    def union(self, p: int, q: int) -> None: ...

    def connected(self, p: int, q: int) -> bool: ...

    def count(self) -> int: ...


def _check_size(n):
    if n <= 0:
        raise InvalidSizeError(f"number of elements must be > 0, got {n}")


# quick-find union-find
class QuickFindUF:
    """
    A class for the Quick-Find union-find data structure.

    connected() is a single array comparison, union() relabels every
    element of one component, so it costs O(n).
    """

    def __init__(self, n):
        """
        Initializes a union-find data structure with 'n' sites indexed
        0 through n-1. Each site is initially in its own component.

        :param n: The number of sites.
        """
        _check_size(n)

        # self.id[i] = component identifier of site i
        self.id = list(range(n))
        self._count = n

    def count(self):
        """
        Returns the number of disjoint sets.
        """
        return self._count

    def _validate(self, p):
        n = len(self.id)
        if p < 0 or p >= n:
            raise IndexOutOfRangeError(f"index {p} is not between 0 and {n-1}")

    def find(self, p):
        """
        Returns the component identifier of site 'p'.
        """
        self._validate(p)
        return self.id[p]

    def connected(self, p, q):
        """
        Returns true if the two sites 'p' and 'q' are in the same component.
        """
        self._validate(p)
        self._validate(q)
        return self.id[p] == self.id[q]

    def union(self, p, q):
        """
        Merges the component containing 'p' into the component containing 'q'
        by rewriting every site tagged with p's identifier.
        """
        self._validate(p)
        self._validate(q)

        pid = self.id[p]
        qid = self.id[q]

        if pid == qid:
            return  # Already connected

        for i in range(len(self.id)):
            if self.id[i] == pid:
                self.id[i] = qid

        self._count -= 1


# quick-union union-find, no weighting and no path compression
class QuickUnionUF:
    """
    A class for the naive Quick-Union data structure.

    Components are trees of parent links. union() always hangs the root of
    p's tree under the root of q's tree, so unions in increasing order
    (0,1), (1,2), ... build a single chain and root() degrades to O(n).
    """

    def __init__(self, n):
        """
        Initializes a union-find data structure with 'n' sites indexed
        0 through n-1. Each site is initially its own root.

        :param n: The number of sites.
        """
        _check_size(n)

        # self.parent[i] = parent of site i, roots point to themselves
        self.parent = list(range(n))
        self._count = n

    def count(self):
        """
        Returns the number of disjoint sets.
        """
        return self._count

    def _validate(self, p):
        n = len(self.parent)
        if p < 0 or p >= n:
            raise IndexOutOfRangeError(f"index {p} is not between 0 and {n-1}")

    def root(self, i):
        """
        Returns the root of site 'i' by following parent links.
        """
        self._validate(i)
        while i != self.parent[i]:
            i = self.parent[i]
        return i

    def connected(self, p, q):
        """
        Returns true if the two sites 'p' and 'q' share a root.
        """
        return self.root(p) == self.root(q)

    def union(self, p, q):
        """
        Links the root of 'p' under the root of 'q'.
        """
        i = self.root(p)
        j = self.root(q)

        if i == j:
            return

        self.parent[i] = j
        self._count -= 1


# weighted quick union-find
class WeightedQuickUnionUF:
    """
    A class for the Weighted Quick-Union-Find data structure
    with path compression.
    """

    def __init__(self, n):
        """
        Initializes an empty union-find data structure with 'n' sites
        indexed 0 through n-1. Each site is initially in its own component.

        :param n: The number of sites.
        """
        _check_size(n)

        self.parent = list(range(n))

        # self.size[i] = number of sites in the tree rooted at i
        self.size = [1] * n

        self._count = n

    def count(self):
        """
        Returns the number of disjoint sets.
        """
        return self._count

    def _validate(self, p):
        n = len(self.parent)
        if p < 0 or p >= n:
            raise IndexOutOfRangeError(f"index {p} is not between 0 and {n-1}")

    def find(self, p):
        """
        Returns the root of the set containing site 'p' and links every
        site on the path directly to that root.
        """
        self._validate(p)

        root = p
        while root != self.parent[root]:
            root = self.parent[root]

        while p != root:
            next_p = self.parent[p]
            self.parent[p] = root
            p = next_p

        return root

    def connected(self, p, q):
        return self.find(p) == self.find(q)

    def union(self, p, q):
        """
        Merges the set containing site 'p' with the set containing site 'q'.
        The root of the smaller tree is attached to the root of the larger one.
        """
        rootP = self.find(p)
        rootQ = self.find(q)

        if rootP == rootQ:
            return

        if self.size[rootP] < self.size[rootQ]:
            self.parent[rootP] = rootQ
            self.size[rootQ] += self.size[rootP]
        else:
            self.parent[rootQ] = rootP
            self.size[rootP] += self.size[rootQ]

        self._count -= 1


STRATEGIES = {
    "quick-find": QuickFindUF,
    "quick-union": QuickUnionUF,
    "weighted": WeightedQuickUnionUF,
}
