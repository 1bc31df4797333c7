"""
poset_core.py

Core data structures and operations for finite partial orders.

A poset is given by a list of element labels and a list of declared
(lesser, greater) index pairs. This module:
- Closes the declared pairs under reflexivity and transitivity
- Rejects inputs whose closure is not antisymmetric
- Derives order-theoretic structure on demand: generating (Hasse) edges,
  greatest/least elements, supremum and infimum tables, relative
  pseudo-complements
- Classifies the order as lattice / Heyting algebra / Boolean algebra

Elements are addressed by index everywhere; labels are only for display.
Anything that does not exist (a supremum of two incomparable maximal
elements, a least element of an antichain, ...) is reported as None.
"""

import json
import operator
import sys

import networkx as nx
from tqdm import tqdm


# ============================================================================
# SECTION 0: ERRORS
# ============================================================================

class PosetError(ValueError):
    """Base class for everything that makes an input not a poset."""


class IndexOutOfBoundsError(PosetError):
    """An edge refers to an element index outside [0, size)."""

    def __init__(self, index, size):
        self.index = index
        self.size = size
        super().__init__(f"index out of bounds: {index} for {size}")


class AntisymmetryViolationError(PosetError):
    """The closed relation puts two distinct elements below each other."""

    def __init__(self, left, right, left_label=None, right_label=None):
        self.left = left
        self.right = right
        self.left_label = left_label
        self.right_label = right_label
        if left_label is None:
            left_label, right_label = left, right
        super().__init__(
            f"poset must be antisymmetric: {left_label} ≤ {right_label} "
            f"and {right_label} ≤ {left_label}"
        )


class DuplicateElementError(PosetError):
    """The same label was given for two elements."""

    def __init__(self, label):
        self.label = label
        super().__init__(f"duplicate element: {label!r}")


class PosetParseError(PosetError):
    """A line of an edge-list snippet could not be read."""

    def __init__(self, line_number, line):
        self.line_number = line_number
        self.line = line
        super().__init__(f"empty element name on line {line_number}: {line.strip()!r}")


# ============================================================================
# SECTION 1: THE POSET
# ============================================================================

def _as_index(value):
    """Convert an edge endpoint to a plain int (numpy integers included)."""
    if isinstance(value, bool):
        raise TypeError(f"element index must be an integer, not bool: {value!r}")
    return operator.index(value)


# Defaults for to_dot_language()
DOT_GRAPH_ATTRIBUTES = {'rankdir': 'BT', 'bgcolor': '"#00000000"'}
DOT_NODE_ATTRIBUTES = {'shape': 'circle', 'style': 'filled', 'fillcolor': '"#ffffffff"'}


class Poset:
    """
    A finite partially ordered set over indexed, labeled elements.

    The order relation is stored as an n×n boolean matrix where
    relation[i][j] means element i ≤ element j. The matrix is fixed once the
    constructor returns; every derived table is computed the first time it
    is asked for and kept in self._cache.
    """

    def __init__(self, elements, edges, verbose=False):
        """
        Build a poset from labels and declared ordering pairs.

        Args:
            elements: iterable of distinct labels (converted to str)
            edges: iterable of (lesser_index, greater_index) pairs
            verbose: If True, print progress to stderr and show progress
                bars while computing the larger tables

        Raises:
            DuplicateElementError: a label occurs twice
            IndexOutOfBoundsError: an edge index is not in [0, n)
            TypeError: an edge index is not an integer
            AntisymmetryViolationError: the closure has a 2-cycle
        """
        self._elements = tuple(str(e) for e in elements)
        self.verbose = verbose
        self._cache = {}

        seen = set()
        for label in self._elements:
            if label in seen:
                raise DuplicateElementError(label)
            seen.add(label)

        n = len(self._elements)

        # Reflexive part
        reach = [[i == j for j in range(n)] for i in range(n)]

        # Declared pairs
        for pair in edges:
            a, b = (_as_index(idx) for idx in pair)
            for idx in (a, b):
                if not 0 <= idx < n:
                    raise IndexOutOfBoundsError(idx, n)
            reach[a][b] = True

        # Warshall: k must be the outer loop
        for k in range(n):
            row_k = reach[k]
            for i in range(n):
                if reach[i][k]:
                    row_i = reach[i]
                    for j in range(n):
                        if row_k[j]:
                            row_i[j] = True

        for i in range(n):
            for j in range(n):
                if i != j and reach[i][j] and reach[j][i]:
                    raise AntisymmetryViolationError(
                        i, j, self._elements[i], self._elements[j]
                    )

        self._relation = tuple(tuple(row) for row in reach)

        if verbose:
            print(f"Poset built: {n} elements, "
                  f"{sum(map(sum, reach)) - n} strict relations", file=sys.stderr)

    @classmethod
    def from_dot_snippet(cls, snippet, verbose=False):
        """
        Parse an edge-list snippet and build the poset it describes.

        See parse_dot_snippet() for the format.
        """
        elements, edges = parse_dot_snippet(snippet)
        return cls(elements, edges, verbose=verbose)

    @property
    def elements(self):
        """Tuple of element labels, in index order."""
        return self._elements

    @property
    def relation(self):
        """The closed order as an n×n tuple of tuples of bools."""
        return self._relation

    def __len__(self):
        return len(self._elements)

    def __repr__(self):
        return f"Poset({list(self._elements)!r})"

    def index(self, label):
        """Return the index of the element with the given label."""
        try:
            return self._elements.index(label)
        except ValueError:
            raise ValueError(f"Unknown element: {label!r}") from None

    def leq(self, i, j):
        """Return True if element i ≤ element j."""
        return self._relation[i][j]

    def lt(self, i, j):
        """Return True if element i < element j."""
        return i != j and self._relation[i][j]

    def up_set(self, i):
        """Indices of all elements ≥ i (including i)."""
        return frozenset(j for j, above in enumerate(self._relation[i]) if above)

    def down_set(self, i):
        """Indices of all elements ≤ i (including i)."""
        return frozenset(j for j, row in enumerate(self._relation) if row[i])

    def _progress(self, message):
        """Return a range over the elements, wrapped in a progress bar when verbose."""
        return tqdm(range(len(self)), desc=message, disable=not self.verbose)

    # ------------------------------------------------------------------------
    # Generators
    # ------------------------------------------------------------------------

    def get_generators(self):
        """
        Return the minimum set of generating edges.

        These are the covering pairs (i, j): i < j with nothing strictly in
        between. Their reflexive-transitive closure is the whole relation,
        and no smaller edge set has that property. This is what a Hasse
        diagram draws.

        Returns:
            tuple of (lesser, greater) index pairs, ordered by (i, j)
        """
        if 'generators' in self._cache:
            return self._cache['generators']

        rel = self._relation
        n = len(self)
        generators = []
        for i in range(n):
            for j in range(n):
                if i == j or not rel[i][j]:
                    continue
                # Check if there's an intermediate element
                is_generator = True
                for k in range(n):
                    if k != i and k != j and rel[i][k] and rel[k][j]:
                        is_generator = False
                        break
                if is_generator:
                    generators.append((i, j))

        self._cache['generators'] = tuple(generators)
        return self._cache['generators']

    # ------------------------------------------------------------------------
    # Extremal elements
    # ------------------------------------------------------------------------

    def get_greatest_element(self):
        """Return the index above every element, or None."""
        if 'greatest' not in self._cache:
            rel = self._relation
            self._cache['greatest'] = next(
                (i for i in range(len(self)) if all(row[i] for row in rel)),
                None
            )
        return self._cache['greatest']

    def get_least_element(self):
        """Return the index below every element, or None."""
        if 'least' not in self._cache:
            rel = self._relation
            self._cache['least'] = next(
                (i for i in range(len(self)) if all(rel[i])),
                None
            )
        return self._cache['least']

    # ------------------------------------------------------------------------
    # Supremum / infimum
    # ------------------------------------------------------------------------

    def get_supremum(self):
        """
        Return the table of pairwise suprema (least upper bounds).

        Entry [i][j] is the element k whose up-set is exactly the set of
        common upper bounds of i and j. Such a k is an upper bound of both
        (it lies in its own up-set) and is below every other upper bound, so
        it is the least one. None where no such k exists.

        Returns:
            n×n tuple of tuples of int or None
        """
        if 'supremum' not in self._cache:
            rel = self._relation
            n = len(self)
            table = []
            for i in self._progress("Computing supremum table..."):
                row = []
                for j in range(n):
                    bounds = [rel[i][l] and rel[j][l] for l in range(n)]
                    row.append(next(
                        (k for k in range(n) if all(rel[k][l] == bounds[l] for l in range(n))),
                        None
                    ))
                table.append(tuple(row))
            self._cache['supremum'] = tuple(table)
        return self._cache['supremum']

    def get_infimum(self):
        """
        Return the table of pairwise infima (greatest lower bounds).

        Dual of get_supremum(): entry [i][j] is the element whose down-set
        is exactly the set of common lower bounds of i and j, or None.
        """
        if 'infimum' not in self._cache:
            rel = self._relation
            n = len(self)
            table = []
            for i in self._progress("Computing infimum table..."):
                row = []
                for j in range(n):
                    bounds = [rel[l][i] and rel[l][j] for l in range(n)]
                    row.append(next(
                        (k for k in range(n) if all(rel[l][k] == bounds[l] for l in range(n))),
                        None
                    ))
                table.append(tuple(row))
            self._cache['infimum'] = tuple(table)
        return self._cache['infimum']

    def supremum(self, i, j):
        """Return the supremum of i and j, or None."""
        return self.get_supremum()[i][j]

    def infimum(self, i, j):
        """Return the infimum of i and j, or None."""
        return self.get_infimum()[i][j]

    # ------------------------------------------------------------------------
    # Pseudo-complement
    # ------------------------------------------------------------------------

    def get_pseudo_complement(self):
        """
        Return the table of relative pseudo-complements.

        Entry [i][j] is the greatest k such that infimum(i, k) ≤ j,
        characterised as: for every l, infimum(i, l) ≤ j iff l ≤ k.

        The definition needs every infimum, so if any infimum is missing the
        whole table is None rather than partially filled.

        Returns:
            n×n tuple of tuples of int or None, or None
        """
        if 'pseudo_complement' in self._cache:
            return self._cache['pseudo_complement']

        infimum = self.get_infimum()
        if any(k is None for row in infimum for k in row):
            self._cache['pseudo_complement'] = None
            return None

        rel = self._relation
        n = len(self)
        table = []
        for i in self._progress("Computing pseudo-complement table..."):
            row = []
            for j in range(n):
                below = [rel[infimum[i][l]][j] for l in range(n)]
                row.append(next(
                    (k for k in range(n) if all(rel[l][k] == below[l] for l in range(n))),
                    None
                ))
            table.append(tuple(row))

        self._cache['pseudo_complement'] = tuple(table)
        return self._cache['pseudo_complement']

    def pseudo_complement(self, i, j):
        """Return the pseudo-complement of i relative to j, or None."""
        table = self.get_pseudo_complement()
        if table is None:
            return None
        return table[i][j]

    def negate(self, i):
        """
        Return the pseudo-complement of i relative to the least element.

        None if there is no least element or the pseudo-complement is
        undefined.
        """
        least = self.get_least_element()
        if least is None:
            return None
        return self.pseudo_complement(i, least)

    # ------------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------------

    def is_lattice(self):
        """Return True if every pair has both a supremum and an infimum."""
        if 'is_lattice' not in self._cache:
            self._cache['is_lattice'] = (
                all(k is not None for row in self.get_supremum() for k in row)
                and all(k is not None for row in self.get_infimum() for k in row)
            )
        return self._cache['is_lattice']

    def is_heyting_algebra(self):
        """Return True for a lattice with a least element and all pseudo-complements."""
        if 'is_heyting_algebra' not in self._cache:
            result = self.is_lattice() and self.get_least_element() is not None
            if result:
                table = self.get_pseudo_complement()
                result = table is not None and all(k is not None for row in table for k in row)
            self._cache['is_heyting_algebra'] = result
        return self._cache['is_heyting_algebra']

    def is_boolean_algebra(self):
        """Return True for a Heyting algebra whose negation is an involution."""
        if 'is_boolean_algebra' not in self._cache:
            self._cache['is_boolean_algebra'] = (
                self.is_heyting_algebra()
                and all(self.negate(self.negate(i)) == i for i in range(len(self)))
            )
        return self._cache['is_boolean_algebra']

    # ------------------------------------------------------------------------
    # Graph output
    # ------------------------------------------------------------------------

    def to_graph(self):
        """
        Return the Hasse diagram as a NetworkX DiGraph.

        One node per element index (with a 'label' attribute) and one edge
        per generator, pointing from the lesser to the greater element.
        """
        G = nx.DiGraph()
        for i, label in enumerate(self._elements):
            G.add_node(i, label=label)
        G.add_edges_from(self.get_generators())
        return G

    def to_dot_language(self):
        """Return GraphViz DOT source for the Hasse diagram."""
        graph_attrs = ", ".join(f"{k} = {v}" for k, v in DOT_GRAPH_ATTRIBUTES.items())
        node_attrs = ", ".join(f"{k} = {v}" for k, v in DOT_NODE_ATTRIBUTES.items())
        lines = [
            "digraph G {",
            f"    graph [ {graph_attrs} ]",
            f"    node [ {node_attrs} ]",
        ]
        for i, label in enumerate(self._elements):
            lines.append(f"    {i} [ label = {json.dumps(label, ensure_ascii=False)} ]")
        for (i, j) in self.get_generators():
            lines.append(f"    {i} -> {j}")
        lines.append("}")
        return "\n".join(lines) + "\n"


# ============================================================================
# SECTION 2: PARSING
# ============================================================================

def parse_dot_snippet(snippet):
    """
    Parse an edge-list snippet into element labels and index pairs.

    Each non-blank line is a chain of names separated by '->':

        bottom -> x -> top
        bottom -> y -> top

    declares bottom ≤ x, x ≤ top, bottom ≤ y, y ≤ top. A line holding a
    single name just declares that element. Names are numbered in order of
    first appearance; repeated names refer to the same element.

    Args:
        snippet: multi-line string

    Returns:
        tuple of (list of labels, list of (lesser, greater) index pairs)

    Raises:
        PosetParseError: a line contains an empty name (e.g. 'a ->')
    """
    elements = []
    index_of = {}
    edges = []
    for line_number, line in enumerate(snippet.split('\n'), start=1):
        if not line.strip():
            continue
        words = [w.strip() for w in line.strip().split('->')]
        if any(not w for w in words):
            raise PosetParseError(line_number, line)
        for word in words:
            if word not in index_of:
                index_of[word] = len(elements)
                elements.append(word)
        for a, b in zip(words, words[1:]):
            edges.append((index_of[a], index_of[b]))
    return elements, edges


# ============================================================================
# SECTION 3: ANALYSIS UTILITIES
# ============================================================================

def describe_poset(poset):
    """
    Summarise a poset as a list of human-readable findings.

    Later findings are only listed when they are meaningful: pseudo-
    complements only if all infima exist, the Heyting check only for
    lattices, the Boolean check only for Heyting algebras.

    Args:
        poset: Poset

    Returns:
        list of str
    """
    if len(poset) == 0:
        return ["no elements"]

    def label(index):
        return poset.elements[index] if index is not None else None

    supremums = all(k is not None for row in poset.get_supremum() for k in row)
    infimums = all(k is not None for row in poset.get_infimum() for k in row)

    messages = [
        f"the greatest element: {label(poset.get_greatest_element())}",
        f"the least element: {label(poset.get_least_element())}",
        f"all supremums exist: {supremums}",
        f"all infimums exist: {infimums}",
    ]
    if infimums:
        table = poset.get_pseudo_complement()
        pseudo_complements = all(k is not None for row in table for k in row)
        messages.append(f"all pseudo-complements exist: {pseudo_complements}")
    messages.append(f"is lattice: {poset.is_lattice()}")
    if poset.is_lattice():
        messages.append(f"is Heyting algebra: {poset.is_heyting_algebra()}")
    if poset.is_heyting_algebra():
        messages.append(f"is Boolean algebra: {poset.is_boolean_algebra()}")
    return messages
