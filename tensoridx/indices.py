"""Operations on collections of indices: canonical sorting, splitting into
free and dummy indices, and set difference.
"""

from . import utils
from .index import is_dummy_pair


def sort_indices(indices):
    """Bring a sequence of indices into the canonical order, in which dummy
    pair candidates lie next to each other.

    Parameters
    ----------
    indices : Sequence[Index]
        The indices to sort, this is not modified.

    Returns
    -------
    list[Index]
    """
    v = list(indices)
    n = len(v)

    # simple exchange sort should be sufficient for the small
    # number of indices expected per term
    for i in range(n - 1):
        for j in range(i + 1, n):
            if v[i].compare(v[j]) > 0:
                v[i], v[j] = v[j], v[i]

    if utils.DEBUG:
        check_sorted(v)

    return v


def find_free_and_dummy(indices):
    """Split ``indices`` into the free indices, which appear once, and the
    dummy indices, which appear as contracted pairs. Only indices with
    symbolic values are reported in either list.

    Two identical indices which do not form a dummy pair, such as variant
    indices with the same polarity, are dropped from both lists. The second
    of them can still pair with the index after it.

    Parameters
    ----------
    indices : Sequence[Index]
        The indices to classify, in any order.

    Returns
    -------
    free : list[Index]
        The free indices, in canonical order.
    dummy : list[Index]
        One index for each dummy pair (the later of the pair in canonical
        order, so the contravariant one for variant indices), in canonical
        order.
    """
    indices = tuple(indices)
    free = []
    dummy = []

    if len(indices) == 0:
        return free, dummy

    if len(indices) == 1:
        (ix,) = indices
        if ix.is_symbolic():
            free.append(ix)
        return free, dummy

    # sorting brings dummy pairs next to each other
    v = sort_indices(indices)
    n = len(v)

    i = 0
    # whether v[i] is the second of a dropped duplicate pair
    dropped = False
    while i < n - 1:
        last, current = v[i], v[i + 1]
        if is_dummy_pair(last, current):
            dummy.append(current)
            i += 2
            dropped = False
        elif last == current:
            # identical but not contractable, drop both but let the second
            # still pair with the next index
            i += 1
            dropped = True
        else:
            if not dropped and last.is_symbolic():
                free.append(last)
            i += 1
            dropped = False

    # flush a trailing index not consumed by a pair
    if i == n - 1 and not dropped and v[i].is_symbolic():
        free.append(v[i])

    if utils.DEBUG:
        check_free_and_dummy(free, dummy)

    return free, dummy


def get_free_indices(indices):
    """The free indices of ``indices``, in canonical order."""
    return find_free_and_dummy(indices)[0]


def get_dummy_indices(indices):
    """One index for each dummy pair in ``indices``, in canonical order."""
    return find_free_and_dummy(indices)[1]


def count_free_indices(indices):
    return len(find_free_and_dummy(indices)[0])


def count_dummy_indices(indices):
    return len(find_free_and_dummy(indices)[1])


def index_set_difference(a, b):
    """The indices of ``a`` which are not also in ``b``, keeping the order of
    ``a``. Indices are matched exactly, so an index is not removed by its
    dummy partner.

    Parameters
    ----------
    a, b : Sequence[Index]

    Returns
    -------
    list[Index]
    """
    return [ix for ix in a if not any(ix == other for other in b)]


def check_sorted(indices):
    """Check that ``indices`` are in canonical order. For debugging."""
    for x, y in zip(indices, indices[1:]):
        assert x.compare(y) <= 0, f"Indices {x!r} and {y!r} are out of order."


def check_free_and_dummy(free, dummy):
    """Check that free and dummy index lists are well-formed, i.e. symbolic
    and in canonical order. For debugging.
    """
    for ix in (*free, *dummy):
        assert ix.is_symbolic(), f"Index {ix!r} is not symbolic."
    check_sorted(free)
    check_sorted(dummy)
