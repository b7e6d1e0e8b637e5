import itertools
import random

import pytest
import sympy

import tensoridx as ti
from tensoridx.indices import check_sorted

mu, nu, n, x, y, D = sympy.symbols("mu nu n x y D")


def get_index_zoo():
    return [
        ti.idx(x, 3),
        ti.idx(x, 4),
        ti.idx(y, 3),
        ti.idx(5, 3),
        ti.idx(2 * n + 1, 3),
        ti.varidx(mu, 4),
        ti.varidx(mu, 4, covariant=True),
        ti.varidx(mu, D),
        ti.varidx(nu, 4, covariant=True),
        ti.varidx(x, 3),
        ti.varidx(0, 4, covariant=True),
    ]


@pytest.mark.parametrize(
    "a, b", list(itertools.product(get_index_zoo(), repeat=2))
)
def test_dummy_pair_symmetric(a, b):
    assert ti.is_dummy_pair(a, b) == ti.is_dummy_pair(b, a)


def test_dummy_pair_plain():
    assert ti.is_dummy_pair(ti.idx(x, 3), ti.idx(x, 3))
    assert not ti.is_dummy_pair(ti.idx(x, 3), ti.idx(x, 4))
    assert not ti.is_dummy_pair(ti.idx(x, 3), ti.idx(y, 3))
    # only atomic symbols pair up
    assert not ti.is_dummy_pair(ti.idx(5, 3), ti.idx(5, 3))
    assert not ti.is_dummy_pair(ti.idx(2 * n + 1, 3), ti.idx(2 * n + 1, 3))


@pytest.mark.parametrize("cov_a", (False, True))
@pytest.mark.parametrize("cov_b", (False, True))
def test_dummy_pair_variant_polarity(cov_a, cov_b):
    a = ti.varidx(mu, 4, covariant=cov_a)
    b = ti.varidx(mu, 4, covariant=cov_b)
    assert ti.is_dummy_pair(a, b) == (cov_a != cov_b)


@pytest.mark.parametrize("covariant", (False, True))
def test_dummy_pair_kinds_must_match(covariant):
    assert not ti.is_dummy_pair(
        ti.idx(mu, 4), ti.varidx(mu, 4, covariant=covariant)
    )


def test_dummy_pair_non_index():
    assert not ti.is_dummy_pair(mu, mu)
    assert not ti.is_dummy_pair(ti.idx(mu, 4), mu)


def test_sort_indices():
    zoo = get_index_zoo()
    s = ti.sort_indices(zoo)
    check_sorted(s)
    assert s == sorted(zoo)
    assert ti.sort_indices(s) == s
    # input untouched
    assert zoo == get_index_zoo()
    assert ti.sort_indices([]) == []


def test_sort_brings_candidates_together():
    ixs = [
        ti.varidx(mu, 4),
        ti.varidx(nu, 4),
        ti.varidx(x, 4),
        ti.varidx(mu, 4, covariant=True),
    ]
    s = ti.sort_indices(ixs)
    i = s.index(ti.varidx(mu, 4, covariant=True))
    assert s[i + 1] == ti.varidx(mu, 4)


@pytest.mark.parametrize("seed", range(5))
def test_sort_idempotent(seed):
    rng = random.Random(seed)
    zoo = get_index_zoo()
    rng.shuffle(zoo)
    s = ti.sort_indices(zoo)
    assert ti.sort_indices(s) == s


def test_check_sorted_raises():
    with pytest.raises(AssertionError):
        check_sorted([ti.varidx(mu, 4), ti.varidx(mu, 4, covariant=True)])


def test_classify_empty():
    assert ti.find_free_and_dummy([]) == ([], [])


def test_classify_single():
    assert ti.find_free_and_dummy([ti.idx(x, 3)]) == ([ti.idx(x, 3)], [])
    assert ti.find_free_and_dummy([ti.idx(5, 3)]) == ([], [])
    assert ti.find_free_and_dummy([ti.idx(2 * n, 3)]) == ([], [])


def test_classify_plain_pair():
    free, dummy = ti.find_free_and_dummy([ti.idx(x, 3), ti.idx(x, 3)])
    assert free == []
    assert dummy == [ti.idx(x, 3)]


def test_classify_variant_pair():
    free, dummy = ti.find_free_and_dummy(
        [ti.varidx(mu, 4, covariant=True), ti.varidx(mu, 4)]
    )
    assert free == []
    assert len(dummy) == 1
    assert dummy[0].value is mu
    # the later of the pair in canonical order
    assert dummy[0].contravariant


def test_classify_same_polarity_dropped():
    a = ti.varidx(mu, 4, covariant=True)
    assert ti.find_free_and_dummy([a, a]) == ([], [])
    b = ti.varidx(mu, 4)
    assert ti.find_free_and_dummy([b, b]) == ([], [])


def test_classify_duplicate_then_partner():
    cov = ti.varidx(mu, 4, covariant=True)
    con = ti.varidx(mu, 4)
    free, dummy = ti.find_free_and_dummy([cov, cov, con])
    assert free == []
    assert dummy == [con]
    free, dummy = ti.find_free_and_dummy([con, cov, cov])
    assert (free, dummy) == ([], [con])
    assert ti.find_free_and_dummy([cov, cov, cov]) == ([], [])


def test_classify_duplicate_not_free():
    a = ti.varidx(mu, 4, covariant=True)
    b = ti.varidx(nu, 4)
    free, dummy = ti.find_free_and_dummy([b, a, a])
    assert free == [b]
    assert dummy == []


def test_classify_generator_input():
    ixs = [ti.idx(x, 3), ti.idx(y, 3), ti.idx(x, 3)]
    assert ti.find_free_and_dummy(ix for ix in ixs) == (
        [ti.idx(y, 3)],
        [ti.idx(x, 3)],
    )
    free, dummy = ti.find_free_and_dummy(iter([ti.idx(x, 3)]))
    assert free == [ti.idx(x, 3)]
    assert dummy == []


def test_classify_numeric_pair():
    assert ti.find_free_and_dummy([ti.idx(5, 3), ti.idx(5, 3)]) == ([], [])


def test_classify_free_only():
    free, dummy = ti.find_free_and_dummy(
        [ti.idx(y, 3), ti.idx(x, 3), ti.idx(0, 3)]
    )
    assert free == ti.sort_indices([ti.idx(x, 3), ti.idx(y, 3)])
    assert dummy == []


def test_classify_trailing_free():
    free, dummy = ti.find_free_and_dummy(
        [
            ti.varidx(mu, 4),
            ti.varidx(mu, 4, covariant=True),
            ti.varidx(mu, 4),
        ]
    )
    assert dummy == [ti.varidx(mu, 4)]
    assert free == [ti.varidx(mu, 4)]


def test_classify_mismatched_dims():
    free, dummy = ti.find_free_and_dummy([ti.idx(x, 3), ti.idx(x, 4)])
    assert dummy == []
    assert len(free) == 2


def test_classify_mixed():
    ixs = [
        ti.varidx(mu, 4, covariant=True),
        ti.varidx(nu, 4),
        ti.idx(x, 3),
        ti.varidx(mu, 4),
        ti.idx(0, 3),
        ti.idx(x, 3),
    ]
    free, dummy = ti.find_free_and_dummy(ixs)
    assert free == [ti.varidx(nu, 4)]
    assert dummy == [ti.idx(x, 3), ti.varidx(mu, 4)]
    assert ti.get_free_indices(ixs) == free
    assert ti.get_dummy_indices(ixs) == dummy
    assert ti.count_free_indices(ixs) == 1
    assert ti.count_dummy_indices(ixs) == 2


@pytest.mark.parametrize(
    "ixs",
    [
        [
            ti.varidx(mu, 4, covariant=True),
            ti.varidx(nu, 4),
            ti.idx(x, 3),
            ti.varidx(mu, 4),
            ti.idx(5, 3),
            ti.idx(x, 3),
        ],
        [
            ti.varidx(mu, 4),
            ti.varidx(mu, 4),
            ti.varidx(mu, D, covariant=True),
            ti.idx(y, 3),
            ti.idx(2 * n + 1, 3),
        ],
    ],
)
def test_classify_order_independent(ixs):
    expected = ti.find_free_and_dummy(ixs)
    for perm in itertools.permutations(ixs):
        assert ti.find_free_and_dummy(perm) == expected


def test_classify_tuple_input():
    ixs = (ti.idx(x, 3), ti.idx(y, 3), ti.idx(x, 3))
    assert ti.find_free_and_dummy(ixs) == ([ti.idx(y, 3)], [ti.idx(x, 3)])


def test_index_set_difference():
    a, b, c = ti.idx(x, 3), ti.idx(y, 3), ti.varidx(mu, 4)
    assert ti.index_set_difference([a, b, c], [b]) == [a, c]
    assert ti.index_set_difference([c, b, a], [a, c]) == [b]
    assert ti.index_set_difference([a, b], []) == [a, b]
    assert ti.index_set_difference([], [a]) == []


def test_index_set_difference_exact():
    a = ti.varidx(mu, 4)
    # a dummy partner is not the same index
    assert ti.index_set_difference([a], [a.toggle_polarity()]) == [a]
    assert ti.index_set_difference([ti.idx(mu, 4)], [a]) == [ti.idx(mu, 4)]
    assert ti.index_set_difference([a, a], [a]) == []
