from . import utils
from .index import (
    Index,
    IndexKind,
    InvalidDimension,
    Polarity,
    idx,
    is_dummy_pair,
    varidx,
)
from .indices import (
    count_dummy_indices,
    count_free_indices,
    find_free_and_dummy,
    get_dummy_indices,
    get_free_indices,
    index_set_difference,
    sort_indices,
)

__all__ = (
    "count_dummy_indices",
    "count_free_indices",
    "find_free_and_dummy",
    "get_dummy_indices",
    "get_free_indices",
    "idx",
    "Index",
    "index_set_difference",
    "IndexKind",
    "InvalidDimension",
    "is_dummy_pair",
    "Polarity",
    "sort_indices",
    "utils",
    "varidx",
)
