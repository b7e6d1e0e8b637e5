"""Index objects, labelling the slots of tensor expressions."""

import enum

import sympy

from .utils import (
    as_expr,
    compare_exprs,
    hasher,
    is_numeric,
    is_positive_integer,
    is_symbol,
)


class InvalidDimension(ValueError):
    """Raised when an index is given a concrete dimension that is not a
    positive integer.
    """

    def __init__(self, dim):
        self.dim = dim
        super().__init__(
            f"Dimension of index space is {dim}, must be a positive integer."
        )


class IndexKind(enum.Enum):
    """The closed set of index kinds. Indices of different kinds never form
    dummy pairs, and sort by this tag before anything else.
    """

    PLAIN = 0
    VARIANT = 1


class Polarity(enum.Enum):
    """Covariant (lower, ``.``) or contravariant (upper, ``~``) position of a
    variant index. Covariant sorts first.
    """

    COVARIANT = 0
    CONTRAVARIANT = 1

    def flip(self):
        if self is Polarity.COVARIANT:
            return Polarity.CONTRAVARIANT
        return Polarity.COVARIANT


_ARCHIVE_CLASSES = {
    IndexKind.PLAIN: "idx",
    IndexKind.VARIANT: "varidx",
}


class Index:
    """An index of a tensor expression, a pair of a ``value`` (usually a
    symbol) and the ``dim``-ension of the space it ranges over, optionally
    carrying a covariant / contravariant polarity. This is intended to be
    used immutably: every transformation returns a new index, or this very
    index if nothing changed.

    Parameters
    ----------
    value : sympy.Basic or sympifiable
        The value of the index, e.g. a symbol ``mu`` or a number ``0``.
    dim : sympy.Basic or sympifiable
        The dimension of the index space. If this is a number it must be a
        positive integer, otherwise it can be any symbolic expression.
    polarity : Polarity, optional
        If given, the index is a variant index with this polarity, otherwise
        it is a plain index.

    Raises
    ------
    InvalidDimension
        If ``dim`` is numeric but not a positive integer.
    """

    __slots__ = ("_value", "_dim", "_kind", "_polarity", "_hashkey")

    def __init__(self, value, dim, polarity=None):
        value = as_expr(value)
        dim = as_expr(dim)
        if is_numeric(dim) and not is_positive_integer(dim):
            raise InvalidDimension(dim)

        if polarity is None:
            kind = IndexKind.PLAIN
        elif isinstance(polarity, Polarity):
            kind = IndexKind.VARIANT
        else:
            raise TypeError(
                f"Expected a `Polarity` or None, got {polarity!r}."
            )

        self._value = value
        self._dim = dim
        self._kind = kind
        self._polarity = polarity
        self._hashkey = None

    @property
    def value(self):
        """The value of this index, usually a symbol."""
        return self._value

    @property
    def dim(self):
        """The dimension of the space this index ranges over."""
        return self._dim

    @property
    def kind(self) -> IndexKind:
        """Whether this is a plain or variant index."""
        return self._kind

    @property
    def polarity(self):
        """The polarity of a variant index, ``None`` for plain indices."""
        return self._polarity

    @property
    def covariant(self) -> bool:
        return self._polarity is Polarity.COVARIANT

    @property
    def contravariant(self) -> bool:
        return self._polarity is Polarity.CONTRAVARIANT

    @property
    def free_symbols(self):
        """The symbols appearing in the value, the dimension is not
        considered part of the index expression.
        """
        return self._value.free_symbols

    def is_symbolic(self) -> bool:
        """Whether the value is an atomic symbol, only such indices can be
        free or dummy indices.
        """
        return is_symbol(self._value)

    def is_dim_numeric(self) -> bool:
        return is_numeric(self._dim)

    def is_dim_symbolic(self) -> bool:
        return not is_numeric(self._dim)

    def nops(self):
        # the dimension is not a sub-expression
        return 1

    def op(self, i):
        if i != 0:
            raise IndexError(f"Index has a single operand, got {i}.")
        return self._value

    def copy_with(self, **kwargs):
        """A copy of this index with some attributes replaced. Note that checks
        are not performed on the new properties, this is intended for internal
        use.
        """
        new = self.__new__(self.__class__)
        new._value = kwargs.pop("value", self._value)
        new._dim = kwargs.pop("dim", self._dim)

        # need to pop from kwargs to handle 'not-set' vs 'set-to-None'
        if "polarity" in kwargs:
            new._polarity = kwargs.pop("polarity")
            new._kind = (
                IndexKind.PLAIN
                if new._polarity is None
                else IndexKind.VARIANT
            )
        else:
            new._polarity = self._polarity
            new._kind = self._kind

        # always recompute this
        new._hashkey = None

        if kwargs:
            raise TypeError(f"Unexpected keyword arguments: {kwargs}")

        return new

    def replace_dim(self, dim):
        """A copy of this index ranging over a space of dimension ``dim``."""
        dim = as_expr(dim)
        if is_numeric(dim) and not is_positive_integer(dim):
            raise InvalidDimension(dim)
        if dim == self._dim:
            return self
        return self.copy_with(dim=dim)

    def toggle_polarity(self):
        """A copy of this variant index with the polarity reversed, sharing
        the same value and dimension expressions.
        """
        if self._kind is not IndexKind.VARIANT:
            raise TypeError("Only variant indices have a polarity.")
        return self.copy_with(polarity=self._polarity.flip())

    def compare(self, other) -> int:
        """Three way comparison with ``other`` in the canonical index order,
        returning -1, 0 or 1. Indices are ordered by kind, then value, then
        dimension and finally polarity, so that indices which only differ by
        polarity, i.e. dummy pair candidates, end up adjacent once sorted.
        """
        if self is other:
            return 0
        if self._kind is not other._kind:
            return -1 if self._kind.value < other._kind.value else 1

        c = compare_exprs(self._value, other._value)
        if c:
            return c
        c = compare_exprs(self._dim, other._dim)
        if c:
            return c

        if self._kind is IndexKind.PLAIN:
            return 0
        elif self._kind is IndexKind.VARIANT:
            # polarity last, so dummy indices lie next to each other
            if self._polarity is other._polarity:
                return 0
            return -1 if self._polarity is Polarity.COVARIANT else 1
        raise AssertionError(f"Unhandled index kind {self._kind}.")

    def subs(self, patterns, replacements=None):
        """Substitute in this index.

        If this index equals one of ``patterns`` it is replaced: entirely if
        the matching replacement is itself an index, else only its value.
        Otherwise substitution is performed inside the value only, never the
        dimension. If nothing changes, this same index is returned.

        Parameters
        ----------
        patterns : sequence or dict
            The things to replace, indices or expressions. If a dict, it maps
            patterns to replacements and ``replacements`` must not be given.
        replacements : sequence, optional
            The replacements, paired with ``patterns`` by position.

        Returns
        -------
        Index
        """
        if replacements is None:
            mapping = dict(patterns)
            patterns, replacements = mapping.keys(), mapping.values()
        patterns = tuple(patterns)
        replacements = tuple(replacements)
        assert len(patterns) == len(replacements), (
            f"Got {len(patterns)} patterns but "
            f"{len(replacements)} replacements."
        )

        # first look for whole index substitutions
        for pattern, replacement in zip(patterns, replacements):
            if isinstance(pattern, Index) and self == pattern:
                if isinstance(replacement, Index):
                    return replacement
                return self.copy_with(value=as_expr(replacement))

        # none, substitute objects in value (not in dimension)
        pairs = [
            (pattern, replacement)
            for pattern, replacement in zip(patterns, replacements)
            if not isinstance(pattern, Index)
            and not isinstance(replacement, Index)
        ]
        if not pairs:
            return self
        new_value = self._value.subs(pairs, simultaneous=True)
        if new_value is self._value or new_value == self._value:
            return self
        return self.copy_with(value=new_value)

    def archive_fields(self):
        """The named fields needed to persist this index, with expressions
        stored as ``sympy.srepr`` strings.
        """
        fields = {
            "class": _ARCHIVE_CLASSES[self._kind],
            "value": sympy.srepr(self._value),
            "dim": sympy.srepr(self._dim),
        }
        if self._kind is IndexKind.VARIANT:
            fields["covariant"] = self.covariant
        return fields

    @classmethod
    def from_archive_fields(cls, fields, symbols=()):
        """Reconstruct an index from the fields produced by
        ``archive_fields``.

        Parameters
        ----------
        fields : dict[str, str | bool]
            The stored fields.
        symbols : sequence of sympy.Symbol, optional
            Symbols to reuse for matching names in the stored expressions,
            so that the reconstructed index refers to the caller's symbols.

        Returns
        -------
        Index
        """
        table = {s.name: s for s in symbols}

        def load(s):
            expr = sympy.sympify(s)
            subs = {
                sym: table[sym.name]
                for sym in expr.atoms(sympy.Symbol)
                if sym.name in table
            }
            return expr.xreplace(subs) if subs else expr

        value = load(fields["value"])
        dim = load(fields["dim"])
        name = fields["class"]
        if name == "idx":
            return cls(value, dim)
        if name == "varidx":
            polarity = (
                Polarity.COVARIANT
                if fields.get("covariant", False)
                else Polarity.CONTRAVARIANT
            )
            return cls(value, dim, polarity)
        raise ValueError(f"Unknown index class {name!r}.")

    def hashkey(self):
        """Get a string hash key for this index. This is cached after the
        first call.
        """
        if getattr(self, "_hashkey", None) is None:
            self._hashkey = hasher(
                (
                    self._kind.value,
                    sympy.srepr(self._value),
                    sympy.srepr(self._dim),
                    None if self._polarity is None else self._polarity.value,
                )
            )
        return self._hashkey

    def __getstate__(self):
        return (self._value, self._dim, self._polarity)

    def __setstate__(self, state):
        value, dim, polarity = state
        self._value = value
        self._dim = dim
        self._polarity = polarity
        self._kind = (
            IndexKind.PLAIN if polarity is None else IndexKind.VARIANT
        )
        self._hashkey = None

    def __eq__(self, other):
        if not isinstance(other, Index):
            return NotImplemented
        return self.compare(other) == 0

    def __ne__(self, other):
        if not isinstance(other, Index):
            return NotImplemented
        return self.compare(other) != 0

    def __lt__(self, other):
        if not isinstance(other, Index):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other):
        if not isinstance(other, Index):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other):
        if not isinstance(other, Index):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other):
        if not isinstance(other, Index):
            return NotImplemented
        return self.compare(other) >= 0

    def __hash__(self):
        return hash((self._kind, self._value, self._dim, self._polarity))

    def __str__(self):
        marker = "~" if self._polarity is Polarity.CONTRAVARIANT else "."
        if is_numeric(self._value) or is_symbol(self._value):
            return f"{marker}{self._value}"
        return f"{marker}({self._value})"

    def __repr__(self):
        if self._kind is IndexKind.PLAIN:
            return f"idx({self._value!r}, {self._dim!r})"
        return (
            f"varidx({self._value!r}, {self._dim!r}, "
            f"covariant={self.covariant})"
        )


def idx(value, dim):
    """Create a plain index with ``value`` ranging over dimension ``dim``."""
    return Index(value, dim)


def varidx(value, dim, covariant=False):
    """Create a variant index with ``value`` ranging over dimension ``dim``,
    contravariant (upper) by default or covariant (lower) if ``covariant``.
    """
    polarity = Polarity.COVARIANT if covariant else Polarity.CONTRAVARIANT
    return Index(value, dim, polarity)


def is_dummy_pair(a, b):
    """Whether indices ``a`` and ``b`` form a contracted (dummy) pair.

    Both must be indices of exactly the same kind, with the same atomic
    symbol as value and the same dimension. Variant indices must furthermore
    have opposite polarities. Non-index arguments never form a pair.

    Parameters
    ----------
    a, b : Index
        The indices to test.

    Returns
    -------
    bool
    """
    if not isinstance(a, Index) or not isinstance(b, Index):
        return False

    # the indices must be of exactly the same kind
    if a.kind is not b.kind:
        return False

    if a.kind is IndexKind.PLAIN:
        return _is_plain_dummy_pair(a, b)
    elif a.kind is IndexKind.VARIANT:
        if a.polarity is b.polarity:
            return False
        return _is_plain_dummy_pair(a, b)
    raise AssertionError(f"Unhandled index kind {a.kind}.")


def _is_plain_dummy_pair(a, b):
    # only pure symbols form dummy pairs, "2n+1" doesn't
    if not a.is_symbolic():
        return False
    return a.value == b.value and a.dim == b.dim
