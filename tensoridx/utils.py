import hashlib
import os
import pickle

import sympy

# a simple flag for enabling rigorous checks in many places
DEBUG = bool(os.environ.get("TENSORIDX_DEBUG", "0").upper() in ("1", "TRUE"))


def set_debug(debug):
    global DEBUG
    DEBUG = debug


def hasher(k):
    return hashlib.sha1(pickle.dumps(k)).hexdigest()


def as_expr(x):
    """Convert ``x`` to a sympy expression, leaving existing expressions
    untouched so that shared substructure is not copied.
    """
    if isinstance(x, sympy.Basic):
        return x
    return sympy.sympify(x)


def is_symbol(expr):
    """Whether ``expr`` is an atomic symbolic name, as opposed to a number or
    compound expression such as ``2*n + 1``.
    """
    return isinstance(expr, sympy.Symbol)


def is_numeric(expr):
    """Whether ``expr`` is a concrete numeric literal."""
    return bool(getattr(expr, "is_Number", False))


def is_positive_integer(expr):
    return bool(expr.is_Integer and expr.is_positive)


def compare_exprs(a, b):
    """Three way comparison of two expressions in sympy's canonical order,
    returning -1, 0 or 1.
    """
    if a is b:
        return 0
    return a.compare(b)
