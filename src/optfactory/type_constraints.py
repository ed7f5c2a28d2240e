"""Runtime checks of option values against declared type constraints.

Constraints are ordinary typing annotations, as found on constructor
parameters. Anything that cannot be checked at runtime (type variables,
unresolved forward references, protocols that are not runtime-checkable) is
treated as satisfied rather than rejected.
"""

import collections.abc
import types
from typing import Annotated, Any, Literal, TypeVar, Union, get_args, get_origin

_NONE_TYPE = type(None)

_UNION_ORIGINS: tuple = (Union, types.UnionType)


def _is_unchecked(constraint: Any) -> bool:
    if constraint is Any or constraint is object:
        return True
    if isinstance(constraint, (str, TypeVar)):
        return True
    if getattr(constraint, "_is_protocol", False) and not getattr(constraint, "_is_runtime_protocol", False):
        return True
    return False


def _matches_class(value: Any, cls: type) -> bool:
    if cls is _NONE_TYPE:
        return value is None
    if isinstance(value, bool) and cls in (int, float):
        return False
    if cls is float:
        return isinstance(value, (int, float))
    if cls is complex:
        return isinstance(value, (int, float, complex))
    return isinstance(value, cls)


def matches(value: Any, constraint: Any) -> bool:
    """Return ``True`` if *value* satisfies the *constraint* annotation."""
    if constraint is None:
        return value is None
    if _is_unchecked(constraint):
        return True

    origin = get_origin(constraint)

    if origin is Annotated:
        return matches(value, get_args(constraint)[0])
    if origin in _UNION_ORIGINS:
        return any(matches(value, arg) for arg in get_args(constraint))
    if origin is Literal:
        return any(value == arg and type(value) is type(arg) for arg in get_args(constraint))
    if origin is type:
        return isinstance(value, type)
    if origin is collections.abc.Callable:
        return callable(value)
    if origin is not None:
        if isinstance(origin, type):
            # subscripted non-runtime protocols reach here through their origin
            return _is_unchecked(origin) or _matches_class(value, origin)
        return True
    if isinstance(constraint, type):
        return _matches_class(value, constraint)
    return True


def describe(constraint: Any) -> str:
    """Human-readable name of a constraint, e.g. ``int`` or ``str | None``."""
    if constraint is None or constraint is _NONE_TYPE:
        return "None"
    origin = get_origin(constraint)
    if origin in _UNION_ORIGINS:
        return " | ".join(describe(a) for a in get_args(constraint))
    if origin is Annotated:
        return describe(get_args(constraint)[0])
    if origin is None and isinstance(constraint, type):
        return constraint.__qualname__
    return str(constraint).replace("typing.", "")


def type_name(value: Any) -> str:
    if value is None:
        return "None"
    return type(value).__qualname__
