import importlib
import inspect
import re
import typing
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from .constants import MISSING
from .exceptions import InvalidTargetError

TargetT = Union[str, type]

_camel_pat = re.compile(r"[A-Z]([A-Z](?![a-z]))*")


def camel_to_snake(value: str) -> str:
    """Convert ``maxRetries`` to ``max_retries`` and ``HTTPClient`` to ``http_client``.

    Acronym runs stay together and a leading separator is stripped, so the
    result of a conversion converts to itself.
    """
    return _camel_pat.sub(lambda m: "_" + m.group(0), value).lower().lstrip("_")


@dataclass(frozen=True)
class ParameterDescriptor:
    """One reflected constructor parameter.

    Attributes:
        position: Zero-based index among the reflected parameters.
        name: Option key, the snake-case form of ``parameter_name``.
        parameter_name: The identifier as written in the constructor.
        declared_type: The resolved annotation, or ``None`` if absent or
            unresolvable.
        required: ``True`` if the parameter has no default.
        default: The default value, or :data:`MISSING`.
        keyword_only: ``True`` for parameters declared after ``*``.
    """
    position: int
    name: str
    parameter_name: str
    declared_type: Any = None
    required: bool = True
    default: Any = MISSING
    keyword_only: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


def load_target(target: TargetT) -> type:
    """Resolve *target* to a class.

    Args:
        target: A class, or an import path such as ``"pkg.mod.Class"`` or
            ``"pkg.mod:Outer.Inner"``.

    Raises:
        InvalidTargetError: If the module cannot be imported, the attribute
            does not exist, or it is not a class.
    """
    if isinstance(target, type):
        return target
    if not isinstance(target, str) or not target:
        raise InvalidTargetError(target, TypeError(f"expected a class or an import path, got {type(target).__name__}"))

    if ":" in target:
        module_name, _, attr_path = target.partition(":")
    else:
        module_name, _, attr_path = target.rpartition(".")
    if not module_name or not attr_path:
        raise InvalidTargetError(target, ValueError(f"Could not find given class {target}."))

    try:
        obj: Any = importlib.import_module(module_name)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
    except Exception as e:
        raise InvalidTargetError(target, e) from e

    if not isinstance(obj, type):
        raise InvalidTargetError(target, TypeError(f"{target} is not a class"))
    return obj


def _type_hints(target: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(target.__init__, include_extras=True)
    except Exception:
        return {}


def _declared_type(param: inspect.Parameter, hints: Dict[str, Any]) -> Optional[Any]:
    if param.name in hints:
        return hints[param.name]
    ann = param.annotation
    if ann is inspect.Parameter.empty or isinstance(ann, str):
        return None
    return ann


def inspect_target(target: TargetT) -> Tuple[ParameterDescriptor, ...]:
    """Reflect the constructor of *target* into ordered parameter descriptors.

    The signature of ``__init__`` is read, never the class call signature, so
    a ``__new__`` defined next to it does not hide the constructor
    parameters. ``self``, ``*args`` and ``**kwargs`` are skipped; positions
    count the remaining parameters from zero.

    Args:
        target: A class or an import path accepted by :func:`load_target`.

    Returns:
        One descriptor per parameter, in declaration order. A class that
        inherits ``object.__init__`` yields an empty tuple.

    Raises:
        InvalidTargetError: If the target cannot be loaded or its
            constructor cannot be reflected.
    """
    cls = load_target(target)
    init = cls.__init__
    if init is object.__init__:
        return ()

    try:
        sig = inspect.signature(init)
    except (ValueError, TypeError) as e:
        raise InvalidTargetError(cls, e) from e

    hints = _type_hints(cls)
    plan: List[ParameterDescriptor] = []

    # first parameter is the instance
    for param in list(sig.parameters.values())[1:]:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        has_default = param.default is not inspect.Parameter.empty
        plan.append(
            ParameterDescriptor(
                position=len(plan),
                name=camel_to_snake(param.name),
                parameter_name=param.name,
                declared_type=_declared_type(param, hints),
                required=not has_default,
                default=param.default if has_default else MISSING,
                keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
            )
        )

    return tuple(plan)
