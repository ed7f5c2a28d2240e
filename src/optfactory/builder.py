from typing import Any, Dict, List, Mapping, Tuple

from .exceptions import ConstructionError


def _is_set(resolved: Mapping[str, Any], name: str) -> bool:
    return resolved.get(name) is not None


def collect_arguments(
    resolved: Mapping[str, Any],
    positions: Mapping[int, str],
    keywords: Mapping[str, str] | None = None,
) -> Tuple[List[Any], Dict[str, Any]]:
    args: List[Any] = []
    for position in sorted(positions):
        name = positions[position]
        # first unset position ends positional binding, later values are dropped
        if not _is_set(resolved, name):
            break
        args.append(resolved[name])

    kwargs: Dict[str, Any] = {}
    for option, parameter_name in (keywords or {}).items():
        if _is_set(resolved, option):
            kwargs[parameter_name] = resolved[option]
    return args, kwargs


def build_instance(
    target: type,
    resolved: Mapping[str, Any],
    positions: Mapping[int, str],
    keywords: Mapping[str, str] | None = None,
) -> Any:
    """Instantiate *target* from a resolved configuration.

    Positional options are bound in ascending position order until the first
    one that is unset, i.e. missing from *resolved* or resolved to ``None``;
    the constructor's own defaults then apply to that parameter and to every
    later one, even if *resolved* has values for them. Keyword options
    (option name to parameter name) are passed by keyword when set.

    Raises:
        ConstructionError: If the constructor raises.
    """
    args, kwargs = collect_arguments(resolved, positions, keywords)
    try:
        return target(*args, **kwargs)
    except Exception as e:
        raise ConstructionError(target, e) from e
