"""Configuration sources for factories.

A source answers one question: which raw value does it hold for a given
option name. Plain mappings are looked up by option name and
:class:`EnvSource` reads one environment variable per option.
:func:`collect_options` walks the options of a factory's schema and asks the
sources in order.
"""

import os
import types
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Union, get_args, get_origin

from .constants import LOGGER
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .factory import GenericFactory


class EnvSource:
    """Flat source reading one environment variable per option.

    The variable name is the prefix followed by the upper-cased option name,
    so with ``prefix="EXPORTER_"`` the option ``max_retries`` is read from
    ``EXPORTER_MAX_RETRIES``.

    Args:
        prefix: Prefix prepended to every variable name.
        environ: Mapping to read from instead of ``os.environ``.
    """

    def __init__(self, prefix: str = "", environ: Optional[Mapping[str, str]] = None) -> None:
        self.prefix = prefix
        self._environ = environ

    def get(self, option: str) -> Optional[str]:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(self.prefix + option.upper())


_TRUE = ("1", "true", "yes", "on", "y", "t")
_FALSE = ("0", "false", "no", "off", "n", "f")


def _scalar_target(constraint: Any) -> Optional[type]:
    if constraint in (int, float, bool):
        return constraint
    if get_origin(constraint) in (Union, types.UnionType):
        args = [a for a in get_args(constraint) if a is not type(None)]
        if len(args) == 1 and args[0] in (int, float, bool):
            return args[0]
    return None


def coerce(raw: str, constraint: Any) -> Any:
    """Convert a string read from a source to the scalar type *constraint* asks for.

    Strings that do not parse are returned unchanged and left for validation
    to reject.
    """
    t = _scalar_target(constraint)
    s = raw.strip()
    try:
        if t is int:
            return int(s)
        if t is float:
            return float(s)
    except ValueError:
        return raw
    if t is bool:
        if s.lower() in _TRUE:
            return True
        if s.lower() in _FALSE:
            return False
    return raw


def _check_sources(sources: Iterable[Any]) -> List[Any]:
    checked = []
    for src in sources:
        if not isinstance(src, (EnvSource, Mapping)):
            raise ConfigurationError(f"Unknown configuration source type: {type(src)}")
        checked.append(src)
    return checked


def collect_options(factory: "GenericFactory", sources: Iterable[Any]) -> Dict[str, Any]:
    """Assemble the configuration for *factory* from configuration sources.

    Every option the factory's schema knows is looked up in *sources* in
    order; the first source holding a value other than ``None`` wins. String
    values are coerced to ``int``, ``float`` or ``bool`` where the option's
    allowed type asks for one. Keys a mapping holds for options the schema
    does not know are ignored.

    Args:
        factory: The factory whose options are collected.
        sources: Mappings keyed by option name and :class:`EnvSource`
            instances.

    Returns:
        The configuration mapping, ready for :meth:`GenericFactory.build`.

    Raises:
        ConfigurationError: If a source is neither a mapping nor an
            :class:`EnvSource`.
    """
    checked = _check_sources(sources)
    schema = factory.schema
    allowed = schema.allowed_types
    config: Dict[str, Any] = {}

    for option in schema.known_options:
        for src in checked:
            value = src.get(option)
            if value is None:
                continue
            if isinstance(value, str) and option in allowed:
                value = coerce(value, allowed[option])
            config[option] = value
            break

    LOGGER.debug("Collected %d option(s) for %s", len(config), factory.class_name)
    return config
