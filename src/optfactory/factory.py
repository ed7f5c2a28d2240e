"""Options-driven factory for a single target type.

This module defines :class:`GenericFactory`, which reflects the constructor of
its target once, turns every constructor parameter into an option of an
:class:`~optfactory.schema.OptionSchema`, and then builds instances from
plain configuration mappings.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple, TypeVar

from .analysis import ParameterDescriptor, TargetT, inspect_target, load_target
from .builder import build_instance
from .config import collect_options
from .constants import LOGGER
from .schema import OptionSchema
from .type_constraints import matches

FactoryT = TypeVar("FactoryT", bound="GenericFactory")


class GenericFactory:
    """Build instances of one target type from named options.

    Each constructor parameter becomes an option named after the parameter in
    snake case (``maxRetries`` becomes ``max_retries``). Parameters without a
    default are required, defaults are taken over, and parameter annotations
    become allowed types.

    Args:
        target: The class to build, or its import path
            (``"package.module.Class"`` or ``"package.module:Class"``).
        schema: An existing schema to populate instead of a fresh one.

    Raises:
        InvalidTargetError: If the target cannot be loaded or reflected.

    Example:
        >>> class Exporter:
        ...     def __init__(self, endpointUrl: str, timeout: int = 10):
        ...         self.url, self.timeout = endpointUrl, timeout
        >>> factory = GenericFactory(Exporter)
        >>> factory.options
        ['endpoint_url', 'timeout']
        >>> factory.build({"endpoint_url": "http://collector"}).timeout
        10
    """

    def __init__(self, target: TargetT, schema: Optional[OptionSchema] = None) -> None:
        self._target: type = load_target(target)
        self._schema = schema if schema is not None else OptionSchema()
        self._options: Dict[int, str] = {}
        self._keywords: Dict[str, str] = {}
        self._required_options: List[str] = []
        self._defaults: Dict[str, Any] = {}
        self._parameters: Tuple[ParameterDescriptor, ...] = inspect_target(self._target)
        self._inspect()
        LOGGER.debug(
            "Inspected %s: %d option(s), %d required",
            self.class_name, len(self._parameters), len(self._required_options),
        )

    @classmethod
    def create(cls: type[FactoryT], target: TargetT, schema: Optional[OptionSchema] = None) -> FactoryT:
        return cls(target, schema)

    def _inspect(self) -> None:
        for parameter in self._parameters:
            option = parameter.name
            if parameter.keyword_only:
                self._keywords[option] = parameter.parameter_name
                self._schema.define(option)
            else:
                self._add_option(parameter.position, option)
            if parameter.required:
                self._required_options.append(option)
                self._schema.mark_required(option)
            if parameter.declared_type is not None:
                self._schema.set_allowed_type(option, self._allowed_type(parameter))
            if parameter.has_default:
                self.set_default(option, parameter.default)
            self.parameter_callback(parameter, option)

    def _add_option(self, position: int, option: str) -> None:
        # positions stay with the factory; a shared schema only learns the name
        if option not in self._options.values():
            self._options[position] = option
        self._schema.define(option)

    @staticmethod
    def _allowed_type(parameter: ParameterDescriptor) -> Any:
        declared = parameter.declared_type
        if parameter.default is None and not matches(None, declared):
            return Optional[declared]
        return declared

    def parameter_callback(self, parameter: ParameterDescriptor, option: str) -> None:
        """Hook called once per constructor parameter after its option is set up.

        Subclasses override it to add constraints or defaults of their own.
        """
        pass

    def set_default(self: FactoryT, option: str, value: Any) -> FactoryT:
        """Record a default for *option*.

        Names the constructor does not know become optional options that are
        validated but never passed to the constructor.
        """
        self._schema.set_default(option, value)
        self._defaults[option] = value
        return self

    def set_defaults(self: FactoryT, values: Mapping[str, Any]) -> FactoryT:
        for option, value in values.items():
            self.set_default(option, value)
        return self

    def build(self, config: Optional[Mapping[str, Any]] = None) -> Any:
        """Validate *config* and construct a new instance of the target.

        Args:
            config: Option values keyed by option name.

        Returns:
            A new instance of :attr:`target`.

        Raises:
            UnrecognizedOptionError: If *config* contains unknown options.
            MissingRequiredOptionError: If required options have no value.
            TypeMismatchError: If values do not match the allowed types.
            ConstructionError: If the constructor itself fails.
        """
        resolved = self._schema.resolve(config)
        instance = build_instance(self._target, resolved, self._options, self._keywords)
        LOGGER.debug("Built %s", self.class_name)
        return instance

    def build_from(self, *sources: Any) -> Any:
        """Collect the configuration from configuration sources and build.

        See :func:`optfactory.config.collect_options`.
        """
        return self.build(collect_options(self, sources))

    @property
    def options(self) -> List[str]:
        return [self._options[p] for p in sorted(self._options)]

    @property
    def keyword_options(self) -> List[str]:
        return list(self._keywords)

    @property
    def required_options(self) -> List[str]:
        return list(self._required_options)

    @property
    def defaults(self) -> Dict[str, Any]:
        return dict(self._defaults)

    @property
    def parameters(self) -> Tuple[ParameterDescriptor, ...]:
        return self._parameters

    @property
    def schema(self) -> OptionSchema:
        return self._schema

    @property
    def target(self) -> type:
        return self._target

    @property
    def class_name(self) -> str:
        return f"{self._target.__module__}.{self._target.__qualname__}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.class_name})"
