# optfactory/__init__.py
try:
    from ._version import __version__
except Exception:
    __version__ = "0.0.0"

from .analysis import ParameterDescriptor, camel_to_snake, inspect_target, load_target
from .builder import build_instance
from .config import EnvSource, coerce, collect_options
from .constants import MISSING
from .exceptions import (
    ConfigurationError,
    ConstructionError,
    FactoryError,
    InvalidTargetError,
    MissingRequiredOptionError,
    OptionValidationError,
    TypeMismatchError,
    UnknownOptionError,
    UnrecognizedOptionError,
)
from .factory import GenericFactory
from .schema import OptionSchema

__all__ = [
    "__version__",
    "GenericFactory",
    "OptionSchema",
    "ParameterDescriptor",
    "MISSING",
    "camel_to_snake",
    "inspect_target",
    "load_target",
    "build_instance",
    "collect_options",
    "EnvSource",
    "coerce",
    "FactoryError",
    "InvalidTargetError",
    "UnknownOptionError",
    "OptionValidationError",
    "UnrecognizedOptionError",
    "MissingRequiredOptionError",
    "TypeMismatchError",
    "ConstructionError",
    "ConfigurationError",
]
