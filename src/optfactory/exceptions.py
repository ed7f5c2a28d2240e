"""Exception hierarchy for optfactory.

All library exceptions inherit from :class:`FactoryError`, making it easy to
catch any factory error with a single ``except FactoryError`` clause.
Validation failures raised while resolving a configuration share the
:class:`OptionValidationError` base and always report every offending option
of their category at once.
"""

from typing import Any, Iterable, List, Sequence, Tuple


def _fmt_keys(keys: Iterable[str]) -> str:
    return ", ".join(f'"{k}"' for k in keys)


class FactoryError(Exception):
    """Base exception for all optfactory errors."""

    pass


class InvalidTargetError(FactoryError):
    """Raised when the target type cannot be loaded or reflected.

    Attributes:
        target: The target as given (a class or a dotted import path).
        cause: The underlying exception, if any.
    """

    def __init__(self, target: Any, cause: Exception | None = None):
        name = getattr(target, "__qualname__", str(target))
        msg = f"Could not create reflection for class {name}."
        if cause is not None:
            msg += f" cause: {cause.__class__.__name__}: {cause}"
        super().__init__(msg)
        self.target = target
        self.cause = cause


class UnknownOptionError(FactoryError):
    """Raised when a schema mutation references an option that was never defined.

    Attributes:
        option: The undefined option name.
    """

    def __init__(self, option: str):
        super().__init__(f'The option "{option}" is not defined.')
        self.option = option


class OptionValidationError(FactoryError):
    """Base exception for configuration validation failures.

    Attributes:
        options: The offending option names, sorted.
    """

    def __init__(self, msg: str, options: Sequence[str]):
        super().__init__(msg)
        self.options: List[str] = list(options)


class UnrecognizedOptionError(OptionValidationError):
    """Raised when the supplied configuration contains unknown keys.

    Attributes:
        options: The unrecognized keys.
        known: The keys the schema recognizes.
    """

    def __init__(self, options: Sequence[str], known: Sequence[str]):
        noun = "option" if len(options) == 1 else "options"
        verb = "does" if len(options) == 1 else "do"
        super().__init__(
            f"The {noun} {_fmt_keys(options)} {verb} not exist. Defined options are: {_fmt_keys(known)}.",
            options,
        )
        self.known: List[str] = list(known)


class MissingRequiredOptionError(OptionValidationError):
    """Raised when required options are neither supplied nor defaulted."""

    def __init__(self, options: Sequence[str]):
        noun = "option" if len(options) == 1 else "options"
        verb = "is" if len(options) == 1 else "are"
        super().__init__(f"The required {noun} {_fmt_keys(options)} {verb} missing.", options)


class TypeMismatchError(OptionValidationError):
    """Raised when resolved values do not satisfy their allowed types.

    Attributes:
        mismatches: One ``(option, expected, actual)`` tuple per offending
            option, where ``expected`` describes the constraint and ``actual``
            is the name of the value's runtime type.
    """

    def __init__(self, mismatches: Sequence[Tuple[str, str, str]]):
        lines = [
            f'- The option "{name}" is expected to be of type "{expected}", but is of type "{actual}".'
            for name, expected, actual in mismatches
        ]
        super().__init__("Invalid option types:\n" + "\n".join(lines), [m[0] for m in mismatches])
        self.mismatches: List[Tuple[str, str, str]] = list(mismatches)


class ConstructionError(FactoryError):
    """Raised when the target constructor fails after arguments were bound.

    Attributes:
        target: The target class.
        cause: The original exception raised by the constructor.
    """

    def __init__(self, target: type, cause: Exception):
        name = getattr(target, "__qualname__", str(target))
        super().__init__(f"Failed to construct {name}; cause: {cause.__class__.__name__}: {cause}")
        self.target = target
        self.cause = cause


class ConfigurationError(FactoryError):
    """Raised when a configuration source is of an unsupported type."""

    def __init__(self, msg: str):
        super().__init__(msg)
