"""Option schema and configuration resolution.

:class:`OptionSchema` records which options are recognized, which of them are
required, their defaults and their allowed types. :meth:`OptionSchema.resolve`
validates a caller-supplied configuration against that record and fills in
defaults. Constructor positions are not part of the schema; they belong to
the factory that binds the options, so one schema can serve several factories.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import (
    MissingRequiredOptionError,
    TypeMismatchError,
    UnknownOptionError,
    UnrecognizedOptionError,
)
from .type_constraints import describe, matches, type_name


class OptionSchema:
    """Mutable validation schema.

    Options are kept in definition order. Options created through
    :meth:`set_default` alone take part in validation like any other.

    The schema is not synchronised. Finish configuring it before sharing it
    between threads; :meth:`resolve` itself does not mutate anything.
    """

    def __init__(self) -> None:
        self._known: List[str] = []
        self._required: List[str] = []
        self._defaults: Dict[str, Any] = {}
        self._allowed_types: Dict[str, Any] = {}

    def define(self, name: str) -> "OptionSchema":
        """Register a recognized option. Defining a name again is a no-op."""
        if name not in self._known:
            self._known.append(name)
        return self

    def mark_required(self, name: str) -> "OptionSchema":
        if name not in self._known:
            raise UnknownOptionError(name)
        if name not in self._required:
            self._required.append(name)
        return self

    def set_default(self, name: str, value: Any) -> "OptionSchema":
        self.define(name)
        self._defaults[name] = value
        return self

    def set_defaults(self, values: Mapping[str, Any]) -> "OptionSchema":
        for name, value in values.items():
            self.set_default(name, value)
        return self

    def set_allowed_type(self, name: str, constraint: Any) -> "OptionSchema":
        if name not in self._known:
            raise UnknownOptionError(name)
        self._allowed_types[name] = constraint
        return self

    def is_defined(self, name: str) -> bool:
        return name in self._known

    @property
    def known_options(self) -> List[str]:
        return list(self._known)

    @property
    def required_options(self) -> List[str]:
        return list(self._required)

    @property
    def defaults(self) -> Dict[str, Any]:
        return dict(self._defaults)

    @property
    def allowed_types(self) -> Dict[str, Any]:
        return dict(self._allowed_types)

    def resolve(self, supplied: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Validate *supplied* and merge it with the defaults.

        Checks run in a fixed order: unknown keys, then missing required
        options, then types. Each check reports every offender it finds.

        Args:
            supplied: Caller configuration keyed by option name.

        Returns:
            A new dict holding every option that has a value, either supplied
            or defaulted. Optional options with neither are absent.

        Raises:
            UnrecognizedOptionError: If *supplied* has keys the schema does not know.
            MissingRequiredOptionError: If required options have no value.
            TypeMismatchError: If values do not satisfy their allowed types.
        """
        supplied = dict(supplied or {})

        unknown = [k for k in supplied if k not in self._known]
        if unknown:
            raise UnrecognizedOptionError(sorted(unknown, key=str), self.known_options)

        missing = [n for n in self._required if n not in supplied and n not in self._defaults]
        if missing:
            raise MissingRequiredOptionError(missing)

        resolved: Dict[str, Any] = {}
        for name in self._known:
            if name in supplied:
                resolved[name] = supplied[name]
            elif name in self._defaults:
                resolved[name] = self._defaults[name]

        mismatches: List[Tuple[str, str, str]] = []
        for name, constraint in self._allowed_types.items():
            if name in resolved and not matches(resolved[name], constraint):
                mismatches.append((name, describe(constraint), type_name(resolved[name])))
        if mismatches:
            raise TypeMismatchError(mismatches)

        return resolved
