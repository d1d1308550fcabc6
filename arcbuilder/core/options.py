# -----------------------------------------------------------------------------
# THE OPTIONS VALIDATOR
# -----------------------------------------------------------------------------
# Responsibility: Check user options before a project is created and turn
# them into a BuildConfiguration.
#
# Validation never raises. Problems are collected in two lists:
# - validation_errors: the options cannot be used (is_valid is False)
# - validation_warnings: an option was dropped, the build can still run
#
# The caller's mapping is never modified; dropped options are removed from
# the validator's own copy only.
# -----------------------------------------------------------------------------

import os
from collections.abc import Mapping, Sized
from typing import Any

from pydantic import ValidationError

from arcbuilder.core.logger import missing_logger_methods
from arcbuilder.domain.models import BuildConfiguration

# Recognized options and the kind of value each one takes.
OPTION_KINDS: dict[str, str] = {
    "component_refs": "Array",
    "extra_refs": "Array",
    "theme_file": "String",
    "bundle": "Boolean",
    "generate_wrapper": "Boolean",
    "wrapper_components": "Array",
    "bundle_wrapper": "Boolean",
    "verbose": "Boolean",
    "logger": "Object",
    "destination": "String",
}


def kind_of(value: Any) -> str:
    """Name the kind of an option value the way error messages report it."""
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, (str, os.PathLike)):
        return "String"
    if isinstance(value, (list, tuple)):
        return "Array"
    if isinstance(value, (int, float)):
        return "Number"
    return "Object"


def _has_entries(value: Any) -> bool:
    return isinstance(value, Sized) and len(value) > 0


class ProjectOptions:
    """
    Validated project options.

    Usage:
        options = ProjectOptions({"component_refs": ["paper-fab"]})
        if not options.is_valid:
            print(options.validation_errors)
        config = options.config
    """

    def __init__(self, user_options: Mapping[str, Any] | None = None) -> None:
        self.validation_errors: list[str] = []
        self.validation_warnings: list[str] = []
        self.config: BuildConfiguration | None = None

        # None means "not given" for every option.
        self._options = {k: v for k, v in dict(user_options or {}).items() if v is not None}
        self.validate_options()
        if self.is_valid:
            self.config = self._create_configuration()

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors

    @property
    def options(self) -> dict[str, Any]:
        """The options that survived validation (dropped keys removed)."""
        return dict(self._options)

    def validate_options(self) -> None:
        self._validate_options_list()
        self._validate_required()
        self._validate_wrapper_options()
        self._validate_logger()

    def _validate_options_list(self) -> None:
        """Reject unknown options and values of the wrong kind."""
        unknown = []
        mismatched = []
        for name, value in self._options.items():
            expected = OPTION_KINDS.get(name)
            if expected is None:
                unknown.append(name)
                continue
            given = kind_of(value)
            if given != expected:
                mismatched.append((name, expected, given))

        if unknown:
            label = "Unknown options" if len(unknown) > 1 else "Unknown option"
            self.validation_errors.append(f"{label}: {', '.join(unknown)}")

        for name, expected, given in mismatched:
            self.validation_errors.append(
                f"Type mismatch. Property {name} expected to be a {expected} "
                f"but {given} was given"
            )

    def _validate_required(self) -> None:
        has_components = _has_entries(self._options.get("component_refs"))
        has_extra = _has_entries(self._options.get("extra_refs"))
        if not has_components and not has_extra:
            self.validation_errors.append(
                "Either component_refs or extra_refs must be specified."
            )

    def _validate_wrapper_options(self) -> None:
        if _has_entries(self._options.get("wrapper_components")) and not self._options.get(
            "generate_wrapper"
        ):
            self.validation_warnings.append(
                '"wrapper_components" option given but "generate_wrapper" is not set. '
                "This option will be ignored."
            )
            del self._options["wrapper_components"]

    def _validate_logger(self) -> None:
        logger = self._options.get("logger")
        if logger is None:
            return
        missing = missing_logger_methods(logger)
        if missing:
            self.validation_warnings.append(
                f"Used logger is missing required functions: {', '.join(missing)}"
            )
            del self._options["logger"]

    def _create_configuration(self) -> BuildConfiguration | None:
        values = dict(self._options)
        for name in ("component_refs", "extra_refs", "wrapper_components"):
            if name in values:
                values[name] = list(values[name])
        for name in ("theme_file", "destination"):
            if name in values:
                values[name] = os.fspath(values[name])
        try:
            return BuildConfiguration(**values)
        except ValidationError as e:
            for err in e.errors():
                location = ".".join(str(part) for part in err["loc"]) or "options"
                self.validation_errors.append(f"Invalid value for {location}: {err['msg']}")
            return None


def validate_options(user_options: Mapping[str, Any] | None) -> ProjectOptions:
    """Validate a raw options mapping. Never raises; check `is_valid`."""
    return ProjectOptions(user_options)
