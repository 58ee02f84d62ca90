"""Option registry for the PD4ML wrapper.

Every option the wrapper understands is described once, with its default
value, a validity predicate and the rule used to serialize it onto the
command line. Unknown keys are rejected as soon as they are set.
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from .exceptions import InvalidOptionError

logger = logging.getLogger(__name__)

PAGE_DIMENSIONS = (
    "A1", "A2", "A3", "A4", "A5", "A6", "A7", "A8", "A9", "A10",
    "HALFLETTER", "ISOB0", "ISOB1", "ISOB2", "ISOB3", "ISOB4", "ISOB5",
    "LEDGER", "LEGAL", "LETTER", "NOTE", "TABLOID",
)
PAGE_ORIENTATIONS = ("PORTRAIT", "LANDSCAPE")
BOOKMARK_ELEMENTS = ("HEADINGS", "ANCHORS")
INSET_UNITS = ("mm", "pt")

# Values that switch a boolean option off, next to plain False
NEGATION_SENTINELS = ("no", "none")

PERMISSION_KEYS = ("allow_annotate", "allow_copy", "allow_modify", "allow_print")
INSET_KEYS = ("inset_top", "inset_left", "inset_bottom", "inset_right", "inset_unit")

OptionKind = Literal["flag", "boolean", "mapping", "permission", "inset"]


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_negatable(value: Any) -> bool:
    return is_boolean(value) or is_negation(value)


def is_negation(value: Any) -> bool:
    """True for False and the ``no``/``none`` sentinels."""
    if value is False:
        return True
    return isinstance(value, str) and value.lower() in NEGATION_SENTINELS


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def one_of(choices: tuple[str, ...]) -> Callable[[Any], bool]:
    def validator(value: Any) -> bool:
        return value in choices

    return validator


# Separators of the serialized ``name=value;name=value`` template token
TEMPLATE_SEPARATORS = (";", "=")


def is_template_text(text: str) -> bool:
    return not any(separator in text for separator in TEMPLATE_SEPARATORS)


def is_template_mapping(value: Any) -> bool:
    """Header/footer templates: string keys mapped to scalar values.

    Neither names nor values may contain ``;`` or ``=``, which would split
    into extra pairs once serialized.
    """
    if not isinstance(value, Mapping):
        return False
    return all(
        isinstance(key, str)
        and is_template_text(key)
        and (
            item is None
            or (isinstance(item, (str, int, float)) and is_template_text(str(item)))
        )
        for key, item in value.items()
    )


HEADER_DEFAULTS = {
    "area_height": -1,
    "color": "#000000",
    "font": "Helvetica",
    "font_size": "12",
    "html_template": "${title}",
    "initial_page_number": 1,
}

FOOTER_DEFAULTS = {
    "area_height": -1,
    "color": "#000000",
    "font": "Helvetica",
    "font_size": "12",
    "html_template": "${page} of ${pages}",
    "initial_page_number": 1,
}


@dataclass(frozen=True)
class OptionDescriptor:
    """Description of a single recognized option.

    Attributes:
        name: Option key
        default: Value used when the option is not set (None means omitted)
        validator: Predicate a value must satisfy to be accepted
        kind: Serialization rule used by the command compiler
    """

    name: str
    default: Any
    validator: Callable[[Any], bool]
    kind: OptionKind = "flag"

    @property
    def flag(self) -> str:
        return "--" + self.name.replace("_", "-")

    def validate(self, value: Any) -> None:
        if not self.validator(value):
            raise InvalidOptionError(
                f"Invalid value for option {self.name}: {value!r}", option=self.name
            )


OPTION_REGISTRY: dict[str, OptionDescriptor] = {
    descriptor.name: descriptor
    for descriptor in (
        OptionDescriptor("html_width", 800, is_integer),
        OptionDescriptor("page_dimension", "A4", one_of(PAGE_DIMENSIONS)),
        OptionDescriptor("page_orientation", "PORTRAIT", one_of(PAGE_ORIENTATIONS)),
        OptionDescriptor("inset_unit", "mm", one_of(INSET_UNITS), kind="inset"),
        OptionDescriptor("inset_top", 10, is_integer, kind="inset"),
        OptionDescriptor("inset_left", 20, is_integer, kind="inset"),
        OptionDescriptor("inset_bottom", 10, is_integer, kind="inset"),
        OptionDescriptor("inset_right", 10, is_integer, kind="inset"),
        OptionDescriptor("bookmark_elements", "HEADINGS", one_of(BOOKMARK_ELEMENTS)),
        OptionDescriptor("allow_annotate", True, is_boolean, kind="permission"),
        OptionDescriptor("allow_copy", True, is_boolean, kind="permission"),
        OptionDescriptor("allow_modify", True, is_boolean, kind="permission"),
        OptionDescriptor("allow_print", True, is_boolean, kind="permission"),
        OptionDescriptor("debug", False, is_boolean, kind="boolean"),
        OptionDescriptor("encryption", None, is_negatable, kind="boolean"),
        OptionDescriptor("password", None, is_non_empty_string),
        OptionDescriptor("header", HEADER_DEFAULTS, is_template_mapping, kind="mapping"),
        OptionDescriptor("footer", FOOTER_DEFAULTS, is_template_mapping, kind="mapping"),
    )
}


def get_descriptor(key: str) -> OptionDescriptor:
    """Look up an option descriptor.

    Raises:
        InvalidOptionError: If the key is not a recognized option
    """
    try:
        return OPTION_REGISTRY[key]
    except (KeyError, TypeError):
        raise InvalidOptionError(f"Invalid option {key}", option=str(key)) from None


class OptionSet:
    """Validated option values layered over the registry defaults.

    Only overrides are stored; reading a key that was never set yields its
    default. Options whose effective value is None are treated as absent.
    """

    def __init__(self, options: Mapping[str, Any] | None = None):
        self._values: dict[str, Any] = {}
        for key, value in (options or {}).items():
            self.set_option(key, value)

    def set_option(self, key: str, value: Any) -> None:
        """Set an option, validating key and value immediately.

        Passing None removes the override and reverts to the default.

        Raises:
            InvalidOptionError: For an unknown key or a value its validator rejects
        """
        descriptor = get_descriptor(key)
        if value is None:
            self._values.pop(key, None)
            return
        descriptor.validate(value)
        if descriptor.kind == "mapping":
            value = dict(value)
        self._values[key] = value
        logger.debug(f"Option {key} set to {value!r}")

    def remove_option(self, key: str) -> None:
        self.set_option(key, None)

    def get(self, key: str) -> Any:
        descriptor = get_descriptor(key)
        value = self._values.get(key, descriptor.default)
        if isinstance(value, dict):
            return dict(value)
        return value

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return key in OPTION_REGISTRY and self.get(key) is not None

    def __iter__(self) -> Iterator[str]:
        return (key for key in OPTION_REGISTRY if key in self)

    def items(self) -> list[tuple[str, Any]]:
        return [(key, self.get(key)) for key in self]

    def overrides(self) -> dict[str, Any]:
        """Options explicitly set by the caller."""
        return dict(self._values)

    def copy(self) -> "OptionSet":
        return OptionSet(self._values)

    def __repr__(self) -> str:
        return f"OptionSet({self._values!r})"
