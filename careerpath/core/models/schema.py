"""
Target schema descriptors.

A TargetSchema declares the object shape a caller expects back from the
model: which top-level fields exist, what kind each one is, which subfields
array entries must carry, and the neutral default used when a field is
missing or malformed. Schemas are immutable and built once per use case
(or per request when defaults depend on request data).
"""
import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple


class FieldKind(Enum):
    """Structural kind of a declared field."""
    SCALAR = "scalar"
    STRING_LIST = "string_list"
    OBJECT_LIST = "object_list"
    OBJECT = "object"


# Subfield kinds understood by the validator
SUBFIELD_KINDS = ("string", "number", "boolean", "list", "object", "any")


@dataclass(frozen=True)
class Subfield:
    """A required subfield of an array entry.

    An entry satisfies the subfield when any one of the alternative names
    holds a value of the declared kind.
    """
    names: Tuple[str, ...]
    kind: str = "string"

    @property
    def label(self) -> str:
        return "|".join(self.names)


def req(*names: str, kind: str = "string") -> Subfield:
    """Shorthand for declaring a required subfield.

    Usage:
        req("skill"), req("demandScore", kind="number"), req("title", "name")
    """
    if not names:
        raise ValueError("req() needs at least one field name")
    if kind not in SUBFIELD_KINDS:
        raise ValueError(f"Unknown subfield kind: {kind}")
    return Subfield(names=tuple(names), kind=kind)


@dataclass(frozen=True)
class FieldSpec:
    """Declared shape of a single field."""
    kind: FieldKind
    default: Any = None
    required_subfields: Tuple[Subfield, ...] = ()
    # OBJECT: fields of the nested object
    # OBJECT_LIST: fields validated on every surviving entry
    fields: Mapping[str, "FieldSpec"] = field(default_factory=dict)
    scalar_type: str = "any"    # string | number | boolean | any
    required: bool = False      # absence counts toward incompleteness
    post_process: Optional[Callable[[Any], Any]] = None

    def default_value(self) -> Any:
        """Fresh copy of this field's default."""
        if self.default is not None:
            return copy.deepcopy(self.default)
        if self.kind in (FieldKind.STRING_LIST, FieldKind.OBJECT_LIST):
            return []
        if self.kind == FieldKind.OBJECT:
            return {name: spec.default_value() for name, spec in self.fields.items()}
        return None


def scalar(
    default: Any = None,
    scalar_type: str = "any",
    required: bool = False,
    post_process: Optional[Callable[[Any], Any]] = None,
) -> FieldSpec:
    return FieldSpec(
        kind=FieldKind.SCALAR,
        default=default,
        scalar_type=scalar_type,
        required=required,
        post_process=post_process,
    )


def string_list(
    required: bool = False,
    post_process: Optional[Callable[[Any], Any]] = None,
) -> FieldSpec:
    return FieldSpec(
        kind=FieldKind.STRING_LIST,
        required=required,
        post_process=post_process,
    )


def object_list(
    *required_subfields: Subfield,
    fields: Optional[Mapping[str, FieldSpec]] = None,
    required: bool = False,
) -> FieldSpec:
    return FieldSpec(
        kind=FieldKind.OBJECT_LIST,
        required_subfields=tuple(required_subfields),
        fields=dict(fields or {}),
        required=required,
    )


def nested(
    fields: Optional[Mapping[str, FieldSpec]] = None,
    default: Optional[Dict[str, Any]] = None,
    required: bool = False,
) -> FieldSpec:
    return FieldSpec(
        kind=FieldKind.OBJECT,
        default=default,
        fields=dict(fields or {}),
        required=required,
    )


@dataclass(frozen=True)
class TargetSchema:
    """Expected object shape for one use case.

    Attributes:
        name: Use-case name, used in logs
        fields: Top-level field declarations, in render order
        rules: Content rules evaluated by the completeness checker.
               Each rule takes the validated object and returns the list
               of unmet requirements (empty when satisfied).
    """
    name: str
    fields: Mapping[str, FieldSpec]
    rules: Tuple[Callable[[Dict[str, Any]], List[str]], ...] = ()

    def defaults(self) -> Dict[str, Any]:
        """Object made only of defaults, the floor every recovery reaches."""
        return {name: spec.default_value() for name, spec in self.fields.items()}
