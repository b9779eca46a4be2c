"""
Runtime introspection of values for the record renderer.

Classifies values into render kinds, enumerates dataclass fields together with their
annotation strings, and resolves which field is the title and in which order the
remaining fields are displayed.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import dataclasses
import numbers
import warnings

from dataclasses import dataclass
from enum import Enum, StrEnum, unique
from types import MappingProxyType
from typing import Any, Literal, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import MalformedAnnotationError, UnsupportedKindError, WrongKindError
from .formatters import fmt_type, fmt_value
from .tags import KNOWN_KEYS, TAG_KEY, FieldTags, parse_raw_tags
from .utils import class_name, identity_hex

UnknownKeyPolicy = Literal["ignore", "warn"]


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Kind(StrEnum):
    """
    Runtime category of a value, selects the renderer:
        - "primitive": bool, numbers, str, enum members
        - "sequence": list, tuple and other non-text sequences
        - "record": dataclass instances
        - "reference": Ref wrappers and None (the absent reference)
    """
    PRIMITIVE = "primitive"
    SEQUENCE = "sequence"
    RECORD = "record"
    REFERENCE = "reference"


class Ref:
    """
    Explicit reference to a record.

    Python values are always shared by reference, so plain attributes give no way to tell
    "this record contains that one" from "this record points at that one". Wrap a record in
    Ref to mark it as pointed at: references are tracked per render call and a record
    reached twice through references is rendered once, later hits become '@ 0x...'
    placeholders. Ref(None) is an absent reference.

    Equality and hashing follow the identity of the target, never its content.

    Examples:
        >>> a = Person(name="John")
        >>> b = Person(name="Jane", friends=[Ref(a)])
        >>> a.friends.append(Ref(b))  # a cycle, still safe to render
    """
    __slots__ = ("_target",)

    def __init__(self, target: Any = None) -> None:
        self._target = target

    @property
    def target(self) -> Any:
        """Referenced record, None when absent."""
        return self._target

    @property
    def is_absent(self) -> bool:
        return self._target is None

    @property
    def identity(self) -> str:
        """Identity of the target as a hex address, '0x0' when absent."""
        return identity_hex(self._target)

    def __repr__(self) -> str:
        if self.is_absent:
            return "Ref(None)"
        return f"Ref(<{class_name(self._target)} at {self.identity}>)"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self._target is other._target

    def __hash__(self) -> int:
        return hash(id(self._target))


@dataclass(frozen=True)
class AnnotatedField:
    """
    A record field bound to its current value and parsed annotation.

    Attributes:
        name: Field name, unique within its record.
        value: Current field value.
        tags: Parsed annotation.
        position: Declaration index of the field, breaks display order ties.
    """
    name: str
    value: Any
    tags: FieldTags
    position: int


@dataclass(frozen=True)
class AnnotatedRecord:
    """
    All annotated fields of one record plus its title field, built fresh per render.

    Attributes:
        title_field: The field promoted to the header line, or None.
        fields: Read-only mapping of field name to AnnotatedField, in declaration order.
    """
    title_field: AnnotatedField | None
    fields: Mapping[str, AnnotatedField]

    @property
    def has_title_field(self) -> bool:
        return self.title_field is not None


class TypeIntrospector:
    """
    Kind classification and field access for the renderer.

    The renderer only talks to values through this class: kind_of() for dispatch,
    fields_of() for the field names and raw annotations of a record type, and
    get_field() to read a field of a record instance. Subclass it to render records
    other than dataclasses.

    Attributes:
        tag_key: Dataclass field metadata key holding the raw annotation string.
    """

    def __init__(self, tag_key: str = TAG_KEY) -> None:
        if not isinstance(tag_key, str) or not tag_key:
            raise ValueError(f"tag_key must be a non-empty str, but found {fmt_value(tag_key)}")
        self._tag_key = tag_key

    @property
    def tag_key(self) -> str:
        return self._tag_key

    def kind_of(self, value: Any) -> Kind:
        """
        Return the render kind of value.

        Raises:
            UnsupportedKindError: For mappings, sets, classes and other objects without a renderer.
        """
        if value is None or isinstance(value, Ref):
            return Kind.REFERENCE
        if isinstance(value, (bool, str, numbers.Number, Enum)):
            return Kind.PRIMITIVE
        if self.is_record(value):
            return Kind.RECORD
        if isinstance(value, abc.Sequence):
            return Kind.SEQUENCE
        raise UnsupportedKindError(f"unsupported kind: {fmt_type(value)}")

    def is_record(self, value: Any) -> bool:
        """Return True for dataclass instances, False for dataclass classes and anything else."""
        return dataclasses.is_dataclass(value) and not isinstance(value, type)

    def fields_of(self, record_type: type) -> list[tuple[str, Any]]:
        """
        Return (name, raw annotation) pairs of a record type in declaration order.

        Fields inherited from base dataclasses come first. Fields without an annotation
        yield an empty string.

        Raises:
            WrongKindError: If record_type is not a dataclass.
        """
        if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
            raise WrongKindError(f"record type must be a dataclass, but found {fmt_type(record_type)}")
        return [(f.name, f.metadata.get(self._tag_key, "")) for f in dataclasses.fields(record_type)]

    def get_field(self, value: Any, name: str) -> Any:
        """Read field name of record value."""
        return getattr(value, name)


# Methods --------------------------------------------------------------------------------------------------------------

def annotate_fields(value: Any,
                    *,
                    introspector: TypeIntrospector | None = None,
                    on_unknown_key: UnknownKeyPolicy = "ignore",
                    ) -> dict[str, AnnotatedField]:
    """
    Bind every field of a record to its value and parsed annotation.

    Args:
        value: A record (dataclass instance).
        introspector: Field access strategy, default TypeIntrospector().
        on_unknown_key: "ignore" to accept unknown annotation keys silently, "warn" to
            emit a UserWarning naming the record field.

    Returns:
        dict of field name to AnnotatedField in declaration order.

    Raises:
        WrongKindError: If value is not a record.
        MalformedAnnotationError: If any field annotation is malformed. No partial result.
        ValueError: If on_unknown_key is not a valid policy.
    """
    if on_unknown_key not in ("ignore", "warn"):
        raise ValueError(f"on_unknown_key must be 'ignore' or 'warn', but found {fmt_value(on_unknown_key)}")

    introspector = introspector or TypeIntrospector()
    if not introspector.is_record(value):
        raise WrongKindError(f"kind is not record: {fmt_type(value)}")

    result: dict[str, AnnotatedField] = {}
    for position, (name, annotation) in enumerate(introspector.fields_of(type(value))):
        try:
            raw = parse_raw_tags(annotation)
        except MalformedAnnotationError as e:
            raise MalformedAnnotationError(f"{class_name(value)}.{name}: {e}") from e

        if on_unknown_key == "warn" and (unknown := sorted(set(raw) - KNOWN_KEYS)):
            warnings.warn(
                f"Unknown annotation keys {unknown} on {class_name(value)}.{name} are ignored",
                UserWarning,
                stacklevel=2,
            )

        result[name] = AnnotatedField(
            name=name,
            value=introspector.get_field(value, name),
            tags=FieldTags.from_raw(raw),
            position=position,
        )

    return result


def annotate_record(value: Any,
                    *,
                    introspector: TypeIntrospector | None = None,
                    on_unknown_key: UnknownKeyPolicy = "ignore",
                    ) -> AnnotatedRecord:
    """
    Annotate all fields of a record and find its title field.

    Raises:
        WrongKindError: If value is not a record.
        MalformedAnnotationError: If an annotation is malformed or more than one field
            is marked sem=title.
    """
    fields = annotate_fields(value, introspector=introspector, on_unknown_key=on_unknown_key)
    try:
        title_field = find_title_field(fields)
    except MalformedAnnotationError as e:
        raise MalformedAnnotationError(f"{class_name(value)}: {e}") from e
    return AnnotatedRecord(title_field=title_field, fields=MappingProxyType(fields))


def find_title_field(fields: Mapping[str, AnnotatedField]) -> AnnotatedField | None:
    """
    Return the field annotated sem=title, None if there is none.

    Raises:
        MalformedAnnotationError: If more than one field is annotated sem=title.
    """
    titles = [f for f in fields.values() if f.tags.is_title]
    if len(titles) > 1:
        names = ", ".join(f.name for f in titles)
        raise MalformedAnnotationError(f"at most one title field expected, but found {len(titles)}: {names}")
    return titles[0] if titles else None


def display_order(fields: Mapping[str, AnnotatedField], *, unordered_last: bool = True) -> list[AnnotatedField]:
    """
    Return non-title fields in display order.

    Fields are sorted by their ord annotation ascending, ties keep declaration order.

    Args:
        fields: Annotated fields of one record.
        unordered_last: If True, fields without an explicit ord come after all ordered fields.
            If False, an absent ord counts as 0 and such fields come first.

    Returns:
        list of AnnotatedField, title field excluded.

    Examples:
        >>> # a: ord=2, b: no ord, c: ord=1
        >>> [f.name for f in display_order(fields)]
        ['c', 'a', 'b']
        >>> [f.name for f in display_order(fields, unordered_last=False)]
        ['b', 'c', 'a']
    """

    def __order_key(f: AnnotatedField) -> tuple:
        if unordered_last:
            return not f.tags.is_ordered, f.tags.order_index, f.position
        return f.tags.order_index, f.position

    return sorted((f for f in fields.values() if not f.tags.is_title), key=__order_key)
