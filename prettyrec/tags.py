"""
Field annotation parsing for pretty-printed records.

A record field carries at most one raw annotation string in its dataclass metadata:

    @dataclass
    class Person:
        name: str = field(metadata={"pretty": "sem=title,ord=1"})
        age: int = pretty_field("ord=2", default=0)

Recognized keys:
    sem: value 'title' promotes the field value to the header line of the record.
    ord: display position of the field, a non-negative integer. 0 or missing means unordered.

Unknown keys are accepted and ignored. An unparsable or negative ord value is not an error,
it degrades to 0 (unordered).
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import MalformedAnnotationError
from .formatters import fmt_type, fmt_value

TAG_KEY = "pretty"

SEM_KEY = "sem"
ORD_KEY = "ord"
SEM_TITLE = "title"

KNOWN_KEYS = frozenset({SEM_KEY, ORD_KEY})


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldTags:
    """
    Parsed rendering hints of a single record field.

    Attributes:
        is_title: Field value replaces the type name as the header line of its record.
        order_index: Display position among the other fields; 0 when unordered.
    """
    is_title: bool = False
    order_index: int = 0

    @property
    def is_ordered(self) -> bool:
        """Whether the field has an explicit display position."""
        return self.order_index > 0

    @classmethod
    def from_raw(cls, raw: Mapping[str, str]) -> "FieldTags":
        """
        Build FieldTags from a key/value mapping produced by parse_raw_tags().

        Args:
            raw: Annotation keys mapped to their values.

        Returns:
            FieldTags with defaults for absent keys.
        """
        is_title = raw.get(SEM_KEY) == SEM_TITLE
        order_index = _parse_order(raw[ORD_KEY]) if ORD_KEY in raw else 0
        return cls(is_title=is_title, order_index=order_index)


# Methods --------------------------------------------------------------------------------------------------------------

def parse_raw_tags(annotation: str) -> dict[str, str]:
    """
    Split a raw annotation string into a key/value mapping.

    Args:
        annotation: Comma-separated 'key=value' elements, possibly empty.

    Returns:
        dict mapping keys to values exactly as written; empty dict for an empty annotation.
        Whitespace is significant, 'sem =title' has the unknown key 'sem '. When a key
        repeats, its last value wins.

    Raises:
        MalformedAnnotationError: If annotation is not a str, or any element does not split
            into exactly one key and one value (e.g. 'ord', 'a=b=c', a trailing comma, or a
            blank annotation like '   ').

    Examples:
        >>> parse_raw_tags("sem=title,ord=1")
        {'sem': 'title', 'ord': '1'}

        >>> parse_raw_tags("")
        {}
    """
    if not isinstance(annotation, str):
        raise MalformedAnnotationError(f"annotation must be a str, but found {fmt_type(annotation)}")

    result: dict[str, str] = {}
    if annotation == "":
        return result

    for element in annotation.split(","):
        parts = element.split("=")
        if len(parts) != 2:
            raise MalformedAnnotationError(
                f"invalid annotation element {fmt_value(element)} in {fmt_value(annotation)}, "
                f"expected key=value")
        key, value = parts
        result[key] = value

    return result


def parse_tags(annotation: str) -> FieldTags:
    """
    Parse a raw annotation string into FieldTags.

    Raises:
        MalformedAnnotationError: If the annotation is malformed, see parse_raw_tags().

    Examples:
        >>> parse_tags("sem=title,ord=1")
        FieldTags(is_title=True, order_index=1)

        >>> parse_tags("ord=first")
        FieldTags(is_title=False, order_index=0)
    """
    return FieldTags.from_raw(parse_raw_tags(annotation))


def pretty_field(tag: str, *, tag_key: str = TAG_KEY, metadata: Mapping[str, Any] | None = None, **kwargs) -> Any:
    """
    Return a dataclasses.field() carrying the annotation string under tag_key.

    The annotation is validated eagerly, so a malformed tag fails at class definition
    instead of at the first render.

    Args:
        tag: Raw annotation string, e.g. "sem=title,ord=1".
        tag_key: Metadata key, must match TypeIntrospector.tag_key.
        metadata: Extra metadata merged with the annotation.
        **kwargs: Passed to dataclasses.field() (default, default_factory, repr...).

    Raises:
        MalformedAnnotationError: If tag is malformed.
    """
    parse_raw_tags(tag)
    return field(metadata={**(metadata or {}), tag_key: tag}, **kwargs)


# Private Methods ------------------------------------------------------------------------------------------------------

def _parse_order(value: str) -> int:
    """Return ord value as int, 0 if it is not a non-negative integer"""
    try:
        order = int(value)
    except ValueError:
        return 0
    return max(order, 0)
