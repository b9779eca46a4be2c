"""
Annotation-driven pretty printer for records, sequences and references.

Renders any supported value into an indented, human-readable block of text for debugging
or display. Records are dataclass instances; their field order and header line are driven
by per-field annotations (see prettyrec.tags), not by per-type formatting code.

    John
        Surname = Doe
        Age = 31
        Abilities >>>
            * C Programmer
                  Level = 5
        Computer >>>
            CPU = Ryzen 7700

Layout rules:
    - A field is inline ('Name = value') when its value is a single-line primitive or a
      placeholder, otherwise it is a block ('Name >>>' followed by the value below). A Ref
      that is followed lays out like the record it points at.
    - The children of a record or a sequence (fields, bullet items) are indented by one
      unit if a header line was printed above them or if they are a nested block
      (RenderOptions.force_indent). Sequence elements are never forced, the '* ' bullet
      already nests them.
    - A block value is placed below its field name as rendered. Only its children are
      indented, so the title line of a nested record lines up with the field name.
    - References (Ref) are followed once per render call; a record reached again through
      a reference, or re-entered through a cycle, renders as an '@ 0x...' placeholder.
    - A non-primitive sequence element rendering to nothing (an untitled record without
      fields) raises EmptyElementError.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import sys

from dataclasses import dataclass, field, replace as dataclasses_replace
from types import MappingProxyType
from typing import IO, Any, Callable, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import EmptyElementError, UnsupportedKindError, WrongKindError
from .formatters import fmt_type, fmt_value
from .introspect import Kind, Ref, TypeIntrospector, UnknownKeyPolicy, annotate_record, display_order
from .utils import class_name, identity_hex

INDENT_WIDTH = 4

LIST_HEADER = "List"
EMPTY_LIST_MARKER = "... empty list ..."
BULLET = "* "
BLOCK_MARKER = " >>>"
INLINE_SEPARATOR = " = "
PLACEHOLDER_PREFIX = "@ "


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderOptions:
    """
    Per-call rendering flags, copied (never shared) down the recursion.

    Attributes:
        skip_header: Do not print the type name header of records or the 'List' header of
            sequences. A title field is printed regardless.
        force_indent: Indent children even when no header line is printed, used for values
            laid out as a nested block under a field name.

    Examples:
        >>> RenderOptions()
        RenderOptions(skip_header=False, force_indent=False)

        >>> RenderOptions().merge(skip_header=True)
        RenderOptions(skip_header=True, force_indent=False)
    """
    skip_header: bool = False
    force_indent: bool = False

    @classmethod
    def nested(cls) -> "RenderOptions":
        """Options for a field value, rendered as a nested block below its field name."""
        return cls(skip_header=True, force_indent=True)

    @classmethod
    def element(cls) -> "RenderOptions":
        """Options for a sequence element, rendered behind a bullet."""
        return cls(skip_header=True, force_indent=False)

    def merge(self, **kwargs: Any) -> "RenderOptions":
        """Return a copy with the given attributes replaced."""
        return dataclasses_replace(self, **kwargs)


@dataclass
class _RenderState:
    """
    Mutable state of one top-level render call, never shared between calls.

    Attributes:
        visited: ids of records already reached through a Ref.
        active: ids of records on the current rendering path.
    """
    visited: set[int] = field(default_factory=set)
    active: set[int] = field(default_factory=set)


Renderer = Callable[[Any, RenderOptions, _RenderState], str]


class PrettyPrinter:
    """
    Recursive renderer dispatching on the runtime kind of a value.

    A PrettyPrinter holds configuration and its kind-to-renderer table only, both read-only
    after construction. Everything a render call mutates lives in a state object created by
    that call, so one instance can serve any number of callers and threads.

    Args:
        introspector: Kind classification and field access, default TypeIntrospector().
        indent: Spaces per nesting level.
        unordered_last: Place fields without an ord annotation after the ordered ones.
            False sorts them first, as if ord=0.
        fully_qualified_names: Print record type headers as 'module.Class'.
        on_unknown_key: "ignore" or "warn" about unknown annotation keys.

    Raises:
        TypeError: If an argument has the wrong type.
        ValueError: If indent is negative or on_unknown_key is not a valid policy.

    Examples:
        >>> printer = PrettyPrinter(indent=2)
        >>> print(printer.render(Computer(cpu="Ryzen 7700")))
        Computer
          cpu = Ryzen 7700
    """

    def __init__(self,
                 *,
                 introspector: TypeIntrospector | None = None,
                 indent: int = INDENT_WIDTH,
                 unordered_last: bool = True,
                 fully_qualified_names: bool = False,
                 on_unknown_key: UnknownKeyPolicy = "ignore",
                 ) -> None:
        if not isinstance(introspector, (TypeIntrospector, type(None))):
            raise TypeError(f"introspector must be a TypeIntrospector, but found {fmt_type(introspector)}")
        if isinstance(indent, bool) or not isinstance(indent, int):
            raise TypeError(f"indent must be an int, but found {fmt_type(indent)}")
        if indent < 0:
            raise ValueError(f"indent must be >=0, but found {fmt_value(indent)}")
        if on_unknown_key not in ("ignore", "warn"):
            raise ValueError(f"on_unknown_key must be 'ignore' or 'warn', but found {fmt_value(on_unknown_key)}")

        self._introspector = introspector or TypeIntrospector()
        self._indent = indent
        self._unordered_last = bool(unordered_last)
        self._fully_qualified_names = bool(fully_qualified_names)
        self._on_unknown_key = on_unknown_key

        self._renderers: Mapping[Kind, Renderer] = MappingProxyType({
            Kind.PRIMITIVE: self._render_primitive,
            Kind.SEQUENCE: self._render_sequence,
            Kind.RECORD: self._render_record,
            Kind.REFERENCE: self._render_reference,
        })

    @property
    def introspector(self) -> TypeIntrospector:
        return self._introspector

    @property
    def indent(self) -> int:
        return self._indent

    @property
    def unordered_last(self) -> bool:
        return self._unordered_last

    @property
    def fully_qualified_names(self) -> bool:
        return self._fully_qualified_names

    @property
    def on_unknown_key(self) -> UnknownKeyPolicy:
        return self._on_unknown_key

    def render(self, value: Any, options: RenderOptions | None = None) -> str:
        """
        Render value as indented, human-readable text.

        Args:
            value: A primitive, record, sequence, Ref or None.
            options: Top-level flags, default RenderOptions().

        Returns:
            The rendering without trailing newline.

        Raises:
            TypeError: If options is not a RenderOptions instance.
            MalformedAnnotationError: A field annotation is malformed.
            UnsupportedKindError: A value has no renderer (dict, set, plain object...).
            WrongKindError: A Ref points at something other than a record.
            EmptyElementError: A sequence element rendered to nothing.
        """
        if not isinstance(options, (RenderOptions, type(None))):
            raise TypeError(f"options must be a RenderOptions instance, but found {fmt_type(options)}")
        return self._render(value, options or RenderOptions(), _RenderState())

    # Dispatch -------------------------------------

    def _render(self, value: Any, options: RenderOptions, state: _RenderState) -> str:
        kind = self._introspector.kind_of(value)
        return self._renderers[kind](value, options, state)

    def _layout_kind(self, value: Any, state: _RenderState) -> Kind:
        """
        Kind deciding the field layout, resolved before the value is rendered.

        A Ref that will be followed lays out as the record it points at. A value that will
        render as a placeholder (absent Ref, Ref already followed, record re-entered through
        a cycle) lays out as a reference.
        """
        kind = self._introspector.kind_of(value)
        if kind is Kind.RECORD and id(value) in state.active:
            return Kind.REFERENCE
        if kind is Kind.REFERENCE and isinstance(value, Ref) and self._introspector.is_record(value.target):
            key = id(value.target)
            if key not in state.visited and key not in state.active:
                return Kind.RECORD
        return kind

    # Renderers ------------------------------------

    def _render_primitive(self, value: Any, options: RenderOptions, state: _RenderState) -> str:
        if self._introspector.kind_of(value) is not Kind.PRIMITIVE:
            raise UnsupportedKindError(f"unsupported kind for a primitive: {fmt_type(value)}")
        return str(value)

    def _render_sequence(self, value: Any, options: RenderOptions, state: _RenderState) -> str:
        if self._introspector.kind_of(value) is not Kind.SEQUENCE:
            raise WrongKindError(f"kind is not sequence: {fmt_type(value)}")

        header_emitted = not options.skip_header
        lines = [LIST_HEADER] if header_emitted else []

        items = []
        for element in value:
            text = self._render(element, RenderOptions.element(), state)
            if not text and self._introspector.kind_of(element) is not Kind.PRIMITIVE:
                raise EmptyElementError(f"sequence element rendered to no lines: {fmt_type(element)}")
            items.append(bullet_text(text))
        body = "\n".join(items) if items else EMPTY_LIST_MARKER

        if nests_children(options, header_emitted):
            body = indent_text(body, self._indent)
        lines.append(body)

        return "\n".join(lines).rstrip("\n")

    def _render_record(self, value: Any, options: RenderOptions, state: _RenderState) -> str:
        if not self._introspector.is_record(value):
            raise WrongKindError(f"kind is not record: {fmt_type(value)}")

        key = id(value)
        if key in state.active:
            return placeholder(value)

        state.active.add(key)
        try:
            return self._render_record_body(value, options, state)
        finally:
            state.active.discard(key)

    def _render_record_body(self, value: Any, options: RenderOptions, state: _RenderState) -> str:
        annotated = annotate_record(value, introspector=self._introspector, on_unknown_key=self._on_unknown_key)

        lines = []
        if annotated.has_title_field:
            lines.append(self._render_primitive(annotated.title_field.value, options, state))
        elif not options.skip_header:
            lines.append(class_name(value, fully_qualified=self._fully_qualified_names))

        nests = nests_children(options, header_emitted=bool(lines))

        for f in display_order(annotated.fields, unordered_last=self._unordered_last):
            kind = self._layout_kind(f.value, state)
            text = self._render(f.value, RenderOptions.nested(), state)
            field_text = layout_field(f.name, kind, text)
            lines.append(indent_text(field_text, self._indent) if nests else field_text)

        return "\n".join(lines).rstrip("\n")

    def _render_reference(self, value: Any, options: RenderOptions, state: _RenderState) -> str:
        if not (value is None or isinstance(value, Ref)):
            raise WrongKindError(f"kind is not reference: {fmt_type(value)}")

        target = value.target if isinstance(value, Ref) else None
        if target is None:
            return placeholder(None)
        if not self._introspector.is_record(target):
            raise WrongKindError(f"reference target must be a record, but found {fmt_type(target)}")

        key = id(target)
        if key in state.visited or key in state.active:
            return placeholder(target)

        state.visited.add(key)
        return self._render_record(target, options, state)


# Layout ---------------------------------------------------------------------------------------------------------------

def indent_text(text: str, width: int = INDENT_WIDTH, symbol: str = " ") -> str:
    """
    Prefix every line of text with width symbols, trailing newlines are dropped first.

    Examples:
        >>> indent_text("CPU = Ryzen 7700\\n")
        '    CPU = Ryzen 7700'
    """
    prefix = symbol * width
    return "\n".join(prefix + line for line in text.rstrip("\n").split("\n"))


def bullet_text(text: str) -> str:
    """
    Put a rendered element behind a '* ' bullet, aligning its other lines under the first.

    Examples:
        >>> print(bullet_text("C Programmer\\n    Level = 5"))
        * C Programmer
              Level = 5
    """
    lines = text.split("\n")
    continuation = " " * len(BULLET)
    return "\n".join([BULLET + lines[0]] + [continuation + line for line in lines[1:]])


def is_block(kind: Kind, text: str) -> bool:
    """Whether a field value goes below its name: multi-line text, a record or a sequence."""
    return "\n" in text or kind in (Kind.RECORD, Kind.SEQUENCE)


def layout_field(name: str, kind: Kind, text: str) -> str:
    """
    Prefix a rendered field value with its field name.

    Examples:
        >>> layout_field("Age", Kind.PRIMITIVE, "31")
        'Age = 31'
        >>> layout_field("Servers", Kind.SEQUENCE, "    * Cortex A76")
        'Servers >>>\\n    * Cortex A76'
    """
    if is_block(kind, text):
        return f"{name}{BLOCK_MARKER}\n{text}"
    return f"{name}{INLINE_SEPARATOR}{text}"


def nests_children(options: RenderOptions, header_emitted: bool) -> bool:
    """Whether fields or bullet items are indented: below a header line, or inside a nested block."""
    return header_emitted or options.force_indent


def placeholder(target: Any) -> str:
    """Stand-in for an absent record (None) or a record not rendered again."""
    return f"{PLACEHOLDER_PREFIX}{identity_hex(target)}"


# Methods --------------------------------------------------------------------------------------------------------------

_DEFAULT_PRINTER = PrettyPrinter()


def render(value: Any, options: RenderOptions | None = None) -> str:
    """
    Render value with the default PrettyPrinter.

    Args:
        value: A primitive, record, sequence, Ref or None.
        options: Top-level flags, default RenderOptions().

    Returns:
        The rendering without trailing newline.

    Raises:
        RenderError: Subclasses MalformedAnnotationError, UnsupportedKindError, WrongKindError
            and EmptyElementError abort the call, no partial output is returned.

    Examples:
        >>> @dataclass
        ... class Item:
        ...     title: str = pretty_field("sem=title")
        ...     a: int = pretty_field("ord=1", default=5)
        ...     b: list = pretty_field("ord=2", default_factory=list)
        >>> print(render(Item(title="X")))
        X
            a = 5
            b >>>
                ... empty list ...
    """
    return _DEFAULT_PRINTER.render(value, options)


def print_pretty(value: Any,
                 options: RenderOptions | None = None,
                 *,
                 file: IO[str] | None = None,
                 printer: PrettyPrinter | None = None) -> None:
    """
    Render value and print it to file (sys.stdout by default).

    Rendering completes before anything is written, so a failing render prints nothing.
    """
    printer = printer or _DEFAULT_PRINTER
    print(printer.render(value, options), file=file or sys.stdout)
