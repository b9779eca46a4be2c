"""
Exceptions raised by the record renderer.

Each error aborts the whole render call; nothing is recovered locally and no partial output
is returned. The typed errors also subclass the builtin a plain-Python caller would expect,
so `except ValueError` keeps catching a malformed annotation.
"""


# Classes --------------------------------------------------------------------------------------------------------------

class RenderError(Exception):
    """Base class for every failure of a render call."""


class MalformedAnnotationError(RenderError, ValueError):
    """A field annotation does not parse as comma-separated key=value pairs, or declares a second title."""


class UnsupportedKindError(RenderError, TypeError):
    """No renderer is registered for the runtime kind of a value (mappings, sets, plain objects...)."""


class WrongKindError(RenderError, TypeError):
    """A renderer received a value of a kind other than the one it renders."""


class EmptyElementError(RenderError, ValueError):
    """A sequence element rendered to zero lines."""
