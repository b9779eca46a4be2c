"""
PrettyRec utilities shared across the package.

Contains functions used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any, fully_qualified: bool = False) -> str:
    """
    Get the class name of a record, a value or a class.

    Returns the class name whether given an instance or the class itself, used for the type-name
    header of records rendered without a title field. Builtins are never module-qualified.

    Parameters:
        obj (Any): An object or a class.
        fully_qualified (bool): If true, returns `module.QualName` for user classes.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'

        >>> @dataclass
        ... class Computer:
        ...     cpu: str
        >>> class_name(Computer("Ryzen 7700"))
        'Computer'
        >>> class_name(Computer, fully_qualified=True)
        '__main__.Computer'
    """
    cls = obj if isinstance(obj, type) else type(obj)

    if cls.__module__ == "builtins" or not fully_qualified:
        return cls.__name__

    # Nested classes keep their outer class in the dotted path
    return f"{cls.__module__}.{cls.__qualname__}"


def identity_hex(obj: Any) -> str:
    """
    Return the identity of obj as a hex address string, '0x0' for None.

    Used by placeholders which stand for an absent or an already rendered record.
    """
    if obj is None:
        return "0x0"
    return f"{id(obj):#x}"
