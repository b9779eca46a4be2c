"""
Sample records showing annotation-driven rendering.

Person is titled by its name and lists its fields in ord order. Its friends are Ref
wrappers, so two people befriending each other form a cycle the renderer cuts with an
'@ 0x...' placeholder. Computer has no annotations and renders under its type name.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, field

# Local ----------------------------------------------------------------------------------------------------------------
from .introspect import Ref
from .tags import pretty_field


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class Computer:
    cpu: str = ""


@dataclass
class Ability:
    name: str = pretty_field("sem=title")
    level: int = 0


@dataclass
class Person:
    name: str = pretty_field("sem=title,ord=1")
    surname: str = pretty_field("ord=2", default="")
    age: int = pretty_field("ord=3", default=0)
    abilities: list[Ability] = pretty_field("ord=4", default_factory=list)
    servers: list[Computer] = pretty_field("ord=5", default_factory=list)
    computer: Computer = pretty_field("ord=6", default_factory=Computer)
    friends: list[Ref] = field(default_factory=list)


# Methods --------------------------------------------------------------------------------------------------------------

def sample_person() -> Person:
    """
    Return a populated Person whose only friend lists the person back as a friend.
    """
    john = Person(
        name="John",
        surname="Doe",
        age=31,
        abilities=[Ability(name="C Programmer", level=5), Ability(name="Python Programmer", level=4)],
        servers=[Computer(cpu="Cortex A76"), Computer(cpu="Xeon E5")],
        computer=Computer(cpu="Ryzen 7700"),
    )
    jane = Person(name="Jane", surname="Roe", age=29, computer=Computer(cpu="M2"))

    john.friends.append(Ref(jane))
    jane.friends.append(Ref(john))
    return john
