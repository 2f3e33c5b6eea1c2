from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class Unresolved:
    """Identity state of a client whose authorization has not completed.

    There is a single instance, ``ABSENT``, which is also the marker read through a view's
    self-identity slot. It is falsy and distinct from ``None`` so callers can tell
    "not yet identified" apart from "identified as None".
    """

    __instance = None

    def __new__(cls):
        if cls.__instance is None:
            cls.__instance = super().__new__(cls)
        return cls.__instance

    def __bool__(self):
        return False

    def __repr__(self):
        return 'ABSENT'

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (Unresolved, ())


ABSENT = Unresolved()


@dataclass(frozen=True)
class Resolved:
    identity: Any


IdentityState = Union[Unresolved, Resolved]


class IdentityEvent(str, Enum):
    RESOLVED = 'resolved'
    FAILED = 'failed'


@dataclass
class IdentityStateChange:
    previous: IdentityState
    current: Resolved

    @property
    def identity(self):
        return self.current.identity
