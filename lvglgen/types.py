"""Data types for bindgen declaration parsing"""

from dataclasses import dataclass, field
from typing import Optional

# Spelling suffix of a `*const c_char` argument as bindgen writes it
STR_SUFFIX = "* const cty :: c_char"


class ParseError(Exception):
    """Declaration text is not valid"""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.line = line
        self.column = column
        where = f" at {line}:{column}" if line else ""
        super().__init__(f"{message}{where}")


class SkipError(Exception):
    """A function or widget cannot be represented in the wrapper"""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Skipping {name}: {reason}")


@dataclass(frozen=True)
class TypeRef:
    """A type as spelled in the declaration"""
    spelling: str

    @property
    def is_const(self) -> bool:
        return self.spelling.startswith("const ")

    @property
    def is_str(self) -> bool:
        return self.spelling.endswith(STR_SUFFIX)

    def __str__(self) -> str:
        return self.spelling


@dataclass(frozen=True)
class Param:
    """Function parameter"""
    name: str
    type: TypeRef


@dataclass(frozen=True)
class Function:
    """Foreign function declaration"""
    name: str
    params: tuple[Param, ...] = ()
    return_type: Optional[TypeRef] = None

    def is_method(self, object_type: str = "lv_obj_t") -> bool:
        """First parameter is a pointer to the generic object"""
        return bool(self.params) and object_type in self.params[0].type.spelling


@dataclass
class Widget:
    """Widget inferred from a `<prefix><name>_create` constructor"""
    name: str
    methods: list[Function] = field(default_factory=list)
