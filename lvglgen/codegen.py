"""One generation run: declarations in, widget wrappers out"""

from .extractor import WidgetExtractor
from .parser import DeclParser
from .rust_generator import RustGenerator
from .types import Function, Widget


class CodeGen:
    """Functions and widgets loaded from one bindgen source"""

    def __init__(self, functions: list[Function], widgets: list[Widget], prefix: str = "lv_"):
        self._functions = tuple(functions)
        self._widgets = tuple(widgets)
        self.prefix = prefix

    @classmethod
    def from_source(cls, code: str, prefix: str = "lv_") -> "CodeGen":
        functions = DeclParser(code, prefix).parse()
        widgets = WidgetExtractor(prefix).extract(functions)
        return cls(functions, widgets, prefix)

    @property
    def functions(self) -> tuple[Function, ...]:
        return self._functions

    @property
    def widgets(self) -> tuple[Widget, ...]:
        return self._widgets

    def function_names(self) -> list[str]:
        return [f.name for f in self._functions]

    def generate(self, sys_crate: str = "lvgl_sys") -> list[str]:
        return RustGenerator(self.prefix, sys_crate).generate(list(self._widgets))

    def generate_module(self, sys_crate: str = "lvgl_sys") -> str:
        return RustGenerator(self.prefix, sys_crate).generate_module(list(self._widgets))
