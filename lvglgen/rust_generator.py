"""Rust Generator - generates safe builder-style wrappers for LVGL widgets"""

import logging

from .types import Function, Param, SkipError, Widget
from .type_mapper import TypeMapper

logger = logging.getLogger(__name__)

RUST_KEYWORDS = frozenset({
    'as', 'async', 'await', 'break', 'const', 'continue', 'crate', 'dyn',
    'else', 'enum', 'extern', 'false', 'fn', 'for', 'if', 'impl', 'in',
    'let', 'loop', 'match', 'mod', 'move', 'mut', 'pub', 'ref', 'return',
    'self', 'Self', 'static', 'struct', 'super', 'trait', 'true', 'type',
    'unsafe', 'use', 'where', 'while', 'abstract', 'become', 'box', 'do',
    'final', 'macro', 'override', 'priv', 'try', 'typeof', 'unsized',
    'virtual', 'yield',
})

# Keywords that cannot be written as raw identifiers
NON_RAW_KEYWORDS = frozenset({'self', 'Self', 'super', 'crate'})

# Widget whose wrapper is hand-written in the runtime crate
BASE_WIDGET = "obj"


def to_pascal_case(name: str) -> str:
    return ''.join(p[:1].upper() + p[1:] for p in name.split('_') if p)


def method_name(name: str) -> str:
    """Wrapper method name for the part after `<prefix><widget>_`"""
    if name.startswith('set_'):
        name = name[len('set_'):]
    if name in RUST_KEYWORDS:
        name = f'{name}_'
    return name


def arg_ident(param: Param, index: int) -> str:
    """Rust identifier for a parameter name"""
    name = param.name
    if name == '_':
        return f'arg{index}'
    if name in NON_RAW_KEYWORDS:
        return f'{name}_'
    if name in RUST_KEYWORDS:
        return f'r#{name}'
    return name


class RustGenerator:
    """Generates Rust wrapper code from extracted widgets"""

    def __init__(self, prefix: str = "lv_", sys_crate: str = "lvgl_sys"):
        self.prefix = prefix
        self.sys_crate = sys_crate

    def generate_module(self, widgets: list[Widget]) -> str:
        """Generate the complete widgets module"""
        lines = [
            "// AUTO-GENERATED - DO NOT EDIT",
            f"// Generated from {self.sys_crate} declarations",
            "",
        ]
        for fragment in self.generate(widgets):
            lines.append(fragment)
            lines.append("")
        return "\n".join(lines)

    def generate(self, widgets: list[Widget]) -> list[str]:
        """One fragment per widget; skipped widgets are left out"""
        fragments = []
        for widget in widgets:
            try:
                fragments.append(self.generate_widget(widget))
            except SkipError as e:
                logger.warning("%s", e)
        return fragments

    def generate_widget(self, widget: Widget) -> str:
        if widget.name == BASE_WIDGET:
            raise SkipError(widget.name, "base object wrapper is hand-written")

        type_name = to_pascal_case(widget.name)
        methods = []
        for f in widget.methods:
            try:
                methods.append(self._method_lines(f, widget))
            except SkipError as e:
                logger.warning("%s", e)

        lines = [
            f"define_object!({type_name});",
            "",
            f"impl<C: 'static> {type_name}<C> {{",
        ]
        for i, method in enumerate(methods):
            if i:
                lines.append("")
            lines.extend(f"    {line}" for line in method)
        lines.append("}")
        return "\n".join(lines)

    def generate_method(self, function: Function, widget: Widget) -> str:
        return "\n".join(self._method_lines(function, widget))

    def _method_lines(self, function: Function, widget: Widget) -> list[str]:
        short_name = function.name.removeprefix(f"{self.prefix}{widget.name}_")
        native = f"{self.sys_crate}::{function.name}"

        if short_name == "create":
            return self._constructor_lines(native)

        # Getters and other value-returning functions are not generated yet
        if function.return_type is not None:
            raise SkipError(function.name, f"returns {function.return_type}")
        if not function.params:
            raise SkipError(function.name, "no receiver")

        receiver, *args = function.params
        decls = ["&self" if TypeMapper.is_const(receiver.type) else "mut self"]
        call_args = ["&mut *self.raw"]
        for i, param in enumerate(args, start=1):
            try:
                rust_type = TypeMapper.to_rust(param.type, self.sys_crate)
            except SkipError as e:
                raise SkipError(function.name, f"unmapped type `{e.name}`") from e
            ident = arg_ident(param, i)
            decls.append(f"{ident}: {rust_type}")
            call_args.append(f"{ident}.as_ptr()" if TypeMapper.is_string(param.type) else ident)

        name = method_name(short_name)
        call = f"{native}({', '.join(call_args)});"
        if TypeMapper.is_const(receiver.type):
            return [
                f"pub fn {name}({', '.join(decls)}) {{",
                "    unsafe {",
                f"        {call}",
                "    }",
                "}",
            ]
        return [
            f"pub fn {name}({', '.join(decls)}) -> Self {{",
            "    unsafe {",
            f"        {call}",
            "    }",
            "    self",
            "}",
        ]

    def _constructor_lines(self, native: str) -> list[str]:
        return [
            "pub fn new<'a>(parent: &mut impl crate::core::ObjExt<C>) -> Self {",
            "    unsafe {",
            f"        let obj = {native}(&mut *parent.raw);",
            '        let obj = Obj::from_raw(obj.as_mut().expect("OOM"), parent.context);',
            "        Self { obj }",
            "    }",
            "}",
        ]
