"""
LVGL Wrapper Generator Package

Parses the Rust declarations bindgen produces for LVGL and generates:
  1. One wrapper type per widget (found from `lv_<widget>_create`)
  2. A constructor and builder-style setters for each widget
"""

from .types import TypeRef, Param, Function, Widget, ParseError, SkipError
from .parser import DeclParser
from .type_mapper import TypeMapper
from .extractor import WidgetExtractor
from .rust_generator import RustGenerator
from .codegen import CodeGen

__all__ = [
    'TypeRef', 'Param', 'Function', 'Widget', 'ParseError', 'SkipError',
    'DeclParser', 'TypeMapper', 'WidgetExtractor',
    'RustGenerator', 'CodeGen',
]
