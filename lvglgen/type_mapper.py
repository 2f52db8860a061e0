"""Type mapping from bindgen type spellings to Rust wrapper types"""

import logging
from typing import Optional

from .types import SkipError, TypeRef

logger = logging.getLogger(__name__)


class TypeMapper:
    """Maps the C types of `lvgl_sys` declarations to Rust types"""

    # Exact spelling -> Rust type
    RUST_TYPES = {
        'i16': 'i16',
        'u16': 'u16',
        'i32': 'i32',
        'u8': 'u8',
        'u32': 'u32',
        'bool': 'bool',

        'lv_opa_t': 'lv_opa_t',
        'lv_anim_enable_t': 'lv_anim_enable_t',
        'lv_arc_mode_t': 'lv_arc_mode_t',
        'lv_bar_mode_t': 'lv_bar_mode_t',
        'lv_btnmatrix_ctrl_t': 'lv_btnmatrix_ctrl_t',
        'lv_chart_axis_t': 'lv_chart_axis_t',
        'lv_chart_type_t': 'lv_chart_type_t',
        'lv_chart_update_mode_t': 'lv_chart_update_mode_t',
        'lv_color_t': 'lv_color_t',
        'lv_coord_t': 'lv_coord_t',
        'lv_dir_t': 'lv_dir_t',
        'lv_img_size_mode_t': 'lv_img_size_mode_t',
        'lv_imgbtn_state_t': 'lv_imgbtn_state_t',
        'lv_keyboard_mode_t': 'lv_keyboard_mode_t',
        'lv_label_long_mode_t': 'lv_label_long_mode_t',
        'lv_menu_mode_header_t': 'lv_menu_mode_header_t',
        'lv_menu_mode_root_back_btn_t': 'lv_menu_mode_root_back_btn_t',
        'lv_roller_mode_t': 'lv_roller_mode_t',
        'lv_slider_mode_t': 'lv_slider_mode_t',
        'lv_span_mode_t': 'lv_span_mode_t',
        'lv_span_overflow_t': 'lv_span_overflow_t',
        'lv_table_cell_ctrl_t': 'lv_table_cell_ctrl_t',
        'lv_text_align_t': 'lv_text_align_t',

        # Null-terminated strings are borrowed as &CStr
        '* const cty :: c_char': '&cstr_core::CStr',
    }

    @classmethod
    def lookup(cls, type_ref: TypeRef) -> Optional[str]:
        """Rust type for a spelling, None if it has no mapping"""
        return cls.RUST_TYPES.get(type_ref.spelling)

    @classmethod
    def to_rust(cls, type_ref: TypeRef, sys_crate: str = "lvgl_sys") -> str:
        """Convert a declaration type to the wrapper's Rust type"""
        name = cls.lookup(type_ref)
        if name is None:
            logger.debug("Skipping type %s", type_ref.spelling)
            raise SkipError(type_ref.spelling, "no type mapping")
        if type_ref.is_str:
            return name
        # Toolkit enums and handles live in the sys crate
        if name.endswith('_t'):
            return f'{sys_crate}::{name}'
        return name

    @classmethod
    def is_const(cls, type_ref: TypeRef) -> bool:
        """Check if type is const-qualified"""
        return type_ref.is_const

    @classmethod
    def is_string(cls, type_ref: TypeRef) -> bool:
        """Check if type is a null-terminated string"""
        return type_ref.is_str
