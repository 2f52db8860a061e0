"""Tests for DeclParser"""

import pytest

from lvglgen import DeclParser, Function, Param, ParseError, TypeRef
from lvglgen.parser import tokenize


def test_tokenize_joins_paths_and_arrows():
    texts = [t.text for t in tokenize('fn f(a: *const cty::c_char) -> u8;')]
    assert texts == ['fn', 'f', '(', 'a', ':', '*', 'const', 'cty', '::', 'c_char', ')', '->', 'u8', ';']


def test_tokenize_drops_comments():
    texts = [t.text for t in tokenize('// line\n/* block /* nested */ */ fn')]
    assert texts == ['fn']


def test_tokenize_tracks_lines():
    tokens = tokenize('\n\n  fn')
    assert (tokens[0].line, tokens[0].column) == (3, 3)


def test_can_load_bindgen_fns():
    code = '''
        extern "C" {
            #[doc = " Return with the screen of an object"]
            #[doc = " @param obj pointer to an object"]
            #[doc = " @return pointer to a screen"]
            pub fn lv_obj_get_screen(obj: *const lv_obj_t) -> *mut lv_obj_t;
        }
    '''
    functions = DeclParser(code).parse()
    assert functions == [
        Function(
            name='lv_obj_get_screen',
            params=(Param('obj', TypeRef('* const lv_obj_t')),),
            return_type=TypeRef('* mut lv_obj_t'),
        )
    ]


def test_no_return_type_is_none():
    functions = DeclParser('extern "C" { pub fn lv_a_set_b(a: *mut lv_obj_t, b: u16); }').parse()
    assert functions[0].return_type is None
    assert [p.name for p in functions[0].params] == ['a', 'b']


def test_free_functions_follow_foreign_functions():
    code = '''
        pub unsafe fn lv_free_one(x: u8) { lv_inner(x); }
        extern "C" { pub fn lv_foreign(x: u8); }
        pub const fn lv_free_two() -> u8 { 1 }
    '''
    names = [f.name for f in DeclParser(code).parse()]
    assert names == ['lv_foreign', 'lv_free_one', 'lv_free_two']


def test_only_prefixed_functions_are_kept():
    code = 'extern "C" { pub fn _lv_private(); pub fn lv_public(); pub fn other(); }'
    assert [f.name for f in DeclParser(code).parse()] == ['lv_public']
    assert [f.name for f in DeclParser(code, prefix='other').parse()] == ['other']


def test_other_items_are_skipped():
    code = '''
        #![allow(non_camel_case_types)]
        use core::ffi;
        pub const LV_X: u32 = 1;
        pub type lv_coord_t = i16;
        #[repr(C)]
        pub struct lv_point_t { pub x: lv_coord_t, pub y: lv_coord_t }
        pub struct lv_tuple_t(u8);
        pub enum lv_e { A = 1, B }
        impl lv_point_t { pub fn lv_hidden(&self) {} }
        extern crate cty;
        extern "C" {
            pub static mut lv_global: u8;
            pub fn lv_visible();
        }
    '''
    assert [f.name for f in DeclParser(code).parse()] == ['lv_visible']


def test_variadic_and_receivers_are_dropped():
    code = '''
        extern "C" { pub fn lv_label_set_text_fmt(label: *mut lv_obj_t, fmt: *const cty::c_char, ...); }
        extern "C" { pub fn lv_x(o: *mut lv_obj_t, args: ...); }
        pub fn lv_recv(&mut self, x: u8) {}
    '''
    fmt, named, recv = DeclParser(code).parse()
    assert [p.name for p in fmt.params] == ['label', 'fmt']
    assert [p.name for p in named.params] == ['o']
    assert [p.name for p in recv.params] == ['x']


def test_function_pointer_parameters_keep_commas():
    code = 'extern "C" { pub fn lv_cb(o: *mut lv_obj_t, cb: Option<unsafe extern "C" fn(a: u8, b: u8) -> u8>, u: u8); }'
    params = DeclParser(code).parse()[0].params
    assert [p.name for p in params] == ['o', 'cb', 'u']
    assert params[1].type.spelling.startswith('Option <')


def test_raw_identifier_names():
    code = 'extern "C" { pub fn lv_x_set_type(obj: *mut lv_obj_t, r#type: u8); }'
    assert DeclParser(code).parse()[0].params[1].name == 'r#type'


@pytest.mark.parametrize('code', [
    'extern "C" { pub fn lv_a(x: u8);',
    'extern "C" { pub fn lv_a(x: u8) }',
    'pub fn lv_a(x: u8 { }',
    'extern "C" { pub fn (x: u8); }',
    'extern "C" { pub fn lv_a(x u8); }',
    'extern "C" { pub fn lv_a(x: u8) -> ; }',
    'pub struct S { a: u8 ]',
    '}',
    'const S: &str = "unterminated;',
    '/* never closed',
])
def test_malformed_input_raises_parse_error(code):
    with pytest.raises(ParseError):
        DeclParser(code).parse()


def test_parse_error_reports_position():
    with pytest.raises(ParseError) as exc:
        DeclParser('extern "C" {\n  pub fn lv_a(x u8);\n}').parse()
    assert exc.value.line == 2


def test_binding_modes_keep_plain_name():
    code = 'pub fn lv_x(a: *mut lv_obj_t, mut v: u8, ref r: u8, ref mut m: u8, _: u8) {}'
    params = DeclParser(code).parse()[0].params
    assert [p.name for p in params] == ['a', 'v', 'r', 'm', '_']


def test_destructuring_patterns_are_dropped():
    code = 'pub fn lv_x(a: *mut lv_obj_t, (b, c): (u8, u8), d: u8) {}'
    assert [p.name for p in DeclParser(code).parse()[0].params] == ['a', 'd']


def test_char_literals_with_long_escapes():
    code = r"pub fn lv_x() -> u8 { let c = '\x7f'; let e = '\u{1F600}'; let n = '\n'; 0 }"
    assert [f.name for f in DeclParser(code).parse()] == ['lv_x']
