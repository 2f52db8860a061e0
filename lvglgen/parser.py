"""Parser for the Rust declarations bindgen emits"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .types import Function, Param, ParseError, TypeRef

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r'''
    (?P<ws>\s+)
  | (?P<line_comment>//[^\n]*)
  | (?P<block_comment>/\*)
  | (?P<raw_string>b?r(?P<hashes>\#*)".*?"(?P=hashes))
  | (?P<string>b?"(?:\\.|[^"\\])*")
  | (?P<char>b?'(?:\\(?:x[0-9A-Fa-f]{2}|u\{[0-9A-Fa-f]+\}|.)|[^'\\])')
  | (?P<lifetime>'[A-Za-z_]\w*)
  | (?P<ident>(?:r\#)?[A-Za-z_]\w*)
  | (?P<number>\d[\w]*(?:\.\d\w*)?)
  | (?P<punct>::|->|=>|\.\.\.|\.\.=|\.\.|[^\s\w])
''', re.VERBOSE | re.DOTALL)

OPENERS = {'(': ')', '[': ']', '{': '}'}
CLOSERS = {v: k for k, v in OPENERS.items()}

# Item qualifiers that may precede `fn` or `extern { }`
QUALIFIERS = {'const', 'async', 'unsafe', 'safe', 'default'}


@dataclass
class Token:
    kind: str
    text: str
    line: int
    column: int


def tokenize(content: str) -> list[Token]:
    """Split declaration text into tokens, dropping whitespace and comments"""
    tokens = []
    pos = 0
    line = 1
    line_start = 0
    while pos < len(content):
        m = TOKEN_RE.match(content, pos)
        column = pos - line_start + 1
        if m is None:
            raise ParseError(f"Unexpected character {content[pos]!r}", line, column)
        kind = m.lastgroup
        end = m.end()

        if kind == 'block_comment':
            end = _skip_block_comment(content, pos, line, column)
        elif kind == 'punct' and m.group() in ('"', "'"):
            raise ParseError("Unterminated literal", line, column)
        elif kind not in ('ws', 'line_comment'):
            tokens.append(Token(kind, m.group(), line, column))

        newlines = content.count('\n', pos, end)
        if newlines:
            line += newlines
            line_start = content.rfind('\n', pos, end) + 1
        pos = end
    return tokens


def _skip_block_comment(content: str, pos: int, line: int, column: int) -> int:
    """Return the offset after a (possibly nested) block comment"""
    depth = 0
    while pos < len(content):
        if content.startswith('/*', pos):
            depth += 1
            pos += 2
        elif content.startswith('*/', pos):
            depth -= 1
            pos += 2
            if depth == 0:
                return pos
        else:
            pos += 1
    raise ParseError("Unterminated block comment", line, column)


class DeclParser:
    """Parses `extern "C"` blocks and free functions from bindgen output"""

    def __init__(self, content: str, prefix: str = "lv_"):
        self.prefix = prefix
        self.tokens = tokenize(content)
        self.pos = 0

    def parse(self) -> list[Function]:
        foreign: list[Function] = []
        free: list[Function] = []
        self.pos = 0
        while not self._at_end():
            self._parse_item(foreign, free)

        # Foreign functions first, then free functions, each in source order
        functions = [f for f in foreign + free if f.name.startswith(self.prefix)]
        for f in functions:
            logger.debug("Loaded %s", f.name)
        return functions

    # ── token helpers ─────────────────────────────────────────────

    def _at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def _peek(self, offset: int = 0) -> Optional[Token]:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return None

    def _check(self, text: str, offset: int = 0) -> bool:
        tok = self._peek(offset)
        return tok is not None and tok.kind != 'string' and tok.text == text

    def _next(self) -> Token:
        tok = self._peek()
        if tok is None:
            last = self.tokens[-1] if self.tokens else None
            raise ParseError("Unexpected end of input",
                             last.line if last else 0, last.column if last else 0)
        self.pos += 1
        return tok

    def _expect(self, text: str) -> Token:
        tok = self._next()
        if tok.text != text:
            raise ParseError(f"Expected '{text}', found '{tok.text}'", tok.line, tok.column)
        return tok

    def _error(self, message: str) -> ParseError:
        tok = self._peek()
        if tok is None:
            return ParseError(f"{message} (end of input)")
        return ParseError(f"{message}, found '{tok.text}'", tok.line, tok.column)

    def _skip_group(self) -> list[Token]:
        """Consume a balanced (), [] or {} group and return its inner tokens"""
        opener = self._next()
        if opener.text not in OPENERS:
            raise ParseError(f"Expected a group, found '{opener.text}'", opener.line, opener.column)
        stack = [opener]
        inner = []
        while stack:
            tok = self._peek()
            if tok is None:
                raise ParseError(f"Unclosed '{stack[-1].text}'", stack[-1].line, stack[-1].column)
            self.pos += 1
            if tok.kind == 'punct' and tok.text in OPENERS:
                stack.append(tok)
            elif tok.kind == 'punct' and tok.text in CLOSERS:
                if CLOSERS[tok.text] != stack[-1].text:
                    raise ParseError(f"Mismatched '{tok.text}'", tok.line, tok.column)
                stack.pop()
                if not stack:
                    break
            inner.append(tok)
        return inner

    def _skip_attributes(self):
        while self._check('#'):
            self.pos += 1
            if self._check('!'):
                self.pos += 1
            if not self._check('['):
                raise self._error("Expected attribute")
            self._skip_group()

    def _skip_visibility(self):
        if self._check('pub'):
            self.pos += 1
            if self._check('('):
                self._skip_group()

    def _skip_item(self):
        """Skip an item we do not care about: up to `;` or a closing `}`"""
        while True:
            tok = self._peek()
            if tok is None:
                raise self._error("Unexpected end of item")
            if tok.kind == 'punct' and tok.text == ';':
                self.pos += 1
                return
            if tok.kind == 'punct' and tok.text in CLOSERS:
                raise ParseError(f"Unbalanced '{tok.text}'", tok.line, tok.column)
            if tok.kind == 'punct' and tok.text in OPENERS:
                self._skip_group()
                if tok.text == '{':
                    if self._check(';'):
                        self.pos += 1
                    return
                continue
            self.pos += 1

    # ── items ─────────────────────────────────────────────────────

    def _parse_item(self, foreign: list[Function], free: list[Function]):
        self._skip_attributes()
        if self._at_end():
            return
        self._skip_visibility()

        start = self.pos
        has_extern = False
        while True:
            if self._check('extern'):
                has_extern = True
                self.pos += 1
                tok = self._peek()
                if tok is not None and tok.kind == 'string':
                    self.pos += 1
            elif any(self._check(q) for q in QUALIFIERS):
                self.pos += 1
            else:
                break

        if has_extern and self._check('{'):
            foreign.extend(self._parse_foreign_block())
        elif self._check('fn'):
            free.append(self._parse_fn(foreign_item=False))
        else:
            self.pos = start
            self._skip_item()

    def _parse_foreign_block(self) -> list[Function]:
        functions = []
        self._expect('{')
        while not self._check('}'):
            if self._at_end():
                raise self._error("Unclosed extern block")
            self._skip_attributes()
            self._skip_visibility()
            while any(self._check(q) for q in QUALIFIERS):
                self.pos += 1
            if self._check('fn'):
                functions.append(self._parse_fn(foreign_item=True))
            elif self._check('}'):
                break
            else:
                self._skip_item()
        self._expect('}')
        return functions

    def _parse_fn(self, foreign_item: bool) -> Function:
        self._expect('fn')
        name_tok = self._peek()
        if name_tok is None or name_tok.kind != 'ident':
            raise self._error("Expected function name")
        self.pos += 1
        name = name_tok.text

        if self._check('<'):
            self._skip_generics()
        if not self._check('('):
            raise self._error(f"Expected parameter list for {name}")
        params = self._parse_params(self._skip_group())

        return_type = None
        if self._check('->'):
            self.pos += 1
            ret_tokens = self._take_until({';', '{', 'where'})
            if not ret_tokens:
                raise self._error(f"Expected return type for {name}")
            return_type = TypeRef(_spell(ret_tokens))

        if self._check('where'):
            self._take_until({';', '{'})

        if foreign_item:
            self._expect(';')
        elif self._check('{'):
            self._skip_group()
        else:
            self._expect(';')

        return Function(name=name, params=tuple(params), return_type=return_type)

    def _skip_generics(self):
        depth = 0
        while True:
            tok = self._next()
            if tok.text == '<':
                depth += 1
            elif tok.text == '>':
                depth -= 1
                if depth == 0:
                    return

    def _take_until(self, stops: set[str]) -> list[Token]:
        """Collect tokens up to a top-level stop token (not consumed)"""
        taken = []
        while True:
            tok = self._peek()
            if tok is None:
                raise self._error("Unexpected end of declaration")
            if tok.kind != 'string' and tok.text in stops:
                return taken
            if tok.kind == 'punct' and tok.text in OPENERS:
                taken.append(tok)
                taken.extend(self._skip_group())
                taken.append(self.tokens[self.pos - 1])
                continue
            if tok.kind == 'punct' and tok.text in CLOSERS:
                raise ParseError(f"Unbalanced '{tok.text}'", tok.line, tok.column)
            taken.append(tok)
            self.pos += 1

    # ── parameters ────────────────────────────────────────────────

    def _parse_params(self, tokens: list[Token]) -> list[Param]:
        params = []
        for chunk in _split_top_level(tokens):
            chunk = _strip_attributes(chunk)
            if not chunk:
                continue
            param = self._parse_param(chunk)
            if param is not None:
                params.append(param)
        return params

    def _parse_param(self, chunk: list[Token]) -> Optional[Param]:
        texts = [t.text for t in chunk]
        # Variadic marker
        if texts == ['...']:
            return None
        # Receivers: self, &self, &'a mut self, self: Box<Self>
        receiver = [t for t in texts if t not in ('&', 'mut') and not t.startswith("'")]
        if receiver and receiver[0] == 'self' and (len(receiver) == 1 or receiver[1] == ':'):
            return None

        depth = 0
        colon = None
        for i, t in enumerate(chunk):
            if t.text in ('(', '[', '{', '<'):
                depth += 1
            elif t.text in (')', ']', '}', '>'):
                depth -= 1
            elif t.text == ':' and depth == 0:
                colon = i
                break
        if colon is None or colon == 0 or colon == len(chunk) - 1:
            first = chunk[0]
            raise ParseError(f"Unsupported parameter '{_spell(chunk)}'", first.line, first.column)

        type_tokens = chunk[colon + 1:]
        if [t.text for t in type_tokens] == ['...']:
            return None
        # `mut x`, `ref x`, `ref mut x` bind plain `x`; other patterns are dropped
        pattern = [t for t in chunk[:colon] if t.text not in ('mut', 'ref')]
        if len(pattern) != 1 or pattern[0].kind != 'ident':
            logger.debug("Dropping parameter '%s'", _spell(chunk))
            return None
        return Param(name=pattern[0].text, type=TypeRef(_spell(type_tokens)))


def _spell(tokens: list[Token]) -> str:
    return " ".join(t.text for t in tokens)


def _split_top_level(tokens: list[Token]) -> list[list[Token]]:
    """Split a parameter list on commas outside nested brackets"""
    chunks: list[list[Token]] = [[]]
    depth = 0
    for tok in tokens:
        if tok.kind == 'punct' and tok.text in ('(', '[', '{', '<'):
            depth += 1
        elif tok.kind == 'punct' and tok.text in (')', ']', '}', '>'):
            depth -= 1
        elif tok.kind == 'punct' and tok.text == ',' and depth == 0:
            chunks.append([])
            continue
        chunks[-1].append(tok)
    return chunks


def _strip_attributes(chunk: list[Token]) -> list[Token]:
    """Drop leading `#[...]` attributes of a parameter"""
    i = 0
    while i + 1 < len(chunk) and chunk[i].text == '#' and chunk[i + 1].text == '[':
        depth = 0
        i += 1
        while i < len(chunk):
            if chunk[i].text == '[':
                depth += 1
            elif chunk[i].text == ']':
                depth -= 1
                if depth == 0:
                    i += 1
                    break
            i += 1
    return chunk[i:]
