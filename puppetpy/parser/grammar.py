"""Puppet grammar routines building the AST.

Declarations (`class`, `define`, `node`) are parsed by recursive descent.
Everything inside their bodies goes through `fast_forward`, a tolerant scan
that runs to a stop token at nesting depth zero and pulls out whatever it
recognises on the way. The scan never fails: unknown tokens are kept as raw
blob content.
"""

from dataclasses import dataclass
from typing import Final

from puppetpy.ast import (
    Blob,
    CaseStmt,
    ClassDecl,
    ClassParam,
    ClassRef,
    Condition,
    DefineDecl,
    Element,
    ElementKind,
    FunctionCall,
    Identifier,
    NodeDecl,
    ParamContainer,
    Resource,
    ResourceAttribute,
    StringLiteral,
    TypeReference,
    Variable,
    VariableDefinition,
)
from puppetpy.diagnostics import (
    PARSER_EXPECTED_BODY,
    PARSER_MALFORMED_CLASS_REFERENCE,
    PARSER_MISSING_TITLE_COLON,
    PARSER_UNEXPECTED_RESOURCE_TITLE,
    PARSER_UNSUPPORTED_TOP_LEVEL_STATEMENT,
)
from puppetpy.lexer import Token, TokenCategory, TokenKind
from puppetpy.parser.parser import Parser
from puppetpy.text import TextRange

DEFAULT_PARAM_TYPE: Final[str] = "Any"

_BODY_STOPS: Final[frozenset[TokenKind]] = frozenset({TokenKind.RBRACE})
_CALL_STOPS: Final[frozenset[TokenKind]] = frozenset({TokenKind.RPAREN})
_INDEX_STOPS: Final[frozenset[TokenKind]] = frozenset({TokenKind.RBRACKET})
_CONDITION_STOPS: Final[frozenset[TokenKind]] = frozenset({TokenKind.LBRACE})
_CASE_ARM_STOPS: Final[frozenset[TokenKind]] = frozenset({TokenKind.COLON})
_PARAM_DEFAULT_STOPS: Final[frozenset[TokenKind]] = frozenset({TokenKind.COMMA, TokenKind.RPAREN})
_ATTRIBUTE_VALUE_STOPS: Final[frozenset[TokenKind]] = frozenset({TokenKind.COMMA, TokenKind.RBRACE})
_DEFINE_NAME_STOPS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.WHITESPACE,
        TokenKind.COMMENT,
        TokenKind.BLOCK_COMMENT,
        TokenKind.LBRACE,
        TokenKind.LPAREN,
    }
)
_REQUIREMENT_KINDS: Final[frozenset[TokenKind]] = frozenset(
    {TokenKind.INCLUDE, TokenKind.REQUIRE, TokenKind.CONTAIN}
)
_REQUIREMENT_NAME_KINDS: Final[frozenset[TokenKind]] = frozenset({TokenKind.IDENTIFIER, TokenKind.STRING})
_ATTRIBUTE_NAME_CATEGORIES: Final[frozenset[TokenCategory]] = frozenset(
    {TokenCategory.IDENTIFIER, TokenCategory.KEYWORD, TokenCategory.FUNCTION}
)
_CLOSING: Final[dict[TokenKind, TokenKind]] = {
    TokenKind.LBRACKET: TokenKind.RBRACKET,
    TokenKind.LPAREN: TokenKind.RPAREN,
}


@dataclass(slots=True)
class _Nesting:
    """Brace, bracket and paren depth seen so far by one scan."""

    braces: int = 0
    brackets: int = 0
    parens: int = 0

    @property
    def active(self) -> bool:
        return self.braces > 0 or self.brackets > 0 or self.parens > 0

    def track(self, kind: TokenKind) -> bool:
        match kind:
            case TokenKind.LBRACE:
                self.braces += 1
            case TokenKind.RBRACE:
                self.braces -= 1
            case TokenKind.LBRACKET:
                self.brackets += 1
            case TokenKind.RBRACKET:
                self.brackets -= 1
            case TokenKind.LPAREN:
                self.parens += 1
            case TokenKind.RPAREN:
                self.parens -= 1
            case _:
                return False
        return True


def parse_manifest(parser: Parser) -> Element:
    """Parse top-level declarations into a root element spanning the whole text."""
    root = Element(ElementKind.ROOT, None, 0)
    root.set_end_offset(len(parser.source))
    parser.sequence.move_start()
    reported_gap = False

    token = parser.next_non_trivia()
    while token is not None:
        if not parser.sequence.is_valid or parser.is_cancelled:
            break
        match token.kind:
            case TokenKind.CLASS:
                parse_class(parser, root)
            case TokenKind.NODE:
                parse_node(parser, root)
            case TokenKind.DEFINE:
                parse_define(parser, root)
            case _:
                if not reported_gap and parser.options.report_top_level_gap:
                    parser.error(PARSER_UNSUPPORTED_TOP_LEVEL_STATEMENT, token.range)
                    reported_gap = True
        token = parser.next_non_trivia()
    return root


def fast_forward(parser: Parser, parent: Element | None, stops: frozenset[TokenKind]) -> Blob:
    """Scan from the current token to the first depth-zero stop token.

    The returned blob ends with the stop token, or at end of input. The cursor
    is left on the stop token.
    """
    blob = Blob(parent, parser.offset)
    return _fast_forward_into(parser, blob, stops)


def _fast_forward_into(parser: Parser, blob: Blob, stops: frozenset[TokenKind]) -> Blob:
    nesting = _Nesting()
    token = parser.token
    while token is not None and (nesting.active or token.kind not in stops):
        if _scan_token(parser, blob, token, nesting, stops):
            parser.next_non_trivia()
        token = parser.token

    blob.set_end_offset(token.range.end if token is not None else len(parser.source))
    return blob


def _scan_token(
    parser: Parser,
    blob: Blob,
    token: Token,
    nesting: _Nesting,
    stops: frozenset[TokenKind],
) -> bool:
    """Handle one token of a scan. Returns False when the current token must be scanned again."""
    kind = token.kind
    if kind.is_trivia:
        return True
    if nesting.track(kind):
        blob.append_raw(parser.text(token))
        return True

    match kind:
        case TokenKind.STRING:
            StringLiteral(blob, token.offset, parser.text(token))
            return True
        case TokenKind.VARIABLE:
            return _scan_variable(parser, blob, token)
        case TokenKind.INCLUDE | TokenKind.REQUIRE | TokenKind.CONTAIN:
            return parse_requirement_list(parser, blob)
        case TokenKind.IDENTIFIER | TokenKind.CLASS:
            return _scan_identifier(parser, blob, nesting, stops)
        case TokenKind.CASE:
            parse_case(parser, blob)
            return True
        case TokenKind.IF:
            parse_if(parser, blob, allow_elsif=True)
            return True
        case TokenKind.UNLESS:
            parse_if(parser, blob, allow_elsif=False)
            return True
        case TokenKind.DOT:
            return _scan_method_call(parser, blob)

    if kind.category == TokenCategory.FUNCTION:
        return _scan_function_call(parser, blob)
    blob.append_raw(parser.text(token))
    return True


def _scan_variable(parser: Parser, blob: Blob, token: Token) -> bool:
    name = parser.text(token)
    following = parser.next_non_trivia()
    if following is not None and following.kind == TokenKind.EQUALS:
        VariableDefinition(blob, token.offset, name)
        return True
    Variable(blob, token.offset, name)
    return False


def _scan_identifier(
    parser: Parser,
    blob: Blob,
    nesting: _Nesting,
    stops: frozenset[TokenKind],
) -> bool:
    token = parser.token
    assert token is not None
    name = parser.text(token)

    if token.kind == TokenKind.IDENTIFIER:
        following = parser.next_non_trivia()
        following_kind = following.kind if following is not None else None
        if name == "Class" and following_kind == TokenKind.LBRACKET:
            bracket = parser.sequence.index
            parser.previous_non_trivia()
            if not parse_class_reference(parser, blob, report=False):
                return True
            # `Class[$name]` and friends are plain type references.
            parser.sequence.move_to(bracket)
        if following_kind == TokenKind.LPAREN:
            call = FunctionCall(blob, token.offset, name)
            parser.move_next()
            fast_forward(parser, call, _CALL_STOPS)
            return True
        if following_kind == TokenKind.LBRACKET and name[:1].isupper():
            reference = TypeReference(blob, token.offset, name)
            parser.move_next()
            fast_forward(parser, reference, _INDEX_STOPS)
            return True
        parser.previous_non_trivia()

    if nesting.brackets != 0 or nesting.parens != 0:
        blob.append_raw(name)
        return True

    following = parser.next_non_trivia()
    if following is None:
        blob.append_raw(name)
        return False

    # `if $x == foo {` ends the condition; it does not open a `foo` resource.
    brace_ends_scan = TokenKind.LBRACE in stops and not nesting.active
    if following.kind == TokenKind.LBRACE and not brace_ends_scan:
        parse_resource(parser, blob, name, token.offset)
        return True
    if token.kind == TokenKind.CLASS and following.kind == TokenKind.IDENTIFIER:
        declaration = ClassDecl(blob, token.offset)
        parse_class_internal(parser, declaration, Identifier(None, following.offset, parser.text(following)))
        return True

    blob.append_raw(name)
    return False


def _scan_function_call(parser: Parser, blob: Blob) -> bool:
    token = parser.token
    assert token is not None
    call = FunctionCall(blob, token.offset, parser.text(token))
    following = parser.next_non_trivia()
    if following is not None and following.kind == TokenKind.LPAREN:
        parser.move_next()
        fast_forward(parser, call, _CALL_STOPS)
        return True
    parser.previous_non_trivia()
    return True


def _scan_method_call(parser: Parser, blob: Blob) -> bool:
    token = parser.move_next()
    if token is None:
        return False
    if token.kind == TokenKind.IDENTIFIER or token.kind.category == TokenCategory.FUNCTION:
        return _scan_function_call(parser, blob)
    blob.append_raw(".")
    return False


def parse_requirement_list(parser: Parser, parent: Element) -> bool:
    """`include`/`require`/`contain` with bare, quoted, `Class['x']`, bracketed or parenthesised names.

    Returns False when the cursor stopped on a token the caller still has to scan.
    """
    token = parser.token
    assert token is not None and token.kind in _REQUIREMENT_KINDS
    call = FunctionCall(parent, token.offset, parser.text(token))

    following = parser.next_non_trivia()
    if following is None:
        return False
    if following.kind in _REQUIREMENT_NAME_KINDS:
        _parse_requirement_names(parser, call)
        return False

    closing = _CLOSING.get(following.kind)
    if closing is None:
        return False
    parser.next_non_trivia()
    _parse_requirement_names(parser, call)
    if not parser.at(closing) and parser.token is not None:
        fast_forward(parser, call, frozenset({closing}))
    return parser.token is not None


def _parse_requirement_names(parser: Parser, call: FunctionCall) -> None:
    token = parser.token
    while token is not None and token.kind in _REQUIREMENT_NAME_KINDS:
        text = parser.text(token)
        if token.kind == TokenKind.STRING:
            _class_ref(call, token.offset, _unquote(text), name_offset=token.offset + 1)
        elif text == "Class":
            start = parser.sequence.index
            if parse_class_reference(parser, call):
                parser.sequence.move_to(start)
                if not _skip_index(parser, call):
                    return
        else:
            _class_ref(call, token.offset, text)

        token = parser.next_non_trivia()
        if token is None or token.kind != TokenKind.COMMA:
            return
        token = parser.next_non_trivia()


def parse_class_reference(parser: Parser, parent: Element, *, report: bool = True) -> bool:
    """Parse `Class['name']` starting on `Class`. Returns True on a malformed reference.

    On success the cursor is on the closing `]`; on failure it is on the
    offending token and nothing was attached to `parent`. With `report` off a
    failure leaves no diagnostic.
    """
    token = parser.next_non_trivia()
    if token is not None and token.kind == TokenKind.LBRACKET:
        token = parser.next_non_trivia()
        if token is not None and token.kind == TokenKind.STRING:
            closing = parser.next_non_trivia()
            if closing is not None and closing.kind == TokenKind.RBRACKET:
                _class_ref(parent, token.offset, _unquote(parser.text(token)), name_offset=token.offset + 1)
                return False

    if report:
        parser.error(PARSER_MALFORMED_CLASS_REFERENCE)
    return True


def _skip_index(parser: Parser, parent: Element) -> bool:
    """From `Class`, scan its `[...]` into a blob under `parent`.

    Returns False when no bracket follows; the cursor is then on that token.
    Otherwise the cursor ends on the matching `]`, or past the end.
    """
    token = parser.next_non_trivia()
    if token is None or token.kind != TokenKind.LBRACKET:
        return False
    parser.move_next()
    fast_forward(parser, parent, _INDEX_STOPS)
    return True


def _class_ref(parent: Element | None, offset: int, name: str, *, name_offset: int | None = None) -> ClassRef:
    reference = ClassRef(parent, offset)
    reference.set_name(Identifier(None, name_offset if name_offset is not None else offset, name))
    return reference


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] in "'\"" and text[-1] == text[0]:
        return text[1:-1]
    return text[1:]


def parse_class(parser: Parser, parent: Element) -> None:
    offset = parser.offset
    token = parser.next_non_trivia()
    if token is None:
        return
    if token.kind != TokenKind.IDENTIFIER:
        parser.previous_non_trivia()
        return
    declaration = ClassDecl(parent, offset)
    parse_class_internal(parser, declaration, Identifier(None, token.offset, parser.text(token)))


def parse_class_internal(parser: Parser, declaration: ClassDecl, name: Identifier) -> None:
    """Rest of a class after its name: `(params)`, `inherits Parent`, `{ body }`."""
    declaration.set_name(name)
    token = parser.next_non_trivia()
    if token is not None and token.kind == TokenKind.LPAREN:
        declaration.set_params(parse_params(parser, declaration))
        token = parser.next_non_trivia()

    if token is not None and token.kind == TokenKind.INHERITS:
        token = parser.next_non_trivia()
        if token is not None and token.kind == TokenKind.IDENTIFIER:
            declaration.set_inherits(_class_ref(None, token.offset, parser.text(token)))
            token = parser.next_non_trivia()

    _parse_body(parser, declaration, token)


def parse_define(parser: Parser, parent: Element) -> None:
    declaration = DefineDecl(parent, parser.offset)
    if parser.next_non_trivia() is None:
        return
    name = parser.collect_text(_DEFINE_NAME_STOPS)
    if name is None:
        return
    declaration.name = name

    token = parser.skip_trivia()
    if token is not None and token.kind == TokenKind.LPAREN:
        declaration.set_params(parse_params(parser, declaration))
        token = parser.next_non_trivia()
    _parse_body(parser, declaration, token)


def parse_node(parser: Parser, parent: Element) -> None:
    declaration = NodeDecl(parent, parser.offset)
    names: list[str] = []
    token = parser.next_non_trivia()
    while token is not None and token.kind != TokenKind.LBRACE:
        if token.kind != TokenKind.COMMA:
            names.append(parser.text(token))
        token = parser.next_non_trivia()
    declaration.names = tuple(names)
    _parse_body(parser, declaration, token)


def _parse_body(parser: Parser, declaration: Element, token: Token | None) -> None:
    if token is None or token.kind != TokenKind.LBRACE:
        parser.error(PARSER_EXPECTED_BODY)
        if token is not None:
            parser.previous_non_trivia()
        return
    parser.move_next()
    fast_forward(parser, declaration, _BODY_STOPS)


def parse_params(parser: Parser, container: ParamContainer) -> list[ClassParam]:
    """Parse `([Type] $name [= default], ...)` starting on `(`; the cursor ends on `)`."""
    params: list[ClassParam] = []
    type_range: TextRange | None = None
    variable: VariableDefinition | None = None
    default: Blob | None = None
    depth = 0

    token = parser.next_non_trivia()
    while token is not None and token.kind != TokenKind.RPAREN:
        kind = token.kind
        if variable is None:
            if kind == TokenKind.VARIABLE:
                variable = VariableDefinition(None, token.offset, parser.text(token))
                if type_range is None:
                    type_range = TextRange.empty(token.offset)
            else:
                type_range = token.range if type_range is None else type_range.cover(token.range)
                if kind == TokenKind.LBRACKET:
                    depth += 1
                elif kind == TokenKind.RBRACKET:
                    depth -= 1
                # Commas inside `Hash[String, Integer]` belong to the type.
                if kind != TokenKind.COMMA or depth > 0:
                    token = parser.next_non_trivia()
                    continue

        if kind == TokenKind.EQUALS:
            parser.next_non_trivia()
            default = fast_forward(parser, None, _PARAM_DEFAULT_STOPS)
            token = parser.token
            if token is None or token.kind == TokenKind.RPAREN:
                break

        if token.kind == TokenKind.COMMA:
            if variable is not None:
                params.append(_make_param(parser, container, variable, type_range, default))
            type_range = None
            variable = None
            default = None
            depth = 0
        token = parser.next_non_trivia()

    if variable is not None:
        params.append(_make_param(parser, container, variable, type_range, default))
    return params


def _make_param(
    parser: Parser,
    container: ParamContainer,
    variable: VariableDefinition,
    type_range: TextRange | None,
    default: Blob | None,
) -> ClassParam:
    assert type_range is not None, f"parameter {variable.name} has no type span"
    param = ClassParam(container, type_range.start, variable)
    param.type_name = parser.source[type_range.start : type_range.end] or DEFAULT_PARAM_TYPE
    if default is not None:
        param.set_default(default)
    return param


def parse_resource(parser: Parser, parent: Element, resource_type: str, offset: int) -> None:
    """Parse a resource body starting on its `{`; the cursor ends on the closing `}`."""
    if resource_type[:1].isupper():
        parse_resource_attrs(parser, Resource(parent, offset, resource_type))
        return

    token = parser.next_non_trivia()
    if token is None:
        return
    title = _parse_resource_title(parser, resource_type, token)
    if title is None:
        parser.error(PARSER_UNEXPECTED_RESOURCE_TITLE, token.range)
        fast_forward(parser, parent, _BODY_STOPS)
        return

    token = parser.next_non_trivia()
    if token is None or token.kind != TokenKind.COLON:
        parser.error(PARSER_MISSING_TITLE_COLON)
        if token is not None:
            fast_forward(parser, parent, _BODY_STOPS)
        return

    resource = Resource(parent, offset, resource_type)
    resource.set_title(title)
    parse_resource_attrs(parser, resource)


def _parse_resource_title(parser: Parser, resource_type: str, token: Token) -> Element | None:
    text = parser.text(token)
    match token.kind:
        case TokenKind.STRING if resource_type == "class":
            return _class_ref(None, token.offset, _unquote(text), name_offset=token.offset + 1)
        case TokenKind.STRING | TokenKind.IDENTIFIER | TokenKind.DEFAULT:
            return StringLiteral(None, token.offset, text)
        case TokenKind.VARIABLE:
            return Variable(None, token.offset, text)
        case TokenKind.LBRACKET:
            titles = Blob(None, token.offset)
            parser.move_next()
            return _fast_forward_into(parser, titles, _INDEX_STOPS)
    return None


def parse_resource_attrs(parser: Parser, resource: Resource) -> None:
    """Parse `name => value` pairs up to the resource's closing `}`."""
    name_token: Token | None = None
    value: Blob | None = None

    token = parser.next_non_trivia()
    while token is not None and token.kind != TokenKind.RBRACE:
        if name_token is None and _is_attribute_name(token):
            name_token = token
        if token.kind == TokenKind.PARAM_ASSIGN:
            parser.next_non_trivia()
            value = fast_forward(parser, None, _ATTRIBUTE_VALUE_STOPS)
            token = parser.token
            continue
        if token.kind == TokenKind.COMMA:
            if name_token is not None:
                _add_attribute(parser, resource, name_token, value)
            name_token = None
            value = None
        token = parser.next_non_trivia()

    if name_token is not None:
        _add_attribute(parser, resource, name_token, value)
    if token is not None:
        resource.set_end_offset(token.range.end)


def _is_attribute_name(token: Token) -> bool:
    return token.kind == TokenKind.STAR or token.kind.category in _ATTRIBUTE_NAME_CATEGORIES


def _add_attribute(parser: Parser, resource: Resource, name_token: Token, value: Blob | None) -> None:
    attribute = ResourceAttribute(None, name_token.offset, parser.text(name_token))
    if value is not None:
        attribute.set_value(value)
    resource.add_attribute(attribute)


def parse_case(parser: Parser, parent: Element) -> None:
    """Parse `case <expr> { <match>: { <body> } ... }`; the cursor ends on the closing `}`."""
    statement = CaseStmt(parent, parser.offset)
    parser.next_non_trivia()
    statement.control = fast_forward(parser, statement, _CONDITION_STOPS)

    token = parser.next_non_trivia()
    while token is not None and token.kind != TokenKind.RBRACE:
        arm = fast_forward(parser, statement, _CASE_ARM_STOPS)
        if parser.token is None:
            break
        token = parser.next_non_trivia()
        if token is None or token.kind != TokenKind.LBRACE:
            continue
        parser.next_non_trivia()
        body = fast_forward(parser, statement, _BODY_STOPS)
        statement.add_case(arm, body)
        token = parser.next_non_trivia()

    if token is not None:
        statement.set_end_offset(token.range.end)


def parse_if(parser: Parser, parent: Element, *, allow_elsif: bool) -> None:
    """Parse `if`/`unless` with its `elsif` chain and `else` branch.

    After the last branch the parser looks one token ahead for `elsif` or
    `else`; when neither follows it unreads that token so the enclosing scan
    sees it.
    """
    condition = Condition(parent, parser.offset)
    _parse_branch(parser, condition)

    token = parser.next_non_trivia()
    while token is not None and (
        token.kind == TokenKind.ELSE or (allow_elsif and token.kind == TokenKind.ELSIF)
    ):
        if token.kind == TokenKind.ELSE:
            following = parser.next_non_trivia()
            if following is None or following.kind != TokenKind.LBRACE:
                parser.previous_non_trivia()
                return
            parser.next_non_trivia()
            condition.otherwise = fast_forward(parser, condition, _BODY_STOPS)
            return

        nested = Condition(condition, token.offset)
        condition.otherwise = nested
        condition = nested
        _parse_branch(parser, condition)
        token = parser.next_non_trivia()

    parser.previous_non_trivia()


def _parse_branch(parser: Parser, condition: Condition) -> None:
    parser.next_non_trivia()
    condition.condition = fast_forward(parser, condition, _CONDITION_STOPS)
    parser.next_non_trivia()
    condition.consequence = fast_forward(parser, condition, _BODY_STOPS)
