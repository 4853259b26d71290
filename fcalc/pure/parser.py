"""Recursive-descent parser for fcalc. Builds a Term tree from one line of source and decides, for every identifier,
whether it is resolved through the global bindings or bound by an enclosing function's parameter list.

Grammar, lowest precedence first:

```
<statement>      ::= "let" ID "=" <funcdef> | <funcdef>
<funcdef>        ::= "f" "(" <params> ")" "=>" <funcdef> | <additive>
<additive>       ::= <multiplicative> (("+" | "-") <multiplicative>)*
<multiplicative> ::= <exponent> (("*" | "/" | "//" | "%") <exponent>)*
<exponent>       ::= <factorial> ["^" <exponent>]                 ; right-associative
<factorial>      ::= <application> "!"*
<application>    ::= <primary> ("(" <args> ")")*                  ; f(1)(2) == (f(1))(2)
<primary>        ::= "(" <funcdef> ")" | "-" <application> | ID | NUMBER
<params>         ::= [ID ("," ID)*]
<args>           ::= [<funcdef> ("," <funcdef>)*]
```

Scoping: identifiers in a parameter list are local. While a function body is parsed, the names of its parameters
(and those of every still-open enclosing function) stay in scope, so an identifier in the body is local iff its name
is one of them. Every other identifier is global.
"""

from fcalc.lang.error import ParseError
from fcalc.pure.lexical import Lexer, TokenKind
from fcalc.pure.term import (Application, Assign, Div, Fact, FloorDiv, FuncDef, Id, Minus, Mod, Mult, Negation, Num,
                             ParamList, Plus, Pow)


ADDITIVE = {"+": Plus, "-": Minus}
MULTIPLICATIVE = {"*": Mult, "/": Div, "//": FloorDiv, "%": Mod}


class Parser:
    """One-shot parser over a single source string. Use parse()."""

    def __init__(self, src):
        self.src = src
        self.lex = Lexer(src)
        self.scopes = []  # parameter names of the function definitions currently open
        self.lookahead = self.lex.next_token()

    def statement(self):
        if self.lookahead.kind is TokenKind.LET:
            return self.assignment()
        return self.function_definition()

    def assignment(self):
        self.expect(TokenKind.LET)
        name = self.expect(TokenKind.ID).text
        self.expect(TokenKind.ASSIGN)
        return Assign(name, self.function_definition())

    def function_definition(self):
        if self.lookahead.kind is not TokenKind.FUNC:
            return self.additive()
        self.advance()

        self.expect(TokenKind.OPEN_PAREN)
        params = self.parameter_list()
        self.expect(TokenKind.CLOSE_PAREN)
        self.expect(TokenKind.ARROW)

        self.scopes.append(set(params.names))
        try:
            body = self.function_definition()
        finally:
            self.scopes.pop()

        return FuncDef(params, body)

    def parameter_list(self):
        return self.comma_list(lambda: Id(self.expect(TokenKind.ID).text, is_global=False))

    def argument_list(self):
        return self.comma_list(self.function_definition)

    def comma_list(self, element):
        """Parses zero or more elements separated by commas, up to (not including) a closing parenthesis."""
        if self.lookahead.kind is TokenKind.CLOSE_PAREN:
            return ParamList()

        nodes = [element()]
        while self.lookahead.kind is TokenKind.COMMA:
            self.advance()
            nodes.append(element())
        return ParamList(*nodes)

    def additive(self):
        lhs = self.multiplicative()
        while self.lookahead.kind is TokenKind.ADDITIVE:
            op = ADDITIVE[self.advance().text]
            lhs = op(lhs, self.multiplicative())
        return lhs

    def multiplicative(self):
        lhs = self.exponent()
        while self.lookahead.kind is TokenKind.MULTIPLICATIVE:
            op = MULTIPLICATIVE[self.advance().text]
            lhs = op(lhs, self.exponent())
        return lhs

    def exponent(self):
        base = self.factorial()
        if self.lookahead.kind is not TokenKind.EXPONENT:
            return base
        self.advance()
        return Pow(base, self.exponent())

    def factorial(self):
        operand = self.application()
        while self.lookahead.kind is TokenKind.FACT:
            self.advance()
            operand = Fact(operand)
        return operand

    def application(self):
        callee = self.primary()
        while self.lookahead.kind is TokenKind.OPEN_PAREN:
            self.advance()
            callee = Application(callee, self.argument_list())
            self.expect(TokenKind.CLOSE_PAREN)
        return callee

    def primary(self):
        token = self.lookahead

        if token.kind is TokenKind.OPEN_PAREN:
            self.advance()
            inner = self.function_definition()
            self.expect(TokenKind.CLOSE_PAREN)
            return inner

        if token.kind is TokenKind.ADDITIVE and token.text == "-":
            self.advance()
            return Negation(self.application())

        if token.kind is TokenKind.ID:
            self.advance()
            return Id(token.text, is_global=not self.is_bound(token.text))

        self.expect(TokenKind.NUMERIC)
        return Num(token.text)

    def is_bound(self, name):
        """Whether name is a parameter of an enclosing function definition."""
        return any(name in scope for scope in self.scopes)

    def advance(self):
        """Consumes the lookahead token and returns it."""
        token = self.lookahead
        self.lookahead = self.lex.next_token()
        return token

    def expect(self, kind):
        """Consumes the lookahead token if it is of kind, else fails."""
        if self.lookahead.kind is not kind:
            self.fail(self.lookahead)
        return self.advance()

    def fail(self, token):
        """Raises a ParseError naming token and the token that follows it."""
        following = self.lex.next_token() if token.kind is not TokenKind.EOF else token
        msg = "'{}' has unexpected '{}' before '{}'"
        raise ParseError(msg, (self.src, token, following), start=token.start, end=max(token.end, token.start + 1))


def parse(src):
    """Parses the whole of src into a single Term. Fails if tokens remain after a complete statement."""
    parser = Parser(src)
    result = parser.statement()
    if parser.lookahead.kind is not TokenKind.EOF:
        parser.fail(parser.lookahead)
    return result
