"""Abstract syntax tree for fcalc.

Every node is a Term with a list of child `nodes`. Trees are never mutated after construction: reduction and
substitution always build new nodes, so a subtree may safely appear in both the tree before and after a reduction.

```
Num(decimal)                      ; number literal or numeric result
Id(name, is_global)               ; is_global is fixed by the parser and never changes
Plus|Minus|Mult|Div|FloorDiv|Mod|Pow(lhs, rhs)
Negation(operand) | Fact(operand)
Assign(name, value)               ; let name = value
ParamList(node*)                  ; formal parameters, or call arguments
FuncDef(params, body)             ; f(params) => body
Application(callee, args)         ; callee(args)
```

A global Id is looked up by name in the session's bindings every time it is reduced, and again whenever a function body
holding it is copied for an application. A local Id can only disappear by substitution when the function that binds
it is applied; until then it is its own normal form.
"""

from abc import ABC, abstractmethod

from fcalc.lang.numerical import number, render, strip


class Term(ABC):
    """Superclass of every node in an fcalc syntax tree."""
    final = False  # whether this is a finished value that can be bound by `let`

    def __init__(self, *nodes):
        self.nodes = list(nodes)
        self._cls = type(self).__name__

    @property
    @abstractmethod
    def expr(self):
        """Source-like rendering of this term, with explicit parentheses around compound operands."""

    @abstractmethod
    def sub(self, bindings, resolve=None):
        """Returns this term with every local Id named in bindings (name: term) replaced by its bound term. Inner
        FuncDefs hide the bindings of their own parameter names. If given, resolve(name) returns the current value of
        a global name (or None if it is unbound), and every bound global Id is replaced by it.
        """

    @property
    def value(self):
        """Non-node payload of this term, compared by __eq__."""
        return None

    @property
    def atomic(self):
        """Whether this term can be used as an operand without surrounding parentheses."""
        return False

    def wrap(self):
        return self.expr if self.atomic else f"({self.expr})"

    def _details(self):
        return ""

    def display(self, indents=0):
        """Recursively displays Term tree with readable format.

        Format:
        <Term>(expr='<expr>', nodes=[
            <Term>(expr='<expr>', nodes=[
                ...
                <Term>(expr='<expr>')  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{self._cls}(expr='{self.expr}'{self._details()}"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __repr__(self):
        return f"{self._cls}('{self.expr}')"

    def __str__(self):
        return self.expr

    def __eq__(self, other):
        return type(other) is type(self) and self.value == other.value and self.nodes == other.nodes

    __hash__ = None


class Num(Term):
    final = True

    def __init__(self, num):
        super().__init__()
        self.num = number(num) if isinstance(num, (str, int)) else strip(num)

    @property
    def value(self):
        return self.num

    @property
    def expr(self):
        return render(self.num)

    @property
    def atomic(self):
        return self.num >= 0

    def sub(self, bindings, resolve=None):
        return self


class Id(Term):

    def __init__(self, name, is_global=True):
        super().__init__()
        self.name = name
        self.is_global = is_global

    @property
    def value(self):
        return self.name, self.is_global

    @property
    def expr(self):
        return self.name

    @property
    def atomic(self):
        return True

    def _details(self):
        return f", scope={'global' if self.is_global else 'local'}"

    def sub(self, bindings, resolve=None):
        if not self.is_global:
            return bindings.get(self.name, self)

        bound = resolve(self.name) if resolve is not None else None
        return self if bound is None else bound


class BinaryOp(Term):
    """Infix arithmetic. Subclasses only name their symbol."""
    SYMBOL = ""

    def __init__(self, lhs, rhs):
        super().__init__(lhs, rhs)

    @property
    def lhs(self):
        return self.nodes[0]

    @property
    def rhs(self):
        return self.nodes[1]

    @property
    def expr(self):
        return f"{self.lhs.wrap()} {self.SYMBOL} {self.rhs.wrap()}"

    def sub(self, bindings, resolve=None):
        return type(self)(self.lhs.sub(bindings, resolve), self.rhs.sub(bindings, resolve))


class Plus(BinaryOp):
    SYMBOL = "+"


class Minus(BinaryOp):
    SYMBOL = "-"


class Mult(BinaryOp):
    SYMBOL = "*"


class Div(BinaryOp):
    SYMBOL = "/"


class FloorDiv(BinaryOp):
    SYMBOL = "//"


class Mod(BinaryOp):
    SYMBOL = "%"


class Pow(BinaryOp):
    SYMBOL = "^"


class UnaryOp(Term):

    def __init__(self, operand):
        super().__init__(operand)

    @property
    def operand(self):
        return self.nodes[0]

    def sub(self, bindings, resolve=None):
        return type(self)(self.operand.sub(bindings, resolve))


class Negation(UnaryOp):

    @property
    def expr(self):
        return f"-{self.operand.wrap()}"


class Fact(UnaryOp):

    @property
    def expr(self):
        return f"{self.operand.wrap()}!"


class Assign(Term):

    def __init__(self, name, rhs):
        super().__init__(rhs)
        self.name = name

    @property
    def value(self):
        return self.name

    @property
    def rhs(self):
        return self.nodes[0]

    @property
    def expr(self):
        return f"let {self.name} = {self.rhs.expr}"

    def sub(self, bindings, resolve=None):
        return Assign(self.name, self.rhs.sub(bindings, resolve))


class ParamList(Term):
    """Comma-separated terms: the formals of a FuncDef or the actual arguments of an Application."""

    @property
    def expr(self):
        return ", ".join(node.expr for node in self.nodes)

    @property
    def names(self):
        return [node.name for node in self.nodes if isinstance(node, Id)]

    def sub(self, bindings, resolve=None):
        return ParamList(*(node.sub(bindings, resolve) for node in self.nodes))

    def __len__(self):
        return len(self.nodes)


class FuncDef(Term):
    final = True

    def __init__(self, params, body):
        super().__init__(params, body)

    @property
    def params(self):
        return self.nodes[0]

    @property
    def body(self):
        return self.nodes[1]

    @property
    def expr(self):
        return f"f({self.params.expr}) => {self.body.expr}"

    def sub(self, bindings, resolve=None):
        inner = {name: term for name, term in bindings.items() if name not in self.params.names}
        if not inner and resolve is None:
            return self
        return FuncDef(self.params, self.body.sub(inner, resolve))


class Application(Term):

    def __init__(self, callee, args):
        super().__init__(callee, args)

    @property
    def callee(self):
        return self.nodes[0]

    @property
    def args(self):
        return self.nodes[1]

    @property
    def expr(self):
        callee = self.callee.expr if isinstance(self.callee, (Id, Application)) else f"({self.callee.expr})"
        return f"{callee}({self.args.expr})"

    @property
    def atomic(self):
        return True

    def sub(self, bindings, resolve=None):
        return Application(self.callee.sub(bindings, resolve), self.args.sub(bindings, resolve))
