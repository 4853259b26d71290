"""Substitution-based reduction of fcalc terms.

There are no environments or closures: applying a function substitutes its (already reduced) arguments for the
local identifiers of its body and reduces the result. Whatever cannot be reduced further is returned as is, so
unknown names, under-applied functions and arithmetic over either are legitimate results rather than errors. Reducing
a reduced term gives the same term back.
"""

from fcalc.lang import numerical
from fcalc.pure.term import (Application, Assign, BinaryOp, Div, Fact, FloorDiv, FuncDef, Id, Minus, Mod, Mult,
                             Negation, Num, ParamList, Plus, Pow)


OPERATIONS = {
    Plus: numerical.add,
    Minus: numerical.subtract,
    Mult: numerical.multiply,
    Div: numerical.divide,
    FloorDiv: numerical.floor_divide,
    Mod: numerical.modulo,
    Pow: numerical.power,
}


def is_num(term, num=None):
    """Whether term is a Num (equal to num, if given)."""
    return isinstance(term, Num) and (num is None or term.num == num)


class Reducer:
    """Reduces terms against a namespace of global bindings. Assign is the only term that writes to it."""

    def __init__(self, namespace):
        self.namespace = namespace

    def reduce(self, term):
        if isinstance(term, (Num, FuncDef)):
            return term
        elif isinstance(term, Id):
            return self.reduce_id(term)
        elif isinstance(term, Assign):
            return self.reduce_assign(term)
        elif isinstance(term, Negation):
            return self.reduce_unary(term, numerical.negate)
        elif isinstance(term, Fact):
            return self.reduce_unary(term, numerical.factorial)
        elif isinstance(term, BinaryOp):
            return self.reduce_binary(term)
        elif isinstance(term, ParamList):
            return ParamList(*(self.reduce(node) for node in term.nodes))
        elif isinstance(term, Application):
            return self.reduce_application(term)
        raise TypeError(f"cannot reduce {term!r}")

    def reduce_id(self, term):
        """Global names resolve to their binding; local and unknown names are left alone."""
        if not term.is_global:
            return term

        bound = self.resolve(term.name)
        return term if bound is None else bound

    def resolve(self, name):
        """Current value of the global name: its FuncDef as is, or its reduced value. None if name is unbound."""
        bound = self.namespace.lookup(name)
        if bound is None or isinstance(bound, FuncDef):
            return bound
        return self.reduce(bound)

    def reduce_assign(self, term):
        """Binds the raw FuncDef or the reduced value of term.rhs. If the value does not reduce to a number or
        function, nothing is bound and term is returned unchanged.
        """
        if isinstance(term.rhs, FuncDef):
            value = term.rhs
        else:
            value = self.reduce(term.rhs)
            if not value.final:
                return term

        self.namespace.bind(term.name, value)
        return value

    def reduce_unary(self, term, operation):
        operand = self.reduce(term.operand)
        if not is_num(operand):
            return type(term)(operand)
        return Num(operation(operand.num))

    def reduce_binary(self, term):
        lhs = self.reduce(term.lhs)

        # multiplicative identities only need the left operand
        if isinstance(term, Mult) and is_num(lhs, 0):
            return Num(0)
        elif isinstance(term, Mult) and is_num(lhs, 1):
            return self.reduce(term.rhs)

        rhs = self.reduce(term.rhs)

        if isinstance(term, Plus) and is_num(rhs, 0):
            return lhs
        elif isinstance(term, Plus) and is_num(lhs, 0):
            return rhs

        if not (is_num(lhs) and is_num(rhs)):
            return type(term)(lhs, rhs)
        return Num(OPERATIONS[type(term)](lhs.num, rhs.num))

    def reduce_application(self, term):
        callee = self.reduce(term.callee)
        args = self.reduce(term.args)

        if not isinstance(callee, FuncDef):
            return Application(callee, args)
        return self.apply(callee, args.nodes)

    def apply(self, func, args):
        """Applies func to the reduced terms in args.

        Arguments are paired with formals by position. With fewer arguments than formals, the result is a FuncDef
        over the formals left unpaired. Arguments beyond the formals are passed on to the FuncDef the body reduces
        to; if the body reduces to anything else, they are left in a stuck Application.

        Global names in the body are resolved against the namespace while it is copied, so a FuncDef returned here
        keeps the values its globals had at the time of the application.
        """
        formals = func.params.names
        bindings = dict(zip(formals, args))

        if len(args) < len(formals):
            rest = ParamList(*func.params.nodes[len(args):])
            return FuncDef(rest, func.body.sub({name: arg for name, arg in bindings.items()
                                               if name not in rest.names}, self.resolve))

        result = self.reduce(func.body.sub(bindings, self.resolve))

        extra = list(args[len(formals):])
        if not extra:
            return result
        elif isinstance(result, FuncDef):
            return self.apply(result, extra)
        return Application(result, ParamList(*extra))
