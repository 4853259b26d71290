"""Global bindings of an fcalc session: name -> reduced value or FuncDef."""


class Namespace:
    """Governs the global names of one session. Rebinding a name shadows its previous value without forgetting it;
    lookup always sees the newest binding.
    """

    def __init__(self):
        self._bindings = {}  # dict of name: [terms, oldest first]

    def bind(self, name, term):
        self._bindings.setdefault(name, []).append(term)

    def lookup(self, name):
        """Returns the current binding of name, or None if it is unbound."""
        history = self._bindings.get(name)
        return history[-1] if history else None

    def history(self, name):
        """Every value name has been bound to, oldest first."""
        return list(self._bindings.get(name, []))

    def remove(self, name):
        """Drops name and its history. Returns whether name was bound."""
        return self._bindings.pop(name, None) is not None

    def clear(self):
        self._bindings = {}

    def items(self):
        """(name, current binding) pairs, sorted by name."""
        return [(name, history[-1]) for name, history in sorted(self._bindings.items())]

    def __contains__(self, name):
        return name in self._bindings

    def __iter__(self):
        return iter(sorted(self._bindings))

    def __len__(self):
        return len(self._bindings)
