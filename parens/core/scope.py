"""Name-to-value environments. Scopes form a chain: each child scope links to the scope it was created from, lookups
walk outward from the innermost scope, and bindings always go to the innermost scope.
"""

from parens.lang.error import IdentifierNotFound


class Scope:
    """Mutable mapping from identifier names to Expressions, optionally linked to a parent Scope."""

    def __init__(self, names=None, parent=None):
        self.names = dict(names) if names else {}
        self.parent = parent

    def bind(self, name, value):
        """Inserts or overwrites name in this scope. Last write wins."""
        self.names[name] = value

    def lookup(self, name):
        """Returns the value bound to name in the nearest scope of the chain. Expressions are immutable, so the bound
        value itself is handed out.
        """
        scope = self
        while scope is not None:
            if name in scope.names:
                return scope.names[name]
            scope = scope.parent
        raise IdentifierNotFound(name)

    def child(self, names=None):
        """Returns a new scope whose parent is self."""
        return Scope(names, parent=self)

    @property
    def depth(self):
        """Number of ancestors. The root scope has depth 0."""
        return 0 if self.parent is None else self.parent.depth + 1

    def __contains__(self, name):
        try:
            self.lookup(name)
        except IdentifierNotFound:
            return False
        return True

    def __repr__(self):
        return f"Scope(names={sorted(self.names)}, depth={self.depth})"
