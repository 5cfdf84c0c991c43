"""Lexical environments. Each scope is a dict of bindings plus a link to its enclosing scope."""


class Environment:
    """A scope. Closures hold a plain reference to the Environment they were created in, so several closures (and the
    call frames running them) share one scope, and it lives as long as the last of them.
    """

    def __init__(self, outer=None):
        self.store = {}
        self.outer = outer

    def define(self, name, value):
        """Binds name in this scope only, overwriting any previous binding here. Outer scopes are never touched."""
        self.store[name] = value
        return value

    def get(self, name):
        """Returns the value bound to name in this scope or the nearest enclosing one, or None."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def new_enclosed(self):
        return Environment(outer=self)

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"Environment({', '.join(self.store)}{', outer=...' if self.outer else ''})"
