"""Lexical scope chains. Each Environment is one frame: a mapping of names to values plus a link to the enclosing
frame. Frames are plain objects; one that is captured by a Function stays alive for as long as the Function does.
"""

from jsinterp.lang.error import JSReferenceError
from jsinterp.runtime.values import UNDEFINED


class Environment:
    """One scope frame."""

    def __init__(self, parent=None):
        self.parent = parent
        self.bindings = {}

    @classmethod
    def root(cls):
        """Returns a fresh top-level frame with the global `undefined` binding."""
        env = cls()
        env.declare("undefined", UNDEFINED)
        return env

    def child(self):
        """Returns a new frame whose parent is self."""
        return Environment(self)

    def declare(self, name, value):
        """Binds name in this frame only, shadowing outer bindings. Redeclaring in the same frame overwrites."""
        self.bindings[name] = value

    def resolve(self, name):
        """Returns the nearest frame defining name, or None."""
        env = self
        while env is not None:
            if name in env.bindings:
                return env
            env = env.parent
        return None

    def lookup(self, name, pos=-1):
        """Returns the value bound to name in the nearest enclosing frame. pos is the source offset reported in the
        JSReferenceError raised when no frame defines name.
        """
        env = self.resolve(name)
        if env is None:
            raise JSReferenceError(name, pos)
        return env.bindings[name]

    def assign(self, name, value, pos=-1):
        """Rebinds name in the nearest enclosing frame defining it. Never declares a new binding."""
        env = self.resolve(name)
        if env is None:
            raise JSReferenceError(name, pos)
        env.bindings[name] = value

    def depth(self):
        """Number of frames between self and the root."""
        depth = 0
        env = self.parent
        while env is not None:
            depth += 1
            env = env.parent
        return depth

    def __contains__(self, name):
        return self.resolve(name) is not None

    def __repr__(self):
        return f"Environment(names={sorted(self.bindings)}, depth={self.depth()})"
