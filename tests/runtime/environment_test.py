import unittest

from jsinterp.lang.error import JSReferenceError
from jsinterp.runtime.environment import Environment
from jsinterp.runtime.values import Number, String, UNDEFINED


class EnvironmentTestCase(unittest.TestCase):

    def test_root_has_undefined(self):
        env = Environment.root()
        self.assertIs(UNDEFINED, env.lookup("undefined"))
        self.assertIsNone(env.parent)

    def test_declare_and_lookup(self):
        env = Environment()
        env.declare("x", Number(1))
        self.assertEqual(Number(1), env.lookup("x"))

    def test_redeclare_overwrites(self):
        env = Environment()
        env.declare("x", Number(1))
        env.declare("x", String("two"))
        self.assertEqual(String("two"), env.lookup("x"))

    def test_lookup_walks_outward(self):
        root = Environment()
        root.declare("x", Number(1))
        inner = root.child().child()
        self.assertEqual(Number(1), inner.lookup("x"))
        self.assertEqual(2, inner.depth())

    def test_shadowing(self):
        root = Environment()
        root.declare("x", Number(1))
        inner = root.child()
        inner.declare("x", Number(2))

        self.assertEqual(Number(2), inner.lookup("x"))
        self.assertEqual(Number(1), root.lookup("x"))

    def test_assign_targets_nearest_frame(self):
        root = Environment()
        root.declare("x", Number(1))
        middle = root.child()
        middle.declare("x", Number(2))
        inner = middle.child()

        inner.assign("x", Number(3))
        self.assertEqual(Number(3), middle.lookup("x"))
        self.assertEqual(Number(1), root.lookup("x"))
        self.assertNotIn("x", inner.bindings)

    def test_undeclared(self):
        env = Environment.root().child()
        should_raise = [
            lambda: env.lookup("missing"),
            lambda: env.assign("missing", Number(1)),
        ]
        for case in should_raise:
            self.assertRaises(JSReferenceError, case)

    def test_assign_never_declares(self):
        root = Environment()
        with self.assertRaises(JSReferenceError) as ctx:
            root.child().assign("y", Number(1), pos=7)
        self.assertNotIn("y", root)
        self.assertEqual("y", ctx.exception.name)
        self.assertEqual(7, ctx.exception.start)

    def test_roots_are_independent(self):
        first, second = Environment.root(), Environment.root()
        first.declare("x", Number(1))
        self.assertNotIn("x", second)


if __name__ == '__main__':
    unittest.main()
