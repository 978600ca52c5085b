import unittest

from parens.core.expression import Integer, String
from parens.core.scope import Scope
from parens.lang.error import IdentifierNotFound, ScopeError


class ScopeTestCase(unittest.TestCase):

    def test_bind_and_lookup(self):
        scope = Scope()
        scope.bind("a", Integer(1))
        scope.bind("b", String("two"))

        self.assertEqual(Integer(1), scope.lookup("a"))
        self.assertEqual(String("two"), scope.lookup("b"))

        scope.bind("a", Integer(3))
        self.assertEqual(Integer(3), scope.lookup("a"))

    def test_lookup_missing(self):
        with self.assertRaises(IdentifierNotFound) as context:
            Scope({"a": Integer(1)}).child().lookup("missing")
        self.assertEqual("missing", context.exception.name)
        self.assertIsInstance(context.exception, ScopeError)

    def test_chain(self):
        root = Scope({"a": Integer(1), "b": Integer(2)})
        child = root.child({"b": Integer(20)})
        grandchild = child.child()

        self.assertEqual(Integer(1), grandchild.lookup("a"))
        self.assertEqual(Integer(20), grandchild.lookup("b"))
        self.assertEqual(Integer(2), root.lookup("b"))

        grandchild.bind("a", Integer(100))
        self.assertEqual(Integer(100), grandchild.lookup("a"))
        self.assertEqual(Integer(1), child.lookup("a"))
        self.assertEqual(Integer(1), root.lookup("a"))

        self.assertEqual([0, 1, 2], [root.depth, child.depth, grandchild.depth])

    def test_contains(self):
        root = Scope({"a": Integer(1)})
        child = root.child({"b": Integer(2)})

        self.assertIn("a", child)
        self.assertIn("b", child)
        self.assertNotIn("b", root)
        self.assertNotIn("c", child)

    def test_names_are_copied(self):
        names = {"a": Integer(1)}
        scope = Scope(names)
        scope.bind("b", Integer(2))
        self.assertNotIn("b", names)


if __name__ == '__main__':
    unittest.main()
