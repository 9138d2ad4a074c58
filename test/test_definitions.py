"""
Definitions module behavioral tests (normalizer, order extractor, defaults).

Scope
- Validate both type spec shapes and their default declarations.
- Validate wildcard prefixes and Definition immutability/copying.
- Validate order extraction from the index-keyed arguments form, including
  misaligned indices.
- Validate default resolution (Unset dropping, fill-from-the-end, threshold).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from argbind import Definition, Signature, normalize, extract_order, resolve_defaults
from argbind.utils import Unset


class TestNormalize(TestCase):
    """Behavioral tests for normalize()."""

    def testNamedMapping(self):
        signature = normalize({"height": "number", "color": "string", "coords": "array"})
        self.assertEqual([d.name for d in signature.definitions], ["height", "color", "coords"])
        self.assertEqual([d.spec for d in signature.definitions], ["number", "string", "array"])
        self.assertEqual(signature.arity, 3)

    def testDefaultInfersSpec(self):
        color, = normalize({"color": ["red"]}).definitions
        self.assertEqual(color.spec, "string")
        self.assertEqual(color.default, "red")

    def testDefaultWithExplicitSpec(self):
        color, = normalize({"color": ["blue", "string|function"]}).definitions
        self.assertEqual(color.spec, "string|function")
        self.assertEqual(color.alternatives, ("string", "function"))
        self.assertEqual(color.default, "blue")

    def testDefaultIsHandedOutUnchanged(self):
        default = [1, 2]
        coords, = normalize({"coords": (default,)}).definitions
        self.assertIs(coords.default, default)
        self.assertEqual(coords.spec, "array")

    def testDefaultNoneIsNull(self):
        value, = normalize({"value": [None]}).definitions
        self.assertEqual(value.spec, "null")
        self.assertIsNone(value.default)

    def testNoDefaultIsUnset(self):
        height, = normalize({"height": "number"}).definitions
        self.assertIs(height.default, Unset)

    def testOrderedSingletons(self):
        signature = normalize([{"height": "number"}, {"color": ["red"]}, {"coords": "array"}])
        self.assertEqual([d.name for d in signature.definitions], ["height", "color", "coords"])
        self.assertEqual(signature.arity, 3)

    def testOrderedGroupsCountAsOne(self):
        signature = normalize([{"height": "number", "color": ["red"]}])
        self.assertEqual(len(signature.definitions), 2)
        self.assertEqual(signature.arity, 1)

    def testWildcardPrefix(self):
        wildcard, = normalize([{"*": "obj:object|string"}]).definitions
        self.assertTrue(wildcard.wildcard)
        self.assertEqual(wildcard.prefix, "obj")
        self.assertEqual(wildcard.spec, "object|string")

    def testWildcardWithoutPrefix(self):
        wildcard, = normalize({"*": "string"}).definitions
        self.assertEqual(wildcard.prefix, "")
        self.assertEqual(wildcard.spec, "string")

    def testNamedDefinitionHasNoPrefix(self):
        height, = normalize({"height": "number"}).definitions
        self.assertFalse(height.wildcard)
        self.assertIs(height.prefix, Unset)

    def testRepeatedWildcardsAreAllowed(self):
        signature = normalize([{"*": "s:string"}, {"*": "n:number"}])
        self.assertEqual([d.prefix for d in signature.definitions], ["s", "n"])

    def testRejectsWrongShapes(self):
        with self.assertRaises(TypeError):
            normalize("number")
        with self.assertRaises(TypeError):
            normalize(["number"])
        with self.assertRaises(TypeError):
            normalize(42)

    def testRejectsWrongSpecValues(self):
        with self.assertRaises(TypeError):
            normalize({"height": 3})
        with self.assertRaises(TypeError):
            normalize({1: "number"})
        with self.assertRaises(TypeError):
            normalize({"color": ["red", 3]})

    def testNamesAreKeptVerbatim(self):
        padded, = normalize({" n ": "number"}).definitions
        self.assertEqual(padded.name, " n ")
        self.assertFalse(normalize({" * ": "string"}).definitions[0].wildcard)

    def testRejectsBlankNames(self):
        with self.assertRaises(ValueError):
            normalize({"  ": "number"})

    def testRejectsMalformedDefaults(self):
        with self.assertRaises(ValueError):
            normalize({"color": []})
        with self.assertRaises(ValueError):
            normalize({"color": ["red", "string", "extra"]})

    def testRejectsDuplicatedNames(self):
        with self.assertRaises(ValueError):
            normalize([{"height": "number"}, {"height": "bool"}])


class TestDefinition(TestCase):
    """Behavioral tests for Definition."""

    def testFieldsAreReadOnly(self):
        definition = Definition("height", "number")
        with self.assertRaises(AttributeError):
            definition.order = (0,)
        with self.assertRaises(AttributeError):
            definition.name = "width"

    def testReplaceReturnsNewDefinition(self):
        definition = Definition("scope", "object|function")
        constrained = copy.replace(definition, order=[0, 1])
        self.assertEqual(constrained.order, (0, 1))
        self.assertEqual(constrained.spec, "object|function")
        self.assertEqual(definition.order, ())

    def testReplaceKeepsWildcardPrefix(self):
        wildcard = Definition("*", "obj:object")
        self.assertEqual(copy.replace(wildcard, order=[2]).prefix, "obj")

    def testRejectsBadPositions(self):
        with self.assertRaises(ValueError):
            Definition("height", "number", order=[-1])
        with self.assertRaises(TypeError):
            Definition("height", "number", order="01")
        with self.assertRaises(TypeError):
            Definition("height", "number", order=[True])
        with self.assertRaises(TypeError):
            Definition("height", "number", order=5)

    def testRejectsEmptyName(self):
        with self.assertRaises(ValueError):
            Definition("  ", "number")

    def testRepr(self):
        self.assertEqual(
            repr(Definition("height", "number", order=[0])),
            "definition(name='height', spec='number', prefix=Unset, order=(0,), default=Unset)"
        )

    def testRichRepr(self):
        self.assertEqual(
            dict(Definition("color", "string", default="red").__rich_repr__())["default"],
            "red"
        )


class TestExtractOrder(TestCase):
    """Behavioral tests for extract_order()."""

    def setUp(self):
        self.definitions = normalize([{"fn": "function"}, {"scope": "object|function"}]).definitions

    def testListIsCopied(self):
        arguments = [1, 2]
        values, definitions = extract_order(arguments, self.definitions)
        self.assertEqual(values, [1, 2])
        self.assertIsNot(values, arguments)
        self.assertEqual(definitions, self.definitions)

    def testIterablesAreListed(self):
        self.assertEqual(extract_order((1, 2), ())[0], [1, 2])
        self.assertEqual(extract_order((v for v in "ab"), ())[0], ["a", "b"])
        self.assertEqual(extract_order(range(3), ())[0], [0, 1, 2])

    def testOrderedForm(self):
        fn, scope = (lambda: None), {0: "Some Object"}
        values, (first, second) = extract_order({0: (fn, [0]), 1: (scope, [0, 1])}, self.definitions)
        self.assertEqual(values, [fn, scope])
        self.assertEqual(first.order, (0,))
        self.assertEqual(second.order, (0, 1))

    def testOrderedFormStringKeysAreSortedNumerically(self):
        values, (first, second) = extract_order({"1": ("b", [1]), "0": ("a", [0])}, self.definitions)
        self.assertEqual(values, ["a", "b"])
        self.assertEqual((first.order, second.order), ((0,), (1,)))

    def testInputDefinitionsAreUntouched(self):
        extract_order({0: ("a", [1]), 1: ("b", [0])}, self.definitions)
        self.assertEqual([d.order for d in self.definitions], [(), ()])

    def testMisalignedIndicesYieldNoConstraint(self):
        values, definitions = extract_order({0: ("a", [0]), 5: ("b", [1])}, self.definitions)
        self.assertEqual(values, ["a", "b"])
        self.assertEqual([d.order for d in definitions], [(0,), ()])

    def testShorterDefinitionListIsTolerated(self):
        values, definitions = extract_order({0: ("a", [0]), 1: ("b", [1])}, self.definitions[:1])
        self.assertEqual(values, ["a", "b"])
        self.assertEqual(len(definitions), 1)

    def testRejectsBadKeys(self):
        with self.assertRaises(ValueError):
            extract_order({"first": ("a", [0])}, self.definitions)
        with self.assertRaises(ValueError):
            extract_order({-1: ("a", [0])}, self.definitions)
        with self.assertRaises(ValueError):
            extract_order({"²": ("a", [0])}, self.definitions)

    def testRejectsBadEntries(self):
        with self.assertRaises(TypeError):
            extract_order({0: "a"}, self.definitions)
        with self.assertRaises(TypeError):
            extract_order({0: ("a", [0], "extra")}, self.definitions)

    def testRejectsScalars(self):
        with self.assertRaises(TypeError):
            extract_order("abc", self.definitions)
        with self.assertRaises(TypeError):
            extract_order(5, self.definitions)


class TestResolveDefaults(TestCase):
    """Behavioral tests for resolve_defaults()."""

    def setUp(self):
        self.signature = normalize({"height": "number", "color": ["red"], "coords": "array"})

    def testMissingValueGetsDefault(self):
        self.assertEqual(resolve_defaults([[3, 5, 3], 22], self.signature), [[3, 5, 3], 22, "red"])

    def testFullArgumentsGetNoDefault(self):
        self.assertEqual(
            resolve_defaults([[3, 5, 3], 22, "blue"], self.signature),
            [[3, 5, 3], 22, "blue"]
        )

    def testUnsetValuesAreDropped(self):
        self.assertEqual(resolve_defaults([Unset, 1, Unset, "x", [0]], self.signature), [1, "x", [0]])

    def testDroppedValuesCountAsMissing(self):
        self.assertEqual(resolve_defaults([Unset, 1, [0]], self.signature), [1, [0], "red"])

    def testThresholdIsRecheckedAfterEachDefault(self):
        signature = normalize({"a": "number", "b": ["x"], "c": [1]})
        self.assertEqual(resolve_defaults([5], signature), [5, "x", 1])
        self.assertEqual(resolve_defaults([5, 6], signature), [5, 6, "x"])

    def testOrderedThresholdCountsGroups(self):
        signature = normalize([{"a": "number", "b": ["x"]}])
        self.assertEqual(resolve_defaults([], signature), ["x"])
        self.assertEqual(resolve_defaults([5], signature), [5])

    def testNoneDefaultIsAppended(self):
        signature = normalize({"a": "number", "b": [None]})
        self.assertEqual(resolve_defaults([1], signature), [1, None])

    def testInputIsNotModified(self):
        values = [22]
        resolve_defaults(values, self.signature)
        self.assertEqual(values, [22])

    def testSignatureIsANamedTuple(self):
        self.assertIsInstance(self.signature, Signature)
        self.assertEqual(self.signature._fields, ("definitions", "arity"))


if __name__ == '__main__':
    unittest.main()
