"""Tests for class descriptors and live-class introspection."""

import unittest

import pytest

import sample_cases
from steprunner.reflection import (
    ClassDescriptor,
    ConstructorInfo,
    MethodInfo,
    MethodKind,
    describe,
    expect,
    type_name,
)


def descriptor(name, bases=(), methods=()):
    return ClassDescriptor(
        name=name,
        qualified_name=f"fixtures.{name}",
        bases=tuple(bases),
        declared_methods=tuple(MethodInfo(m, declaring_class=f"fixtures.{name}") for m in methods),
    )


class TestLineage:
    """Tests for walking the supertype chain."""

    def test_single_inheritance_is_most_derived_first(self):
        """Test a simple chain is walked child to root."""
        root = descriptor("Root")
        middle = descriptor("Middle", [root])
        leaf = descriptor("Leaf", [middle])

        assert [d.name for d in leaf.lineage()] == ["Leaf", "Middle", "Root"]

    def test_diamond_follows_method_resolution_order(self):
        """Test a diamond is linearised the way Python orders it."""
        root = descriptor("Root")
        left = descriptor("Left", [root])
        right = descriptor("Right", [root])
        leaf = descriptor("Leaf", [left, right])

        assert [d.name for d in leaf.lineage()] == ["Leaf", "Left", "Right", "Root"]

    def test_inconsistent_hierarchy_raises(self):
        """Test that an impossible ordering is rejected."""
        a = descriptor("A")
        b = descriptor("B", [a])
        broken = descriptor("Broken", [a, b])

        with pytest.raises(TypeError):
            broken.lineage()

    def test_all_methods_keeps_one_entry_per_declaration(self):
        """Test overridden methods are listed once per declaring class."""
        parent = descriptor("Parent", methods=["testA", "testB"])
        child = descriptor("Child", [parent], methods=["testA"])

        names = [(m.declaring_class, m.name) for m in child.all_methods()]
        assert names == [
            ("fixtures.Child", "testA"),
            ("fixtures.Parent", "testA"),
            ("fixtures.Parent", "testB"),
        ]

    def test_is_subtype_of(self):
        """Test subtype checks against indirect ancestors."""
        root = descriptor("Root")
        leaf = descriptor("Leaf", [descriptor("Middle", [root])])

        assert leaf.is_subtype_of("fixtures.Root")
        assert leaf.is_subtype_of("fixtures.Leaf")
        assert not root.is_subtype_of("fixtures.Leaf")

    def test_no_args_constructor(self):
        """Test finding the zero-argument constructor."""
        with_one = ClassDescriptor(
            "A",
            "fixtures.A",
            constructors=(ConstructorInfo(("int",)), ConstructorInfo(())),
        )
        without = ClassDescriptor("B", "fixtures.B", constructors=(ConstructorInfo(("int",)),))

        assert with_one.no_args_constructor() == ConstructorInfo(())
        assert without.no_args_constructor() is None


class TestDescribe:
    """Tests for describing live classes."""

    def test_describes_declared_methods(self):
        """Test that declared methods and their arity are recorded."""
        desc = describe(sample_cases.TakesArgument)
        methods = {m.name: m for m in desc.declared_methods}

        assert set(methods) == {"testPlain", "testWithArgument"}
        assert methods["testPlain"].arity == 0
        assert methods["testWithArgument"].parameter_types == ("object",)
        assert methods["testPlain"].declaring_class == type_name(sample_cases.TakesArgument)

    def test_helpers_are_declared_methods(self):
        methods = {m.name for m in describe(sample_cases.TwoTests).declared_methods}

        assert methods == {"testSomething", "testSomethingElse", "helper"}

    def test_patched_method_arity_includes_the_mock(self):
        """Test a mock.patch decorated test is described by its wrapped signature."""
        methods = {m.name: m for m in describe(sample_cases.PatchedTest).declared_methods}

        assert methods["testPatched"].arity == 1

    def test_lineage_matches_mro(self):
        """Test the descriptor lineage matches the class's MRO."""
        desc = describe(sample_cases.OverridesTestInParent)

        assert [d.target for d in desc.lineage()] == list(sample_cases.OverridesTestInParent.__mro__)

    def test_inherited_methods_are_included(self):
        """Test that methods from base classes are walked too."""
        names = [m.name for m in describe(sample_cases.InheritedTests).all_methods()]

        assert "testFoo" in names
        assert "testBar" in names
        assert "setUp" in names

    def test_annotations_become_parameter_types(self):
        """Test annotated parameters use the annotation's name."""

        class Annotated:
            def method(self, count: int, *rest: str, **options) -> bool:
                return True

        method = describe(Annotated).declared_methods[0]
        assert method.parameter_types == ("int", "*str", "**object")
        assert method.return_type == "bool"

    def test_class_and_static_methods(self):
        """Test the bound argument is dropped only where there is one."""

        class Kinds:
            @classmethod
            def make(cls):
                pass

            @staticmethod
            def util(value):
                pass

        methods = {m.name: m for m in describe(Kinds).declared_methods}
        assert methods["make"].kind is MethodKind.CLASS
        assert methods["make"].arity == 0
        assert methods["util"].kind is MethodKind.STATIC
        assert methods["util"].arity == 1

    def test_private_methods_are_not_public(self):
        """Test methods starting with an underscore are marked non-public."""

        class Private:
            def _hidden(self):
                pass

        assert describe(Private).declared_methods[0].is_public is False

    def test_zero_argument_constructor(self):
        """Test a TestCase can be constructed without arguments."""
        desc = describe(sample_cases.SimpleCase)
        constructor = desc.no_args_constructor()

        assert constructor is not None
        assert constructor.is_public
        assert isinstance(constructor.factory(), sample_cases.SimpleCase)

    def test_required_arguments_mean_no_zero_argument_constructor(self):
        """Test constructors with required arguments are not zero-argument."""
        desc = describe(sample_cases.NoSuitableConstructor)

        assert desc.no_args_constructor() is None
        assert desc.constructors[0].arity == 3

    def test_abstract_class(self):
        """Test abstract classes are flagged."""
        assert describe(sample_cases.AbstractCase).is_abstract
        assert not describe(sample_cases.SimpleCase).is_abstract

    def test_expected_exception_metadata(self):
        """Test expect() and expectedFailure are recorded."""
        methods = {m.name: m for m in describe(sample_cases.ExpectedExceptions).declared_methods}

        assert methods["testRaisesExpected"].expected is ValueError
        assert methods["testKnownBroken"].expected is Exception

    def test_expect_returns_the_function(self):
        """Test the decorator leaves the function callable."""

        @expect(KeyError)
        def check():
            return "called"

        assert check() == "called"

    def test_describe_rejects_non_classes(self):
        """Test that describing an instance is an error."""
        with pytest.raises(TypeError):
            describe(sample_cases.SimpleCase())

    def test_describe_is_not_cached(self):
        """Test that each call builds fresh descriptors."""
        first = describe(sample_cases.SimpleCase)
        second = describe(sample_cases.SimpleCase)

        assert first == second
        assert first is not second


class TestTypeName:
    """Tests for type_name."""

    def test_builtins_have_no_module(self):
        assert type_name(int) == "int"

    def test_qualified_name(self):
        assert type_name(unittest.TestCase) == "unittest.case.TestCase"
