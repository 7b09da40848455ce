"""Tests for the framework-compliant slow path."""

import unittest

import pytest

import sample_cases
from steprunner.core.listener import ResultCollector
from steprunner.errors import DiscoveryError
from steprunner.legacy import CompliantConfiguration, CompliantTestFinder, CompliantTestUnit
from steprunner.reflection import describe
from steprunner.testapi import TestStatus


def run_units(units):
    collector = ResultCollector()
    for unit in units:
        unit.execute(collector)
    return {r.description.name: r for r in collector.results}


class TestCompliantTestFinder:
    """Tests for CompliantTestFinder."""

    def test_finds_tests_like_unittest(self):
        units = CompliantTestFinder().find_test_units(sample_cases.TwoTests)

        assert sorted(u.description.name for u in units) == ["testSomething", "testSomethingElse"]
        assert all(isinstance(u, CompliantTestUnit) for u in units)

    def test_accepts_descriptors(self):
        units = CompliantTestFinder().find_test_units(describe(sample_cases.SimpleCase))

        assert [u.description.name for u in units] == ["testOne"]

    def test_ignores_plain_classes(self):
        assert CompliantTestFinder().find_test_units(sample_cases.PlainTests) == []

    def test_ignores_abstract_classes(self):
        assert CompliantTestFinder().find_test_units(sample_cases.AbstractCase) == []

    def test_uses_loader_prefix(self):
        loader = unittest.TestLoader()
        loader.testMethodPrefix = "testSomethingE"

        units = CompliantTestFinder(loader).find_test_units(sample_cases.TwoTests)

        assert [u.description.name for u in units] == ["testSomethingElse"]

    def test_run_test_only_class(self):
        """Test a class with only runTest gets one unit, as unittest's loader gives."""
        sample_cases.RunTestOnly.ran.clear()

        units = CompliantTestFinder().find_test_units(sample_cases.RunTestOnly)
        results = run_units(units)

        assert [u.description.name for u in units] == ["runTest"]
        assert results["runTest"].status == TestStatus.PASSED
        assert sample_cases.RunTestOnly.ran == ["runTest"]

    def test_non_class_is_translated(self):
        with pytest.raises(DiscoveryError):
            CompliantTestFinder().find_test_units(42)


class TestCompliantTestUnit:
    """Tests for running units through unittest's life cycle."""

    def test_name_constructor_runs(self):
        """Test classes needing the method name are run normally."""
        results = run_units(CompliantTestFinder().find_test_units(sample_cases.SingleNameConstructor))

        assert {name: r.status for name, r in results.items()} == {
            "testOne": TestStatus.PASSED,
            "testTwo": TestStatus.PASSED,
        }

    def test_set_up_is_called(self):
        results = run_units(CompliantTestFinder().find_test_units(sample_cases.WithSetUp))

        assert results["testValue"].status == TestStatus.PASSED

    def test_unusable_constructor_is_error(self):
        results = run_units([CompliantTestUnit(sample_cases.NoSuitableConstructor, "testSomething")])

        assert results["testSomething"].status == TestStatus.ERROR
        assert isinstance(results["testSomething"].error, TypeError)

    def test_failures(self):
        results = run_units(CompliantTestFinder().find_test_units(sample_cases.Failing))

        assert results["testFails"].status == TestStatus.FAILED
        assert "always fails" in results["testFails"].error_message
        assert results["testErrors"].status == TestStatus.FAILED
        assert "broken" in results["testErrors"].error_message

    def test_skipped(self):
        results = run_units(CompliantTestFinder().find_test_units(sample_cases.Skipping))

        assert results["testSkipped"].status == TestStatus.SKIPPED
        assert results["testSkipped"].error_message == "not today"

    def test_expected_failure_passes(self):
        results = run_units([CompliantTestUnit(sample_cases.ExpectedExceptions, "testKnownBroken")])

        assert results["testKnownBroken"].status == TestStatus.PASSED

    def test_system_exit_is_failed(self):
        results = run_units([CompliantTestUnit(sample_cases.Exiting, "testUnexpectedExit")])

        assert results["testUnexpectedExit"].status == TestStatus.FAILED
        assert "SystemExit" in results["testUnexpectedExit"].error_message

    def test_description(self):
        unit = CompliantTestUnit(sample_cases.SimpleCase, "testOne")

        assert unit.description.name == "testOne"
        assert unit.description.test_class == "sample_cases.SimpleCase"


class TestCompliantConfiguration:
    """Tests for CompliantConfiguration."""

    def test_consulted_after_fast_path(self):
        assert CompliantConfiguration().priority == 10

    def test_finder_and_suites(self):
        configuration = CompliantConfiguration()

        assert len(configuration.test_unit_finder()(sample_cases.SimpleCase)) == 1
        assert configuration.test_suite_finder()(sample_cases.SimpleCase) == []
        assert configuration.verify_environment() is None
