"""
Tests for the generation pipeline.
"""

import os
import unittest

from stubdriver.analysis.classifier import ClassificationRule, MessageClassifier
from stubdriver.config.settings import Settings
from stubdriver.core.class_catalog import ClassCatalog
from stubdriver.core.enums import ArtifactKind, MessageRole
from stubdriver.parsers.class_diagram import ClassDiagramParser
from stubdriver.parsers.sequence_diagram import SequenceDiagramParser
from stubdriver.pipelines.generation import GenerationPipeline

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def read_fixture(name):
    with open(os.path.join(FIXTURES, name), 'r', encoding='utf-8') as f:
        return f.read()


def load_diagrams(*names):
    parser = SequenceDiagramParser()
    return [parser.parse(read_fixture(name), name).value for name in names]


def load_catalog():
    return ClassCatalog(ClassDiagramParser().parse(read_fixture("class_diagram.xml")).value)


def seeded_settings(seed=9):
    settings = Settings()
    settings.set("generation", "seed", seed)
    return settings


class TestGenerationPipeline(unittest.TestCase):
    """Tests for the GenerationPipeline class."""

    def setUp(self):
        self.pipeline = GenerationPipeline(seeded_settings())
        self.assertTrue(self.pipeline.setup(load_diagrams("DepositSequence.xml"), load_catalog()))

    def file_names(self, result):
        return [a.file_name for a in result.outputs["artifacts"]]

    def test_callee_needs_stub(self):
        """Test that selecting the caller stubs its callee."""
        result = self.pipeline.execute(selected_class_names=["Teller"])

        self.assertTrue(result.success)
        self.assertEqual(self.file_names(result), ["AccountServiceStub.java"])
        stub = result.outputs["artifacts"][0]
        self.assertEqual(stub.kind, ArtifactKind.STUB)
        self.assertIn("public class AccountServiceStub extends AccountService {", stub.file_content)
        self.assertIn("    @Override\n    public boolean processDeposit(double amount) {", stub.file_content)
        self.assertRegex(stub.file_content, r"return (true|false);")
        self.assertEqual(result.metrics, {"edges": 1, "stubs": 1, "drivers": 0})

    def test_caller_needs_driver(self):
        """Test that selecting the callee drives it from its caller."""
        result = self.pipeline.execute(selected_class_names=["AccountService"])

        self.assertEqual(self.file_names(result), ["TellerDriver.java"])
        driver = result.outputs["artifacts"][0]
        self.assertEqual(driver.kind, ArtifactKind.DRIVER)
        self.assertIn("public void testHandleDeposit() {", driver.file_content)
        self.assertIn("public void testPrintReceipt() {", driver.file_content)

    def test_self_contained_selection(self):
        """Test that a closed selection produces only the summary."""
        result = self.pipeline.execute(selected_class_names=["Teller", "AccountService"])

        self.assertTrue(result.success)
        self.assertEqual(self.file_names(result), ["GenerationSummary.txt"])
        self.assertEqual(result.outputs["artifacts"][0].kind, ArtifactKind.SUMMARY)
        self.assertTrue(result.outputs["plan"].is_empty)

    def test_session_output(self):
        """Test the session produced by a run."""
        result = self.pipeline.execute(selected_class_names=["Teller", "Teller"])
        session = result.outputs["session"]

        self.assertEqual(session.selected_class_names, ("Teller",))
        self.assertEqual(session.file_names, ["AccountServiceStub.java"])
        self.assertEqual(result.outputs["call_graph"].edge_count(), 1)
        self.assertEqual(result.errors, [])

    def test_repeatable(self):
        """Test that equal inputs give equal file names and, when seeded, equal sources."""
        first = self.pipeline.execute(selected_class_names=["Teller"])
        second = self.pipeline.execute(selected_class_names=["Teller"])
        self.assertEqual(self.file_names(first), self.file_names(second))

        other = GenerationPipeline(seeded_settings())
        other.setup(load_diagrams("DepositSequence.xml"), load_catalog())
        self.assertEqual(
            first.outputs["artifacts"][0].file_content,
            other.execute(selected_class_names=["Teller"]).outputs["artifacts"][0].file_content,
        )

    def test_empty_selection(self):
        """Test that running with no selection fails without outputs."""
        result = self.pipeline.execute(selected_class_names=[])
        self.assertFalse(result.success)
        self.assertEqual(result.outputs, {})
        self.assertEqual(result.errors, ["No classes selected for generation"])

    def test_failure_yields_nothing(self):
        """Test that an error mid-run returns no artifacts at all."""
        def explode(kind, name):
            raise RuntimeError("classifier exploded")

        pipeline = GenerationPipeline(
            seeded_settings(),
            classifier=MessageClassifier([ClassificationRule("explode", explode, MessageRole.CALL)]),
        )
        pipeline.setup(load_diagrams("DepositSequence.xml"), load_catalog())
        result = pipeline.execute(selected_class_names=["Teller"])

        self.assertFalse(result.success)
        self.assertEqual(result.outputs, {})
        self.assertEqual(result.errors, ["Failed to generate code: classifier exploded"])

    def test_state_reset_between_runs(self):
        """Test that errors of a failed run do not leak into the next one."""
        self.pipeline.execute(selected_class_names=[])
        result = self.pipeline.execute(selected_class_names=["Teller"])
        self.assertTrue(result.success)
        self.assertEqual(result.errors, [])

    def test_unmodeled_targets(self):
        """Test service stubs and construction drivers for classes without a model."""
        pipeline = GenerationPipeline(seeded_settings())
        self.assertTrue(pipeline.setup(load_diagrams("ATMWithdrawal.xml", "PinCheck.xml")))

        result = pipeline.execute(selected_class_names=["ATMController"])
        self.assertEqual(
            self.file_names(result),
            ["CashDispenserStub.java", "PinValidatorStub.java", "TransactionServiceStub.java"],
        )
        transaction = result.outputs["artifacts"][2].file_content
        self.assertIn("public boolean transferFunds(Object... args) {", transaction)

        result = pipeline.execute(selected_class_names=["CashDispenser"])
        self.assertEqual(self.file_names(result), ["ATMControllerDriver.java"])
        self.assertIn("testConstruction", result.outputs["artifacts"][0].file_content)

    def test_setup_without_diagrams(self):
        """Test that setup reports when there is nothing to analyze."""
        pipeline = GenerationPipeline()
        self.assertFalse(pipeline.setup())
        result = pipeline.execute(selected_class_names=["Teller"])
        self.assertTrue(result.success)
        self.assertEqual(self.file_names(result), ["GenerationSummary.txt"])
        self.assertEqual(result.warnings, ["Class Teller takes part in no call of the loaded diagrams"])

    def test_no_warning_for_connected_classes(self):
        """Test that classes with calls produce no warnings."""
        result = self.pipeline.execute(selected_class_names=["Teller", "AccountService"])
        self.assertEqual(result.warnings, [])
        self.assertIsNone(result.first_error)


if __name__ == '__main__':
    unittest.main()
