"""
Tests for literal values, stubs, drivers and the generation summary.
"""

import re
import unittest

from stubdriver.analysis.resolver import ResolvedTarget, StubDriverPlan
from stubdriver.config.settings import Settings
from stubdriver.core.call_graph import CallGraph
from stubdriver.core.class_model import ClassModel, MethodModel, ParameterModel
from stubdriver.core.enums import ArtifactKind
from stubdriver.generators.driver import DriverGenerator, junit_test_name
from stubdriver.generators.report import SummaryGenerator
from stubdriver.generators.stub import StubGenerator, service_methods
from stubdriver.generators.values import STATUS_VALUES, ValueGenerator, base_type, java_string, name_category


class TestValueGenerator(unittest.TestCase):
    """Tests for the ValueGenerator class."""

    def setUp(self):
        self.values = ValueGenerator(seed=7)

    def test_name_categories(self):
        """Test classification of method and parameter names."""
        self.assertEqual(name_category("accountId"), "large_int")
        self.assertEqual(name_category("getBalance"), "decimal")
        self.assertEqual(name_category("itemCount"), "small_int")
        self.assertEqual(name_category("phoneNumber"), "phone")
        self.assertEqual(name_category("accountStatus"), "status")
        self.assertEqual(name_category("createdDate"), "date")
        self.assertEqual(name_category("customerName"), "name")
        self.assertEqual(name_category("isActive"), "flag")
        self.assertEqual(name_category("valid"), "flag")
        self.assertIsNone(name_category("account"))

    def test_type_helpers(self):
        """Test type-name and string helpers."""
        self.assertEqual(base_type("java.util.List<String>"), "List")
        self.assertEqual(base_type("BigDecimal"), "BigDecimal")
        self.assertEqual(java_string('say "hi"'), '"say \\"hi\\""')

    def test_structural_literals(self):
        """Test void, arrays, collections and unknown objects."""
        self.assertIsNone(self.values.literal("void", "run"))
        self.assertIsNone(self.values.literal("", "run"))
        self.assertEqual(self.values.literal("int[]", "ids"), "new int[0]")
        self.assertEqual(self.values.literal("List<String>"), "new java.util.ArrayList<>()")
        self.assertEqual(self.values.literal("java.util.Map<String, Account>"), "new java.util.HashMap<>()")
        self.assertEqual(self.values.literal("Optional<Account>"), "java.util.Optional.empty()")
        self.assertEqual(self.values.literal("Account", "account"), "null")

    def test_numeric_literals(self):
        """Test ranges and suffixes of numeric literals."""
        for _ in range(25):
            self.assertIn(int(self.values.literal("int", "itemCount")), range(1, 11))
            self.assertIn(int(self.values.literal("Integer", "level")), range(1, 101))

            long_id = self.values.literal("long", "accountId")
            self.assertTrue(long_id.endswith("L"))
            self.assertIn(int(long_id[:-1]), range(100000, 1000000))

            amount = float(self.values.literal("double", "amount"))
            self.assertTrue(10.0 <= amount <= 5000.0)

        self.assertTrue(self.values.literal("float", "rate").endswith("f"))
        self.assertTrue(self.values.literal("short", "x").startswith("(short) "))
        self.assertTrue(self.values.literal("byte", "x").startswith("(byte) "))
        self.assertRegex(self.values.literal("BigDecimal", "price"), r'^new java\.math\.BigDecimal\("\d+\.\d{2}"\)$')
        self.assertRegex(self.values.literal("BigInteger", "id"), r'^new java\.math\.BigInteger\("\d{6}"\)$')
        self.assertRegex(self.values.literal("char", "initial"), r"^'[A-Z]'$")

    def test_string_literals(self):
        """Test name-aware string values."""
        self.assertRegex(self.values.literal("String", "email"), r'^"[a-z]+\.[a-z]+@example\.com"$')
        self.assertRegex(self.values.literal("String", "phone"), r'^"555-\d{3}-\d{4}"$')
        self.assertIn(self.values.literal("String", "getStatus").strip('"'), STATUS_VALUES)
        self.assertRegex(self.values.literal("String", "customerName"), r'^"[A-Z][a-z]+ [A-Z][a-z]+"$')
        self.assertRegex(self.values.literal("String", "accountId"), r'^"ID-\d{6}"$')
        self.assertRegex(self.values.literal("String", "createdDate"), r'^"2024-\d{2}-\d{2}"$')
        self.assertRegex(self.values.literal("String", "note"), r'^"note_\d+"$')

    def test_boolean_bias(self):
        """Test that the bias controls boolean literals."""
        always_true = ValueGenerator(seed=1, boolean_true_bias=1.0)
        always_false = ValueGenerator(seed=1, boolean_true_bias=0.0)
        for _ in range(10):
            self.assertEqual(always_true.literal("boolean", "done"), "true")
            self.assertEqual(always_false.literal("Boolean", "done"), "false")

    def test_seed_reproducible(self):
        """Test that equal seeds give equal literals."""
        first = ValueGenerator(seed=42)
        second = ValueGenerator(seed=42)
        types = [("int", "count"), ("double", "amount"), ("String", "email"), ("boolean", "ok")]
        self.assertEqual(
            [first.literal(t, n) for t, n in types],
            [second.literal(t, n) for t, n in types],
        )

    def test_from_settings(self):
        """Test construction from settings."""
        settings = Settings()
        settings.set("generation", "seed", 3)
        settings.set("generation", "boolean_true_bias", 0.5)
        values = ValueGenerator.from_settings(settings)
        self.assertEqual(values.seed, 3)
        self.assertEqual(values.boolean_true_bias, 0.5)


class TestStubGenerator(unittest.TestCase):
    """Tests for the StubGenerator class."""

    def setUp(self):
        self.generator = StubGenerator(ValueGenerator(seed=11))

    def test_class_stub(self):
        """Test a stub subclass of a modeled class."""
        cls = ClassModel("s", "AccountService", "bank", [
            MethodModel("processDeposit", "boolean", parameters=[ParameterModel("amount", "double")]),
            MethodModel("audit", "void"),
            MethodModel("secret", "int", visibility="private"),
        ])
        artifact = self.generator.generate(ResolvedTarget("AccountService", cls))
        content = artifact.file_content

        self.assertEqual(artifact.file_name, "AccountServiceStub.java")
        self.assertEqual(artifact.kind, ArtifactKind.STUB)
        self.assertEqual(artifact.related_class_name, "AccountService")
        self.assertTrue(content.startswith("package bank;\n"))
        self.assertIn("public class AccountServiceStub extends AccountService {", content)
        self.assertIn("    @Override\n    public boolean processDeposit(double amount) {", content)
        self.assertRegex(content, r"return (true|false);")
        self.assertIn('System.out.println("Stub method called: audit");', content)
        self.assertNotIn("secret", content)
        self.assertEqual(content.count("{"), content.count("}"))

    def test_class_stub_without_methods(self):
        """Test that a class with no methods gets a constructor."""
        content = self.generator.render_class_stub(ClassModel("t", "Teller"))
        self.assertNotIn("package", content)
        self.assertIn("    public TellerStub() {\n        super();\n    }", content)

    def test_service_stub(self):
        """Test a stub for an unmodeled synthetic service."""
        target = ResolvedTarget("TransactionService", operations=["transferFunds", "processTransaction"])
        content = self.generator.generate(target).file_content

        self.assertIn("public class TransactionServiceStub {", content)
        self.assertNotIn("extends", content)
        self.assertNotIn("@Override", content)
        self.assertIn("public boolean processTransaction(double amount) {", content)
        self.assertIn("public double getBalance(String accountId) {", content)
        self.assertIn("public boolean transferFunds(Object... args) {", content)
        self.assertEqual(content.count("processTransaction("), 1)

    def test_service_methods(self):
        """Test canned methods for known and unknown service names."""
        self.assertEqual([m.name for m in service_methods("DataService", [])], ["save", "update", "delete", "findById"])
        self.assertEqual([m.name for m in service_methods("LedgerService", ["post", "bad name"])], ["execute", "getStatus", "post"])


class TestDriverGenerator(unittest.TestCase):
    """Tests for the DriverGenerator class."""

    def setUp(self):
        self.generator = DriverGenerator(ValueGenerator(seed=5))

    def test_test_names(self):
        """Test that overloads get unique test names."""
        taken = set()
        self.assertEqual(junit_test_name("deposit", taken), "testDeposit")
        self.assertEqual(junit_test_name("deposit", taken), "testDeposit2")
        self.assertEqual(junit_test_name("deposit", taken), "testDeposit3")

    def test_driver(self):
        """Test a driver exercising each non-private method of the caller."""
        cls = ClassModel("t", "Teller", "bank", [
            MethodModel("handleDeposit", "boolean", parameters=[ParameterModel("amount", "double"), ParameterModel("accountId", "String")]),
            MethodModel("printReceipt", "void"),
            MethodModel("reset", "void", visibility="private"),
            MethodModel("log", "void", parameters=[ParameterModel("parts", "Object...")]),
        ])
        artifact = self.generator.generate(ResolvedTarget("Teller", cls, related_classes=["AccountService"]))
        content = artifact.file_content

        self.assertEqual(artifact.file_name, "TellerDriver.java")
        self.assertEqual(artifact.kind, ArtifactKind.DRIVER)
        self.assertTrue(content.startswith("package bank;\n"))
        self.assertIn("import org.junit.Test;", content)
        self.assertIn(" * Test driver for AccountService,", content)
        self.assertIn("public class TellerDriver {", content)
        self.assertIn("        testObject = new Teller();", content)
        self.assertRegex(content, r"        double amount = \d+\.\d+;")
        self.assertRegex(content, r'        String accountId = "ID-\d{6}";')
        self.assertIn("            boolean result = testObject.handleDeposit(amount, accountId);", content)
        self.assertIn("    public void testPrintReceipt() {", content)
        self.assertIn("            testObject.printReceipt();", content)
        self.assertIn("        Object[] parts = new Object[0];", content)
        self.assertNotIn("testReset", content)
        self.assertEqual(content.count("@Test"), 3)
        self.assertEqual(content.count("{"), content.count("}"))

    def test_fallback_driver(self):
        """Test the construction-only driver for an unmodeled caller."""
        content = self.generator.generate(ResolvedTarget("ATMController", related_classes=["Teller"])).file_content
        self.assertNotIn("package", content)
        self.assertIn("    public void testConstruction() {", content)
        self.assertIn("        assertNotNull(testObject);", content)
        self.assertEqual(content.count("@Test"), 1)


class TestSummaryGenerator(unittest.TestCase):
    """Tests for the SummaryGenerator class."""

    def test_self_contained_selection(self):
        """Test the summary for a selection whose calls stay inside it."""
        graph = CallGraph()
        graph.add_edge("Teller", "AccountService", "processDeposit")
        artifact = SummaryGenerator(graph).generate(StubDriverPlan(["AccountService", "Teller"]))

        self.assertEqual(artifact.file_name, "GenerationSummary.txt")
        self.assertEqual(artifact.kind, ArtifactKind.SUMMARY)
        self.assertIn("  - AccountService", artifact.file_content)
        self.assertIn("  Teller -> AccountService (processDeposit)", artifact.file_content)
        self.assertIn("self-contained", artifact.file_content)

    def test_isolated_selection(self):
        """Test the summary for a selection with no recorded calls."""
        text = SummaryGenerator(CallGraph(), "Summary.txt").generate_text(StubDriverPlan(["Ledger"]))
        self.assertIn("take part in no calls", text)
        self.assertIsNotNone(re.search(r"Generated on: \d{4}-\d{2}-\d{2}", text))


if __name__ == '__main__':
    unittest.main()
