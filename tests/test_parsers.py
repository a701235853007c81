"""
Tests for the traceability matrix, sequence diagram and class diagram parsers.
"""

import os
import unittest

from stubdriver.core.enums import ACTOR, REF, UNKNOWN, MessageKind
from stubdriver.core.errors import EmptyResultWarning
from stubdriver.parsers.class_diagram import ClassDiagramParser, is_placeholder_name
from stubdriver.parsers.rtm import ColumnMatcher, RequirementTableParser, split_diagram_names
from stubdriver.parsers.sequence_diagram import SequenceDiagramParser, map_message_type

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def read_fixture(name):
    with open(os.path.join(FIXTURES, name), 'r', encoding='utf-8') as f:
        return f.read()


class TestSplitDiagramNames(unittest.TestCase):
    """Tests for splitting diagram-name cells."""

    def test_first_separator_wins(self):
        """Test that the highest-priority separator present is used."""
        self.assertEqual(split_diagram_names("A, B, C"), ["A", "B", "C"])
        self.assertEqual(split_diagram_names("A; B|C"), ["A", "B|C"])
        self.assertEqual(split_diagram_names("A|B"), ["A", "B"])

    def test_quotes_and_blanks(self):
        """Test that quotes are stripped and empty tokens dropped."""
        self.assertEqual(split_diagram_names("'A', , \"B\""), ["A", "B"])
        self.assertEqual(split_diagram_names(""), [])
        self.assertEqual(split_diagram_names("Single"), ["Single"])


class TestColumnMatcher(unittest.TestCase):
    """Tests for header resolution."""

    def test_exact_before_substring(self):
        """Test that an exact header beats an earlier containing header."""
        matcher = ColumnMatcher(["Related Diagram", "Diagram"])
        self.assertEqual(matcher.find(["diagram"]), 1)

    def test_substring_match(self):
        """Test containment in either direction."""
        matcher = ColumnMatcher(["Req. ID", "Function Name (short)"])
        self.assertEqual(matcher.find(["function name"]), 1)

    def test_fuzzy_tokens(self):
        """Test that misspelled headers match on tokens."""
        matcher = ColumnMatcher(["Sequense Diagramm"])
        self.assertEqual(matcher.find(["sequence diagram"]), 0)

    def test_excluded_columns(self):
        """Test that claimed columns are not offered again."""
        matcher = ColumnMatcher(["Diagram", "Diagram"])
        self.assertEqual(matcher.find(["diagram"], exclude=[0]), 1)
        self.assertEqual(matcher.find(["owner"]), -1)


class TestRequirementTableParser(unittest.TestCase):
    """Tests for the RequirementTableParser class."""

    def setUp(self):
        self.parser = RequirementTableParser()

    def test_parse_fixture(self):
        """Test parsing a matrix with merged and skipped rows."""
        result = self.parser.parse(read_fixture("rtm.csv"), "rtm.csv")

        self.assertTrue(result.success)
        functions = {f.id: f for f in result.value}
        self.assertEqual(list(functions), ["FR1", "FR2", "FR3"])
        self.assertEqual(functions["FR1"].sequence_diagram_names, ["DepositSequence", "ReceiptSequence"])
        self.assertEqual(functions["FR2"].name, 'Withdraw Cash, with "receipt"')
        self.assertEqual(functions["FR2"].sequence_diagram_names, ["ATMWithdrawal", "AuditTrail"])
        self.assertEqual(functions["FR3"].sequence_diagram_names, [])
        self.assertTrue(any("empty required values" in w for w in result.warnings))

    def test_column_indices(self):
        """Test role resolution against a full header."""
        indices = self.parser.resolve_columns(["Requirement ID", "System Function", "Sequence Diagram", "Related Diagram"])
        self.assertEqual(indices, {"id": 0, "name": 1, "diagram": 2, "related": 3})

    def test_missing_columns(self):
        """Test that a matrix without id and name columns is rejected."""
        result = self.parser.parse(read_fixture("rtm_no_columns.csv"), "rtm_no_columns.csv")
        self.assertFalse(result.success)
        self.assertEqual(result.value, [])
        self.assertIn("Required columns not found", result.errors[0])

    def test_name_only_matrix(self):
        """Test that a missing id column falls back to the name column."""
        result = self.parser.parse("Function Name,Sequence Diagram\nDeposit,DepositSequence\n")
        self.assertTrue(result.success)
        self.assertEqual(result.value[0].id, "Deposit")
        self.assertEqual(result.value[0].sequence_diagram_names, ["DepositSequence"])

    def test_missing_diagram_column(self):
        """Test that a matrix without diagram columns still parses, with a warning."""
        result = self.parser.parse("\ufeffReq ID,Function\nFR9,Audit\n")
        self.assertTrue(result.success)
        self.assertEqual(result.value[0].id, "FR9")
        self.assertTrue(any("Sequence diagram column not found" in w for w in result.warnings))

    def test_header_only(self):
        """Test that a matrix with no data rows yields nothing."""
        result = self.parser.parse("Requirement ID,System Function\n")
        self.assertEqual(result.value, [])
        self.assertEqual(result.errors, [])
        self.assertTrue(result.warnings)

    def test_no_valid_rows(self):
        """Test that a matrix whose rows are all skipped reports an empty result."""
        result = self.parser.parse("Requirement ID,System Function\n,\n,Orphan\n")
        self.assertEqual(result.value, [])
        self.assertIsInstance(result.diagnostics[-1], EmptyResultWarning)


class TestSequenceDiagramParser(unittest.TestCase):
    """Tests for the SequenceDiagramParser class."""

    def setUp(self):
        self.parser = SequenceDiagramParser()

    def test_message_type_mapping(self):
        """Test mapping of declared vendor message types."""
        self.assertEqual(map_message_type("Return Message"), MessageKind.RETURN)
        self.assertEqual(map_message_type("Create Message"), MessageKind.CREATE)
        self.assertEqual(map_message_type(None), MessageKind.SYNCH_CALL)
        self.assertEqual(map_message_type("Asynchronous Message"), MessageKind.MESSAGE)

    def test_parse_deposit(self):
        """Test participants and messages of a simple diagram."""
        result = self.parser.parse(read_fixture("DepositSequence.xml"), "DepositSequence.xml")

        self.assertTrue(result.success)
        diagram = result.value
        self.assertEqual(diagram.name, "DepositSequence")
        types = {obj.name: obj.type for obj in diagram.objects}
        self.assertEqual(types, {"teller": "Teller", "accountService": "AccountService", "Customer": ACTOR})

        # The message to an undeclared lifeline is dropped
        self.assertEqual(len(diagram.messages), 4)
        names = [m.name for m in diagram.messages]
        self.assertEqual(names, ["deposit", "processDeposit(amount)", "true", "receipt"])
        self.assertEqual(diagram.messages[2].type, MessageKind.RETURN)
        self.assertEqual(diagram.references, [])

        ids = {obj.id for obj in diagram.objects}
        for message in diagram.messages:
            self.assertIn(message.source, ids)
            self.assertIn(message.target, ids)

    def test_parse_references(self):
        """Test REF resolution through covered interactions and labels."""
        result = self.parser.parse(read_fixture("ATMWithdrawal.xml"), "ATMWithdrawal.xml")

        diagram = result.value
        self.assertEqual(diagram.name, "ATMWithdrawal")
        types = {obj.name: obj.type for obj in diagram.objects}
        self.assertEqual(types["ghost"], UNKNOWN)
        self.assertEqual(types["Card Holder"], ACTOR)
        self.assertEqual(types["ref Verify Pin"], REF)
        self.assertEqual(len(diagram.messages), 7)

        references = {r.name: r for r in diagram.references}
        self.assertEqual(references["ref Verify Pin"].diagram_name, "PinCheck")
        self.assertEqual(references["ref Transfer Funds"].diagram_name, "Transfer Funds")
        participants = diagram.participant_index()
        self.assertEqual(participants[references["ref Verify Pin"].participant_id].type, REF)

    def test_bound_operation_names_message(self):
        """Test that an operation bound to a message replaces its label."""
        result = self.parser.parse(read_fixture("PinCheck.xml"), "PinCheck.xml")
        self.assertEqual([m.name for m in result.value.messages], ["verifyPin", "valid"])
        self.assertEqual(result.value.messages[0].type, MessageKind.SYNCH_CALL)

    def test_frame_reference(self):
        """Test a REF whose covered interaction points at a frame by id."""
        result = self.parser.parse(read_fixture("CycleA.xml"), "CycleA.xml")
        self.assertEqual(result.value.references[0].diagram_name, "CycleB")

    def test_name_without_source(self):
        """Test that the diagram element name is used when no file name is given."""
        result = self.parser.parse(read_fixture("PinCheck.xml"))
        self.assertEqual(result.value.name, "Pin Check")

    def test_rejected_files(self):
        """Test that malformed and foreign documents are rejected."""
        for name in ("broken.xml", "not_vendor.xml", "no_frame.xml"):
            with self.subTest(name=name):
                result = self.parser.parse(read_fixture(name), name)
                self.assertIsNone(result.value)
                self.assertFalse(result.success)
                self.assertTrue(result.errors[0].startswith(name))

    def test_no_messages(self):
        """Test that a diagram without messages is kept with a warning."""
        content = (
            '<Project Xml_structure="simple"><Models><Class Id="c" Name="Solo"/>'
            '<Frame Id="f"><ModelChildren><InteractionLifeLine Id="l"><BaseClassifier>'
            '<Class Idref="c"/></BaseClassifier></InteractionLifeLine></ModelChildren></Frame>'
            '</Models><Diagrams><InteractionDiagram Name="Solo" _rootFrame="f"><Shapes>'
            '<InteractionLifeLine Model="l" Name="solo"/></Shapes></InteractionDiagram></Diagrams></Project>'
        )
        result = self.parser.parse(content, "Solo.xml")
        self.assertTrue(result.success)
        self.assertEqual(result.value.class_types(), {"Solo"})
        self.assertIsInstance(result.diagnostics[0], EmptyResultWarning)
        self.assertIn("No messages", result.warnings[0])

    def test_operation_only_reference(self):
        """Test that a message's transition-from operation becomes a reference."""
        content = (
            '<Project Xml_structure="simple"><Models>'
            '<Class Id="c1" Name="Teller"/><Class Id="c2" Name="Ledger"/>'
            '<Operation Id="op1" Name="postEntry"/>'
            '<Frame Id="f"><ModelChildren>'
            '<InteractionLifeLine Id="l1"><BaseClassifier><Class Idref="c1"/></BaseClassifier></InteractionLifeLine>'
            '<InteractionLifeLine Id="l2"><BaseClassifier><Class Idref="c2"/></BaseClassifier></InteractionLifeLine>'
            '</ModelChildren></Frame>'
            '<ModelRelationshipContainer><ModelChildren>'
            '<Message Id="m1" Name="post(entry)" EndRelationshipFromMetaModelElement="l1" '
            'EndRelationshipToMetaModelElement="l2"><TransitFrom><Operation Idref="op1"/></TransitFrom></Message>'
            '</ModelChildren></ModelRelationshipContainer>'
            '</Models><Diagrams><InteractionDiagram Name="Post" _rootFrame="f"><Shapes>'
            '<InteractionLifeLine Model="l1" Name="teller"/><InteractionLifeLine Model="l2" Name="ledger"/>'
            '</Shapes></InteractionDiagram></Diagrams></Project>'
        )
        diagram = self.parser.parse(content, "Post.xml").value
        self.assertEqual(len(diagram.references), 1)
        reference = diagram.references[0]
        self.assertEqual(reference.name, "REF_postEntry")
        self.assertEqual(reference.diagram_name, "postEntry")
        self.assertEqual(reference.message_id, diagram.messages[0].id)


class TestClassDiagramParser(unittest.TestCase):
    """Tests for the ClassDiagramParser class."""

    def setUp(self):
        self.parser = ClassDiagramParser()

    def test_placeholder_names(self):
        """Test detection of tool-generated placeholder names."""
        self.assertTrue(is_placeholder_name("Class1"))
        self.assertTrue(is_placeholder_name("untitled"))
        self.assertTrue(is_placeholder_name(""))
        self.assertFalse(is_placeholder_name("Classroom"))

    def test_parse_fixture(self):
        """Test packages, types and duplicate merging."""
        result = self.parser.parse(read_fixture("class_diagram.xml"), "class_diagram.xml")

        self.assertTrue(result.success)
        classes = {cls.name: cls for cls in result.value}
        self.assertEqual(sorted(classes), ["AccountService", "Teller"])

        service = classes["AccountService"]
        self.assertEqual(service.package_name, "bank")
        methods = {m.name: m for m in service.methods}
        self.assertEqual(methods["processDeposit"].return_type, "boolean")
        self.assertEqual(methods["processDeposit"].visibility, "public")
        self.assertEqual(methods["processDeposit"].parameters[0].type, "double")
        self.assertEqual(methods["getBalance"].return_type, "double")
        self.assertEqual(methods["getBalance"].parameters[0].type, "String")

        teller = classes["Teller"]
        self.assertEqual(teller.package_name, "default")
        self.assertEqual([m.name for m in teller.methods], ["handleDeposit", "printReceipt"])
        self.assertEqual(teller.methods[0].return_type, "void")

    def test_empty_diagram(self):
        """Test that a document without classes yields an empty result."""
        result = self.parser.parse('<Project Xml_structure="simple"><Models/></Project>')
        self.assertEqual(result.value, [])
        self.assertIsInstance(result.diagnostics[0], EmptyResultWarning)

    def test_rejected_files(self):
        """Test that foreign and malformed documents are rejected."""
        self.assertIsNone(self.parser.parse(read_fixture("not_vendor.xml")).value)
        self.assertIsNone(self.parser.parse(read_fixture("broken.xml")).value)
        self.assertIsNone(self.parser.parse('<Project Xml_structure="simple"/>').value)


if __name__ == '__main__':
    unittest.main()
