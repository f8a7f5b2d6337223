"""Tests for the expression parser."""

import pytest

from gatenet import Circuit, ExpressionError, GateKind, evaluate, expand, parse_expression
from gatenet._expr import MAX_NESTING, tokenize


class TestTokenize:
    def test_words_and_punctuation(self) -> None:
        tokens = tokenize("!(A1 & b_2)")
        assert [token.text for token in tokens] == ["!", "(", "A1", "&", "b_2", ")", ""]
        assert [token.position for token in tokens] == [0, 1, 2, 5, 7, 10, 11]

    def test_end_marker(self) -> None:
        tokens = tokenize("   ")
        assert len(tokens) == 1
        assert tokens[0].is_end

    def test_unexpected_character(self) -> None:
        with pytest.raises(ExpressionError, match="position 2") as exc_info:
            tokenize("A + B")
        assert exc_info.value.position == 2


class TestParseExpression:
    def test_single_variable(self) -> None:
        gate = parse_expression("A")
        assert gate.kind == GateKind.VARIABLE
        assert gate.name == "A"

    def test_parity_builds_bottom_up(self) -> None:
        root = parse_expression("!(A ^ B ^ C)")
        circuit = root.circuit
        assert [gate.kind for gate in circuit] == [
            GateKind.VARIABLE,
            GateKind.VARIABLE,
            GateKind.XOR,
            GateKind.VARIABLE,
            GateKind.XOR,
            GateKind.NOT,
        ]
        assert root.id == 5
        assert circuit[4].input_ids == (2, 3)

    def test_binary_operators_are_left_associative(self) -> None:
        root = parse_expression("A & B & C")
        left, right = root.inputs
        assert left.kind == GateKind.AND
        assert right.name == "C"

    @pytest.mark.parametrize(
        ("text", "kind"),
        [
            ("A | B & C", GateKind.OR),
            ("A & B | C", GateKind.OR),
            ("A ^ B & C", GateKind.XOR),
            ("A | B ^ C", GateKind.OR),
            ("!A & B", GateKind.AND),
        ],
    )
    def test_precedence(self, text: str, kind: GateKind) -> None:
        assert parse_expression(text).kind == kind

    def test_parentheses_override_precedence(self) -> None:
        root = parse_expression("(A | B) & C")
        assert root.kind == GateKind.AND
        assert root.inputs[0].kind == GateKind.OR

    def test_tilde_and_double_negation(self) -> None:
        root = parse_expression("~!A")
        assert root.kind == GateKind.NOT
        assert root.inputs[0].kind == GateKind.NOT

    def test_repeated_identifier_shares_variable(self) -> None:
        root = parse_expression("A ^ A")
        left, right = root.inputs
        assert left is right
        assert len(root.circuit.variables()) == 1
        assert len(expand(root)) == 2

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("1", True), ("0", False), ("TRUE", True), ("false", False)],
    )
    def test_constants(self, text: str, expected: bool) -> None:
        gate = parse_expression(text)
        assert gate.kind == GateKind.CONSTANT
        assert gate.value is expected

    def test_constants_in_expression(self) -> None:
        assert evaluate(parse_expression("1 & !0")) is True

    def test_builds_into_existing_circuit(self) -> None:
        circuit = Circuit()
        a = circuit.variable("A")
        root = parse_expression("A & B", circuit)
        assert root.circuit is circuit
        assert root.inputs[0] is a
        assert [gate.name for gate in circuit.variables()] == ["A", "B"]

    def test_ascii_identifiers(self) -> None:
        root = parse_expression("_tmp & x9")
        assert [gate.name for gate in root.circuit.variables()] == ["_tmp", "x9"]

    def test_nesting_up_to_limit(self) -> None:
        gate = parse_expression("(" * MAX_NESTING + "A" + ")" * MAX_NESTING)
        assert gate.kind == GateKind.VARIABLE

    def test_long_negation_prefix(self) -> None:
        root = parse_expression("!" * 3000 + "A")
        assert len(root.circuit) == 3001
        assert root.inputs[0].id == 2999
        root.circuit.assign({"A": True})
        assert evaluate(root) is True

    def test_long_flat_chain(self) -> None:
        root = parse_expression(" ^ ".join(f"V{i}" for i in range(1500)))
        assert len(expand(root)) == 2999

    def test_evaluates_end_to_end(self) -> None:
        root = parse_expression("!(A ^ B ^ C)")
        root.circuit.assign({"A": True, "B": True, "C": False})
        assert evaluate(root) is True
        assert len(expand(root)) == 6


class TestParseErrors:
    @pytest.mark.parametrize(
        ("text", "message", "position"),
        [
            ("", "Expected an operand", 0),
            ("A &", "Expected an operand", 3),
            ("A & & B", "Expected an operand", 4),
            ("(A | B", "Expected '\\)'", 6),
            ("A B", "Unexpected 'B'", 2),
            ("A)", "Unexpected '\\)'", 1),
            ("2x", "Invalid identifier '2x'", 0),
        ],
    )
    def test_errors_report_position(self, text: str, message: str, position: int) -> None:
        with pytest.raises(ExpressionError, match=message) as exc_info:
            parse_expression(text)
        assert exc_info.value.position == position
        assert str(exc_info.value).endswith(f"at position {position}")

    @pytest.mark.parametrize(("text", "position"), [("Ω & é", 0), ("Aé", 1), ("A & ß", 4)])
    def test_identifiers_are_ascii(self, text: str, position: int) -> None:
        with pytest.raises(ExpressionError, match="Unexpected character") as exc_info:
            parse_expression(text)
        assert exc_info.value.position == position

    def test_nesting_limit(self) -> None:
        depth = MAX_NESTING + 1
        with pytest.raises(ExpressionError, match="nested deeper") as exc_info:
            parse_expression("(" * depth + "A" + ")" * depth)
        assert exc_info.value.position == MAX_NESTING

    def test_very_deep_nesting_is_an_expression_error(self) -> None:
        with pytest.raises(ExpressionError, match="nested deeper"):
            parse_expression("(" * 2000 + "A" + ")" * 2000)

    def test_expression_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):  # noqa: PT011
            parse_expression("&")
