"""Tests for rich rendering of gate graphs."""

from io import StringIO

from rich.console import Console
from rich.tree import Tree

from gatenet import Circuit, check_closure, parse_expression
from gatenet._cli.render import build_tree, format_value, render_check_table, render_tree


def _count_nodes(tree: Tree) -> int:
    count = 0
    stack = [tree]
    while stack:
        node = stack.pop()
        count += 1
        stack.extend(node.children)
    return count


def _console() -> Console:
    return Console(file=StringIO(), width=120, color_system=None)


def test_format_value() -> None:
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(None) == "undecided"


class TestBuildTree:
    def test_children_in_operand_order(self) -> None:
        root = parse_expression("A & B")
        tree = build_tree(root)
        labels = [str(child.label) for child in tree.children]
        assert "A" in labels[0]
        assert "B" in labels[1]

    def test_shared_gate_expanded_once(self) -> None:
        circuit = Circuit()
        a = circuit.variable("A")
        inner = circuit.not_(a)
        root = circuit.and_(inner, circuit.or_(inner, a))
        tree = build_tree(root)

        first, second = tree.children
        assert len(first.children) == 1
        shared = [str(child.label) for child in second.children]
        assert shared == [f"[dim]#{inner.id} Not (shared)[/dim]", f"[dim]#{a.id} A (shared)[/dim]"]

    def test_deep_chain_is_iterative(self) -> None:
        root = parse_expression(" ^ ".join(f"V{i}" for i in range(1500)))
        assert _count_nodes(build_tree(root)) == 2999


class TestRenderOutput:
    def test_render_tree(self) -> None:
        console = _console()
        render_tree(parse_expression("A ^ A"), console)
        output = console.file.getvalue()
        assert "Xor" in output
        assert "(shared)" in output

    def test_render_check_table(self) -> None:
        root = parse_expression("A & B")
        root.circuit.assign({"A": True, "B": False, root: True})
        console = _console()
        render_check_table(check_closure(root), console)
        assert "inconsistent" in console.file.getvalue()
