"""Graphviz DOT rendering of a syntax tree."""

from __future__ import annotations

from itertools import count
from pathlib import Path
from typing import Iterator, Optional, Union

from minicc.syntax_tree import AstNode, AstOperator

_OPERATOR_LABELS: dict[AstOperator, str] = {
    AstOperator.BLOCK: "block",
    AstOperator.RETURN: "return",
    AstOperator.FUNC_DEF: "func-def",
    AstOperator.COMPILE_UNIT: "compile-unit",
    AstOperator.FUNC_FORMAL_PARAMS: "formal-params",
    AstOperator.FUNC_FORMAL_PARAM: "formal-param",
    AstOperator.FUNC_FORMAL_PARAM_ARRAY: "formal-param_array",
    AstOperator.VAR_DECL: "var-decl",
    AstOperator.VAR_DEF_INIT: "var-init",
    AstOperator.DECL_STMT: "decl-stmt",
    AstOperator.ADD: "+",
    AstOperator.SUB: "-",
    AstOperator.ASSIGN: "=",
    AstOperator.ARRAY_DEF: "Array_def",
    AstOperator.ARRAY_DIMS: "Array_dims",
    AstOperator.ARRAY_INDICES: "Array_indices",
    AstOperator.ARRAY_ACCESS: "Array_access",
    AstOperator.ARRAY_INIT_EMPTY: "Init_list_empty",
    AstOperator.ARRAY_INIT_LIST: "Init_list",
    AstOperator.ARRAY_INIT_ELEM: "Init_elem",
    AstOperator.FUNC_CALL: "func-call",
    AstOperator.FUNC_REAL_PARAMS: "real-params",
    AstOperator.NEG: "-",
    AstOperator.MUL: "*",
    AstOperator.DIV: "/",
    AstOperator.MOD: "%",
    AstOperator.LT: "<",
    AstOperator.LE: "<=",
    AstOperator.GT: ">",
    AstOperator.GE: ">=",
    AstOperator.EQ: "==",
    AstOperator.NE: "!=",
    AstOperator.LOGICAL_AND: "&&",
    AstOperator.LOGICAL_OR: "||",
    AstOperator.LOGICAL_NOT: "!",
    AstOperator.IF: "if",
    AstOperator.IF_ELSE: "if-else",
    AstOperator.WHILE: "while",
    AstOperator.BREAK: "break",
    AstOperator.CONTINUE: "continue",
}

_LEAF_ATTRS = (
    ("fontcolor", "black"),
    ("fontname", "SimSun"),
    ("shape", "record"),
    ("style", "filled"),
    ("fillcolor", "yellow"),
)

_RECORD_SPECIALS = set("{}|<>")


def _as_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def node_label(node: AstNode) -> str:
    """Return the text shown for ``node``: its value for leaves, its operator otherwise."""
    kind = node.node_type
    if kind is AstOperator.LEAF_LITERAL_UINT:
        return str(_as_int32(node.integer_val))
    if kind is AstOperator.LEAF_LITERAL_FLOAT:
        return f"{node.float_val:f}"
    if kind is AstOperator.LEAF_VAR_ID:
        return node.name
    if kind is AstOperator.LEAF_TYPE:
        return str(node.value_type)
    return _OPERATOR_LABELS.get(kind, "unknown")


def _quote(text: str, record: bool = False) -> str:
    escaped = []
    for ch in text:
        if ch in '"\\' or (record and ch in _RECORD_SPECIALS):
            escaped.append("\\" + ch)
        elif ch == "\n":
            escaped.append("\\n")
        else:
            escaped.append(ch)
    return '"' + "".join(escaped) + '"'


def _visit(node: AstNode, ids: Iterator[int], lines: list[str]) -> str:
    """Emit ``node`` after its children, as the tree walk creates them, and return its id."""
    if node.is_leaf():
        node_id = f"n{next(ids)}"
        attrs = [("label", _quote(node_label(node), record=True))]
        attrs += [(key, _quote(value)) for key, value in _LEAF_ATTRS]
        lines.append(f"  {node_id} [{', '.join(f'{k}={v}' for k, v in attrs)}];")
        return node_id

    child_ids = [_visit(son, ids, lines) for son in node.sons]
    node_id = f"n{next(ids)}"
    lines.append(f'  {node_id} [label={_quote(node_label(node))}, shape="ellipse"];')
    lines.extend(f"  {node_id} -> {child_id};" for child_id in child_ids)
    return node_id


def to_dot(root: Optional[AstNode]) -> str:
    """Return a directed DOT graph of the tree rooted at ``root``."""
    lines = ["digraph ast {", '  graph [dpi="600"];']
    if root is not None:
        _visit(root, count(), lines)
    lines.append("}")
    return "\n".join(lines) + "\n"


def output_ast(root: Optional[AstNode], path: Union[str, Path]) -> None:
    """Write the DOT description of the tree rooted at ``root`` to ``path``."""
    Path(path).write_text(to_dot(root), encoding="utf-8")