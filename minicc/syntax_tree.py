"""Abstract syntax tree nodes and the helpers a parser uses to build them."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

INT_TYPE = "int"
"""Value type given to integer literals and, by default, array elements."""

FLOAT_TYPE = "float"
"""Value type given to floating-point literals."""

VOID_TYPE = "void"
"""Value type of nodes that carry no value."""

_UINT32_MASK = 0xFFFFFFFF


class AstOperator(Enum):
    """Kinds of syntax tree node: leaves first, then internal operators."""

    LEAF_LITERAL_UINT = 0
    LEAF_LITERAL_FLOAT = 1
    LEAF_VAR_ID = 2
    LEAF_TYPE = 3
    COMPILE_UNIT = 4
    FUNC_DEF = 5
    FUNC_FORMAL_PARAMS = 6
    FUNC_FORMAL_PARAM = 7
    FUNC_FORMAL_PARAM_ARRAY = 8
    FUNC_CALL = 9
    FUNC_REAL_PARAMS = 10
    BLOCK = 11
    COMPOUNDSTMT = 11
    RETURN = 12
    ASSIGN = 13
    DECL_STMT = 14
    VAR_DECL = 15
    VAR_DEF_INIT = 16
    ARRAY_DEF = 17
    ARRAY_DIMS = 18
    ARRAY_INDICES = 19
    ARRAY_ACCESS = 20
    ARRAY_INIT_LIST = 21
    ARRAY_INIT_ELEM = 22
    ARRAY_INIT_EMPTY = 23
    ADD = 24
    SUB = 25
    NEG = 26
    MUL = 27
    DIV = 28
    MOD = 29
    LT = 30
    LE = 31
    GT = 32
    GE = 33
    EQ = 34
    NE = 35
    LOGICAL_AND = 36
    LOGICAL_OR = 37
    LOGICAL_NOT = 38
    IF = 39
    IF_ELSE = 40
    WHILE = 41
    BREAK = 42
    CONTINUE = 43
    MAX = 44


_LEAF_OPERATORS = frozenset(
    {
        AstOperator.LEAF_LITERAL_UINT,
        AstOperator.LEAF_LITERAL_FLOAT,
        AstOperator.LEAF_VAR_ID,
        AstOperator.LEAF_TYPE,
    }
)


@dataclass(eq=False)
class AstNode:
    """One node of the syntax tree, with its children in left-to-right order."""

    node_type: AstOperator
    value_type: Any = VOID_TYPE
    line_no: int = -1
    integer_val: int = 0
    float_val: float = 0.0
    name: str = ""
    parent: Optional["AstNode"] = field(default=None, repr=False)
    sons: list["AstNode"] = field(default_factory=list)
    needs_scope: bool = True
    is_const: bool = False

    def is_leaf(self) -> bool:
        """Tell whether the node is a literal, identifier or type leaf."""
        return self.node_type in _LEAF_OPERATORS

    def insert_son(self, node: Optional["AstNode"]) -> "AstNode":
        """Append ``node`` as the last child, ignoring ``None``, and return ``self``."""
        if node is not None:
            node.parent = self
            self.sons.append(node)
        return self


def new_node(node_type: AstOperator, *args: Optional[AstNode]) -> AstNode:
    """Create a node of ``node_type`` whose children are ``args``, up to the first ``None``."""
    parent = AstNode(node_type)
    for child in args:
        if child is None:
            break
        parent.insert_son(child)
    return parent


def new_int_literal(value: int, line_no: int = -1) -> AstNode:
    """Create an unsigned 32-bit integer literal leaf."""
    return AstNode(
        AstOperator.LEAF_LITERAL_UINT,
        INT_TYPE,
        line_no,
        integer_val=value & _UINT32_MASK,
    )


def new_float_literal(value: float, line_no: int = -1) -> AstNode:
    """Create a floating-point literal leaf, rounded to single precision."""
    single = struct.unpack("<f", struct.pack("<f", value))[0]
    return AstNode(AstOperator.LEAF_LITERAL_FLOAT, FLOAT_TYPE, line_no, float_val=single)


def new_identifier(name: str, line_no: int = -1) -> AstNode:
    """Create an identifier leaf."""
    return AstNode(AstOperator.LEAF_VAR_ID, VOID_TYPE, line_no, name=name)


def new_type_node(value_type: Any) -> AstNode:
    """Create a leaf that stands for a type."""
    return AstNode(AstOperator.LEAF_TYPE, value_type)


def create_contain_node(
    node_type: AstOperator,
    first_child: Optional[AstNode] = None,
    second_child: Optional[AstNode] = None,
    third_child: Optional[AstNode] = None,
) -> AstNode:
    """Create an internal node with up to three children; missing ones are skipped."""
    node = AstNode(node_type)
    for child in (first_child, second_child, third_child):
        node.insert_son(child)
    return node


def create_func_def(
    type_node: AstNode,
    name_node: AstNode,
    block_node: Optional[AstNode] = None,
    params_node: Optional[AstNode] = None,
) -> AstNode:
    """Create a function definition: return type, name, formal parameters and body."""
    node = AstNode(AstOperator.FUNC_DEF, type_node.value_type, name_node.line_no)
    node.name = name_node.name
    if params_node is None:
        params_node = AstNode(AstOperator.FUNC_FORMAL_PARAMS)
    if block_node is None:
        block_node = AstNode(AstOperator.BLOCK)
    for child in (type_node, name_node, params_node, block_node):
        node.insert_son(child)
    return node


def create_func_call(funcname_node: AstNode, params_node: Optional[AstNode] = None) -> AstNode:
    """Create a function call with the callee's name and its actual parameters."""
    node = AstNode(AstOperator.FUNC_CALL)
    node.name = funcname_node.name
    if params_node is None:
        params_node = AstNode(AstOperator.FUNC_REAL_PARAMS)
    node.insert_son(funcname_node)
    node.insert_son(params_node)
    return node


def create_func_formal_param(type_node: AstNode, id_node: AstNode) -> AstNode:
    """Create a formal parameter holding its type leaf and identifier."""
    param = create_contain_node(AstOperator.FUNC_FORMAL_PARAM, type_node, id_node)
    param.value_type = type_node.value_type
    return param


def create_var_decl_node(var_type: Any, name: str, line_no: int = -1) -> AstNode:
    """Create a single variable declaration of ``name`` with ``var_type``."""
    decl = create_contain_node(
        AstOperator.VAR_DECL, new_type_node(var_type), new_identifier(name, line_no)
    )
    decl.value_type = var_type
    return decl


def create_var_decl_stmt_node(first_child: Optional[AstNode] = None) -> AstNode:
    """Create a declaration statement, taking its type from the first declaration."""
    stmt = create_contain_node(AstOperator.DECL_STMT)
    if first_child is not None:
        stmt.value_type = first_child.value_type
        stmt.insert_son(first_child)
    return stmt


def add_var_decl_node(stmt_node: AstNode, name: str, line_no: int = -1) -> AstNode:
    """Append a declaration of ``name``, with the statement's type, to ``stmt_node``."""
    stmt_node.insert_son(create_var_decl_node(stmt_node.value_type, name, line_no))
    return stmt_node


def create_var_decl_init_node(var_type: Any, id_node: AstNode, init_expr: AstNode) -> AstNode:
    """Create a variable definition with an initialising expression."""
    decl = create_contain_node(AstOperator.VAR_DEF_INIT, id_node, init_expr)
    decl.value_type = var_type
    return decl


def extract_array_dimensions(dims_node: AstNode, is_param: bool = False) -> list[int]:
    """Read array dimensions: literal sizes as given, anything else as 1.

    For a function parameter the first dimension is set to 0.
    """
    dimensions = [
        son.integer_val if son.node_type is AstOperator.LEAF_LITERAL_UINT else 1
        for son in dims_node.sons
    ]
    if is_param and dimensions:
        dimensions[0] = 0
    return dimensions


def create_array_access_node(
    array_node: AstNode, indices_node: AstNode, elem_type: Any = INT_TYPE
) -> AstNode:
    """Create an array element access whose value type is the element type."""
    node = create_contain_node(AstOperator.ARRAY_ACCESS, array_node, indices_node)
    node.value_type = elem_type
    return node