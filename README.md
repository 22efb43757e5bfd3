# minicc

Building blocks for a compiler of a small C subset targeting ARM64 (AArch64).

## Modules

- `minicc.syntax_tree`: abstract syntax tree nodes (`AstNode`, with the node kinds
  in the `AstOperator` enum) and the constructors a parser uses to build them:
  `new_node`, `new_int_literal`, `new_float_literal`, `new_identifier`,
  `new_type_node`, `create_contain_node`, `create_func_def`, `create_func_call`,
  `create_func_formal_param`, `create_var_decl_node`, `create_var_decl_stmt_node`,
  `add_var_decl_node`, `create_var_decl_init_node`, `create_array_access_node`,
  and `extract_array_dimensions`. Value types are plain values; the module
  provides `INT_TYPE`, `FLOAT_TYPE` and `VOID_TYPE`.
- `minicc.graph`: renders a syntax tree as Graphviz DOT text (`to_dot`) or writes
  that text to a file (`output_ast`). `node_label` gives the text shown for one
  node. Leaves are drawn as filled yellow records and operators as ellipses.
- `minicc.platform`: ARM64 platform facts. It provides register names (`REG_NAMES`),
  the reserved register numbers (`TMP_REG_NO`, `FP_REG_NO`, `LX_REG_NO`,
  `SP_REG_NO`, ...) and the checks `is_disp`, `is_reg` and `const_expr`.
- `minicc.regalloc`: `SimpleRegisterAllocator`, a naive allocator that hands out
  registers x0 to x30 in ascending order. When no register is free, it spills the
  value that has held its register longest. It raises `RegisterAllocationError`
  when it has nothing to spill. Values handed to it need a `load_reg_id`
  attribute.
- `minicc.iloc`: `ILoc`, an ordered sequence of ARM64 instructions (`ArmInst`).
  It has helpers for immediates, symbol addresses, base+offset loads and stores,
  address computation, stack frames, calls, labels and jumps. `ILoc` can also
  mark unused labels dead. `output` writes the assembly text to a file object.

## Installing

```
pip install .
```

## Example

```python
import sys

from minicc.iloc import ILoc

code = ILoc()
code.label(".L0")
code.load_imm(0, 42)
code.load_base(1, 31, 16)
code.call_fun("putint")
code.inst("ret")
code.output(sys.stdout)
```

prints

```
.L0:
	mov x0,#42
	ldr x1,[sp, #16]
	bl putint
	ret
```

You can inspect syntax trees as DOT text:

```python
from minicc.graph import to_dot
from minicc.syntax_tree import AstOperator, new_int_literal, new_node

tree = new_node(AstOperator.ADD, new_int_literal(1, 1), new_int_literal(2, 1))
print(to_dot(tree))
```

## What it does not do

The package does not include:

- a lexer or parser for source files;
- an intermediate representation;
- a pass that turns syntax trees into assembly;
- a command-line compiler.

You build syntax trees and instruction sequences by calling the functions above.
`output_ast` writes DOT text only. To produce an image, run Graphviz on that text
yourself.

## Running the tests

```
pip install .[test]
pytest
```