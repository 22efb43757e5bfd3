"""Compiler building blocks for a small C subset targeting ARM64: syntax trees, DOT rendering, register allocation and assembly emission."""

__version__ = "1.0.1"
__all__ = ["graph", "iloc", "platform", "regalloc", "syntax_tree"]