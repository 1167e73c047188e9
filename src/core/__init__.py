"""
Core value model, unit registry, numerical primitives and contracts.

Everything here is independent of the expression tree: the interpreter
and the function library build on these building blocks.
"""
