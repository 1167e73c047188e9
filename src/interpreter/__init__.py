"""
Expression interpreter.

Expression tree node kinds, literal parsing, operator dispatch,
the session environment, frontmatter declarations and the evaluator.
"""

from src.interpreter.ast import (
    Assignment,
    BinaryOp,
    BooleanLiteral,
    ComparisonOp,
    CurrencyLiteral,
    DateLiteral,
    DurationLiteral,
    FrontmatterAssignment,
    FunctionCall,
    Identifier,
    NapkinConversion,
    Node,
    NumberLiteral,
    PercentageOf,
    QuantityLiteral,
    RateLiteral,
    RelativeDateLiteral,
    TimeLiteral,
    UnaryOp,
    UnitConversion,
    UTCOffset,
)
from src.interpreter.environment import E, PI, Environment, exchange_key
from src.interpreter.evaluator import Interpreter, evaluate
from src.interpreter.frontmatter import apply_frontmatter, parse_exchange_key
from src.interpreter.literals import parse_boolean, parse_number
from src.interpreter.operators import (
    binary_operation,
    comparison_operation,
    convert_currency,
    unary_operation,
)

__all__ = [
    # Evaluator
    "Interpreter",
    "evaluate",
    # Environment
    "Environment",
    "exchange_key",
    "PI",
    "E",
    # Frontmatter
    "apply_frontmatter",
    "parse_exchange_key",
    # Operators
    "binary_operation",
    "unary_operation",
    "comparison_operation",
    "convert_currency",
    # Literals
    "parse_number",
    "parse_boolean",
    # Nodes
    "Node",
    "NumberLiteral",
    "CurrencyLiteral",
    "BooleanLiteral",
    "DateLiteral",
    "RelativeDateLiteral",
    "UTCOffset",
    "TimeLiteral",
    "DurationLiteral",
    "QuantityLiteral",
    "RateLiteral",
    "Identifier",
    "Assignment",
    "FrontmatterAssignment",
    "BinaryOp",
    "UnaryOp",
    "ComparisonOp",
    "UnitConversion",
    "PercentageOf",
    "NapkinConversion",
    "FunctionCall",
]
