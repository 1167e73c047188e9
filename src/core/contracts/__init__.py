"""
Contract Validation Module

JSON Schema контракты для сериализованных значений и frontmatter.
"""

from .validators import (
    ContractValidator,
    FrontmatterValidator,
    SchemaLoader,
    ValuePayloadValidator,
    validate_frontmatter,
    validate_value_payload,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ValuePayloadValidator",
    "FrontmatterValidator",
    # Functions
    "validate_value_payload",
    "validate_frontmatter",
]
