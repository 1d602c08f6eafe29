"""
Validation package for tile catalogs and generated layouts.

Public API:
    - ValidationResult, ValidationIssue, Severity, ValidationStage: Core types
    - ValidationError: Exception raised on FAIL issues in strict mode
    - ValidationRule, get_rule: Rule registry

Check functions live in ``validation.checks`` (tile_checks, layout_checks).
"""

from .core import (
    Severity,
    ValidationStage,
    ValidationIssue,
    ValidationResult,
    ValidationError,
)
from .rules import ValidationRule, ALL_RULES, get_rule

__all__ = [
    # Core types
    'Severity',
    'ValidationStage',
    'ValidationIssue',
    'ValidationResult',
    'ValidationError',
    # Rules
    'ValidationRule',
    'ALL_RULES',
    'get_rule',
]
