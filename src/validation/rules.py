"""
Validation rule definitions.

Each rule has:
- Code: Unique identifier (e.g., "TILE-001")
- Severity: FAIL, WARN, or INFO
- Rule reference: The invariant being enforced
- Message template: Human-readable description
- Remediation: Suggested fix

Rules are organized by category:
- TILE: Tile definitions (checked at catalog registration)
- LAYOUT: Generated layouts (checked after generation)
"""

from dataclasses import dataclass
from typing import Optional

from dungeon_tilesets.generators.tiles.boundary import Direction

from .core import Coord, Severity, ValidationIssue


@dataclass(frozen=True)
class ValidationRule:
    """Definition of a validation rule.

    Attributes:
        code: Unique rule code (e.g., "TILE-001")
        severity: Default severity for this rule
        rule_reference: Short statement of the invariant
        message_template: Template for error message (use {placeholders})
        remediation_template: Template for suggested fix
        description: Full description of the rule
    """
    code: str
    severity: Severity
    rule_reference: str
    message_template: str
    remediation_template: Optional[str] = None
    description: Optional[str] = None

    def format_message(self, **kwargs) -> str:
        """Format the message template with provided values."""
        return self.message_template.format(**kwargs)

    def format_remediation(self, **kwargs) -> Optional[str]:
        """Format the remediation template with provided values."""
        if self.remediation_template:
            return self.remediation_template.format(**kwargs)
        return None

    def to_issue(self, tile: Optional[str] = None, cell: Optional[Coord] = None,
                 side: Optional[Direction] = None, **kwargs) -> ValidationIssue:
        """Build a ValidationIssue for this rule.

        Args:
            tile: Tile name the issue refers to
            cell: Grid cell (x, y) the issue refers to
            side: Tile side the issue refers to
            **kwargs: Values for the message/remediation templates

        Returns:
            ValidationIssue with this rule's code and severity
        """
        return ValidationIssue(
            severity=self.severity,
            code=self.code,
            message=self.format_message(**kwargs),
            rule_reference=self.rule_reference,
            remediation=self.format_remediation(**kwargs),
            tile=tile,
            cell=cell,
            side=side,
        )


# =============================================================================
# TILE RULES (TILE)
# =============================================================================

TILE_001 = ValidationRule(
    code="TILE-001",
    severity=Severity.FAIL,
    rule_reference="Every side carries exactly `size` boundary units",
    message_template="Side {edge} has {length} units, expected {size}",
    remediation_template="Re-export the tile record with {size} units per side",
    description="Boundary sequences must match the declared tile size or matching is undefined"
)

TILE_002 = ValidationRule(
    code="TILE-002",
    severity=Severity.WARN,
    rule_reference="Tiles should have at least one opening",
    message_template="Tile has no open boundary units",
    remediation_template="Mark at least one edge unit as open, or rely on the Blank placeholder",
    description="A fully closed tile can only be placed where Blank would also fit"
)

TILE_003 = ValidationRule(
    code="TILE-003",
    severity=Severity.WARN,
    rule_reference="Wall geometry lies inside the tile extent",
    message_template="Wall ({x1}, {y1}) -> ({x2}, {y2}) leaves extent {extent}",
    remediation_template="Clip the wall to [0, {extent}] or fix the tile extent",
)

TILE_004 = ValidationRule(
    code="TILE-004",
    severity=Severity.INFO,
    rule_reference="Tile boundaries are normally fully known",
    message_template="Side {edge} has {count} unknown unit(s)",
    remediation_template="Unknown tile units match any neighbour; mark them open or closed",
)


# =============================================================================
# LAYOUT RULES (LAYOUT)
# =============================================================================

LAYOUT_001 = ValidationRule(
    code="LAYOUT-001",
    severity=Severity.FAIL,
    rule_reference="Shared boundaries of adjacent cells match",
    message_template="Boundary toward ({nx}, {ny}) does not match its neighbour",
    remediation_template="Re-run generation; the search should never commit this",
)

LAYOUT_002 = ValidationRule(
    code="LAYOUT-002",
    severity=Severity.FAIL,
    rule_reference="The grid perimeter is closed",
    message_template="Perimeter side {edge} is not closed",
)

LAYOUT_003 = ValidationRule(
    code="LAYOUT-003",
    severity=Severity.FAIL,
    rule_reference="Placement history length equals the number of filled cells",
    message_template="History has {history} entries but {filled} cells are filled",
)

LAYOUT_004 = ValidationRule(
    code="LAYOUT-004",
    severity=Severity.WARN,
    rule_reference="Openings lead somewhere",
    message_template="Opening faces the empty cell ({nx}, {ny})",
    remediation_template="Layout is incomplete; increase the attempt budget",
)


ALL_RULES = {
    rule.code: rule
    for rule in (
        TILE_001, TILE_002, TILE_003, TILE_004,
        LAYOUT_001, LAYOUT_002, LAYOUT_003, LAYOUT_004,
    )
}


def get_rule(code: str) -> Optional[ValidationRule]:
    """Look up a rule by code."""
    return ALL_RULES.get(code)
