"""
Core data structures for the validation system.

Issues are anchored to what they are about: a tile name, a grid cell and a
tile side. Tile checks fill in ``tile`` and ``side``; layout checks also
fill in ``cell``, so a report can be read cell by cell.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from dungeon_tilesets.generators.tiles.boundary import Direction

Coord = Tuple[int, int]

NO_LOCATION = "(general)"


class Severity(Enum):
    """Validation issue severity levels.

    - INFO: Informational, logged but doesn't affect pass/fail
    - WARN: Warning, logged but doesn't block loading or generation
    - FAIL: Error, the tile or layout is invalid
    """
    INFO = auto()
    WARN = auto()
    FAIL = auto()

    def __str__(self) -> str:
        return self.name


class ValidationStage(Enum):
    """Where a result was produced: catalog registration or a placed layout."""
    CATALOG = "catalog"
    PLACEMENT = "placement"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation finding.

    Attributes:
        severity: Issue severity (INFO, WARN, FAIL)
        code: Rule code (e.g., "TILE-001")
        message: Human-readable description
        rule_reference: Short description of the rule being enforced
        remediation: Optional suggested fix
        tile: Name of the tile or variant involved
        cell: Grid cell (x, y), for layout issues
        side: Side of the tile the issue sits on
    """
    severity: Severity
    code: str
    message: str
    rule_reference: str
    remediation: Optional[str] = None
    tile: Optional[str] = None
    cell: Optional[Coord] = None
    side: Optional[Direction] = None

    @property
    def location(self) -> str:
        """``cell (x,y)`` for layout issues, ``tile NAME`` for tile issues."""
        if self.cell is not None:
            x, y = self.cell
            return f"cell ({x},{y})"
        if self.tile:
            return f"tile {self.tile}"
        return NO_LOCATION

    def format(self) -> str:
        """[SEVERITY] CODE tile=T cell=x,y side=NAME :: message :: fix=FIX"""
        cell = f"{self.cell[0]},{self.cell[1]}" if self.cell is not None else '-'
        side = self.side.name if self.side is not None else '-'
        return (
            f"[{self.severity}] {self.code} "
            f"tile={self.tile or '-'} cell={cell} side={side} :: "
            f"{self.message} :: fix={self.remediation or 'N/A'}"
        )

    def to_dict(self) -> dict:
        return {
            'severity': str(self.severity),
            'code': self.code,
            'message': self.message,
            'rule_reference': self.rule_reference,
            'remediation': self.remediation,
            'tile': self.tile,
            'cell': list(self.cell) if self.cell is not None else None,
            'side': self.side.value if self.side is not None else None,
        }

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationResult:
    """Issues from one validation run and the pass/fail verdict.

    A result fails as soon as it holds one FAIL issue; WARN and INFO issues
    are reported but never change the verdict.
    """
    issues: List[ValidationIssue] = field(default_factory=list)
    stage: Optional[ValidationStage] = None

    @property
    def passed(self) -> bool:
        return not self.failed

    @property
    def failed(self) -> bool:
        return any(i.severity is Severity.FAIL for i in self.issues)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is Severity.WARN]

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is Severity.FAIL]

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def at_cell(self, x: int, y: int) -> List[ValidationIssue]:
        """Issues anchored to grid cell (x, y)."""
        return [i for i in self.issues if i.cell == (x, y)]

    def by_location(self) -> Dict[str, List[ValidationIssue]]:
        """Issues grouped by location, in first-seen order; FAIL first within a group."""
        groups: Dict[str, List[ValidationIssue]] = {}
        for issue in self.issues:
            groups.setdefault(issue.location, []).append(issue)
        rank = {Severity.FAIL: 0, Severity.WARN: 1, Severity.INFO: 2}
        for issues in groups.values():
            issues.sort(key=lambda i: rank[i.severity])
        return groups

    def report(self) -> str:
        """Multi-line report, one block per tile or cell.

        Each line names the side and severity before the message, e.g.::

            cell (0,0) [tile dead_end]
              NORTH  FAIL LAYOUT-002  Perimeter side NORTH is not closed
        """
        if not self.issues:
            return "Validation passed: No issues found"

        stage_str = f" ({self.stage})" if self.stage else ""
        status = "PASSED" if self.passed else "FAILED"
        lines = [
            f"Validation {status}{stage_str}: {len(self.issues)} issue(s), "
            f"{len(self.errors)} fail, {len(self.warnings)} warn",
            "-" * 60,
        ]
        for location, issues in self.by_location().items():
            header = location
            tiles = sorted({i.tile for i in issues if i.tile and i.cell is not None})
            if tiles:
                header += f" [tile {', '.join(tiles)}]"
            lines.append(header)
            for issue in issues:
                side = issue.side.name if issue.side is not None else "-"
                lines.append(f"  {side:<6} {issue.severity!s:<4} {issue.code}  {issue.message}")
                if issue.remediation:
                    lines.append(f"         fix: {issue.remediation}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'passed': self.passed,
            'stage': str(self.stage) if self.stage else None,
            'issue_count': len(self.issues),
            'fail_count': len(self.errors),
            'warn_count': len(self.warnings),
            'issues': [issue.to_dict() for issue in self.issues],
        }


class ValidationError(Exception):
    """Raised in strict mode when a layout has FAIL issues.

    Attributes:
        result: The ValidationResult that caused the failure
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.report())
