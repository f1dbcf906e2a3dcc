"""
PRA Systems Model — Consistency Checker
=========================================
Validates a populated model before it is handed to a quantification tool.

CHECKS (all of them run; nothing fails fast):
  1. Unique ids per entity kind; records still pass their construction checks
  2. Required fields authored
  3. Every reference resolves (records and keyed documentation)
  4. Dependency loops have a logic-loop resolution record
  5. Fault trees: child closure, no orphan subtrees, cut sets name leaf basic events
  6. Components modeled in several systems carry a shared rationale

The result is a list of diagnostics, never an exception, so an analyst can
fix a document incrementally and re-run the check.
"""

from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from loguru import logger

from .documentation import ProcessDocumentation
from .errors import (
    DanglingReferenceError, DuplicateIdError, EntityValidationError, InvalidCutSetError,
    MissingFieldError, OrphanNodeWarning, SharedComponentWarning, UnresolvedLoopWarning,
)
from .ontology import EntityKind, FaultTree, PRAEntity


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  CONFIGURATION & RESULTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationConfig:
    """Switches for the consistency checker."""
    report_unresolved_loops: bool = True
    report_shared_components: bool = True
    warnings_as_errors: bool = False   # Escalate every warning to an error


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    code: str           # Name of the error/warning class
    entity_kind: str    # EntityKind value, or "documentation"
    entity_id: str
    invariant: str      # Short statement of the violated rule
    message: str

    def __str__(self) -> str:
        return (f"[{self.severity.value.upper()}] {self.code} "
                f"{self.entity_kind}:{self.entity_id}: {self.message}")


@dataclass
class ConsistencyReport:
    diagnostics: list[Diagnostic] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)  # Dependency loops found, resolved or not

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def by_code(self, code) -> list[Diagnostic]:
        """Diagnostics with the given code; accepts the class or its name."""
        name = code if isinstance(code, str) else code.__name__
        return [d for d in self.diagnostics if d.code == name]

    def summary(self) -> dict:
        counts: dict[str, int] = defaultdict(int)
        for d in self.diagnostics:
            counts[d.code] += 1
        return {
            "ok": self.ok,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "dependency_loops": len(self.cycles),
            "by_code": dict(counts),
        }


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  DEPENDENCY LOOPS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

WHITE, GRAY, BLACK = 0, 1, 2


def find_dependency_cycles(graph: dict[str, list[str]]) -> list[list[str]]:
    """
    Every elementary cycle of `graph` (system id → supporting ids), each once.

    Depth-first search from each system in id order. GRAY marks the systems
    on the current path; a system turns BLACK once every cycle through it has
    been reported, and the search never enters BLACK systems again. Each cycle
    is therefore found from its smallest id and comes back rotated to start
    there, so the same loop always compares equal.

    Overlapping loops are all reported: A -> B -> C -> A plus an A -> C edge
    gives both [A, B, C] and [A, C]. Self-loops are not cycles here; a system
    depending on itself is rejected as a record error.
    """
    nodes = sorted(set(graph) | {target for targets in graph.values() for target in targets})
    color: dict[str, int] = defaultdict(int)
    cycles: list[list[str]] = []

    def visit(start: str, path: list[str]):
        for target in sorted(set(graph.get(path[-1], ()))):
            if target == start:
                if len(path) > 1:
                    cycles.append(list(path))
            elif color[target] == WHITE:
                color[target] = GRAY
                path.append(target)
                visit(start, path)
                path.pop()
                color[target] = WHITE

    for start in nodes:
        color[start] = GRAY
        visit(start, [start])
        color[start] = BLACK
    return cycles


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  CHECKER
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConsistencyChecker:
    """Single-pass, read-only validation of a set of records."""

    def __init__(self, config: Optional[ValidationConfig] = None):
        self.config = config or ValidationConfig()

    def run(self, records: Iterable[PRAEntity],
            documentation: Optional[ProcessDocumentation] = None) -> ConsistencyReport:
        report = ConsistencyReport()
        index = self._build_index(records, report)
        self._check_required_fields(index, report)
        self._check_references(index, documentation, report)
        self._check_dependency_loops(index, report)
        self._check_fault_trees(index, report)
        if self.config.report_shared_components:
            self._check_shared_components(index, report)

        for diagnostic in report.diagnostics:
            logger.debug(str(diagnostic))
        logger.info(f"Consistency check: {len(report.errors)} errors, "
                    f"{len(report.warnings)} warnings, {len(report.cycles)} dependency loops")
        return report

    # ── Reporting ────────────────────────────────────

    def _error(self, report, code, kind, entity_id, invariant, message):
        report.diagnostics.append(Diagnostic(
            Severity.ERROR, code.__name__, getattr(kind, "value", kind), entity_id, invariant, message))

    def _warn(self, report, code, kind, entity_id, invariant, message):
        severity = Severity.ERROR if self.config.warnings_as_errors else Severity.WARNING
        report.diagnostics.append(Diagnostic(
            severity, code.__name__, getattr(kind, "value", kind), entity_id, invariant, message))

    # ── 1. Identity ──────────────────────────────────

    def _build_index(self, records, report) -> dict[EntityKind, dict[str, PRAEntity]]:
        index: dict[EntityKind, dict[str, PRAEntity]] = defaultdict(dict)
        for entity in records:
            store = index[entity.kind]
            if entity.id in store:
                self._error(report, DuplicateIdError, entity.kind, entity.id,
                            "ids are unique per entity kind",
                            f"{entity.kind.value} id {entity.id!r} is declared more than once")
                continue
            store[entity.id] = entity
            self._check_record(entity, report)
        return index

    def _check_record(self, entity, report):
        # Catches records mutated after construction (e.g. a dependency on itself)
        try:
            entity.validate()
        except EntityValidationError as exc:
            self._error(report, type(exc), entity.kind, entity.id,
                        f"{entity.kind.value} records pass their construction checks", str(exc))

    # ── 2. Required fields ───────────────────────────

    def _check_required_fields(self, index, report):
        for store in index.values():
            for entity in store.values():
                for name in entity.missing_fields():
                    self._error(report, MissingFieldError, entity.kind, entity.id,
                                f"{entity.kind.value}.{name} is required",
                                f"{name} has not been authored")

    # ── 3. References ────────────────────────────────

    def _check_references(self, index, documentation, report):
        for store in index.values():
            for entity in store.values():
                for field_name, ref in entity.references():
                    if ref.id not in index[ref.kind]:
                        self._error(report, DanglingReferenceError, entity.kind, entity.id,
                                    f"{entity.kind.value}.{field_name} resolves",
                                    f"{field_name} names undeclared {ref}")

        if documentation is None:
            return
        seen = set()
        for category, ref, _fragment in documentation.keyed_fragments():
            if (category, ref) in seen:
                continue
            seen.add((category, ref))
            if ref.id not in index[ref.kind]:
                self._error(report, DanglingReferenceError, "documentation", category.value,
                            f"{category.value} keys resolve",
                            f"fragments are filed under undeclared {ref}")

    # ── 4. Dependency loops ──────────────────────────

    def _check_dependency_loops(self, index, report):
        graph: dict[str, list[str]] = {system_id: [] for system_id in index[EntityKind.SYSTEM]}
        for dep in index[EntityKind.DEPENDENCY].values():
            if dep.dependent_system is None or dep.supporting_system is None:
                continue
            graph.setdefault(dep.dependent_system.id, []).append(dep.supporting_system.id)

        report.cycles = find_dependency_cycles(graph)
        if not self.config.report_unresolved_loops:
            return

        resolved = {loop.system_ids for loop in index[EntityKind.LOOP_RESOLUTION].values()}
        for cycle in report.cycles:
            if frozenset(cycle) in resolved:
                continue
            path = " -> ".join(cycle + cycle[:1])
            self._warn(report, UnresolvedLoopWarning, EntityKind.SYSTEM, cycle[0],
                       "dependency loops have a logic loop resolution",
                       f"dependency loop {path} has no logic loop resolution")

    # ── 5. Fault trees ───────────────────────────────

    def _check_fault_trees(self, index, report):
        events = index[EntityKind.BASIC_EVENT]
        for tree in index[EntityKind.FAULT_TREE].values():
            self._check_tree(tree, events, report)

    def _check_tree(self, tree: FaultTree, events, report):
        for node_id, node in tree.nodes.items():
            for child in node.children:
                if child not in tree.nodes:
                    self._error(report, DanglingReferenceError, EntityKind.FAULT_TREE, tree.id,
                                "fault_tree children resolve within the tree",
                                f"node {node_id!r} lists undeclared child {child!r}")

        unreachable = self._unreachable_nodes(tree)
        if unreachable:
            self._warn(report, OrphanNodeWarning, EntityKind.FAULT_TREE, tree.id,
                       "every fault tree node lies under the top node",
                       f"nodes {unreachable} are not reachable from top node {tree.top_event!r}")

        leaves = tree.leaves()
        for position, cut_set in enumerate(tree.minimal_cut_sets, start=1):
            if not cut_set:
                self._error(report, InvalidCutSetError, EntityKind.FAULT_TREE, tree.id,
                            "cut sets are non-empty", f"cut set {position} is empty")
                continue
            for member in sorted(cut_set):
                if member not in tree.nodes:
                    problem = "is not a node of the tree"
                elif member not in leaves:
                    problem = "is a gate, not a leaf"
                elif member not in events:
                    problem = "has no basic event record"
                else:
                    continue
                self._error(report, InvalidCutSetError, EntityKind.FAULT_TREE, tree.id,
                            "cut sets contain only leaf basic events",
                            f"cut set {position}: {member!r} {problem}")

    @staticmethod
    def _unreachable_nodes(tree: FaultTree) -> list[str]:
        roots = tree.roots()
        if tree.top_node is None and len(roots) != 1:
            return []  # No usable top event; already reported as a record error
        top = tree.top_event
        if top not in tree.nodes:
            return []
        seen, pending = {top}, [top]
        while pending:
            for child in tree.nodes[pending.pop()].children:
                if child in tree.nodes and child not in seen:
                    seen.add(child)
                    pending.append(child)
        return [node_id for node_id in tree.nodes if node_id not in seen]

    # ── 6. Shared components ─────────────────────────

    def _check_shared_components(self, index, report):
        owners: dict[str, list] = defaultdict(list)
        for system in index[EntityKind.SYSTEM].values():
            for component, entry in system.modeled_components_and_failures.items():
                owners[component].append((system.id, entry))

        for component, entries in owners.items():
            if len(entries) < 2 or any(entry.shared_rationale for _, entry in entries):
                continue
            systems = ", ".join(system_id for system_id, _ in entries)
            self._warn(report, SharedComponentWarning, EntityKind.SYSTEM, entries[0][0],
                       "components shared between systems carry a rationale",
                       f"component {component!r} is modeled in {systems} without a shared rationale")


def check_records(records: Iterable[PRAEntity],
                  documentation: Optional[ProcessDocumentation] = None,
                  config: Optional[ValidationConfig] = None) -> ConsistencyReport:
    return ConsistencyChecker(config).run(records, documentation)


def check_model(model, config: Optional[ValidationConfig] = None) -> ConsistencyReport:
    """Check a `SystemsAnalysisModel` (or anything with `entities()` and `documentation`)."""
    return ConsistencyChecker(config).run(model.entities(), model.documentation)
