"""
PRA Systems Model — Registry
==============================
In-memory store for one revision of a PRA systems analysis.

  - Entity registration (insert / replace / remove per kind)
  - Reference resolution
  - Queries: per-system documentation view, dependency graph,
    fault trees and basic events by system
  - Consistency check and finalization for submission
  - Export to / load from JSON

The registry assumes one writer and many readers. Validation always runs on
a deep-copied snapshot, so concurrent checks of different registries (or of
the same registry between edits) never interfere.
"""

import copy
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger

from . import serialization
from .checker import ConsistencyReport, ValidationConfig, check_model
from .documentation import Fragment, ProcessDocumentation
from .errors import (
    DanglingReferenceError, DuplicateIdError, EntityValidationError, SubmissionBlockedError,
)
from .ontology import (
    BasicEvent, EntityKind, FaultTree, HumanAction, LogicLoopResolution,
    ModelUncertaintyDocumentation, PassiveSystemsTreatment, PRAEntity,
    PreOperationalAssumptionsDocumentation, Reference, SuccessCriterionDefinition,
    SystemDefinition, SystemDependency, SystemModelEvaluation,
    SystemSensitivityStudy, coerce_ref,
)


class SystemsAnalysisModel:
    """
    Registry of systems, dependencies, fault trees, basic events and their
    documentation for one PRA revision.

    Entities are looked up by `Reference`; the kind on the reference picks
    the store, so ids only have to be unique within a kind.
    """

    def __init__(self, revision: int = 1):
        self.revision = revision

        # Entity stores (id → entity)
        self.systems: dict[str, SystemDefinition] = {}
        self.dependencies: dict[str, SystemDependency] = {}
        self.fault_trees: dict[str, FaultTree] = {}
        self.basic_events: dict[str, BasicEvent] = {}
        self.passive_treatments: dict[str, PassiveSystemsTreatment] = {}
        self.human_actions: dict[str, HumanAction] = {}
        self.success_criteria: dict[str, SuccessCriterionDefinition] = {}
        self.loop_resolutions: dict[str, LogicLoopResolution] = {}
        self.evaluations: dict[str, SystemModelEvaluation] = {}
        self.sensitivity_studies: dict[str, SystemSensitivityStudy] = {}
        self.model_uncertainties: dict[str, ModelUncertaintyDocumentation] = {}
        self.pre_operational_assumptions: dict[str, PreOperationalAssumptionsDocumentation] = {}

        self.documentation = ProcessDocumentation()

        self._stores: dict[EntityKind, dict] = {
            EntityKind.SYSTEM: self.systems,
            EntityKind.DEPENDENCY: self.dependencies,
            EntityKind.FAULT_TREE: self.fault_trees,
            EntityKind.BASIC_EVENT: self.basic_events,
            EntityKind.PASSIVE_TREATMENT: self.passive_treatments,
            EntityKind.HUMAN_ACTION: self.human_actions,
            EntityKind.SUCCESS_CRITERION: self.success_criteria,
            EntityKind.LOOP_RESOLUTION: self.loop_resolutions,
            EntityKind.EVALUATION: self.evaluations,
            EntityKind.SENSITIVITY_STUDY: self.sensitivity_studies,
            EntityKind.MODEL_UNCERTAINTY: self.model_uncertainties,
            EntityKind.PRE_OPERATIONAL_ASSUMPTIONS: self.pre_operational_assumptions,
        }

    def store(self, kind) -> dict[str, PRAEntity]:
        return self._stores[EntityKind(kind)]

    def _store_for(self, entity) -> dict:
        if not isinstance(entity, PRAEntity):
            raise TypeError(f"Not a PRA record: {type(entity).__name__}")
        # Records are mutable; whatever was checked at construction may no longer hold
        try:
            entity.validate()
        except EntityValidationError as exc:
            logger.warning(f"Rejected {entity.kind.value} {entity.id!r}: {exc}")
            raise
        return self._stores[entity.kind]

    # ── Entity Registration ──────────────────────────

    def add_entity(self, entity: PRAEntity) -> Reference:
        """Insert a record; an invalid record or an id already used by the same kind is rejected."""
        store = self._store_for(entity)
        if entity.id in store:
            logger.warning(f"Rejected {entity.kind.value} {entity.id!r}: id already registered")
            raise DuplicateIdError(entity.kind, entity.id)
        store[entity.id] = entity
        logger.debug(f"Registered {entity.ref}")
        return entity.ref

    def add_entities(self, *entities: PRAEntity) -> list[Reference]:
        return [self.add_entity(entity) for entity in entities]

    def replace_entity(self, entity: PRAEntity) -> Optional[PRAEntity]:
        """Insert or overwrite a record; returns the record it replaced, if any."""
        store = self._store_for(entity)
        previous = store.get(entity.id)
        store[entity.id] = entity
        logger.debug(f"{'Replaced' if previous else 'Registered'} {entity.ref}")
        return previous

    def remove_entity(self, ref: Reference) -> PRAEntity:
        entity = self.require(ref)
        del self._stores[ref.kind][ref.id]
        logger.debug(f"Removed {ref}")
        return entity

    # ── Resolution ───────────────────────────────────

    def resolve(self, ref: Reference) -> Optional[PRAEntity]:
        """
        The entity `ref` names, or None when nothing of that kind has that id.

        A bare id string is refused: ids are only unique per kind, so the
        kind has to come from the reference.
        """
        if not isinstance(ref, Reference):
            raise TypeError(f"resolve() needs a Reference (e.g. system_ref(id)), got {ref!r}")
        return self._stores[ref.kind].get(ref.id)

    def require(self, ref: Reference, referrer=None) -> PRAEntity:
        entity = self.resolve(ref)
        if entity is None:
            by = f" (referenced by {referrer})" if referrer is not None else ""
            raise DanglingReferenceError(f"{ref} is not declared{by}", ref, referrer)
        return entity

    # ── Documentation ────────────────────────────────

    def put_fragment(self, category, ref, fragment: Fragment, strict: bool = False) -> None:
        """File a documentation fragment; `strict` also requires `ref` to resolve now."""
        self.documentation.put_fragment(
            category, ref, fragment, resolver=self.resolve if strict else None)

    def get_fragments_for_system(self, ref) -> list:
        return self.documentation.get_fragments_for_system(ref)

    # ── Queries ──────────────────────────────────────

    def get_dependency_graph(self) -> dict[str, list[str]]:
        """System id → ids of the systems it depends on (every system is a key)."""
        graph: dict[str, list[str]] = {system_id: [] for system_id in self.systems}
        for dep in self.dependencies.values():
            if dep.dependent_system is None or dep.supporting_system is None:
                continue
            targets = graph.setdefault(dep.dependent_system.id, [])
            if dep.supporting_system.id not in targets:
                targets.append(dep.supporting_system.id)
        return graph

    def get_dependencies_of(self, ref) -> list[SystemDependency]:
        system = coerce_ref(ref, EntityKind.SYSTEM, "system")
        return [dep for dep in self.dependencies.values() if dep.dependent_system == system]

    def get_dependents_of(self, ref) -> list[SystemDependency]:
        system = coerce_ref(ref, EntityKind.SYSTEM, "system")
        return [dep for dep in self.dependencies.values() if dep.supporting_system == system]

    def get_fault_trees_for_system(self, ref) -> list[FaultTree]:
        system = coerce_ref(ref, EntityKind.SYSTEM, "system")
        return [tree for tree in self.fault_trees.values() if tree.system == system]

    def get_basic_events_for_system(self, ref) -> list[BasicEvent]:
        system = coerce_ref(ref, EntityKind.SYSTEM, "system")
        return [event for event in self.basic_events.values() if event.system == system]

    def entities(self) -> Iterator[PRAEntity]:
        for store in self._stores.values():
            yield from store.values()

    # ── Statistics ───────────────────────────────────

    def stats(self) -> dict:
        counts = {kind.value: len(store) for kind, store in self._stores.items()}
        counts["total_entities"] = sum(len(store) for store in self._stores.values())
        counts["documentation_fragments"] = len(self.documentation)
        return counts

    # ── Revisions ────────────────────────────────────

    def snapshot(self) -> "SystemsAnalysisModel":
        return copy.deepcopy(self)

    def next_revision(self) -> "SystemsAnalysisModel":
        """A copy to edit as the next revision; this revision stays untouched."""
        revised = self.snapshot()
        revised.revision = self.revision + 1
        logger.info(f"Opened revision {revised.revision} from revision {self.revision}")
        return revised

    # ── Validation ───────────────────────────────────

    def check(self, config: Optional[ValidationConfig] = None) -> ConsistencyReport:
        return check_model(self.snapshot(), config)

    def finalize(self, sign_off: Optional[str] = None,
                 config: Optional[ValidationConfig] = None) -> ConsistencyReport:
        """
        Gate for regulatory submission.

        Any error blocks. Warnings (unresolved loops, shared components) block
        unless a sign-off note accepting them is given.
        """
        report = self.check(config)
        if report.errors:
            logger.warning(f"Revision {self.revision} blocked: {len(report.errors)} errors")
            raise SubmissionBlockedError(
                f"Revision {self.revision} has {len(report.errors)} consistency errors", report)
        if report.warnings and not (sign_off and sign_off.strip()):
            logger.warning(f"Revision {self.revision} blocked: "
                           f"{len(report.warnings)} warnings without sign-off")
            raise SubmissionBlockedError(
                f"Revision {self.revision} has {len(report.warnings)} warnings; "
                f"a sign-off note is required", report)
        if report.warnings:
            logger.info(f"Warnings accepted with sign-off: {sign_off}")
        logger.info(f"Revision {self.revision} finalized for submission")
        return report

    # ── Export ───────────────────────────────────────

    def to_dict(self) -> dict:
        return serialization.model_to_dict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SystemsAnalysisModel":
        records = serialization.records_from_dict(data)
        model = cls(revision=(data.get("metadata") or {}).get("revision", 1))
        for record in records:
            model.add_entity(record)
        model.documentation = serialization.documentation_from_dict(
            data.get("processDocumentation", {}))
        return model

    def dumps(self) -> str:
        return serialization.dumps(self.to_dict())

    @classmethod
    def loads(cls, text: str) -> "SystemsAnalysisModel":
        return cls.from_dict(serialization.loads(text))

    def export_json(self, filepath: str):
        """Export the whole model to JSON."""
        Path(filepath).write_text(self.dumps(), encoding="utf-8")
        logger.info(f"Systems model exported to {filepath} ({self.stats()['total_entities']} entities)")

    @classmethod
    def load_json(cls, filepath: str) -> "SystemsAnalysisModel":
        model = cls.loads(Path(filepath).read_text(encoding="utf-8"))
        logger.info(f"Systems model loaded from {filepath} ({model.stats()['total_entities']} entities)")
        return model

    def __eq__(self, other) -> bool:
        if not isinstance(other, SystemsAnalysisModel):
            return NotImplemented
        return (self.revision == other.revision
                and self._stores == other._stores
                and self.documentation == other.documentation)
