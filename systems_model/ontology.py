"""
PRA Systems Model — Ontology & Schema
=======================================
Defines the data model for the Systems Analysis element of a Probabilistic
Risk Assessment (PRA):

ENTITY KINDS:
  System → Dependency → Fault Tree → Basic Event
  Passive Systems Treatment, Human Action, Success Criterion,
  Logic Loop Resolution, Evaluation, Sensitivity Study,
  Model Uncertainty, Pre-Operational Assumptions

CROSS-REFERENCES:
  Records never embed one another. They point at each other through
  `Reference` values that carry the kind of entity they name, so a
  human-action id can never be filed where a system id is expected.

DOCUMENTATION CATEGORIES:
  The 21 SY-C1 process-documentation items, each keyed by the kind of
  entity it documents (or global, for information sources and
  modularization).

Records are reference data for one PRA revision. Fields computed by an
external quantification engine (top event probability, quantitative
results, cut sets) are stored here as opaque payloads.
"""

from __future__ import annotations
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import ClassVar, Iterator, Optional, Union

from .errors import (
    EntityValidationError, MissingTopNodeError, ReferenceKindError,
    SelfDependencyError, UnjustifiedExclusionError,
)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  ENUMERATIONS — Controlled Vocabularies
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class EntityKind(str, Enum):
    """Every kind of record that can be named by a reference."""
    SYSTEM = "system"
    DEPENDENCY = "dependency"
    FAULT_TREE = "fault_tree"
    BASIC_EVENT = "basic_event"
    PASSIVE_TREATMENT = "passive_treatment"
    HUMAN_ACTION = "human_action"
    SUCCESS_CRITERION = "success_criterion"
    LOOP_RESOLUTION = "loop_resolution"
    EVALUATION = "evaluation"
    SENSITIVITY_STUDY = "sensitivity_study"
    MODEL_UNCERTAINTY = "model_uncertainty"
    PRE_OPERATIONAL_ASSUMPTIONS = "pre_operational_assumptions"


class DependencyType(str, Enum):
    FUNCTIONAL = "functional"
    SPATIAL = "spatial"
    HUMAN = "human"
    OTHER = "other"


class GateType(str, Enum):
    """Fault tree node types."""
    AND = "and"
    OR = "or"
    NOT = "not"
    ATLEAST = "atleast"          # k-out-of-n
    BASIC = "basic"              # Leaf: basic event
    HOUSE = "house"              # Leaf: house event (true/false switch)
    UNDEVELOPED = "undeveloped"  # Leaf: not developed further


LEAF_GATES = frozenset({GateType.BASIC, GateType.HOUSE, GateType.UNDEVELOPED})


class DocumentationCategory(str, Enum):
    """The SY-C1 process documentation items, in reporting order."""
    SYSTEM_FUNCTION = "systemFunctionDocumentation"
    SYSTEM_BOUNDARY = "systemBoundaryDocumentation"
    SYSTEM_SCHEMATIC = "systemSchematicDocumentation"
    EQUIPMENT_OPERABILITY = "equipmentOperabilityDocumentation"
    OPERATIONAL_HISTORY = "operationalHistoryDocumentation"
    SUCCESS_CRITERIA = "successCriteriaDocumentation"
    HUMAN_ACTIONS = "humanActionsDocumentation"
    TEST_AND_MAINTENANCE = "testAndMaintenanceDocumentation"
    DEPENDENCY_SEARCH = "dependencySearchDocumentation"
    SPATIAL_DEPENDENCIES = "spatialDependenciesDocumentation"
    MODELING_ASSUMPTIONS = "modelingAssumptionsDocumentation"
    COMPONENT_EXCLUSION = "componentExclusionDocumentation"
    MODULARIZATION = "modularizationDocumentation"
    LOGIC_LOOP_RESOLUTIONS = "logicLoopResolutionsDocumentation"
    EVALUATION_RESULTS = "evaluationResultsDocumentation"
    SENSITIVITY_STUDIES = "sensitivityStudiesDocumentation"
    INFORMATION_SOURCES = "informationSourcesDocumentation"
    BASIC_EVENTS = "basicEventsDocumentation"
    NOMENCLATURE = "nomenclatureDocumentation"
    DIGITAL_INSTRUMENTATION = "digitalInstrumentationDocumentation"
    PASSIVE_SYSTEMS = "passiveSystemsDocumentation"

    @property
    def key_kind(self) -> Optional[EntityKind]:
        """Kind of entity fragments are filed under; None for global categories."""
        if self in _GLOBAL_CATEGORIES:
            return None
        return _NON_SYSTEM_KEYS.get(self, EntityKind.SYSTEM)

    @property
    def is_global(self) -> bool:
        return self in _GLOBAL_CATEGORIES

    @property
    def order(self) -> int:
        return _CATEGORY_ORDER[self]


_GLOBAL_CATEGORIES = frozenset({
    DocumentationCategory.INFORMATION_SOURCES,
    DocumentationCategory.MODULARIZATION,
})

_NON_SYSTEM_KEYS = {
    DocumentationCategory.HUMAN_ACTIONS: EntityKind.HUMAN_ACTION,
    DocumentationCategory.SPATIAL_DEPENDENCIES: EntityKind.DEPENDENCY,
    DocumentationCategory.LOGIC_LOOP_RESOLUTIONS: EntityKind.LOOP_RESOLUTION,
    DocumentationCategory.BASIC_EVENTS: EntityKind.BASIC_EVENT,
}

_CATEGORY_ORDER = {cat: i for i, cat in enumerate(DocumentationCategory)}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  REFERENCES — Kind-tagged identifiers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class Reference:
    """Names an entity of a given kind declared elsewhere in the model."""
    kind: EntityKind
    id: str

    def __post_init__(self):
        if not isinstance(self.kind, EntityKind):
            object.__setattr__(self, "kind", EntityKind(self.kind))
        if not isinstance(self.id, str) or not self.id.strip():
            raise EntityValidationError(f"{self.kind.value} reference needs a non-empty id")

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


def system_ref(entity_id: str) -> Reference:
    return Reference(EntityKind.SYSTEM, entity_id)


def dependency_ref(entity_id: str) -> Reference:
    return Reference(EntityKind.DEPENDENCY, entity_id)


def fault_tree_ref(entity_id: str) -> Reference:
    return Reference(EntityKind.FAULT_TREE, entity_id)


def basic_event_ref(entity_id: str) -> Reference:
    return Reference(EntityKind.BASIC_EVENT, entity_id)


def action_ref(entity_id: str) -> Reference:
    return Reference(EntityKind.HUMAN_ACTION, entity_id)


def criterion_ref(entity_id: str) -> Reference:
    return Reference(EntityKind.SUCCESS_CRITERION, entity_id)


def loop_ref(entity_id: str) -> Reference:
    return Reference(EntityKind.LOOP_RESOLUTION, entity_id)


def coerce_ref(value, kind: EntityKind, field_name: str = "reference") -> Optional[Reference]:
    """Turn a plain id into a reference of `kind`; reject references of any other kind."""
    if value is None:
        return None
    if isinstance(value, Reference):
        if value.kind != kind:
            raise ReferenceKindError(
                f"{field_name} expects a {kind.value} reference, got {value}",
                field_name, kind, value.kind,
            )
        return value
    if isinstance(value, str):
        # Blank means "not authored yet"; the checker reports it if required
        return Reference(kind, value) if value.strip() else None
    raise ReferenceKindError(
        f"{field_name} expects a {kind.value} reference, got {type(value).__name__}",
        field_name, kind,
    )


def _coerce_refs(values, kind: EntityKind, field_name: str) -> list[Reference]:
    refs = []
    for value in values or []:
        ref = coerce_ref(value, kind, field_name)
        if ref is not None:
            refs.append(ref)
    return refs


def _uid() -> str:
    return uuid.uuid4().hex[:12]


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  VALUE TYPES — Embedded in records, never referenced by id
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class InlineCriterion:
    """Success criterion written directly on the system."""
    text: str
    variant: ClassVar[str] = "inline"


@dataclass(frozen=True)
class CriterionReference:
    """Success criterion held in a separate SuccessCriterionDefinition."""
    criterion: Reference
    variant: ClassVar[str] = "reference"

    def __post_init__(self):
        ref = coerce_ref(self.criterion, EntityKind.SUCCESS_CRITERION, "criterion")
        if ref is None:
            raise EntityValidationError("criterion reference needs an id")
        object.__setattr__(self, "criterion", ref)


SuccessCriterion = Union[InlineCriterion, CriterionReference]


def coerce_success_criterion(value) -> Optional[SuccessCriterion]:
    if value is None or isinstance(value, (InlineCriterion, CriterionReference)):
        return value
    if isinstance(value, Reference):
        return CriterionReference(value)
    if isinstance(value, str):
        return InlineCriterion(value) if value.strip() else None
    raise EntityValidationError(
        f"success criterion must be text or a success_criterion reference, got {type(value).__name__}"
    )


@dataclass
class ModeledComponent:
    """A component inside a system boundary and the failure modes modeled for it."""
    failure_modes: set[str] = field(default_factory=set)
    inclusion_justification: str = ""
    group: Optional[str] = None             # e.g. "primary pumps", "IHX"
    shared_rationale: Optional[str] = None  # Why the component also appears in another system

    def __post_init__(self):
        self.failure_modes = set(self.failure_modes)


@dataclass
class FaultTreeNode:
    """A gate or leaf in a fault tree; children are node ids in the same tree."""
    gate: GateType = GateType.BASIC
    description: str = ""
    children: list[str] = field(default_factory=list)
    k: Optional[int] = None  # ATLEAST threshold

    def __post_init__(self):
        self.gate = GateType(self.gate)
        self.children = list(self.children)
        self.validate()

    def validate(self):
        if self.gate in LEAF_GATES and self.children:
            raise EntityValidationError(f"{self.gate.value} node cannot have children")
        if self.gate == GateType.ATLEAST:
            if self.k is None or not 1 <= self.k <= len(self.children):
                raise EntityValidationError(
                    f"atleast gate needs 1 <= k <= {len(self.children)}, got k={self.k}"
                )

    @property
    def is_leaf(self) -> bool:
        return not self.children


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  ENTITY MODELS — Registry records
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass
class PRAEntity:
    """Base record for everything that can be registered and referenced."""
    id: str = field(default_factory=_uid)
    name: str = ""
    description: str = ""
    metadata: dict = field(default_factory=dict)

    kind: ClassVar[EntityKind]
    required_fields: ClassVar[tuple] = ("name",)

    def __post_init__(self):
        # Id only; subclasses call validate() once their fields are coerced
        PRAEntity.validate(self)

    def validate(self):
        """
        Re-run the construction checks.

        Records are mutable, so the registry and the checker call this again
        on whatever they are handed. Subclasses extend it.
        """
        if not isinstance(self.id, str) or not self.id.strip():
            raise EntityValidationError(f"{self.kind.value} record needs a non-empty id")

    @property
    def ref(self) -> Reference:
        return Reference(self.kind, self.id)

    def references(self) -> Iterator[tuple[str, Reference]]:
        """Yield ``(field_name, reference)`` for every outgoing reference."""
        return iter(())

    def missing_fields(self) -> list[str]:
        return [name for name in self.required_fields if _is_blank(getattr(self, name))]


# ── System ─────────────────────────────────────────────────────

@dataclass
class SystemDefinition(PRAEntity):
    """A plant system inside the PRA (e.g. Primary Sodium, Shutdown Cooling)."""
    boundaries: list[str] = field(default_factory=list)
    success_criterion: Optional[SuccessCriterion] = field(
        default=None, metadata={"variant": "success_criterion"})
    mission_time: Optional[float] = None  # hours
    schematic_reference: Optional[str] = None
    modeled_components_and_failures: dict[str, ModeledComponent] = field(
        default_factory=dict, metadata={"nested": ModeledComponent, "mapping": True})
    component_exclusion_justifications: list[str] = field(default_factory=list)

    kind = EntityKind.SYSTEM
    required_fields = ("name", "success_criterion")

    def __post_init__(self):
        super().__post_init__()
        self.boundaries = list(self.boundaries)
        self.success_criterion = coerce_success_criterion(self.success_criterion)
        components = {}
        for component, entry in self.modeled_components_and_failures.items():
            if isinstance(entry, ModeledComponent):
                components[component] = entry
            elif isinstance(entry, dict):
                components[component] = ModeledComponent(**entry)
            else:
                # Bare collection of failure-mode tags
                components[component] = ModeledComponent(failure_modes=entry)
        self.modeled_components_and_failures = components
        self.component_exclusion_justifications = list(self.component_exclusion_justifications)
        self.validate()

    def validate(self):
        super().validate()
        if not self.modeled_components_and_failures and not self.component_exclusion_justifications:
            raise UnjustifiedExclusionError(
                f"System {self.id!r} models no components and justifies no exclusions"
            )

    def references(self) -> Iterator[tuple[str, Reference]]:
        if isinstance(self.success_criterion, CriterionReference):
            yield "success_criterion", self.success_criterion.criterion


# ── Dependency ─────────────────────────────────────────────────

@dataclass
class SystemDependency(PRAEntity):
    """Directed edge: `dependent_system` needs `supporting_system` to succeed."""
    dependent_system: Optional[Reference] = None
    supporting_system: Optional[Reference] = None
    dependency_type: DependencyType = DependencyType.FUNCTIONAL
    human_action: Optional[Reference] = None  # For human dependencies

    kind = EntityKind.DEPENDENCY
    required_fields = ("dependent_system", "supporting_system")

    def __post_init__(self):
        super().__post_init__()
        self.dependent_system = coerce_ref(self.dependent_system, EntityKind.SYSTEM, "dependent_system")
        self.supporting_system = coerce_ref(self.supporting_system, EntityKind.SYSTEM, "supporting_system")
        self.human_action = coerce_ref(self.human_action, EntityKind.HUMAN_ACTION, "human_action")
        self.dependency_type = DependencyType(self.dependency_type)
        self.validate()

    def validate(self):
        super().validate()
        # Fields may have been reassigned to bare ids since construction
        dependent = getattr(self.dependent_system, "id", self.dependent_system)
        supporting = getattr(self.supporting_system, "id", self.supporting_system)
        if dependent is not None and dependent == supporting:
            raise SelfDependencyError(
                f"Dependency {self.id!r}: system {dependent!r} cannot support itself", dependent)

    def references(self) -> Iterator[tuple[str, Reference]]:
        for name in ("dependent_system", "supporting_system", "human_action"):
            ref = getattr(self, name)
            if ref is not None:
                yield name, ref


# ── Fault Tree ─────────────────────────────────────────────────

@dataclass
class FaultTree(PRAEntity):
    """Logic model for the failure of one system."""
    system: Optional[Reference] = None
    nodes: dict[str, FaultTreeNode] = field(
        default_factory=dict, metadata={"nested": FaultTreeNode, "mapping": True})
    top_node: Optional[str] = None
    minimal_cut_sets: list[frozenset[str]] = field(default_factory=list)
    # Quantification output, supplied externally
    top_event_probability: Optional[float] = None
    quantitative_results: dict = field(default_factory=dict)

    kind = EntityKind.FAULT_TREE
    required_fields = ("name", "system")

    def __post_init__(self):
        super().__post_init__()
        self.system = coerce_ref(self.system, EntityKind.SYSTEM, "system")
        self.nodes = {
            node_id: node if isinstance(node, FaultTreeNode) else FaultTreeNode(**node)
            for node_id, node in self.nodes.items()
        }
        self.minimal_cut_sets = [frozenset(cut_set) for cut_set in self.minimal_cut_sets]
        self.validate()

    def validate(self):
        super().validate()
        for node in self.nodes.values():
            node.validate()
        self._validate_top_node()

    def _validate_top_node(self):
        roots = self.roots()
        if self.top_node is not None:
            if self.top_node not in self.nodes:
                raise MissingTopNodeError(
                    f"Fault tree {self.id!r}: top node {self.top_node!r} is not in the tree",
                    self.id, tuple(roots))
            if self.top_node not in roots:
                raise MissingTopNodeError(
                    f"Fault tree {self.id!r}: top node {self.top_node!r} is a child of another node",
                    self.id, tuple(roots))
        elif not roots:
            raise MissingTopNodeError(
                f"Fault tree {self.id!r}: every node has a parent, no top event", self.id)
        elif len(roots) > 1:
            raise MissingTopNodeError(
                f"Fault tree {self.id!r}: {len(roots)} parentless nodes {roots}, designate top_node",
                self.id, tuple(roots))

    def roots(self) -> list[str]:
        """Nodes never referenced as a child, in declaration order."""
        referenced = {child for node in self.nodes.values() for child in node.children}
        return [node_id for node_id in self.nodes if node_id not in referenced]

    def leaves(self) -> set[str]:
        return {node_id for node_id, node in self.nodes.items() if node.is_leaf}

    @property
    def top_event(self) -> str:
        return self.top_node if self.top_node is not None else self.roots()[0]

    def references(self) -> Iterator[tuple[str, Reference]]:
        if self.system is not None:
            yield "system", self.system


# ── Basic Event ────────────────────────────────────────────────

@dataclass
class BasicEvent(PRAEntity):
    """A leaf failure mode of one system."""
    system: Optional[Reference] = None
    module_reference: Optional[str] = None
    cutset_reference: Optional[str] = None
    probability: Optional[float] = None  # Supplied by quantification

    kind = EntityKind.BASIC_EVENT
    required_fields = ("system", "description")

    def __post_init__(self):
        super().__post_init__()
        self.system = coerce_ref(self.system, EntityKind.SYSTEM, "system")

    def references(self) -> Iterator[tuple[str, Reference]]:
        if self.system is not None:
            yield "system", self.system


# ── Passive Systems Treatment ──────────────────────────────────

@dataclass
class PassiveSystemsTreatment(PRAEntity):
    """An inherent-safety mechanism credited for one system."""
    system: Optional[Reference] = None
    performance_analysis_reference: Optional[str] = None
    uncertainty_analysis_reference: Optional[str] = None
    phenomena: list[str] = field(default_factory=list)
    uncertainty_evaluation: str = ""

    kind = EntityKind.PASSIVE_TREATMENT
    required_fields = ("system", "description")

    def __post_init__(self):
        super().__post_init__()
        self.system = coerce_ref(self.system, EntityKind.SYSTEM, "system")
        self.phenomena = list(self.phenomena)

    def references(self) -> Iterator[tuple[str, Reference]]:
        if self.system is not None:
            yield "system", self.system


# ── Supporting records ─────────────────────────────────────────

class _SystemScoped:
    """Mixin for records that document a single system."""

    def references(self) -> Iterator[tuple[str, Reference]]:
        if self.system is not None:
            yield "system", self.system


class _MultiSystemScoped:
    """Mixin for records that document several systems."""

    def references(self) -> Iterator[tuple[str, Reference]]:
        for ref in self.systems:
            yield "systems", ref


@dataclass
class HumanAction(_MultiSystemScoped, PRAEntity):
    """An operator action credited in, or affecting, system models."""
    systems: list[Reference] = field(default_factory=list)
    timing: str = ""  # pre-initiator, post-initiator, recovery

    kind = EntityKind.HUMAN_ACTION

    def __post_init__(self):
        super().__post_init__()
        self.systems = _coerce_refs(self.systems, EntityKind.SYSTEM, "systems")


@dataclass
class SuccessCriterionDefinition(_SystemScoped, PRAEntity):
    system: Optional[Reference] = None
    criterion: str = ""
    mission_time: Optional[float] = None  # hours
    basis: str = ""

    kind = EntityKind.SUCCESS_CRITERION
    required_fields = ("system", "criterion")

    def __post_init__(self):
        super().__post_init__()
        self.system = coerce_ref(self.system, EntityKind.SYSTEM, "system")


@dataclass
class LogicLoopResolution(_MultiSystemScoped, PRAEntity):
    """How a circular dependency among `systems` was broken in the logic model."""
    systems: list[Reference] = field(default_factory=list)
    resolution: str = ""

    kind = EntityKind.LOOP_RESOLUTION
    required_fields = ("systems", "resolution")

    def __post_init__(self):
        super().__post_init__()
        self.systems = _coerce_refs(self.systems, EntityKind.SYSTEM, "systems")
        self.validate()

    def validate(self):
        super().validate()
        if len({ref.id for ref in self.systems}) == 1:
            raise EntityValidationError(
                f"Loop resolution {self.id!r} names a single system; loops span two or more"
            )

    @property
    def system_ids(self) -> frozenset[str]:
        return frozenset(ref.id for ref in self.systems)


@dataclass
class SystemModelEvaluation(_SystemScoped, PRAEntity):
    """Stored evaluation results for a system model (computed elsewhere)."""
    system: Optional[Reference] = None
    fault_tree: Optional[Reference] = None
    top_event_probability: Optional[float] = None
    quantitative_results: dict = field(default_factory=dict)
    dominant_contributors: list[Reference] = field(default_factory=list)
    review_notes: str = ""

    kind = EntityKind.EVALUATION
    required_fields = ("system",)

    def __post_init__(self):
        super().__post_init__()
        self.system = coerce_ref(self.system, EntityKind.SYSTEM, "system")
        self.fault_tree = coerce_ref(self.fault_tree, EntityKind.FAULT_TREE, "fault_tree")
        self.dominant_contributors = _coerce_refs(
            self.dominant_contributors, EntityKind.BASIC_EVENT, "dominant_contributors")

    def references(self) -> Iterator[tuple[str, Reference]]:
        yield from super().references()
        if self.fault_tree is not None:
            yield "fault_tree", self.fault_tree
        for ref in self.dominant_contributors:
            yield "dominant_contributors", ref


@dataclass
class SystemSensitivityStudy(_SystemScoped, PRAEntity):
    system: Optional[Reference] = None
    parameter: str = ""
    variation: str = ""
    results: dict = field(default_factory=dict)
    insights: str = ""

    kind = EntityKind.SENSITIVITY_STUDY
    required_fields = ("system", "parameter")

    def __post_init__(self):
        super().__post_init__()
        self.system = coerce_ref(self.system, EntityKind.SYSTEM, "system")


@dataclass
class ModelUncertaintyDocumentation(_MultiSystemScoped, PRAEntity):
    systems: list[Reference] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    related_assumptions: list[str] = field(default_factory=list)
    reasonable_alternatives: list[str] = field(default_factory=list)
    impact: str = ""

    kind = EntityKind.MODEL_UNCERTAINTY
    required_fields = ("systems", "sources")

    def __post_init__(self):
        super().__post_init__()
        self.systems = _coerce_refs(self.systems, EntityKind.SYSTEM, "systems")


@dataclass
class PreOperationalAssumptionsDocumentation(_MultiSystemScoped, PRAEntity):
    """Assumptions that stand in for operating experience the plant does not yet have."""
    systems: list[Reference] = field(default_factory=list)
    assumptions: list[str] = field(default_factory=list)
    design_information_sources: list[str] = field(default_factory=list)
    validation_plan: str = ""

    kind = EntityKind.PRE_OPERATIONAL_ASSUMPTIONS
    required_fields = ("systems", "assumptions")

    def __post_init__(self):
        super().__post_init__()
        self.systems = _coerce_refs(self.systems, EntityKind.SYSTEM, "systems")


ENTITY_TYPES: dict[EntityKind, type] = {
    EntityKind.SYSTEM: SystemDefinition,
    EntityKind.DEPENDENCY: SystemDependency,
    EntityKind.FAULT_TREE: FaultTree,
    EntityKind.BASIC_EVENT: BasicEvent,
    EntityKind.PASSIVE_TREATMENT: PassiveSystemsTreatment,
    EntityKind.HUMAN_ACTION: HumanAction,
    EntityKind.SUCCESS_CRITERION: SuccessCriterionDefinition,
    EntityKind.LOOP_RESOLUTION: LogicLoopResolution,
    EntityKind.EVALUATION: SystemModelEvaluation,
    EntityKind.SENSITIVITY_STUDY: SystemSensitivityStudy,
    EntityKind.MODEL_UNCERTAINTY: ModelUncertaintyDocumentation,
    EntityKind.PRE_OPERATIONAL_ASSUMPTIONS: PreOperationalAssumptionsDocumentation,
}
