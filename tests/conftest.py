from typing import Callable

import pytest

from systems_model.builder import Ebr2ReferenceBuilder
from systems_model.ontology import BasicEvent, SystemDefinition, SystemDependency
from systems_model.registry import SystemsAnalysisModel


@pytest.fixture
def model() -> SystemsAnalysisModel:
    """Empty registry."""
    return SystemsAnalysisModel()


@pytest.fixture
def reference_model() -> SystemsAnalysisModel:
    """The EBR-II reference systems analysis."""
    return Ebr2ReferenceBuilder(SystemsAnalysisModel()).build_reference_plant()


@pytest.fixture
def make_system() -> Callable[..., SystemDefinition]:
    def _make(system_id: str, **overrides) -> SystemDefinition:
        fields = {
            "name": f"System {system_id}",
            "success_criterion": f"{system_id} performs its function",
            "modeled_components_and_failures": {f"{system_id} pump": {"fail_to_run"}},
        }
        fields.update(overrides)
        return SystemDefinition(id=system_id, **fields)
    return _make


@pytest.fixture
def make_dependency() -> Callable[..., SystemDependency]:
    def _make(dependent: str, supporting: str, **overrides) -> SystemDependency:
        return SystemDependency(id=f"DEP-{dependent}-{supporting}", dependent_system=dependent,
                                supporting_system=supporting, **overrides)
    return _make


@pytest.fixture
def make_basic_event() -> Callable[..., BasicEvent]:
    def _make(event_id: str, system_id: str = "X") -> BasicEvent:
        return BasicEvent(id=event_id, system=system_id, description=f"{event_id} occurs")
    return _make
