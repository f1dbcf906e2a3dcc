import pytest

from systems_model.errors import (
    DanglingReferenceError, DuplicateIdError, SelfDependencyError, SubmissionBlockedError,
)
from systems_model.ontology import (
    BasicEvent, LogicLoopResolution, basic_event_ref, fault_tree_ref, system_ref,
)
from systems_model.registry import SystemsAnalysisModel


def test_resolve_after_insert_returns_the_entity(model: SystemsAnalysisModel, make_system) -> None:
    system = make_system("X")
    ref = model.add_entity(system)

    assert ref == system_ref("X")
    assert model.resolve(ref) is system


def test_resolve_of_unknown_id_is_none(model: SystemsAnalysisModel, make_system) -> None:
    model.add_entity(make_system("X"))

    assert model.resolve(system_ref("Y")) is None
    # Ids are scoped per kind
    assert model.resolve(basic_event_ref("X")) is None


def test_duplicate_insert_is_rejected_atomically(model: SystemsAnalysisModel, make_system) -> None:
    original = make_system("X")
    model.add_entity(original)
    before = model.snapshot()

    with pytest.raises(DuplicateIdError) as excinfo:
        model.add_entity(make_system("X", name="Impostor"))

    assert excinfo.value.entity_id == "X"
    assert model == before
    assert model.resolve(system_ref("X")) is original


def test_same_id_may_be_used_by_different_kinds(model: SystemsAnalysisModel, make_system) -> None:
    model.add_entity(make_system("X"))
    model.add_entity(BasicEvent(id="X", system="X", description="X fails"))

    assert model.stats()["total_entities"] == 2


def test_require_raises_dangling_reference(model: SystemsAnalysisModel) -> None:
    with pytest.raises(DanglingReferenceError) as excinfo:
        model.require(system_ref("NOPE"), referrer="DEP-1")

    assert excinfo.value.reference == system_ref("NOPE")
    assert excinfo.value.referrer == "DEP-1"


def test_replace_and_remove(model: SystemsAnalysisModel, make_system) -> None:
    assert model.replace_entity(make_system("X")) is None

    first = model.resolve(system_ref("X"))
    replaced = model.replace_entity(make_system("X", name="Renamed"))
    assert replaced is first
    assert model.resolve(system_ref("X")).name == "Renamed"

    removed = model.remove_entity(system_ref("X"))
    assert removed.name == "Renamed"
    assert model.resolve(system_ref("X")) is None
    with pytest.raises(DanglingReferenceError):
        model.remove_entity(system_ref("X"))


def test_dependency_graph(reference_model: SystemsAnalysisModel) -> None:
    graph = reference_model.get_dependency_graph()

    assert set(graph) == set(reference_model.systems)
    assert graph["PSS"] == ["EPS", "DCP"]
    assert graph["EPS"] == ["SWS"]
    assert graph["RSS"] == ["PPS"]


def test_system_queries(reference_model: SystemsAnalysisModel) -> None:
    trees = reference_model.get_fault_trees_for_system("RSS")
    assert [tree.id for tree in trees] == ["FT-RSS"]
    assert reference_model.get_fault_trees_for_system("EPS") == []

    events = reference_model.get_basic_events_for_system(system_ref("SCS"))
    assert len(events) == 5

    dependents = {dep.dependent_system.id for dep in reference_model.get_dependents_of("EPS")}
    assert dependents == {"PSS", "SWS", "DCP"}
    assert [dep.id for dep in reference_model.get_dependencies_of("RSS")] == ["DEP-RSS-PPS"]


def test_next_revision_leaves_the_original_untouched(reference_model: SystemsAnalysisModel) -> None:
    revised = reference_model.next_revision()
    revised.remove_entity(fault_tree_ref("FT-SCS"))

    assert revised.revision == reference_model.revision + 1
    assert reference_model.resolve(fault_tree_ref("FT-SCS")) is not None
    assert revised != reference_model


def test_stats(reference_model: SystemsAnalysisModel) -> None:
    stats = reference_model.stats()

    assert stats["system"] == 7
    assert stats["fault_tree"] == 2
    assert stats["basic_event"] == 11
    assert stats["documentation_fragments"] == len(reference_model.documentation)


def test_reference_model_can_be_finalized(reference_model: SystemsAnalysisModel) -> None:
    report = reference_model.finalize()

    assert report.ok
    assert report.warnings == []


def test_warnings_block_finalization_without_sign_off(
        model: SystemsAnalysisModel, make_system, make_dependency) -> None:
    model.add_entities(make_system("X"), make_system("Y"),
                       make_dependency("X", "Y"), make_dependency("Y", "X"))

    with pytest.raises(SubmissionBlockedError) as excinfo:
        model.finalize()
    assert len(excinfo.value.report.warnings) == 1

    report = model.finalize(sign_off="Loop reviewed and accepted")
    assert report.ok
    assert len(report.warnings) == 1


def test_errors_block_finalization_even_with_sign_off(
        model: SystemsAnalysisModel, make_system, make_dependency) -> None:
    model.add_entities(make_system("X"), make_dependency("X", "UNDECLARED"))

    with pytest.raises(SubmissionBlockedError) as excinfo:
        model.finalize(sign_off="Accepted")
    assert not excinfo.value.report.ok


def test_loop_resolution_lets_finalization_pass(
        model: SystemsAnalysisModel, make_system, make_dependency) -> None:
    model.add_entities(make_system("X"), make_system("Y"),
                       make_dependency("X", "Y"), make_dependency("Y", "X"),
                       LogicLoopResolution(id="L1", systems=["Y", "X"], resolution="Broken at Y"))

    assert model.finalize().warnings == []


def test_record_mutated_into_a_self_dependency_is_rejected(
        model: SystemsAnalysisModel, make_system, make_dependency) -> None:
    model.add_entities(make_system("X"), make_system("Y"))
    dep = make_dependency("X", "Y")
    dep.supporting_system = system_ref("X")
    before = model.snapshot()

    with pytest.raises(SelfDependencyError):
        model.add_entity(dep)
    with pytest.raises(SelfDependencyError):
        model.replace_entity(dep)
    assert model == before


def test_resolve_needs_a_kind_tagged_reference(model: SystemsAnalysisModel, make_system) -> None:
    model.add_entity(make_system("X"))

    with pytest.raises(TypeError, match="system_ref"):
        model.resolve("X")
