import pytest

from systems_model.checker import (
    ConsistencyChecker, Severity, ValidationConfig, check_records, find_dependency_cycles,
)
from systems_model.documentation import ProcessDocumentation
from systems_model.errors import (
    DanglingReferenceError, DuplicateIdError, InvalidCutSetError, MissingFieldError,
    OrphanNodeWarning, SharedComponentWarning, UnresolvedLoopWarning,
)
from systems_model.ontology import (
    BasicEvent, DocumentationCategory as Doc, FaultTree, FaultTreeNode, GateType,
    LogicLoopResolution, SystemDependency, loop_ref, system_ref,
)
from systems_model.registry import SystemsAnalysisModel


def _tree(cut_sets, nodes=None) -> FaultTree:
    nodes = nodes or {
        "TOP": FaultTreeNode(GateType.AND, "both fail", ["A", "B"]),
        "A": FaultTreeNode(description="A fails"),
        "B": FaultTreeNode(description="B fails"),
    }
    return FaultTree(id="FT-X", name="X fails", system="X", nodes=nodes,
                     minimal_cut_sets=cut_sets)


@pytest.fixture
def tree_records(make_system, make_basic_event):
    def _records(cut_sets, nodes=None):
        return [make_system("X"), make_basic_event("A"), make_basic_event("B"),
                _tree(cut_sets, nodes)]
    return _records


# ── Reference model ──────────────────────────────────

def test_reference_model_is_consistent(reference_model: SystemsAnalysisModel) -> None:
    report = reference_model.check()

    assert report.ok
    assert report.diagnostics == []
    assert report.cycles == [["EPS", "SWS"]]


def test_removing_the_loop_resolution_raises_a_warning(reference_model: SystemsAnalysisModel) -> None:
    reference_model.remove_entity(loop_ref("LLR-EPS-SWS"))

    report = reference_model.check()

    # Its documentation fragment is now filed under an undeclared record
    [error] = report.errors
    assert error.entity_id == Doc.LOGIC_LOOP_RESOLUTIONS.value
    [warning] = report.warnings
    assert warning.code == "UnresolvedLoopWarning"
    assert warning.entity_id == "EPS"
    assert "EPS -> SWS -> EPS" in warning.message


# ── Fault trees ──────────────────────────────────────

def test_cut_sets_of_leaf_basic_events_pass(tree_records) -> None:
    report = check_records(tree_records([{"A", "B"}]))

    assert report.ok


def test_single_event_cut_sets_under_an_or_gate(tree_records) -> None:
    nodes = {
        "TOP": FaultTreeNode(GateType.OR, "either fails", ["A", "B"]),
        "A": FaultTreeNode(),
        "B": FaultTreeNode(),
    }
    report = check_records(tree_records([{"A"}, {"B"}], nodes))

    assert report.by_code(InvalidCutSetError) == []


def test_gate_in_a_cut_set_gives_exactly_one_error(tree_records) -> None:
    report = check_records(tree_records([{"TOP"}]))

    errors = report.by_code(InvalidCutSetError)
    assert len(errors) == 1
    assert len(report.errors) == 1
    assert "'TOP' is a gate" in errors[0].message


def test_cut_set_member_outside_the_tree(tree_records) -> None:
    report = check_records(tree_records([{"A", "Z"}]))

    [error] = report.errors
    assert error.code == "InvalidCutSetError"
    assert "'Z' is not a node" in error.message


def test_leaf_without_a_basic_event(make_system, make_basic_event) -> None:
    report = check_records([make_system("X"), make_basic_event("A"), _tree([{"A", "B"}])])

    [error] = report.errors
    assert error.code == "InvalidCutSetError"
    assert "'B' has no basic event record" in error.message


def test_empty_cut_set(tree_records) -> None:
    report = check_records(tree_records([set()]))

    assert len(report.by_code(InvalidCutSetError)) == 1


def test_dangling_child(tree_records) -> None:
    nodes = {
        "TOP": FaultTreeNode(GateType.OR, "any fails", ["A", "GHOST"]),
        "A": FaultTreeNode(),
    }
    report = check_records(tree_records([{"A"}], nodes))

    [error] = report.by_code(DanglingReferenceError)
    assert error.entity_kind == "fault_tree"
    assert "'GHOST'" in error.message


# ── Dependency loops ─────────────────────────────────

def test_three_system_loop_is_reported_once(make_system, make_dependency) -> None:
    records = [make_system(s) for s in "XYZ"] + [
        make_dependency("X", "Y"), make_dependency("Y", "Z"), make_dependency("Z", "X")]

    report = check_records(records)

    assert report.cycles == [["X", "Y", "Z"]]
    assert len(report.by_code(UnresolvedLoopWarning)) == 1
    assert report.ok


def test_loop_resolution_matches_the_system_set(make_system, make_dependency) -> None:
    records = [make_system(s) for s in "XYZ"] + [
        make_dependency("X", "Y"), make_dependency("Y", "Z"), make_dependency("Z", "X"),
        LogicLoopResolution(id="L1", systems=["Z", "X", "Y"], resolution="Broken at Z")]

    report = check_records(records)

    assert report.cycles == [["X", "Y", "Z"]]
    assert report.warnings == []


def test_partial_loop_resolution_does_not_cover_the_loop(make_system, make_dependency) -> None:
    records = [make_system(s) for s in "XYZ"] + [
        make_dependency("X", "Y"), make_dependency("Y", "Z"), make_dependency("Z", "X"),
        LogicLoopResolution(id="L1", systems=["X", "Y"], resolution="Broken at X")]

    assert len(check_records(records).warnings) == 1


def test_unresolved_loop_reporting_can_be_switched_off(make_system, make_dependency) -> None:
    records = [make_system("X"), make_system("Y"),
               make_dependency("X", "Y"), make_dependency("Y", "X")]

    report = check_records(records, config=ValidationConfig(report_unresolved_loops=False))

    assert report.cycles == [["X", "Y"]]
    assert report.diagnostics == []


def test_cycles_are_rotated_to_their_smallest_id() -> None:
    graph = {"C": ["A"], "A": ["B"], "B": ["C"], "D": ["E"], "E": ["D"], "F": []}

    assert find_dependency_cycles(graph) == [["A", "B", "C"], ["D", "E"]]


def test_acyclic_graph_has_no_cycles() -> None:
    assert find_dependency_cycles({"A": ["B", "C"], "B": ["C"], "C": []}) == []


# ── References, identity and fields ──────────────────

def test_dangling_references_are_all_collected(make_system) -> None:
    records = [
        make_system("X"),
        SystemDependency(id="D1", dependent_system="X", supporting_system="NOPE"),
        SystemDependency(id="D2", dependent_system="GONE", supporting_system="X",
                         human_action="HA-MISSING"),
        BasicEvent(id="BE-1", system="ELSEWHERE", description="fails"),
    ]

    report = check_records(records)

    dangling = report.by_code(DanglingReferenceError)
    assert {(d.entity_id, d.message.split()[0]) for d in dangling} == {
        ("D1", "supporting_system"), ("D2", "dependent_system"),
        ("D2", "human_action"), ("BE-1", "system"),
    }


def test_documentation_keys_must_resolve(make_system) -> None:
    docs = ProcessDocumentation()
    docs.put_fragment(Doc.SYSTEM_FUNCTION, "X", "fine")
    docs.put_fragment(Doc.SYSTEM_FUNCTION, "GHOST", "first")
    docs.put_fragment(Doc.SYSTEM_FUNCTION, "GHOST", "second")
    docs.put_fragment(Doc.HUMAN_ACTIONS, "HA-GHOST", "undeclared action")

    report = check_records([make_system("X")], docs)

    dangling = report.by_code(DanglingReferenceError)
    assert len(dangling) == 2
    assert {d.entity_kind for d in dangling} == {"documentation"}
    assert {d.entity_id for d in dangling} == {Doc.SYSTEM_FUNCTION.value, Doc.HUMAN_ACTIONS.value}


def test_duplicate_ids_are_reported_per_kind(make_system, make_basic_event) -> None:
    records = [make_system("X"), make_system("X", name="Second X"), make_basic_event("X")]

    report = check_records(records)

    [error] = report.by_code(DuplicateIdError)
    assert error.entity_kind == "system"
    assert error.entity_id == "X"


def test_missing_required_fields() -> None:
    report = check_records([BasicEvent(id="BE-1")])

    missing = report.by_code(MissingFieldError)
    assert sorted(d.invariant for d in missing) == [
        "basic_event.description is required", "basic_event.system is required"]


# ── Shared components ────────────────────────────────

def test_component_in_two_systems_needs_a_rationale(make_system) -> None:
    shared = {"Battery bank": {"failure_modes": ["depleted"]}}
    records = [make_system("X", modeled_components_and_failures=shared),
               make_system("Y", modeled_components_and_failures=shared)]

    [warning] = check_records(records).by_code(SharedComponentWarning)
    assert "'Battery bank'" in warning.message

    explained = {"Battery bank": {"failure_modes": ["depleted"],
                                  "shared_rationale": "Common DC bus modeled in both"}}
    records[1] = make_system("Y", modeled_components_and_failures=explained)
    assert check_records(records).diagnostics == []


def test_warnings_can_be_escalated(make_system, make_dependency) -> None:
    records = [make_system("X"), make_system("Y"),
               make_dependency("X", "Y"), make_dependency("Y", "X")]

    report = ConsistencyChecker(ValidationConfig(warnings_as_errors=True)).run(records)

    assert not report.ok
    assert [d.severity for d in report.diagnostics] == [Severity.ERROR]
    assert report.diagnostics[0].code == "UnresolvedLoopWarning"


def test_summary(make_system, make_dependency) -> None:
    records = [make_system("X"), make_system("Y"),
               make_dependency("X", "Y"), make_dependency("Y", "X"),
               SystemDependency(id="D-BAD", dependent_system="X", supporting_system="NOPE")]

    summary = check_records(records).summary()

    assert summary == {
        "ok": False,
        "errors": 1,
        "warnings": 1,
        "dependency_loops": 1,
        "by_code": {"DanglingReferenceError": 1, "UnresolvedLoopWarning": 1},
    }


# ── Records changed after construction ───────────────

def test_dependency_mutated_onto_itself_is_an_error(make_system, make_dependency) -> None:
    dep = make_dependency("X", "Y")
    dep.supporting_system = system_ref("X")

    report = check_records([make_system("X"), make_system("Y"), dep])

    [error] = report.errors
    assert error.code == "SelfDependencyError"
    assert error.entity_id == "DEP-X-Y"
    assert report.cycles == []
    assert report.warnings == []


def test_fault_tree_mutated_without_a_top_is_an_error(tree_records) -> None:
    records = tree_records([{"A", "B"}])
    records[-1].nodes["ROGUE"] = FaultTreeNode(GateType.OR, "second root", ["A"])

    report = check_records(records)

    assert [d.code for d in report.errors] == ["MissingTopNodeError"]


# ── Overlapping loops ────────────────────────────────

def test_overlapping_loops_are_each_reported(make_system, make_dependency) -> None:
    records = [make_system(s) for s in "ABC"] + [
        make_dependency("A", "B"), make_dependency("B", "C"), make_dependency("C", "A"),
        make_dependency("A", "C"),
        LogicLoopResolution(id="L1", systems=["A", "B", "C"], resolution="Broken at A")]

    report = check_records(records)

    assert report.cycles == [["A", "B", "C"], ["A", "C"]]
    [warning] = report.by_code(UnresolvedLoopWarning)
    assert "A -> C -> A" in warning.message


def test_every_elementary_cycle_is_found_once() -> None:
    graph = {"A": ["B", "C"], "B": ["A", "C"], "C": ["A"], "D": ["D"]}

    assert find_dependency_cycles(graph) == [["A", "B"], ["A", "B", "C"], ["A", "C"]]


# ── Orphan subtrees ──────────────────────────────────

def test_nodes_outside_the_designated_top_are_flagged(tree_records) -> None:
    nodes = {
        "TOP": FaultTreeNode(GateType.AND, "both fail", ["A", "B"]),
        "SPARE": FaultTreeNode(GateType.OR, "left over", ["A"]),
        "A": FaultTreeNode(),
        "B": FaultTreeNode(),
    }
    records = tree_records([{"A", "B"}])
    records[-1] = FaultTree(id="FT-X", name="X fails", system="X", nodes=nodes,
                            top_node="TOP", minimal_cut_sets=[{"A", "B"}])

    report = check_records(records)

    assert report.ok
    [warning] = report.by_code(OrphanNodeWarning)
    assert "['SPARE']" in warning.message
