"""
PRA Systems Model — EBR-II Reference Builder
==============================================
Populates a SystemsAnalysisModel with an illustrative EBR-II systems
analysis:

  - Primary sodium, shutdown cooling, reactor shutdown, plant protection,
    AC power, DC power and service water systems
  - Functional and spatial dependencies, including the AC power /
    service water loop and the record that resolves it
  - Fault trees for reactor shutdown and shutdown cooling, with their
    basic events and (externally computed) minimal cut sets
  - Passive-safety treatments for natural circulation and inherent
    reactivity feedback
  - SY-C1 documentation fragments for each system

The content is representative, not licensing-grade data. It serves as:
  1. A worked example of every record kind
  2. A fixture for tests and the CLI
  3. A template for onboarding a new plant model
"""

from loguru import logger

from .ontology import (
    BasicEvent, DependencyType, DocumentationCategory as Doc, FaultTree,
    FaultTreeNode, GateType, HumanAction, LogicLoopResolution,
    ModelUncertaintyDocumentation, ModeledComponent, PassiveSystemsTreatment,
    PreOperationalAssumptionsDocumentation, SuccessCriterionDefinition,
    SystemDefinition, SystemDependency, SystemModelEvaluation,
    SystemSensitivityStudy, criterion_ref,
)
from .registry import SystemsAnalysisModel


class Ebr2ReferenceBuilder:
    """Builds the EBR-II reference systems analysis into a model."""

    def __init__(self, model: SystemsAnalysisModel):
        self.model = model

    def build_reference_plant(self) -> SystemsAnalysisModel:
        logger.info("Building EBR-II reference systems analysis...")

        self._build_systems()
        self._build_dependencies()
        self._build_human_actions()
        self._build_fault_trees()
        self._build_passive_treatments()
        self._build_supporting_records()
        self._build_documentation()

        stats = self.model.stats()
        logger.info(f"Systems model built: {stats['total_entities']} entities, "
                    f"{stats['documentation_fragments']} documentation fragments")
        return self.model

    # ── Systems ─────────────────────────────────────

    def _build_systems(self):
        m = self.model
        m.add_entity(SuccessCriterionDefinition(
            id="SC-SCS", name="Shutdown cooling success", system="SCS",
            criterion="One of two NaK shutdown cooler loops removes decay heat "
                      "from the primary tank by natural circulation",
            mission_time=72.0,
            basis="SHRT-45R loss-of-flow without scram test results",
        ))

        systems = [
            SystemDefinition(
                id="PSS", name="Primary Sodium System",
                description="Pool-type primary system: core, primary tank, two primary "
                            "pumps, auxiliary EM pump and intermediate heat exchanger.",
                boundaries=[
                    "Primary tank and all components submerged in it",
                    "Auxiliary EM pump up to its DC supply breaker",
                    "IHX primary side; the secondary side belongs to the intermediate loop",
                ],
                success_criterion="One primary pump, or the auxiliary EM pump, maintains "
                                  "forced flow through the core",
                mission_time=24.0,
                schematic_reference="EBR-II SAR Fig. 4.2-1",
                modeled_components_and_failures={
                    "Primary pump 1": ModeledComponent(
                        {"fail_to_run", "coastdown_failure"},
                        "Provides forced core flow", group="primary pumps"),
                    "Primary pump 2": ModeledComponent(
                        {"fail_to_run", "coastdown_failure"},
                        "Provides forced core flow", group="primary pumps"),
                    "Auxiliary EM pump": ModeledComponent(
                        {"fail_to_start", "fail_to_run"},
                        "Battery-backed flow after loss of AC power"),
                },
                component_exclusion_justifications=[
                    "Primary tank structure excluded: passive boundary with negligible "
                    "failure probability over the mission time",
                ],
            ),
            SystemDefinition(
                id="SCS", name="Shutdown Cooling System",
                description="Two NaK loops transferring decay heat from the primary tank "
                            "to natural-draft air coolers.",
                boundaries=[
                    "Primary tank NaK heat exchangers through the shutdown cooler stacks",
                    "Air dampers and their local operators",
                ],
                success_criterion=criterion_ref("SC-SCS"),
                mission_time=72.0,
                modeled_components_and_failures={
                    "Shutdown cooler loop A": ModeledComponent(
                        {"damper_fail_to_open", "nak_leak"}, "Redundant decay heat path"),
                    "Shutdown cooler loop B": ModeledComponent(
                        {"damper_fail_to_open", "nak_leak"}, "Redundant decay heat path"),
                },
            ),
            SystemDefinition(
                id="RSS", name="Reactor Shutdown System",
                description="Control and safety rods with their drives and scram latches.",
                boundaries=["Rod drive mechanisms, latches and rods",
                            "Scram breakers downstream of the protection system"],
                success_criterion="Insertion of at least two of three shutdown rod groups",
                mission_time=0.1,
                modeled_components_and_failures={
                    "Rod group 1": ModeledComponent({"fail_to_insert"}, "Shutdown reactivity"),
                    "Rod group 2": ModeledComponent({"fail_to_insert"}, "Shutdown reactivity"),
                    "Rod group 3": ModeledComponent({"fail_to_insert"}, "Shutdown reactivity"),
                },
            ),
            SystemDefinition(
                id="PPS", name="Plant Protection System",
                description="Two-channel scram logic on flux, flow and temperature trips.",
                boundaries=["Sensors through the scram breaker trip coils"],
                success_criterion="Either channel generates a scram signal on demand",
                modeled_components_and_failures={
                    "Channel A logic": ModeledComponent({"fail_to_trip"}, "Scram signal"),
                    "Channel B logic": ModeledComponent({"fail_to_trip"}, "Scram signal"),
                },
            ),
            SystemDefinition(
                id="EPS", name="AC Electrical Power System",
                description="Offsite supply and the standby diesel generator.",
                boundaries=["Offsite feeders through the 480 V safety buses",
                            "Diesel generator and its jacket water cooler"],
                success_criterion="One AC source energizes the 480 V safety buses",
                mission_time=24.0,
                modeled_components_and_failures={
                    "Diesel generator": ModeledComponent(
                        {"fail_to_start", "fail_to_run"}, "Standby AC source"),
                    "Offsite power": ModeledComponent({"loss"}, "Normal AC source"),
                },
            ),
            SystemDefinition(
                id="DCP", name="DC Power System",
                description="Station battery supplying the auxiliary EM pump and protection logic.",
                boundaries=["Battery, charger and DC distribution panels"],
                success_criterion="Battery supplies rated load for two hours",
                mission_time=2.0,
                modeled_components_and_failures={
                    "Station battery": ModeledComponent({"fail_on_demand"}, "Sole DC source"),
                    "Battery charger": ModeledComponent({"fail_to_run"}, "Keeps battery charged"),
                },
            ),
            SystemDefinition(
                id="SWS", name="Plant Service Water System",
                description="Cooling water for the diesel generator and auxiliary coolers.",
                boundaries=["Service water pumps through the diesel jacket water cooler"],
                success_criterion="One service water pump supplies the diesel cooler",
                mission_time=24.0,
                modeled_components_and_failures={
                    "Service water pump 1": ModeledComponent({"fail_to_run"}, "Cooling flow"),
                    "Service water pump 2": ModeledComponent({"fail_to_run"}, "Cooling flow"),
                },
            ),
        ]
        for system in systems:
            m.add_entity(system)

    # ── Dependencies ────────────────────────────────

    def _build_dependencies(self):
        m = self.model
        dependencies = [
            SystemDependency(id="DEP-PSS-EPS", dependent_system="PSS", supporting_system="EPS",
                             description="Primary pump motors are fed from the AC buses"),
            SystemDependency(id="DEP-PSS-DCP", dependent_system="PSS", supporting_system="DCP",
                             description="Auxiliary EM pump runs from the station battery"),
            SystemDependency(id="DEP-RSS-PPS", dependent_system="RSS", supporting_system="PPS",
                             description="Rods are released by the protection system scram signal"),
            SystemDependency(id="DEP-PPS-DCP", dependent_system="PPS", supporting_system="DCP",
                             description="Protection logic is powered from DC panels"),
            SystemDependency(id="DEP-SCS-PSS", dependent_system="SCS", supporting_system="PSS",
                             description="Decay heat reaches the NaK coolers through the primary pool"),
            SystemDependency(id="DEP-EPS-SWS", dependent_system="EPS", supporting_system="SWS",
                             description="Diesel jacket water is cooled by service water"),
            SystemDependency(id="DEP-SWS-EPS", dependent_system="SWS", supporting_system="EPS",
                             description="Service water pumps are AC powered"),
            SystemDependency(id="DEP-DCP-EPS", dependent_system="DCP", supporting_system="EPS",
                             dependency_type=DependencyType.SPATIAL,
                             description="Battery room shares a fire area with the 480 V switchgear"),
        ]
        for dep in dependencies:
            m.add_entity(dep)

        m.add_entity(LogicLoopResolution(
            id="LLR-EPS-SWS", name="Diesel / service water loop",
            systems=["EPS", "SWS"],
            resolution="Service water pumps are assumed powered by the diesel only after a "
                       "successful diesel start; the diesel fault tree models jacket cooling "
                       "failure as a run failure after one hour, which breaks the circular logic.",
        ))

    # ── Human Actions ───────────────────────────────

    def _build_human_actions(self):
        self.model.add_entities(
            HumanAction(id="HA-MANUAL-SCRAM", name="Operator manual scram",
                        description="Operator actuates the manual scram from the control room",
                        systems=["RSS"], timing="post-initiator"),
            HumanAction(id="HA-OPEN-DAMPERS", name="Open shutdown cooler dampers locally",
                        description="Local manual opening of stuck shutdown cooler air dampers",
                        systems=["SCS"], timing="recovery"),
        )

    # ── Fault Trees & Basic Events ──────────────────

    def _build_fault_trees(self):
        m = self.model

        m.add_entity(FaultTree(
            id="FT-RSS", name="Failure to shut down the reactor", system="RSS",
            nodes={
                "RSS-TOP": FaultTreeNode(GateType.OR, "Reactor fails to shut down",
                                         ["RSS-SIGNAL", "RSS-RODS", "RSS-ROD-CCF"]),
                "RSS-SIGNAL": FaultTreeNode(GateType.AND, "No scram signal",
                                            ["PPS-CHA-FAIL", "PPS-CHB-FAIL"]),
                "RSS-RODS": FaultTreeNode(GateType.ATLEAST, "Two or more rod groups fail to insert",
                                          ["RSS-ROD1", "RSS-ROD2", "RSS-ROD3"], k=2),
                "PPS-CHA-FAIL": FaultTreeNode(description="Channel A fails to trip"),
                "PPS-CHB-FAIL": FaultTreeNode(description="Channel B fails to trip"),
                "RSS-ROD1": FaultTreeNode(description="Rod group 1 fails to insert"),
                "RSS-ROD2": FaultTreeNode(description="Rod group 2 fails to insert"),
                "RSS-ROD3": FaultTreeNode(description="Rod group 3 fails to insert"),
                "RSS-ROD-CCF": FaultTreeNode(description="Common cause failure of all rod groups"),
            },
            minimal_cut_sets=[
                {"RSS-ROD-CCF"},
                {"PPS-CHA-FAIL", "PPS-CHB-FAIL"},
                {"RSS-ROD1", "RSS-ROD2"},
                {"RSS-ROD1", "RSS-ROD3"},
                {"RSS-ROD2", "RSS-ROD3"},
            ],
            top_event_probability=2.1e-6,
            quantitative_results={"engine": "external", "truncation": 1e-12},
        ))

        m.add_entity(FaultTree(
            id="FT-SCS", name="Loss of shutdown cooling", system="SCS",
            nodes={
                "SCS-TOP": FaultTreeNode(GateType.OR, "Both shutdown cooler loops fail",
                                         ["SCS-BOTH-LOOPS", "SCS-DMP-CCF"]),
                "SCS-BOTH-LOOPS": FaultTreeNode(GateType.AND, "Independent failure of both loops",
                                                ["SCS-LOOP-A", "SCS-LOOP-B"]),
                "SCS-LOOP-A": FaultTreeNode(GateType.OR, "Loop A fails",
                                            ["SCS-DMP-A", "SCS-LEAK-A"]),
                "SCS-LOOP-B": FaultTreeNode(GateType.OR, "Loop B fails",
                                            ["SCS-DMP-B", "SCS-LEAK-B"]),
                "SCS-DMP-A": FaultTreeNode(description="Loop A damper fails to open"),
                "SCS-LEAK-A": FaultTreeNode(description="Loop A NaK leak"),
                "SCS-DMP-B": FaultTreeNode(description="Loop B damper fails to open"),
                "SCS-LEAK-B": FaultTreeNode(description="Loop B NaK leak"),
                "SCS-DMP-CCF": FaultTreeNode(description="Common cause failure of both dampers"),
            },
            minimal_cut_sets=[
                {"SCS-DMP-CCF"},
                {"SCS-DMP-A", "SCS-DMP-B"},
                {"SCS-DMP-A", "SCS-LEAK-B"},
                {"SCS-LEAK-A", "SCS-DMP-B"},
                {"SCS-LEAK-A", "SCS-LEAK-B"},
            ],
        ))

        events = [
            ("PPS-CHA-FAIL", "PPS", "Protection channel A fails to trip"),
            ("PPS-CHB-FAIL", "PPS", "Protection channel B fails to trip"),
            ("RSS-ROD1", "RSS", "Rod group 1 fails to insert"),
            ("RSS-ROD2", "RSS", "Rod group 2 fails to insert"),
            ("RSS-ROD3", "RSS", "Rod group 3 fails to insert"),
            ("RSS-ROD-CCF", "RSS", "Common cause failure of rod groups to insert"),
            ("SCS-DMP-A", "SCS", "Shutdown cooler A air damper fails to open"),
            ("SCS-DMP-B", "SCS", "Shutdown cooler B air damper fails to open"),
            ("SCS-LEAK-A", "SCS", "Shutdown cooler loop A NaK leak"),
            ("SCS-LEAK-B", "SCS", "Shutdown cooler loop B NaK leak"),
            ("SCS-DMP-CCF", "SCS", "Common cause failure of shutdown cooler dampers"),
        ]
        for event_id, system_id, description in events:
            tree = "FT-RSS" if system_id in ("RSS", "PPS") else "FT-SCS"
            m.add_entity(BasicEvent(id=event_id, name=event_id, system=system_id,
                                    description=description, module_reference=tree))

    # ── Passive Safety ──────────────────────────────

    def _build_passive_treatments(self):
        self.model.add_entities(
            PassiveSystemsTreatment(
                id="PST-NATCIRC", name="Primary natural circulation", system="PSS",
                description="Decay heat is carried from the core to the pool and the shutdown "
                            "coolers by natural circulation once forced flow is lost.",
                performance_analysis_reference="SHRT-17 loss-of-flow test analysis",
                uncertainty_analysis_reference="Natural circulation flow sensitivity analysis",
                phenomena=["natural circulation", "thermal stratification in the primary pool",
                           "inter-subassembly heat transfer"],
                uncertainty_evaluation="Flow rate uncertainty bounded by SHRT-17 measurements; "
                                       "stratification effects treated by sensitivity study.",
            ),
            PassiveSystemsTreatment(
                id="PST-REACTIVITY", name="Inherent reactivity feedback", system="RSS",
                description="Negative reactivity from fuel and core radial expansion brings the "
                            "core to a safe state without rod insertion.",
                performance_analysis_reference="SHRT-45R unprotected loss-of-flow test",
                phenomena=["fuel axial expansion", "core radial expansion",
                           "control rod driveline expansion", "sodium density feedback"],
                uncertainty_evaluation="Feedback coefficients taken from measured SHRT-45R "
                                       "response; credited only for loss-of-flow initiators.",
            ),
        )

    # ── Evaluations, sensitivity, uncertainty ───────

    def _build_supporting_records(self):
        self.model.add_entities(
            SystemModelEvaluation(
                id="EVAL-RSS", name="Reactor shutdown system evaluation", system="RSS",
                fault_tree="FT-RSS", top_event_probability=2.1e-6,
                quantitative_results={"cut_sets": 5, "source": "external quantification"},
                dominant_contributors=["RSS-ROD-CCF"],
                review_notes="Common cause rod failure dominates; channel independence confirmed.",
            ),
            SystemSensitivityStudy(
                id="SENS-SCS-CCF", name="Damper common cause sensitivity", system="SCS",
                parameter="SCS-DMP-CCF probability", variation="x10",
                results={"top_event_ratio": 7.4},
                insights="Loss of shutdown cooling is driven by damper common cause failure.",
            ),
            ModelUncertaintyDocumentation(
                id="MU-NATCIRC", name="Natural circulation modeling", systems=["PSS", "SCS"],
                sources=["Pool thermal stratification", "Transition from forced to natural flow"],
                related_assumptions=["Natural circulation is established within 5 minutes"],
                reasonable_alternatives=["Credit only the auxiliary EM pump for early decay heat"],
                impact="Changes the success criteria for loss-of-flow sequences.",
            ),
            PreOperationalAssumptionsDocumentation(
                id="POA-DCP", name="Replacement battery performance", systems=["DCP"],
                assumptions=["Replacement battery capacity matches the vendor rating"],
                design_information_sources=["Vendor discharge curves"],
                validation_plan="Confirm with the first service discharge test.",
            ),
        )

    # ── Documentation ───────────────────────────────

    def _build_documentation(self):
        m = self.model
        for system in m.systems.values():
            m.put_fragment(Doc.SYSTEM_FUNCTION, system.id, system.description, strict=True)
            m.put_fragment(Doc.SYSTEM_BOUNDARY, system.id,
                           {"boundaries": list(system.boundaries)}, strict=True)

        m.put_fragment(Doc.SUCCESS_CRITERIA, "SCS",
                       "Criterion SC-SCS; basis is the SHRT-45R test.", strict=True)
        m.put_fragment(Doc.HUMAN_ACTIONS, "HA-OPEN-DAMPERS",
                       {"timing": "recovery", "time_available_hours": 4,
                        "procedure": "Local damper operation from the cooler stack platform"},
                       strict=True)
        m.put_fragment(Doc.SPATIAL_DEPENDENCIES, "DEP-DCP-EPS",
                       "Fire in the switchgear room can fail both AC and DC distribution.",
                       strict=True)
        m.put_fragment(Doc.LOGIC_LOOP_RESOLUTIONS, "LLR-EPS-SWS",
                       "Loop broken at the diesel run failure; see record LLR-EPS-SWS.", strict=True)
        m.put_fragment(Doc.BASIC_EVENTS, "RSS-ROD-CCF",
                       {"model": "beta factor", "group": ["RSS-ROD1", "RSS-ROD2", "RSS-ROD3"]},
                       strict=True)
        m.put_fragment(Doc.EVALUATION_RESULTS, "RSS",
                       "Top event dominated by rod group common cause failure.", strict=True)
        m.put_fragment(Doc.DIGITAL_INSTRUMENTATION, "PPS",
                       "Protection logic is analog; no digital I&C failure modes modeled.", strict=True)
        m.put_fragment(Doc.PASSIVE_SYSTEMS, "PSS",
                       {"treatments": ["PST-NATCIRC"]}, strict=True)
        m.put_fragment(Doc.INFORMATION_SOURCES, None, "EBR-II Safety Analysis Report")
        m.put_fragment(Doc.INFORMATION_SOURCES, None, "Shutdown Heat Removal Tests (SHRT-17, SHRT-45R)")
        m.put_fragment(Doc.MODULARIZATION, None,
                       "Independent rod group failures are kept unmodularized for the "
                       "2-of-3 gate; no modules are used.")
