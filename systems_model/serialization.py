"""
PRA Systems Model — JSON mapping
==================================
Lossless mapping between model records and plain JSON trees.

  - field names are camelCase (`modeledComponentsAndFailures`, `dependentSystem`)
  - references are written as bare ids; the field decides the kind on load
  - sets are written as sorted lists; mapping keys must be strings
  - success criteria are tagged: {"type": "inline", "text": ...}
    or {"type": "reference", "id": ...}
  - documentation is keyed by category name, then by reference id
    (global categories hold a plain list)

Output is indented and key-sorted so revisions diff cleanly.
"""

from __future__ import annotations
import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from .documentation import ProcessDocumentation, parse_category
from .errors import EntityValidationError, InvalidReferenceError, SerializationError
from .ontology import (
    CriterionReference, ENTITY_TYPES, EntityKind, InlineCriterion,
    PRAEntity, Reference,
)

FORMAT_NAME = "pra-systems-analysis"
FORMAT_VERSION = "1.0"

SECTIONS: dict[EntityKind, str] = {
    EntityKind.SYSTEM: "systems",
    EntityKind.DEPENDENCY: "dependencies",
    EntityKind.FAULT_TREE: "faultTrees",
    EntityKind.BASIC_EVENT: "basicEvents",
    EntityKind.PASSIVE_TREATMENT: "passiveTreatments",
    EntityKind.HUMAN_ACTION: "humanActions",
    EntityKind.SUCCESS_CRITERION: "successCriteria",
    EntityKind.LOOP_RESOLUTION: "loopResolutions",
    EntityKind.EVALUATION: "evaluations",
    EntityKind.SENSITIVITY_STUDY: "sensitivityStudies",
    EntityKind.MODEL_UNCERTAINTY: "modelUncertainties",
    EntityKind.PRE_OPERATIONAL_ASSUMPTIONS: "preOperationalAssumptions",
}
_SECTION_KINDS = {name: kind for kind, name in SECTIONS.items()}
_PASSTHROUGH_SECTIONS = {"metadata", "statistics", "processDocumentation"}


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  ENCODING
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _encode(value: Any) -> Any:
    if isinstance(value, Reference):
        return value.id
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, InlineCriterion):
        return {"type": value.variant, "text": value.text}
    if isinstance(value, CriterionReference):
        return {"type": value.variant, "id": value.criterion.id}
    if is_dataclass(value) and not isinstance(value, type):
        return {to_camel(f.name): _encode(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (set, frozenset)):
        return sorted(_encode(v) for v in value)
    if isinstance(value, dict):
        # JSON object keys are strings; anything else would not load back the same
        bad = [k for k in value if not isinstance(k, str)]
        if bad:
            raise SerializationError(f"Mapping keys must be strings, got {bad!r}")
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def record_to_dict(entity: PRAEntity) -> dict:
    return _encode(entity)


def documentation_to_dict(documentation: ProcessDocumentation) -> dict:
    data = {}
    for category, keyed in documentation.categories().items():
        if category.is_global:
            data[category.value] = _encode(keyed.get(None, []))
        else:
            data[category.value] = {key: _encode(frags) for key, frags in keyed.items()}
    return data


def model_to_dict(model) -> dict:
    """Whole-model document; `model` is a `SystemsAnalysisModel`."""
    data: dict[str, Any] = {
        "metadata": {"format": FORMAT_NAME, "version": FORMAT_VERSION, "revision": model.revision},
        "statistics": model.stats(),
    }
    for kind, section in SECTIONS.items():
        data[section] = {e.id: record_to_dict(e) for e in model.store(kind).values()}
    data["processDocumentation"] = documentation_to_dict(model.documentation)
    return data


def dumps(data: dict) -> str:
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  DECODING
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _decode_criterion(value):
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        variant = value.get("type")
        if variant == InlineCriterion.variant:
            return InlineCriterion(value.get("text", ""))
        if variant == CriterionReference.variant:
            return CriterionReference(value.get("id"))
    raise SerializationError(f"Unrecognised success criterion: {value!r}")


def _decode_dataclass(cls, data):
    if not isinstance(data, dict):
        raise SerializationError(f"{cls.__name__}: expected an object, got {type(data).__name__}")
    known = {to_camel(f.name): f for f in fields(cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise SerializationError(f"{cls.__name__}: unknown fields {unknown}")

    kwargs = {}
    for key, value in data.items():
        f = known[key]
        nested = f.metadata.get("nested")
        if nested is not None and value is not None:
            if f.metadata.get("mapping"):
                if not isinstance(value, dict):
                    raise SerializationError(
                        f"{cls.__name__}.{key}: expected an object, got {type(value).__name__}")
                value = {k: _decode_dataclass(nested, v) for k, v in value.items()}
            else:
                value = _decode_dataclass(nested, value)
        elif f.metadata.get("variant") == "success_criterion":
            value = _decode_criterion(value)
        kwargs[f.name] = value
    try:
        return cls(**kwargs)
    except EntityValidationError:
        raise
    except (TypeError, ValueError) as exc:
        # Wrong value types or enum values in the document (e.g. an unknown gate)
        raise SerializationError(f"{cls.__name__}: {exc}") from exc


def record_from_dict(kind, data: dict) -> PRAEntity:
    """Build one record; construction errors (self-dependency, ...) propagate."""
    return _decode_dataclass(ENTITY_TYPES[EntityKind(kind)], data)


def documentation_from_dict(data: dict) -> ProcessDocumentation:
    if not isinstance(data or {}, dict):
        raise SerializationError("processDocumentation: expected an object of category → fragments")
    documentation = ProcessDocumentation()
    try:
        for name, payload in (data or {}).items():
            category = parse_category(name)
            if category.is_global:
                if not isinstance(payload, list):
                    raise SerializationError(f"{name}: global category holds a list of fragments")
                for fragment in payload:
                    documentation.put_fragment(category, None, fragment)
            else:
                if not isinstance(payload, dict):
                    raise SerializationError(f"{name}: keyed category holds an object of id → fragments")
                for key, fragments in payload.items():
                    if not isinstance(fragments, list):
                        raise SerializationError(f"{name}.{key}: expected a list of fragments")
                    for fragment in fragments:
                        documentation.put_fragment(category, key, fragment)
    except InvalidReferenceError as exc:
        # Unknown category, blank key or a fragment that is neither text nor an object
        raise SerializationError(str(exc)) from exc
    return documentation


def records_from_dict(data: dict) -> list[PRAEntity]:
    """
    Every record in the document, in section order, without registering them.

    Section keys are ids; a record's own `id` field wins when present, so a
    hand-edited file with two records claiming the same id is loaded as two
    records and left for the checker to report.
    """
    if not isinstance(data, dict):
        raise SerializationError(f"Expected a {FORMAT_NAME} object, got {type(data).__name__}")
    unknown = sorted(set(data) - set(_SECTION_KINDS) - _PASSTHROUGH_SECTIONS)
    if unknown:
        raise SerializationError(f"Unknown sections: {unknown}")
    metadata = data.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise SerializationError("metadata: expected an object")
    if metadata.get("format", FORMAT_NAME) != FORMAT_NAME:
        raise SerializationError(f"Not a {FORMAT_NAME} document: {metadata.get('format')!r}")

    records = []
    for kind, section in SECTIONS.items():
        entries = data.get(section) or {}
        if not isinstance(entries, dict):
            raise SerializationError(f"{section}: expected an object of id → record")
        for key, body in entries.items():
            if not isinstance(body, dict):
                raise SerializationError(f"{section}.{key}: expected an object")
            body = dict(body)
            body.setdefault("id", key)
            records.append(record_from_dict(kind, body))
    return records


def loads(text: str) -> dict:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Invalid JSON: {exc}") from exc
