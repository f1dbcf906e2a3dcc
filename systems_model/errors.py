"""
PRA Systems Model — Exceptions
================================
Construction errors (self-dependency, missing top node, wrong reference
kind) are raised when a record is built and stop it from entering the
registry. Cross-entity problems (dangling references, invalid cut sets,
unresolved loops) are reported as diagnostics by the consistency checker;
the classes below double as the diagnostic codes.
"""

from __future__ import annotations

from typing import Any, Optional


class SystemsModelError(Exception):
    """Base exception for the systems analysis model."""


# ── Entity construction ────────────────────────────────────────

class EntityValidationError(SystemsModelError, ValueError):
    """A record failed its construction-time checks."""


class ReferenceKindError(EntityValidationError):
    """A reference of one entity kind was given where another is required."""

    def __init__(self, message: str, field_name: str = "", expected: Any = None, actual: Any = None):
        super().__init__(message)
        self.field_name = field_name
        self.expected = expected
        self.actual = actual


class SelfDependencyError(EntityValidationError):
    """A system declared itself as its own supporting system."""

    def __init__(self, message: str, system_id: str):
        super().__init__(message)
        self.system_id = system_id


class MissingTopNodeError(EntityValidationError):
    """No unambiguous top event could be found in a fault tree."""

    def __init__(self, message: str, tree_id: str, roots: tuple = ()):
        super().__init__(message)
        self.tree_id = tree_id
        self.roots = roots


class UnjustifiedExclusionError(EntityValidationError):
    """A system models no components and gives no exclusion justification."""


# ── Registry ───────────────────────────────────────────────────

class DuplicateIdError(SystemsModelError):
    def __init__(self, kind: Any, entity_id: str):
        super().__init__(f"Duplicate {getattr(kind, 'value', kind)} id: {entity_id!r}")
        self.kind = kind
        self.entity_id = entity_id


class DanglingReferenceError(SystemsModelError, LookupError):
    """A reference names an entity that has not been declared."""

    def __init__(self, message: str, reference: Any, referrer: Optional[Any] = None):
        super().__init__(message)
        self.reference = reference
        self.referrer = referrer


class InvalidReferenceError(SystemsModelError):
    """A documentation fragment was filed under an unusable key."""

    def __init__(self, message: str, category: Any, reference: Any = None):
        super().__init__(message)
        self.category = category
        self.reference = reference


class SubmissionBlockedError(SystemsModelError):
    """Finalization refused: the consistency report is not clean enough."""

    def __init__(self, message: str, report: Any):
        super().__init__(message)
        self.report = report


class SerializationError(SystemsModelError):
    """A serialized document could not be mapped back onto the model."""


# ── Diagnostic-only codes ──────────────────────────────────────

class MissingFieldError(SystemsModelError):
    """A field required for submission has not been authored."""


class InvalidCutSetError(SystemsModelError):
    """A minimal cut set names something other than a known leaf basic event."""


class UnresolvedLoopWarning(UserWarning):
    """A dependency cycle has no logic-loop resolution record."""


class SharedComponentWarning(UserWarning):
    """The same component is modeled under several systems without a rationale."""


class OrphanNodeWarning(UserWarning):
    """A fault tree holds parentless nodes besides its designated top node."""
