"""
PRA Systems Model — Process Documentation
===========================================
Append-only store for the SY-C1 documentation fragments.

Fragments are filed under (category, reference). The reference kind is
fixed per category (see `DocumentationCategory.key_kind`); the two global
categories take no reference. The container never owns the entities it
documents: it only records their ids.
"""

from __future__ import annotations
from collections import defaultdict
from typing import Callable, Iterator, Optional, Union

from .errors import InvalidReferenceError, ReferenceKindError
from .ontology import DocumentationCategory, EntityKind, Reference, coerce_ref

Fragment = Union[str, dict]
Resolver = Callable[[Reference], object]


def parse_category(value) -> DocumentationCategory:
    """Strict category lookup: unknown names are an error, never a new category."""
    if isinstance(value, DocumentationCategory):
        return value
    try:
        return DocumentationCategory(value)
    except ValueError:
        raise InvalidReferenceError(f"Unknown documentation category: {value!r}", value)


class ProcessDocumentation:
    """
    Multi-map (category, reference) → ordered fragments.

    Query results are ordered by category (declaration order of
    `DocumentationCategory`), then by insertion order.
    """

    def __init__(self):
        # category → reference id (None for global categories) → fragments
        self._fragments: dict[DocumentationCategory, dict[Optional[str], list]] = defaultdict(dict)

    # ── Authoring ────────────────────────────────────

    def put_fragment(self, category, ref, fragment: Fragment,
                     resolver: Optional[Resolver] = None) -> None:
        """
        Append a fragment.

        `resolver` (usually `SystemsAnalysisModel.resolve`) is consulted when
        given; a reference it cannot resolve is rejected. Without a resolver the
        reference only has to be of the right kind, so documentation can be
        written before the entity it describes.
        """
        category = parse_category(category)
        key = self._key_for(category, ref)
        if resolver is not None and key is not None:
            target = Reference(category.key_kind, key)
            if resolver(target) is None:
                raise InvalidReferenceError(
                    f"{category.value}: {target} does not resolve", category, target)
        if not isinstance(fragment, (str, dict)):
            raise InvalidReferenceError(
                f"{category.value}: fragments are text or structured records, "
                f"got {type(fragment).__name__}", category, ref)
        self._fragments[category].setdefault(key, []).append(fragment)

    def _key_for(self, category: DocumentationCategory, ref) -> Optional[str]:
        if category.is_global:
            if ref is not None:
                raise InvalidReferenceError(
                    f"{category.value} is global and takes no reference (got {ref})", category, ref)
            return None
        if ref is None:
            raise InvalidReferenceError(
                f"{category.value} fragments must be filed under a {category.key_kind.value}",
                category)
        try:
            reference = coerce_ref(ref, category.key_kind, category.value)
        except ReferenceKindError as exc:
            raise InvalidReferenceError(str(exc), category, ref) from exc
        if reference is None:
            raise InvalidReferenceError(f"{category.value}: blank reference", category, ref)
        return reference.id

    # ── Queries ──────────────────────────────────────

    def get_fragments_for(self, ref: Reference) -> list[tuple[DocumentationCategory, Fragment]]:
        """All fragments filed under `ref`, by category order then insertion order."""
        view = []
        for category in DocumentationCategory:
            if category.key_kind != ref.kind:
                continue
            for fragment in self._fragments.get(category, {}).get(ref.id, []):
                view.append((category, fragment))
        return view

    def get_fragments_for_system(self, ref) -> list[tuple[DocumentationCategory, Fragment]]:
        system = coerce_ref(ref, EntityKind.SYSTEM, "system")
        return self.get_fragments_for(system) if system is not None else []

    def get_global_fragments(self, category) -> list[Fragment]:
        category = parse_category(category)
        if not category.is_global:
            raise InvalidReferenceError(f"{category.value} is keyed, not global", category)
        return list(self._fragments.get(category, {}).get(None, []))

    def keyed_fragments(self) -> Iterator[tuple[DocumentationCategory, Reference, Fragment]]:
        """Every reference-scoped fragment, for consistency checking."""
        for category in DocumentationCategory:
            if category.is_global:
                continue
            for key, fragments in self._fragments.get(category, {}).items():
                ref = Reference(category.key_kind, key)
                for fragment in fragments:
                    yield category, ref, fragment

    def categories(self) -> dict[DocumentationCategory, dict[Optional[str], list]]:
        """Non-empty categories, in category order."""
        return {
            category: {key: list(frags) for key, frags in self._fragments[category].items() if frags}
            for category in DocumentationCategory
            if self._fragments.get(category)
        }

    def stats(self) -> dict:
        per_category = {
            category.value: sum(len(frags) for frags in keys.values())
            for category, keys in self.categories().items()
        }
        return {
            "categories": len(per_category),
            "fragments": sum(per_category.values()),
            "per_category": per_category,
        }

    def __len__(self) -> int:
        return sum(len(frags) for keys in self._fragments.values() for frags in keys.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, ProcessDocumentation):
            return NotImplemented
        return self.categories() == other.categories()
