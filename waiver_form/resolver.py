"""
Default resolution and integrity checks for the form configuration.

A field's `default` is a list of entries. An entry equal to another field
identifier takes that field's current value, any other entry is a literal.
References form a directed graph which is checked for cycles at load time.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from waiver_form.errors import (
    CollectionCapacityExceeded,
    CollectionReferencesUnknownField,
    CountConstraintViolation,
    CyclicDefaultReference,
    DanglingDefaultReference,
    FieldNotFound,
)
from waiver_form.schemas import Form
from waiver_form.settings import Settings

logger = logging.getLogger(__name__)


def reference_graph(form: Form) -> Dict[str, List[str]]:
    """Map each field to the field identifiers its default refers to, in order."""
    graph: Dict[str, List[str]] = {}
    for key, field in form.fields.items():
        refs: List[str] = []
        for entry in field.default or ():
            if entry in form.fields and entry not in refs:
                refs.append(entry)
        graph[key] = refs
    return graph


def find_cycle(graph: Mapping[str, Sequence[str]]) -> Optional[List[str]]:
    """
    Return the first cycle found as a path whose first and last items are
    the same identifier, or None if the graph is acyclic.
    """
    done: Set[str] = set()

    for start in graph:
        if start in done:
            continue
        path: List[str] = []
        on_path: Set[str] = set()
        stack = [(start, iter(graph.get(start, ())))]
        path.append(start)
        on_path.add(start)
        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                path.pop()
                on_path.discard(node)
                done.add(node)
                continue
            if child in on_path:
                return path[path.index(child):] + [child]
            if child in done:
                continue
            stack.append((child, iter(graph.get(child, ()))))
            path.append(child)
            on_path.add(child)
    return None


def collection_members(form: Form) -> Dict[str, str]:
    """field identifier -> title of the collection it repeats in"""
    members: Dict[str, str] = {}
    for collection in form.collections:
        for identifier in collection.field_identifiers:
            members[identifier] = collection.title
    return members


def validate_form(form: Form) -> None:
    """
    Load-time integrity pass:
    - every collection identifier exists as a field
    - every collection member has a coordinate per allowed repetition
    - default references are acyclic
    """
    for collection in form.collections:
        for identifier in collection.field_identifiers:
            field = form.fields.get(identifier)
            if field is None:
                raise CollectionReferencesUnknownField(collection.title, identifier)
            if len(field.coordinates) < collection.max_count:
                raise CollectionCapacityExceeded(
                    collection.title, identifier, collection.max_count, len(field.coordinates)
                )

    cycle = find_cycle(reference_graph(form))
    if cycle:
        raise CyclicDefaultReference(cycle)

    logger.debug("Form %r passed integrity checks", form.title)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def value_count(value: Any) -> int:
    """Number of supplied values; None and blank strings count as missing."""
    if isinstance(value, (list, tuple)):
        return sum(1 for v in value if not is_blank(v))
    return 0 if is_blank(value) else 1


def _check_bounds(subject: str, count: int, min_count: Optional[int], max_count: Optional[int]) -> None:
    if count < (min_count or 0) or (max_count is not None and count > max_count):
        raise CountConstraintViolation(subject, count, min_count, max_count)


def check_counts(form: Form, values: Mapping[str, Any]) -> None:
    """
    Validate supplied values against minCount/maxCount.

    Fields outside collections are checked individually. For a collection the
    number of repetitions is the longest member list; it must sit within the
    collection's bounds and every member must supply one value per repetition.
    """
    for identifier in values:
        if identifier not in form.fields:
            raise FieldNotFound(identifier)

    members = collection_members(form)

    for identifier, field in form.fields.items():
        if not field.is_user_generated or identifier in members:
            continue
        _check_bounds(identifier, value_count(values.get(identifier)), field.min_count, field.max_count)

    for collection in form.collections:
        counts = {i: value_count(values.get(i)) for i in collection.field_identifiers}
        repetitions = max(counts.values(), default=0)
        _check_bounds(collection.title, repetitions, collection.min_count, collection.max_count)
        for identifier, count in counts.items():
            field = form.fields[identifier]
            optional = field.is_user_generated and field.min_count == 0
            if count != repetitions and not (optional and count == 0):
                raise CountConstraintViolation(identifier, count, repetitions, repetitions)


class DefaultResolver:
    """
    Resolves field values for one set of supplied values.

    Results are memoized for the lifetime of the resolver; a fresh resolver is
    built per call so supplied values never leak between callers.
    """

    def __init__(
        self,
        form: Form,
        cfg: Settings,
        values: Optional[Mapping[str, Any]] = None,
        seeds: Optional[Mapping[str, str]] = None,
    ):
        self.form = form
        self.cfg = cfg
        self.values = values or {}
        self.seeds = seeds or {}
        self._memo: Dict[str, str] = {}

    def _field(self, identifier: str):
        field = self.form.fields.get(identifier)
        if field is None:
            raise FieldNotFound(identifier)
        return field

    def supplied(self, identifier: str) -> Optional[str]:
        value = self.values.get(identifier)
        if isinstance(value, (list, tuple)):
            # an empty list is zero repetitions, not a missing value
            return self.cfg.multi_value_separator.join(str(v) for v in value if not is_blank(v))
        if is_blank(value):
            return None
        return str(value)

    def entries(self, identifier: str, _path: Sequence[str] = ()) -> List[str]:
        """Default entries of a field with every identifier replaced by its value."""
        field = self._field(identifier)
        path = list(_path) + [identifier]
        if field.default is None:
            seed = getattr(field, "seed", None)
            if seed is not None and seed in self.seeds:
                return [self.seeds[seed]]
            return []
        resolved: List[str] = []
        for entry in field.default:
            if entry in self.form.fields:
                resolved.append(self.value(entry, referenced_by=identifier, _path=path))
            else:
                resolved.append(entry)
        return resolved

    def value(self, identifier: str, referenced_by: Optional[str] = None, _path: Sequence[str] = ()) -> str:
        """Effective value: supplied value, else joined default, else seed, else the unfilled policy."""
        if identifier in _path:
            cycle = list(_path[list(_path).index(identifier):]) + [identifier]
            raise CyclicDefaultReference(cycle)
        if identifier in self._memo:
            return self._memo[identifier]

        field = self._field(identifier)
        supplied = self.supplied(identifier)
        if supplied is not None:
            result = supplied
        elif field.default is not None or getattr(field, "seed", None) in self.seeds:
            result = self.cfg.default_separator.join(self.entries(identifier, _path))
        else:
            result = self._unfilled(identifier, referenced_by)

        self._memo[identifier] = result
        return result

    def _unfilled(self, identifier: str, referenced_by: Optional[str]) -> str:
        policy = self.cfg.unfilled_reference_policy
        if policy == "error":
            raise DanglingDefaultReference(identifier, referenced_by)
        substitute = self.cfg.unfilled_placeholder if policy == "placeholder" else ""
        logger.warning(
            "Field %s has no value (referenced by %s); using %r per %s policy",
            identifier,
            referenced_by,
            substitute,
            policy,
        )
        return substitute
