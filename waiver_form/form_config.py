"""
Read-only access to the waiver form configuration.

FormConfig is built once, validated at construction and never mutated.
The UI reads user fields and collections from it; the stamping engine reads
coordinates and resolved values (or a ready-made stamp plan).
"""
from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from waiver_form.errors import FieldNotFound
from waiver_form.field_registry import (
    CURRENT_DATE_SEED,
    auto_field_identifiers,
    user_field_identifiers,
    waiver_form,
)
from waiver_form.resolver import DefaultResolver, check_counts, collection_members, validate_form
from waiver_form.schemas import Coordinate, FieldCollection, Form, FormField, Stamp
from waiver_form.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class FormConfig:
    def __init__(
        self,
        form: Form,
        cfg: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        validate_form(form)
        self.form = form
        self.cfg = cfg or default_settings
        self._clock = clock or datetime.now
        self._members = collection_members(form)
        self._load_seeds = self._compute_seeds()
        logger.info(
            "Form config ready: %r (%s fields, %s collections, date seed mode=%s)",
            form.title,
            len(form.fields),
            len(form.collections),
            self.cfg.date_seed_mode,
        )

    @property
    def title(self) -> str:
        return self.form.title

    @property
    def fields(self) -> Mapping[str, FormField]:
        return self.form.fields

    def _compute_seeds(self) -> Dict[str, str]:
        return {CURRENT_DATE_SEED: self.cfg.date_format.format(date=self._clock())}

    def seeds(self) -> Dict[str, str]:
        if self.cfg.date_seed_mode == "render":
            return self._compute_seeds()
        return dict(self._load_seeds)

    def _resolver(self, values: Optional[Mapping[str, Any]]) -> DefaultResolver:
        return DefaultResolver(self.form, self.cfg, self._with_empty_collections(values), self.seeds())

    def _with_empty_collections(self, values: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        # a collection member with no entry means zero repetitions, not an unfilled field
        merged: Dict[str, Any] = {identifier: [] for identifier in self._members}
        for key, value in (values or {}).items():
            if value is not None:
                merged[key] = value
        return merged

    # --------------------
    # Lookups
    # --------------------

    def get_field(self, identifier: str) -> FormField:
        field = self.form.fields.get(identifier)
        if field is None:
            raise FieldNotFound(identifier)
        return field

    def get_coordinates_for(self, identifier: str) -> Tuple[Coordinate, ...]:
        return self.get_field(identifier).coordinates

    def list_collections(self) -> Tuple[FieldCollection, ...]:
        return self.form.collections

    def collection_for(self, identifier: str) -> Optional[FieldCollection]:
        self.get_field(identifier)
        title = self._members.get(identifier)
        if title is None:
            return None
        return next(c for c in self.form.collections if c.title == title)

    def user_fields(self) -> List[Tuple[str, FormField]]:
        """User generated fields ordered by `sequence`, then declaration order."""
        keys = user_field_identifiers(self.form)
        order = {k: i for i, k in enumerate(keys)}

        def sort_key(key: str):
            sequence = self.form.fields[key].sequence
            return (sequence is None, sequence if sequence is not None else 0, order[key])

        return [(k, self.form.fields[k]) for k in sorted(keys, key=sort_key)]

    def auto_fields(self) -> List[Tuple[str, FormField]]:
        return [(k, self.form.fields[k]) for k in auto_field_identifiers(self.form)]

    # --------------------
    # Resolution
    # --------------------

    def resolve_default(self, identifier: str, values: Optional[Mapping[str, Any]] = None) -> List[str]:
        """
        Resolve the `default` entries of a field.

        Entries naming another field are replaced by that field's current
        value (following chains of defaults); other entries are returned as
        literals. A field without a default yields its seed value, if any.
        """
        return self._resolver(values).entries(identifier)

    def resolve_value(self, identifier: str, values: Optional[Mapping[str, Any]] = None) -> str:
        return self._resolver(values).value(identifier)

    def validate_values(self, values: Mapping[str, Any]) -> None:
        check_counts(self.form, values)

    def stamp_plan(self, values: Mapping[str, Any]) -> List[Stamp]:
        """
        Validate `values` and list every (value, position) pair to stamp.

        Each field's value is written at each of its coordinates. Fields that
        repeat in a collection write repetition k at coordinate k instead.
        Fields left without a value are skipped.
        """
        self.validate_values(values)
        resolver = self._resolver(values)
        stamps: List[Stamp] = []

        for identifier, field in self.form.fields.items():
            if identifier in self._members:
                entries = values.get(identifier) or []
                if not isinstance(entries, (list, tuple)):
                    entries = [entries]
                pairs = [(str(v), c) for v, c in zip(entries, field.coordinates)]
            else:
                if field.is_user_generated and resolver.supplied(identifier) is None and field.default is None:
                    continue
                value = resolver.value(identifier)
                pairs = [(value, c) for c in field.coordinates]

            for value, coordinate in pairs:
                if value == "":
                    continue
                stamps.append(
                    Stamp(identifier=identifier, value=value, page=coordinate.page, x=coordinate.x, y=coordinate.y)
                )

        logger.debug("Stamp plan for %r: %s stamps", self.form.title, len(stamps))
        return stamps

    def as_dict(self) -> Dict[str, Any]:
        return self.form.model_dump(by_alias=True, exclude_none=True)


@lru_cache
def get_form_config() -> FormConfig:
    """Process-wide waiver configuration, built on first use."""
    return FormConfig(waiver_form(default_settings), default_settings)
