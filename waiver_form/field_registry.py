from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from waiver_form.schemas import Form
from waiver_form.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

WAIVER_TITLE = "Mr. Wet Jet Liability Waiver"
CURRENT_DATE_SEED = "current_date"


def _at(*points: Tuple[int, int, int]) -> List[Dict[str, Any]]:
    return [{"coordinate": [x, y], "page": page} for x, y, page in points]


def _single_input(input_type: str, *points: Tuple[int, int, int]) -> Dict[str, Any]:
    return {
        "coordinates": _at(*points),
        "inputType": input_type,
        "renderFieldInPDF": True,
        "minCount": 1,
        "maxCount": 1,
    }


def waiver_form_definition(cfg: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Field layout of the liability waiver PDF (v1).
    This is a contract: stable identifiers, stable coordinates.
    Points are (x, y, page) with the origin at the bottom-left of the page.
    """
    cfg = cfg or default_settings
    return {
        "title": WAIVER_TITLE,
        "collections": [
            {
                "fieldIdentifiers": [
                    "minor_full_name",
                    "minor_birthday",
                    "minor_relation_to_user",
                ],
                "maxCount": 4,
                "title": "Minors, if applicable",
            },
        ],
        "fields": {
            # --------------------
            # Auto generated
            # --------------------
            "date": {
                "coordinates": _at(
                    (395, 679, 1),
                    (469, 155, 4),
                    (469, 99, 4),
                    (411, 130, 5),
                    (380, 529, 6),
                    (448, 489, 6),
                    (363, 512, 8),
                ),
                "seed": CURRENT_DATE_SEED,
                "renderFieldInPDF": False,
            },
            "owner_signature": {
                "coordinates": _at((135, 155, 4)),
                "default": [cfg.owner_name],
                "renderFieldInPDF": False,
            },
            "location": {
                "coordinates": _at((78, 420, 2)),
                "default": [cfg.location_fallback],
                "renderFieldInPDF": False,
            },
            "signature": {
                "coordinates": _at(
                    (135, 99, 4),
                    (134, 130, 5),
                    (40, 529, 6),
                    (38, 489, 6),
                    (92, 512, 8),
                ),
                "default": ["full_name"],
                "renderFieldInPDF": False,
            },
            "concat_all_full_names_of_minors": {
                "coordinates": _at((264, 489, 6)),
                "default": ["minor_full_name"],
                "renderFieldInPDF": False,
            },

            # --------------------
            # Participant
            # --------------------
            "full_name": _single_input("text", (168, 638, 1), (92, 225, 5), (39, 258, 7), (221, 614, 8)),
            "age": _single_input("number", (463, 638, 1)),
            "date_of_birth": _single_input("date", (349, 225, 5), (352, 537, 8)),
            "phone_number": _single_input("tel", (473, 225, 5), (123, 537, 8)),
            "address": _single_input("text", (77, 193, 5), (82, 588, 8)),
            "city": _single_input("text", (383, 193, 5), (61, 563, 8)),
            "state": _single_input("text", (62, 162, 5), (264, 563, 8)),
            "zip": _single_input("number", (202, 162, 5), (345, 563, 8)),
            "email": _single_input("email", (319, 162, 5)),

            # --------------------
            # Minors (one row per collection repetition, page 8)
            # --------------------
            "minor_full_name": _single_input("text", (120, 462, 8), (120, 428, 8), (120, 392, 8), (120, 356, 8)),
            "minor_birthday": _single_input("text", (345, 462, 8), (345, 428, 8), (345, 392, 8), (342, 356, 8)),
            "minor_relation_to_user": _single_input(
                "text", (468, 462, 8), (468, 428, 8), (468, 392, 8), (468, 356, 8)
            ),
        },
    }


def load_form(data: Mapping[str, Any]) -> Form:
    """Validate a camelCase form mapping into a Form."""
    form = Form.model_validate(data)
    logger.debug(
        "Loaded form %r with %s fields and %s collections",
        form.title,
        len(form.fields),
        len(form.collections),
    )
    return form


def waiver_form(cfg: Optional[Settings] = None) -> Form:
    return load_form(waiver_form_definition(cfg))


def user_field_identifiers(form: Form) -> List[str]:
    return [k for k, f in form.fields.items() if f.is_user_generated]


def auto_field_identifiers(form: Form) -> List[str]:
    return [k for k, f in form.fields.items() if not f.is_user_generated]
