"""
Tests for the pydantic models behind the form configuration.
"""
import pytest
from pydantic import ValidationError

from waiver_form.schemas import AutoGeneratedField, Coordinate, FieldCollection, UserGeneratedField

from conftest import make_form, point


def test_coordinate_exposes_x_and_y():
    c = Coordinate.model_validate(point(463, 638, 1))
    assert c.x == 463
    assert c.y == 638
    assert c.page == 1


def test_coordinate_page_is_one_based():
    with pytest.raises(ValidationError):
        Coordinate.model_validate(point(10, 10, 0))


def test_coordinate_is_immutable():
    c = Coordinate.model_validate(point(10, 10, 2))
    with pytest.raises(ValidationError):
        c.page = 3


def test_fields_are_discriminated_on_render_flag():
    form = make_form(
        {
            "typed": {"coordinates": [point(1, 1)], "renderFieldInPDF": True, "inputType": "text"},
            "generated": {"coordinates": [point(2, 2)], "renderFieldInPDF": False, "default": ["x"]},
        }
    )
    assert isinstance(form.fields["typed"], UserGeneratedField)
    assert isinstance(form.fields["generated"], AutoGeneratedField)


def test_auto_generated_field_rejects_input_metadata():
    """An auto generated field carrying inputType/minCount is a schema error, not silently ignored."""
    with pytest.raises(ValidationError):
        make_form(
            {
                "bad": {
                    "coordinates": [point(1, 1)],
                    "renderFieldInPDF": False,
                    "inputType": "text",
                    "minCount": 1,
                }
            }
        )


def test_user_generated_field_requires_input_type():
    with pytest.raises(ValidationError):
        make_form({"bad": {"coordinates": [point(1, 1)], "renderFieldInPDF": True}})


def test_field_without_render_flag_is_rejected():
    with pytest.raises(ValidationError):
        make_form({"bad": {"coordinates": [point(1, 1)], "default": ["x"]}})


def test_field_needs_at_least_one_coordinate():
    with pytest.raises(ValidationError):
        make_form({"bad": {"coordinates": [], "renderFieldInPDF": False}})


def test_user_field_max_count_below_min_count_is_rejected():
    with pytest.raises(ValidationError):
        make_form(
            {
                "bad": {
                    "coordinates": [point(1, 1)],
                    "renderFieldInPDF": True,
                    "inputType": "number",
                    "minCount": 2,
                    "maxCount": 1,
                }
            }
        )


def test_collection_max_count_below_min_count_is_rejected():
    with pytest.raises(ValidationError):
        FieldCollection.model_validate(
            {"title": "Minors", "fieldIdentifiers": ["a"], "minCount": 3, "maxCount": 2}
        )


def test_collection_max_count_is_required():
    with pytest.raises(ValidationError):
        FieldCollection.model_validate({"title": "Minors", "fieldIdentifiers": ["a"]})
