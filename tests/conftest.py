from datetime import datetime

import pytest

from waiver_form.field_registry import load_form, waiver_form
from waiver_form.form_config import FormConfig
from waiver_form.settings import Settings


FIXED_NOW = datetime(2026, 10, 19, 9, 30)


def point(x, y, page=1):
    return {"coordinate": [x, y], "page": page}


def make_form(fields, collections=(), title="Test form"):
    return load_form({"title": title, "fields": fields, "collections": list(collections)})


@pytest.fixture(scope="function")
def cfg():
    return Settings()


@pytest.fixture(scope="function")
def form_config(cfg):
    return FormConfig(waiver_form(cfg), cfg, clock=lambda: FIXED_NOW)


@pytest.fixture(scope="function")
def participant_values():
    # every required user field, no minors
    return {
        "full_name": "Jane Doe",
        "age": "34",
        "date_of_birth": "1992-04-02",
        "phone_number": "555-0100",
        "address": "1 Dock Rd",
        "city": "Tampa",
        "state": "FL",
        "zip": "33602",
        "email": "jane@example.com",
    }
