from __future__ import annotations

from types import MappingProxyType
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_serializer,
    field_validator,
    model_validator,
)

Number = Union[int, float]


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class Coordinate(_FrozenModel):
    # (x, y): x from the left edge, y from the bottom edge of the page
    position: Tuple[Number, Number] = Field(alias="coordinate")
    page: int = Field(ge=1)  # 1-based

    @property
    def x(self) -> Number:
        return self.position[0]

    @property
    def y(self) -> Number:
        return self.position[1]


class _FieldBase(_FrozenModel):
    coordinates: Tuple[Coordinate, ...] = Field(min_length=1)
    # entries matching another field identifier take that field's value, the rest are literals
    default: Optional[Tuple[str, ...]] = None


class AutoGeneratedField(_FieldBase):
    """Never shown as an input; the value comes from `default` or an external seed."""

    render_field_in_pdf: Literal[False] = Field(default=False, alias="renderFieldInPDF")
    seed: Optional[str] = None  # e.g. "current_date"

    @property
    def is_user_generated(self) -> bool:
        return False


class UserGeneratedField(_FieldBase):
    """Entered by the user through an input of `input_type`."""

    render_field_in_pdf: Literal[True] = Field(default=True, alias="renderFieldInPDF")
    input_type: str = Field(alias="inputType", min_length=1)  # text | number | date | tel | email ...
    min_count: Optional[int] = Field(default=None, alias="minCount", ge=0)
    max_count: Optional[int] = Field(default=None, alias="maxCount", ge=0)
    sequence: Optional[int] = None

    @property
    def is_user_generated(self) -> bool:
        return True

    @model_validator(mode="after")
    def _check_counts(self) -> "UserGeneratedField":
        if self.min_count is not None and self.max_count is not None and self.max_count < self.min_count:
            raise ValueError(f"maxCount ({self.max_count}) is lower than minCount ({self.min_count})")
        return self


def _field_kind(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        flag = value.get("renderFieldInPDF", value.get("render_field_in_pdf"))
    else:
        flag = getattr(value, "render_field_in_pdf", None)
    if flag is True:
        return "user"
    if flag is False:
        return "auto"
    return None


FormField = Annotated[
    Union[
        Annotated[UserGeneratedField, Tag("user")],
        Annotated[AutoGeneratedField, Tag("auto")],
    ],
    Discriminator(_field_kind),
]


class FieldCollection(_FrozenModel):
    """A repeatable group of fields, e.g. one entry per minor."""

    title: str
    field_identifiers: Tuple[str, ...] = Field(alias="fieldIdentifiers", min_length=1)
    min_count: Optional[int] = Field(default=None, alias="minCount", ge=0)
    max_count: int = Field(alias="maxCount", ge=0)

    @model_validator(mode="after")
    def _check_counts(self) -> "FieldCollection":
        if self.min_count is not None and self.max_count < self.min_count:
            raise ValueError(f"maxCount ({self.max_count}) is lower than minCount ({self.min_count})")
        return self


class Form(_FrozenModel):
    title: str
    fields: Dict[str, FormField]
    collections: Tuple[FieldCollection, ...] = ()

    @field_validator("fields", mode="after")
    @classmethod
    def _freeze_fields(cls, value: Dict[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("fields", mode="wrap")
    def _dump_fields(self, value: Mapping[str, Any], handler):
        return handler(dict(value))


class Stamp(_FrozenModel):
    """One value written at one position of the PDF."""

    identifier: str
    value: str
    page: int = Field(ge=1)
    x: float
    y: float
