from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, ValidationInfo
from pydantic.alias_generators import to_camel

from ricemill.utils.dec_to_float import decimal_to_number
from ricemill.utils.decimal_utils import parse_decimal, parse_non_negative, parse_positive


# ==============================
# NUMERIC FIELD TYPES
# ==============================
def _number(value, info: ValidationInfo) -> Decimal:
    return parse_decimal(value, info.field_name)


def _non_negative(value, info: ValidationInfo) -> Decimal:
    return parse_non_negative(value, info.field_name)


def _positive(value, info: ValidationInfo) -> Decimal:
    return parse_positive(value, info.field_name)


def _optional_number(value, info: ValidationInfo) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_decimal(value, info.field_name)


def _optional_non_negative(value, info: ValidationInfo) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_non_negative(value, info.field_name)


_as_number = PlainSerializer(decimal_to_number, when_used="json")

Number = Annotated[Decimal, BeforeValidator(_number), _as_number]
NonNegative = Annotated[Decimal, BeforeValidator(_non_negative), _as_number]
Positive = Annotated[Decimal, BeforeValidator(_positive), _as_number]
OptionalNumber = Annotated[Optional[Decimal], BeforeValidator(_optional_number), _as_number]
OptionalNonNegative = Annotated[
    Optional[Decimal], BeforeValidator(_optional_non_negative), _as_number
]


# ==============================
# BASE MODEL
# ==============================
class RecordModel(BaseModel):
    """Stored record: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
