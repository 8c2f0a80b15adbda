"""Surveyor roster models."""

from typing import Annotated, Union

from pydantic import BaseModel, BeforeValidator


def normalize_surveyor_id(value):
    """Turn digit-only strings into ints so ``"7"`` and ``7`` name one account.

    Other strings are stripped and kept as external keys; non-strings pass
    through unchanged.

    Examples:
        >>> normalize_surveyor_id(" 7 ")
        7
        >>> normalize_surveyor_id("SRV-7")
        'SRV-7'
    """
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            return int(value)
    return value


SurveyorId = Annotated[Union[int, str], BeforeValidator(normalize_surveyor_id)]


def is_valid_surveyor_id(surveyor_id: SurveyorId) -> bool:
    """0, ``"0"``, empty, and whitespace-only ids mean no booking account is linked."""
    return bool(normalize_surveyor_id(surveyor_id))


class Surveyor(BaseModel):
    """A surveyor row in the calendar."""
    booking_id: SurveyorId
    name: str
    region: str = ""
    state: str = ""

    @property
    def has_account(self) -> bool:
        return is_valid_surveyor_id(self.booking_id)
