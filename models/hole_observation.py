from enum import Enum
from pydantic import Field, field_validator
from typing import Any

from .base import BaseGolfModel


class Answer(str, Enum):
    """Outcome of a yes/no stat that may not apply to a hole."""
    YES = "yes"
    NO = "no"
    NA = "na"

    @classmethod
    def parse(cls, value: Any) -> "Answer":
        """Accept enum values, booleans, None and the scorecard labels (Sí / No / NA)."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NA
        if isinstance(value, bool):
            return cls.YES if value else cls.NO
        text = str(value).strip().lower()
        if text in _ANSWER_ALIASES:
            return _ANSWER_ALIASES[text]
        raise ValueError(f"Unrecognised answer: {value!r}")


_ANSWER_ALIASES = {
    "yes": Answer.YES,
    "y": Answer.YES,
    "sí": Answer.YES,
    "si": Answer.YES,
    "true": Answer.YES,
    "no": Answer.NO,
    "n": Answer.NO,
    "false": Answer.NO,
    "na": Answer.NA,
    "n/a": Answer.NA,
    "": Answer.NA,
}


class HoleObservation(BaseGolfModel):
    """One hole as recorded by the player.

    gir_distance is the approach distance in meters; first_putt_distance is in feet.
    """

    hole_number: int = Field(..., ge=1, le=18)
    par: int = Field(4, ge=3, le=5)
    score: int = Field(..., ge=1)
    fir: Answer = Answer.NA
    gir: Answer = Answer.NO
    gir_distance: float = Field(0, ge=0)
    putts: int = Field(..., ge=1)
    up_and_down: Answer = Answer.NA
    sand_save: Answer = Answer.NA
    penalty: bool = False
    first_putt_distance: float = Field(0, ge=0)

    @field_validator("fir", "up_and_down", "sand_save", mode="before")
    @classmethod
    def _parse_answer(cls, value):
        return Answer.parse(value)

    @field_validator("gir", mode="before")
    @classmethod
    def _parse_gir(cls, value):
        answer = Answer.parse(value)
        if answer is Answer.NA:
            raise ValueError("GIR always applies; answer yes or no")
        return answer

    @field_validator("penalty", mode="before")
    @classmethod
    def _parse_penalty(cls, value):
        if isinstance(value, bool):
            return value
        answer = Answer.parse(value)
        if answer is Answer.NA:
            raise ValueError("Penalty must be yes or no")
        return answer is Answer.YES

    @property
    def hit_fairway(self) -> bool:
        return self.fir is Answer.YES

    @property
    def hit_green(self) -> bool:
        return self.gir is Answer.YES

    @property
    def one_putt(self) -> bool:
        return self.putts == 1
