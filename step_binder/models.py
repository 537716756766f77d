from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field


class StepKeyword(str, Enum):
    GIVEN = "Given"
    WHEN = "When"
    THEN = "Then"

    @classmethod
    def from_text(cls, text: str) -> "StepKeyword":
        return cls(text.strip().lower().capitalize())


class StepError(str, Enum):
    EMPTY_LINE = "empty_line"
    WRONG_CONJUNCTION = "wrong_conjunction"
    MISSING_KEYWORD = "missing_keyword"
    # Raised by line resolution on the host side, never by the validator
    MULTI_LINE = "multi_line"

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_MESSAGES = {
    StepError.EMPTY_LINE: "Line is empty/whitespace.",
    StepError.WRONG_CONJUNCTION: "Please use Given, When or Then",
    StepError.MISSING_KEYWORD: 'Line must start with the word "Given", "When" or "Then".',
    StepError.MULTI_LINE: "Selection must be within a single line.",
}


class Failure(BaseModel):
    ok: Literal[False] = False
    error: StepError

    @property
    def message(self) -> str:
        return self.error.message


class ValidatedLine(BaseModel):
    ok: Literal[True] = True
    line: str


class ParsedStep(BaseModel):
    ok: Literal[True] = True
    keyword: StepKeyword
    remainder: str


class GeneratedMethod(BaseModel):
    ok: Literal[True] = True
    method_name: str
    parameter_names: List[str] = Field(default_factory=list)
    binding_attribute: Optional[str] = None  # e.g. [When(@"...")]
    assignment: str
    text: str


ValidationResult = Union[ValidatedLine, Failure]
KeywordResult = Union[ParsedStep, Failure]
ConversionResult = Union[GeneratedMethod, Failure]


class BatchEntry(BaseModel):
    line_number: int  # 1-based, as shown by editors
    source: str
    result: ConversionResult

    @property
    def ok(self) -> bool:
        return self.result.ok
