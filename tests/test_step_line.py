"""Tests for step line validation, keyword parsing and quote extraction."""

import pytest

from step_binder.models import Failure, ParsedStep, StepError, StepKeyword, ValidatedLine
from step_binder.parsing.step_line import (
    get_quoted_literals,
    iter_quoted_spans,
    parse_step_keyword,
    validate_step_line,
)


class TestValidateStepLine:
    """Tests for validate_step_line."""

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["", " ", "\t", "   \t  "])
    def test_blank_lines_are_empty(self, raw: str) -> None:
        result = validate_step_line(raw)
        assert isinstance(result, Failure)
        assert result.error == StepError.EMPTY_LINE
        assert result.message == "Line is empty/whitespace."

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["And something happened", "or else", "AND", "  Or: maybe"])
    def test_conjunctions_are_rejected(self, raw: str) -> None:
        result = validate_step_line(raw)
        assert not result.ok
        assert result.error == StepError.WRONG_CONJUNCTION
        assert result.message == "Please use Given, When or Then"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw",
        ["Andrew opened the door", "Oregon is sunny", "Thenable thing", "Givens", "But it fails", "Scenario: x"],
    )
    def test_word_boundary_is_respected(self, raw: str) -> None:
        """Words that merely start with a keyword or conjunction are not treated as one."""
        result = validate_step_line(raw)
        assert not result.ok
        assert result.error == StepError.MISSING_KEYWORD
        assert result.message == 'Line must start with the word "Given", "When" or "Then".'

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw", ["Given x", "when", "THEN it works", "given\tthe tab", "Given: x", "When\"a\" b", "Then,"]
    )
    def test_keywords_are_case_insensitive(self, raw: str) -> None:
        result = validate_step_line(raw)
        assert isinstance(result, ValidatedLine)
        assert result.ok

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["Givenñ x", "Thené"])
    def test_word_boundary_is_ascii(self, raw: str) -> None:
        assert validate_step_line(raw).ok

    @pytest.mark.unit
    def test_conjunction_boundary_is_ascii(self) -> None:
        result = validate_step_line("Andé then")
        assert result.error == StepError.WRONG_CONJUNCTION

    @pytest.mark.unit
    def test_returns_trimmed_line_with_original_casing(self) -> None:
        result = validate_step_line('   wHeN Message "Hello" is displayed  \t')
        assert result.ok
        assert result.line == 'wHeN Message "Hello" is displayed'


class TestParseStepKeyword:
    """Tests for parse_step_keyword."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "line, keyword",
        [("given a", StepKeyword.GIVEN), ("WHEN a", StepKeyword.WHEN), ("tHeN a", StepKeyword.THEN)],
    )
    def test_keyword_is_title_cased(self, line: str, keyword: StepKeyword) -> None:
        result = parse_step_keyword(line)
        assert isinstance(result, ParsedStep)
        assert result.keyword == keyword
        assert result.keyword.value in {"Given", "When", "Then"}

    @pytest.mark.unit
    def test_remainder_is_trimmed(self) -> None:
        result = parse_step_keyword('  When    Message "Hello" is displayed   ')
        assert result.ok
        assert result.keyword == StepKeyword.WHEN
        assert result.remainder == 'Message "Hello" is displayed'

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "line, keyword, remainder",
        [
            ("Given: x", StepKeyword.GIVEN, ": x"),
            ('When"a" b', StepKeyword.WHEN, '"a" b'),
            ("Then,", StepKeyword.THEN, ","),
        ],
    )
    def test_punctuation_after_keyword_stays_in_remainder(
        self, line: str, keyword: StepKeyword, remainder: str
    ) -> None:
        result = parse_step_keyword(line)
        assert result.ok
        assert result.keyword == keyword
        assert result.remainder == remainder

    @pytest.mark.unit
    def test_non_ascii_letter_ends_the_keyword(self) -> None:
        """Only ASCII letters and digits continue a word, so ``Givenñ`` still starts with Given."""
        result = parse_step_keyword("Givenñ x")
        assert result.ok
        assert result.keyword == StepKeyword.GIVEN
        assert result.remainder == "ñ x"

    @pytest.mark.unit
    def test_keyword_only_has_empty_remainder(self) -> None:
        result = parse_step_keyword("Then")
        assert result.ok
        assert result.remainder == ""

    @pytest.mark.unit
    @pytest.mark.parametrize("line", ["", "thenable", "And then", "Scenario: Then"])
    def test_missing_keyword_fails_without_validation(self, line: str) -> None:
        result = parse_step_keyword(line)
        assert isinstance(result, Failure)
        assert result.error == StepError.MISSING_KEYWORD


class TestQuotedLiterals:
    """Tests for get_quoted_literals and iter_quoted_spans."""

    @pytest.mark.unit
    def test_single_quoted_value(self) -> None:
        assert get_quoted_literals('When Message "Hello" is displayed') == ["Hello"]

    @pytest.mark.unit
    def test_order_is_preserved(self) -> None:
        assert get_quoted_literals('Given "x" and "y" match') == ["x", "y"]

    @pytest.mark.unit
    def test_no_quotes_yields_empty_list(self) -> None:
        assert get_quoted_literals("Given nothing is quoted") == []

    @pytest.mark.unit
    def test_empty_quotes_are_a_literal(self) -> None:
        assert get_quoted_literals('Given "" is blank') == [""]

    @pytest.mark.unit
    def test_trailing_unmatched_quote_is_ignored(self) -> None:
        assert get_quoted_literals('Given "a" and "b') == ["a"]

    @pytest.mark.unit
    def test_quotes_pair_with_next_quote(self) -> None:
        """Adjacent quoted regions never nest or overlap."""
        assert get_quoted_literals('Then ""inner"" done') == ["", ""]

    @pytest.mark.unit
    def test_spans_cover_delimiting_quotes(self) -> None:
        line = 'Given "x" and "yz"'
        spans = list(iter_quoted_spans(line))
        assert spans == [(6, 9, "x"), (14, 18, "yz")]
        assert [line[s:e] for s, e, _ in spans] == ['"x"', '"yz"']
