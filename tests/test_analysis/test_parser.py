"""Tests for model output parsing."""

from trendscout.analysis.parser import ParseFailed, Parsed, parse_model_json


class TestParseModelJson:
    def test_plain_json(self) -> None:
        result = parse_model_json('{"growthScore": 80}')
        assert result == Parsed({"growthScore": 80})

    def test_json_fence(self) -> None:
        raw = 'Here you go:\n```json\n{"summary": "ok"}\n```\nEnjoy!'
        assert parse_model_json(raw) == Parsed({"summary": "ok"})

    def test_prefers_json_fence_over_other_fence(self) -> None:
        raw = '```\nnot json\n```\n```json\n{"a": 1}\n```'
        assert parse_model_json(raw) == Parsed({"a": 1})

    def test_untagged_fence(self) -> None:
        raw = '```\n{"a": 1}\n```'
        assert parse_model_json(raw) == Parsed({"a": 1})

    def test_non_json_text(self) -> None:
        result = parse_model_json("I could not find any trends, sorry.")
        assert isinstance(result, ParseFailed)
        assert "invalid JSON" in result.reason

    def test_empty_text(self) -> None:
        result = parse_model_json("   ")
        assert result == ParseFailed("model returned no text")

    def test_array_is_rejected(self) -> None:
        result = parse_model_json("[1, 2, 3]")
        assert isinstance(result, ParseFailed)
        assert "list" in result.reason

    def test_broken_json_in_fence(self) -> None:
        result = parse_model_json('```json\n{"a": 1,\n```')
        assert isinstance(result, ParseFailed)

    def test_prose_around_unfenced_object(self) -> None:
        raw = (
            "I'll search for current trends.\n"
            'Based on what I found: {"growthScore": 64, "summary": "Up."}\n'
            "Let me know if you need more."
        )
        assert parse_model_json(raw) == Parsed({"growthScore": 64, "summary": "Up."})

    def test_prose_with_broken_object(self) -> None:
        result = parse_model_json('Searching now. {"growthScore": 64,')
        assert isinstance(result, ParseFailed)
        assert "invalid JSON" in result.reason
