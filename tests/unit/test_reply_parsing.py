"""Tests for completion reply parsing."""

import json

from study_coach.domain.entities import QuestionExplanation
from study_coach.domain.services.reply_parsing import FallbackReply, ParsedReply, parse_reply

VALID = {
    "concept": "Power rule",
    "stepByStep": ["Bring the exponent down", "Reduce the exponent by one"],
    "tips": ["Check the exponent"],
}


def test_plain_json_is_parsed():
    outcome = parse_reply(json.dumps(VALID), QuestionExplanation)

    assert isinstance(outcome, ParsedReply)
    assert outcome.value.concept == "Power rule"
    assert outcome.value.step_by_step[1] == "Reduce the exponent by one"


def test_code_fence_is_stripped():
    outcome = parse_reply(f"```json\n{json.dumps(VALID)}\n```", QuestionExplanation)

    assert isinstance(outcome, ParsedReply)


def test_json_embedded_in_prose():
    text = f"Sure! Here is the explanation:\n{json.dumps(VALID)}\nLet me know if that helps."

    outcome = parse_reply(text, QuestionExplanation)

    assert isinstance(outcome, ParsedReply)
    assert outcome.value.tips == ["Check the exponent"]


def test_braces_inside_strings_do_not_confuse_the_scanner():
    reply = {**VALID, "concept": "Sets like {1, 2} and }"}
    text = "Answer: " + json.dumps(reply)

    outcome = parse_reply(text, QuestionExplanation)

    assert isinstance(outcome, ParsedReply)
    assert outcome.value.concept == "Sets like {1, 2} and }"


def test_not_json_falls_back():
    outcome = parse_reply("not json", QuestionExplanation)

    assert isinstance(outcome, FallbackReply)
    assert outcome.reason == "reply is not valid JSON"
    assert outcome.raw_text == "not json"


def test_empty_reply_falls_back():
    outcome = parse_reply("   ", QuestionExplanation)

    assert isinstance(outcome, FallbackReply)
    assert outcome.reason == "empty reply"


def test_schema_mismatch_falls_back():
    outcome = parse_reply(json.dumps({"concept": "Power rule", "stepByStep": []}), QuestionExplanation)

    assert isinstance(outcome, FallbackReply)
    assert outcome.reason.startswith("schema mismatch at stepByStep")
