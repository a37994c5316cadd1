import json

import pytest

from app.errors import FormatError, ParseError, QuestionFormatError
from app.models.quiz import Question
from app.services.quiz_gen import parse_quiz_response
from app.utils.text import strip_json_fences
from conftest import CORRECT, make_items


def test_fenced_json_is_parsed_into_five_questions(items):
    raw = "```json\n" + json.dumps(items) + "\n```"

    questions = parse_quiz_response(raw)

    assert len(questions) == 5
    assert all(isinstance(q, Question) for q in questions)
    assert questions[0].text == items[0]["question"]
    assert questions[0].options == tuple(items[0]["options"])
    assert [q.correct_option_index for q in questions] == CORRECT


def test_plain_json_without_fences(valid_raw):
    assert len(parse_quiz_response(valid_raw)) == 5


def test_order_and_values_preserved_and_extra_fields_dropped(items):
    for i, item in enumerate(items):
        item["explanation"] = f"extra {i}"
        item["id"] = i

    questions = parse_quiz_response(json.dumps(items))

    assert [q.text for q in questions] == [it["question"] for it in items]
    assert not hasattr(questions[0], "explanation")
    assert questions[2].correct_option == items[2]["options"][items[2]["correctAnswer"]]


def test_invalid_json_raises_parse_error():
    with pytest.raises(ParseError) as exc:
        parse_quiz_response("Sure! Here are your questions: [oops")
    assert "Failed to parse AI response" in str(exc.value)


def test_empty_text_raises_parse_error():
    with pytest.raises(ParseError):
        parse_quiz_response("")


def test_four_questions_raise_format_error():
    with pytest.raises(FormatError) as exc:
        parse_quiz_response(json.dumps(make_items(4)))
    assert str(exc.value) == "Invalid response format: Expected array of 5 questions"


def test_six_questions_raise_format_error():
    with pytest.raises(FormatError):
        parse_quiz_response(json.dumps(make_items(6)))


def test_top_level_object_raises_format_error(items):
    with pytest.raises(FormatError):
        parse_quiz_response(json.dumps({"questions": items}))


def test_three_options_rejects_whole_batch(items):
    items[3]["options"] = ["a", "b", "c"]

    with pytest.raises(QuestionFormatError) as exc:
        parse_quiz_response(json.dumps(items))

    assert str(exc.value) == "Invalid question format"
    assert exc.value.index == 3


@pytest.mark.parametrize("answer", [-1, 4, 1.5, 2.0, "1", True, None])
def test_bad_correct_answer_rejected(items, answer):
    items[0]["correctAnswer"] = answer
    with pytest.raises(QuestionFormatError):
        parse_quiz_response(json.dumps(items))


def test_missing_correct_answer_rejected(items):
    del items[4]["correctAnswer"]
    with pytest.raises(QuestionFormatError) as exc:
        parse_quiz_response(json.dumps(items))
    assert exc.value.index == 4


@pytest.mark.parametrize("text", ["", "   ", None, 42])
def test_bad_question_text_rejected(items, text):
    items[1]["question"] = text
    with pytest.raises(QuestionFormatError):
        parse_quiz_response(json.dumps(items))


def test_non_string_option_rejected(items):
    items[2]["options"] = ["a", "b", 3, "d"]
    with pytest.raises(QuestionFormatError):
        parse_quiz_response(json.dumps(items))


def test_element_that_is_not_an_object_rejected(items):
    items[0] = "What is GPT?"
    with pytest.raises(QuestionFormatError) as exc:
        parse_quiz_response(json.dumps(items))
    assert exc.value.index == 0


def test_first_invalid_element_is_reported(items):
    items[1]["options"] = []
    items[3]["correctAnswer"] = 9
    with pytest.raises(QuestionFormatError) as exc:
        parse_quiz_response(json.dumps(items))
    assert exc.value.index == 1


def test_strip_json_fences_keeps_inner_text():
    assert strip_json_fences("```json\n[1, 2]\n```") == "[1, 2]"
    assert strip_json_fences("```\n[]\n```  ") == "[]"
    assert strip_json_fences("  [3] ") == "[3]"


def test_deeply_nested_json_is_a_parse_error():
    with pytest.raises(ParseError):
        parse_quiz_response("[" * 200000)
