# tests/test_subtask_parser.py

from __future__ import annotations

import pytest

from skytask.errors import BadRequestError
from skytask.functions.subtasks import (
    SUBTASKS_SYSTEM_PROMPT,
    build_subtask_messages,
    generate_subtasks,
    parse_subtasks,
    require_task_title,
)

from .fakes import FakeLLMClient


def test_parse_numbered_and_bulleted_lines() -> None:
    assert parse_subtasks("1. Buy flour\n2. Buy sugar\n- Mix") == ["Buy flour", "Buy sugar", "Mix"]


def test_parse_drops_blank_lines_and_whitespace() -> None:
    text = "\n\n  1.   Preheat oven  \n\n* Grease pan\n   \n10. Bake\n"
    assert parse_subtasks(text) == ["Preheat oven", "Grease pan", "Bake"]


def test_parse_keeps_plain_lines() -> None:
    assert parse_subtasks("Call the bank\nAsk about fees") == ["Call the bank", "Ask about fees"]


def test_parse_strips_only_leading_markers() -> None:
    assert parse_subtasks("1. Read chapter 2. Then summarize") == ["Read chapter 2. Then summarize"]
    assert parse_subtasks("- Pick 3-5 options") == ["Pick 3-5 options"]


@pytest.mark.parametrize("text", ["", "   ", "\n\n", "1.\n-\n*"])
def test_parse_empty_reply_yields_empty_list(text: str) -> None:
    assert parse_subtasks(text) == []


def test_build_messages_quotes_title() -> None:
    messages = build_subtask_messages("Plan trip")
    assert messages[0] == {"role": "system", "content": SUBTASKS_SYSTEM_PROMPT}
    assert messages[1]["role"] == "user"
    assert messages[1]["content"].endswith('"Plan trip"')
    assert "3-5" in messages[1]["content"]


def test_generate_subtasks_uses_llm_reply() -> None:
    llm = FakeLLMClient(reply="1. Book flights\n2. Reserve hotel\n3. Pack")
    assert generate_subtasks(llm, "Plan trip") == ["Book flights", "Reserve hotel", "Pack"]
    assert len(llm.completions) == 1


@pytest.mark.parametrize("payload", [None, {}, {"taskTitle": ""}, {"taskTitle": "   "}, {"taskTitle": 5}, ["x"]])
def test_require_task_title_rejects_missing(payload) -> None:
    with pytest.raises(BadRequestError) as exc:
        require_task_title(payload)
    assert exc.value.status == 400
    assert exc.value.message == "Task title is required"


def test_require_task_title_accepts_title() -> None:
    assert require_task_title({"taskTitle": "Plan trip"}) == "Plan trip"
