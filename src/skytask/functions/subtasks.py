# src/skytask/functions/subtasks.py

from __future__ import annotations

import logging
import re
from typing import Any

from ..core.ports import ChatMessage, LLMClient
from ..errors import BadRequestError

logger = logging.getLogger(__name__)

SUBTASKS_SYSTEM_PROMPT = (
    "You are a helpful assistant that breaks down tasks into 3-5 specific, actionable subtasks. "
    "Return your response as a numbered list, with each subtask on a new line."
)

_NUMBERING_RE = re.compile(r"^[0-9]+\.\s*")
_BULLET_RE = re.compile(r"^[-*]\s*")


def build_subtask_messages(task_title: str) -> list[ChatMessage]:
    return [
        {"role": "system", "content": SUBTASKS_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": f'Break down this task into 3-5 specific, actionable subtasks: "{task_title}"',
        },
    ]


def parse_subtasks(text: str) -> list[str]:
    """
    Turn a numbered/bulleted LLM reply into plain subtask titles.

    One leading "N." marker and then one leading "-"/"*" bullet are removed per line;
    blank lines and lines that end up empty are dropped.
    """
    out: list[str] = []
    for line in (text or "").strip().split("\n"):
        line = line.strip()
        if not line:
            continue
        line = _NUMBERING_RE.sub("", line, count=1)
        line = _BULLET_RE.sub("", line, count=1).strip()
        if line:
            out.append(line)
    return out


def require_task_title(payload: Any) -> str:
    title = payload.get("taskTitle") if isinstance(payload, dict) else None
    if not isinstance(title, str) or not title.strip():
        raise BadRequestError("Task title is required")
    return title


def generate_subtasks(llm: LLMClient, task_title: str) -> list[str]:
    """Ask the model for 3-5 subtasks of `task_title` and parse the reply."""
    reply = llm.complete(build_subtask_messages(task_title), temperature=0.7, max_tokens=500)
    subtasks = parse_subtasks(reply)
    logger.info("Generated %d subtasks for title_len=%d", len(subtasks), len(task_title))
    return subtasks
