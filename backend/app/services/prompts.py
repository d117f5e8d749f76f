"""Prompt templates for grounded answers and study-set generation.

Everything here is a pure function of its arguments.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Protocol

from app.services.errors import ValidationError

REFUSAL_MESSAGE = "Not found in your notes for this subject. Would you like to upload more material?"

NO_MATERIAL_MESSAGE = "No notes have been uploaded for this subject yet. Upload a PDF or text file to get started."

MAX_MCQS = 5
MAX_SHORT_ANSWERS = 3


class PromptTask(str, Enum):
    ASK = "ask"
    STUDY_TASKS = "study-tasks"


class TurnLike(Protocol):
    role: str
    content: str


def format_history(history: Sequence[TurnLike]) -> str:
    """Render turns as `ROLE: content` lines, oldest first."""
    return "\n".join(f"{turn.role.upper()}: {turn.content}" for turn in history)


def build_ask_prompt(context: str, history: Sequence[TurnLike], question: str) -> str:
    history_block = format_history(history) or "(no previous messages)"
    return f"""You are a supportive, teacher-like study assistant named "Study Copilot".
Your goal is to explain concepts clearly and conversationally.
Answer the student's question using ONLY the notes provided below for this subject.
If the answer is not in the notes, respond with exactly: "{REFUSAL_MESSAGE}"

CONSTRAINTS:
1. Ground every statement in the provided notes. Do not use outside knowledge.
2. Use a helpful, encouraging tone.
3. Cite the source file name, e.g. (Source: lecture1.pdf).
4. If it's a follow-up question, use the recent history to stay in context.

RECENT HISTORY:
{history_block}

NOTES:
{context}

QUESTION: {question}

Provide your response in a conversational way.
Include: The Answer (with citations), Confidence: [High/Medium/Low]"""


def build_study_set_prompt(context: str, subject_name: str) -> str:
    return f"""You are a strict academic examiner. Based ONLY on the provided study notes for the subject "{subject_name}", generate a study task set.

CRITICAL RULES:
1. Do NOT use outside knowledge. If the notes are about "{subject_name}", do NOT generate questions about other topics.
2. If the notes are insufficient to generate {MAX_MCQS} MCQs, generate as many as possible (min 1).
3. Base MCQs on specific facts, definitions, or concepts found in the notes.

NOTES:
{context}

Generate EXACTLY this JSON structure (no markdown, raw JSON only):
{{
  "mcqs": [
    {{"q": "question text", "options": ["A", "B", "C", "D"], "answer": 0, "explanation": "why this is the answer based on the notes"}}
  ],
  "shortAnswers": [
    {{"q": "conceptual question", "model": "detailed model answer citing the source file"}}
  ]
}}

Rules:
- Generate up to {MAX_MCQS} MCQs and up to {MAX_SHORT_ANSWERS} short answers.
- Every MCQ has exactly 4 options.
- MCQ answer field = index (0-3) of the correct option.
- Include source citations in short answer model answers.
- Output raw JSON only. Do not wrap it in ``` fences or add any commentary."""


def build_prompt(
    task: PromptTask | str,
    context: str,
    history: Sequence[TurnLike] | None = None,
    question: str | None = None,
    subject_name: str | None = None,
) -> str:
    """
    Render the prompt for a task.

    Args:
        task: "ask" or "study-tasks"
        context: Assembled notes block
        history: Recent turns, oldest first (ask only)
        question: The student's question (ask only)
        subject_name: Subject display name (study-tasks only)

    Returns:
        Prompt text
    """
    task = PromptTask(task)
    if task is PromptTask.ASK:
        if not question or not question.strip():
            raise ValidationError("question is required")
        return build_ask_prompt(context, history or [], question.strip())
    return build_study_set_prompt(context, subject_name or "this subject")
