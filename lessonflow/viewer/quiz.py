"""
Quiz renderer - Scoring and knowledge-check display.

Provides:
- Quiz scoring against correct option indices
- Question rendering
- Result review with correct/incorrect markers
"""

import html
from dataclasses import dataclass
from typing import Optional

from lessonflow.schemas import Quiz, QuizAttempt, QuizQuestion
from lessonflow.utils import round_half_up


UNANSWERED = -1


@dataclass
class QuizResult:
    """Outcome of scoring one submission."""
    score: int          # 0-100
    passed: bool
    correct_count: int
    total: int
    answers: list[int]  # normalised, one per question


def normalize_answers(quiz: Quiz, answers: list[Optional[int]]) -> list[int]:
    """One answer per question; missing or None answers become -1."""
    normalized = []
    for idx in range(len(quiz.questions)):
        answer = answers[idx] if idx < len(answers) else None
        normalized.append(UNANSWERED if answer is None else answer)
    return normalized


def score_quiz(quiz: Quiz, answers: list[Optional[int]]) -> QuizResult:
    """
    Score a quiz submission.

    Args:
        quiz: Quiz with questions and pass threshold
        answers: Selected option index per question (None = unanswered)

    Returns:
        QuizResult; a quiz without questions scores 100
    """
    normalized = normalize_answers(quiz, answers)
    total = len(quiz.questions)

    correct = sum(
        1 for question, answer in zip(quiz.questions, normalized)
        if answer == question.correct_option_index
    )
    score = round_half_up(correct / total * 100) if total else 100

    return QuizResult(
        score=score,
        passed=score >= quiz.pass_threshold,
        correct_count=correct,
        total=total,
        answers=normalized,
    )


def get_quiz_css() -> str:
    """Get CSS styles for quiz display."""
    return """
    <style>
    .quiz-container {
        border: 1px solid #ddd;
        border-radius: 8px;
        padding: 1.25em;
        margin: 1em 0;
    }
    .quiz-title {
        font-weight: 600;
        font-size: 1.1em;
    }
    .quiz-meta {
        color: #666;
        font-size: 0.9em;
    }
    .quiz-result {
        border-radius: 6px;
        padding: 1em;
        margin: 1em 0;
    }
    .quiz-result.passed {
        background: #e8f5e9;
        color: #1b5e20;
    }
    .quiz-result.failed {
        background: #ffebee;
        color: #b71c1c;
    }
    .quiz-option {
        border: 1px solid #ddd;
        border-radius: 6px;
        padding: 0.4em 0.8em;
        margin: 0.25em 0 0.25em 1.75em;
        color: #666;
    }
    .quiz-option.correct {
        border-color: #4caf50;
        background: #e8f5e9;
        color: #1b5e20;
    }
    .quiz-option.wrong {
        border-color: #f44336;
        background: #ffebee;
        color: #b71c1c;
    }
    </style>
    """


def render_quiz_header(quiz: Quiz, question_index: int = 0) -> str:
    """Render "Question n of m · x% to pass" header."""
    title = html.escape(quiz.title or "Knowledge Check")
    total = len(quiz.questions)
    threshold = f"{quiz.pass_threshold:g}"
    return (
        f'<div class="quiz-title">{title}</div>'
        f'<div class="quiz-meta">Question {question_index + 1} of {total} · {threshold}% to pass</div>'
    )


def render_question_review(question: QuizQuestion, index: int, answer: int) -> str:
    """Render one answered question with correct/incorrect option markers."""
    mark = "✓" if answer == question.correct_option_index else "✗"
    parts = [f'<p><strong>{mark} {index + 1}. {html.escape(question.text)}</strong></p>']

    for option_idx, option in enumerate(question.options):
        css = "quiz-option"
        if option_idx == question.correct_option_index:
            css += " correct"
        elif option_idx == answer:
            css += " wrong"
        parts.append(f'<div class="{css}">{html.escape(option)}</div>')

    return ''.join(parts)


def render_quiz_result(
    quiz: Quiz,
    attempt: QuizAttempt,
    show_correct_answers: bool = True,
) -> str:
    """
    Render the result banner and, optionally, the answer review.

    Args:
        quiz: Quiz that was attempted
        attempt: Stored attempt (latest only)
        show_correct_answers: Whether to reveal correct options

    Returns:
        HTML string
    """
    total = len(quiz.questions)
    correct = sum(
        1 for idx, question in enumerate(quiz.questions)
        if idx < len(attempt.answers) and attempt.answers[idx] == question.correct_option_index
    )
    status = "passed" if attempt.passed else "failed"
    headline = "Passed!" if attempt.passed else "Not quite"

    parts = ['<div class="quiz-container">']
    parts.append(f'<div class="quiz-title">{html.escape(quiz.title or "Knowledge Check")}</div>')
    parts.append(f'<div class="quiz-result {status}">')
    parts.append(f'<strong>{headline} {attempt.score:g}%</strong>')
    parts.append(f'<div>{correct} of {total} correct</div>')
    parts.append('</div>')

    if show_correct_answers:
        for idx, question in enumerate(quiz.questions):
            answer = attempt.answers[idx] if idx < len(attempt.answers) else UNANSWERED
            parts.append(render_question_review(question, idx, answer))

    parts.append('</div>')
    return ''.join(parts)
