"""
Page schemas for lesson sessions.

A lesson is presented as an ordered list of pages. Each page is one variant
of a closed tagged union keyed on `type`:
- stream: legacy single-video reference
- block:  one content block
- quiz:   the lesson quiz
- nav:    terminal lesson-complete / next-lesson page
"""

from pydantic import BaseModel, Field, TypeAdapter
from typing import Annotated, Literal, Union

from .catalog import ContentBlock, Quiz


class PageBase(BaseModel):
    type: str


class StreamPage(PageBase):
    type: Literal["stream"] = "stream"
    video_ref: str


class BlockPage(PageBase):
    type: Literal["block"] = "block"
    block: ContentBlock


class QuizPage(PageBase):
    type: Literal["quiz"] = "quiz"
    quiz: Quiz


class NavPage(PageBase):
    type: Literal["nav"] = "nav"


Page = Annotated[
    Union[
        StreamPage,
        BlockPage,
        QuizPage,
        NavPage,
    ],
    Field(discriminator="type"),
]

PAGE_LIST_ADAPTER = TypeAdapter(list[Page])
