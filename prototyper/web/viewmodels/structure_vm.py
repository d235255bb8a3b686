"""
ViewModels for the form structure page.

Fields are snake_case in Python and camelCase when dumped with
``by_alias=True`` for the visualisation page script.
"""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

JumpTarget = Union[Literal["finish"], int]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BranchingOptionVM(_CamelModel):
    """ViewModel for one branching option and where it leads."""
    label: str = ""
    next: JumpTarget = "finish"


class StructureListItemVM(_CamelModel):
    """ViewModel for one question in the structure list."""
    index: int
    answer_type: str
    question_text: str
    branching_options: Optional[List[BranchingOptionVM]] = None
    options: Optional[List[str]] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None

    # Only set for transitions a reader would not assume
    show_next_jump: bool = False
    next_jump_target: Optional[JumpTarget] = None


class StructureVM(_CamelModel):
    """ViewModel for the whole structure page."""
    list: List[StructureListItemVM] = Field(default_factory=list)
    mermaid: str = ""

    @property
    def count(self) -> int:
        return len(self.list)
