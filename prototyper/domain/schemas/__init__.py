from .form_definition import (
    FINISH_VALUE,
    AnswerType,
    BranchingChoiceQuestion,
    BranchingOption,
    FormDefinition,
    NonBranchingQuestion,
    Question,
    QuestionBase,
)

__all__ = [
    "FINISH_VALUE",
    "AnswerType",
    "BranchingChoiceQuestion",
    "BranchingOption",
    "FormDefinition",
    "NonBranchingQuestion",
    "Question",
    "QuestionBase",
]
