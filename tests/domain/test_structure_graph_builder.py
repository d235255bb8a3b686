"""Tests for the Structure Graph Builder."""

from prototyper.domain.services.structure_graph_builder import (
    FINISH_NODE,
    build_mermaid,
    build_structure_vm,
    escape_for_mermaid,
)


class TestSequentialStructure:

    def test_three_sequential_questions(self, linear_form):
        vm = build_structure_vm(linear_form.questions)

        assert vm.count == 3
        assert [item.show_next_jump for item in vm.list] == [False, False, True]
        assert vm.list[2].next_jump_target == "finish"
        assert vm.mermaid.splitlines() == [
            "flowchart TD",
            'Q1["What is your name?"]',
            "Q1 --> Q2",
            'Q2["What is your email address?"]',
            "Q2 --> Q3",
            'Q3["Why do you want a licence?"]',
            "Q3 --> Finish",
            FINISH_NODE,
        ]

    def test_empty_list_is_minimal_diagram(self):
        vm = build_structure_vm([])

        assert vm.list == []
        assert vm.mermaid == f"flowchart TD\n{FINISH_NODE}"


class TestBranchingStructure:

    def test_branch_edges_are_labelled(self, branching_form):
        mermaid = build_mermaid(branching_form.questions)

        assert "Q2 -->|Yes| Finish" in mermaid
        assert "Q2 -->|No| Q3" in mermaid
        assert "Q1 --> Q2" in mermaid

    def test_branching_options_in_list(self, branching_form):
        item = build_structure_vm(branching_form.questions).list[1]

        assert [(o.label, o.next) for o in item.branching_options] == [("Yes", "finish"), ("No", 3)]
        assert item.show_next_jump is False

    def test_non_positive_option_target_finishes(self, form_factory):
        form = form_factory([{
            "answer_type": "branching_choice",
            "question_text": "Go on?",
            "options_branching": [{"text_value": "Stop", "next_question_value": 0}],
        }])

        assert "Q1 -->|Stop| Finish" in build_mermaid(form.questions)

    def test_branching_without_options_logs_warning(self, form_factory, caplog):
        form = form_factory([{"answer_type": "branching_choice", "question_text": "Empty?"}])

        mermaid = build_mermaid(form.questions)

        assert 'Q1["Empty?"]' in mermaid
        assert "no options" in caplog.text


class TestJumps:

    def test_explicit_jump_is_shown(self, form_factory):
        form = form_factory([
            {"answer_type": "text", "question_text": "One", "next_question_value": 3},
            {"answer_type": "text", "question_text": "Two"},
            {"answer_type": "text", "question_text": "Three"},
        ])
        vm = build_structure_vm(form.questions)

        assert vm.list[0].show_next_jump is True
        assert vm.list[0].next_jump_target == 3
        assert "Q1 --> Q3" in vm.mermaid

    def test_date_of_birth_ages_listed(self, form_factory):
        form = form_factory([{
            "answer_type": "date_of_birth",
            "question_text": "Born?",
            "date_of_birth_minimum_age": 16,
        }])
        item = build_structure_vm(form.questions).list[0]

        assert item.min_age == 16
        assert item.max_age is None

    def test_camel_case_dump(self, linear_form):
        dumped = build_structure_vm(linear_form.questions).model_dump(by_alias=True)

        assert dumped["list"][2]["showNextJump"] is True
        assert dumped["list"][0]["questionText"] == "What is your name?"

    def test_quotes_escaped_for_mermaid(self):
        assert escape_for_mermaid('Say "hi"') == 'Say \\"hi\\"'
