"""Tests for prompts and pickers."""

from __future__ import annotations

from typing import Any

from branch_workflow.common.ui import (
    always_yes,
    click_confirm,
    fuzzy_select,
    get_confirm,
    select_from_menu,
)


class TestGetConfirm:
    """Tests for get_confirm."""

    def test_assume_yes(self) -> None:
        assert get_confirm(assume_yes=True) is always_yes
        assert always_yes("Delete everything?") is True

    def test_interactive(self) -> None:
        assert get_confirm(assume_yes=False) is click_confirm


class TestFuzzySelect:
    """Tests for fuzzy_select with the prompt mocked out."""

    def test_returns_position(self, mocker: Any) -> None:
        fuzzy = mocker.patch("branch_workflow.common.ui.inquirer.fuzzy")
        fuzzy.return_value.execute.return_value = 1

        assert fuzzy_select(["wip", "wip"], "Pick") == 1

        choices = fuzzy.call_args.kwargs["choices"]
        assert [(c.value, c.name) for c in choices] == [(0, "wip"), (1, "wip")]

    def test_cancel(self, mocker: Any) -> None:
        fuzzy = mocker.patch("branch_workflow.common.ui.inquirer.fuzzy")
        fuzzy.return_value.execute.side_effect = KeyboardInterrupt

        assert fuzzy_select(["main"], "Pick") is None


class TestSelectFromMenu:
    """Tests for select_from_menu."""

    def test_empty(self) -> None:
        assert select_from_menu("Pick", []) is None

    def test_returns_label(self, mocker: Any) -> None:
        mocker.patch("branch_workflow.common.ui.fuzzy_select", return_value=1)
        assert select_from_menu("Pick", ["feature-a", "feature-b"]) == "feature-b"
