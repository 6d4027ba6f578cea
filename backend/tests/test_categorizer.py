"""Tests for item categorization."""

import pytest

from app.errors import UpstreamServiceError
from app.services.categorizer import (
    categorize,
    categorize_locally,
    categorize_with_fallback,
    normalize_shopping_category,
)
from app.services.list_types import LIST_TEMPLATES, SHOPPING_CATEGORIES


@pytest.mark.parametrize(
    ("item", "expected"),
    [
        ("Fix the kitchen faucet", "Plumbing"),
        ("replace light switch in hallway", "Electrical"),
        ("Prime the garage wall", "Painting"),
        ("install new door", "General"),
        ("haul away debris", "General"),
    ],
)
async def test_punch_list_keywords(mock_llm, item, expected):
    assert await categorize(item, "punch_list") == expected
    mock_llm.assert_not_called()


async def test_first_matching_category_wins():
    # "pipe" (Plumbing) and "light" (Electrical): Plumbing is checked first
    assert categorize_locally("pipe light fixture", "punch_list") == "Plumbing"


async def test_todo_and_waiting_lists_are_local(mock_llm):
    assert await categorize("email the client report", "todo") == "Work"
    assert await categorize("water the plants", "todo") == "Personal"
    assert await categorize("dinner table for four", "waiting_list") == "Restaurant"
    assert await categorize("oil change", "waiting_list") == "Service"
    mock_llm.assert_not_called()


def test_professional_lists_use_taxonomy_names():
    assert categorize_locally("Grading midterms", "lesson_list") == "Grading"
    assert categorize_locally("order chalk", "lesson_list") == "Lesson Plans"
    assert categorize_locally("final walkthrough with buyer", "closing_list") == "Final Walkthrough"


def test_unknown_list_type_is_other():
    assert categorize_locally("anything", "garden_list") == "Other"


@pytest.mark.parametrize(
    ("answer", "expected"),
    [
        ("Dairy", "Dairy"),
        ("  beverages.\n", "Beverages"),
        ('"Frozen"', "Frozen"),
        ("Nuts & Snacks", "Other"),
        ("Deli", "Other"),
        ("", "Other"),
    ],
)
def test_normalize_shopping_category(answer, expected):
    assert normalize_shopping_category(answer) == expected


async def test_shopping_uses_remote_model(mock_llm):
    mock_llm.return_value = "Meat"
    assert await categorize("pastrami", "shopping") == "Meat"
    mock_llm.assert_awaited_once()
    assert "pastrami" in mock_llm.await_args.args[1][0]["content"]


async def test_shopping_label_outside_taxonomy_becomes_other(mock_llm):
    mock_llm.return_value = "Gourmet Cheeses"
    assert await categorize("brie", "shopping") == "Other"


async def test_remote_failure_raises_without_fallback(mock_llm):
    mock_llm.side_effect = UpstreamServiceError("boom", provider="anthropic")
    with pytest.raises(UpstreamServiceError):
        await categorize("milk", "shopping")


async def test_remote_failure_falls_back_to_keywords(mock_llm):
    mock_llm.side_effect = UpstreamServiceError("boom", provider="anthropic")
    assert await categorize_with_fallback("whole milk", "shopping") == "Dairy"
    assert await categorize_with_fallback("mystery item", "shopping") == "Other"


def test_local_results_stay_in_template_taxonomy():
    samples = ["milk", "paint the wall", "brunch reservation", "urgent call", "anything at all"]
    for list_type, template in LIST_TEMPLATES.items():
        for sample in samples:
            assert categorize_locally(sample, list_type) in template.categories


def test_shopping_template_holds_every_shopping_category():
    assert set(LIST_TEMPLATES["shopping"].categories) == set(SHOPPING_CATEGORIES)
