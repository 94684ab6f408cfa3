from __future__ import annotations

from wonderland.core.extraction.schemas import backfill_task


def test_title_only_task_takes_defaults() -> None:
    task = backfill_task({"title": "Buy milk"})

    assert task.model_dump() == {
        "title": "Buy milk",
        "type": "task",
        "description": "Buy milk",
        "date": "today",
        "time": None,
        "priority": "medium",
        "category": "other",
    }


def test_empty_record_gets_placeholder_title_and_description() -> None:
    task = backfill_task({})

    assert task.title == "Untitled task"
    assert task.description == "No description"


def test_out_of_enum_values_take_defaults() -> None:
    task = backfill_task(
        {
            "title": "Plan trip",
            "type": "meeting",
            "priority": "urgent",
            "category": "leisure",
        }
    )

    assert task.type == "task"
    assert task.priority == "medium"
    assert task.category == "other"


def test_enum_values_are_matched_case_insensitively() -> None:
    task = backfill_task({"title": "Flight", "type": "Event", "priority": "HIGH", "category": "Travel"})

    assert task.type == "event"
    assert task.priority == "high"
    assert task.category == "travel"


def test_blank_and_null_values_take_defaults() -> None:
    task = backfill_task({"title": "  ", "description": "", "date": None, "time": ""})

    assert task.title == "Untitled task"
    assert task.description == "No description"
    assert task.date == "today"
    assert task.time is None


def test_non_string_date_takes_default_and_string_date_is_kept() -> None:
    assert backfill_task({"title": "x", "date": 20250310}).date == "today"
    assert backfill_task({"title": "x", "date": "not-a-date"}).date == "not-a-date"
