import json
from datetime import datetime

import pytest

from planner_engine.adapters.csv_adapter import parse as parse_csv
from planner_engine.adapters.json_adapter import parse as parse_json


def test_csv_parse_success(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text(
        "id,title,category,date,priority,is_completed,reminder_time,duration_minutes,is_external,source\n"
        "a,Gym,Sport,2025-01-01T18:00:00,high,true,2025-01-01T17:30:00,60,,\n"
        ",Standup,Work,2025-01-02T09:00:00,,,,,yes,work-ical\n",
        encoding="utf-8",
    )
    tasks = parse_csv(str(path), id_factory=lambda: "generated")
    assert len(tasks) == 2
    assert tasks[0].id == "a"
    assert tasks[0].priority == "high"
    assert tasks[0].is_completed is True
    assert tasks[0].reminder_time == datetime(2025, 1, 1, 17, 30)
    assert tasks[0].duration_minutes == 60
    assert tasks[1].id == "generated"
    assert tasks[1].priority == "medium"
    assert tasks[1].is_external is True
    assert tasks[1].source == "work-ical"


@pytest.mark.parametrize(
    "row",
    [
        "Gym,Sport,bad",
        "Gym,,2025-01-01T18:00:00",
        "Gym,Sport,2025-01-01T18:00:00,urgent",
        "Gym,Sport,2025-01-01T18:00:00,low,-5",
    ],
)
def test_csv_parse_invalid_row(tmp_path, row):
    path = tmp_path / "tasks.csv"
    path.write_text(f"title,category,date,priority,duration_minutes\n{row}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 2"):
        parse_csv(str(path))


def test_json_parse_success(tmp_path):
    path = tmp_path / "tasks.json"
    payload = [
        {"id": "a", "title": "Gym", "category": "Sport", "date": "2025-01-01T18:00:00Z"},
        {
            "title": "Move flat",
            "category": "Home",
            "date": "2025-01-03T10:00:00",
            "priority": "high",
            "duration_minutes": 240,
            "routine_id": "r1",
            "subtasks": [{"id": "s1", "title": "Boxes", "is_completed": True}, {"title": "Van"}],
        },
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    tasks = parse_json(str(path))
    assert len(tasks) == 2
    assert tasks[0].date.utcoffset().total_seconds() == 0
    assert tasks[1].routine_id == "r1"
    assert [s.title for s in tasks[1].subtasks] == ["Boxes", "Van"]
    assert tasks[1].subtasks[0].is_completed is True
    assert tasks[1].subtasks[1].id


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"title": "Gym", "category": "Sport", "date": "bad"}]), encoding="utf-8")
    with pytest.raises(ValueError, match="Item 1"):
        parse_json(str(path))


def test_json_payload_must_be_list(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"title": "Gym"}), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))
