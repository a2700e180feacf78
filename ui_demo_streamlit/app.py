"""Streamlit demo UI for planner-engine."""

from __future__ import annotations

import tempfile
from datetime import datetime, time
from pathlib import Path
from typing import Any

from planner_engine.adapters import csv_adapter, json_adapter
from planner_engine.metrics import compute_task_metrics
from planner_engine.recurrence import InvalidRule, expand_routine
from planner_engine.schema import RecurrenceRule, Task
from planner_engine.suggestions import generate_suggestions

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def _parse_tasks_from_path(file_path: str) -> list[Task]:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(file_path)
    if suffix == ".json":
        return json_adapter.parse(file_path)
    raise ValueError("Unsupported file type. Please use .csv or .json")


def _parse_uploaded(uploaded_file) -> list[Task]:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return _parse_tasks_from_path(temp_path)


def run_engine(tasks: list[Task], now: datetime, base: Task, rule: RecurrenceRule) -> dict[str, Any]:
    """Run statistics, suggestions and a routine preview for the UI."""

    clock = lambda: now  # noqa: E731
    return {
        "metrics": compute_task_metrics(tasks, now),
        "suggestions": generate_suggestions(tasks, clock=clock),
        "routine": expand_routine(base, rule, horizon_months=1, clock=clock),
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Planner Engine Demo", layout="wide")
    st.title("Planner Engine: Streamlit Demo")

    with st.sidebar:
        st.header("History")
        uploaded = st.file_uploader("Upload task history", type=["csv", "json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        now_day = st.date_input("Today", value=datetime(2024, 1, 20).date())
        now_time = st.time_input("Now", value=time(9, 0))

        st.header("Routine preview")
        title = st.text_input("Title", value="Stretching")
        category = st.text_input("Category", value="Health")
        rule_type = st.selectbox("Repeat", options=["daily", "weekly", "interval"], index=1)
        week_days = st.multiselect("Week days", options=list(range(7)), default=[1, 3, 5], format_func=lambda d: WEEKDAY_LABELS[d])
        interval_days = st.number_input("Every N days", min_value=2, max_value=60, value=3, step=1)
        run = st.button("Run engine", type="primary")

    if not run:
        st.info("Configure inputs in the sidebar and click **Run engine**.")
        return

    try:
        if use_demo:
            tasks = csv_adapter.parse("examples/sample_tasks.csv")
            data_source = "demo dataset (examples/sample_tasks.csv)"
        elif uploaded is not None:
            tasks = _parse_uploaded(uploaded)
            data_source = f"uploaded file ({uploaded.name})"
        else:
            st.error("Please upload a CSV/JSON file or enable 'Load demo dataset'.")
            return

        now = datetime.combine(now_day, now_time)
        base = Task(id="preview", title=title, category=category, date=now)
        rule = RecurrenceRule(type=rule_type, interval_days=int(interval_days), week_days=frozenset(week_days))

        result = run_engine(tasks, now, base, rule)
        st.success(f"Loaded {len(tasks)} tasks from {data_source}.")

        st.subheader("A) Statistics")
        metrics = result["metrics"]
        c1, c2, c3 = st.columns(3)
        c1.metric("Total tasks", metrics["total_tasks"])
        c2.metric("Completed", metrics["completed_tasks"])
        c3.metric("Completion rate", f"{metrics['completion_rate_pct']}%")
        st.table([metrics["tasks_by_category"]])
        st.table(metrics["weekly_activity"])

        st.subheader("B) Suggestions")
        if result["suggestions"]:
            st.table(
                [
                    {
                        "title": s.title,
                        "category": s.category,
                        "date": s.suggested_date.strftime("%a %Y-%m-%d %H:%M"),
                        "minutes": s.duration_minutes,
                        "reason": s.reason,
                    }
                    for s in result["suggestions"]
                ]
            )
        else:
            st.write("No suggestions for the coming week.")

        st.subheader("C) Routine preview")
        st.write(", ".join(t.date.strftime("%a %d %b") for t in result["routine"]) or "No dates generated.")

    except InvalidRule as exc:
        st.error(f"Routine error: {exc}")
    except ValueError as exc:
        st.error(f"Input error: {exc}")


if __name__ == "__main__":
    main()
