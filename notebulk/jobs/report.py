"""Run reports and summaries consumed by log exporters."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from notebulk.jobs.runner import BatchRunner
from notebulk.mutation.models import UserProcessLog


class UpdateError(BaseModel):
    user_id: str
    error: str


class JobSummary(BaseModel):
    """Aggregate outcome of a run."""

    total_users_processed: int = Field(default=0)
    users_with_changes: int = Field(default=0)
    successful_updates: int = Field(default=0)
    total_errors: int = Field(default=0)
    error_details: list[UpdateError] = Field(default_factory=list)


class UserChangeSummary(BaseModel):
    """What happened to one user's notes."""

    user_id: str
    action: Literal["deleted", "modified"]
    note_count: int
    modifications: list[str] = Field(default_factory=list)


class RunReport(BaseModel):
    """Everything an exporter needs, exposed verbatim."""

    logs: list[UserProcessLog] = Field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    state: str = "idle"
    configuration: dict[str, Any] = Field(default_factory=dict)
    set_id: str | None = None
    summary: JobSummary = Field(default_factory=JobSummary)


def summarize_job(logs: list[UserProcessLog]) -> JobSummary:
    """Count updates and collect per-user errors."""
    error_details = [
        UpdateError(user_id=log.user_id, error=log.update_error)
        for log in logs
        if log.update_error
    ]
    return JobSummary(
        total_users_processed=len(logs),
        users_with_changes=sum(
            1 for log in logs if not log.no_matching_notes and log.notes
        ),
        successful_updates=sum(1 for log in logs if log.update_successful),
        total_errors=len(error_details),
        error_details=error_details,
    )


def summarize_user(log: UserProcessLog) -> UserChangeSummary:
    """Describe the action taken and which note fields changed."""
    action: Literal["deleted", "modified"] = "modified"
    if log.notes and all(entry.deleted for entry in log.notes):
        action = "deleted"

    changed: list[str] = []
    for entry in log.notes:
        if entry.after is None:
            continue
        before, after = entry.before, entry.after
        if before.note_text != after.note_text:
            changed.append("Text")
        if before.popup_note != after.popup_note:
            changed.append("Popup")
        if before.user_viewable != after.user_viewable:
            changed.append("User Viewable")
        before_type = before.note_type.value if before.note_type else None
        after_type = after.note_type.value if after.note_type else None
        if before_type != after_type:
            changed.append("Type")

    return UserChangeSummary(
        user_id=log.user_id,
        action=action,
        note_count=len(log.notes),
        modifications=list(dict.fromkeys(changed)),
    )


def build_report(
    runner: BatchRunner,
    configuration: dict[str, Any] | None = None,
    set_id: str | None = None,
) -> RunReport:
    """Snapshot a finished run for export."""
    logs = [log.model_copy(deep=True) for log in runner.logs]
    return RunReport(
        logs=logs,
        start_time=runner.started_at,
        end_time=runner.finished_at,
        state=runner.state.value,
        configuration=configuration or {},
        set_id=set_id,
        summary=summarize_job(logs),
    )
