"""Job configuration, batch execution and reporting."""

from notebulk.jobs.config_state import JobConfigState, JobConfigurationError, JobPlan
from notebulk.jobs.models import (
    BlockingReason,
    JobParameter,
    MenuOption,
    ParameterCategory,
    ParameterId,
)
from notebulk.jobs.report import (
    JobSummary,
    RunReport,
    UserChangeSummary,
    build_report,
    summarize_job,
    summarize_user,
)
from notebulk.jobs.runner import BatchRunner, RunInProgressError, RunState

__all__ = [
    "BatchRunner",
    "BlockingReason",
    "JobConfigState",
    "JobConfigurationError",
    "JobParameter",
    "JobPlan",
    "JobSummary",
    "MenuOption",
    "ParameterCategory",
    "ParameterId",
    "RunInProgressError",
    "RunReport",
    "RunState",
    "UserChangeSummary",
    "build_report",
    "summarize_job",
    "summarize_user",
]
