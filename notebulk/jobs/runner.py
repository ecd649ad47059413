"""Sequential batch processing of user records."""

from collections.abc import Awaitable, Callable
from datetime import datetime
from enum import Enum
from typing import Any

from notebulk.mutation.models import ModificationOptions, UserProcessLog
from notebulk.mutation.mutator import NoteMutator
from notebulk.notes.models import UserRecord
from notebulk.search.note_selector import NoteSelector
from notebulk.search.search_models import SearchCriteria
from notebulk.utils.error_handler import ErrorHandler
from notebulk.utils.mixins import LoggerMixin

PersistFn = Callable[[str, UserRecord], Awaitable[Any]]
ProgressFn = Callable[[int, int], None]


class RunState(str, Enum):
    """Lifecycle of a batch run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class RunInProgressError(RuntimeError):
    """A run was started while another one is still going."""


class BatchRunner(LoggerMixin):
    """Drives selection, mutation and persistence across a batch of users.

    Users are processed strictly one at a time, including the persistence
    call, so there is never more than one write in flight against the
    upstream store.
    """

    def __init__(
        self,
        selector: NoteSelector | None = None,
        mutator: NoteMutator | None = None,
        on_progress: ProgressFn | None = None,
    ):
        self.selector = selector or NoteSelector()
        self.mutator = mutator or NoteMutator()
        self.on_progress = on_progress

        self.state = RunState.IDLE
        self.logs: list[UserProcessLog] = []
        self.processed = 0
        self.total = 0
        self.modified_users: set[str] = set()
        self.started_at: datetime | None = None
        self.finished_at: datetime | None = None
        self._cancel_requested = False

    @property
    def percent_complete(self) -> int:
        if not self.total:
            return 0
        return round(self.processed / self.total * 100)

    @property
    def successful_updates(self) -> int:
        return sum(1 for log in self.logs if log.update_successful)

    @property
    def failed_updates(self) -> int:
        return sum(1 for log in self.logs if log.update_error)

    def cancel(self) -> None:
        """Stop before the next user. Users already persisted stay persisted."""
        if self.state == RunState.RUNNING:
            self._cancel_requested = True

    async def run(
        self,
        users: list[UserRecord],
        criteria: SearchCriteria,
        options: ModificationOptions,
        persist: PersistFn,
    ) -> list[UserProcessLog]:
        """Process every user and return one log per successfully loaded user."""
        if self.state == RunState.RUNNING:
            raise RunInProgressError("A batch run is already in progress")

        self._reset(len(users))
        self.logger.info(
            "Batch run started",
            total_users=self.total,
            action=options.action.value,
        )

        try:
            for user in users:
                if self._cancel_requested:
                    self.state = RunState.CANCELLED
                    self.logger.warning(
                        "Batch run cancelled",
                        processed=self.processed,
                        total_users=self.total,
                    )
                    break
                await self._process_user(user, criteria, options, persist)
            else:
                self.state = RunState.COMPLETED
        except Exception as e:
            self.state = RunState.FAILED
            self.logger.error(
                "Batch run failed",
                error=ErrorHandler.describe(e),
                processed=self.processed,
                total_users=self.total,
            )
            raise
        finally:
            self.finished_at = datetime.now()

        self.logger.info(
            "Batch run finished",
            state=self.state.value,
            processed=self.processed,
            modified_users=len(self.modified_users),
            successful_updates=self.successful_updates,
            failed_updates=self.failed_updates,
        )
        return list(self.logs)

    async def _process_user(
        self,
        user: UserRecord,
        criteria: SearchCriteria,
        options: ModificationOptions,
        persist: PersistFn,
    ) -> None:
        try:
            if user.has_load_error:
                self.logger.debug(
                    "Skipping user that failed to load", user_id=user.primary_id
                )
                return

            matching = self.selector.select(user, criteria)
            log = self.mutator.apply(user, matching, options)
            self.logs.append(log)

            if not log.modified:
                return

            self.modified_users.add(user.primary_id)
            try:
                await persist(user.primary_id, user)
            except Exception as e:
                log.update_successful = False
                log.update_error = ErrorHandler.describe(e)
                self.logger.error(
                    "Failed to update user",
                    user_id=user.primary_id,
                    error=log.update_error,
                )
            else:
                log.update_successful = True
        finally:
            self.processed += 1
            if self.on_progress is not None:
                self.on_progress(self.processed, self.total)

    def _reset(self, total: int) -> None:
        self.state = RunState.RUNNING
        self.logs = []
        self.processed = 0
        self.total = total
        self.modified_users = set()
        self.started_at = datetime.now()
        self.finished_at = None
        self._cancel_requested = False
