"""User records stored as one JSON document per user."""

import asyncio
import json
import os
import re
import tempfile
from pathlib import Path

import aiofiles
import structlog

from notebulk.config import get_settings
from notebulk.notes.models import UserRecord
from notebulk.utils.error_handler import ErrorHandler, critical_operation

logger = structlog.get_logger(__name__)

_SAFE_ID = re.compile(r"^[\w.@-]+$")


class JsonUserStore:
    """Record source and persistence target backed by a directory.

    ``<directory>/<primary_id>.json`` holds the user payload exactly as the
    upstream API returns it.
    """

    def __init__(self, directory: Path | str | None = None):
        self.directory = Path(directory or get_settings().users_dir)

    def path_for(self, user_id: str) -> Path:
        if not _SAFE_ID.match(user_id) or user_id.startswith("."):
            raise ValueError(f"Invalid user id: {user_id!r}")
        return self.directory / f"{user_id}.json"

    def list_user_ids(self) -> list[str]:
        """Ids of every record in the directory, sorted."""
        if not self.directory.exists():
            return []
        return sorted(
            path.stem
            for path in self.directory.glob("*.json")
            if not path.name.startswith(".")
        )

    async def load_user(self, user_id: str) -> UserRecord:
        """Load one record; failures yield a placeholder carrying the error."""
        try:
            async with aiofiles.open(self.path_for(user_id), encoding="utf-8") as f:
                content = await f.read()
            data = json.loads(content)
            if not isinstance(data, dict):
                raise ValueError("Record is not a JSON object")
            data.setdefault("primary_id", user_id)
            user = UserRecord.model_validate(data)
            # Records are written back under their primary id
            if user.primary_id != user_id:
                raise ValueError(
                    f"Record id {user.primary_id!r} does not match file name"
                )
            return user
        except (OSError, ValueError) as e:
            error = f"Failed to load user details: {ErrorHandler.describe(e)}"
            logger.warning("Failed to load user", user_id=user_id, error=error)
            return UserRecord(primary_id=user_id, notes=[], load_error=error)

    async def load_users(self, user_ids: list[str] | None = None) -> list[UserRecord]:
        """Load the given ids, or every record in the directory."""
        ids = user_ids if user_ids is not None else self.list_user_ids()
        users = await asyncio.gather(*(self.load_user(user_id) for user_id in ids))
        logger.info(
            "Users loaded",
            total_users=len(users),
            load_errors=sum(1 for user in users if user.has_load_error),
        )
        return list(users)

    @critical_operation("persist user record")
    async def persist(self, user_id: str, user: UserRecord) -> None:
        """Write the record back using an atomic file replace."""
        target = self.path_for(user_id)
        serialized = json.dumps(
            user.to_payload(), indent=2, ensure_ascii=False, default=str
        )

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=target.parent, prefix=f".{user_id}_", suffix=".json"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                    tmp_file.write(serialized)
                    tmp_file.flush()
                    os.fsync(tmp_file.fileno())
                os.replace(temp_path, target)
            finally:
                if os.path.exists(temp_path):
                    try:
                        os.remove(temp_path)
                    except FileNotFoundError:
                        pass

        await asyncio.to_thread(_write)
        logger.info("User record written", user_id=user_id, path=str(target))
