"""File-backed baseline storage with an exclusive lock.

The baseline file is the only state shared between runs, and concurrent
ratchet operations against it race. ``BaselineStore.lock()`` makes each
operation its sole owner:

- a ``<baseline>.lock`` file is created with O_CREAT|O_EXCL and holds the
  owner's pid and start time;
- a lock left behind by a dead process is reclaimed under a
  ``<baseline>.lock.reclaim`` marker, and only if it still names that
  process;
- the lock is removed on every exit path, failures included.
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from ..exceptions import BaselineLockedError, BaselineWriteError, InvalidBaselineError
from ..logging_config import get_logger
from .engine import utc_timestamp
from .models import Baseline

logger = get_logger(__name__)

MAX_LOCK_ATTEMPTS = 5


@dataclass
class LockInfo:
    pid: int
    acquired_at: str

    def to_dict(self) -> dict:
        return {"pid": self.pid, "acquired_at": self.acquired_at}

    @classmethod
    def from_dict(cls, data: dict) -> LockInfo:
        return cls(pid=int(data["pid"]), acquired_at=str(data["acquired_at"]))


def _is_process_alive(pid: int) -> bool:
    """Check if a process with the given PID is still running."""
    try:
        os.kill(pid, 0)  # Signal 0 = check existence, don't actually kill
        return True
    except ProcessLookupError:
        return False
    except PermissionError:
        # Process exists but we can't signal it (different user)
        return True
    except OSError:
        return False


class BaselineStore:
    """Reads, writes and locks one baseline document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self.reclaim_path = self.path.with_name(self.path.name + ".lock.reclaim")

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[Baseline]:
        """Return the stored baseline, or None when nothing was captured."""
        if not self.path.exists():
            logger.info(f"No baseline file at {self.path}")
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidBaselineError(self.path, f"not valid JSON: {e}")
        except (OSError, UnicodeDecodeError) as e:
            raise InvalidBaselineError(self.path, f"cannot read file: {e}")
        if not isinstance(data, dict):
            raise InvalidBaselineError(self.path, "document must be a JSON object")
        try:
            baseline = Baseline.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidBaselineError(self.path, str(e))
        logger.debug(f"Loaded baseline from {self.path} ({baseline.commit_ref})")
        return baseline

    def save(self, baseline: Baseline) -> None:
        """Write the baseline as sorted, indented JSON, replacing the file atomically."""
        text = json.dumps(baseline.to_dict(), indent=2, sort_keys=True) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=self.path.name + ".", suffix=".tmp", dir=self.path.parent)
        except OSError as e:
            raise BaselineWriteError(self.path, str(e))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise BaselineWriteError(self.path, str(e))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info(f"Saved baseline to {self.path}")

    @contextmanager
    def lock(self) -> Iterator[BaselineStore]:
        """Hold the baseline exclusively for the duration of the block.

        Raises:
            BaselineLockedError: another live process holds the lock
            BaselineWriteError: the lock file cannot be created
        """
        self._acquire()
        try:
            yield self
        finally:
            self._release()

    def _acquire(self) -> None:
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BaselineWriteError(self.lock_path, str(e))

        holder: Optional[LockInfo] = None
        for _attempt in range(MAX_LOCK_ATTEMPTS):
            try:
                fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
            except FileExistsError:
                holder = self._read_lock()
                if holder is None:
                    if self.lock_path.exists():
                        break
                    continue  # released between open and read
                if _is_process_alive(holder.pid) or not self._reclaim(holder):
                    break
                continue
            except OSError as e:
                raise BaselineWriteError(self.lock_path, str(e))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(LockInfo(pid=os.getpid(), acquired_at=utc_timestamp()).to_dict(), f)
            logger.debug(f"Acquired baseline lock {self.lock_path}")
            return

        raise BaselineLockedError(
            self.lock_path,
            holder=f"pid {holder.pid} since {holder.acquired_at}" if holder else None,
        )

    def _reclaim(self, stale: LockInfo) -> bool:
        """Remove a lock left by a dead process.

        Reclaimers serialize on an O_EXCL marker file, and the lock is only
        removed if it still holds exactly ``stale``; a lock another process
        re-created in the meantime is left alone. Returns False when another
        reclaim is in progress.
        """
        try:
            fd = os.open(self.reclaim_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            logger.warning(f"Baseline lock reclaim already in progress ({self.reclaim_path})")
            return False
        except OSError as e:
            raise BaselineWriteError(self.reclaim_path, str(e))
        os.close(fd)
        try:
            if self._read_lock() == stale:
                logger.info(f"Stale baseline lock (process {stale.pid} is dead), cleaning up")
                self.lock_path.unlink(missing_ok=True)
        finally:
            self.reclaim_path.unlink(missing_ok=True)
        return True

    def _release(self) -> None:
        try:
            self.lock_path.unlink()
            logger.debug(f"Released baseline lock {self.lock_path}")
        except FileNotFoundError:
            logger.warning(f"Baseline lock {self.lock_path} vanished before release")

    def _read_lock(self) -> Optional[LockInfo]:
        try:
            return LockInfo.from_dict(json.loads(self.lock_path.read_text(encoding="utf-8")))
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Unreadable baseline lock at {self.lock_path}: {exc}")
            return None
