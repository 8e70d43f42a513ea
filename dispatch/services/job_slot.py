# services/job_slot.py

"""
Job slot - the single active job plus the completed-job history
"""

from typing import List, Optional, Tuple

from dispatch.models.job import Job


class JobSlot:
    def __init__(self):
        self._active: Optional[Job] = None
        self._history: List[Job] = []

    @property
    def active(self) -> Optional[Job]:
        return self._active

    @property
    def history(self) -> Tuple[Job, ...]:
        """Completed jobs, most recent first"""
        return tuple(self._history)

    def is_occupied(self) -> bool:
        return self._active is not None

    def put(self, job: Job):
        """Replace the active job with a newer value"""
        self._active = job

    def clear(self) -> Optional[Job]:
        """Empty the slot and return what was in it"""
        job, self._active = self._active, None
        return job

    def archive(self, job: Job):
        """Record a completed job and empty the slot"""
        self._history.insert(0, job)
        self._active = None
