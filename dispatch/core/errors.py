# core/errors.py

"""
Dispatch errors - every rejection the engine can raise
"""

from typing import Optional


class DispatchError(Exception):
    """Base class for recoverable dispatch errors."""


class InvalidTransition(DispatchError):
    """Raised when an event is not legal from the job's current status."""

    def __init__(self, job_id: Optional[str], status, event) -> None:
        self.job_id = job_id
        self.status = status
        self.event = event
        status_name = getattr(status, "value", status)
        event_name = getattr(event, "value", event)
        super().__init__(
            f"Cannot apply '{event_name}' to job '{job_id}' in status '{status_name}'"
        )


class OtpMismatch(DispatchError):
    """Raised when the submitted OTP does not match the job's code."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Incorrect OTP for job '{job_id}'")


class JobNotFound(DispatchError):
    """Raised when a request targets a job that is not the active one."""

    def __init__(self, job_id: Optional[str] = None) -> None:
        self.job_id = job_id
        if job_id is None:
            super().__init__("No active job")
        else:
            super().__init__(f"Job not found: {job_id}")


class JobAlreadyActive(DispatchError):
    """Raised when a job is requested while another one occupies the slot."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job '{job_id}' is still active")
