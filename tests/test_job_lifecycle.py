"""
Tests for the job state machine.

These tests verify that:
1. New jobs start in SEARCHING with a fixed price and a 4-digit OTP
2. Only the listed (status, event) pairs are accepted
3. Rejected events leave the job exactly as it was
4. Completion is gated by an exact OTP match
"""

from datetime import datetime, timedelta, timezone
from itertools import product

import pytest

from dispatch.core.errors import InvalidTransition, OtpMismatch
from dispatch.models.geo import GeoPoint
from dispatch.models.job import JobEvent, JobStatus, ServiceType, VehicleType
from dispatch.services.job_lifecycle import TRANSITIONS, apply_event, generate_otp, new_job

CREATED = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_job(status=JobStatus.SEARCHING, **overrides):
    job = new_job(
        job_id="JOB-000001",
        customer_id="cust_123",
        service=ServiceType.TUBE_PATCH,
        vehicle=VehicleType.CAR,
        location=GeoPoint(lat=31.51, lng=74.34),
        now=CREATED,
    )
    return job.model_copy(update={"status": status, **overrides})


class TestNewJob:

    def test_new_job_is_searching_with_price(self):
        job = make_job()
        assert job.status == JobStatus.SEARCHING
        assert job.price == 400
        assert job.technician_id is None
        assert job.created_at == job.updated_at == CREATED

    def test_otp_is_four_digits(self):
        for _ in range(200):
            otp = generate_otp()
            assert len(otp) == 4
            assert otp.isdigit()
            assert 1000 <= int(otp) <= 9999

    def test_location_is_snapshot(self):
        job = make_job()
        assert job.location == GeoPoint(lat=31.51, lng=74.34)


class TestTransitions:

    @pytest.mark.parametrize(
        "status,event,expected",
        [
            (JobStatus.SEARCHING, JobEvent.OFFER, JobStatus.OFFERED),
            (JobStatus.OFFERED, JobEvent.DECLINE, JobStatus.SEARCHING),
            (JobStatus.OFFERED, JobEvent.ACCEPT, JobStatus.ACCEPTED),
            (JobStatus.ACCEPTED, JobEvent.ARRIVE, JobStatus.ARRIVED),
            (JobStatus.ARRIVED, JobEvent.START, JobStatus.IN_PROGRESS),
        ],
    )
    def test_legal_transitions(self, status, event, expected):
        job = make_job(status)
        updated = apply_event(job, event, technician_id="tech_001")
        assert updated.status == expected
        assert updated.updated_at > CREATED

    def test_accept_sets_technician(self):
        updated = apply_event(make_job(JobStatus.OFFERED), JobEvent.ACCEPT, technician_id="tech_001")
        assert updated.technician_id == "tech_001"

    def test_other_events_keep_technician_unset(self):
        updated = apply_event(make_job(JobStatus.SEARCHING), JobEvent.OFFER)
        assert updated.technician_id is None

    def test_accept_without_technician_is_an_error(self):
        with pytest.raises(ValueError):
            apply_event(make_job(JobStatus.OFFERED), JobEvent.ACCEPT)

    def test_updated_at_is_refreshed(self):
        later = CREATED + timedelta(minutes=5)
        updated = apply_event(make_job(JobStatus.ACCEPTED), JobEvent.ARRIVE, now=later)
        assert updated.updated_at == later
        assert updated.created_at == CREATED

    def test_illegal_pairs_are_rejected_without_mutation(self):
        illegal = [
            (status, event)
            for status, event in product(JobStatus, JobEvent)
            if (status, event) not in TRANSITIONS
        ]
        assert illegal

        for status, event in illegal:
            job = make_job(status)
            before = job.model_dump()
            with pytest.raises(InvalidTransition):
                apply_event(job, event, otp=job.otp, technician_id="tech_001")
            assert job.model_dump() == before

    def test_duplicate_arrive_is_rejected(self):
        arrived = apply_event(make_job(JobStatus.ACCEPTED), JobEvent.ARRIVE)
        with pytest.raises(InvalidTransition):
            apply_event(arrived, JobEvent.ARRIVE)

    def test_input_job_is_not_modified(self):
        job = make_job(JobStatus.OFFERED)
        apply_event(job, JobEvent.ACCEPT, technician_id="tech_001")
        assert job.status == JobStatus.OFFERED
        assert job.technician_id is None


class TestOtpGate:

    def test_correct_otp_completes(self):
        job = make_job(JobStatus.IN_PROGRESS)
        updated = apply_event(job, JobEvent.COMPLETE, otp=job.otp)
        assert updated.status == JobStatus.COMPLETED
        assert updated.price == job.price
        assert updated.otp == job.otp

    @pytest.mark.parametrize("bad", [None, "", "0000", "12345", "abcd"])
    def test_wrong_otp_is_rejected(self, bad):
        job = make_job(JobStatus.IN_PROGRESS, otp="4321")
        before = job.model_dump()
        with pytest.raises(OtpMismatch):
            apply_event(job, JobEvent.COMPLETE, otp=bad)
        assert job.model_dump() == before

    def test_numeric_otp_compares_equal(self):
        job = make_job(JobStatus.IN_PROGRESS, otp="4321")
        assert apply_event(job, JobEvent.COMPLETE, otp=4321).status == JobStatus.COMPLETED

    def test_complete_outside_in_progress_is_invalid_even_with_otp(self):
        job = make_job(JobStatus.ARRIVED)
        with pytest.raises(InvalidTransition):
            apply_event(job, JobEvent.COMPLETE, otp=job.otp)
