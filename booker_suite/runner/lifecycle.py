"""
Booking lifecycle runner

Runs the ordered create/read/update/delete/list sequence against a live
Restful Booker service and records a result for every step.

Steps share two pieces of state: the session token (acquired once, before
the first step) and the identifier of the booking created by the first step.
A step that fails does not stop the run. Steps that need a token skip when
none could be obtained.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from booker_suite.api.booker_client import RestfulBookerClient
from booker_suite.auth.token_provider import BookerAuthenticator
from booker_suite.domain import fixtures
from booker_suite.domain.booking import Booking
from booker_suite.domain.session import SessionToken
from booker_suite.utils.logger import get_logger
from booker_suite.validation.response import (
    NOT_NULL,
    expect_body_excludes,
    expect_fields,
    expect_schema,
    expect_status,
    json_body,
)
from booker_suite.validation.schemas import BOOKING_IDS_SCHEMA, CREATED_BOOKING_SCHEMA

logger = get_logger(__name__)

# Accepted outcomes for operations whose auth enforcement is not pinned down
UPDATE_STATUSES = (200, 403, 405)
DELETE_STATUSES = (201, 403, 405)
FOLLOW_UP_STATUSES = (200, 404)


class StepStatus(Enum):
    """Outcome of a single lifecycle step."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class StepSkipped(Exception):
    """Raised inside a step whose preconditions are not met."""


@dataclass
class StepResult:
    """Result of executing one step."""

    order: int
    name: str
    status: StepStatus
    message: str = ""
    status_code: Optional[int] = None
    duration_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order,
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "status_code": self.status_code,
            "duration_ms": round(self.duration_ms, 2),
        }


@dataclass
class LifecycleState:
    """State threaded through the ordered steps."""

    token: SessionToken = field(default_factory=lambda: SessionToken.unavailable("not requested"))
    booking_id: Optional[int] = None
    deletion_confirmed: bool = False
    last_status_code: Optional[int] = None

    def require_booking_id(self) -> int:
        # A missing id is a failure, not a skip
        if self.booking_id is None:
            raise AssertionError("Booking ID should be available from creation test")
        return self.booking_id

    def require_token(self, step: str) -> SessionToken:
        if not self.token.is_authenticated:
            raise StepSkipped(f"Skipping {step} - no auth token available")
        return self.token


@dataclass
class LifecycleReport:
    """Aggregated results of one run."""

    base_url: str
    started_at: str
    finished_at: str = ""
    authenticated: bool = False
    booking_id: Optional[int] = None
    results: List[StepResult] = field(default_factory=list)

    def count(self, status: StepStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def passed(self) -> int:
        return self.count(StepStatus.PASSED)

    @property
    def failed(self) -> int:
        return self.count(StepStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self.count(StepStatus.SKIPPED)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "authenticated": self.authenticated,
            "booking_id": self.booking_id,
            "summary": {
                "total": len(self.results),
                "passed": self.passed,
                "failed": self.failed,
                "skipped": self.skipped,
            },
            "steps": [r.to_dict() for r in self.results],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


class BookingLifecycleRunner:
    """
    Executes the booking lifecycle in a fixed order.

    Usage:
        runner = BookingLifecycleRunner(client, authenticator)
        report = runner.run()
    """

    def __init__(self, client: RestfulBookerClient, authenticator: BookerAuthenticator):
        self.client = client
        self.authenticator = authenticator
        self.settings = client.settings
        self.state = LifecycleState()
        self.steps: List[tuple[str, Callable[[], None]]] = [
            ("create_booking", self.create_booking),
            ("create_booking_missing_required_field", self.create_booking_missing_required_field),
            ("get_existing_booking", self.get_existing_booking),
            ("get_nonexistent_booking", self.get_nonexistent_booking),
            ("full_update_booking", self.full_update_booking),
            ("partial_update_booking", self.partial_update_booking),
            ("delete_booking_and_verify", self.delete_booking_and_verify),
            ("list_bookings_verify_deletion", self.list_bookings_verify_deletion),
            ("create_booking_invalid_data_types", self.create_booking_invalid_data_types),
            ("update_nonexistent_booking", self.update_nonexistent_booking),
        ]

    def run(self) -> LifecycleReport:
        """Acquire the token, then execute every step in order."""
        report = LifecycleReport(
            base_url=self.settings.base_url,
            started_at=datetime.now(timezone.utc).isoformat(),
        )

        self.state.token = self.authenticator.get_token()
        report.authenticated = self.state.token.is_authenticated

        for order, (name, step) in enumerate(self.steps, start=1):
            report.results.append(self.run_step(order, name, step))

        report.booking_id = self.state.booking_id
        report.finished_at = datetime.now(timezone.utc).isoformat()

        logger.info(
            "Booking lifecycle completed",
            operation="lifecycle",
            context={
                "passed": report.passed,
                "failed": report.failed,
                "skipped": report.skipped,
                "booking_id": report.booking_id,
            },
        )
        return report

    def run_step(self, order: int, name: str, step: Callable[[], None]) -> StepResult:
        """Execute one step, converting its outcome into a StepResult."""
        self.state.last_status_code = None
        start_time = time.time()
        status = StepStatus.PASSED
        message = ""

        try:
            step()
        except StepSkipped as e:
            status = StepStatus.SKIPPED
            message = str(e)
            logger.info(message, operation=name)
        except AssertionError as e:
            status = StepStatus.FAILED
            message = str(e) or "assertion failed"
            logger.error(f"Step {name} failed", operation=name, error=message)
        except Exception as e:  # noqa: BLE001
            status = StepStatus.FAILED
            message = f"{type(e).__name__}: {e}"
            logger.error(f"Step {name} raised", operation=name, error=message)

        return StepResult(
            order=order,
            name=name,
            status=status,
            message=message,
            status_code=self.state.last_status_code,
            duration_ms=(time.time() - start_time) * 1000,
        )

    def _observe(self, response: Any) -> Any:
        self.state.last_status_code = response.status_code
        return response

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #

    def create_booking(self) -> None:
        booking = fixtures.new_booking()
        response = self._observe(self.client.create_booking(booking))

        expect_status(response, 200)
        expect_fields(response, {"bookingid": NOT_NULL, **booking.expected_fields("booking.")})
        created = Booking.from_create_response(expect_schema(response, CREATED_BOOKING_SCHEMA))

        self.state.booking_id = created.booking_id
        logger.info("Created booking", context={"booking_id": created.booking_id})

        if created.booking_id is None or created.booking_id <= 0:
            raise AssertionError(f"Expected a positive booking ID, got {created.booking_id!r}")

    def create_booking_missing_required_field(self) -> None:
        response = self._observe(self.client.create_booking(fixtures.missing_firstname_payload()))
        expect_status(response, 500)

    def get_existing_booking(self) -> None:
        booking_id = self.state.require_booking_id()
        response = self._observe(self.client.get_booking(booking_id))

        expect_status(response, 200)
        expect_fields(response, fixtures.new_booking().expected_fields())

        fetched = Booking.from_dict(json_body(response), booking_id=booking_id)
        if fetched.extra_fields:
            logger.warning(
                "Booking body carries unrecognised fields",
                operation="get_existing_booking",
                context={"booking_id": booking_id, "fields": sorted(fetched.extra_fields)},
            )

    def get_nonexistent_booking(self) -> None:
        response = self._observe(self.client.get_booking(self.settings.nonexistent_booking_id))
        expect_status(response, 404)

    def full_update_booking(self) -> None:
        booking_id = self.state.require_booking_id()
        token = self.state.require_token("PUT test")

        response = self._observe(
            self.client.update_booking(
                booking_id,
                fixtures.updated_booking(),
                token=token,
                basic_auth=self.authenticator.basic_auth,
            )
        )
        expect_status(response, *UPDATE_STATUSES)

    def partial_update_booking(self) -> None:
        booking_id = self.state.require_booking_id()
        token = self.state.require_token("PATCH test")

        response = self._observe(
            self.client.partial_update_booking(
                booking_id, fixtures.partial_update_payload(), token=token
            )
        )
        expect_status(response, *UPDATE_STATUSES)

    def delete_booking_and_verify(self) -> None:
        booking_id = self.state.require_booking_id()
        token = self.state.require_token("DELETE test")

        delete_response = self._observe(self.client.delete_booking(booking_id, token=token))
        logger.info(
            "Delete response received",
            context={"booking_id": booking_id, "status_code": delete_response.status_code},
        )
        expect_status(delete_response, *DELETE_STATUSES)

        # Always verify with GET, whatever the delete answered
        get_response = self._observe(self.client.get_booking(booking_id))
        expect_status(get_response, *FOLLOW_UP_STATUSES)

        self.state.deletion_confirmed = (
            delete_response.status_code == 201 and get_response.status_code == 404
        )

    def list_bookings_verify_deletion(self) -> None:
        if self.state.booking_id is None:
            raise StepSkipped("Skipping deletion verification - no booking ID available")
        if not self.state.deletion_confirmed:
            raise StepSkipped("Skipping deletion verification - deletion was not confirmed")

        response = self._observe(self.client.list_bookings())
        expect_status(response, 200)
        expect_schema(response, BOOKING_IDS_SCHEMA)
        expect_body_excludes(response, str(self.state.booking_id))

    def create_booking_invalid_data_types(self) -> None:
        response = self._observe(self.client.create_booking(fixtures.invalid_types_payload()))
        expect_status(response, 200)

    def update_nonexistent_booking(self) -> None:
        token = self.state.require_token("PUT non-existent test")
        response = self._observe(
            self.client.update_booking(
                self.settings.nonexistent_booking_id,
                fixtures.placeholder_booking(),
                token=token,
            )
        )
        expect_status(response, 405)
