#!/usr/bin/env python3
"""
Booking request and approval flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Tokens are signed locally with JWT_SECRET_KEY, standing in for the external
auth provider.

Usage:
    python scripts/flow_book_and_approve.py
    python scripts/flow_book_and_approve.py --resource-id <UUID> --attendees 3

Flow:
    1. Create a lab (as supervisor) unless --resource-id is given
    2. Submit booking request (as student)
    3. Approve booking (as supervisor)
    4. Approve again, expecting invalid_transition
    5. Complete booking
"""

import argparse
import sys
from datetime import UTC, datetime, timedelta

import httpx

from labhub.core.security import create_access_token

BASE_URL = "http://localhost:8000"


def token_for(user_id: str, name: str, role: str) -> str:
    return create_access_token({"sub": user_id, "name": name, "user_role": role})


def api_request(token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
    response = httpx.request(
        method,
        f"{BASE_URL}{endpoint}",
        headers=headers,
        json=data,
        timeout=10.0,
        follow_redirects=True,
    )
    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def expect(result: dict, status: int, what: str) -> dict:
    if result["status"] != status:
        print(f"ERROR: {what} returned {result['status']}: {result['data']}")
        sys.exit(1)
    return result["data"]


def main(resource_id: str | None, attendees: int) -> None:
    student = token_for("demo-student", "Demo Student", "student")
    supervisor = token_for("demo-supervisor", "Demo Supervisor", "lab_supervisor")

    print_step(1, "Resolve resource")
    if not resource_id:
        lab = expect(
            api_request(
                supervisor,
                "POST",
                "/api/v1/resources/",
                {"name": "Demo Chemistry Lab", "kind": "lab", "capacity": 10},
            ),
            201,
            "Create resource",
        )
        resource_id = lab["id"]
    print(f"Resource: {resource_id}")

    print_step(2, "Submit booking request")
    start = datetime.now(UTC).replace(minute=0, second=0, microsecond=0) + timedelta(days=1)
    booking = expect(
        api_request(
            student,
            "POST",
            "/api/v1/bookings/",
            {
                "resource_id": resource_id,
                "start_time": start.isoformat(),
                "end_time": (start + timedelta(hours=2)).isoformat(),
                "purpose": "Chemistry experiment",
                "attendees": attendees,
            },
        ),
        201,
        "Create booking",
    )
    booking_id = booking["id"]
    print(f"Booking {booking_id}: {booking['status']}")

    print_step(3, "Approve booking")
    approved = expect(
        api_request(supervisor, "POST", f"/api/v1/bookings/{booking_id}/approve"),
        200,
        "Approve",
    )
    print(f"Status: {approved['status']}")

    print_step(4, "Approve again")
    again = expect(
        api_request(supervisor, "POST", f"/api/v1/bookings/{booking_id}/approve"),
        409,
        "Second approve",
    )
    print(f"Refused: {again.get('code')} - {again.get('detail')}")

    print_step(5, "Complete booking")
    completed = expect(
        api_request(supervisor, "POST", f"/api/v1/bookings/{booking_id}/complete"),
        200,
        "Complete",
    )
    print(f"Status: {completed['status']}")
    print("\nFlow finished")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the LabHub booking approval flow")
    parser.add_argument("--resource-id", default=None)
    parser.add_argument("--attendees", type=int, default=2)
    parser.add_argument("--base-url", default=BASE_URL)
    args = parser.parse_args()

    BASE_URL = args.base_url
    main(args.resource_id, args.attendees)
