"""Integration tests for the scheduler-triggered expiry endpoint."""

from datetime import datetime, timedelta, UTC

import pytest
from fastapi import status

from services import signups_service

CRON_URL = "/api/v1/cron/expire-event-signups"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer wrong-secret"},
        {"Authorization": "test-cron-secret"},
    ],
)
async def test_cron_requires_secret(client, db_session, signup_payload, headers):
    long_ago = datetime.now(UTC) - timedelta(days=10)
    signup = await signups_service.submit(db_session, signup_payload("a@x.com"), now=long_ago)
    signup_id = signup.id

    response = await client.post(CRON_URL, headers=headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert (await signups_service.get_signup(db_session, signup_id)).status == "pending"


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "POST"])
async def test_cron_expires_stale_signups(client, db_session, cron_headers, signup_payload, method):
    """
    Test: The sweep expires signups older than the staleness window and
    deactivates lapsed event accounts.
    """
    long_ago = datetime.now(UTC) - timedelta(days=30)
    stale = await signups_service.submit(db_session, signup_payload("stale@x.com"), now=long_ago)
    stale_id = stale.id
    fresh = await signups_service.submit(db_session, signup_payload("fresh@x.com"))
    fresh_id = fresh.id
    lapsed = await signups_service.submit(db_session, signup_payload("lapsed@x.com"), now=long_ago)
    await signups_service.approve(db_session, lapsed.id, now=long_ago)

    response = await client.request(method, CRON_URL, headers=cron_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "expired": 1,
        "accounts_deactivated": 1,
        "accounts_failed": 0,
        "deactivated": ["lapsed@x.com"],
        "errors": [],
    }
    assert (await signups_service.get_signup(db_session, stale_id)).status == "expired"
    assert (await signups_service.get_signup(db_session, fresh_id)).status == "pending"


@pytest.mark.asyncio
async def test_cron_second_run_is_a_no_op(client, db_session, cron_headers, signup_payload):
    long_ago = datetime.now(UTC) - timedelta(days=30)
    await signups_service.submit(db_session, signup_payload("stale@x.com"), now=long_ago)

    first = await client.post(CRON_URL, headers=cron_headers)
    second = await client.post(CRON_URL, headers=cron_headers)

    assert first.json()["expired"] == 1
    assert second.json()["expired"] == 0
    assert second.json()["accounts_deactivated"] == 0
