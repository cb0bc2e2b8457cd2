"""Tests for the scheduler entry point."""

import asyncio

import pytest

from replay_acquisition import main as main_module
from replay_acquisition.domain.runs import RunStatus
from replay_acquisition.main import run_once
from replay_acquisition.services.sessions import SessionKind
from tests.conftest import FakeBookingSource, make_booking


def test_run_once_returns_summary_and_closes_resources(
    container, booking_source: FakeBookingSource
) -> None:
    booking_source.bookings = [make_booking(1)]
    asyncio.run(container.session_manager.acquire(SessionKind.CATALOG))

    summary = asyncio.run(run_once(container))

    assert summary.status is RunStatus.COMPLETED_WITH_RESULTS
    assert summary.succeeded == 1
    assert container.session_manager.cached(SessionKind.CATALOG) is None


def test_main_exits_when_source_unavailable(
    container, booking_source: FakeBookingSource, monkeypatch: pytest.MonkeyPatch
) -> None:
    booking_source.unavailable = True
    monkeypatch.setattr(main_module, "build_container", lambda: container)

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code == 1


def test_main_returns_normally_without_work(
    container, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(main_module, "build_container", lambda: container)

    main_module.main()
