from __future__ import annotations

import pytest

from crane_console.core.outcome import Failure, Success
from crane_console.core.validation import Rejected
from crane_console.services.commands import CommandService
from crane_console.state import ViewState
from tests.utils.recorder import NoticeRecorder, RecorderClient


def make_service(
    *, fail: bool = False, axis_max: float = 100.0, report_errors_remote: bool = False
) -> tuple[CommandService, RecorderClient, ViewState, NoticeRecorder]:
    client = RecorderClient(fail=fail)
    state = ViewState()
    notices = NoticeRecorder()
    service = CommandService(
        client,
        state,
        notices,
        axis_max=axis_max,
        report_errors_remote=report_errors_remote,
    )
    return service, client, state, notices


@pytest.mark.unit
@pytest.mark.asyncio
async def test_manual_axis_in_range_dispatches_and_updates_state():
    service, client, state, notices = make_service(axis_max=1_000_000)

    outcome = await service.set_axis_manual("x", "500000")

    assert isinstance(outcome, Success)
    assert client.paths == ["/X/500000"]
    assert client.sources == ["manual"]
    assert state.x == 500000.0
    assert state.last_update_ts > 0
    assert notices.last.kind == "positive"
    assert notices.last.title == "Data sent successfully"
    assert "(via manual)" in notices.last.message


@pytest.mark.unit
@pytest.mark.asyncio
async def test_manual_axis_out_of_range_never_dispatches():
    service, client, state, notices = make_service(axis_max=1_000_000)

    outcome = await service.set_axis_manual("x", "2000000")

    assert outcome == Rejected("out of range")
    assert client.requests == []
    assert state.x == 50.0
    assert notices.last.kind == "negative"
    assert notices.last.message == "Please enter a value between 0 and 1000000"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_vehicle_key_is_rejected():
    service, client, state, notices = make_service()

    outcome = await service.register_vehicle("123", "")

    assert outcome == Rejected("missing key")
    assert client.requests == []
    assert state.vehicle_code is None
    assert notices.last.message == "Please enter a vehicle key"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_vehicle_registration_records_code():
    service, client, state, notices = make_service()

    outcome = await service.register_vehicle("123", "s3cr/et")

    assert isinstance(outcome, Success)
    assert client.paths == ["/vehicle/123/s3cr%2Fet"]
    assert state.vehicle_code == 123
    assert notices.last.title == "Vehicle registered"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_negative_weight_is_rejected():
    service, client, state, notices = make_service()

    outcome = await service.submit_weight("-5")

    assert outcome == Rejected("invalid weight")
    assert client.requests == []
    assert state.weight is None
    assert notices.last.title == "Invalid value"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_weight_submission_sends_body():
    service, client, state, _ = make_service()

    await service.submit_weight("750.5")

    assert client.requests[0].path == "/weight"
    assert client.requests[0].body == {"weight": 750.5}
    assert state.weight == 750.5


@pytest.mark.unit
@pytest.mark.asyncio
async def test_error_report_is_local_only_by_default():
    service, client, state, notices = make_service()

    outcome = await service.report_error("sensor")

    assert isinstance(outcome, Success)
    assert client.requests == []
    assert state.last_error == "sensor"
    assert notices.last.title == "Error reported"
    assert "sensor" in notices.last.message


@pytest.mark.unit
@pytest.mark.asyncio
async def test_error_report_can_be_sent_to_the_device():
    service, client, state, _ = make_service(report_errors_remote=True)

    await service.report_error("mechanical")

    assert client.paths == ["/error"]
    assert client.requests[0].body == {"type": "mechanical"}
    assert state.last_error == "mechanical"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_error_report_requires_selection():
    service, client, state, notices = make_service(report_errors_remote=True)

    outcome = await service.report_error("")

    assert outcome == Rejected("no error selected")
    assert client.requests == []
    assert state.last_error is None
    assert notices.last.title == "No error selected"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_transport_failure_leaves_view_state_unchanged():
    service, client, state, notices = make_service(fail=True)

    slider = await service.set_axis_slider("y", 80.0)
    manual = await service.set_axis_manual("z", "10")
    weight = await service.submit_weight("3")

    assert isinstance(slider, Failure)
    assert isinstance(manual, Failure)
    assert isinstance(weight, Failure)
    assert (state.x, state.y, state.z) == (50.0, 50.0, 50.0)
    assert state.weight is None
    assert state.last_update_ts == 0.0
    assert len(client.requests) == 3
    assert [n.kind for n in notices.notices] == ["negative"] * 3
    assert notices.notices[0].title == "Error sending data"
    assert notices.notices[2].title == "Weight submission failed"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_slider_value_is_clamped_before_dispatch():
    service, client, state, _ = make_service()

    await service.set_axis_slider("z", 120.0)

    assert client.paths == ["/Z/100"]
    assert state.z == 100.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_send_position_defaults_to_displayed_values():
    service, client, state, notices = make_service()
    state.x, state.y, state.z = 10.0, 20.0, 30.0

    await service.send_position()

    assert client.paths == ["/position"]
    assert client.requests[0].body == {"x": 10.0, "y": 20.0, "z": 30.0}
    assert "(via position)" in notices.last.message


@pytest.mark.unit
@pytest.mark.asyncio
async def test_send_position_rejects_out_of_range_triplet():
    service, client, state, _ = make_service()

    outcome = await service.send_position({"x": 1, "y": 2, "z": 300})

    assert outcome == Rejected("out of range")
    assert client.requests == []
    assert state.z == 50.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_rapid_submissions_each_dispatch():
    service, client, _, _ = make_service()

    for _ in range(3):
        await service.set_axis_slider("x", 12.0)

    assert client.paths == ["/X/12"] * 3


@pytest.mark.unit
@pytest.mark.asyncio
async def test_view_state_holds_the_value_the_device_received():
    service, client, state, _ = make_service()

    await service.set_axis_manual("x", "42.25")
    await service.set_axis_slider("y", 17.04)
    await service.send_position()

    assert client.paths == ["/X/42.2", "/Y/17", "/position"]
    assert (state.x, state.y) == (42.2, 17.0)
    assert client.requests[2].body == {"x": 42.2, "y": 17.0, "z": 50.0}
