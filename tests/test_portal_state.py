import pytest

from certportal.shared.portal_state import InvalidTransition, Phase, PortalState


def test_initial_state_is_idle_below_cap():
    state = PortalState.initial(count=1, cap=2)
    assert state.phase is Phase.IDLE
    assert state.remaining == 1
    assert state.can_submit


@pytest.mark.parametrize("count", [2, 3])
def test_initial_state_is_blocked_at_cap(count):
    state = PortalState.initial(count=count, cap=2)
    assert state.phase is Phase.BLOCKED
    assert state.remaining == 0
    assert not state.can_submit


def test_successful_submission_consumes_one():
    state = PortalState.initial(0, 2).submit()
    assert state.phase is Phase.SUBMITTING
    done = state.succeed()
    assert done.phase is Phase.SUCCESS
    assert done.count == 1
    assert done.reset().phase is Phase.IDLE


def test_failure_keeps_count_and_reason():
    failed = PortalState.initial(1, 2).submit().fail("network")
    assert failed.phase is Phase.FAILED
    assert failed.reason == "network"
    assert failed.count == 1
    assert failed.can_submit
    assert failed.submit().phase is Phase.SUBMITTING


def test_reaching_cap_blocks_on_next_submit_or_reset():
    done = PortalState.initial(1, 2).submit().succeed()
    assert done.count == 2
    assert done.submit().phase is Phase.BLOCKED
    assert done.reset().phase is Phase.BLOCKED


def test_invalid_transitions_raise():
    with pytest.raises(InvalidTransition):
        PortalState.initial(0, 2).succeed()
    with pytest.raises(InvalidTransition):
        PortalState.initial(0, 2).fail("x")
    with pytest.raises(InvalidTransition):
        PortalState.initial(0, 2).submit().submit()
