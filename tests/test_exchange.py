import pytest

from reactor import Material, Phase, Request
from reactor.exchange import build_bids, build_request, merge_deliveries, order_size

FRESH = {"U235": 0.04, "U238": 0.96}
SPENT = {"U238": 0.95, "Pu239": 0.05}


def _size(phase, **levels):
    params = dict(
        n_batches=3,
        batch_size=10.0,
        n_reserves=1,
        order_lookahead=0,
        core_qty=0.0,
        reserves_qty=0.0,
        spillover_qty=0.0,
    )
    params.update(levels)
    return order_size(phase, **params)


def test_initial_order_covers_core_and_reserves_without_lookahead():
    assert _size(Phase.INITIAL) == 40.0


def test_initial_order_covers_only_core_with_lookahead():
    assert _size(Phase.INITIAL, order_lookahead=2) == 30.0


def test_initial_order_subtracts_everything_held():
    assert _size(Phase.INITIAL, core_qty=10.0, reserves_qty=10.0, spillover_qty=5.0) == 15.0


@pytest.mark.parametrize("phase", [Phase.PROCESS, Phase.WAITING])
def test_running_order_tops_up_reserves(phase):
    assert _size(phase, n_reserves=2, reserves_qty=10.0, spillover_qty=2.5, core_qty=30.0) == 7.5


def test_running_order_can_be_negative():
    assert _size(Phase.PROCESS, reserves_qty=20.0) == -10.0


def test_build_request_carries_capacity_constraint():
    port = build_request(40.0, FRESH, "uox", "r1")

    assert len(port.requests) == 1
    request = port.requests[0]
    assert request.target.quantity == 40.0
    assert request.target.composition == FRESH
    assert not request.target.tracked
    assert request.commodity == "uox"
    assert request.requester == "r1"
    assert port.constraints == [40.0]


@pytest.mark.parametrize("size", [0.0, -5.0])
def test_build_request_skips_non_positive_sizes(size):
    assert build_request(size, FRESH, "uox", "r1") is None


def _request(qty, commodity="spent_uox", requester="sink"):
    return Request(target=Material.create_untracked(qty, {}), requester=requester, commodity=commodity)


def test_bids_are_capped_by_storage():
    request = _request(20.0)
    port = build_bids([request], 15.0, SPENT, "r1")

    assert len(port.bids) == 1
    bid = port.bids[0]
    assert bid.request is request
    assert bid.offer.quantity == 15.0
    assert bid.offer.composition == SPENT
    assert not bid.offer.tracked
    assert bid.bidder == "r1"
    assert port.constraints == [15.0]


def test_bids_offer_requested_amount_when_storage_suffices():
    port = build_bids([_request(4.0), _request(30.0)], 15.0, SPENT, "r1")

    assert [bid.offer.quantity for bid in port.bids] == [4.0, 15.0]
    assert port.constraints == [15.0]


def test_no_bids_without_storage_or_requests():
    assert build_bids([_request(5.0)], 0.0, SPENT, "r1") is None
    assert build_bids([], 10.0, SPENT, "r1") is None


def test_merge_deliveries_preserves_total():
    mats = [Material.create(q, FRESH) for q in (2.0, 3.0, 5.0)]
    merged = merge_deliveries(mats)

    assert merged is mats[0]
    assert merged.quantity == 10.0
    assert merge_deliveries([]) is None
