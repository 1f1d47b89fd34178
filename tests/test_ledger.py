"""
Unit tests for the supervision ledger state machine (in-memory configs, no DB).

Devices: A = supervisor, B = target, C = bystander.
"""
import pytest

from areuok.core.errors import (
    NotAuthorizedError,
    RelationshipNotFoundError,
    RequestNotFoundError,
    RequestNotPendingError,
    WrongTargetError,
)
from areuok.schemas.device import DeviceMode
from areuok.schemas.supervision import RequestStatus
from areuok.services import ledger


@pytest.fixture()
def dev_a(make_config):
    return make_config("device-a", "Phone A", DeviceMode.supervisor)


@pytest.fixture()
def dev_b(make_config):
    return make_config("device-b", "Tablet B")


@pytest.fixture()
def dev_c(make_config):
    return make_config("device-c", "Laptop C")


def deliver(request, *configs):
    """Make a request visible in other devices' ledgers (shared storage)."""
    for cfg in configs:
        cfg.supervision_requests.append(request.model_copy(deep=True))


def _find(config, request_id):
    return next(r for r in config.supervision_requests if r.request_id == request_id)


class TestCreateRequest:
    def test_supervisor_creates_pending_request(self, dev_a):
        req = ledger.create_request(dev_a, "device-b")
        assert req.status == RequestStatus.pending
        assert req.supervisor_device_id == "device-a"
        assert req.supervisor_device_name == "Phone A"
        assert req.target_device_id == "device-b"
        assert dev_a.supervision_requests == [req]

    def test_signin_device_not_authorized(self, dev_b):
        with pytest.raises(NotAuthorizedError):
            ledger.create_request(dev_b, "device-a")
        assert dev_b.supervision_requests == []

    def test_request_ids_are_unique(self, dev_a):
        ids = {ledger.create_request(dev_a, "device-b").request_id for _ in range(20)}
        assert len(ids) == 20

    def test_duplicate_pending_requests_allowed(self, dev_a):
        ledger.create_request(dev_a, "device-b")
        ledger.create_request(dev_a, "device-b")
        assert len(ledger.list_requests_sent_by(dev_a, "device-a")) == 2

    def test_name_is_a_snapshot(self, dev_a):
        req = ledger.create_request(dev_a, "device-b")
        dev_a.device.device_name = "Renamed"
        assert req.supervisor_device_name == "Phone A"


class TestListPending:
    def test_only_pending_for_target(self, dev_a):
        r1 = ledger.create_request(dev_a, "device-b")
        r2 = ledger.create_request(dev_a, "device-b")
        ledger.create_request(dev_a, "device-c")
        ledger.cancel_request(dev_a, r2.request_id)
        pending = ledger.list_pending_for(dev_a, "device-b")
        assert [r.request_id for r in pending] == [r1.request_id]

    def test_read_only(self, dev_a):
        ledger.create_request(dev_a, "device-b")
        before = dev_a.model_dump()
        ledger.list_pending_for(dev_a, "device-b")
        assert dev_a.model_dump() == before


class TestAccept:
    def test_accept_creates_exactly_one_relationship(self, dev_a, dev_b):
        req = ledger.create_request(dev_a, "device-b")
        deliver(req, dev_b)

        rel = ledger.accept_request(dev_b, req.request_id)

        assert dev_b.supervision_relationships == [rel]
        assert rel.supervisor_device_id == "device-a"
        assert rel.supervisor_device_name == "Phone A"
        assert rel.supervised_device_id == "device-b"
        assert rel.supervised_device_name == "Tablet B"
        assert rel.established_at == rel.last_sync_at
        assert _find(dev_b, req.request_id).status == RequestStatus.accepted

    def test_wrong_target_creates_nothing(self, dev_a, dev_c):
        req = ledger.create_request(dev_a, "device-b")
        deliver(req, dev_c)

        with pytest.raises(WrongTargetError) as exc:
            ledger.accept_request(dev_c, req.request_id)

        assert exc.value.details["target_device_id"] == "device-b"
        assert dev_c.supervision_relationships == []
        assert _find(dev_c, req.request_id).status == RequestStatus.pending

    def test_unknown_request(self, dev_b):
        with pytest.raises(RequestNotFoundError):
            ledger.accept_request(dev_b, "nope")

    @pytest.mark.parametrize("terminal", ["accept", "reject", "cancel"])
    def test_terminal_request_cannot_be_accepted(self, dev_a, dev_b, terminal):
        req = ledger.create_request(dev_a, "device-b")
        deliver(req, dev_b)
        if terminal == "accept":
            ledger.accept_request(dev_b, req.request_id)
        elif terminal == "reject":
            ledger.reject_request(dev_b, req.request_id)
        else:
            ledger.cancel_request(dev_b, req.request_id)
        relationships_before = len(dev_b.supervision_relationships)

        with pytest.raises(RequestNotFoundError):
            ledger.accept_request(dev_b, req.request_id)
        with pytest.raises(RequestNotFoundError):
            ledger.reject_request(dev_b, req.request_id)

        assert len(dev_b.supervision_relationships) == relationships_before

    def test_accepted_iff_relationship(self, dev_a, dev_b):
        """Every accepted request has a relationship and vice versa."""
        reqs = [ledger.create_request(dev_a, "device-b") for _ in range(4)]
        deliver(reqs[0], dev_b)
        deliver(reqs[1], dev_b)
        deliver(reqs[2], dev_b)
        ledger.accept_request(dev_b, reqs[0].request_id)
        ledger.reject_request(dev_b, reqs[1].request_id)
        ledger.accept_request(dev_b, reqs[2].request_id)
        with pytest.raises(RequestNotFoundError):
            ledger.accept_request(dev_b, reqs[3].request_id)

        accepted = [r for r in dev_b.supervision_requests if r.status == RequestStatus.accepted]
        assert len(accepted) == len(dev_b.supervision_relationships) == 2


class TestReject:
    def test_reject(self, dev_a, dev_b):
        req = ledger.create_request(dev_a, "device-b")
        deliver(req, dev_b)
        result = ledger.reject_request(dev_b, req.request_id)
        assert result.status == RequestStatus.rejected
        assert dev_b.supervision_relationships == []

    def test_reject_wrong_target(self, dev_a, dev_c):
        req = ledger.create_request(dev_a, "device-b")
        deliver(req, dev_c)
        with pytest.raises(WrongTargetError):
            ledger.reject_request(dev_c, req.request_id)
        assert _find(dev_c, req.request_id).status == RequestStatus.pending

    def test_reject_unknown(self, dev_b):
        with pytest.raises(RequestNotFoundError):
            ledger.reject_request(dev_b, "missing")


class TestCancel:
    def test_cancel_pending(self, dev_a):
        req = ledger.create_request(dev_a, "device-b")
        assert ledger.cancel_request(dev_a, req.request_id).status == RequestStatus.cancelled

    def test_cancel_unknown(self, dev_a):
        with pytest.raises(RequestNotFoundError):
            ledger.cancel_request(dev_a, "missing")

    def test_cancel_overwrites_terminal_by_default(self, dev_a, dev_b):
        req = ledger.create_request(dev_a, "device-b")
        deliver(req, dev_b)
        ledger.reject_request(dev_b, req.request_id)
        assert ledger.cancel_request(dev_b, req.request_id).status == RequestStatus.cancelled

    def test_cancel_terminal_refused_when_disallowed(self, dev_a, dev_b):
        req = ledger.create_request(dev_a, "device-b")
        deliver(req, dev_b)
        ledger.accept_request(dev_b, req.request_id)
        with pytest.raises(RequestNotPendingError) as exc:
            ledger.cancel_request(dev_b, req.request_id, allow_terminal=False)
        assert exc.value.details["status"] == "accepted"
        assert _find(dev_b, req.request_id).status == RequestStatus.accepted

    def test_cancel_pending_allowed_when_terminal_disallowed(self, dev_a):
        req = ledger.create_request(dev_a, "device-b")
        result = ledger.cancel_request(dev_a, req.request_id, allow_terminal=False)
        assert result.status == RequestStatus.cancelled


class TestRemoveRelationship:
    def test_remove_shrinks_by_one(self, dev_a, dev_b):
        rels = []
        for _ in range(3):
            req = ledger.create_request(dev_a, "device-b")
            deliver(req, dev_b)
            rels.append(ledger.accept_request(dev_b, req.request_id))

        ledger.remove_relationship(dev_b, rels[1].relationship_id)

        remaining = [r.relationship_id for r in dev_b.supervision_relationships]
        assert remaining == [rels[0].relationship_id, rels[2].relationship_id]

    def test_remove_missing_fails(self, dev_b):
        with pytest.raises(RelationshipNotFoundError):
            ledger.remove_relationship(dev_b, "missing")

    def test_remove_twice_fails_second_time(self, dev_a, dev_b):
        req = ledger.create_request(dev_a, "device-b")
        deliver(req, dev_b)
        rel = ledger.accept_request(dev_b, req.request_id)
        ledger.remove_relationship(dev_b, rel.relationship_id)
        with pytest.raises(RelationshipNotFoundError):
            ledger.remove_relationship(dev_b, rel.relationship_id)
        assert dev_b.supervision_relationships == []
