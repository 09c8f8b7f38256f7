"""Tests for the rotation queue model."""

import pytest

from fairplay.models import RotationQueue


@pytest.fixture
def queue():
    return RotationQueue(queue=["p2", "p3", "p4", "p5", "p6"])


def test_rotate_player_moves_to_back(queue):
    queue.rotate_player("p3")
    assert queue.queue == ["p2", "p4", "p5", "p6", "p3"]

    queue.rotate_player("ghost")
    assert queue.queue == ["p2", "p4", "p5", "p6", "p3"]


def test_next_players(queue):
    assert queue.next_players() == ["p2"]
    assert queue.next_players(3) == ["p2", "p3", "p4"]
    assert queue.next_players(0) == []
    assert RotationQueue().next_players(2) == []


def test_add_move_and_insert(queue):
    queue.add_player("p7")
    queue.add_player("p8", 1)
    assert queue.queue == ["p2", "p8", "p3", "p4", "p5", "p6", "p7"]

    queue.move_to_front("p6")
    assert queue.next_players() == ["p6"]

    queue.insert_before("p7", "p3")
    assert queue.position("p7") == queue.position("p3") - 1

    queue.insert_before("p2", "missing")
    assert "p2" in queue


def test_replace_player_keeps_slot(queue):
    queue.replace_player("p4", "p1")
    assert queue.queue == ["p2", "p3", "p1", "p5", "p6"]

    # Incoming id already queued elsewhere
    queue.replace_player("p5", "p2")
    assert queue.queue == ["p3", "p1", "p2", "p6"]


def test_inactive_players_leave_the_queue(queue):
    queue.deactivate_player("p3")
    queue.deactivate_player("p3")

    assert "p3" not in queue
    assert queue.inactive_players == ["p3"]
    assert queue.is_inactive("p3")

    queue.reactivate_player("p3")
    assert queue.queue[-1] == "p3"
    assert queue.inactive_players == []


def test_reorder_keeps_unlisted_players(queue):
    queue.reorder(["p5", "p2", "ghost", "p5"])
    assert queue.queue == ["p5", "p2", "p3", "p4", "p6"]


def test_reset_and_serialization(queue):
    queue.deactivate_player("p6")
    restored = RotationQueue.from_dict(queue.to_dict())
    assert restored == queue

    queue.reset(["p9", "p9", "p8"])
    assert queue.queue == ["p9", "p8"]
    assert queue.inactive_players == []
    assert len(queue) == 2
    assert RotationQueue.from_dict(None) == RotationQueue()
