"""Tests for command routing and event fan-out."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent
from shared.domain.exceptions import StateError


@dataclass
class Ping:
    value: int


@dataclass(kw_only=True)
class Pinged(DomainEvent):
    value: int


class Recorder:
    def __init__(self) -> None:
        self.seen: list = []

    def handle(self, item) -> int:
        self.seen.append(item)
        return 42


def test_command_returns_handler_result() -> None:
    bus = MessageBus()
    recorder = Recorder()
    bus.register_command_handler(Ping, recorder.handle)

    assert bus.handle_command(Ping(1)) == 42
    assert recorder.seen == [Ping(1)]


def test_registering_same_bound_method_twice_is_allowed() -> None:
    bus = MessageBus()
    recorder = Recorder()
    bus.register_command_handler(Ping, recorder.handle)
    bus.register_command_handler(Ping, recorder.handle)

    with pytest.raises(ValueError):
        bus.register_command_handler(Ping, Recorder().handle)


def test_unknown_command_raises() -> None:
    with pytest.raises(ValueError):
        MessageBus().handle_command(Ping(1))


def test_domain_errors_propagate_from_commands() -> None:
    bus = MessageBus()

    def reject(command):
        raise StateError("nope")

    bus.register_command_handler(Ping, reject)
    with pytest.raises(StateError):
        bus.handle_command(Ping(1))


def test_event_handler_errors_do_not_stop_other_handlers() -> None:
    bus = MessageBus()
    recorder = Recorder()

    def broken(event):
        raise RuntimeError("boom")

    bus.register_event_handler(Pinged, broken)
    bus.register_event_handler(Pinged, recorder.handle)
    bus.register_event_handler(Pinged, recorder.handle)

    event = Pinged(value=3, aggregate_id=7)
    bus.publish_events([event])

    assert recorder.seen == [event]


def test_event_to_dict_is_json_safe() -> None:
    data = Pinged(value=3, aggregate_id=7).to_dict()
    assert data["event_type"] == "Pinged"
    assert data["aggregate_id"] == 7
    assert data["value"] == 3
    assert isinstance(data["event_id"], str)
    assert isinstance(data["occurred_at"], str)
