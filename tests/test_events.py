from __future__ import annotations

import json

import pytest

from tilesync.core.board import Cell, Condition, Mark
from tilesync.core.events import (
    STATE_TOPIC,
    Envelope,
    snapshot_envelopes,
    state_envelope,
    tile_envelope,
    tile_topic,
)
from tilesync.game import GameState


def test_tile_topic_format() -> None:
    assert tile_topic(0, 1) == "game.tile.0.1"
    assert tile_topic(2, 2) == "game.tile.2.2"
    assert STATE_TOPIC == "game.state"


@pytest.mark.parametrize("cell", list(Cell))
def test_tile_envelope_wire_shape(cell: Cell) -> None:
    raw = json.loads(tile_envelope(1, 2, cell).model_dump_json())
    assert raw == {"topic": "game.tile.1.2", "payload": {"state": cell.value}}


@pytest.mark.parametrize("condition", list(Condition))
def test_state_envelope_wire_shape(condition: Condition) -> None:
    raw = json.loads(state_envelope(condition).model_dump_json())
    assert raw == {"topic": "game.state", "payload": {"condition": condition.value}}


def test_wire_strings_are_exact() -> None:
    assert [c.value for c in Cell] == ["Empty", "MarkA", "MarkB"]
    assert [c.value for c in Condition] == ["InProgress", "WinA", "WinB", "Draw"]


def test_canonical_envelopes_survive_json() -> None:
    envelopes = [tile_envelope(x, y, cell) for x in range(3) for y in range(3) for cell in Cell]
    envelopes += [state_envelope(condition) for condition in Condition]

    for env in envelopes:
        assert Envelope.model_validate_json(env.model_dump_json()) == env


def test_snapshot_envelopes_cover_board_then_condition() -> None:
    game = GameState()
    game.apply_move(1, 0, Mark.mark_b)

    envelopes = snapshot_envelopes(game.snapshot())

    assert len(envelopes) == 10
    assert [e.topic for e in envelopes[:9]] == [tile_topic(x, y) for x in range(3) for y in range(3)]
    assert envelopes[3].payload == {"state": "MarkB"}
    assert envelopes[0].payload == {"state": "Empty"}
    assert envelopes[-1].topic == STATE_TOPIC
    assert envelopes[-1].payload == {"condition": "InProgress"}
