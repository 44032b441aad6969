from __future__ import annotations

from statemachine import State, StateMachine

from tilesync.core.board import Condition


class ConditionFSM(StateMachine):
    """Lifecycle of a game's condition.

    - InProgress -> WinA | WinB | Draw after the move that decides the game.
    - any condition -> InProgress only via `restart`.

    The FSM only guards transitions; the condition itself is derived from the board
    by `derive_condition` and fed in through `settle`.
    """

    in_progress = State(Condition.in_progress.value, value=Condition.in_progress.value, initial=True)
    win_a = State(Condition.win_a.value, value=Condition.win_a.value)
    win_b = State(Condition.win_b.value, value=Condition.win_b.value)
    draw = State(Condition.draw.value, value=Condition.draw.value)

    won_by_a = in_progress.to(win_a)
    won_by_b = in_progress.to(win_b)
    drawn = in_progress.to(draw)
    restart = in_progress.to(in_progress) | win_a.to(in_progress) | win_b.to(in_progress) | draw.to(in_progress)

    @property
    def condition(self) -> Condition:
        return Condition(str(self.current_state.value))

    @property
    def decided(self) -> bool:
        return self.condition != Condition.in_progress

    def settle(self, condition: Condition) -> None:
        """Move into the terminal state matching a freshly derived condition."""

        if condition == Condition.in_progress:
            return
        event = _EVENT_FOR_CONDITION[condition]
        self.send(event)


_EVENT_FOR_CONDITION: dict[Condition, str] = {
    Condition.win_a: "won_by_a",
    Condition.win_b: "won_by_b",
    Condition.draw: "drawn",
}
