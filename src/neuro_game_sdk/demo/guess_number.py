from __future__ import annotations

"""A tiny host game: Neuro guesses a secret number between 1 and 10."""

import random
from typing import Optional

from ..client import NeuroClient
from ..config import Action
from ..protocol.messages import ActionData, ForcePriority

LOWEST = 1
HIGHEST = 10

GUESS_NUMBER = Action(
    name="guess_number",
    description=f"Guess the secret number between {LOWEST} and {HIGHEST}.",
    schema={
        "type": "object",
        "properties": {
            "number": {"type": "integer", "minimum": LOWEST, "maximum": HIGHEST},
        },
        "required": ["number"],
    },
)


class GuessNumberGame:
    """Plays *rounds* rounds, then unregisters its action and disconnects."""

    def __init__(self, client: NeuroClient, *, rounds: int = 1, seed: Optional[int] = None) -> None:
        self.client = client
        self.rounds = rounds
        self.rng = random.Random(seed)
        self.round = 0
        self.guesses = 0
        self.secret = 0
        client.connection.on_connected = self.start
        client.on_action(self.handle_action)

    def start(self) -> None:
        self.client.register_actions([GUESS_NUMBER])
        self.client.send_context(
            f"A number guessing game has started. You have {self.rounds} round(s).",
            silent=True,
        )
        self.next_round()

    def next_round(self) -> None:
        self.round += 1
        self.guesses = 0
        self.secret = self.rng.randint(LOWEST, HIGHEST)
        self.force_guess()

    def force_guess(self) -> None:
        self.client.force_actions(
            f"Guess the number between {LOWEST} and {HIGHEST}.",
            [GUESS_NUMBER.name],
            state=f"Round {self.round} of {self.rounds}, guesses so far: {self.guesses}",
            priority=ForcePriority.LOW,
        )

    def handle_action(self, action: ActionData) -> None:
        if action.name != GUESS_NUMBER.name:
            return
        number = action.params["number"]
        self.guesses += 1
        if number == self.secret:
            self.client.send_action_result(action.id, True, f"{number} is correct!")
            self.client.send_context(
                f"Round {self.round} won after {self.guesses} guess(es).", silent=False
            )
            if self.round >= self.rounds:
                self.finish()
            else:
                self.next_round()
            return
        hint = "higher" if number < self.secret else "lower"
        self.client.send_action_result(action.id, True, f"{number} is wrong, the number is {hint}.")
        self.force_guess()

    def finish(self) -> None:
        self.client.unregister_actions([GUESS_NUMBER.name])
        self.client.disconnect()
