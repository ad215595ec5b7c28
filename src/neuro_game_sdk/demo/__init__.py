from .guess_number import GUESS_NUMBER, GuessNumberGame

__all__ = ["GUESS_NUMBER", "GuessNumberGame"]
