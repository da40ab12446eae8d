"""
Core data models for the trivia quiz.
"""
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, Iterable, Optional


@dataclass(frozen=True)
class QuizRecord:
    """Represents a single stored question/answer pair."""
    id: int
    question: str
    answer: str

    def to_dict(self) -> dict:
        return {"id": self.id, "question": self.question, "answer": self.answer}


@dataclass(frozen=True)
class CommandLine:
    """A typed command line split into keyword and optional argument."""
    keyword: str
    argument: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> "CommandLine":
        """
        Split a raw input line into a lower-cased keyword and one argument.

        Tokens after the first argument are ignored.
        """
        tokens = (raw or "").split()
        if not tokens:
            return cls("")
        argument = tokens[1] if len(tokens) > 1 else None
        return cls(tokens[0].lower(), argument)


class GameState(Enum):
    """Enumeration of play mode states."""
    DRAWING = "drawing"
    AWAITING = "awaiting"
    SCORING = "scoring"
    FINISHED = "finished"


class InvalidGameTransition(Exception):
    """Raised when a game transition is requested from the wrong state."""
    pass


@dataclass(frozen=True)
class GameSession:
    """
    Immutable snapshot of a play mode game.

    Every transition returns a new GameSession; the old value is left
    untouched. ``remaining`` never contains ``current_id`` once a question
    has been drawn.
    """
    remaining: FrozenSet[int]
    score: int = 0
    state: GameState = GameState.DRAWING
    current_id: Optional[int] = None
    last_correct: Optional[bool] = None
    asked: int = 0
    missed: bool = False

    @classmethod
    def start(cls, quiz_ids: Iterable[int]) -> "GameSession":
        """Create a game over the given ids, finished at once if there are none."""
        remaining = frozenset(quiz_ids)
        if not remaining:
            return cls(remaining=remaining, state=GameState.FINISHED)
        return cls(remaining=remaining)

    @property
    def is_finished(self) -> bool:
        return self.state is GameState.FINISHED

    @property
    def won(self) -> bool:
        """True when the game finished with every asked question answered correctly."""
        return self.is_finished and self.score > 0 and not self.missed

    def _require(self, expected: GameState, transition: str) -> None:
        if self.state is not expected:
            raise InvalidGameTransition(
                f"Cannot {transition} while game is {self.state.value}"
            )

    def draw(self, rng: Optional[random.Random] = None) -> "GameSession":
        """Pick the next id uniformly from the remaining set and remove it."""
        self._require(GameState.DRAWING, "draw")
        chooser = rng or random
        # sorted() keeps a seeded generator reproducible across runs
        chosen = chooser.choice(sorted(self.remaining))
        return replace(
            self,
            remaining=self.remaining - {chosen},
            state=GameState.AWAITING,
            current_id=chosen,
            last_correct=None,
            asked=self.asked + 1,
        )

    def skip(self) -> "GameSession":
        """Drop the outstanding question without scoring it."""
        self._require(GameState.AWAITING, "skip")
        next_state = GameState.DRAWING if self.remaining else GameState.FINISHED
        return replace(self, state=next_state, current_id=None, asked=self.asked - 1)

    def receive_answer(self, given: str, expected: str) -> "GameSession":
        """Record whether the trimmed answer matches the stored answer exactly."""
        self._require(GameState.AWAITING, "receive an answer")
        return replace(self, state=GameState.SCORING, last_correct=given == expected)

    def advance(self) -> "GameSession":
        """Apply the scored answer and move on to the next draw or finish."""
        self._require(GameState.SCORING, "advance")
        if not self.last_correct:
            return replace(self, state=GameState.FINISHED, missed=True)
        score = self.score + 1
        next_state = GameState.DRAWING if self.remaining else GameState.FINISHED
        return replace(self, score=score, state=next_state)
