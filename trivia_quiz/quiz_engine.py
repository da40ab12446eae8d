"""
Quiz engine core logic: the randomized "play all" game.
"""
import logging
import random
from typing import Optional

from rich.text import Text

from .models import GameSession
from .output import OutputSink
from .prompter import QuestionPrompter
from .quiz_store import QuizStore

logger = logging.getLogger(__name__)


class QuizEngine:
    """
    Runs play mode: every quiz is asked once, in random order, until all
    are answered or one answer is wrong.
    """

    def __init__(
        self,
        store: QuizStore,
        prompter: QuestionPrompter,
        output: OutputSink,
        rng: Optional[random.Random] = None,
        session_id: str = "local"
    ):
        self.store = store
        self.prompter = prompter
        self.output = output
        self.rng = rng or random.Random()
        self.session_id = session_id

    async def play(self) -> GameSession:
        """
        Play one game to completion.

        Returns:
            The finished GameSession

        Raises:
            SessionClosed: If the channel closes mid game; no result is reported
        """
        records = await self.store.list_all()
        game = GameSession.start(record.id for record in records)
        self._log_transition(None, game, f"{len(records)} quizzes available")

        if game.is_finished:
            self.output.write_line("There are no quizzes to ask.", "yellow")
            self._report(game)
            return game

        while not game.is_finished:
            game = self._transition(game, game.draw(self.rng))
            record = await self.store.get_by_id(game.current_id)
            if record is None:
                logger.warning(
                    f"Quiz {game.current_id} disappeared during play in session {self.session_id}"
                )
                game = self._transition(game, game.skip())
                continue

            prompt = self.output.colorize(f"{record.question}? ", "magenta")
            answer = await self.prompter.ask(prompt)
            game = self._transition(game, game.receive_answer(answer, record.answer))

            if game.last_correct:
                self.output.write_line(Text.assemble(
                    "Correct answer. Right so far: ", (str(game.score + 1), "green")
                ))
            else:
                self.output.write_line(Text.assemble(
                    "Wrong answer. Right so far: ", (str(game.score), "red")
                ))
            game = self._transition(game, game.advance())

        self._report(game)
        return game

    def _report(self, game: GameSession) -> None:
        if game.won:
            self.output.write_banner("You win!", "green")
        elif game.missed:
            self.output.write_banner("Game over", "red")
        self.output.write_line(Text.assemble(
            ("Final score: ", "yellow"), (str(game.score), "bold yellow")
        ))
        logger.info(
            f"Game finished in session {self.session_id} with score {game.score}",
            extra={
                'event_type': 'game_finished',
                'session_id': self.session_id,
                'score': game.score,
                'won': game.won,
            }
        )

    def _transition(self, before: GameSession, after: GameSession) -> GameSession:
        self._log_transition(before, after)
        return after

    def _log_transition(
        self,
        before: Optional[GameSession],
        after: GameSession,
        reason: Optional[str] = None
    ) -> None:
        from_state = before.state.value if before else "new"
        logger.debug(
            f"Game {self.session_id}: {from_state} -> {after.state.value}"
            + (f" ({reason})" if reason else ""),
            extra={
                'event_type': 'game_state_transition',
                'session_id': self.session_id,
                'from_state': from_state,
                'to_state': after.state.value,
                'current_id': after.current_id,
                'remaining': len(after.remaining),
            }
        )
