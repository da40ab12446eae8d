"""
Quiz session controller: the command interpreter for one channel.
"""
import logging
import random
import time
from typing import Awaitable, Callable, Dict, Optional

from rich.text import Text

from .channel import Channel, SessionClosed
from .errors import NotFound, QuizError, ValidationFailed, classify_error
from .id_validator import parse_id
from .models import CommandLine, QuizRecord
from .output import OutputSink
from .prompter import QuestionPrompter
from .quiz_engine import QuizEngine
from .quiz_store import QuizStore

CommandHandler = Callable[[Optional[str]], Awaitable[None]]


class QuizController:
    """
    Reads command lines from a channel and runs the matching command.

    One controller serves exactly one session. The command loop in ``run``
    is the only place the command prompt is issued, so every command,
    whether it succeeds or fails, is followed by exactly one new prompt.
    """

    PROMPT = "quiz > "

    HELP_LINES = [
        "Commands:",
        "  h|help - Show this help.",
        "  list - List the existing quizzes.",
        "  show <id> - Show the question and the answer of the quiz.",
        "  add - Add a new quiz interactively.",
        "  delete <id> - Delete the quiz.",
        "  edit <id> - Edit the quiz.",
        "  test <id> - Try out the quiz.",
        "  p|play - Play: answer every quiz in random order.",
        "  credits - Credits.",
        "  q|quit - Leave the program.",
    ]

    CREDITS_LINES = [
        ("Trivia Quiz", "bold green"),
        ("A line oriented quiz game for terminals and TCP clients.", None),
        ("Written by the trivia-quiz contributors.", "green"),
    ]

    def __init__(
        self,
        store: QuizStore,
        channel: Channel,
        output: Optional[OutputSink] = None,
        rng: Optional[random.Random] = None,
        session_id: Optional[str] = None
    ):
        """
        Initialize the controller for one session.

        Args:
            store: Shared quiz store
            channel: The session's channel
            output: Output sink for the channel, a default one if None
            rng: Random source for play mode
            session_id: Name used in logs, the channel name if None
        """
        self.logger = logging.getLogger(__name__)
        self.store = store
        self.channel = channel
        self.session_id = session_id or channel.name
        self.output = output or OutputSink(channel)
        self.prompter = QuestionPrompter(channel)
        self.quiz_engine = QuizEngine(store, self.prompter, self.output, rng, self.session_id)
        self._running = False

        self._commands: Dict[str, CommandHandler] = {
            "h": self.help_command,
            "help": self.help_command,
            "list": self.list_command,
            "show": self.show_command,
            "add": self.add_command,
            "delete": self.delete_command,
            "edit": self.edit_command,
            "test": self.test_command,
            "p": self.play_command,
            "play": self.play_command,
            "credits": self.credits_command,
            "q": self.quit_command,
            "quit": self.quit_command,
        }

    @property
    def is_running(self) -> bool:
        return self._running

    async def run(self) -> None:
        """Run the command loop until the user quits or the channel closes."""
        self._running = True
        started = time.time()
        self.logger.info(
            f"Session {self.session_id} started",
            extra={'event_type': 'session_started', 'session_id': self.session_id}
        )
        self.output.write_banner("Trivia Quiz", "green")

        try:
            while self._running:
                try:
                    line = await self.prompter.ask(self.output.colorize(self.PROMPT, "blue"))
                except SessionClosed:
                    break
                await self.dispatch(line)
        finally:
            self._running = False
            self.logger.info(
                f"Session {self.session_id} ended after {time.time() - started:.1f}s",
                extra={'event_type': 'session_ended', 'session_id': self.session_id}
            )

    async def dispatch(self, line: str) -> None:
        """
        Run one command line. Recoverable errors are reported on the channel.

        Unknown keywords show the help text; a blank line does nothing.
        """
        command = CommandLine.parse(line)
        if not command.keyword:
            return

        handler = self._commands.get(command.keyword, self.help_command)
        self.logger.debug(
            f"Session {self.session_id} dispatching '{command.keyword}'",
            extra={
                'event_type': 'command_dispatched',
                'session_id': self.session_id,
                'command': command.keyword,
                'argument': command.argument,
            }
        )

        try:
            await handler(command.argument)
        except SessionClosed:
            self.logger.info(f"Channel closed during '{command.keyword}' in session {self.session_id}")
            self._running = False
        except Exception as e:
            self._report_error(classify_error(e, command.keyword))

    def _report_error(self, error: QuizError) -> None:
        self.output.write_error(error.user_message)
        if isinstance(error, ValidationFailed):
            for field_name, message in error.messages.items():
                self.output.write_line(f"  {field_name}: {message}", "red")

    async def _fetch(self, quiz_id: int) -> QuizRecord:
        record = await self.store.get_by_id(quiz_id)
        if record is None:
            raise NotFound(quiz_id)
        return record

    def _record_line(self, record: QuizRecord, prefix: str = " ") -> Text:
        return Text.assemble(
            prefix, "[", (str(record.id), "magenta"), "]: ",
            record.question, " ", ("=>", "magenta"), " ", record.answer
        )

    async def help_command(self, argument: Optional[str] = None) -> None:
        for line in self.HELP_LINES:
            self.output.write_line(line)

    async def list_command(self, argument: Optional[str] = None) -> None:
        records = await self.store.list_all()
        if not records:
            self.output.write_line("There are no quizzes yet. Use 'add' to create one.", "yellow")
        for record in records:
            self.output.write_line(Text.assemble(
                " [", (str(record.id), "magenta"), "]: ", record.question
            ))

    async def show_command(self, argument: Optional[str] = None) -> None:
        record = await self._fetch(parse_id(argument))
        self.output.write_line(self._record_line(record))

    async def add_command(self, argument: Optional[str] = None) -> None:
        question = await self.prompter.ask(self.output.colorize(" Enter a question: ", "red"))
        answer = await self.prompter.ask(self.output.colorize(" Enter the answer: ", "red"))
        record = await self.store.create(question, answer)
        self.output.write_line(self._record_line(record, prefix=" Added "))

    async def delete_command(self, argument: Optional[str] = None) -> None:
        quiz_id = parse_id(argument)
        if await self.store.delete_by_id(quiz_id):
            self.output.write_line(Text.assemble(" Deleted quiz [", (str(quiz_id), "magenta"), "]"))
        else:
            self.output.write_line(f" Quiz [{quiz_id}] does not exist, nothing deleted.", "yellow")

    async def edit_command(self, argument: Optional[str] = None) -> None:
        record = await self._fetch(parse_id(argument))
        question = await self.prompter.ask(
            self.output.colorize(" Enter a question: ", "red"), prefill=record.question
        )
        answer = await self.prompter.ask(
            self.output.colorize(" Enter the answer: ", "red"), prefill=record.answer
        )
        updated = await self.store.update(record.id, question, answer)
        self.output.write_line(self._record_line(updated, prefix=" Changed quiz "))

    async def test_command(self, argument: Optional[str] = None) -> None:
        record = await self._fetch(parse_id(argument))
        answer = await self.prompter.ask(self.output.colorize(f"{record.question}? ", "yellow"))
        if answer == record.answer:
            self.output.write_banner("Correct", "green")
        else:
            self.output.write_banner("Incorrect", "red")

    async def play_command(self, argument: Optional[str] = None) -> None:
        await self.quiz_engine.play()

    async def credits_command(self, argument: Optional[str] = None) -> None:
        for text, style in self.CREDITS_LINES:
            self.output.write_line(text, style)

    async def quit_command(self, argument: Optional[str] = None) -> None:
        self.output.write_line("Goodbye!", "green")
        self._running = False
        await self.channel.close()
