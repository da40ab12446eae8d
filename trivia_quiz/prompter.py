"""
Question prompter: the one place a session waits for its user.
"""
from typing import Optional

from .channel import Channel, SessionClosed


class QuestionPrompter:
    """Asks one question at a time over a channel."""

    def __init__(self, channel: Channel):
        self.channel = channel

    async def ask(self, prompt: str, prefill: Optional[str] = None) -> str:
        """
        Ask a question and wait for the answer.

        Args:
            prompt: Question text shown to the user
            prefill: Current value offered for editing, if any

        Returns:
            The answer stripped of surrounding whitespace

        Raises:
            SessionClosed: If the channel closed before an answer arrived
        """
        line = await self.channel.read_line(prompt, prefill)
        if line is None:
            raise SessionClosed(self.channel.name)
        return line.strip()
