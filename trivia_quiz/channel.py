"""
Line oriented channels a quiz session reads from and writes to.
"""
import asyncio
import logging
import sys
from typing import Optional, TextIO

try:
    import readline
except ImportError:  # not available on Windows; prefill falls back to a hint
    readline = None

logger = logging.getLogger(__name__)


class SessionClosed(Exception):
    """Raised when the channel goes away while a prompt is pending."""
    pass


class Channel:
    """
    Bidirectional text stream owned by one session.

    Subclasses implement ``write`` and ``_read``. ``read_line`` returns None
    once the channel is closed, whether by the peer or by ``close``.
    """

    # Channels that can put text into the user's edit buffer
    supports_prefill = False

    def __init__(self, name: str):
        self.name = name
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, text: str) -> None:
        raise NotImplementedError

    async def _read(self, prompt: str, prefill: Optional[str]) -> Optional[str]:
        raise NotImplementedError

    async def read_line(self, prompt: str, prefill: Optional[str] = None) -> Optional[str]:
        """
        Show a prompt and wait for one line of input.

        Args:
            prompt: Text written before waiting, without a newline
            prefill: Current value offered for editing, if any

        Returns:
            The line without its terminator, or None if the channel closed
        """
        if self._closed:
            return None

        hinted = prefill is not None and not self.supports_prefill
        if hinted:
            prompt = f"{prompt}[{prefill}] "

        line = await self._read(prompt, prefill)
        if line is None:
            logger.debug(f"Channel {self.name} reached end of input")
            self._closed = True
            return None

        if hinted and not line.strip():
            return prefill
        return line

    async def close(self) -> None:
        self._closed = True


class ConsoleChannel(Channel):
    """Channel bound to the local terminal."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        super().__init__("console")
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.supports_prefill = readline is not None and self.stdin.isatty()

    def write(self, text: str) -> None:
        if self._closed:
            return
        self.stdout.write(text)
        self.stdout.flush()

    async def _read(self, prompt: str, prefill: Optional[str]) -> Optional[str]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._blocking_read, prompt, prefill)

    def _blocking_read(self, prompt: str, prefill: Optional[str]) -> Optional[str]:
        if self.stdin is not sys.stdin:
            self.stdout.write(prompt)
            self.stdout.flush()
            line = self.stdin.readline()
            return line.rstrip("\r\n") if line else None

        if prefill is not None and self.supports_prefill:
            readline.set_startup_hook(lambda: readline.insert_text(prefill))
        try:
            return input(prompt)
        except EOFError:
            return None
        finally:
            if readline is not None and self.supports_prefill:
                readline.set_startup_hook()


class StreamChannel(Channel):
    """Channel bound to a remote connection accepted by the server."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        peer = writer.get_extra_info('peername')
        if isinstance(peer, tuple) and len(peer) >= 2:
            name = f"{peer[0]}:{peer[1]}"
        else:
            name = str(peer or "remote")
        super().__init__(name)
        self.reader = reader
        self.writer = writer

    def write(self, text: str) -> None:
        if self._closed or self.writer.is_closing():
            return
        self.writer.write(text.encode('utf-8'))

    async def _read(self, prompt: str, prefill: Optional[str]) -> Optional[str]:
        self.write(prompt)
        try:
            await self.writer.drain()
            raw = await self.reader.readline()
        except ConnectionError as e:
            logger.info(f"Connection {self.name} lost: {e}")
            return None
        except (ValueError, asyncio.LimitOverrunError) as e:
            # the rest of an oversized line cannot be resynchronised
            logger.warning(f"Connection {self.name} sent a line over the read limit: {e}")
            self.write("Error: Line too long, closing the session.\n")
            return None
        if not raw:
            return None
        return raw.decode('utf-8', errors='replace').rstrip("\r\n")

    async def close(self) -> None:
        if self._closed and self.writer.is_closing():
            return
        self._closed = True
        try:
            await self.writer.drain()
        except ConnectionError:
            logger.debug(f"Connection {self.name} dropped before final flush")
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except ConnectionError:
            logger.debug(f"Connection {self.name} reset while closing")
