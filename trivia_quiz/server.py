"""
Session bootstrap: a TCP server with one quiz session per connection, and
the local console session.
"""
import asyncio
import logging
import random
from typing import Dict, List, Optional

from .channel import ConsoleChannel, StreamChannel
from .config_manager import ConfigManager
from .output import OutputSink
from .quiz_controller import QuizController
from .quiz_store import QuizStore

logger = logging.getLogger(__name__)


class QuizServer:
    """
    Accepts remote connections and runs one QuizController per connection.

    A failure inside one session is logged and closes that connection only;
    the listener and the other sessions keep running.
    """

    def __init__(
        self,
        store: QuizStore,
        config_manager: ConfigManager,
        rng: Optional[random.Random] = None
    ):
        self.store = store
        self.config_manager = config_manager
        self.rng = rng
        self._server: Optional[asyncio.AbstractServer] = None

        # Active sessions mapped by peer name
        self._active_sessions: Dict[str, QuizController] = {}

    async def start(self) -> None:
        """Start listening on the configured host and port."""
        host = self.config_manager.get_host()
        port = self.config_manager.get_port()
        self._server = await asyncio.start_server(self.handle_connection, host, port)
        logger.info(
            f"Quiz server listening on {', '.join(self.addresses)}",
            extra={'event_type': 'server_started', 'host': host, 'port': port}
        )

    @property
    def addresses(self) -> List[str]:
        if self._server is None:
            return []
        return [f"{sock.getsockname()[0]}:{sock.getsockname()[1]}" for sock in self._server.sockets]

    @property
    def port(self) -> Optional[int]:
        """The bound port, useful when the configured port was 0."""
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    def get_active_sessions(self) -> List[str]:
        return list(self._active_sessions.keys())

    async def handle_connection(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter
    ) -> None:
        """Run a quiz session for one accepted connection."""
        channel = StreamChannel(reader, writer)
        output = OutputSink(
            channel,
            color=self.config_manager.get_color(),
            width=self.config_manager.get_width(),
        )
        controller = QuizController(self.store, channel, output, self.rng)
        self._active_sessions[channel.name] = controller
        logger.info(
            f"Accepted connection from {channel.name} ({len(self._active_sessions)} active)",
            extra={'event_type': 'connection_accepted', 'session_id': channel.name}
        )

        try:
            await controller.run()
        except Exception:
            logger.exception(f"Session {channel.name} crashed")
        finally:
            self._active_sessions.pop(channel.name, None)
            await channel.close()
            logger.info(
                f"Closed connection from {channel.name}",
                extra={'event_type': 'connection_closed', 'session_id': channel.name}
            )

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        async with self._server:
            await self._server.serve_forever()

    async def close(self) -> None:
        """Stop accepting connections and wait for the listener to shut down."""
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        logger.info("Quiz server stopped", extra={'event_type': 'server_stopped'})


async def run_local_session(store: QuizStore, config_manager: ConfigManager) -> None:
    """Run one quiz session on the local terminal."""
    channel = ConsoleChannel()
    output = OutputSink(
        channel,
        color=config_manager.get_color(),
        width=config_manager.get_width(),
    )
    controller = QuizController(store, channel, output)
    try:
        await controller.run()
    finally:
        await channel.close()
