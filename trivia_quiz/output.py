"""
Output sink that renders quiz text with Rich and writes it to a channel.
"""
from typing import Optional, Union

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .channel import Channel

Renderable = Union[str, Text]


class OutputSink:
    """Writes plain, styled, error and banner lines to the active channel."""

    DEFAULT_WIDTH = 80

    def __init__(self, channel: Channel, color: bool = True, width: int = DEFAULT_WIDTH):
        self.channel = channel
        self.color = color
        self.width = width

    def _console(self) -> Console:
        # force_terminal keeps ANSI styles even when the target is a socket
        return Console(
            force_terminal=self.color,
            no_color=not self.color,
            color_system="standard" if self.color else None,
            width=self.width,
            highlight=False,
            emoji=False,
        )

    def _render(self, renderable, end: str = "\n", soft_wrap: bool = True) -> str:
        # Stored text is never wrapped; only banners are laid out to the width
        console = self._console()
        with console.capture() as capture:
            console.print(renderable, end=end, soft_wrap=soft_wrap)
        return capture.get()

    def colorize(self, text: str, style: Optional[str] = None) -> str:
        """Return text with ANSI styling applied, for use in prompts."""
        if not style or not self.color:
            return text
        # Rich trims trailing whitespace past the width, so keep it unstyled
        body = text.rstrip()
        return self._render(Text(body, style=style), end="") + text[len(body):]

    def write_line(self, text: Renderable = "", style: Optional[str] = None) -> None:
        """
        Write one line.

        Plain strings are written literally, never interpreted as markup.
        """
        if isinstance(text, Text):
            line = text.copy()
            if style:
                line.stylize(style)
        else:
            line = Text(str(text), style=style or "")
        self.channel.write(self._render(line))

    def write_banner(self, text: str, style: Optional[str] = None) -> None:
        """Write large celebratory or failure text inside a double border."""
        banner_style = f"bold {style}" if style else "bold"
        panel = Panel(
            Text(text.upper(), style=banner_style, justify="center"),
            box=box.DOUBLE,
            border_style=style or "",
            expand=False,
            padding=(1, 6),
        )
        self.channel.write(self._render(panel, soft_wrap=False))

    def write_error(self, message: str) -> None:
        self.write_line(Text.assemble(("Error", "red"), ": ", (message, "bold yellow")))
