"""
UI output management with color-coded terminal output.
All user-facing confirmations and error lines go through UIManager.
"""

import os
import sys
from typing import Optional, TextIO


TEXT_COLOR_MAPPING = {
    "blue": "36;1",
    "yellow": "33;1",
    "green": "32;1",
    "red": "31;1",
}


def get_colored_text(text: str, color: str) -> str:
    """
    Get colored text.

    Raises:
        ValueError: If the specified color is not supported
    """
    if color not in TEXT_COLOR_MAPPING:
        raise ValueError(
            f"Unsupported color: {color}. Available colors: {', '.join(TEXT_COLOR_MAPPING.keys())}"
        )

    color_str = TEXT_COLOR_MAPPING[color]
    return f"\u001b[{color_str}m{text}\u001b[0m"


class UIManager:
    """Manages colored terminal output for joker."""

    def __init__(self, color: Optional[bool] = None):
        """
        Initialize UI manager.

        Args:
            color: Force colors on/off. Defaults to on unless NO_COLOR is set.
        """
        if color is None:
            color = "NO_COLOR" not in os.environ
        self.color = color

    def success(self, message: str) -> None:
        """Print success message in green."""
        self._print_colored(message, "green")

    def error(self, message: str) -> None:
        """Print error message in red on stderr."""
        self._print_colored(message, "red", file=sys.stderr)

    def warning(self, message: str) -> None:
        """Print warning message in yellow."""
        self._print_colored(message, "yellow")

    def info(self, message: str) -> None:
        """Print info message in blue."""
        self._print_colored(message, "blue")

    def _print_colored(
        self,
        text: str,
        color: str,
        end: str = "\n",
        file: Optional[TextIO] = None
    ) -> None:
        if self.color:
            try:
                text = get_colored_text(text, color)
            except ValueError:
                # Fall back to plain text if color is invalid
                pass

        print(text, end=end, file=file)
        if file:
            file.flush()
