import subprocess
from typing import Optional

from ferret.shared.settings import default_open_command


class CommandOpener:
    """Opens a link by running ``<command> <link>`` with its output discarded.

    Failures surface as the subprocess exception: CalledProcessError for a
    non-zero exit, OSError when the command cannot be started.
    """

    def __init__(self, command: Optional[str] = None):
        self.command = command or default_open_command()

    def __call__(self, link: str) -> None:
        subprocess.run(
            [self.command, link],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
        )

    def __repr__(self) -> str:
        return f"CommandOpener(command={self.command!r})"
