from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    """Ordered output lines and exit code of one command run in the privileged session."""

    command: str
    lines: tuple[str, ...]
    code: int

    @property
    def succeeded(self) -> bool:
        return self.code == 0

    @property
    def output(self) -> str:
        return "".join(self.lines)
