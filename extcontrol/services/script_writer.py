from __future__ import annotations


class ScriptWriter:
    """Accumulates raw robot-script text in append order."""

    def __init__(self) -> None:
        self._chunks: list[str] = []

    def append_raw(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"Script text must be a string, got {type(text).__name__}.")
        self._chunks.append(text)

    def append_line(self, line: str = "") -> None:
        self.append_raw(f"{line}\n")

    def get_script(self) -> str:
        return "".join(self._chunks)
