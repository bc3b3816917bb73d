from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from PySide6.QtGui import QUndoCommand, QUndoStack

from extcontrol.services.settings_model import DataModel


@dataclass(frozen=True)
class ParameterChange:
    """One undoable unit of work: ordered key writes applied together."""

    label: str
    writes: tuple[tuple[str, Any], ...] = field(default_factory=tuple)

    @classmethod
    def single(cls, key: str, value: Any, label: str | None = None) -> "ParameterChange":
        return cls(label=label or f"Set {key}", writes=((key, value),))

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(key for key, _value in self.writes)


class _ParameterChangeCommand(QUndoCommand):
    def __init__(self, model: DataModel, change: ParameterChange) -> None:
        super().__init__(change.label)
        self.model = model
        self.change = change
        self._previous: list[tuple[str, bool, Any]] | None = None

    def redo(self) -> None:
        if self._previous is None:
            self._previous = [
                (key, self.model.contains(key), self.model.get(key, None))
                for key in self.change.keys
            ]
        for key, value in self.change.writes:
            self.model.set(key, value)

    def undo(self) -> None:
        for key, existed, value in reversed(self._previous or []):
            if existed:
                self.model.set(key, value)
            else:
                self.model.remove(key)


class UndoRedoManager:
    """Records parameter changes on a QUndoStack bound to one data model."""

    def __init__(
        self,
        model: DataModel,
        stack: QUndoStack | None = None,
        *,
        undo_limit: int = 0,
    ) -> None:
        self.model = model
        self.stack = stack or QUndoStack()
        if undo_limit > 0:
            self.stack.setUndoLimit(undo_limit)

    def record_changes(self, change: ParameterChange) -> None:
        # push() runs redo() immediately, so the writes land before this returns.
        self.stack.push(_ParameterChangeCommand(self.model, change))

    def undo(self) -> bool:
        if not self.stack.canUndo():
            return False
        self.stack.undo()
        return True

    def redo(self) -> bool:
        if not self.stack.canRedo():
            return False
        self.stack.redo()
        return True

    def can_undo(self) -> bool:
        return self.stack.canUndo()

    def can_redo(self) -> bool:
        return self.stack.canRedo()

    def count(self) -> int:
        return self.stack.count()

    def labels(self) -> list[str]:
        return [self.stack.text(index) for index in range(self.stack.count())]

    def clear(self) -> None:
        self.stack.clear()
