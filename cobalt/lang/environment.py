"""Scope frames for the Cobalt evaluator.

Frames live in an arena and are addressed by index. Each frame stores the index of its enclosing frame; no frame ever
refers to its children. Blocks nest strictly, so frames are created and released in LIFO order and the arena is just a
stack whose top is the innermost live scope.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from cobalt.lang.error import CobaltRuntimeError
from cobalt.lang.values import Value

NIL_TO_NON_NULLABLE = "Assignment of nil to non-nullable type."


@dataclass
class Binding:
    value: Value
    nullable: bool = False


@dataclass
class Frame:
    parent: Optional[int]
    bindings: Dict[str, Binding] = field(default_factory=dict)


class Environment:
    """Arena of scope frames. Frame 0 is the root (global) scope and is never released."""
    ROOT = 0

    def __init__(self):
        self.frames = [Frame(None)]

    def push(self, parent):
        """Creates a frame enclosed by parent and returns its index."""
        self.frames.append(Frame(parent))
        return len(self.frames) - 1

    def release(self, index):
        """Drops frame index, which must be the most recently pushed live frame."""
        if index == Environment.ROOT or index != len(self.frames) - 1:
            raise ValueError(f"frame {index} is not the innermost frame")
        self.frames.pop()

    def chain(self, index):
        """Yields frames from index outwards to the root."""
        while index is not None:
            frame = self.frames[index]
            yield frame
            index = frame.parent

    def define(self, index, name, value, nullable=False):
        """Binds name in frame index, shadowing (or replacing) any previous binding of name in that frame."""
        self.frames[index].bindings[name] = Binding(value, nullable)

    def resolve(self, index, name):
        """Returns the innermost Binding of name visible from frame index, or None."""
        for frame in self.chain(index):
            if name in frame.bindings:
                return frame.bindings[name]
        return None

    def get(self, index, name):
        """Value of the name token as seen from frame index."""
        binding = self.resolve(index, name.lexeme)
        if binding is None:
            raise CobaltRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        return binding.value

    def assign(self, index, name, value):
        """Rebinds the nearest existing binding of the name token. Never creates a binding."""
        binding = self.resolve(index, name.lexeme)
        if binding is None:
            raise CobaltRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        if value is None and not binding.nullable:
            raise CobaltRuntimeError(name, NIL_TO_NON_NULLABLE)
        binding.value = value

    def is_nullable(self, index, name):
        binding = self.resolve(index, name)
        return binding is not None and binding.nullable

    def __len__(self):
        return len(self.frames)
