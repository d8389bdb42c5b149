"""Content providers: fill in the text lines of newly created vertices.

A content provider is any object with a `provide(vertex)` method. The graph
calls it once for each vertex, when the vertex is created.
"""

__all__ = ["ContentProvider", "StaticContentProvider", "DebugContentProvider"]

import random
from typing import List, Optional, Sequence, Tuple

from .constants import Color, hex_to_color


class ContentProvider:
    """Base class for content providers. The base class provides no content."""

    def provide(self, vertex) -> None:
        """Override this in a derived class to populate `vertex.lines`."""


class StaticContentProvider(ContentProvider):
    """Give every vertex the same lines.

    `lines`: Sequence of lines; each line is a sequence of `(text, color)` pairs.
    """

    def __init__(self, lines: Sequence[Sequence[Tuple[str, Color]]]):
        self.lines = [list(line) for line in lines]

    def provide(self, vertex) -> None:
        for runs in self.lines:
            line = vertex.add_line()
            for text, color in runs:
                line.add(text, color)


# Fake bytecode listing, to exercise the renderers with realistic-looking content.
_instructions = ["MOVE", "LOADK", "LOADBOOL", "LOADNIL", "GETUPVAL", "GETGLOBAL",
                 "GETTABLE", "SETGLOBAL", "SETUPVAL", "SETTABLE", "NEWTABLE", "SELF",
                 "ADD", "SUB", "MUL", "DIV", "MOD", "POW", "UNM", "NOT", "LEN", "CONCAT",
                 "JMP", "EQ", "LT", "LE", "TEST", "TESTSET", "CALL", "TAILCALL", "RETURN",
                 "FORLOOP", "FORPREP", "TFORLOOP", "SETLIST", "CLOSE", "CLOSURE", "VARARG"]
_highlighted_instructions = {"LOADK", "FORPREP"}

class DebugContentProvider(ContentProvider):
    """Generate a random bytecode-like listing for each vertex.

    Each line reads "ADDR  INSTRUCTION  a b [c]", with the address, the instruction
    and the operands each in their own color.

    `seed`: Random seed, for reproducible content.
    `min_lines`, `max_lines`: Range for the number of lines per vertex (inclusive).
    """

    address_color = hex_to_color("#9b9b9b")
    instruction_color = hex_to_color("#b686c1")
    highlighted_instruction_color = hex_to_color("#ad9764")
    operand_color = hex_to_color("#3faab5")

    def __init__(self, seed: Optional[int] = None, min_lines: int = 1, max_lines: int = 10):
        if not (1 <= min_lines <= max_lines):
            raise ValueError(f"DebugContentProvider: need 1 <= min_lines <= max_lines, got {min_lines}, {max_lines}")
        self.rng = random.Random(seed)
        self.min_lines = min_lines
        self.max_lines = max_lines
        self.address = 0

    def provide(self, vertex) -> None:
        for _ in range(self.rng.randint(self.min_lines, self.max_lines)):
            instruction = self.rng.choice(_instructions)
            color = self.highlighted_instruction_color if instruction in _highlighted_instructions else self.instruction_color
            operands: List[str] = [str(self.rng.randrange(256)) for _ in range(self.rng.randint(2, 3))]
            line = vertex.add_line()
            line.add(f"{self.address:04X}  ", self.address_color)
            line.add(f"{instruction:<10}", color)
            line.add(" ".join(operands), self.operand_color)
            self.address += 4
