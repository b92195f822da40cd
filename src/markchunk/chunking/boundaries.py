"""
Boundary helpers shared by the splitting stages.
"""

import re
from typing import List, Optional, Sequence

from ..core.models import SplitOptions
from .models import CodeFence


def normalize_text(text: str) -> str:
    """Normalize line endings CRLF -> LF. Offsets refer to the result."""
    return re.sub(r"\r\n", "\n", text)


def protected_fence(position: int, fences: Sequence[CodeFence]) -> Optional[CodeFence]:
    """Return the non-breakable fence strictly containing ``position``, if any."""
    for fence in fences:
        if fence.start < position < fence.end and not fence.breakable:
            return fence
    return None


def can_break_at(position: int, fences: Sequence[CodeFence]) -> bool:
    return protected_fence(position, fences) is None


def guarded_fences(fences: Sequence[CodeFence], options: SplitOptions) -> List[CodeFence]:
    """Fences the planner, merger and assembler must respect.

    With ``preserve_code_blocks`` off nothing is protected.
    """
    if not options.preserve_code_blocks:
        return []
    return list(fences)
