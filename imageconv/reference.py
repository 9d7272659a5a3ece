"""Handle for an image loaded into a handler."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

_ids = itertools.count(1)


def next_reference_id() -> str:
    return f"img-{next(_ids)}"


@dataclass(eq=False)
class ImageReference:
    """An image loaded by one handler.

    The handler keeps the decoded pixels; the reference only carries what a
    caller may look at. Width, height and MIME type follow every filter and
    conversion applied through the owning handler.
    """

    handler_name: str
    path: str
    mime: str
    width: int
    height: int
    id: str = field(default_factory=next_reference_id)
    closed: bool = False

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{self.width}x{self.height} {self.mime}"
        return f"<ImageReference {self.id} of {self.handler_name!r}: {state}>"
