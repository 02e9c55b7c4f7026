from __future__ import annotations

from typing import Iterator
import pygame


def hstack(rect: pygame.Rect, count: int, margin: int = 4) -> Iterator[pygame.Rect]:
    """Split rect into `count` equal columns separated by `margin` pixels."""
    if count <= 0:
        return
    width = (rect.width - margin * (count - 1)) // count
    for i in range(count):
        yield pygame.Rect(rect.x + i * (width + margin), rect.y, width, rect.height)
