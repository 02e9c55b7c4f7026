from __future__ import annotations

from typing import Callable, List, Optional, Tuple
import pygame

TEXT_COLOR: Tuple[int, int, int] = (235, 235, 235)
MUTED_TEXT_COLOR: Tuple[int, int, int] = (150, 150, 170)
BORDER_COLOR: Tuple[int, int, int] = (20, 20, 20)

MenuItem = Tuple[str, Callable[[], None]]


class Button:
    def __init__(
        self,
        rect: pygame.Rect,
        text: str,
        font: pygame.font.Font,
        on_click: Callable[[], None],
    ) -> None:
        self.rect = rect
        self.text = text
        self.font = font
        self.on_click = on_click
        self.hover: bool = False
        # toggled tools and options draw highlighted
        self.selected: bool = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()

    def draw(self, surface: pygame.Surface) -> None:
        if self.selected:
            color = (60, 110, 70)
        elif self.hover:
            color = (100, 100, 120)
        else:
            color = (70, 70, 80)

        pygame.draw.rect(surface, color, self.rect, border_radius=4)
        pygame.draw.rect(surface, BORDER_COLOR, self.rect, 1, border_radius=4)

        text_surf = self.font.render(self.text, True, TEXT_COLOR)
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))


class TextInput:
    """
    Single-line text field. The placeholder doubles as a caption: it is shown
    dimmed when empty and as a "Caption: value" prefix otherwise.
    """

    def __init__(
        self,
        rect: pygame.Rect,
        font: pygame.font.Font,
        text: str = "",
        placeholder: str = "",
        max_length: int = 32,
    ) -> None:
        self.rect = rect
        self.font = font
        self.text = text
        self.placeholder = placeholder
        self.active: bool = False
        self.max_length = max_length

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.active = self.rect.collidepoint(event.pos)
            return

        if event.type != pygame.KEYDOWN or not self.active:
            return

        if event.key in (pygame.K_RETURN, pygame.K_ESCAPE, pygame.K_TAB):
            self.active = False
        elif event.key == pygame.K_BACKSPACE:
            self.text = self.text[:-1]
        elif len(self.text) < self.max_length and event.unicode and event.unicode.isprintable():
            self.text += event.unicode

    def draw(self, surface: pygame.Surface) -> None:
        bg_color = (30, 30, 40) if self.active else (20, 20, 30)
        border_color = (200, 200, 255) if self.active else (80, 80, 100)

        pygame.draw.rect(surface, bg_color, self.rect, border_radius=4)
        pygame.draw.rect(surface, border_color, self.rect, 1, border_radius=4)

        if self.text:
            shown = f"{self.placeholder}: {self.text}" if self.placeholder else self.text
            color = TEXT_COLOR
        else:
            shown = self.placeholder
            color = MUTED_TEXT_COLOR

        text_surf = self.font.render(shown, True, color)
        surface.blit(text_surf, text_surf.get_rect(midleft=(self.rect.x + 6, self.rect.centery)))


class MenuDropDown:
    """
    Button that opens a list of (label, callback) items below itself.
    The label shows the current choice when used as a selector.
    """

    def __init__(
        self,
        rect: pygame.Rect,
        font: pygame.font.Font,
        items: Optional[List[MenuItem]] = None,
        label: str = "Menu",
    ) -> None:
        self.rect = rect
        self.font = font
        self.items: List[MenuItem] = items or []
        self.label = label
        self.open: bool = False
        self.hover: bool = False

    def set_items(self, items: List[MenuItem]) -> None:
        self.items = items

    def _list_rect(self) -> pygame.Rect:
        return pygame.Rect(
            self.rect.x,
            self.rect.bottom,
            self.rect.width,
            self.rect.height * len(self.items),
        )

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
            return

        if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
            return

        if self.rect.collidepoint(event.pos):
            self.open = not self.open
            return

        if not self.open:
            return

        list_rect = self._list_rect()
        if list_rect.collidepoint(event.pos):
            index = (event.pos[1] - list_rect.y) // self.rect.height
            if 0 <= index < len(self.items):
                _label, callback = self.items[index]
                callback()
        # any click closes an open menu
        self.open = False

    def draw(self, surface: pygame.Surface) -> None:
        color = (90, 90, 120) if self.hover or self.open else (60, 60, 80)

        pygame.draw.rect(surface, color, self.rect, border_radius=4)
        pygame.draw.rect(surface, BORDER_COLOR, self.rect, 1, border_radius=4)

        text_surf = self.font.render(f"{self.label} ▼", True, TEXT_COLOR)
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

        if not self.open or not self.items:
            return

        list_rect = self._list_rect()
        pygame.draw.rect(surface, (25, 25, 35), list_rect)
        pygame.draw.rect(surface, (10, 10, 10), list_rect, 1)

        mouse = pygame.mouse.get_pos()
        for i, (label, _callback) in enumerate(self.items):
            item_rect = pygame.Rect(list_rect.x, list_rect.y + i * self.rect.height, list_rect.width, self.rect.height)
            bg = (60, 60, 85) if item_rect.collidepoint(mouse) else (40, 40, 55)
            pygame.draw.rect(surface, bg, item_rect)
            item_surf = self.font.render(label, True, TEXT_COLOR)
            surface.blit(item_surf, item_surf.get_rect(midleft=(item_rect.x + 6, item_rect.centery)))


def draw_label(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    x: int,
    y: int,
    color: Tuple[int, int, int] = TEXT_COLOR,
) -> None:
    surface.blit(font.render(text, True, color), (x, y))
