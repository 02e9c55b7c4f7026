from __future__ import annotations

import dataclasses
import sys
from typing import Dict, List, Optional

import pygame

from tileworld.core.chunks import BackgroundChunkLoader
from tileworld.core.config import GENERATION_TYPES
from tileworld.core.io import list_maps, load_world, save_world
from tileworld.core.world import TileWorld

from .config import AppConfig
from .renderer import PygameRenderer
from .ui.layout import hstack
from .ui.widgets import Button, TextInput, MenuDropDown, draw_label


TOOL_LABELS: Dict[str, str] = {
    "draw": "Draw",
    "erase": "Erase",
    "fill": "Fill",
    "eyedropper": "Pick",
}


PLACEHOLDER_RECT = pygame.Rect(0, 0, 10, 10)


class TileWorldApp:
    def __init__(self, config: AppConfig) -> None:
        self.cfg = config
        self.renderer = PygameRenderer(config.render)
        self.world: Optional[TileWorld] = None
        self.loader: Optional[BackgroundChunkLoader] = None

        pygame.init()
        pygame.display.set_caption(self.cfg.render.window_title)

        self.window = pygame.display.set_mode((1280, 800), pygame.RESIZABLE)
        self.font = pygame.font.SysFont("consolas", 16)

        # real rects are assigned in _layout_ui
        self.btn_generate = self._button("Generate", self.generate_world)
        self.btn_save = self._button("Save", self.save_current_world)
        self.btn_lighting = self._button("Lighting", self.toggle_lighting)
        self.save_name_input = TextInput(PLACEHOLDER_RECT.copy(), self.font, "", "Name")
        self.dropdown_load = MenuDropDown(PLACEHOLDER_RECT.copy(), self.font, label="Load")
        self.dropdown_type = MenuDropDown(
            PLACEHOLDER_RECT.copy(),
            self.font,
            label=self.cfg.generation.generation_type,
            items=[(name, self._type_setter(name)) for name in GENERATION_TYPES],
        )

        self.tool_buttons: List[Button] = [
            self._button(label, self._tool_setter(mode)) for mode, label in TOOL_LABELS.items()
        ]

        w = self.cfg.world
        g = self.cfg.generation

        # --- world / generation inputs --------------------------------------
        self.input_width = self._input(str(w.width), "Width", 4)
        self.input_height = self._input(str(w.height), "Height", 4)
        self.input_seed = self._input(str(g.seed), "Seed", 10)
        self.input_caves = self._input(str(int(g.cave_frequency * 100)), "Caves%", 3)
        self.input_ores = self._input(str(int(g.ore_frequency * 100)), "Ores%", 3)
        self.input_brush = self._input("1", "Brush", 2)
        self.input_infinite = self._input("y" if w.infinite else "", "Infinite? (y)", 1)

        # order = order in sidebar
        self.inputs = [
            self.input_width,
            self.input_height,
            self.input_seed,
            self.input_caves,
            self.input_ores,
            self.input_brush,
            self.input_infinite,
        ]

        self.update_load_dropdown()
        self._layout_ui()

        # camera dragging
        self.dragging = False

        self.generate_world()

    def _button(self, text: str, on_click) -> Button:
        return Button(PLACEHOLDER_RECT.copy(), text, self.font, on_click)

    def _input(self, text: str, caption: str, max_length: int) -> TextInput:
        return TextInput(PLACEHOLDER_RECT.copy(), self.font, text, caption, max_length=max_length)

    # ---------------------------------------------------------------- Layout

    def _layout_ui(self) -> None:
        width, height = self.window.get_size()
        sidebar_width = self.cfg.render.sidebar_width_px

        x = width - sidebar_width + 10
        w = sidebar_width - 20
        y = 10
        h_btn = 28
        gap = 6

        self.btn_generate.rect = pygame.Rect(x, y, w, h_btn)
        y += h_btn + gap

        self.dropdown_type.rect = pygame.Rect(x, y, w, h_btn)
        y += h_btn + gap

        self.btn_save.rect = pygame.Rect(x, y, w, h_btn)
        y += h_btn + gap

        self.save_name_input.rect = pygame.Rect(x, y, w, h_btn)
        y += h_btn + gap

        self.dropdown_load.rect = pygame.Rect(x, y, w, h_btn)
        y += h_btn + gap

        self.btn_lighting.rect = pygame.Rect(x, y, w, h_btn)
        y += h_btn + gap

        for btn, rect in zip(self.tool_buttons, hstack(pygame.Rect(x, y, w, h_btn), len(self.tool_buttons))):
            btn.rect = rect
        y += h_btn + gap

        # palette below the buttons, inputs below the palette
        self.renderer.palette_offset_y = y
        palette_item_h = self.renderer.palette_tile_size + 4
        palette_height = 4 + max(10, len(self.renderer.palette_items)) * palette_item_h + 4

        y_inputs = self.renderer.palette_offset_y + palette_height + gap
        h_input = 24
        for inp in self.inputs:
            inp.rect = pygame.Rect(x, y_inputs, w, h_input)
            y_inputs += h_input + gap

    # ---------------------------------------------------------------- UI data

    def update_load_dropdown(self) -> None:
        items = []
        for n in list_maps():
            def load_closure(name=n):
                self.load_world_by_name(name)
            items.append((n, load_closure))
        self.dropdown_load.set_items(items)

    def _type_setter(self, name: str):
        def set_type() -> None:
            self.cfg.generation = dataclasses.replace(self.cfg.generation, generation_type=name)
            self.dropdown_type.label = name
        return set_type

    def _tool_setter(self, mode: str):
        def set_tool() -> None:
            if self.world is not None:
                self.world.editor.set_mode(mode)
        return set_tool

    def _widgets(self) -> list:
        # dropdowns get every event from the main loop
        return [
            self.btn_generate,
            self.btn_save,
            self.btn_lighting,
            self.save_name_input,
            *self.tool_buttons,
            *self.inputs,
        ]

    # -------------------------------------------------------------- Generation

    def _update_config_from_inputs(self) -> None:
        def parse_percent(text: str, fallback: float) -> float:
            text = text.strip()
            if not text:
                return fallback
            try:
                val = float(text)
            except ValueError:
                return fallback
            if val > 1.0:
                val /= 100.0
            return max(0.0, min(1.0, val))

        def parse_int(text: str, fallback: int, min_val: int, max_val: int) -> int:
            text = text.strip()
            if not text:
                return fallback
            try:
                val = int(text)
            except ValueError:
                return fallback
            return max(min_val, min(max_val, val))

        w = self.cfg.world
        w.width = parse_int(self.input_width.text, w.width, 8, 1000)
        w.height = parse_int(self.input_height.text, w.height, 8, 1000)
        w.infinite = self.input_infinite.text.strip().lower() in ("y", "1")

        g = self.cfg.generation
        self.cfg.generation = dataclasses.replace(
            g,
            seed=parse_int(self.input_seed.text, g.seed, -(2 ** 31), 2 ** 31 - 1),
            cave_frequency=parse_percent(self.input_caves.text, g.cave_frequency),
            ore_frequency=parse_percent(self.input_ores.text, g.ore_frequency),
        )

    def _brush_size(self) -> int:
        try:
            return max(1, min(32, int(self.input_brush.text.strip())))
        except ValueError:
            return 1

    def generate_world(self) -> None:
        self._update_config_from_inputs()
        try:
            world = TileWorld(dataclasses.replace(self.cfg.world), self.cfg.generation)
        except ValueError as e:
            print(f"Cannot generate world: {e}")
            return
        self._set_world(world)

    def _set_world(self, world: TileWorld) -> None:
        previous = self.world.editor if self.world is not None else None
        if previous is not None:
            world.editor.mode = previous.mode
            world.editor.selected_tile = previous.selected_tile
        if self.loader is not None:
            self.loader.shutdown()
            self.loader = None
        if world.chunks is not None:
            self.loader = BackgroundChunkLoader(world.chunks)
        self.world = world
        self.renderer.set_world(world)
        self._layout_ui()

    def toggle_lighting(self) -> None:
        if self.world is None:
            return
        if self.world.infinite:
            print("Lighting is only available for finite worlds.")
            return
        self.cfg.world.enable_lighting = not self.cfg.world.enable_lighting
        self.world.settings.enable_lighting = self.cfg.world.enable_lighting
        self.world.refresh_lighting()

    # ----------------------------------------------------------------- IO

    def save_current_world(self) -> None:
        if self.world is None:
            print("No world to save.")
            return

        name = self.save_name_input.text.strip()
        if not name:
            print("Please enter a world name first.")
            return

        save_world(name, self.world)
        print(f"Saved world '{name}'.")
        self.update_load_dropdown()

    def load_world_by_name(self, name: str) -> None:
        try:
            world = load_world(name)
        except FileNotFoundError:
            print(f"World '{name}' does not exist.")
            return
        except ValueError as e:
            print(f"World '{name}' could not be loaded: {e}")
            return

        self.cfg.world = dataclasses.replace(world.settings)
        self.cfg.generation = world.generation
        self.dropdown_type.label = world.generation.generation_type
        self._set_world(world)
        print(f"Loaded world '{name}'.")

    # -------------------------------------------------------------- Events

    def handle_mouse_down(self, event: pygame.event.Event) -> None:
        x, y = event.pos

        if self.dropdown_load.open or self.dropdown_type.open:
            return

        if event.button == 1:
            # send to UI first
            for widget in self._widgets():
                widget.handle_event(event)

            if self.renderer.is_in_palette(x, y):
                index = self.renderer.get_palette_index_from_mouse(x, y)
                if self.world is not None and 0 <= index < len(self.renderer.palette_items):
                    self.world.editor.selected_tile = self.renderer.palette_items[index]
                    if self.world.editor.mode in ("erase", "eyedropper"):
                        self.world.editor.set_mode("draw")
                return

            if self.world is not None and self.renderer.is_in_map(x, y):
                self.world.editor.brush_size = self._brush_size()
                tile_x, tile_y = self.renderer.get_map_coords_from_mouse(x, y)
                self.world.editor.begin_stroke(tile_x, tile_y)
                return

        # right or middle button: start camera drag
        if event.button in (2, 3) and self.renderer.is_in_map(x, y):
            self.dragging = True

    def handle_mouse_up(self, event: pygame.event.Event) -> None:
        if event.button in (2, 3):
            self.dragging = False
        if event.button == 1 and self.world is not None:
            self.world.editor.end_stroke()

    def handle_mouse_motion(self, event: pygame.event.Event) -> None:
        for widget in self._widgets():
            widget.handle_event(event)

        x, y = event.pos

        if self.dragging:
            self.renderer.move_camera(-event.rel[0], -event.rel[1])
            return

        if self.world is None or not self.renderer.is_in_map(x, y):
            self.renderer.hovered_tile = None
            return

        tile_x, tile_y = self.renderer.get_map_coords_from_mouse(x, y)
        self.renderer.hovered_tile = (tile_x, tile_y)

        # fast pointer movement still paints a contiguous path
        if event.buttons[0] and self.world.editor.mode in ("draw", "erase"):
            self.world.editor.continue_stroke(tile_x, tile_y)

    def handle_key(self, event: pygame.event.Event) -> None:
        if any(inp.active for inp in self.inputs) or self.save_name_input.active:
            return
        if event.key == pygame.K_r:
            self.renderer.camera_x = 0
            self.renderer.camera_y = 0
        elif event.key == pygame.K_g:
            self.cfg.render.show_grid = not self.cfg.render.show_grid

    def handle_mouse_wheel(self, event: pygame.event.Event) -> None:
        # zoom only when over map, not over sidebar
        x, y = pygame.mouse.get_pos()
        if self.renderer.is_in_map(x, y):
            self.renderer.change_zoom(event.y)

    # ----------------------------------------------------------- Draw UI

    def draw_ui(self) -> None:
        for btn in self.tool_buttons:
            btn.selected = False
        if self.world is not None:
            modes = list(TOOL_LABELS)
            self.tool_buttons[modes.index(self.world.editor.mode)].selected = True
            self.renderer.selected_tile = self.world.editor.selected_tile
            self.btn_lighting.selected = self.world.light is not None

        for widget in self._widgets():
            widget.draw(self.window)
        # dropdowns last so their open lists cover other widgets
        self.dropdown_load.draw(self.window)
        self.dropdown_type.draw(self.window)

        if self.world is not None and self.renderer.hovered_tile is not None:
            hx, hy = self.renderer.hovered_tile
            tile_id = self.world.get_tile_at(hx, hy)
            text = f"({hx}, {hy}) {self.world.registry.name_of(tile_id)}  light {self.world.get_light_at(hx, hy):.2f}"
            draw_label(self.window, self.font, text, 8, self.window.get_height() - 24)

    def stream_chunks(self) -> None:
        """Queue chunks around the view on worker threads and publish the finished ones."""
        assert self.world is not None and self.world.chunks is not None and self.loader is not None
        cx, cy = self.renderer.view_center_tile()
        radius = self.world.settings.chunk_load_radius
        self.loader.request_around(cx, cy, radius)
        self.loader.collect()
        self.world.chunks.evict_far(cx, cy, radius)

    # ------------------------------------------------------------- Main loop

    def run(self) -> None:
        clock = pygame.time.Clock()
        running = True

        while running:
            _dt = clock.tick(60)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    break

                if event.type == pygame.VIDEORESIZE:
                    self.window = pygame.display.set_mode(event.size, pygame.RESIZABLE)
                    self._layout_ui()
                    continue

                self.dropdown_load.handle_event(event)
                self.dropdown_type.handle_event(event)

                if event.type == pygame.MOUSEBUTTONDOWN:
                    self.handle_mouse_down(event)

                if event.type == pygame.MOUSEBUTTONUP:
                    self.handle_mouse_up(event)

                if event.type == pygame.MOUSEMOTION:
                    self.handle_mouse_motion(event)

                if event.type == pygame.MOUSEWHEEL:
                    self.handle_mouse_wheel(event)

                if event.type == pygame.KEYDOWN:
                    self.handle_key(event)
                    self.save_name_input.handle_event(event)
                    for inp in self.inputs:
                        inp.handle_event(event)

            if self.world is not None and self.loader is not None:
                self.stream_chunks()

            self.renderer.draw()
            self.draw_ui()
            pygame.display.flip()

        if self.loader is not None:
            self.loader.shutdown()
        pygame.quit()
        sys.exit()


def main() -> None:
    TileWorldApp(AppConfig()).run()
