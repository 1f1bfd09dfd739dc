# world-painter/main.py

import logging
import os
import sys
import tkinter as tk
from tkinter import ttk, filedialog, messagebox

import structlog
from ttkthemes import ThemedTk

# --- Local Project Imports ---
from config import load_config
from constants import PALETTE, DEFAULT_BRUSH_SIZE, ZOOM_PRESETS
from editor import MapEditor, PointerButton
from raster_io import read_png, write_png, RasterDecodeError
from rendering import Layer, to_image
from ui_components import MapCanvas, Tooltip

logger = structlog.get_logger()


def configure_logging(level="INFO"):
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=getattr(logging, level.upper(), logging.INFO))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class MapPainterApp:
    def __init__(self, root, history_limit):
        self.root = root
        self.root.title("World Painter")
        self.root.geometry("1200x800")
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        self.vars = {
            "brush_size": tk.DoubleVar(value=DEFAULT_BRUSH_SIZE),
            "terrain_color": tk.StringVar(value="Land"),
            "layer": tk.StringVar(value=Layer.BASE_TERRAIN.value),
            "zoom": tk.DoubleVar(value=1.0),
        }
        self.status_var = tk.StringVar()
        self.brush_size_text = tk.StringVar()
        self.zoom_text = tk.StringVar()

        self.create_menu()
        main_pane = ttk.PanedWindow(root, orient=tk.HORIZONTAL)
        main_pane.grid(row=0, column=0, sticky="nsew")

        self.tools_frame = ttk.Frame(main_pane, padding=10)
        main_pane.add(self.tools_frame, weight=0)

        canvas_frame = ttk.Frame(main_pane)
        main_pane.add(canvas_frame, weight=4)
        canvas_frame.rowconfigure(0, weight=1)
        canvas_frame.columnconfigure(0, weight=1)
        self.map_canvas = MapCanvas(canvas_frame, background="#282828", highlightthickness=0)
        self.map_canvas.grid(row=0, column=0, sticky="nsew")
        scroll_y = ttk.Scrollbar(canvas_frame, orient="vertical", command=self.map_canvas.yview)
        scroll_y.grid(row=0, column=1, sticky="ns")
        scroll_x = ttk.Scrollbar(canvas_frame, orient="horizontal", command=self.map_canvas.xview)
        scroll_x.grid(row=1, column=0, sticky="ew")
        self.map_canvas.configure(xscrollcommand=scroll_x.set, yscrollcommand=scroll_y.set)

        ttk.Label(self.root, textvariable=self.status_var, relief=tk.SUNKEN, anchor=tk.W, padding=5).grid(row=1, column=0, sticky="ew")

        # The editor renders through on_render, so the canvas widget must exist first
        self.editor = MapEditor(
            history_limit=history_limit,
            on_render=self.on_render,
            on_history_change=lambda history: self.update_edit_menu_state(),
        )
        self.create_paint_controls()

        self.map_canvas.bind("<ButtonPress-1>", lambda e: self.on_paint_start(e, PointerButton.PRIMARY))
        self.map_canvas.bind("<ButtonPress-2>", lambda e: self.on_paint_start(e, PointerButton.MIDDLE))
        self.map_canvas.bind("<ButtonPress-3>", lambda e: self.on_paint_start(e, PointerButton.SECONDARY))
        self.map_canvas.bind("<B1-Motion>", self.on_paint_move)
        self.map_canvas.bind("<B3-Motion>", self.on_paint_move)
        self.map_canvas.bind("<ButtonRelease-1>", self.on_paint_end)
        self.map_canvas.bind("<ButtonRelease-3>", self.on_paint_end)
        self.map_canvas.bind("<Motion>", self._on_mouse_move)
        self.map_canvas.bind("<Enter>", self._on_mouse_move)
        self.map_canvas.bind("<Leave>", self._on_mouse_leave)

        self.update_brush_size_text()
        self.update_zoom_text()
        self.update_edit_menu_state()
        self.status_var.set(self.editor.status)

    # --- UI construction ---
    def create_menu(self):
        menubar = tk.Menu(self.root)
        filemenu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="File", menu=filemenu)
        filemenu.add_command(label="New Map", command=self.new_map, accelerator="Ctrl+N")
        filemenu.add_command(label="Import PNG...", command=self.import_png, accelerator="Ctrl+O")
        filemenu.add_command(label="Export PNG...", command=self.export_png, accelerator="Ctrl+S")
        filemenu.add_separator()
        filemenu.add_command(label="Exit", command=self.root.quit)
        self.editmenu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="Edit", menu=self.editmenu)
        self.editmenu.add_command(label="Undo", command=self.undo, accelerator="Ctrl+Z", state="disabled")
        self.editmenu.add_command(label="Redo", command=self.redo, accelerator="Ctrl+Y", state="disabled")
        self.editmenu.add_separator()
        self.editmenu.add_command(label="Clear to Water", command=self.clear)
        viewmenu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="View", menu=viewmenu)
        for zoom in ZOOM_PRESETS:
            viewmenu.add_radiobutton(label=f"{int(zoom * 100)}%", variable=self.vars["zoom"], value=zoom,
                                     command=lambda z=zoom: self.set_zoom(z))
        self.root.config(menu=menubar)
        self.root.bind_all("<Control-n>", lambda e: self.new_map())
        self.root.bind_all("<Control-o>", lambda e: self.import_png())
        self.root.bind_all("<Control-s>", lambda e: self.export_png())
        self.root.bind_all("<Control-z>", lambda e: self.undo())
        self.root.bind_all("<Control-Shift-Z>", lambda e: self.redo())
        self.root.bind_all("<Control-y>", lambda e: self.redo())

    def create_paint_controls(self):
        f = self.tools_frame
        f.columnconfigure(0, weight=1)

        lf_layer = ttk.Labelframe(f, text="Layer", padding=5)
        lf_layer.grid(row=0, column=0, sticky="ew", pady=(0, 10))
        for layer in Layer:
            ttk.Radiobutton(lf_layer, text=layer.value, value=layer.value, variable=self.vars["layer"],
                            command=self._on_layer_change).pack(anchor="w", padx=5)

        self.terrain_tools_frame = ttk.Labelframe(f, text="Terrain Brush", padding=5)
        self.terrain_tools_frame.grid(row=1, column=0, sticky="ew", pady=(0, 10))
        for name in PALETTE:
            rb = ttk.Radiobutton(self.terrain_tools_frame, text=name, value=name, variable=self.vars["terrain_color"],
                                 command=self._on_terrain_color_change)
            rb.pack(anchor="w", padx=5)
        self.elevation_tools_frame = ttk.Labelframe(f, text="Elevation Brush", padding=5)
        hint = ttk.Label(self.elevation_tools_frame, text="Left drag: raise\nRight drag: lower")
        hint.pack(anchor="w", padx=5)
        Tooltip(hint, "Only land cells carry elevation. Water is always at 0.")

        lf_brush = ttk.Labelframe(f, text="Brush Settings", padding=5)
        lf_brush.grid(row=3, column=0, sticky="ew", pady=(0, 10))
        lf_brush.columnconfigure(1, weight=1)
        ttk.Label(lf_brush, text="Size:").grid(row=0, column=0, sticky="w")
        size_scale = ttk.Scale(lf_brush, from_=1, to=128, variable=self.vars["brush_size"], command=self._on_brush_size_change)
        size_scale.grid(row=0, column=1, sticky="ew", padx=5)
        ttk.Label(lf_brush, textvariable=self.brush_size_text, width=7).grid(row=0, column=2, sticky="e")
        Tooltip(size_scale, "Brush diameter in map cells.")
        ttk.Label(lf_brush, textvariable=self.zoom_text).grid(row=1, column=0, columnspan=3, sticky="w", pady=(5, 0))

        self._on_layer_change()

    # --- Editor callbacks ---
    def on_render(self, display):
        self.map_canvas.set_image(to_image(display))

    def update_edit_menu_state(self):
        """Updates the enabled/disabled state of Undo/Redo menu items."""
        if hasattr(self, 'editmenu') and hasattr(self, 'editor'):
            self.editmenu.entryconfig("Undo", state="normal" if self.editor.history.can_undo else "disabled")
            self.editmenu.entryconfig("Redo", state="normal" if self.editor.history.can_redo else "disabled")

    def update_brush_size_text(self):
        self.brush_size_text.set(f"{self.editor.brush.size} px")

    def update_zoom_text(self):
        self.zoom_text.set(f"Zoom: {int(round(self.editor.zoom_scale * 100))}%")

    def _run(self, action, *args):
        action(*args)
        self.status_var.set(self.editor.status)
        self.update_edit_menu_state()

    # --- Control handlers ---
    def _on_layer_change(self):
        layer = Layer(self.vars["layer"].get())
        if layer == Layer.ELEVATION:
            self.terrain_tools_frame.grid_remove()
            self.elevation_tools_frame.grid(row=2, column=0, sticky="ew", pady=(0, 10))
        else:
            self.elevation_tools_frame.grid_remove()
            self.terrain_tools_frame.grid()
        self._run(self.editor.set_active_layer, layer)

    def _on_terrain_color_change(self):
        self._run(self.editor.select_terrain_color, PALETTE[self.vars["terrain_color"].get()])

    def _on_brush_size_change(self, value):
        self.editor.set_brush_size(float(value))
        self.update_brush_size_text()

    def set_zoom(self, zoom):
        self.editor.set_zoom(zoom)
        self.map_canvas.set_zoom(self.editor.zoom_scale)
        self.update_zoom_text()

    def new_map(self): self._run(self.editor.new_map)
    def clear(self): self._run(self.editor.clear)
    def undo(self): self._run(self.editor.undo)
    def redo(self): self._run(self.editor.redo)

    # --- Pointer handlers ---
    def on_paint_start(self, e, button):
        sx, sy = self.map_canvas.surface_coords(e)
        cell = self.editor.device_to_cell(sx, sy)
        if cell is None:
            return
        if self.editor.begin_stroke(cell[0], cell[1], button):
            self.status_var.set(f"Painting at X: {cell[0]}, Y: {cell[1]}")
            self.update_edit_menu_state()
        else:
            self.status_var.set("That button does not paint on the current layer")

    def on_paint_move(self, e):
        self._on_mouse_move(e)
        if not self.editor.is_painting:
            return
        sx, sy = self.map_canvas.surface_coords(e)
        cell = self.editor.device_to_cell(sx, sy)
        # Samples that land outside the map are dropped
        if cell is not None:
            self.editor.continue_stroke(*cell)

    def on_paint_end(self, e):
        self.editor.end_stroke()

    def _on_mouse_move(self, e):
        sx, sy = self.map_canvas.surface_coords(e)
        self.map_canvas.show_brush_preview(sx, sy, self.editor.brush_preview_diameter)
        cell = self.editor.device_to_cell(sx, sy)
        if cell is not None and not self.editor.is_painting:
            x, y = cell
            kind = "Land" if self.editor.canvas.is_land(x, y) else "Water"
            status_str = f"X: {x}, Y: {y} | {kind}"
            if kind == "Land":
                status_str += f" | Elevation: {self.editor.canvas.get_elevation(x, y)}"
            self.status_var.set(status_str)

    def _on_mouse_leave(self, e):
        self.map_canvas.hide_brush_preview()
        self.editor.end_stroke()

    # --- File handlers ---
    def import_png(self):
        fp = filedialog.askopenfilename(
             filetypes=[("PNG Image", "*.png"), ("All files", "*.*")],
             title="Import PNG"
        )
        if not fp:
             return

        try:
            width, height, pixels = read_png(fp)
        except (RasterDecodeError, OSError) as e:
            logger.error("Import failed", path=fp, error=str(e))
            messagebox.showerror("Import Error", f"Could not import file:\n\n{e}")
            self.status_var.set("Import failed.")
            return
        self._run(self.editor.import_raster, width, height, pixels)

    def export_png(self):
        fp = filedialog.asksaveasfilename(
             defaultextension=".png",
             initialfile="world-painter-map.png",
             filetypes=[("PNG Image", "*.png")],
             title="Export PNG"
        )
        if not fp:
             return

        try:
            write_png(fp, *self.editor.export_raster())
        except OSError as e:
            logger.error("Export failed", path=fp, error=str(e))
            messagebox.showerror("Export Error", f"Could not save file:\n\n{e}")
            self.status_var.set("Export failed.")
            return
        self.status_var.set(f"PNG exported to {os.path.basename(fp)}")


def main():
    configure_logging(os.environ.get("WORLD_PAINTER_LOG_LEVEL", "INFO"))
    app_dir = os.path.dirname(os.path.abspath(__file__))
    config = load_config(app_dir)

    root = ThemedTk(theme="equilux")
    try:
        MapPainterApp(root, config.history_limit)
        root.mainloop()
    except Exception as e:
        logger.exception("Fatal error")
        messagebox.showerror("Fatal Error", f"An unexpected error occurred and the application must close:\n\n{e}")
        raise


if __name__ == "__main__":
    main()
