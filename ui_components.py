# world-painter/ui_components.py

import tkinter as tk
from tkinter import ttk
from PIL import Image, ImageTk


# --- MAP CANVAS WIDGET ---
class MapCanvas(tk.Canvas):
    """Shows the display buffer at the current zoom factor with a dashed brush preview.

    Pointer coordinates reported by this widget are already in zoomed-surface
    space (scroll offset applied), ready for MapEditor.device_to_cell.
    """

    def __init__(self, parent, **kwargs):
        super().__init__(parent, **kwargs)
        self.zoom_level = 1.0
        self.pil_image = None
        self.tk_image = None
        self.image_id = None
        self.brush_preview_id = self.create_oval(0, 0, 0, 0, outline="#cccccc", dash=(4, 2), state="hidden")

    def set_image(self, pil_image):
        self.pil_image = pil_image
        self.redraw()

    def set_zoom(self, zoom_level):
        self.zoom_level = zoom_level
        self.redraw()

    def redraw(self):
        if not self.pil_image: return
        img_w, img_h = self.pil_image.size
        scaled_w = max(1, int(round(img_w * self.zoom_level)))
        scaled_h = max(1, int(round(img_h * self.zoom_level)))
        # Nearest keeps cell edges crisp when zoomed in
        resized_image = self.pil_image.resize((scaled_w, scaled_h), Image.Resampling.NEAREST)
        self.tk_image = ImageTk.PhotoImage(resized_image)
        if self.image_id:
            self.itemconfig(self.image_id, image=self.tk_image)
        else:
            self.image_id = self.create_image(0, 0, anchor="nw", image=self.tk_image)
            self.tag_raise(self.brush_preview_id)
        self.config(scrollregion=(0, 0, scaled_w, scaled_h))

    def surface_coords(self, event):
        return self.canvasx(event.x), self.canvasy(event.y)

    def show_brush_preview(self, sx, sy, diameter):
        r = diameter / 2.0
        self.coords(self.brush_preview_id, sx - r, sy - r, sx + r, sy + r)
        self.itemconfig(self.brush_preview_id, state="normal")

    def hide_brush_preview(self):
        self.itemconfig(self.brush_preview_id, state="hidden")


# --- TOOLTIP CLASS ---
class Tooltip:
    """Hover help that appears next to the pointer after a short delay."""

    DELAY_MS = 500

    def __init__(self, widget, text):
        self.widget = widget
        self.text = text
        self.popup = None
        self._pending = None
        self.widget.bind("<Enter>", self._schedule, add="+")
        self.widget.bind("<Leave>", self._cancel, add="+")
        self.widget.bind("<ButtonPress>", self._cancel, add="+")

    def _schedule(self, event):
        self._cancel()
        if self.text:
            self._pending = self.widget.after(self.DELAY_MS, lambda: self._open(event.x_root, event.y_root))

    def _open(self, pointer_x, pointer_y):
        self._pending = None
        self.popup = tk.Toplevel(self.widget)
        self.popup.wm_overrideredirect(True)
        self.popup.wm_geometry(f"+{pointer_x + 16}+{pointer_y + 16}")
        ttk.Label(self.popup, text=self.text, background="#333333", foreground="white",
                  relief="solid", borderwidth=1, wraplength=220, padding=4).pack()

    def _cancel(self, event=None):
        if self._pending is not None:
            self.widget.after_cancel(self._pending)
            self._pending = None
        if self.popup is not None:
            self.popup.destroy()
            self.popup = None
