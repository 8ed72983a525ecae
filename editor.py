import os
import sys
import tkinter as tk
from tkinter import ttk, filedialog, messagebox, Canvas

from core.config import Config
from editing.session import EditorSession
from mapdata.document_io import (
    MapImportError,
    save_document_file,
    load_document_file,
    load_startup_document,
)
from visuals.asset_manager import AssetManager
from visuals.renderer import CanvasRenderer
from visuals.snapshot import load_snapshot_document, save_snapshot

JSON_TYPES = [("JSON Files", "*.json")]
IMPORT_TYPES = [("Map Files", "*.json *.png"), ("JSON Files", "*.json"), ("PNG Previews", "*.png")]
MODIFIER_MASK = 0x0004 | 0x0008  # Control, Command/Mod1 on macOS


def has_modifier(event):
    return bool(event.state & MODIFIER_MASK)


class MapTab(ttk.Frame):
    def __init__(self, parent, app):
        super().__init__(parent)
        self.app = app
        self.session = app.session
        self.var_mode = tk.StringVar(value="terrain")
        self.var_brush_on = tk.BooleanVar(value=False)
        self.var_brush_terrain = tk.StringVar(value=self.session.brush.terrain)
        self.var_brush_tier = tk.IntVar(value=self.session.brush.tier)
        self.var_orientation = tk.StringVar(value=self.session.document.orientation)
        self.var_zoom = tk.StringVar(value="100%")

        self._setup_ui()
        self._bind_events()

    def _setup_ui(self):
        self.paned = ttk.PanedWindow(self, orient=tk.HORIZONTAL)
        self.paned.pack(fill="both", expand=True)

        c_frame = ttk.Frame(self.paned)
        self.paned.add(c_frame, weight=3)
        self.canvas = Canvas(c_frame, bg="#f5f5f5", highlightthickness=0)
        self.canvas.pack(fill="both", expand=True)

        self.inspector = ttk.Frame(self.paned, padding=10)
        self.paned.add(self.inspector, weight=1)

        ttk.Label(self.inspector, text="Hex Map Editor", font=("Bold", 12)).pack(anchor="w")
        files = ttk.Frame(self.inspector)
        files.pack(fill="x", pady=5)
        ttk.Button(files, text="Import", command=self.app.import_map).pack(side=tk.LEFT)
        ttk.Button(files, text="Save", command=self.app.save).pack(side=tk.LEFT)
        ttk.Button(files, text="Save As", command=self.app.save_as).pack(side=tk.LEFT)
        ttk.Button(files, text="Export PNG", command=self.app.export_png).pack(side=tk.LEFT)

        zoom = ttk.Frame(self.inspector)
        zoom.pack(fill="x", pady=5)
        ttk.Button(zoom, text="-", width=3, command=lambda: self._view(self.session.zoom_out)).pack(side=tk.LEFT)
        ttk.Label(zoom, textvariable=self.var_zoom, width=6, anchor="center").pack(side=tk.LEFT)
        ttk.Button(zoom, text="+", width=3, command=lambda: self._view(self.session.zoom_in)).pack(side=tk.LEFT)
        ttk.Button(zoom, text="Reset View", command=lambda: self._view(self.session.reset_view)).pack(side=tk.LEFT)

        layout = ttk.LabelFrame(self.inspector, text="Layout", padding=5)
        layout.pack(fill="x", pady=5)
        ttk.Button(layout, text="Rect / Rhombus", command=lambda: self._view(self.session.toggle_rect)).pack(fill="x")
        ttk.Button(layout, text="Stagger", command=lambda: self._view(self.session.toggle_stagger)).pack(fill="x")
        ttk.Button(layout, text="Mirror Y", command=lambda: self._view(self.session.toggle_mirror)).pack(fill="x")
        for o in Config.ORIENTATIONS:
            ttk.Radiobutton(
                layout,
                text=o.capitalize(),
                variable=self.var_orientation,
                value=o,
                command=self._on_orientation,
            ).pack(side=tk.LEFT)

        modes = ttk.LabelFrame(self.inspector, text="Edit Mode", padding=5)
        modes.pack(fill="x", pady=5)
        for mode, label in (("terrain", "Terrain"), ("spawn", "Spawn"), ("goal", "Goal")):
            ttk.Radiobutton(
                modes,
                text=label,
                variable=self.var_mode,
                value=mode,
                command=self._on_mode_change,
            ).pack(side=tk.LEFT)

        self.mode_panel = ttk.Frame(self.inspector)
        self.mode_panel.pack(fill="both", expand=True, pady=5)

        legend = ttk.LabelFrame(self.inspector, text="Legend", padding=5)
        legend.pack(fill="x", side=tk.BOTTOM)
        for name, colour in Config.TERRAIN_COLOURS.items():
            row = ttk.Frame(legend)
            row.pack(anchor="w")
            tk.Label(row, bg=colour, width=2).pack(side=tk.LEFT)
            ttk.Label(row, text=name.capitalize()).pack(side=tk.LEFT, padx=4)
        ttk.Label(legend, text="Ctrl+click or Ctrl+drag to multi-select", font=("Italic", 8)).pack(anchor="w")

        self.refresh_panel()

    def _bind_events(self):
        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<B1-Motion>", self._on_motion)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.canvas.bind("<Leave>", self._on_leave)
        self.canvas.bind("<MouseWheel>", self._on_wheel)
        self.canvas.bind("<Button-4>", lambda e: self._wheel(-1))
        self.canvas.bind("<Button-5>", lambda e: self._wheel(1))

    # Canvas events --------------------------------------------------------

    def _on_press(self, event):
        self.session.pointer_down(event.x, event.y, has_modifier(event))
        self.render()

    def _on_motion(self, event):
        if self.session.pointer_move(event.x, event.y):
            self.render()

    def _on_release(self, event):
        tile = self.session.release(event.x, event.y, has_modifier(event))
        if tile is not None or self.session.stroke_edited():
            self.refresh_panel()
        self.render()

    def _on_leave(self, event):
        self.session.pointer_leave()
        if self.session.stroke_edited():
            self.refresh_panel()

    def _on_wheel(self, event):
        self._wheel(-1 if event.delta > 0 else 1)

    def _wheel(self, delta_y):
        self.session.wheel(delta_y)
        self.refresh_panel()
        self.render()

    # Controls -------------------------------------------------------------

    def _view(self, action):
        action()
        self.render()

    def _on_orientation(self):
        self.session.set_orientation(self.var_orientation.get())
        self.render()

    def _on_mode_change(self):
        self.session.set_edit_mode(self.var_mode.get())
        self.refresh_panel()
        self.render()

    def _on_brush_change(self, *args):
        self.session.brush_enabled = self.var_brush_on.get()
        self.session.brush.set_terrain(self.var_brush_terrain.get())
        self.session.brush.set_tier(self.var_brush_tier.get())
        self.refresh_panel()

    def _update_field(self, name, value):
        if self.session.update_field(name, value):
            self.refresh_panel()
            self.render()

    def _nudge_tier(self, delta):
        if self.session.nudge_tier(delta):
            self.refresh_panel()
            self.render()

    def _remove_spawn(self, q, r):
        self.session.markers.toggle_spawn(q, r)
        self.refresh_panel()
        self.render()

    def _clear_goal(self):
        self.session.markers.clear_goal()
        self.refresh_panel()
        self.render()

    # Panels ---------------------------------------------------------------

    def refresh_panel(self):
        for widget in self.mode_panel.winfo_children():
            widget.destroy()
        mode = self.session.edit_mode
        self.var_mode.set(mode)
        if mode == "terrain":
            self._build_brush_ui()
            self._build_tile_ui()
        elif mode == "spawn":
            self._build_spawn_ui()
        else:
            self._build_goal_ui()

    def _build_brush_ui(self):
        frame = ttk.LabelFrame(self.mode_panel, text="Brush Tool", padding=5)
        frame.pack(fill="x")
        ttk.Checkbutton(
            frame, text="Brush On", variable=self.var_brush_on, command=self._on_brush_change
        ).pack(anchor="w")
        if not self.var_brush_on.get():
            return
        cb = ttk.Combobox(
            frame,
            state="readonly",
            values=list(Config.TERRAIN_COLOURS),
            textvariable=self.var_brush_terrain,
        )
        cb.pack(fill="x")
        cb.bind("<<ComboboxSelected>>", self._on_brush_change)
        tiers = ttk.Frame(frame)
        tiers.pack(fill="x")
        for t in range(Config.TIER_MIN, Config.TIER_MAX + 1):
            ttk.Radiobutton(
                tiers, text=str(t), variable=self.var_brush_tier, value=t,
                command=self._on_brush_change,
            ).pack(side=tk.LEFT)
        ttk.Label(frame, text="Click and drag to paint", font=("Italic", 8)).pack(anchor="w")

    def _build_tile_ui(self):
        tile = self.session.focus_tile
        if tile is None:
            ttk.Label(self.mode_panel, text="Click a hex to edit its properties.").pack(anchor="w", pady=10)
            return
        count = len(self.session.selection.targets())
        title = f"Selected Hex: {tile.id}"
        if count > 1:
            title += f" (+{count - 1} more)"
        ttk.Label(self.mode_panel, text=title, font=("Bold", 10)).pack(anchor="w", pady=(10, 0))

        ttk.Label(self.mode_panel, text="Terrain").pack(anchor="w")
        var_terrain = tk.StringVar(value=tile.terrain)
        cb = ttk.Combobox(
            self.mode_panel, state="readonly", values=list(Config.TERRAIN_COLOURS),
            textvariable=var_terrain,
        )
        cb.pack(fill="x")
        cb.bind("<<ComboboxSelected>>", lambda e: self._update_field("terrain", var_terrain.get()))

        ttk.Label(self.mode_panel, text="Tier").pack(anchor="w")
        row = ttk.Frame(self.mode_panel)
        row.pack(fill="x")
        ttk.Button(row, text="-", width=3, command=lambda: self._nudge_tier(-1)).pack(side=tk.LEFT)
        ttk.Label(row, text=str(tile.tier), width=4, anchor="center").pack(side=tk.LEFT)
        ttk.Button(row, text="+", width=3, command=lambda: self._nudge_tier(1)).pack(side=tk.LEFT)

        ttk.Label(self.mode_panel, text="Asset").pack(anchor="w")
        var_asset = tk.StringVar(value=tile.asset)
        entry = ttk.Combobox(self.mode_panel, textvariable=var_asset, values=self.app.asset_mgr.list_assets())
        entry.pack(fill="x")
        entry.bind("<Return>", lambda e: self._update_field("asset", var_asset.get()))
        entry.bind("<FocusOut>", lambda e: self._update_field("asset", var_asset.get()))
        entry.bind("<<ComboboxSelected>>", lambda e: self._update_field("asset", var_asset.get()))

    def _build_spawn_ui(self):
        frame = ttk.LabelFrame(self.mode_panel, text="Spawn Point Mode", padding=5)
        frame.pack(fill="both", expand=True)
        ttk.Label(frame, text="Click hexes to add/remove spawn points").pack(anchor="w")
        points = self.session.markers.spawn_points
        if not points:
            ttk.Label(frame, text="No spawn points yet", font=("Italic", 8)).pack(anchor="w")
        for q, r in points:
            row = ttk.Frame(frame)
            row.pack(fill="x")
            ttk.Label(row, text=f"({q}, {r})").pack(side=tk.LEFT)
            ttk.Button(row, text="x", width=2, command=lambda q=q, r=r: self._remove_spawn(q, r)).pack(side=tk.RIGHT)

    def _build_goal_ui(self):
        frame = ttk.LabelFrame(self.mode_panel, text="Goal/Tree Mode", padding=5)
        frame.pack(fill="both", expand=True)
        ttk.Label(frame, text="Click a hex to set the World Tree location (goal)").pack(anchor="w")
        goal = self.session.markers.goal
        if goal is None:
            ttk.Label(frame, text="No goal set yet", font=("Italic", 8)).pack(anchor="w")
            return
        row = ttk.Frame(frame)
        row.pack(fill="x")
        ttk.Label(row, text=f"({goal[0]}, {goal[1]})").pack(side=tk.LEFT)
        ttk.Button(row, text="Remove", command=self._clear_goal).pack(side=tk.RIGHT)

    def render(self):
        self.var_zoom.set(f"{round(self.session.scale * 100)}%")
        self.app.renderer.render(self.canvas, self.session)

    def on_document_replaced(self):
        self.var_orientation.set(self.session.document.orientation)
        self.refresh_panel()
        self.render()


class MainApp:
    def __init__(self, root, map_path=None):
        self.root = root
        self.root.title("Hex Map Editor")
        self.root.geometry(f"{Config.WINDOW_WIDTH}x{Config.WINDOW_HEIGHT}")
        self.last_path = map_path if map_path and os.path.exists(map_path) else None
        self.session = EditorSession(load_startup_document(map_path))
        self.asset_mgr = AssetManager()
        self.renderer = CanvasRenderer(self.asset_mgr)
        self.map_tab = MapTab(root, self)
        self.map_tab.pack(fill="both", expand=True, padx=5, pady=5)
        self.map_tab.render()

    def import_map(self):
        path = filedialog.askopenfilename(filetypes=IMPORT_TYPES)
        if not path:
            return
        from_png = path.lower().endswith(".png")
        try:
            if from_png:
                document = load_snapshot_document(path)
            else:
                document = load_document_file(path)
        except (OSError, MapImportError) as e:
            messagebox.showerror("Invalid JSON", str(e))
            return
        if not from_png:
            self.last_path = path
        self.session.load_document(document)
        self.session.reset_view()
        self.map_tab.on_document_replaced()

    def save(self):
        if self.last_path:
            try:
                self._write(self.last_path)
                return
            except OSError as e:
                print(f"Error saving {self.last_path}, using Save As: {e}")
        self.save_as()

    def save_as(self):
        name = os.path.basename(self.last_path) if self.last_path else Config.DEFAULT_SAVE_NAME
        path = filedialog.asksaveasfilename(
            initialfile=name, defaultextension=".json", filetypes=JSON_TYPES
        )
        if not path:
            return
        try:
            self._write(path)
        except OSError as e:
            messagebox.showerror("Save Error", str(e))
            return
        self.last_path = path

    def _write(self, path):
        save_document_file(self.session.document, path)

    def export_png(self):
        path = filedialog.asksaveasfilename(
            defaultextension=".png", filetypes=[("PNG Images", "*.png")]
        )
        if not path:
            return
        try:
            save_snapshot(self.session, path)
        except OSError as e:
            messagebox.showerror("Export Error", str(e))


def main():
    root = tk.Tk()
    style = ttk.Style()
    style.theme_use("clam")
    MainApp(root, sys.argv[1] if len(sys.argv) > 1 else None)
    root.mainloop()


if __name__ == "__main__":
    main()
