class Selection:
    """Single / multi tile selection with a focus tile for the inspector.

    `focus` is the tile shown in the details panel. `multi` holds ids once
    the user starts extending the selection with the modifier key.
    """

    def __init__(self):
        self.focus = None
        self.multi = set()
        self.drag_selecting = False

    @property
    def state(self):
        if self.multi:
            return "multi"
        if self.focus is not None:
            return "single"
        return "none"

    def clear(self):
        self.focus = None
        self.multi = set()
        self.drag_selecting = False

    def click(self, tile):
        self.multi = set()
        self.focus = tile.id

    def toggle(self, tile):
        if not self.multi and self.focus is not None and self.focus != tile.id:
            self.multi.add(self.focus)
        if tile.id in self.multi:
            self.multi.discard(tile.id)
        else:
            self.multi.add(tile.id)
        self.focus = tile.id

    def begin_drag(self):
        self.drag_selecting = True

    def drag_over(self, tile):
        if not self.drag_selecting or tile.id in self.multi:
            return False
        self.multi.add(tile.id)
        self.focus = tile.id
        return True

    def end_drag(self):
        self.drag_selecting = False

    def targets(self):
        if self.multi:
            return set(self.multi)
        if self.focus is not None:
            return {self.focus}
        return set()

    def is_selected(self, tid):
        return tid == self.focus or tid in self.multi
