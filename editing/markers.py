class MarkerRegistry:
    """Spawn points and the goal ("world tree") marker of a document.

    Markers are plain coordinates; a marker may sit where no tile exists.
    """

    def __init__(self, document):
        self.document = document

    @property
    def spawn_points(self):
        return list(self.document.spawn_points)

    @property
    def goal(self):
        return self.document.goal

    def is_spawn(self, q, r):
        return self.document.has_spawn(q, r)

    def toggle_spawn(self, q, r):
        """Returns True if the point is a spawn afterwards."""
        if self.document.has_spawn(q, r):
            self.document.remove_spawn(q, r)
            return False
        self.document.add_spawn(q, r)
        return True

    def is_goal(self, q, r):
        return self.document.goal == (q, r)

    def set_goal(self, q, r):
        if self.is_goal(q, r):
            self.document.set_goal(None)
        else:
            self.document.set_goal((q, r))
        return self.document.goal

    def clear_goal(self):
        if self.document.goal is not None:
            self.document.set_goal(None)
