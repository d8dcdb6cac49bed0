# Folder: copycat/workspace/
# File: replacement.py


class Replacement:
    """Records how a letter of the initial string became a letter of the modified string."""

    def __init__(self, obj_from_initial, obj_from_modified, relation):
        self.obj_from_initial = obj_from_initial
        self.obj_from_modified = obj_from_modified
        self.relation = relation

    def __repr__(self):
        return f"<Replacement: {self.synopsis()}>"

    def synopsis(self) -> str:
        relation = self.relation.name if self.relation else 'None'
        return f"{self.obj_from_initial.synopsis()} -> {self.obj_from_modified.synopsis()} ({relation})"
