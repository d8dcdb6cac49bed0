# Folder: copycat/workspace/
# File: workspace.py
import logging
from typing import Any, List, Optional

from copycat.workspace.objects import Group, Letter, WorkspaceObject
from copycat.workspace.structure import StructureKind

logger = logging.getLogger(__name__)

DEFAULT_STRINGS = ('abc', 'abd', 'pqr')
UNHAPPINESS_WEIGHT = 0.8
RULE_WEAKNESS_WEIGHT = 0.2


class WorkspaceString:
    """One of the three strings of the problem, with its letters, groups and bonds."""

    def __init__(self, workspace: 'Workspace', text: str):
        self.workspace = workspace
        self.ctx = workspace.ctx
        self.text = text or ''
        self.letters: List[Letter] = []
        self.objects: List[WorkspaceObject] = []
        self.bonds: List[Any] = []
        self.intra_string_unhappiness = 0.0

        for i in range(len(self.text)):
            letter = Letter(self, i + 1)
            self.objects.append(letter)
            self.letters.append(letter)
            workspace.objects.append(letter)
            # Built in place: ctx.workspace may not be bound yet
            for description in letter.descriptions:
                description.activate()
                workspace.structures.append(description)

    def __repr__(self):
        return f"<WorkspaceString: {self.text}>"

    def synopsis(self) -> str:
        return (f"{self.text} with {len(self.letters)} letters, "
                f"{len(self.objects)} objects, {len(self.bonds)} bonds.")

    @property
    def length(self) -> int:
        return len(self.text)

    def update_relative_importances(self):
        total = sum(obj.raw_importance for obj in self.objects)
        for obj in self.objects:
            obj.relative_importance = 0.0 if total == 0 else obj.raw_importance / total

    def update_intra_string_unhappiness(self):
        if not self.objects:
            self.intra_string_unhappiness = 0.0
        else:
            self.intra_string_unhappiness = sum(o.intra_string_unhappiness for o in self.objects) / len(self.objects)

    def get_equivalent_group(self, sought: Group) -> Optional[Group]:
        for obj in self.objects:
            if isinstance(obj, Group) and obj.same_as(sought):
                return obj
        return None


class Workspace:
    """
    The short-term memory of the engine: the three strings plus every
    structure built on them so far.
    """
    def __init__(self, ctx, initial: str = DEFAULT_STRINGS[0], modified: str = DEFAULT_STRINGS[1],
                 target: str = DEFAULT_STRINGS[2]):
        self.ctx = ctx
        self.objects: List[WorkspaceObject] = []
        self.structures: List[Any] = []
        self.changed_object: Optional[WorkspaceObject] = None
        self.rule = None
        self.final_answer: Optional[str] = None
        self.intra_string_unhappiness = 0.0
        self.inter_string_unhappiness = 0.0
        self.total_unhappiness = 0.0
        self.initial_string = WorkspaceString(self, initial.lower())
        self.modified_string = WorkspaceString(self, modified.lower())
        self.target_string = WorkspaceString(self, target.lower())

    def __repr__(self):
        return (f"<Workspace: {self.initial_string.text}:{self.modified_string.text} :: "
                f"{self.target_string.text}:?>")

    def reset(self, initial: Optional[str] = None, modified: Optional[str] = None,
              target: Optional[str] = None):
        """Clears every structure and rebuilds the strings (keeping the current text where None)."""
        initial = (initial or self.initial_string.text).lower()
        modified = (modified or self.modified_string.text).lower()
        target = (target or self.target_string.text).lower()

        self.final_answer = None
        self.changed_object = None
        self.objects = []
        self.structures = []
        self.rule = None
        self.intra_string_unhappiness = 0.0
        self.inter_string_unhappiness = 0.0
        self.total_unhappiness = 0.0

        self.initial_string = WorkspaceString(self, initial)
        self.modified_string = WorkspaceString(self, modified)
        self.target_string = WorkspaceString(self, target)
        logger.debug(f"Workspace reset to {self!r}")

    def string_label(self, wstring: WorkspaceString) -> str:
        if wstring is self.initial_string:
            return 'initial'
        if wstring is self.modified_string:
            return 'modified'
        if wstring is self.target_string:
            return 'target'
        return 'unknown'

    def structures_of_kind(self, kind: StructureKind) -> list:
        return [s for s in self.structures if s.kind is kind]

    def first_changed_object(self) -> Optional[WorkspaceObject]:
        for obj in self.initial_string.objects:
            if obj.changed:
                return obj
        return None

    def update_everything(self):
        """Refreshes every structure strength and every object's salience values."""
        for structure in self.structures:
            structure.update_strength()
        for obj in self.objects:
            obj.update_values()
        self.initial_string.update_relative_importances()
        self.target_string.update_relative_importances()
        self.initial_string.update_intra_string_unhappiness()
        self.target_string.update_intra_string_unhappiness()

    def calc_temperature(self) -> float:
        """
        Returns:
            float: 0.8 * total unhappiness + 0.2 * rule weakness, in [0, 100].
        """
        def weighted(attr: str) -> float:
            return min(100.0, 0.5 * sum(o.relative_importance * getattr(o, attr) for o in self.objects))

        self.intra_string_unhappiness = weighted('intra_string_unhappiness')
        self.inter_string_unhappiness = weighted('inter_string_unhappiness')
        self.total_unhappiness = weighted('total_unhappiness')

        rule_weakness = 100.0
        if self.rule is not None:
            self.rule.update_strength()
            rule_weakness = 100 - self.rule.total_strength
        return UNHAPPINESS_WEIGHT * self.total_unhappiness + RULE_WEAKNESS_WEIGHT * rule_weakness

    def get_slippable_mappings(self) -> list:
        """Slippages licensed by the current correspondences, changed object's first."""
        result = []
        if self.changed_object is not None and self.changed_object.correspondence is not None:
            result.extend(self.changed_object.correspondence.concept_mappings)
        for obj in self.initial_string.objects:
            if obj.correspondence is None:
                continue
            fresh = [m for m in obj.correspondence.get_slippable_mappings()
                     if not m.is_nearly_contained_in(result)]
            result.extend(fresh)
        return result
