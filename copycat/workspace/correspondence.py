# Folder: copycat/workspace/
# File: correspondence.py
import logging
from typing import List, Optional

from copycat.workspace.concept_mapping import ConceptMapping
from copycat.workspace.objects import Group, Letter
from copycat.workspace.structure import StructureKind, combine_strengths

logger = logging.getLogger(__name__)

COHERENCE_FACTOR = 2.5
MAPPING_COUNT_FACTORS = {1: 0.8, 2: 1.2}
MAPPING_COUNT_FACTOR_MAX = 1.6


class Correspondence:
    """
    A link between an object of the initial string and an object of the target
    string, justified by a set of concept mappings.
    """

    kind = StructureKind.CORRESPONDENCE

    def __init__(self, obj_from_initial, obj_from_target, concept_mappings: Optional[List[ConceptMapping]],
                 flip_target_object: bool = False):
        self.ctx = obj_from_initial.ctx
        self.string = None
        self.total_strength = 0.0
        self.obj_from_initial = obj_from_initial
        self.obj_from_target = obj_from_target
        self.concept_mappings: List[ConceptMapping] = list(concept_mappings or [])
        self.flip_target_object = flip_target_object
        # Symmetric versions of slippages, e.g. leftmost -> rightmost for rightmost -> leftmost
        self.accessory_concept_mappings: List[ConceptMapping] = []

    def __repr__(self):
        return f"<Correspondence: {self.synopsis()}>"

    def synopsis(self) -> str:
        mappings = ', '.join(m.synopsis() for m in self.concept_mappings)
        return f"{self.obj_from_initial.synopsis()} <--> {self.obj_from_target.synopsis()} ({mappings})"

    def distinguishing_mappings(self) -> List[ConceptMapping]:
        return [m for m in self.concept_mappings if m.is_distinguishing() and m.is_relevant()]

    def build(self):
        self.ctx.workspace.structures.append(self)
        if self.obj_from_initial.correspondence is not None:
            self.obj_from_initial.correspondence.break_()
        if self.obj_from_target.correspondence is not None:
            self.obj_from_target.correspondence.break_()
        self.obj_from_initial.correspondence = self
        self.obj_from_target.correspondence = self

        for mapping in self.distinguishing_mappings():
            if mapping.can_slip():
                self.accessory_concept_mappings.append(mapping.symmetric_version())
        if isinstance(self.obj_from_initial, Group) and isinstance(self.obj_from_target, Group):
            bond_mappings = ConceptMapping.get_mappings(
                self.obj_from_initial, self.obj_from_target,
                self.obj_from_initial.bond_descriptions, self.obj_from_target.bond_descriptions)
            for mapping in bond_mappings:
                self.accessory_concept_mappings.append(mapping)
                if mapping.can_slip():
                    self.accessory_concept_mappings.append(mapping.symmetric_version())

        for mapping in self.concept_mappings:
            if mapping.label is not None:
                mapping.label.activation = 100

    def break_(self):
        workspace = self.ctx.workspace
        workspace.structures = [s for s in workspace.structures if s is not self]
        if self.obj_from_initial.correspondence is self:
            self.obj_from_initial.correspondence = None
        if self.obj_from_target.correspondence is self:
            self.obj_from_target.correspondence = None

    def update_strength(self):
        mappings = self.distinguishing_mappings()
        num_mappings = len(mappings)
        if num_mappings < 1:
            internal = 0.0
        else:
            avg_strength = sum(m.strength() for m in mappings) / num_mappings
            count_factor = MAPPING_COUNT_FACTORS.get(num_mappings, MAPPING_COUNT_FACTOR_MAX)
            coherence_factor = COHERENCE_FACTOR if self._is_internally_coherent() else 1.0
            internal = min(100.0, avg_strength * coherence_factor * count_factor)

        if isinstance(self.obj_from_initial, Letter) and self.obj_from_initial.spans_string():
            external = 100.0
        elif isinstance(self.obj_from_target, Letter) and self.obj_from_target.spans_string():
            external = 100.0
        else:
            supporters = [s for s in self.ctx.workspace.structures
                          if s.kind is StructureKind.CORRESPONDENCE and self._supports(s)]
            external = min(100.0, sum(s.total_strength for s in supporters))
        self.total_strength = combine_strengths(internal, external)

    def is_incompatible_with(self, other: Optional['Correspondence']) -> bool:
        if other is None:
            return False
        if self.obj_from_initial is other.obj_from_initial or self.obj_from_target is other.obj_from_target:
            return True
        return any(m.is_incompatible_with(o) for m in self.concept_mappings for o in other.concept_mappings)

    def get_slippable_mappings(self) -> List[ConceptMapping]:
        mappings = [m for m in self.concept_mappings if m.can_slip()]
        mappings.extend(m for m in self.accessory_concept_mappings if m.can_slip())
        return mappings

    def _supports(self, other: 'Correspondence') -> bool:
        if (other is self or self.obj_from_initial is other.obj_from_initial
                or self.obj_from_target is other.obj_from_target or self.is_incompatible_with(other)):
            return False
        mine = [m for m in self.concept_mappings if m.is_distinguishing()]
        theirs = [m for m in other.concept_mappings if m.is_distinguishing()]
        return any(m.supports(o) for m in mine for o in theirs)

    def _is_internally_coherent(self) -> bool:
        mappings = self.distinguishing_mappings()
        for i, first in enumerate(mappings):
            for j, second in enumerate(mappings):
                if i != j and first.supports(second):
                    return True
        return False
