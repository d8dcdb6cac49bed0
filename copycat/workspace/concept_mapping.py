# Folder: copycat/workspace/
# File: concept_mapping.py
import logging
from typing import List, Sequence

logger = logging.getLogger(__name__)


class ConceptMapping:
    """
    A pairing of a descriptor of an initial-string object with a descriptor of
    a target-string object, e.g. rightmost -> leftmost (label: opposite).
    """
    def __init__(self, initial_desc_type, target_desc_type, initial_descriptor, target_descriptor,
                 initial_object=None, target_object=None):
        self.slipnet = initial_desc_type.slipnet
        self.initial_desc_type = initial_desc_type
        self.target_desc_type = target_desc_type
        self.initial_descriptor = initial_descriptor
        self.target_descriptor = target_descriptor
        self.initial_object = initial_object
        self.target_object = target_object
        self.label = initial_descriptor.get_bond_category(target_descriptor)

    def __repr__(self):
        return f"<ConceptMapping: {self.synopsis()}>"

    def synopsis(self) -> str:
        label = self.label.name if self.label else 'Anonymous'
        return f"{label} from {self.initial_descriptor.name} to {self.target_descriptor.name}"

    def _degree_of_association(self) -> float:
        if self.initial_descriptor is self.target_descriptor:
            return 100.0
        for link in self.initial_descriptor.lateral_slip_links:
            if link.destination is self.target_descriptor:
                return link.degree_of_association()
        return 0.0

    def _depth(self) -> float:
        return (self.initial_descriptor.depth + self.target_descriptor.depth) / 200

    def slippability(self) -> float:
        association = self._degree_of_association()
        if association >= 100:
            return 100.0
        return association * (1 - self._depth() ** 2)

    def strength(self) -> float:
        association = self._degree_of_association()
        if association >= 100:
            return 100.0
        return association * (1 + self._depth() ** 2)

    def can_slip(self) -> bool:
        return self.label is not self.slipnet.identity and self.label is not self.slipnet.sameness

    def is_distinguishing(self) -> bool:
        sn = self.slipnet
        if self.initial_descriptor is sn.whole and self.target_descriptor is sn.whole:
            return False
        if self.initial_object is None or self.target_object is None:
            return False
        return (self.initial_object.is_distinguishing_descriptor(self.initial_descriptor)
                and self.target_object.is_distinguishing_descriptor(self.target_descriptor))

    def is_contained_in(self, mappings: Sequence['ConceptMapping']) -> bool:
        return any(m.initial_desc_type is self.initial_desc_type
                   and m.target_desc_type is self.target_desc_type
                   and m.initial_descriptor is self.initial_descriptor
                   and m.target_descriptor is self.target_descriptor
                   for m in mappings)

    def is_nearly_contained_in(self, mappings: Sequence['ConceptMapping']) -> bool:
        return any(m.initial_desc_type is self.initial_desc_type
                   and m.target_desc_type is self.target_desc_type
                   and m.initial_descriptor is self.initial_descriptor
                   for m in mappings)

    def symmetric_version(self) -> 'ConceptMapping':
        """The reversed mapping, when the relation reads the same both ways."""
        if not self.can_slip():
            return self
        if self.target_descriptor.get_bond_category(self.initial_descriptor) is not self.label:
            return self
        return ConceptMapping(self.target_desc_type, self.initial_desc_type,
                              self.target_descriptor, self.initial_descriptor,
                              self.initial_object, self.target_object)

    def is_relevant(self) -> bool:
        return self.initial_desc_type.is_fully_active() and self.target_desc_type.is_fully_active()

    def is_related_to(self, other: 'ConceptMapping') -> bool:
        return (self.initial_descriptor.is_related_to(other.initial_descriptor)
                or self.target_descriptor.is_related_to(other.target_descriptor))

    def is_incompatible_with(self, other: 'ConceptMapping') -> bool:
        # e.g. rightmost -> leftmost is incompatible with right -> right
        if not self.is_related_to(other):
            return False
        if self.label is None or other.label is None:
            return False
        return self.label is not other.label

    def supports(self, other: 'ConceptMapping') -> bool:
        # e.g. rightmost -> rightmost supports right -> right
        if other.initial_desc_type is self.initial_desc_type and other.target_desc_type is self.target_desc_type:
            return True
        if not self.is_related_to(other):
            return False
        if self.label is None or other.label is None:
            return False
        return self.label is other.label

    @staticmethod
    def get_mappings(initial_object, target_object, initial_descriptions, target_descriptions) -> List['ConceptMapping']:
        """Pairs up same-typed descriptions whose descriptors are equal or slip-linked."""
        mappings = []
        for ini in initial_descriptions:
            for targ in target_descriptions:
                if ini.description_type is not targ.description_type:
                    continue
                if ini.descriptor is targ.descriptor or ini.descriptor.is_slip_linked_to(targ.descriptor):
                    mappings.append(ConceptMapping(ini.description_type, targ.description_type,
                                                   ini.descriptor, targ.descriptor,
                                                   initial_object, target_object))
        return mappings
