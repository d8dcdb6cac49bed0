# Folder: copycat/workspace/
# File: rule.py
import logging
from typing import Optional

from copycat.workspace.structure import StructureKind, combine_strengths

logger = logging.getLogger(__name__)

NO_CHANGE_STRENGTH = 50.0
DEPTH_DIFFERENCE_WEIGHT = 12
AVERAGE_DEPTH_WEIGHT = 18
WEAKNESS_EXPONENT = 0.95
MULTIPLE_CHANGE_WARNING = "Rule: More than one letter changed. Copycat can't solve problems like this right now."


class Rule:
    """
    "Replace <facet> of <descriptor> <category> by <relation>", e.g.
    "Replace letterCategory of rightmost letter by successor".
    A rule with no facet is the "no change" rule.
    """

    kind = StructureKind.RULE

    def __init__(self, ctx, facet=None, descriptor=None, category=None, relation=None):
        self.ctx = ctx
        self.string = None
        self.total_strength = 0.0
        self.facet = facet
        self.descriptor = descriptor
        self.category = category
        self.relation = relation

    def __repr__(self):
        return f"<Rule: {self.synopsis()}>"

    def synopsis(self) -> str:
        if self.facet is None:
            return 'No change'
        return (f"Replace {self.facet.name} of {self.descriptor.name} "
                f"{self.category.name} by {self.relation.name}")

    def build(self):
        workspace = self.ctx.workspace
        if workspace.rule is not None:
            old = workspace.rule
            workspace.structures = [s for s in workspace.structures if s is not old]
        workspace.rule = self
        workspace.structures.append(self)
        self.activate()

    def break_(self):
        workspace = self.ctx.workspace
        if workspace.rule is not None:
            old = workspace.rule
            workspace.structures = [s for s in workspace.structures if s is not old]
            workspace.rule = None

    def activate(self):
        for node in (self.relation, self.facet, self.category, self.descriptor):
            if node is not None:
                node.activation = 100

    def same_as(self, other: Optional['Rule']) -> bool:
        if other is None:
            return False
        return (self.relation is other.relation and self.facet is other.facet
                and self.category is other.category and self.descriptor is other.descriptor)

    def total_weakness(self) -> float:
        return 100 - self.total_strength ** WEAKNESS_EXPONENT

    def update_strength(self):
        workspace = self.ctx.workspace
        if self.descriptor is None or self.relation is None:
            internal = NO_CHANGE_STRENGTH
        else:
            internal = self._internal_strength(workspace)
        # External strength equals internal strength for rules
        self.total_strength = combine_strengths(internal, internal)

    def _internal_strength(self, workspace) -> float:
        avg_depth = ((self.descriptor.depth + self.relation.depth) / 2) ** 1.1
        shared_descriptor_term = 0.0
        changed = workspace.first_changed_object()
        if changed is not None and changed.correspondence is not None:
            shared_descriptor_term = 100.0
            target_object = changed.correspondence.obj_from_target
            slipnode = self.descriptor.apply_slippages(workspace.get_slippable_mappings())
            if not target_object.has_descriptor(slipnode):
                return 0.0
        conceptual_height = (100 - self.descriptor.depth) / 10
        shared_descriptor_weight = conceptual_height ** 1.4
        depth_difference = 100 - abs(self.descriptor.depth - self.relation.depth)
        weight_sum = DEPTH_DIFFERENCE_WEIGHT + AVERAGE_DEPTH_WEIGHT + shared_descriptor_weight
        internal = (DEPTH_DIFFERENCE_WEIGHT * depth_difference + AVERAGE_DEPTH_WEIGHT * avg_depth
                    + shared_descriptor_weight * shared_descriptor_term) / weight_sum
        return min(100.0, internal)

    def apply_to_target(self) -> Optional[str]:
        """
        Applies the rule, translated through the workspace's slippages, to the
        target string. The rule itself is left untouched.
        Returns:
            Optional[str]: The answer, or None when the rule cannot be applied
            (ambiguous target, or a letter would move past 'a' or 'z').
        """
        workspace = self.ctx.workspace
        target_text = workspace.target_string.text
        if self.descriptor is None or self.relation is None:
            return target_text

        slippages = workspace.get_slippable_mappings()
        category = self.category.apply_slippages(slippages)
        facet = self.facet.apply_slippages(slippages)
        descriptor = self.descriptor.apply_slippages(slippages)
        relation = self.relation.apply_slippages(slippages)
        logger.debug(f"Translated rule: {facet.name} of {descriptor.name} {category.name} by {relation.name}")

        changeds = [o for o in workspace.target_string.objects
                    if o.has_descriptor(descriptor) and o.has_descriptor(category)]
        if not changeds:
            return target_text
        if len(changeds) > 1:
            self.ctx.reporter.warn(MULTIPLE_CHANGE_WARNING)
            return None

        changed = changeds[0]
        left, right = changed.left_index - 1, changed.right_index
        changed_middle = self._change_substring(target_text[left:right], facet, relation)
        if changed_middle is None:
            return None
        return target_text[:left] + changed_middle + target_text[right:]

    def _change_substring(self, text: str, facet, relation) -> Optional[str]:
        sn = self.ctx.slipnet
        if facet is sn.length:
            if relation is sn.predecessor:
                return text[:-1]
            if relation is sn.successor:
                return text + text[0]
            return text

        if relation is sn.predecessor:
            if 'a' in text:
                return None
            return ''.join(chr(ord(c) - 1) for c in text)
        if relation is sn.successor:
            if 'z' in text:
                return None
            return ''.join(chr(ord(c) + 1) for c in text)
        return relation.name.lower()
