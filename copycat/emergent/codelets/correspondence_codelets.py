# Folder: copycat/emergent/codelets/
# File: correspondence_codelets.py
import logging

from copycat.emergent.codelets.base import Codelet, CodeletType
from copycat.emergent.codelets import utils
from copycat.workspace.concept_mapping import ConceptMapping
from copycat.workspace.correspondence import Correspondence
from copycat.workspace.objects import Group

logger = logging.getLogger(__name__)

CORRESPONDENCE_WEIGHT_VS_BOND = 3.0
BOND_WEIGHT_VS_CORRESPONDENCE = 2.0


def _relevant_mappings(initial_object, target_object):
    return ConceptMapping.get_mappings(initial_object, target_object,
                                       initial_object.relevant_descriptions(),
                                       target_object.relevant_descriptions())


def _propose_if_slippable(ctx, initial_object, target_object):
    """Shared tail of the correspondence scouts."""
    sn = ctx.slipnet
    mappings = _relevant_mappings(initial_object, target_object)
    if not mappings:
        return
    if not any(ctx.rand_gen.coin_flip(ctx.temperature.get_adjusted_prob(m.slippability() / 100))
               for m in mappings):
        return
    distinguishing = [m for m in mappings if m.is_distinguishing()]
    if not distinguishing:
        return

    flip_target_object = False
    if (initial_object.spans_string() and target_object.spans_string()
            and isinstance(target_object, Group) and target_object.direction_category is not None
            and sn.opposite.activation != 100):
        opposites = [m for m in distinguishing
                     if m.initial_desc_type in (sn.string_position_category, sn.direction_category)]
        opposite_types = [m.initial_desc_type for m in opposites]
        if sn.direction_category in opposite_types and all(m.label is sn.opposite for m in opposites):
            target_object = target_object.flipped_version()
            mappings = _relevant_mappings(initial_object, target_object)
            flip_target_object = True

    ctx.coderack.propose_correspondence(initial_object, target_object, mappings, flip_target_object)


class BottomUpCorrespondenceScout(Codelet):
    """Pairs two inter-string-salient objects and proposes a correspondence between them."""
    codelet_type = CodeletType.BOTTOM_UP_CORRESPONDENCE_SCOUT

    def run(self):
        ctx = self.ctx
        workspace = ctx.workspace
        initial_object = utils.choose_unmodified_object(ctx, 'inter_string_salience',
                                                        workspace.initial_string.objects)
        if initial_object is None:
            return
        target_object = utils.choose_unmodified_object(ctx, 'inter_string_salience',
                                                       workspace.target_string.objects)
        if target_object is None:
            return
        if initial_object.spans_string() != target_object.spans_string():
            return
        _propose_if_slippable(ctx, initial_object, target_object)


class ImportantObjectCorrespondenceScout(Codelet):
    """
    Starts from an important initial-string object and looks for a target
    object sharing one of its distinguishing descriptors, after slippage.
    """
    codelet_type = CodeletType.IMPORTANT_OBJECT_CORRESPONDENCE_SCOUT

    def run(self):
        ctx = self.ctx
        workspace = ctx.workspace
        initial_object = utils.choose_unmodified_object(ctx, 'relative_importance',
                                                        workspace.initial_string.objects)
        if initial_object is None:
            return

        descriptors = initial_object.relevant_distinguishing_descriptors()
        weights = [ctx.temperature.get_adjusted_value(d.depth) for d in descriptors]
        descriptor = ctx.rand_gen.weighted_choice(descriptors, weights)
        if descriptor is None:
            return

        sought = descriptor
        for mapping in workspace.get_slippable_mappings():
            if mapping.initial_descriptor is descriptor:
                sought = mapping.target_descriptor

        candidates = [obj for obj in workspace.target_string.objects
                      for d in obj.relevant_descriptions() if d.descriptor is sought]
        if not candidates:
            return
        target_object = utils.choose_unmodified_object(ctx, 'inter_string_salience', candidates)
        if target_object is None:
            return
        if initial_object.spans_string() != target_object.spans_string():
            return
        _propose_if_slippable(ctx, initial_object, target_object)


def _objects_exist(ctx, correspondence: Correspondence) -> bool:
    workspace = ctx.workspace
    if correspondence.obj_from_initial not in workspace.objects:
        return False
    if correspondence.obj_from_target in workspace.objects:
        return True
    if not correspondence.flip_target_object:
        return False
    unflipped = correspondence.obj_from_target.flipped_version()
    return workspace.target_string.get_equivalent_group(unflipped) is not None


class CorrespondenceStrengthTester(Codelet):
    codelet_type = CodeletType.CORRESPONDENCE_STRENGTH_TESTER

    def run(self):
        ctx = self.ctx
        correspondence = self.args[0]
        if not _objects_exist(ctx, correspondence):
            return
        correspondence.update_strength()
        strength = correspondence.total_strength
        if not ctx.rand_gen.coin_flip(ctx.temperature.get_adjusted_prob(strength / 100)):
            logger.debug(f"Correspondence fizzled: {correspondence!r}")
            return
        for mapping in correspondence.concept_mappings:
            mapping.initial_desc_type.activation = 100
            mapping.initial_descriptor.activation = 100
            mapping.target_desc_type.activation = 100
            mapping.target_descriptor.activation = 100
        ctx.coderack.post_new(CodeletType.CORRESPONDENCE_BUILDER, utils.get_urgency_bin(strength),
                              [correspondence])


class CorrespondenceBuilder(Codelet):
    """Builds a tested correspondence, or extends an existing one between the same objects."""
    codelet_type = CodeletType.CORRESPONDENCE_BUILDER

    def run(self):
        ctx = self.ctx
        workspace = ctx.workspace
        correspondence = self.args[0]
        initial_object = correspondence.obj_from_initial
        target_object = correspondence.obj_from_target
        if not _objects_exist(ctx, correspondence):
            return

        existing = initial_object.correspondence
        if existing is not None and existing.obj_from_target is target_object:
            for mapping in correspondence.concept_mappings:
                if mapping.label is not None:
                    mapping.label.activation = 100
                if not mapping.is_contained_in(existing.concept_mappings):
                    existing.concept_mappings.append(mapping)
            return

        incompatibles = [o.correspondence for o in workspace.initial_string.objects
                         if o.correspondence is not None and correspondence.is_incompatible_with(o.correspondence)]
        span = initial_object.letter_span() + target_object.letter_span()
        for incompatible in incompatibles:
            incompatible_span = incompatible.obj_from_initial.letter_span() + incompatible.obj_from_target.letter_span()
            if not utils.structure_vs_structure(ctx, correspondence, span, incompatible, incompatible_span):
                return

        incompatible_bond = None
        incompatible_group = None
        if ((initial_object.leftmost or initial_object.rightmost)
                and (target_object.leftmost or target_object.rightmost)):
            incompatible_bond = self._incompatible_bond(correspondence)
            if incompatible_bond is not None:
                if not utils.structure_vs_structure(ctx, correspondence, CORRESPONDENCE_WEIGHT_VS_BOND,
                                                    incompatible_bond, BOND_WEIGHT_VS_CORRESPONDENCE):
                    return
                incompatible_group = target_object.group
                if incompatible_group is not None:
                    if not utils.structure_vs_structure(ctx, correspondence, CORRESPONDENCE_WEIGHT_VS_BOND,
                                                        incompatible_group, BOND_WEIGHT_VS_CORRESPONDENCE):
                        return

        incompatible_rule = None
        if workspace.rule is not None and self._is_incompatible_with_rule(workspace.rule, correspondence):
            incompatible_rule = workspace.rule
            if not utils.structure_vs_structure(ctx, correspondence, 1.0, incompatible_rule, 1.0):
                return

        for incompatible in incompatibles:
            incompatible.break_()
        for structure in (incompatible_bond, incompatible_group, incompatible_rule):
            if structure is not None:
                structure.break_()
        if correspondence.flip_target_object and target_object not in workspace.objects:
            self._replace_with_flipped(target_object)
        correspondence.build()
        logger.debug(f"Built correspondence {correspondence!r}")

    def _replace_with_flipped(self, flipped: Group):
        """Swaps the target's group for its flipped version, bonds included."""
        target_string = self.ctx.workspace.target_string
        unflipped = target_string.get_equivalent_group(flipped.flipped_version())
        if unflipped is not None:
            unflipped.break_()
            for bond in list(unflipped.bond_list):
                bond.break_()
        for bond in flipped.bond_list:
            bond.build()
        flipped.build()

    def _is_incompatible_with_rule(self, rule, correspondence: Correspondence) -> bool:
        changed = self.ctx.workspace.first_changed_object()
        if changed is None or correspondence.obj_from_initial is not changed:
            return False
        return any(m.initial_descriptor is rule.descriptor for m in correspondence.concept_mappings)

    def _incompatible_bond(self, correspondence: Correspondence):
        """The target's end bond, if its direction contradicts the correspondence's mappings."""
        sn = self.ctx.slipnet

        def end_bond(obj):
            if obj.leftmost:
                return obj.right_bond
            if obj.rightmost:
                return obj.left_bond
            return None

        initial_bond = end_bond(correspondence.obj_from_initial)
        target_bond = end_bond(correspondence.obj_from_target)
        if initial_bond is None or target_bond is None:
            return None
        if initial_bond.direction_category is None or target_bond.direction_category is None:
            return None
        mapping = ConceptMapping(sn.direction_category, sn.direction_category,
                                 initial_bond.direction_category, target_bond.direction_category)
        if any(m.is_incompatible_with(mapping) for m in correspondence.concept_mappings):
            return target_bond
        return None
