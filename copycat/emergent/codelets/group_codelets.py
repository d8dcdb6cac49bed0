# Folder: copycat/emergent/codelets/
# File: group_codelets.py
import logging
from typing import List

from copycat.emergent.codelets.base import Codelet, CodeletType
from copycat.emergent.codelets import utils
from copycat.workspace.bond import Bond
from copycat.workspace.objects import Group, Letter

logger = logging.getLogger(__name__)

# Exponent applied to support*activation, by number of supporting groups
SINGLE_LETTER_SUPPORT_EXPONENTS = {1: 4.0, 2: 2.0}
SINGLE_LETTER_SUPPORT_EXPONENT_MIN = 1.0


def _choose_start_direction(ctx, source):
    sn = ctx.slipnet
    if source.leftmost:
        return sn.right
    if source.rightmost:
        return sn.left
    return ctx.rand_gen.weighted_choice([sn.left, sn.right], [sn.left.activation, sn.right.activation])


def _propose_run(ctx, source, category, direction, group_category):
    objects, bonds, facet, direction = utils.collect_bonded_run(source, category, direction)
    if len(objects) < 2:
        return
    ctx.coderack.propose_group(objects, bonds, group_category, direction, facet)


class TopDownGroupScoutCategory(Codelet):
    """Looks for a group of the category given as argument (e.g. successorGroup)."""
    codelet_type = CodeletType.TOP_DOWN_GROUP_SCOUT_CATEGORY

    def run(self):
        ctx = self.ctx
        sn = ctx.slipnet
        group_category = self.args[0]
        category = group_category.get_related_node(sn.bond_category)
        if category is None:
            return
        source = utils.get_scout_source(ctx, 'bondCategory', category)
        if source is None or source.spans_string():
            return

        direction = _choose_start_direction(ctx, source)
        first_bond = source.left_bond if direction is sn.left else source.right_bond
        if first_bond is None or first_bond.category is not category:
            first_bond = source.left_bond if direction is sn.right else source.right_bond
            if first_bond is None or first_bond.category is not category:
                if category is sn.sameness and isinstance(source, Letter):
                    if ctx.rand_gen.coin_flip(self._single_letter_group_probability(source)):
                        ctx.coderack.propose_group([source], [], sn.sameness_group, None, sn.letter_category)
                return

        _propose_run(ctx, source, category, first_bond.direction_category, group_category)

    def _single_letter_group_probability(self, letter) -> float:
        ctx = self.ctx
        sn = ctx.slipnet
        group = Group(letter.string, sn.sameness_group, None, sn.letter_category, [letter], [])
        num_supporters = group.number_of_local_supporting_groups()
        if num_supporters == 0:
            return 0.0
        exponent = SINGLE_LETTER_SUPPORT_EXPONENTS.get(num_supporters, SINGLE_LETTER_SUPPORT_EXPONENT_MIN)
        support = group.local_support() / 100
        activation = sn.length.activation / 100
        return ctx.temperature.get_adjusted_prob((support * activation) ** exponent)


class TopDownGroupScoutDirection(Codelet):
    """Looks for a group whose bonds point in the direction given as argument."""
    codelet_type = CodeletType.TOP_DOWN_GROUP_SCOUT_DIRECTION

    def run(self):
        ctx = self.ctx
        sn = ctx.slipnet
        direction = self.args[0]
        source = utils.get_scout_source(ctx, 'bondDirection', direction)
        if source is None or source.spans_string():
            return

        my_direction = _choose_start_direction(ctx, source)
        first_bond = source.left_bond if my_direction is sn.left else source.right_bond
        if first_bond is not None and first_bond.direction_category is None:
            direction = None
        if first_bond is None or first_bond.direction_category is not direction:
            first_bond = source.left_bond if my_direction is sn.right else source.right_bond
            if first_bond is not None and first_bond.direction_category is None:
                direction = None
            if first_bond is None or first_bond.direction_category is not direction:
                return

        category = first_bond.category
        group_category = category.get_related_node(sn.group_category)
        if group_category is None:
            return
        _propose_run(ctx, source, category, direction, group_category)


class GroupScoutWholeString(Codelet):
    """Tries to group an entire string along its chain of bonds."""
    codelet_type = CodeletType.GROUP_SCOUT_WHOLE_STRING

    def run(self):
        ctx = self.ctx
        sn = ctx.slipnet
        workspace = ctx.workspace
        wstring = ctx.rand_gen.choice([workspace.initial_string, workspace.target_string])
        leftmost = next((o for o in wstring.objects if o.leftmost), None)
        if leftmost is None:
            return
        while leftmost.group is not None and leftmost.group.bond_category is sn.sameness:
            leftmost = leftmost.group

        if leftmost.spans_string():
            if isinstance(leftmost, Group):
                ctx.coderack.propose_group(leftmost.object_list, leftmost.bond_list, leftmost.group_category,
                                           leftmost.direction_category, leftmost.facet)
            else:
                ctx.coderack.propose_group([leftmost], [], sn.sameness_group, None, sn.letter_category)
            return

        bonds = []
        objects = [leftmost]
        current = leftmost
        while current.right_bond is not None:
            bonds.append(current.right_bond)
            current = current.right_bond.right_object
            objects.append(current)
        if not current.rightmost:
            return

        chosen = ctx.rand_gen.choice(bonds)
        bonds = self._possible_group_bonds(chosen, bonds)
        if not bonds:
            return
        group_category = chosen.category.get_related_node(sn.group_category)
        ctx.coderack.propose_group(objects, bonds, group_category, chosen.direction_category, chosen.facet)

    def _possible_group_bonds(self, chosen: Bond, bonds: List[Bond]) -> List[Bond]:
        """Returns bonds compatible with chosen (flipping opposite ones), or [] if any clash."""
        sn = self.ctx.slipnet
        result = []
        for bond in bonds:
            if bond.same_categories(chosen):
                result.append(bond)
                continue
            if bond.category is chosen.category or bond.direction_category is chosen.direction_category:
                return []
            if sn.sameness in (chosen.category, bond.category):
                return []
            result.append(Bond(bond.destination, bond.source, chosen.category, chosen.facet,
                               bond.dest_descriptor, bond.source_descriptor))
        return result


class GroupStrengthTester(Codelet):
    codelet_type = CodeletType.GROUP_STRENGTH_TESTER

    def run(self):
        ctx = self.ctx
        group = self.args[0]
        group.update_strength()
        strength = group.total_strength
        if not ctx.rand_gen.coin_flip(ctx.temperature.get_adjusted_prob(strength / 100)):
            logger.debug(f"Group fizzled: {group!r}")
            return
        group.bond_category.activation = 100
        if group.direction_category is not None:
            group.direction_category.activation = 100
        ctx.coderack.post_new(CodeletType.GROUP_BUILDER, utils.get_urgency_bin(strength), [group])


class GroupBuilder(Codelet):
    """Builds a tested group, creating missing bonds and displacing rivals."""
    codelet_type = CodeletType.GROUP_BUILDER

    def run(self):
        ctx = self.ctx
        sn = ctx.slipnet
        group = self.args[0]

        equivalent = group.string.get_equivalent_group(group)
        if equivalent is not None:
            for description in group.descriptions:
                description.descriptor.activation = 100
            equivalent.add_descriptions(group.descriptions)
            return
        if any(o not in ctx.workspace.objects for o in group.object_list):
            return

        incompatible_bonds = self._incompatible_bonds(group)
        group.update_strength()
        if not utils.fight_it_out(ctx, group, 1.0, incompatible_bonds, 1.0):
            return
        incompatible_groups = self._incompatible_groups(group)
        if not utils.fight_it_out(ctx, group, 1.0, incompatible_groups, 1.0):
            return

        for bond in incompatible_bonds:
            bond.break_()

        group.bond_list = []
        for object1, object2 in zip(group.object_list, group.object_list[1:]):
            if object1.right_bond is None:
                if group.direction_category is sn.right:
                    source, destination = object1, object2
                else:
                    source, destination = object2, object1
                facet = group.facet
                Bond(source, destination, group.bond_category, facet,
                     source.get_descriptor(facet), destination.get_descriptor(facet)).build()
            group.bond_list.append(object1.right_bond)

        for rival in incompatible_groups:
            rival.break_()
        group.build()
        for description in group.descriptions:
            description.descriptor.activation = 100
        logger.debug(f"Built group {group!r}")

    def _incompatible_bonds(self, group: Group) -> list:
        """Bonds touching the grouped objects that run against the group's direction."""
        result = []
        if len(group.object_list) < 2:
            return result
        previous = group.object_list[0]
        for obj in group.object_list[1:]:
            left_bond = obj.left_bond
            if left_bond is not None:
                if left_bond.left_object is previous:
                    continue
                if left_bond.direction_category is group.direction_category:
                    continue
                result.append(left_bond)
            previous = obj
        following = group.object_list[-1]
        for obj in reversed(group.object_list[:-1]):
            right_bond = obj.right_bond
            if right_bond is not None:
                if right_bond.right_object is following:
                    continue
                if right_bond.direction_category is group.direction_category:
                    continue
                result.append(right_bond)
            following = obj
        return result

    def _incompatible_groups(self, group: Group) -> list:
        """Every existing group (and enclosing group) that holds one of the objects."""
        result = []
        for obj in group.object_list:
            enclosing = obj.group
            while enclosing is not None and enclosing is not group:
                if enclosing not in result:
                    result.append(enclosing)
                enclosing = enclosing.group
        return result
