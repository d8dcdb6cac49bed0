# Folder: copycat/emergent/codelets/
# File: bond_codelets.py
import logging

from copycat.emergent.codelets.base import Codelet, CodeletType
from copycat.emergent.codelets import utils
from copycat.workspace.bond import Bond

logger = logging.getLogger(__name__)

BOND_WEIGHT_VS_CORRESPONDENCE = 2.0
CORRESPONDENCE_WEIGHT_VS_BOND = 3.0


def _propose_between(ctx, source, destination, required_category=None):
    """Shared tail of the bond scouts: pick a facet and propose the bond it implies."""
    sn = ctx.slipnet
    facet = utils.choose_bond_facet(ctx, source, destination)
    if facet is None:
        return
    source_descriptor = source.get_descriptor(facet)
    dest_descriptor = destination.get_descriptor(facet)
    category = source_descriptor.get_bond_category(dest_descriptor)

    if required_category is None:
        if category is None:
            return
        if category is sn.identity:
            category = sn.sameness
        ctx.coderack.propose_bond(source, destination, category, facet, source_descriptor, dest_descriptor)
        return

    if category is sn.identity:
        forward = backward = sn.sameness
    else:
        forward = category
        backward = dest_descriptor.get_bond_category(source_descriptor)
    if required_category is forward:
        ctx.coderack.propose_bond(source, destination, required_category, facet,
                                  source_descriptor, dest_descriptor)
    elif required_category is backward:
        ctx.coderack.propose_bond(destination, source, required_category, facet,
                                  dest_descriptor, source_descriptor)


class BottomUpBondScout(Codelet):
    """Looks for any bond between a salient object and one of its neighbours."""
    codelet_type = CodeletType.BOTTOM_UP_BOND_SCOUT

    def run(self):
        ctx = self.ctx
        source = utils.choose_unmodified_object(ctx, 'intra_string_salience', ctx.workspace.objects)
        if source is None:
            return
        destination = utils.choose_neighbor(ctx, source)
        if destination is None:
            return
        _propose_between(ctx, source, destination)


class TopDownBondScoutCategory(Codelet):
    """Looks for a bond of the category given as argument (e.g. successor)."""
    codelet_type = CodeletType.TOP_DOWN_BOND_SCOUT_CATEGORY

    def run(self):
        ctx = self.ctx
        category = self.args[0]
        source = utils.get_scout_source(ctx, 'bondCategory', category)
        if source is None:
            return
        destination = utils.choose_neighbor(ctx, source)
        if destination is None:
            return
        _propose_between(ctx, source, destination, required_category=category)


class TopDownBondScoutDirection(Codelet):
    """Looks for a bond pointing in the direction given as argument."""
    codelet_type = CodeletType.TOP_DOWN_BOND_SCOUT_DIRECTION

    def run(self):
        ctx = self.ctx
        direction = self.args[0]
        source = utils.get_scout_source(ctx, 'bondDirection', direction)
        if source is None:
            return
        destination = self._choose_directed_neighbor(source, direction)
        if destination is None:
            return
        _propose_between(ctx, source, destination)

    def _choose_directed_neighbor(self, source, direction):
        ctx = self.ctx
        if direction is ctx.slipnet.left:
            candidates = [o for o in ctx.workspace.objects
                          if o.string is source.string and source.left_index == o.right_index + 1]
        else:
            candidates = [o for o in ctx.workspace.objects
                          if o.string is source.string and source.right_index == o.left_index - 1]
        weights = [ctx.temperature.get_adjusted_value(o.intra_string_salience) for o in candidates]
        return ctx.rand_gen.weighted_choice(candidates, weights)


class BondStrengthTester(Codelet):
    codelet_type = CodeletType.BOND_STRENGTH_TESTER

    def run(self):
        ctx = self.ctx
        bond = self.args[0]
        bond.update_strength()
        strength = bond.total_strength
        if not ctx.rand_gen.coin_flip(ctx.temperature.get_adjusted_prob(strength / 100)):
            logger.debug(f"Bond fizzled: {bond!r}")
            return
        bond.facet.activation = 100
        bond.source_descriptor.activation = 100
        bond.dest_descriptor.activation = 100
        ctx.coderack.post_new(CodeletType.BOND_BUILDER, utils.get_urgency_bin(strength), [bond])


class BondBuilder(Codelet):
    """Builds a tested bond after fighting whatever it would displace."""
    codelet_type = CodeletType.BOND_BUILDER

    def run(self):
        ctx = self.ctx
        bond = self.args[0]
        bond.update_strength()
        objects = ctx.workspace.objects
        if bond.source not in objects or bond.destination not in objects:
            return

        for existing in bond.string.bonds:
            if bond.same_neighbors(existing) and bond.same_categories(existing):
                bond.category.activation = 100
                if bond.direction_category is not None:
                    bond.direction_category.activation = 100
                return

        incompatible_bonds = [b for b in bond.string.bonds if bond.same_neighbors(b)]
        if not utils.fight_it_out(ctx, bond, 1.0, incompatible_bonds, 1.0):
            return
        incompatible_groups = bond.source.get_common_groups(bond.destination)
        if not utils.fight_it_out(ctx, bond, 1.0, incompatible_groups, 1.0):
            return

        incompatible_correspondences = []
        if (bond.left_object.leftmost or bond.right_object.rightmost) and bond.direction_category is not None:
            incompatible_correspondences = self._incompatible_correspondences(bond)
            if not utils.fight_it_out(ctx, bond, BOND_WEIGHT_VS_CORRESPONDENCE,
                                      incompatible_correspondences, CORRESPONDENCE_WEIGHT_VS_BOND):
                return

        for structure in incompatible_bonds + incompatible_groups + incompatible_correspondences:
            structure.break_()
        bond.build()
        logger.debug(f"Built bond {bond!r}")

    def _incompatible_correspondences(self, bond: Bond) -> list:
        """Correspondences at the string ends whose partner bond points the other way."""
        in_initial = bond.string is self.ctx.workspace.initial_string
        result = []

        left_corr = bond.left_object.correspondence if bond.left_object.leftmost else None
        if left_corr is not None:
            partner = left_corr.obj_from_target if in_initial else left_corr.obj_from_initial
            partner_bond = partner.right_bond if partner.leftmost else None
            if (partner_bond is not None and partner_bond.direction_category is not None
                    and partner_bond.direction_category is not bond.direction_category):
                result.append(left_corr)

        right_corr = bond.right_object.correspondence if bond.right_object.rightmost else None
        if right_corr is not None:
            partner = right_corr.obj_from_target if in_initial else right_corr.obj_from_initial
            partner_bond = partner.left_bond if partner.rightmost else None
            if (partner_bond is not None and partner_bond.direction_category is not None
                    and partner_bond.direction_category is not bond.direction_category):
                result.append(right_corr)
        return result
