# Folder: copycat/emergent/codelets/
# File: description_codelets.py
import logging

from copycat.emergent.codelets.base import Codelet, CodeletType
from copycat.emergent.codelets import utils
from copycat.workspace.objects import Group

logger = logging.getLogger(__name__)


class BottomUpDescriptionScout(Codelet):
    """Proposes a description reached through a property link (e.g. 'a' -> first)."""
    codelet_type = CodeletType.BOTTOM_UP_DESCRIPTION_SCOUT

    def run(self):
        ctx = self.ctx
        chosen = utils.choose_unmodified_object(ctx, 'total_salience', ctx.workspace.objects)
        if chosen is None:
            return
        descriptions = chosen.relevant_descriptions()
        description = ctx.rand_gen.weighted_choice(
            descriptions, [d.descriptor.activation for d in descriptions])
        if description is None:
            return
        links = self._short_property_links(description.descriptor)
        if not links:
            return
        weights = [link.degree_of_association() * link.destination.activation for link in links]
        link = ctx.rand_gen.weighted_choice(links, weights)
        prop = link.destination
        ctx.coderack.propose_description(chosen, prop.category(), prop)

    def _short_property_links(self, descriptor) -> list:
        ctx = self.ctx
        result = []
        for link in descriptor.property_links:
            prob = ctx.temperature.get_adjusted_prob(link.degree_of_association() / 100)
            if ctx.rand_gen.coin_flip(prob):
                result.append(link)
        return result


class TopDownDescriptionScout(Codelet):
    """Proposes a description of the type given as argument (e.g. alphabeticPositionCategory)."""
    codelet_type = CodeletType.TOP_DOWN_DESCRIPTION_SCOUT

    def run(self):
        ctx = self.ctx
        description_type = self.args[0]
        chosen = utils.choose_unmodified_object(ctx, 'total_salience', ctx.workspace.objects)
        if chosen is None:
            return
        descriptors = self._possible_descriptors(chosen, description_type)
        if not descriptors:
            return
        descriptor = ctx.rand_gen.weighted_choice(descriptors, [d.activation for d in descriptors])
        ctx.coderack.propose_description(chosen, descriptor.category(), descriptor)

    def _possible_descriptors(self, obj, description_type) -> list:
        sn = self.ctx.slipnet
        result = []
        for link in description_type.instance_links:
            node = link.destination
            if node is sn.first and obj.has_descriptor(sn.letters[0]):
                result.append(node)
            elif node is sn.last and obj.has_descriptor(sn.letters[-1]):
                result.append(node)
            elif node is sn.middle and obj.is_middle_object():
                result.append(node)
            elif node in sn.numbers and isinstance(obj, Group):
                if len(obj.object_list) == sn.numbers.index(node) + 1:
                    result.append(node)
        return result


class DescriptionStrengthTester(Codelet):
    codelet_type = CodeletType.DESCRIPTION_STRENGTH_TESTER

    def run(self):
        ctx = self.ctx
        description = self.args[0]
        description.descriptor.activation = 100
        description.update_strength()
        strength = description.total_strength
        if not ctx.rand_gen.coin_flip(ctx.temperature.get_adjusted_prob(strength / 100)):
            return
        ctx.coderack.post_new(CodeletType.DESCRIPTION_BUILDER, utils.get_urgency_bin(strength), [description])


class DescriptionBuilder(Codelet):
    codelet_type = CodeletType.DESCRIPTION_BUILDER

    def run(self):
        description = self.args[0]
        if description.object not in self.ctx.workspace.objects:
            return
        if description.object.has_descriptor(description.descriptor):
            description.activate()
        else:
            description.build()
