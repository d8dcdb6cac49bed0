# Folder: copycat/emergent/codelets/
# File: rule_codelets.py
import logging

from copycat.emergent.codelets.base import Codelet, CodeletType
from copycat.emergent.codelets import utils
from copycat.workspace.objects import Letter
from copycat.workspace.replacement import Replacement

logger = logging.getLogger(__name__)

# Cutoff weights over 10..100, picked by bond density (densest row first)
TRANSLATOR_CUTOFF_WEIGHTS = (
    (0.8, [5, 150, 5, 2, 1, 1, 1, 1, 1, 1]),
    (0.6, [2, 5, 150, 5, 2, 1, 1, 1, 1, 1]),
    (0.4, [1, 2, 5, 150, 5, 2, 1, 1, 1, 1]),
    (0.2, [1, 1, 2, 5, 150, 5, 2, 1, 1, 1]),
)
TRANSLATOR_SPARSE_WEIGHTS = [1, 1, 1, 2, 5, 150, 5, 2, 1, 1]
FAILED_TRANSLATION_CLAMP_TICKS = 100


class ReplacementFinder(Codelet):
    """Pairs a letter of the initial string with the letter at the same position in the modified string."""
    codelet_type = CodeletType.REPLACEMENT_FINDER

    def run(self):
        ctx = self.ctx
        sn = ctx.slipnet
        workspace = ctx.workspace
        letters = [o for o in workspace.initial_string.objects if isinstance(o, Letter)]
        initial_letter = ctx.rand_gen.choice(letters)
        if initial_letter is None or initial_letter.replacement is not None:
            return

        position = initial_letter.left_index
        modified_letters = workspace.modified_string.letters
        if position > len(modified_letters):
            return
        modified_letter = modified_letters[position - 1]

        diff = ord(initial_letter.char) - ord(modified_letter.char)
        relation = {-1: sn.successor, 0: sn.sameness, 1: sn.predecessor}.get(diff)
        initial_letter.replacement = Replacement(initial_letter, modified_letter, relation)
        if relation is not sn.sameness:
            initial_letter.changed = True
            workspace.changed_object = initial_letter
        logger.debug(f"Found replacement {initial_letter.replacement!r}")


class RuleScout(Codelet):
    """Once every initial letter has a replacement, proposes a rule describing the change."""
    codelet_type = CodeletType.RULE_SCOUT

    def run(self):
        ctx = self.ctx
        sn = ctx.slipnet
        workspace = ctx.workspace
        if any(isinstance(o, Letter) and o.replacement is None for o in workspace.initial_string.objects):
            return

        changed_objects = [o for o in workspace.initial_string.objects if o.changed]
        if not changed_objects:
            ctx.coderack.propose_rule()
            return
        changed = changed_objects[-1]

        descriptors = []
        position = changed.get_descriptor(sn.string_position_category)
        if position is not None:
            descriptors.append(position)
        letter = changed.get_descriptor(sn.letter_category)
        if letter is not None:
            others = [o for o in workspace.initial_string.objects
                      if o is not changed and o.get_description_type(letter) is not None]
            if not others:
                descriptors.append(letter)

        if changed.correspondence is not None:
            target_object = changed.correspondence.obj_from_target
            slippages = workspace.get_slippable_mappings()
            slipped = [d.apply_slippages(slippages) for d in descriptors]
            descriptors = [d for d in slipped
                           if target_object.has_descriptor(d) and target_object.is_distinguishing_descriptor(d)]
        if not descriptors:
            return

        weights = [ctx.temperature.get_adjusted_value(d.depth) for d in descriptors]
        descriptor = ctx.rand_gen.weighted_choice(descriptors, weights)

        relations = []
        if changed.replacement.relation is not None:
            relations.append(changed.replacement.relation)
        relations.append(changed.replacement.obj_from_modified.get_descriptor(sn.letter_category))
        weights = [ctx.temperature.get_adjusted_value(r.depth) for r in relations]
        relation = ctx.rand_gen.weighted_choice(relations, weights)

        ctx.coderack.propose_rule(sn.letter_category, descriptor, sn.letter, relation)


class RuleStrengthTester(Codelet):
    codelet_type = CodeletType.RULE_STRENGTH_TESTER

    def run(self):
        ctx = self.ctx
        rule = self.args[0]
        rule.update_strength()
        strength = rule.total_strength
        if not ctx.rand_gen.coin_flip(ctx.temperature.get_adjusted_prob(strength / 100)):
            logger.debug(f"Rule fizzled: {rule!r}")
            return
        ctx.coderack.post_new(CodeletType.RULE_BUILDER, utils.get_urgency_bin(strength), [rule])


class RuleBuilder(Codelet):
    codelet_type = CodeletType.RULE_BUILDER

    def run(self):
        ctx = self.ctx
        workspace = ctx.workspace
        rule = self.args[0]
        if rule.same_as(workspace.rule):
            rule.activate()
            return
        rule.update_strength()
        if rule.total_strength == 0:
            return
        if workspace.rule is not None:
            if not utils.structure_vs_structure(ctx, rule, 1.0, workspace.rule, 1.0):
                return
        rule.build()
        logger.debug(f"Built rule {rule!r}")


class RuleTranslator(Codelet):
    """
    Tries to apply the workspace rule to the target string. The lower the
    temperature, the more likely it is to try; a failed translation reclamps
    the temperature to shake up the workspace.
    """
    codelet_type = CodeletType.RULE_TRANSLATOR

    def run(self):
        ctx = self.ctx
        workspace = ctx.workspace
        rule = workspace.rule
        if rule is None:
            return

        cutoff = 10.0 * ctx.rand_gen.weighted_choice(list(range(1, 11)), self._cutoff_weights())
        if cutoff < ctx.temperature.actual_value:
            return
        answer = rule.apply_to_target()
        if answer:
            workspace.final_answer = answer
            logger.info(f"Answer found: {answer} ({rule.synopsis()})")
        else:
            ctx.temperature.clamp_until(ctx.coderack.num_codelets_run + FAILED_TRANSLATION_CLAMP_TICKS)

    def _cutoff_weights(self) -> list:
        workspace = self.ctx.workspace
        bond_density = 1.0
        total_length = workspace.initial_string.length + workspace.target_string.length
        if total_length > 2:
            num_bonds = len(workspace.initial_string.bonds) + len(workspace.target_string.bonds)
            bond_density = min(1.0, num_bonds / (total_length - 2))
        for threshold, weights in TRANSLATOR_CUTOFF_WEIGHTS:
            if bond_density > threshold:
                return weights
        return TRANSLATOR_SPARSE_WEIGHTS
