# Folder: copycat/emergent/codelets/
# File: breaker.py
import logging

from copycat.emergent.codelets.base import Codelet, CodeletType
from copycat.workspace.structure import StructureKind

logger = logging.getLogger(__name__)

BREAKABLE_KINDS = (StructureKind.BOND, StructureKind.GROUP, StructureKind.CORRESPONDENCE)


class Breaker(Codelet):
    """
    Breaks a random bond, group or correspondence. Runs mostly at high
    temperature; strong structures tend to survive.
    """
    codelet_type = CodeletType.BREAKER

    def run(self):
        ctx = self.ctx
        temperature = ctx.temperature
        if ctx.rand_gen.coin_flip(1 - temperature.value() / 100):
            return

        candidates = [s for s in ctx.workspace.structures if s.kind in BREAKABLE_KINDS]
        structure = ctx.rand_gen.choice(candidates)
        if structure is None:
            return

        to_break = [structure]
        if structure.kind is StructureKind.BOND:
            group = structure.source.group
            if group is not None and group is structure.destination.group:
                to_break.append(group)

        for s in to_break:
            if ctx.rand_gen.coin_flip(temperature.get_adjusted_prob(s.total_strength / 100)):
                return
        for s in to_break:
            s.break_()
        logger.debug(f"Breaker broke {to_break!r}")
