# Folder: copycat/emergent/codelets/
# File: factory.py
import logging
from typing import Any, Dict, List, Optional, Type, Union

from copycat.emergent.codelets.base import Codelet, CodeletType
from copycat.emergent.codelets.bond_codelets import (
    BottomUpBondScout, TopDownBondScoutCategory, TopDownBondScoutDirection,
    BondStrengthTester, BondBuilder)
from copycat.emergent.codelets.description_codelets import (
    BottomUpDescriptionScout, TopDownDescriptionScout,
    DescriptionStrengthTester, DescriptionBuilder)
from copycat.emergent.codelets.group_codelets import (
    TopDownGroupScoutCategory, TopDownGroupScoutDirection, GroupScoutWholeString,
    GroupStrengthTester, GroupBuilder)
from copycat.emergent.codelets.correspondence_codelets import (
    BottomUpCorrespondenceScout, ImportantObjectCorrespondenceScout,
    CorrespondenceStrengthTester, CorrespondenceBuilder)
from copycat.emergent.codelets.rule_codelets import (
    ReplacementFinder, RuleScout, RuleStrengthTester, RuleBuilder, RuleTranslator)
from copycat.emergent.codelets.breaker import Breaker

logger = logging.getLogger(__name__)

CODELET_REGISTRY: Dict[CodeletType, Type[Codelet]] = {
    cls.codelet_type: cls for cls in (
        BottomUpBondScout, TopDownBondScoutCategory, TopDownBondScoutDirection,
        BondStrengthTester, BondBuilder,
        BottomUpDescriptionScout, TopDownDescriptionScout,
        DescriptionStrengthTester, DescriptionBuilder,
        TopDownGroupScoutCategory, TopDownGroupScoutDirection, GroupScoutWholeString,
        GroupStrengthTester, GroupBuilder,
        BottomUpCorrespondenceScout, ImportantObjectCorrespondenceScout,
        CorrespondenceStrengthTester, CorrespondenceBuilder,
        ReplacementFinder, RuleScout, RuleStrengthTester, RuleBuilder, RuleTranslator,
        Breaker,
    )
}


class UnknownCodeletError(KeyError):
    """Raised when asked for a codelet kind that has no registered handler."""


class CodeletFactory:
    """Creates codelets by kind, stamping them with the coderack's current tick."""

    def __init__(self, ctx):
        self.ctx = ctx

    def create(self, codelet_type: Union[CodeletType, str], urgency: float,
               args: Optional[List[Any]] = None, birthdate: Optional[int] = None) -> Codelet:
        """
        Args:
            codelet_type (CodeletType | str): Kind, as enum member or public name
                (e.g. 'bond-builder').
            urgency (float): Urgency bin.
            args (List[Any]): Kind-specific arguments.
            birthdate (int): Defaults to the number of codelets run so far.
        Returns:
            Codelet: A new, unposted codelet.
        Raises:
            UnknownCodeletError: If the kind is not registered.
        """
        if not isinstance(codelet_type, CodeletType):
            try:
                codelet_type = CodeletType(codelet_type)
            except ValueError:
                raise UnknownCodeletError(f"Unknown codelet name: {codelet_type}") from None
        cls = CODELET_REGISTRY.get(codelet_type)
        if cls is None:
            raise UnknownCodeletError(f"No handler registered for {codelet_type.value}")
        if birthdate is None:
            birthdate = self.ctx.coderack.num_codelets_run
        return cls(self.ctx, urgency, args, birthdate)
