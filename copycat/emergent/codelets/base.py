# Folder: copycat/emergent/codelets/
# File: base.py
import logging
from enum import Enum
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


class CodeletType(Enum):
    """Every kind of codelet the Coderack can post, keyed by its public name."""
    BOTTOM_UP_BOND_SCOUT = 'bottom-up-bond-scout'
    TOP_DOWN_BOND_SCOUT_CATEGORY = 'top-down-bond-scout--category'
    TOP_DOWN_BOND_SCOUT_DIRECTION = 'top-down-bond-scout--direction'
    BOND_STRENGTH_TESTER = 'bond-strength-tester'
    BOND_BUILDER = 'bond-builder'
    BOTTOM_UP_DESCRIPTION_SCOUT = 'bottom-up-description-scout'
    TOP_DOWN_DESCRIPTION_SCOUT = 'top-down-description-scout'
    DESCRIPTION_STRENGTH_TESTER = 'description-strength-tester'
    DESCRIPTION_BUILDER = 'description-builder'
    TOP_DOWN_GROUP_SCOUT_CATEGORY = 'top-down-group-scout--category'
    TOP_DOWN_GROUP_SCOUT_DIRECTION = 'top-down-group-scout--direction'
    GROUP_SCOUT_WHOLE_STRING = 'group-scout--whole-string'
    GROUP_STRENGTH_TESTER = 'group-strength-tester'
    GROUP_BUILDER = 'group-builder'
    BOTTOM_UP_CORRESPONDENCE_SCOUT = 'bottom-up-correspondence-scout'
    IMPORTANT_OBJECT_CORRESPONDENCE_SCOUT = 'important-object-correspondence-scout'
    CORRESPONDENCE_STRENGTH_TESTER = 'correspondence-strength-tester'
    CORRESPONDENCE_BUILDER = 'correspondence-builder'
    REPLACEMENT_FINDER = 'replacement-finder'
    RULE_SCOUT = 'rule-scout'
    RULE_STRENGTH_TESTER = 'rule-strength-tester'
    RULE_BUILDER = 'rule-builder'
    RULE_TRANSLATOR = 'rule-translator'
    BREAKER = 'breaker'

    @property
    def family(self) -> str:
        """The structure family the codelet works on ('bond', 'group', 'rule', ...)."""
        for family in ('breaker', 'replacement', 'rule', 'correspondence', 'description', 'bond', 'group'):
            if family in self.value:
                return family
        raise ValueError(f"Codelet type {self.value} has no family")


class Codelet:
    """
    Base class for all codelets.
    A codelet is a small piece of work with an urgency that sets how likely
    the Coderack is to pick it. Subclasses implement run().
    """
    codelet_type: Optional[CodeletType] = None

    def __init__(self, ctx, urgency: float, args: Optional[List[Any]] = None, birthdate: int = 0):
        """
        Args:
            ctx (Copycat): Engine context (workspace, slipnet, coderack, temperature, rand_gen).
            urgency (float): Urgency bin, 1 to 7.
            args (List[Any]): Kind-specific arguments (a proposed structure or a SlipNode).
            birthdate (int): Number of codelets run when this one was created.
        """
        self.ctx = ctx
        self.urgency = urgency
        self.args = list(args or [])
        self.birthdate = birthdate

    @property
    def name(self) -> str:
        return self.codelet_type.value

    def __repr__(self):
        return f"<Codelet: {self.name} (urgency {self.urgency})>"

    def run(self):
        """
        Executes the codelet against ctx.
        Raises:
            NotImplementedError: If the method is not implemented by a subclass.
        """
        raise NotImplementedError
