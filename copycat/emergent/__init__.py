from .slipnet import Slipnet, SlipNode, SlipLink, LinkType
from .coderack import Coderack
