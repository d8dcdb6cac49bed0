from .base import Codelet, CodeletType
from .factory import CODELET_REGISTRY, CodeletFactory, UnknownCodeletError
