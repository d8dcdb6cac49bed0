from .copycat import Copycat, InvalidInputError, RunState, validate_strings
from .config import CONFIG, ConfigError, load_config
from .rand_gen import RandGen
from .reporter import Reporter
from .temperature import Temperature

__version__ = '0.1.0'
