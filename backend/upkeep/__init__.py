"""In-process scheduler for recurring maintenance tasks."""
from upkeep.version import VERSION

__version__ = VERSION
