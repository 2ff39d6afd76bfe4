"""taskdeps: dependency resolution for task lists."""

from taskdeps.config import VERSION

__version__ = VERSION
