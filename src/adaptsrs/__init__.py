"""adaptsrs: adaptive spaced-repetition scheduling engine."""

from adaptsrs.consts import VERSION

__version__ = VERSION
