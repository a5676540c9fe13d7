"""versemem: spaced-repetition scheduling for Scripture memorization."""

from versemem.consts import VERSION

__version__ = VERSION
