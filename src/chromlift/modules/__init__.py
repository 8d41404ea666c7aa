"""Liftover stages: input, provider access, projection, aggregation and output."""

from . import intervals
from . import provider
from . import projection
from . import aggregation
from . import output
