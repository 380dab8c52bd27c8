"""Section CSS — per-section stylesheet reduction for web pages."""

from __future__ import annotations

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
