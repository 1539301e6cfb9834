from __future__ import annotations

from embedref.config import get_config

config = get_config()
