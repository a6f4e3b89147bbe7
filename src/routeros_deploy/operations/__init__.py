from __future__ import annotations

from .base import Operation
from .script import ScriptDeployOperation

__all__ = ["Operation", "ScriptDeployOperation"]
