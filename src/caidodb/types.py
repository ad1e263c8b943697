"""Shared types for the caidodb package."""

from typing import Any

Row = dict[str, Any]
Params = tuple | list | dict
