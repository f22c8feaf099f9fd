"""Model classes for wcal."""

from model.control import ControlDescriptor, ControlTable, clamp

__all__ = [
    "ControlDescriptor",
    "ControlTable",
    "clamp",
]
