"""Composer autoload metadata: symbol locations and package attribution."""

from .classmap import Classmap
from .loader import load_classmap

__all__ = ["Classmap", "load_classmap"]
