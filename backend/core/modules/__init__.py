# Story pipeline steps
from .style_anchor import StyleAnchorDeriver
from .seed_page import SeedPageGenerator
from .page_extender import PageExtender

__all__ = [
    "StyleAnchorDeriver",
    "SeedPageGenerator",
    "PageExtender",
]
