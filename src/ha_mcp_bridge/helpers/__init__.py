"""Pure helper functions used by the formatting layer"""

from .colors import classify_rgb, ReferenceColor, PALETTE

__all__ = ['classify_rgb', 'ReferenceColor', 'PALETTE']
