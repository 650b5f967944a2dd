"""Transform modules for the ThumbHash codec."""

from .dct import (
    triangular_indices,
    count_ac,
    cosine_table,
    forward_dct_channel,
    inverse_dct_channel,
)
from .color_space import average_rgba, rgba_to_lpqa, lpq_to_rgb

__all__ = [
    'triangular_indices',
    'count_ac',
    'cosine_table',
    'forward_dct_channel',
    'inverse_dct_channel',
    'average_rgba',
    'rgba_to_lpqa',
    'lpq_to_rgb',
]
