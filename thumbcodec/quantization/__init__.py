"""Quantization modules for the ThumbHash codec."""

from .uniform_quantizer import (
    round_half_away,
    quantize_unit,
    dequantize_unit,
    quantize_signed,
    dequantize_signed,
    quantize_ac,
    dequantize_ac,
)

__all__ = [
    'round_half_away',
    'quantize_unit',
    'dequantize_unit',
    'quantize_signed',
    'dequantize_signed',
    'quantize_ac',
    'dequantize_ac',
]
