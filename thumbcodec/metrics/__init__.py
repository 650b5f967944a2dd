"""Quality metrics for the ThumbHash codec."""

from .quality import (
    calculate_rmse,
    calculate_psnr,
    placeholder_psnr,
    calculate_bpp,
    calculate_compression_ratio,
)

__all__ = [
    'calculate_rmse',
    'calculate_psnr',
    'placeholder_psnr',
    'calculate_bpp',
    'calculate_compression_ratio',
]
