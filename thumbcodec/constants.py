"""Constants for the ThumbHash placeholder codec."""

# Encoder input limit (either side)
MAX_INPUT_SIZE = 100

# Decoded placeholders always have this many pixels on their long side
OUTPUT_LONG_SIDE = 32

# Header layout
# header24 (bytes 0-2, little-endian):
#   l_dc:6 | p_dc:6 | q_dc:6 | l_scale:5 | has_alpha:1
# header16 (bytes 3-4, little-endian):
#   l_limit:3 | p_scale:6 | q_scale:6 | is_landscape:1
# header8 (byte 5, only when has_alpha):
#   a_dc:4 | a_scale:4
HEADER_SIZE = 5
ALPHA_HEADER_SIZE = 6

L_DC_BITS = 6
P_DC_BITS = 6
Q_DC_BITS = 6
L_SCALE_BITS = 5
L_LIMIT_BITS = 3
P_SCALE_BITS = 6
Q_SCALE_BITS = 6
A_DC_BITS = 4
A_SCALE_BITS = 4

# Luminance detail budget on the long axis
L_LIMIT_OPAQUE = 7
L_LIMIT_ALPHA = 5

# Chroma and alpha DCT grids (nx, ny)
PQ_GRID = (3, 3)
A_GRID = (5, 5)

# Basis tables are never smaller than this on either axis
MIN_GRID_SIZE = 3

# AC coefficients are stored as 4-bit nibbles
AC_BITS = 4
AC_LEVELS = (1 << AC_BITS) - 1  # 15

# Chroma saturation boost applied to P/Q AC scales on decode
SATURATION_BOOST = 1.25
