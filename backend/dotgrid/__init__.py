"""dotgrid: connector regions between paired circles on a grid."""

__version__ = "0.1.0"
