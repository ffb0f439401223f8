"""Display-only alignment of pipe-delimited text tables."""
