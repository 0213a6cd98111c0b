"""
E-book Page Reconstruction
==========================

Rebuilds e-book pages that are served as scrambled tile grids and
collects them into a single PDF.

Main components:
- Tile descrambling (permutation descriptor -> legible page)
- Page sequencing (fetch, descramble, append, strictly in order)
- PDF accumulation (one page per recovered image, exact pixel size)
- Console progress reporting
"""

__version__ = "1.0.0"
