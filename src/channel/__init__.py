"""Channel sequencing.

This module maps channels onto their numbered pipes, persists the next
pipe index, and mints per-epoch record iterators.
"""
