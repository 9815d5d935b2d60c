"""Training-time serving components.

This module exposes PyTorch-compatible dataset streaming helpers.
It connects PipeMode channels to model training input pipelines.
"""
