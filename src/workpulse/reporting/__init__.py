"""Heatmap, item-level, at-risk and data-quality reporting."""
