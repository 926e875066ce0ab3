"""Category taxonomy for organizational labels."""
