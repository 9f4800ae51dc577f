"""Core logic: SVG structure analysis and icon set resolution."""
