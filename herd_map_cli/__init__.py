"""
Herd Map CLI - Command-line interface for the herd map core.

Usage:
    herd-map cluster scene.yaml --zoom 12
    herd-map scene scene.yaml --zoom 14
    herd-map hit-test scene.yaml --lat -34.605 --lon -58.377
    herd-map render scene.yaml --zoom 14 --output preview.png
"""

__version__ = "1.0.0"
