"""
Letter module.

Composes a business letter on a fixed canonical page, places a signature
image on it (drag, proportional resize, rotate) and exports the page as a
single-page PDF that does not depend on the preview zoom.
"""
