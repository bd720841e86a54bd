"""
rasterize
=========

Command-line page rasterizer: loads a URL in a headless browser and captures
it as a PNG/JPEG image or a paginated PDF.

This package provides:
- Size spec resolution into viewport, clip and paper geometry
- A load/settle/capture orchestrator mapped to process exit codes
- Browser automation with Playwright
"""

__version__ = "1.0.0"
