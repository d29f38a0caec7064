"""Add page numbers to every slide of a PowerPoint pptx package."""

__version__ = "0.1.0"
