"""Extended Markdown compiler with chapter, slide and page segmentation."""

__version__ = "0.1.0"
