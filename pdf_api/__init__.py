"""
PDF to Image API.

Fetches a remote PDF, renders each page with PyMuPDF and returns the pages
as base64 data URLs in a single JSON response.
"""

__version__ = "1.0.0"
