"""GDC accreditation compliance analysis with graceful model fallback."""

__version__ = "0.1.0"
