"""cdnrelease: versioned staging/production releases of CDN-hosted bundles."""

__version__ = "0.1.0"
