"""GAC referrers API - lead sources and referrer types."""

__version__ = "1.0.0"
