"""Job aggregation: fetch postings from public boards, score them against a profile, store them."""

__version__ = "0.1.0"
