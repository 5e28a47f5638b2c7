"""
Shared service utilities.

- http.py - requests session, FetchError taxonomy, RetryingFetcher
"""
