"""
Build package for the bookstore API suite.

This package contains the API clients, fixture factory, test configuration
and the invoke tasks that run the scenarios.
"""
