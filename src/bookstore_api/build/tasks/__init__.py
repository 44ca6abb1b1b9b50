"""
Invoke task modules for the bookstore API suite.

Modules are imported directly by the main __init__.py using Collection.from_module().
"""
