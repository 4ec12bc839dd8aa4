"""
Services package.

Business logic for the commission engine.
"""
