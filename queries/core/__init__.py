"""
Core building blocks: constants, errors, query models and utilities
"""
