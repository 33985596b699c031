"""
Bookstore query runner: query descriptors, steps and run monitoring
"""
