"""
Shared Kernel

Base classes, value objects, errors and infrastructure used by every
bounded context of the reservation platform.
"""
