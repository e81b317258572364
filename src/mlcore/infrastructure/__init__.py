"""
Concrete implementations of the mlcore domain contracts.

Import order matters only in that the kernel and operator packages register
their implementations when first imported.
"""
