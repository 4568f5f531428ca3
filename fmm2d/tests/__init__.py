"""
FMM Test Suite

Tests for the 2D Laplace expansion kernels.
"""
