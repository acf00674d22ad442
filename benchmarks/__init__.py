"""Performance benchmarks for sigops.

Microbenchmarks for the convolution routes: direct form, whole-signal FFT
convolution and block convolution (overlap-add / overlap-save).
"""
