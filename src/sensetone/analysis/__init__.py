"""Signal analysis utilities (resampling, filtering, FFT, and statistics).

Modules here operate on NumPy arrays of sensor samples and stay free of
threading and I/O so they can be reused by the frame pipeline, offline
scripts, and tests alike.
"""
