"""Size-specialized FFT implementations.

Importing a module here declares its implementations with the default
registry; ``fftengine.registry.get_registry()`` does so on first use.
"""
