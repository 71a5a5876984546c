"""
Simulation engine, trace, playback and artifact output.

Import from the submodules directly (socdvfs.sim.engine, socdvfs.sim.playback,
...); this package does not re-export them.
"""
