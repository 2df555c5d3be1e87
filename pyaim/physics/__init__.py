"""Physical closures for transport, deposition and chemistry."""

from pyaim.physics.closures import PhysicsClosures

__all__ = [
    'PhysicsClosures',
]
