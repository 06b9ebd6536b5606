"""Attract loop simulation for Golden Munch.

AttractLoop lives in goldenmunch.animation.attract_loop; it is not
re-exported here because it depends on the graphics package.
"""

from goldenmunch.animation.arena import Arena
from goldenmunch.animation.bridge import ObservableState, StateBridge
from goldenmunch.animation.easing import ease_out_back
from goldenmunch.animation.milestone import MilestoneEffect
from goldenmunch.animation.particles import Particle, ParticleSystem
from goldenmunch.animation.pursuer import Pursuer, PursuerMode, normalize_angle
from goldenmunch.animation.scheduler import (
    CallbackFrameHost,
    FrameHost,
    FrameScheduler,
    ManualFrameHost,
)
from goldenmunch.animation.spawner import Collectible, CollectibleSpawner, PASTRY_PALETTE
from goldenmunch.animation.state import SimulationState

__all__ = [
    "Arena",
    "ObservableState",
    "StateBridge",
    "ease_out_back",
    "MilestoneEffect",
    "Particle",
    "ParticleSystem",
    "Pursuer",
    "PursuerMode",
    "normalize_angle",
    # Scheduling
    "CallbackFrameHost",
    "FrameHost",
    "FrameScheduler",
    "ManualFrameHost",
    "Collectible",
    "CollectibleSpawner",
    "PASTRY_PALETTE",
    "SimulationState",
]
