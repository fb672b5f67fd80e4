"""Engine adapters implementing EnginePort.

``RRDToolEngine`` lives in ``rrdbridge.adapters.engine.rrdtool`` and is not
imported here because it needs the native rrdtool binding.
"""

from rrdbridge.adapters.engine.in_memory import InMemoryEngine

__all__ = ["InMemoryEngine"]
