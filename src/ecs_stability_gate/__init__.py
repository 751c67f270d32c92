"""Gate a deployment on Amazon ECS services reaching a stable state."""

from __future__ import annotations

from ecs_stability_gate.gate import StabilityGate
from ecs_stability_gate.retry import retry


__all__ = ["StabilityGate", "retry"]
