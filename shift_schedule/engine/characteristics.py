"""
Engine characteristics consumed by the shift schedule builder.

The builder only needs a handful of scalar RPM limits. They usually come from
the engine model, but the schedule configuration may override idle, peak and
maximum RPM to tune the shift points without touching the engine itself.
"""

from typing import Dict, Optional


class EngineCharacteristics:
    """
    Fixed RPM limits of an engine: stall, idle, peak and maximum.
    """

    def __init__(self, stall_rpm: float, idle_rpm: float, peak_rpm: float, maximum_rpm: float):
        """
        Initialize engine characteristics.

        Args:
            stall_rpm: RPM below which a gear is unusable
            idle_rpm: Idle RPM, the shift target at zero load
            peak_rpm: Nominal operating target RPM
            maximum_rpm: Redline RPM, the shift target at full load
        """
        if stall_rpm < 0 or stall_rpm > idle_rpm:
            raise ValueError(f"Stall RPM {stall_rpm} must be between 0 and idle RPM {idle_rpm}")
        if maximum_rpm <= idle_rpm:
            raise ValueError(f"Maximum RPM {maximum_rpm} must exceed idle RPM {idle_rpm}")

        self.stall_rpm = float(stall_rpm)
        self.idle_rpm = float(idle_rpm)
        self.peak_rpm = float(peak_rpm)
        self.maximum_rpm = float(maximum_rpm)

    @classmethod
    def from_engine(cls, engine, idle_rpm: Optional[float] = None,
                    peak_rpm: Optional[float] = None,
                    maximum_rpm: Optional[float] = None) -> 'EngineCharacteristics':
        """
        Create characteristics from an engine model, optionally overriding limits.

        Args:
            engine: Engine model exposing stall_rpm, idle_rpm and maximum_rpm; a
                max_power_rpm attribute, when present, sets the peak RPM
            idle_rpm: Optional idle RPM override
            peak_rpm: Optional peak RPM override
            maximum_rpm: Optional maximum RPM override

        Returns:
            EngineCharacteristics instance
        """
        if maximum_rpm is None:
            maximum_rpm = engine.maximum_rpm
        if peak_rpm is None:
            peak_rpm = getattr(engine, 'max_power_rpm', maximum_rpm)

        return cls(
            stall_rpm=engine.stall_rpm,
            idle_rpm=idle_rpm if idle_rpm is not None else engine.idle_rpm,
            peak_rpm=peak_rpm,
            maximum_rpm=maximum_rpm,
        )

    def shift_rpm(self, load: float) -> float:
        """Load-scaled upshift ceiling: idle RPM at zero load, maximum RPM at full load."""
        return self.idle_rpm + (self.maximum_rpm - self.idle_rpm) * load

    def to_dict(self) -> Dict:
        return {
            'stall_rpm': self.stall_rpm,
            'idle_rpm': self.idle_rpm,
            'peak_rpm': self.peak_rpm,
            'maximum_rpm': self.maximum_rpm,
        }

    def __repr__(self) -> str:
        return (f"EngineCharacteristics(stall={self.stall_rpm:.0f}, idle={self.idle_rpm:.0f}, "
                f"peak={self.peak_rpm:.0f}, max={self.maximum_rpm:.0f})")
