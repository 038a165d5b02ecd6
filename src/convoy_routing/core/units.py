import numpy as np
import pint

# Create unit registry once at module level
_ureg = pint.UnitRegistry()


def kmh_to_ms(speed_kmh: float) -> float:
    """Convert speed from kilometers per hour to meters per second."""
    return float((speed_kmh * _ureg.kilometer_per_hour) / _ureg.meter_per_second)


def ms_to_kmh(speed_ms: float) -> float:
    """Convert speed from meters per second to kilometers per hour."""
    return float((speed_ms * _ureg.meter_per_second) / _ureg.kilometer_per_hour)


def estimate_travel_time_hours(
    distance_km: float = None, avg_speed_kmh: float = 60.0
) -> float:
    """Travel time in hours at a constant average speed."""
    duration = (distance_km * _ureg.kilometer) / (
        avg_speed_kmh * _ureg.kilometer_per_hour
    )
    return float(duration.to(_ureg.hour).magnitude)


def format_duration(hours: float) -> str:
    """Render a duration as ``"<h>h <m>m"``.

    Minutes are rounded half up. Negative durations (e.g. negative savings)
    carry a leading minus sign.
    """
    minutes = float((hours * _ureg.hour).to(_ureg.minute).magnitude)
    total_minutes = int(np.floor(minutes + 0.5))
    sign = "-" if total_minutes < 0 else ""
    h, m = divmod(abs(total_minutes), 60)
    return f"{sign}{h}h {m}m"
