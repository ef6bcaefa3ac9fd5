"""Training Stress Score estimation for rides without a recorded score.

The estimate assumes a moderate effort of 50 TSS per hour and adds roughly
10 points for every 300 m of climbing.
"""

from __future__ import annotations

from ridecoach.services.rides import RideRecord, as_number

TSS_PER_HOUR = 50
TSS_PER_300M_CLIMB = 10
DEFAULT_DURATION_SECONDS = 3600


def estimate_tss(ride: RideRecord) -> int | float:
    """Return the stored TSS when positive, otherwise a duration/elevation estimate.

    Never raises and never returns a negative value. A ride with no usable
    duration is treated as a one-hour ride.
    """
    stored = as_number(ride.stored_tss)
    if stored:
        return stored

    duration = as_number(ride.duration_seconds) or DEFAULT_DURATION_SECONDS
    elevation = as_number(ride.elevation_gain_m) or 0.0
    base = (duration / 3600) * TSS_PER_HOUR
    elevation_factor = (elevation / 300) * TSS_PER_300M_CLIMB
    return round(base + elevation_factor)


def ride_hours(ride: RideRecord) -> float:
    """Recorded ride duration in hours (0 when unknown)."""
    return (as_number(ride.duration_seconds) or 0.0) / 3600
