from __future__ import annotations

from dataclasses import dataclass

from doughpilot.services.formula_types import Anchor, FlourAnchored, GlobalSettings, PanGeometry, VolumeAnchored


@dataclass(frozen=True)
class ResolvedDimensions:
    """Basis for one calculation pass.

    Volume-anchored passes carry a dough target and the pan volume. Flour-anchored
    passes carry the flour directly; their pan volume is back-computed once the
    dough target is known.
    """

    dough_target: float | None
    total_flour: float | None
    pan_volume_cm3: float | None


def resolve_dimensions(anchor: Anchor, settings: GlobalSettings) -> ResolvedDimensions:
    if isinstance(anchor, VolumeAnchored):
        volume_liters = anchor.pan.liters
        return ResolvedDimensions(
            dough_target=volume_liters * settings.gr_per_liter * settings.density,
            total_flour=None,
            pan_volume_cm3=volume_liters * 1000,
        )
    if isinstance(anchor, FlourAnchored):
        return ResolvedDimensions(dough_target=None, total_flour=anchor.flour_target, pan_volume_cm3=None)
    raise TypeError(f"Unsupported anchor: {anchor!r}")


def suggested_volume_cm3(dough_mass: float, settings: GlobalSettings) -> float:
    """Pan volume that holds `dough_mass` grams under the given settings."""
    capacity = settings.dough_per_liter
    if capacity <= 0:
        return 0.0
    return dough_mass / capacity * 1000


def scale_pan_to_volume(pan: PanGeometry, target_volume_cm3: float, decimals: int | None = None) -> PanGeometry:
    """Isotropically rescale the pan so x*y*z matches the target volume.

    Degenerate current or target volumes leave the pan unchanged.
    """
    current_volume = pan.volume_cm3
    if current_volume <= 0 or target_volume_cm3 <= 0:
        return pan

    scale = (target_volume_cm3 / current_volume) ** (1 / 3)
    x, y, z = pan.x * scale, pan.y * scale, pan.z * scale
    if decimals is not None:
        x, y, z = round(x, decimals), round(y, decimals), round(z, decimals)
    return PanGeometry(x=x, y=y, z=z)


def scale_pan_to_liters(pan: PanGeometry, liters: float, decimals: int | None = None) -> PanGeometry:
    return scale_pan_to_volume(pan, liters * 1000, decimals=decimals)
