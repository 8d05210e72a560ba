from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class FlowParams:
    width: int = 1100
    height: int = 720
    background: tuple[int, int, int] = (0, 0, 0)

    # flow field
    cell_size: int = 100
    noise_increment: float = 0.1
    noise_octaves: int = 4
    noise_falloff: float = 0.5
    z_increment: float = 0.003

    # particles
    particle_count: int = 6000
    max_speed: float = 4.0
    follow_strength: float = 0.5
    hue_step: float = 0.2
    point_size: float = 1.5
    size_scale: float = 1.0  # slider range 0.5 .. 5

    # collective mode
    curve_family: str = "star"  # star | circle | spiral | fibonacci | tree

    # decorations
    shapes_enabled: bool = True
    polygon_count: int = 2
    label_count: int = 5
    glitch_duration: float = 1.0

    # motion blur: background alpha (0-100) painted over the last frame; 0 clears
    trail_alpha: float = 5.0

    target_fps: int = 60
    mac_compat: bool = True
    seed: int = 1

    def clamp(self) -> "FlowParams":
        self.width = int(self.width)
        self.height = int(self.height)
        self.background = tuple(max(0, min(255, int(c))) for c in self.background)[:3]  # type: ignore[assignment]
        self.cell_size = max(1, int(self.cell_size))
        self.noise_increment = max(1e-6, float(self.noise_increment))
        self.noise_octaves = max(1, min(8, int(self.noise_octaves)))
        self.noise_falloff = min(1.0, max(0.0, float(self.noise_falloff)))
        self.z_increment = max(0.0, float(self.z_increment))
        self.particle_count = max(1, int(self.particle_count))
        self.max_speed = max(0.0, float(self.max_speed))
        self.follow_strength = max(0.0, float(self.follow_strength))
        self.hue_step = float(self.hue_step) % 360.0
        self.point_size = max(0.1, float(self.point_size))
        self.size_scale = min(5.0, max(0.5, float(self.size_scale)))
        self.curve_family = str(self.curve_family or "star").strip().lower()
        if self.curve_family not in {"star", "circle", "spiral", "fibonacci", "tree"}:
            self.curve_family = "star"
        self.shapes_enabled = bool(self.shapes_enabled)
        self.polygon_count = max(0, min(64, int(self.polygon_count)))
        self.label_count = max(0, min(64, int(self.label_count)))
        self.glitch_duration = max(0.0, float(self.glitch_duration))
        self.trail_alpha = min(100.0, max(0.0, float(self.trail_alpha)))
        self.target_fps = max(10, int(self.target_fps))
        self.mac_compat = bool(self.mac_compat)
        self.seed = int(self.seed)
        return self

    def validate(self) -> list[str]:
        warnings: list[str] = []

        if self.width <= 0 or self.height <= 0:
            warnings.append(f"area {self.width}x{self.height} is empty.")
        elif self.width < self.cell_size or self.height < self.cell_size:
            warnings.append(
                f"area {self.width}x{self.height} is smaller than one cell ({self.cell_size}px): "
                "the flow field would have no cells."
            )
        if self.max_speed <= 0.0:
            warnings.append("max_speed=0 freezes every particle in place.")
        if self.follow_strength <= 0.0:
            warnings.append("follow_strength=0 disables pointer and collective steering.")
        if self.particle_count == 1:
            warnings.append("particle_count=1: every collective target collapses to t=0.")
        if not self.shapes_enabled and (self.polygon_count > 0 or self.label_count > 0):
            warnings.append("polygon_count/label_count ignored while shapes_enabled is false.")

        return warnings

    @classmethod
    def load(cls, path: str | Path) -> "FlowParams":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("params file must contain a JSON object.")
        # Older files stored the slider value as `particle_size`.
        if "particle_size" in data and "size_scale" not in data:
            data["size_scale"] = data["particle_size"]
        if "background" in data and isinstance(data["background"], list):
            data["background"] = tuple(data["background"])
        filtered: dict[str, Any] = {k: v for k, v in data.items() if k in cls.__annotations__}
        return cls(**filtered).clamp()

    def save(self, path: str | Path) -> None:
        data = asdict(self)
        data["background"] = list(data["background"])
        Path(path).write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
