"""Static catalogue of invoice background designs."""

from dataclasses import asdict, dataclass
from typing import List, Optional

DEFAULT_DESIGN_ID = "minimal"


@dataclass(frozen=True)
class BackgroundDesign:
    id: str
    name: str
    image_url: str
    background_color: str
    border_color: str
    accent_color: str

    def as_dict(self) -> dict:
        return asdict(self)


BACKGROUND_DESIGNS = {
    design.id: design
    for design in (
        BackgroundDesign("minimal", "Minimal", "/backgrounds/minimal.png", "#ffffff", "#e5e7eb", "#111827"),
        BackgroundDesign("professional", "Professional Blue", "/backgrounds/professional.png", "#ffffff", "#0f3460", "#1a1a2e"),
        BackgroundDesign("modern", "Modern Gray", "/backgrounds/modern.png", "#f8fafc", "#cbd5e1", "#334155"),
        BackgroundDesign("elegant", "Elegant", "/backgrounds/elegant.png", "#faf5ff", "#d8b4fe", "#6b21a8"),
        BackgroundDesign("corporate", "Corporate", "/backgrounds/corporate.png", "#f0f9ff", "#7dd3fc", "#0369a1"),
    )
}


def list_designs() -> List[BackgroundDesign]:
    return list(BACKGROUND_DESIGNS.values())


def resolve_design(design_id: Optional[str]) -> BackgroundDesign:
    """Unknown or missing ids fall back to the minimal design."""
    return BACKGROUND_DESIGNS.get(design_id or DEFAULT_DESIGN_ID, BACKGROUND_DESIGNS[DEFAULT_DESIGN_ID])
