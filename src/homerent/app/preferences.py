"""Display preferences shared by the CLI and the web UI."""

from dataclasses import dataclass, replace

from ..config.settings import CURRENCY

LIGHT_PALETTE = {'background': '#ffffff', 'text': '#212529', 'card': '#f8f9fa', 'accent': '#0d6efd'}
DARK_PALETTE = {'background': '#121212', 'text': '#f1f1f1', 'card': '#1e1e1e', 'accent': '#4dabf7'}


@dataclass(frozen=True)
class DisplayPreferences:
    dark_mode: bool = False
    currency: str = CURRENCY
    show_breakdown: bool = False

    def toggled_dark_mode(self) -> "DisplayPreferences":
        return replace(self, dark_mode=not self.dark_mode)

    @property
    def palette(self) -> dict:
        return DARK_PALETTE if self.dark_mode else LIGHT_PALETTE

    def css(self) -> str:
        p = self.palette
        return (
            f".stApp {{ background-color: {p['background']}; color: {p['text']}; }}\n"
            f".rent-card {{ background-color: {p['card']}; border-left: 4px solid {p['accent']};"
            f" padding: 0.75rem; border-radius: 6px; margin-bottom: 0.5rem; }}"
        )
