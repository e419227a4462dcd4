"""Configuration loading for locviz."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator


class UsableArea(BaseModel):
    top: float
    right: float
    bottom: float
    left: float
    width: float
    height: float


class ChartConfig(BaseModel):
    width: int = 1000
    height: int = 600
    margin_top: int = 10
    margin_right: int = 10
    margin_bottom: int = 30
    margin_left: int = 20
    radius_min: float = 2.0
    radius_max: float = 30.0
    base_opacity: float = 0.7
    hover_opacity: float = 1.0
    x_ticks: int = 10

    @model_validator(mode="after")
    def _check_ranges(self) -> "ChartConfig":
        if self.radius_min > self.radius_max:
            raise ValueError("radius_min must not exceed radius_max")
        if self.margin_left + self.margin_right >= self.width:
            raise ValueError("horizontal margins leave no drawing area")
        if self.margin_top + self.margin_bottom >= self.height:
            raise ValueError("vertical margins leave no drawing area")
        return self

    @property
    def usable_area(self) -> UsableArea:
        return UsableArea(
            top=self.margin_top,
            right=self.width - self.margin_right,
            bottom=self.height - self.margin_bottom,
            left=self.margin_left,
            width=self.width - self.margin_left - self.margin_right,
            height=self.height - self.margin_top - self.margin_bottom,
        )


class SliderConfig(BaseModel):
    minimum: float = 0.0
    maximum: float = 100.0
    step: float = 1.0

    @model_validator(mode="after")
    def _check_domain(self) -> "SliderConfig":
        if self.minimum >= self.maximum:
            raise ValueError("slider minimum must be below maximum")
        return self


class PageLink(BaseModel):
    url: str
    title: str


class SiteConfig(BaseModel):
    base_path: str = "/portfolio/"
    local_base_path: str = "/"
    current_page: str = "meta/index.html"
    pages: list[PageLink] = Field(default_factory=lambda: [
        PageLink(url="index.html", title="Home"),
        PageLink(url="projects/index.html", title="Projects"),
        PageLink(url="meta/index.html", title="Meta"),
        PageLink(url="contact/index.html", title="Contact"),
        PageLink(url="resume.html", title="Resume"),
        PageLink(url="https://github.com/jacsea", title="Profile"),
    ])


class Config(BaseModel):
    data_path: str = "loc.csv"
    repo_url: str = "https://github.com/vis-society/lab-7/commit/"
    output_dir: str = "site/meta"
    preferences_path: str = "~/.config/locviz/preferences.yaml"
    fetch_timeout: float = 30.0
    chart: ChartConfig = Field(default_factory=ChartConfig)
    slider: SliderConfig = Field(default_factory=SliderConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)

    @property
    def is_remote_data(self) -> bool:
        return self.data_path.startswith(("http://", "https://"))

    @property
    def resolved_data_path(self) -> str:
        """Resolve data_path relative to project root (URLs pass through)."""
        if self.is_remote_data:
            return self.data_path
        p = Path(self.data_path).expanduser()
        if p.is_absolute():
            return str(p)
        return str(_project_root() / p)

    @property
    def resolved_output_dir(self) -> Path:
        p = Path(self.output_dir).expanduser()
        if p.is_absolute():
            return p
        return _project_root() / p

    @property
    def resolved_preferences_path(self) -> Path:
        return Path(self.preferences_path).expanduser()


def _project_root() -> Path:
    """Return the locviz project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
