"""
Game settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested values use a double underscore, e.g. ``SKYFLAP_TUBES__SPEED=180``.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Sprite rectangles on the sheet: (x, y, width, height)
Frame = tuple[int, int, int, int]


class CanvasSettings(BaseSettings):
    """Draw surface settings."""

    model_config = SettingsConfigDict(env_prefix="SKYFLAP_CANVAS_")

    title: str = "SKYFLAP"
    width: int = 480
    height: int = 640


class ActorSettings(BaseSettings):
    """The controlled bird."""

    model_config = SettingsConfigDict(env_prefix="SKYFLAP_ACTOR_")

    start_x: float = 80.0
    width: float = 51.0
    height: float = 36.0

    # Upward velocity set on flap (pixels/second)
    flap_speed: float = 480.0
    # Degrees of tilt per pixel/second of fall velocity
    rotation_speed: float = 0.12
    # Animation frames per second
    animation_speed: float = 10.0

    frames: list[Frame] = Field(default=[
        (0, 0, 34, 24),
        (34, 0, 34, 24),
        (68, 0, 34, 24),
    ])


class TubeSettings(BaseSettings):
    """Obstacle pair spacing policy."""

    model_config = SettingsConfigDict(env_prefix="SKYFLAP_TUBES_")

    width: float = 78.0
    # Horizontal speed (pixels/second)
    speed: float = 150.0
    border_offset: float = 60.0
    space_min: float = 140.0
    space_max: float = 190.0
    min_distance: float = 170.0
    max_distance: float = 260.0
    # Spawn ahead of the right edge; None means max_distance + width
    lookahead: float | None = None


class BackgroundSettings(BaseSettings):
    """Parallax background tiles."""

    model_config = SettingsConfigDict(env_prefix="SKYFLAP_BACKGROUND_")

    width: int = 288
    height: int = 512
    speed: float = 30.0
    animation_speed: float = 0.0
    frames: list[Frame] = Field(default=[(0, 24, 288, 512)])


class TextSettings(BaseSettings):
    """Overlay strings."""

    model_config = SettingsConfigDict(env_prefix="SKYFLAP_TEXTS_")

    loading: str = "LOADING..."
    idle: str = "PRESS SPACE TO FLY"
    game_over: str = "GAME OVER"


class ScoreLabelSettings(BaseSettings):
    """Score label position."""

    model_config = SettingsConfigDict(env_prefix="SKYFLAP_SCORE_LABEL_")

    x: int = 10
    y: int = 10


class ResourceSettings(BaseSettings):
    """Asset locations."""

    model_config = SettingsConfigDict(env_prefix="SKYFLAP_RESOURCES_")

    assets_path: Path = Field(default_factory=lambda: Path.cwd() / "assets")
    sprite_sheet: str = "sprites.png"
    sprite_sheet_width: int = 288
    sprite_sheet_height: int = 600
    # Obstacle pattern cut out of the sprite sheet
    tube_pattern: Frame = (288 - 52, 536, 52, 64)
    sounds: dict[str, str] = Field(default={
        "dieSound": "audio/die.wav",
        "flapSound": "audio/flap.wav",
        "hitSound": "audio/hit.wav",
        "pointSound": "audio/point.wav",
        "swooshingSound": "audio/swooshing.wav",
    })


class ControlSettings(BaseSettings):
    """Primary action bindings."""

    model_config = SettingsConfigDict(env_prefix="SKYFLAP_CONTROLS_")

    action_key: str = "space"
    action_click: str = "left"
    action_button: int = 0


class Settings(BaseSettings):
    """Main game settings."""

    model_config = SettingsConfigDict(
        env_prefix="SKYFLAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Frame rate target for the simulation loop
    fps: int = 60
    # Pixels/second^2
    gravitation: float = 1500.0
    # Speed added to tubes and backgrounds on each level up
    level_up_acceleration: float = 20.0
    # Milliseconds to coalesce window resize events
    resize_debounce_ms: int = 150

    storage_path: Path = Field(
        default_factory=lambda: Path.home() / ".skyflap" / "storage.json"
    )

    canvas: CanvasSettings = Field(default_factory=CanvasSettings)
    actor: ActorSettings = Field(default_factory=ActorSettings)
    tubes: TubeSettings = Field(default_factory=TubeSettings)
    background: BackgroundSettings = Field(default_factory=BackgroundSettings)
    texts: TextSettings = Field(default_factory=TextSettings)
    score_label: ScoreLabelSettings = Field(default_factory=ScoreLabelSettings)
    resources: ResourceSettings = Field(default_factory=ResourceSettings)
    controls: ControlSettings = Field(default_factory=ControlSettings)

    @property
    def frame_interval_ms(self) -> float:
        """Milliseconds between two simulation ticks."""
        return 1000.0 / self.fps


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
