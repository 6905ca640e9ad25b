#!/usr/bin/env python3
"""
Generate placeholder assets: the sprite sheet and the sound effects.

Run this once to create assets/sprites.png and assets/audio/*.wav.
The sheet layout matches the default frames in skyflap.config.settings.
"""

import array
import math
import os
import random
import sys
import wave

from PIL import Image, ImageDraw

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from skyflap.config.settings import Settings

SAMPLE_RATE = 44100

SKY = (112, 197, 206, 255)
CLOUD = (233, 252, 217, 255)
CITY = (165, 226, 173, 255)
GROUND = (222, 216, 149, 255)
GRASS = (115, 191, 46, 255)
BIRD = (250, 220, 60, 255)
WING = (240, 160, 30, 255)
BEAK = (250, 110, 40, 255)
EYE = (255, 255, 255, 255)
TUBE = (84, 170, 60, 255)
TUBE_LIGHT = (156, 230, 89, 255)
TUBE_DARK = (55, 120, 40, 255)


def draw_bird(draw: ImageDraw.ImageDraw, x: int, y: int, w: int, h: int, wing_offset: int) -> None:
    """One animation frame of the bird."""
    draw.ellipse([x + 2, y + 2, x + w - 6, y + h - 2], fill=BIRD, outline=(0, 0, 0, 255))
    wing_y = y + h // 2 + wing_offset
    draw.ellipse([x + 4, wing_y - 4, x + 16, wing_y + 4], fill=WING, outline=(0, 0, 0, 255))
    draw.ellipse([x + w - 16, y + 4, x + w - 9, y + 11], fill=EYE, outline=(0, 0, 0, 255))
    draw.rectangle([x + w - 12, y + 6, x + w - 10, y + 9], fill=(0, 0, 0, 255))
    draw.polygon([(x + w - 8, y + 12), (x + w, y + 15), (x + w - 8, y + 18)], fill=BEAK)


def draw_background(draw: ImageDraw.ImageDraw, x: int, y: int, w: int, h: int) -> None:
    """Sky, clouds, skyline and ground."""
    rng = random.Random(7)
    draw.rectangle([x, y, x + w - 1, y + h - 1], fill=SKY)

    horizon = y + int(h * 0.70)
    for _ in range(6):
        cx = x + rng.randint(0, w)
        r = rng.randint(14, 26)
        draw.ellipse([cx - r, horizon - 40 - r, cx + r, horizon - 40 + r], fill=CLOUD)

    bx = x
    while bx < x + w:
        bw = rng.randint(16, 30)
        bh = rng.randint(20, 60)
        draw.rectangle([bx, horizon - bh, min(bx + bw, x + w - 1), horizon], fill=CITY)
        bx += bw

    ground = y + int(h * 0.85)
    draw.rectangle([x, horizon, x + w - 1, ground], fill=CITY)
    draw.rectangle([x, ground, x + w - 1, y + h - 1], fill=GROUND)
    draw.rectangle([x, ground, x + w - 1, ground + 6], fill=GRASS)


def draw_tube(draw: ImageDraw.ImageDraw, x: int, y: int, w: int, h: int) -> None:
    """Tileable tube segment, shaded left to right."""
    draw.rectangle([x, y, x + w - 1, y + h - 1], fill=TUBE)
    draw.rectangle([x + 4, y, x + 10, y + h - 1], fill=TUBE_LIGHT)
    draw.rectangle([x + w - 8, y, x + w - 1, y + h - 1], fill=TUBE_DARK)
    draw.line([x, y, x, y + h - 1], fill=(0, 0, 0, 255))
    draw.line([x + w - 1, y, x + w - 1, y + h - 1], fill=(0, 0, 0, 255))


def generate_sprite_sheet(settings: Settings, filepath: str) -> None:
    res = settings.resources
    sheet = Image.new("RGBA", (res.sprite_sheet_width, res.sprite_sheet_height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(sheet)

    for index, (x, y, w, h) in enumerate(settings.actor.frames):
        draw_bird(draw, x, y, w, h, wing_offset=(index - 1) * 4)

    for x, y, w, h in settings.background.frames:
        draw_background(draw, x, y, w, h)

    draw_tube(draw, *res.tube_pattern)

    sheet.save(filepath)


def tone(start_freq: float, end_freq: float, duration: float, volume: float = 0.5,
         noise: float = 0.0, decay: float = 4.0) -> array.array:
    """Square-ish sweep with exponential decay, 16-bit mono."""
    rng = random.Random(1)
    samples = array.array('h')
    num_samples = int(SAMPLE_RATE * duration)
    phase = 0.0

    for i in range(num_samples):
        t = i / SAMPLE_RATE
        progress = i / max(1, num_samples - 1)
        freq = start_freq + (end_freq - start_freq) * progress
        phase += freq / SAMPLE_RATE
        wave_value = math.sin(2 * math.pi * phase)
        wave_value = max(-0.6, min(0.6, wave_value * 1.5))
        if noise:
            wave_value = wave_value * (1 - noise) + rng.uniform(-1, 1) * noise
        envelope = math.exp(-decay * t / duration)
        samples.append(int(max(-32767, min(32767, wave_value * volume * envelope * 32767))))

    return samples


SOUNDS = {
    "flapSound": lambda: tone(300, 700, 0.12, volume=0.4, noise=0.3),
    "pointSound": lambda: tone(880, 1320, 0.18, volume=0.4, decay=2.0),
    "hitSound": lambda: tone(200, 60, 0.20, volume=0.6, noise=0.6),
    "dieSound": lambda: tone(600, 120, 0.50, volume=0.5, decay=2.0),
    "swooshingSound": lambda: tone(120, 900, 0.30, volume=0.3, noise=0.8, decay=1.5),
}


def save_wav(samples: array.array, filepath: str) -> None:
    """Write 16-bit mono samples to a WAV file."""
    with wave.open(filepath, 'wb') as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)  # 16-bit
        wav_file.setframerate(SAMPLE_RATE)
        wav_file.writeframes(samples.tobytes())


def main():
    """Generate the sprite sheet and every sound of the manifest."""
    settings = Settings()
    res = settings.resources
    output_dir = str(res.assets_path)
    os.makedirs(output_dir, exist_ok=True)

    print(f"Generating assets to: {output_dir}")

    sheet_path = os.path.join(output_dir, res.sprite_sheet)
    generate_sprite_sheet(settings, sheet_path)
    print(f"  ✓ {res.sprite_sheet}")

    saved_count = 0
    for name, src in res.sounds.items():
        generator = SOUNDS.get(name)
        if generator is None:
            print(f"  ✗ {name}: no generator")
            continue
        output_path = os.path.join(output_dir, src)
        os.makedirs(os.path.dirname(output_path), exist_ok=True)
        save_wav(generator(), output_path)
        print(f"  ✓ {src}")
        saved_count += 1

    print(f"\n✓ Saved {saved_count}/{len(res.sounds)} sounds to {output_dir}")


if __name__ == "__main__":
    main()
