"""Генерация текста и картинки для графической CAPTCHA."""

import io
import random
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

# Без похожих друг на друга символов: нет I, O, 0, 1.
CAPTCHA_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CAPTCHA_LENGTH = 5

IMAGE_WIDTH = 300
IMAGE_HEIGHT = 100


def generate_captcha_text(length: int = CAPTCHA_LENGTH, rng: Optional[random.Random] = None) -> str:
    """Случайная строка из CAPTCHA_ALPHABET."""
    rng = rng or random.SystemRandom()
    return "".join(rng.choice(CAPTCHA_ALPHABET) for _ in range(length))


def _light_color(rng: random.Random) -> Tuple[int, int, int]:
    return rng.randint(200, 255), rng.randint(200, 255), rng.randint(200, 255)


def _dark_color(rng: random.Random) -> Tuple[int, int, int]:
    return rng.randint(0, 110), rng.randint(0, 110), rng.randint(0, 110)


def render_captcha_image(
    text: str,
    width: int = IMAGE_WIDTH,
    height: int = IMAGE_HEIGHT,
    rng: Optional[random.Random] = None,
) -> bytes:
    """
    Рисует текст на PNG-картинке: каждый символ повёрнут отдельно,
    поверх наложены линии и точки.
    """
    rng = rng or random.Random()
    image = Image.new("RGB", (width, height), _light_color(rng))
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default(size=int(height * 0.5))

    for _ in range(5):
        start = (rng.randint(0, width), rng.randint(0, height))
        end = (rng.randint(0, width), rng.randint(0, height))
        draw.line([start, end], fill=_dark_color(rng), width=2)

    step = width // (len(text) + 1)
    glyph_size = int(height * 0.8)
    for index, char in enumerate(text):
        glyph = Image.new("RGBA", (glyph_size, glyph_size), (0, 0, 0, 0))
        glyph_draw = ImageDraw.Draw(glyph)
        left, top, right, bottom = glyph_draw.textbbox((0, 0), char, font=font)
        position = ((glyph_size - (right - left)) // 2 - left, (glyph_size - (bottom - top)) // 2 - top)
        glyph_draw.text(position, char, font=font, fill=_dark_color(rng) + (255,))
        glyph = glyph.rotate(rng.uniform(-30, 30), resample=Image.Resampling.BICUBIC, expand=True)
        x = step * (index + 1) - glyph.width // 2 + rng.randint(-4, 4)
        y = (height - glyph.height) // 2 + rng.randint(-6, 6)
        image.paste(glyph, (x, y), glyph)

    for _ in range(width * height // 50):
        draw.point((rng.randrange(width), rng.randrange(height)), fill=_dark_color(rng))

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
