"""
Tests for the image CAPTCHA generator.
"""

import io
import random

from PIL import Image

from pmbot.services.captcha_image import (
    CAPTCHA_ALPHABET,
    CAPTCHA_LENGTH,
    generate_captcha_text,
    render_captcha_image,
)


class TestCaptchaText:

    def test_length_and_alphabet(self):
        for _ in range(50):
            text = generate_captcha_text()
            assert len(text) == CAPTCHA_LENGTH
            assert set(text) <= set(CAPTCHA_ALPHABET)

    def test_no_ambiguous_characters(self):
        assert not set("IO01") & set(CAPTCHA_ALPHABET)

    def test_seeded_rng_is_reproducible(self):
        assert generate_captcha_text(rng=random.Random(7)) == generate_captcha_text(rng=random.Random(7))


class TestCaptchaImage:

    def test_renders_png(self):
        data = render_captcha_image("AB3XY", rng=random.Random(1))
        assert data.startswith(b"\x89PNG\r\n\x1a\n")
        image = Image.open(io.BytesIO(data))
        assert image.size == (300, 100)

    def test_custom_size(self):
        image = Image.open(io.BytesIO(render_captcha_image("ZZZZZ", width=200, height=80)))
        assert image.size == (200, 80)
