"""Unit tests for short-code generation."""

from shortlinks.codes import NANOID_ALPHABET, NanoidCodeGenerator


def test_generate_code_length() -> None:
    generator = NanoidCodeGenerator()

    assert len(generator.generate_code(6)) == 6
    assert len(generator.generate_code(10)) == 10


def test_generate_code_url_safe() -> None:
    generator = NanoidCodeGenerator()
    for _ in range(100):
        code = generator.generate_code(6)
        assert all(c in NANOID_ALPHABET for c in code)
        assert "/" not in code


def test_generate_code_uniqueness() -> None:
    generator = NanoidCodeGenerator()
    codes = {generator.generate_code(6) for _ in range(1000)}
    # 64^6 possibilities; 1000 codes should not collide
    assert len(codes) == 1000
