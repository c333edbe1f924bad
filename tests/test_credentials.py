"""Tests for storing the Notion token on disk."""

import os

import pytest

from kindle2notion.utils.credentials import (
    decode_token,
    encode_token,
    load_token_from_file,
    mask_token,
    save_token_to_file,
)

NOTION_TOKEN = "secret_abcdefghijklmnopqrstuvwxyz0123456789"
OWNER_READ_WRITE_ONLY = 0o600


class TestTokenEncoding:
    def test_encode_decode_token(self):
        encoded = encode_token(NOTION_TOKEN)

        assert encoded != NOTION_TOKEN
        assert decode_token(encoded) == NOTION_TOKEN

    def test_empty_values(self):
        assert encode_token("") == ""
        assert decode_token("") == ""

    def test_decode_invalid_token(self):
        # Not base64; the error is logged and an empty token returned
        assert decode_token("not-valid-base64@!") == ""


class TestTokenFile:
    def test_save_and_load_token(self, tmp_path):
        token_file = tmp_path / "credentials" / "notion_token"

        assert save_token_to_file(NOTION_TOKEN, token_file) is True
        assert token_file.read_text() != NOTION_TOKEN
        assert load_token_from_file(token_file) == NOTION_TOKEN

    def test_load_missing_file(self, tmp_path):
        assert load_token_from_file(tmp_path / "missing") == ""

    def test_load_empty_file(self, tmp_path):
        token_file = tmp_path / "notion_token"
        token_file.touch()

        assert load_token_from_file(token_file) == ""

    def test_save_into_unwritable_location(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")

        assert save_token_to_file(NOTION_TOKEN, blocker / "notion_token") is False

    @pytest.mark.skipif(os.name != "posix", reason="File modes only apply on Unix-like systems")
    def test_file_permissions(self, tmp_path):
        token_file = tmp_path / "notion_token"
        save_token_to_file(NOTION_TOKEN, token_file)

        mode = token_file.stat().st_mode & 0o777
        assert mode == OWNER_READ_WRITE_ONLY, f"Expected {OWNER_READ_WRITE_ONLY:o}, got {mode:o}"


class TestTokenMasking:
    def test_mask_long_token(self):
        masked = mask_token(NOTION_TOKEN)

        assert masked.startswith("secr")
        assert masked.endswith("6789")
        assert masked.count("*") == len(NOTION_TOKEN) - 8
        assert len(masked) == len(NOTION_TOKEN)

    def test_mask_short_token(self):
        assert mask_token("abcde") == "*****"

    def test_mask_empty_token(self):
        assert mask_token("") == ""
