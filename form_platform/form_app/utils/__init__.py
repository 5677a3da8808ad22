"""Utility helpers (upload parsing, text decoding)."""

from .file_parser import classify_file, decode_text, parse_csv_header, parse_json_keys

__all__ = ["classify_file", "decode_text", "parse_csv_header", "parse_json_keys"]
