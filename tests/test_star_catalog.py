#!/usr/bin/env python3
"""
Tests for the Binary Star Catalog Parser

These tests verify:
1. Header and 23-byte record layout (Y, Z, X position order)
2. Load-time axis flip and rotation
3. Color normalisation
4. Distinct errors for short buffers and negative counts
5. Multi-source loading skips failing sources
"""

import logging
import struct

import numpy as np
import pytest

from ephemeris.star_catalog import (
    HEADER_SIZE,
    RECORD_SIZE,
    ROTATION_COS,
    ROTATION_SIN,
    BufferTooSmallError,
    InvalidRecordCountError,
    StarCatalog,
    StarCatalogError,
    encode_star_catalog,
    load_star_catalogs,
    parse_star_catalog,
    read_star_catalog,
)


def pack_star(mag, abs_mag, r, g, b, x, y, z) -> bytes:
    """One record written field by field, positions in file order Y, Z, X."""
    return struct.pack("<ffBBBfff", mag, abs_mag, r, g, b, y, z, x)


def pack_catalog(*stars, count=None) -> bytes:
    header = struct.pack("<i", len(stars) if count is None else count)
    return header + b"".join(pack_star(*star) for star in stars)


class TestLayout:
    """Tests for the wire format."""

    def test_record_size(self):
        assert RECORD_SIZE == 23
        assert HEADER_SIZE == 4

    def test_empty_catalog(self):
        catalog = parse_star_catalog(pack_catalog())
        assert len(catalog) == 0
        assert catalog.positions.shape == (0, 3)

    def test_magnitudes(self):
        catalog = parse_star_catalog(pack_catalog((-1.46, 1.42, 255, 255, 255, 1.0, 2.0, 3.0)))
        assert catalog.magnitudes[0] == pytest.approx(-1.46, abs=1e-6)
        assert catalog.absolute_magnitudes[0] == pytest.approx(1.42, abs=1e-6)

    def test_position_transform(self):
        """Y is negated, then (X, -Y, Z) is rotated about X."""
        catalog = parse_star_catalog(pack_catalog((0.0, 0.0, 1, 1, 1, 1.0, 2.0, 3.0)))
        y, z = -2.0, 3.0
        expected = [1.0, y * ROTATION_COS - z * ROTATION_SIN, y * ROTATION_SIN + z * ROTATION_COS]
        np.testing.assert_allclose(catalog.positions[0], expected, rtol=1e-6)

    def test_rotation_preserves_length(self):
        catalog = parse_star_catalog(pack_catalog((0.0, 0.0, 1, 1, 1, 4.0, -7.0, 2.5)))
        assert np.linalg.norm(catalog.positions[0]) == pytest.approx(np.linalg.norm([4.0, 7.0, 2.5]), rel=1e-6)

    def test_multiple_records_in_order(self):
        stars = [(float(k), 0.0, 10, 20, 30, float(k), 0.0, 0.0) for k in range(5)]
        catalog = parse_star_catalog(pack_catalog(*stars))
        np.testing.assert_allclose(catalog.magnitudes, np.arange(5))
        np.testing.assert_allclose(catalog.positions[:, 0], np.arange(5))

    def test_trailing_bytes_ignored(self):
        buffer = pack_catalog((1.0, 1.0, 1, 1, 1, 0.0, 0.0, 0.0)) + b"\x00" * 7
        assert len(parse_star_catalog(buffer)) == 1

    def test_encode_matches_hand_packed(self):
        """encode_star_catalog writes the same bytes as field-by-field packing."""
        encoded = encode_star_catalog(
            np.array([0.5]), np.array([2.0]), np.array([[200, 100, 50]]),
            np.array([[1.0, 2.0, 3.0]]),
        )
        assert encoded == pack_catalog((0.5, 2.0, 200, 100, 50, 1.0, 2.0, 3.0))


class TestColors:
    """Tests for color normalisation."""

    def test_brightest_channel_is_one(self):
        catalog = parse_star_catalog(pack_catalog((0.0, 0.0, 255, 128, 0, 0.0, 0.0, 0.0)))
        np.testing.assert_allclose(catalog.colors[0], [1.0, 128 / 255, 0.0])

    def test_dim_color_scaled_up(self):
        catalog = parse_star_catalog(pack_catalog((0.0, 0.0, 10, 5, 0, 0.0, 0.0, 0.0)))
        np.testing.assert_allclose(catalog.colors[0], [1.0, 0.5, 0.0])

    def test_black_stays_black(self):
        """max(r, g, b, 1) avoids dividing by zero."""
        catalog = parse_star_catalog(pack_catalog((0.0, 0.0, 0, 0, 0, 0.0, 0.0, 0.0)))
        np.testing.assert_array_equal(catalog.colors[0], [0.0, 0.0, 0.0])


class TestErrors:
    """Tests for malformed buffers."""

    def test_short_header(self):
        with pytest.raises(BufferTooSmallError):
            parse_star_catalog(b"\x01\x00")

    def test_negative_count(self):
        with pytest.raises(InvalidRecordCountError):
            parse_star_catalog(struct.pack("<i", -1))

    def test_truncated_records(self):
        buffer = pack_catalog((0.0, 0.0, 1, 1, 1, 0.0, 0.0, 0.0), count=2)
        with pytest.raises(BufferTooSmallError, match="2 records"):
            parse_star_catalog(buffer)

    def test_errors_share_base(self):
        assert issubclass(BufferTooSmallError, StarCatalogError)
        assert issubclass(InvalidRecordCountError, StarCatalogError)
        assert not issubclass(BufferTooSmallError, InvalidRecordCountError)


class TestLoading:
    """Tests for file loading."""

    def test_read_file(self, tmp_path):
        path = tmp_path / "stars.bin"
        path.write_bytes(pack_catalog((1.0, 1.0, 1, 1, 1, 0.0, 0.0, 0.0)))
        assert len(read_star_catalog(path)) == 1

    def test_failing_source_skipped(self, tmp_path, caplog):
        """A bad source is logged and the rest still load."""
        good = tmp_path / "good.bin"
        good.write_bytes(pack_catalog(
            (1.0, 1.0, 1, 1, 1, 0.0, 0.0, 0.0),
            (5.0, 1.0, 1, 1, 1, 1.0, 0.0, 0.0),
        ))
        corrupt = tmp_path / "corrupt.bin"
        corrupt.write_bytes(struct.pack("<i", 100))
        missing = tmp_path / "missing.bin"

        with caplog.at_level(logging.WARNING):
            catalog = load_star_catalogs([corrupt, good, missing])

        assert len(catalog) == 2
        assert "corrupt.bin" in caplog.text
        assert "missing.bin" in caplog.text

    def test_sources_concatenated(self, tmp_path):
        paths = []
        for k in range(3):
            path = tmp_path / f"part{k}.bin"
            path.write_bytes(pack_catalog((float(k), 0.0, 1, 1, 1, 0.0, 0.0, 0.0)))
            paths.append(path)
        catalog = load_star_catalogs(paths)
        np.testing.assert_allclose(catalog.magnitudes, [0.0, 1.0, 2.0])

    def test_magnitude_cut(self, tmp_path):
        path = tmp_path / "stars.bin"
        path.write_bytes(pack_catalog(
            (1.0, 0.0, 1, 1, 1, 0.0, 0.0, 0.0),
            (7.0, 0.0, 1, 1, 1, 0.0, 0.0, 0.0),
        ))
        catalog = load_star_catalogs([path], max_magnitude=6.0)
        assert len(catalog) == 1
        assert catalog.magnitudes[0] == pytest.approx(1.0)

    def test_no_sources(self):
        assert len(load_star_catalogs([])) == 0
        assert len(StarCatalog.empty()) == 0
