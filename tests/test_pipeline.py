"""Tests for the parse -> process -> build helper."""
import pytest

from autocue.config import OUTPUT_NAME
from autocue.core.document import build, parse
from autocue.core.errors import FormatError, ParseError
from autocue.core.pipeline import process_collection, write_output
from autocue.models.placement import PlacementConfig


class TestProcessCollection:

    def test_counts_and_outcomes(self, sample_xml):
        result = process_collection(sample_xml, PlacementConfig(), ["1", "2", "3", "42"])

        assert result.processed_count == 1
        assert result.skipped_count == 2
        assert result.missing_ids == ["42"]
        # Defaults: 2 before every 8 bars from 30s (14s kept, -2s dropped),
        # 4 after every 16 bars from 30s (94s collides with "Drop")
        assert result.added_count == 4
        assert [a["Start"] for a in result.outcomes[0].added] == ["14.000", "62.000", "126.000", "158.000"]

    def test_output_reparses(self, sample_xml):
        result = process_collection(sample_xml, PlacementConfig(), ["1"])
        assert build(parse(result.xml)) == result.xml
        assert 'Entries="1"' in result.xml

    def test_bytes_input(self, sample_xml):
        result = process_collection(sample_xml.encode("utf-8"), PlacementConfig(), ["1"])
        assert result.processed_count == 1

    def test_parse_error_propagates(self):
        with pytest.raises(ParseError):
            process_collection("<DJ_PLAYLISTS>", PlacementConfig(), ["1"])

    def test_format_error_propagates(self):
        with pytest.raises(FormatError):
            process_collection("<DJ_PLAYLISTS></DJ_PLAYLISTS>", PlacementConfig(), ["1"])


class TestWriteOutput:

    def test_writes_file(self, sample_xml, tmp_path):
        result = process_collection(sample_xml, PlacementConfig(), ["1"])
        target = write_output(result, tmp_path / "out.xml")
        assert target == tmp_path / "out.xml"
        assert target.read_text(encoding="utf-8") == result.xml

    def test_directory_gets_default_name(self, sample_xml, tmp_path):
        result = process_collection(sample_xml, PlacementConfig(), ["1"])
        target = write_output(result, tmp_path)
        assert target == tmp_path / OUTPUT_NAME
        assert target.exists()

    def test_keeps_source_encoding(self, tmp_path):
        text = (
            '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
            "<DJ_PLAYLISTS>\n"
            "  <COLLECTION>\n"
            '    <TRACK TrackID="1" Name="Café" TotalTime="300"></TRACK>\n'
            "  </COLLECTION>\n"
            "</DJ_PLAYLISTS>\n"
        )
        result = process_collection(text.encode("latin-1"), PlacementConfig(), [])
        assert result.encoding == "ISO-8859-1"

        data = write_output(result, tmp_path / "out.xml").read_bytes()
        assert b'Name="Caf\xe9"' in data
        assert data.decode("latin-1") == result.xml


class TestUntouchedTracks:

    def test_apostrophe_names_outside_selection_unchanged(self):
        line = '    <TRACK TrackID="9" Name="Don&apos;t Stop" TotalTime="200"></TRACK>'
        text = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<DJ_PLAYLISTS>\n"
            "  <COLLECTION>\n"
            f"{line}\n"
            "  </COLLECTION>\n"
            "</DJ_PLAYLISTS>\n"
        )
        result = process_collection(text, PlacementConfig(), ["1"])
        assert line in result.xml
        assert result.missing_ids == ["1"]
