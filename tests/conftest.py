"""Shared fixtures: a small Rekordbox collection and track/config factories."""
import pytest

from autocue.core.document import Node, parse
from autocue.models.placement import CueKind, DirectionConfig, PlacementConfig

SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<DJ_PLAYLISTS Version="1.0.0">
  <PRODUCT Name="rekordbox" Version="6.8.5" Company="AlphaTheta"/>
  <COLLECTION Entries="3">
    <TRACK TrackID="1" Name="Alpha &amp; Omega" Artist="DJ A" Album="First" Location="file://localhost/music/alpha.mp3" TotalTime="300" AverageBpm="120.00" Tonality="8A">
      <TEMPO Inizio="0.030" Bpm="120.00" Metro="4/4" Battito="1"/>
      <POSITION_MARK Name="" Type="0" Start="30.000" Num="0" Red="40" Green="226" Blue="20"/>
      <POSITION_MARK Name="Drop" Type="0" Start="94.000" Num="-1"/>
    </TRACK>
    <TRACK TrackID="2" Name="Beta" Artist="DJ B" Album="Second" Location="file://localhost/music/beta.mp3" TotalTime="240" AverageBpm="128.00" Tonality="5A">
      <POSITION_MARK Name="" Type="0" Start="10.000" Num="-1"/>
    </TRACK>
    <TRACK TrackID="3" Name="Gamma" Artist="" Album="" Location="file://localhost/music/gamma.mp3" TotalTime="0" AverageBpm="0.00" Tonality=""></TRACK>
  </COLLECTION>
  <PLAYLISTS>
    <NODE Type="0" Name="ROOT" Count="1">
      <NODE Name="Sets" Type="0" Count="1">
        <NODE Name="Warmup" Type="1" KeyType="0" Entries="2">
          <TRACK Key="1"></TRACK>
          <TRACK Key="2"></TRACK>
        </NODE>
      </NODE>
    </NODE>
  </PLAYLISTS>
</DJ_PLAYLISTS>
"""


@pytest.fixture
def sample_xml():
    return SAMPLE_XML


@pytest.fixture
def sample_document():
    return parse(SAMPLE_XML)


@pytest.fixture
def make_track():
    """Factory: TRACK node from (start, slot) pairs."""

    def _make(marks=(), bpm=120.0, total_time=300.0, track_id="1", name="Test"):
        track = Node(
            "TRACK",
            {
                "TrackID": track_id,
                "Name": name,
                "TotalTime": str(total_time),
                "AverageBpm": f"{bpm:.2f}",
            },
        )
        track.append(Node("TEMPO", {"Inizio": "0.000", "Bpm": f"{bpm:.2f}", "Metro": "4/4", "Battito": "1"}))
        for start, slot in marks:
            track.append(
                Node("POSITION_MARK", {"Name": "", "Type": "0", "Start": f"{start:.3f}", "Num": str(slot)})
            )
        return track

    return _make


@pytest.fixture
def make_config():
    """Factory: PlacementConfig from before/after (reference, count, interval) shorthands."""

    def _make(
        before=("firstHotCue", 0, 8),
        after=("lastHotCue", 0, 16),
        cue_kind=CueKind.MEMORY,
        before_letter="A",
        after_letter="H",
        before_kind=None,
        after_kind=None,
    ):
        return PlacementConfig(
            before=DirectionConfig(before[0], before_letter, before[1], before[2], before_kind),
            after=DirectionConfig(after[0], after_letter, after[1], after[2], after_kind),
            cue_kind=cue_kind,
        )

    return _make
