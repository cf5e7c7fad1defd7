from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from addon_audit.errors import FileAccessError, InvalidPresetPathError, PresetParseError
from addon_audit.models import LocalAddon, RemoteAddon
from addon_audit.presets import (
    load_presets,
    parse_addon_reference,
    parse_preset,
    parse_timestamp,
    preset_name,
)


def _preset_xml(last_update: str, *ids: str) -> str:
    id_elements = "".join(f"<id>{value}</id>" for value in ids)
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<addons-presets>"
        f"<last-update>{last_update}</last-update>"
        f"<published-ids>{id_elements}</published-ids>"
        "<dlcs-appids />"
        "</addons-presets>"
    )


@pytest.fixture()
def sample_xml() -> str:
    return """
    <addons-presets>
      <last-update>2021-06-12T18:30:00.1234567+02:00</last-update>
      <published-ids>
        <id>steam:450814997</id>
        <id>local:C:\\Mods\\@private</id>
        <id>steam:463939057</id>
      </published-ids>
    </addons-presets>
    """.strip()


def test_parse_preset_creates_preset(sample_xml: str) -> None:
    preset = parse_preset(sample_xml, "Main")

    assert preset.name == "Main"
    assert preset.mods == [
        RemoteAddon(450814997),
        LocalAddon(Path("C:\\Mods\\@private")),
        RemoteAddon(463939057),
    ]
    assert list(preset.remote_ids()) == [450814997, 463939057]


def test_parse_preset_preserves_source_offset(sample_xml: str) -> None:
    preset = parse_preset(sample_xml.encode("utf-8"), "Main")

    assert preset.last_update.utcoffset() == timedelta(hours=2)
    assert preset.last_update.hour == 18
    assert preset.last_update == datetime(2021, 6, 12, 16, 30, 0, 123456, tzinfo=timezone.utc)


def test_parse_preset_allows_empty_id_list() -> None:
    preset = parse_preset(_preset_xml("2021-06-12T18:30:00Z"), "Empty")
    assert preset.mods == []


def test_parse_preset_rejects_unknown_prefix() -> None:
    document = _preset_xml("2021-06-12T18:30:00Z", "steam:1", "workshop:2")

    with pytest.raises(PresetParseError) as excinfo:
        parse_preset(document, "Broken")

    assert excinfo.value.name == "Broken"
    assert "workshop:2" in str(excinfo.value)
    assert str(excinfo.value).startswith("Failed to parse preset 'Broken'")


def test_parse_preset_rejects_invalid_timestamp() -> None:
    with pytest.raises(PresetParseError, match="RFC 3339"):
        parse_preset(_preset_xml("12/06/2021 18:30", "steam:1"), "Broken")


@pytest.mark.parametrize(
    "document",
    [
        "<addons-presets><last-update>2021-06-12T18:30:00Z</last-update>",
        "<addons-presets><published-ids /></addons-presets>",
        "<addons-presets><last-update>2021-06-12T18:30:00Z</last-update></addons-presets>",
    ],
)
def test_parse_preset_rejects_incomplete_documents(document: str) -> None:
    with pytest.raises(PresetParseError):
        parse_preset(document, "Broken")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2021-06-12T18:30:00Z", datetime(2021, 6, 12, 18, 30, tzinfo=timezone.utc)),
        ("2021-06-12t18:30:00z", datetime(2021, 6, 12, 18, 30, tzinfo=timezone.utc)),
        ("2021-06-12 18:30:00.5-05:30", datetime(2021, 6, 13, 0, 0, 0, 500000, tzinfo=timezone.utc)),
    ],
)
def test_parse_timestamp_accepts_rfc3339(value: str, expected: datetime) -> None:
    assert parse_timestamp(value) == expected


def test_parse_timestamp_keeps_negative_offset() -> None:
    parsed = parse_timestamp("2021-06-12 18:30:00-05:30")
    assert parsed.utcoffset() == -timedelta(hours=5, minutes=30)


@pytest.mark.parametrize(
    "value",
    [
        "2021-06-12",
        "2021-06-12T18:30:00",
        "2021-06-12T18:30Z",
        "2021-13-12T18:30:00Z",
        "2021-06-12T18:30:00+0200",
        " 2021-06-12T18:30:00Z",
    ],
)
def test_parse_timestamp_rejects_non_conforming_strings(value: str) -> None:
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_parse_addon_reference_variants() -> None:
    assert parse_addon_reference("steam:42") == RemoteAddon(42)
    assert parse_addon_reference("local:/srv/mods/@x") == LocalAddon(Path("/srv/mods/@x"))


@pytest.mark.parametrize("value", ["steam:", "steam:abc", "steam:-1", "steam:18446744073709551616", "42", ""])
def test_parse_addon_reference_rejects_invalid_values(value: str) -> None:
    with pytest.raises(ValueError):
        parse_addon_reference(value)


def test_preset_name_strips_extension() -> None:
    assert preset_name(Path("/presets/My Preset.preset2")) == "My Preset"


def test_preset_name_rejects_paths_without_base_name() -> None:
    with pytest.raises(InvalidPresetPathError):
        preset_name(Path(""))


def test_load_presets_reads_files_in_directory(tmp_path: Path) -> None:
    (tmp_path / "Zeus.preset2").write_text(_preset_xml("2021-06-12T18:30:00Z", "steam:1"), encoding="utf-8")
    (tmp_path / "Alpha.preset2").write_text(_preset_xml("2021-06-10T08:00:00+01:00", "steam:2"), encoding="utf-8")
    (tmp_path / "archive").mkdir()

    presets = load_presets(tmp_path)

    assert list(presets) == ["Alpha", "Zeus"]
    assert presets["Alpha"].mods == [RemoteAddon(2)]


def test_load_presets_aborts_on_first_bad_preset(tmp_path: Path) -> None:
    (tmp_path / "Good.preset2").write_text(_preset_xml("2021-06-12T18:30:00Z", "steam:1"), encoding="utf-8")
    (tmp_path / "Bad.preset2").write_text("<addons-presets>", encoding="utf-8")

    with pytest.raises(PresetParseError) as excinfo:
        load_presets(tmp_path)

    assert excinfo.value.name == "Bad"


def test_load_presets_wraps_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileAccessError):
        load_presets(tmp_path / "Presets")


def test_load_presets_skips_symlinks(tmp_path: Path) -> None:
    target = tmp_path / "Shared.preset2"
    target.write_text(_preset_xml("2021-06-12T18:30:00Z", "steam:1"), encoding="utf-8")
    presets_dir = tmp_path / "Presets"
    presets_dir.mkdir()
    (presets_dir / "Main.preset2").write_text(_preset_xml("2021-06-12T18:30:00Z", "steam:2"), encoding="utf-8")
    try:
        (presets_dir / "Linked.preset2").symlink_to(target)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not available on this platform")

    assert list(load_presets(presets_dir)) == ["Main"]
