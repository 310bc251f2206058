import json

import pytest

from reflection_engine.adapters.csv_adapter import parse as parse_csv
from reflection_engine.adapters.json_adapter import parse as parse_json
from reflection_engine.adapters.loader import load_records
from reflection_engine.normalizer import normalize_records
from reflection_engine.schema import ActionItem


def test_csv_parse_success(tmp_path):
    path = tmp_path / "focus_areas.csv"
    path.write_text(
        "id,title,progress_percent,year,checklist\n"
        'a,Hiring plan,40,2025,"[""Write specs""]"\n'
        "b,Retro cadence,,2025,\n",
        encoding="utf-8",
    )
    records = parse_csv(str(path))
    assert len(records) == 2
    assert records[0]["progress_percent"] == 40
    assert records[0]["checklist"] == '["Write specs"]'
    assert records[1]["progress_percent"] is None
    assert records[1]["checklist"] is None

    normalized = normalize_records(records)
    assert normalized[0].checklist == [ActionItem(title="Write specs", completed=False)]
    assert normalized[1].checklist == []


def test_csv_parse_keeps_non_integer_numeric_cell(tmp_path):
    path = tmp_path / "focus_areas.csv"
    path.write_text("id,progress_percent\na,half\n", encoding="utf-8")
    assert parse_csv(str(path))[0]["progress_percent"] == "half"


def test_csv_parse_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    assert parse_csv(str(path)) == []


def test_json_parse_success(tmp_path):
    path = tmp_path / "focus_areas.json"
    payload = [
        {"id": "a", "title": "Hiring plan", "checklist": ["Write specs"]},
        {"id": "b", "title": "Retro cadence", "checklist": "{not json"},
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    records = parse_json(str(path))
    assert records == payload


def test_json_parse_rejects_non_list(tmp_path):
    path = tmp_path / "focus_areas.json"
    path.write_text(json.dumps({"id": "a"}), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))


def test_json_parse_rejects_non_object_item(tmp_path):
    path = tmp_path / "focus_areas.json"
    path.write_text(json.dumps([{"id": "a"}, "b"]), encoding="utf-8")
    with pytest.raises(ValueError, match="Item 2"):
        parse_json(str(path))


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "focus_areas.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))


def test_load_records_dispatches_on_suffix(tmp_path):
    path = tmp_path / "entries.json"
    path.write_text(json.dumps([{"id": "a"}]), encoding="utf-8")
    assert load_records(path) == [{"id": "a"}]

    with pytest.raises(ValueError):
        load_records(tmp_path / "entries.xlsx")
