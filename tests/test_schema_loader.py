import json

import pytest

from daily_prophet import schema


def test_loads_plain_template():
    template = schema.load_template("plain")
    assert template.name == "plain"
    assert template.list_field == "news"
    assert template.sections == {"overview": "overview", "magic": "magic_tip"}
    assert set(template.properties) == {"date", "overview", "news", "magic_tip"}


def test_themed_template_adds_scalar_sections():
    template = schema.load_template("themed")
    assert template.sections["horoscope"] == "horoscope"
    assert template.sections["rate"] == "galleon_rate"
    assert "galleon_rate" in template.properties


def test_skeleton_fills_date_and_numbers_news_items():
    skeleton = schema.load_template("plain").skeleton("2026-10-19")
    assert skeleton["date"] == "2026-10-19"
    assert [item["id"] for item in skeleton["news"]] == ["1", "2", "3"]
    assert skeleton["news"][0]["description"] == "30-40 words"
    assert isinstance(skeleton["overview"], str)


def test_fallback_payload_empties_fields_and_keeps_raw_text():
    payload = schema.load_template("themed").fallback_payload("2026-10-19", raw_text="oops")
    assert payload == {
        "date": "2026-10-19",
        "overview": "",
        "news": [],
        "magic_tip": "",
        "horoscope": "",
        "galleon_rate": "",
        "raw_text": "oops",
    }


def test_loads_template_from_path(tmp_path):
    path = tmp_path / "tiny.json"
    path.write_text(
        json.dumps(
            {
                "title": "Tiny Times",
                "sections": {"Headline": "headline"},
                "list_field": "items",
                "schema": {
                    "type": "object",
                    "properties": {
                        "headline": {"type": "string"},
                        "items": {"type": "array"},
                        "score": {"type": "number"},
                    },
                },
            }
        ),
        encoding="utf-8",
    )
    template = schema.load_template(str(path))
    assert template.name == "tiny"
    assert template.sections == {"headline": "headline"}
    assert template.fallback_payload("k", "raw") == {
        "headline": "",
        "items": [],
        "score": None,
        "raw_text": "raw",
    }


def test_unknown_template_name_is_rejected():
    with pytest.raises(ValueError) as excinfo:
        schema.load_template("tabloid")
    assert "plain" in str(excinfo.value)


def test_invalid_schema_is_rejected(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"schema": {"type": 12}}), encoding="utf-8")
    with pytest.raises(ValueError) as excinfo:
        schema.load_template(str(path))
    assert "invalid schema" in str(excinfo.value)
