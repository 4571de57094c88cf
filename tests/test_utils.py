import pytest

from dish_audit.utils import extract_json, strip_data_uri


def test_strip_data_uri():
    assert strip_data_uri("data:image/png;base64,AAAA") == "AAAA"
    assert strip_data_uri("data:image/jpeg;base64,/9j/") == "/9j/"
    assert strip_data_uri("AAAA") == "AAAA"


def test_extract_json_plain():
    assert extract_json('{"isFood": true}') == {"isFood": True}


def test_extract_json_fenced():
    text = 'Here you go:\n```json\n{"dishName": "Pav Bhaji"}\n```'
    assert extract_json(text) == {"dishName": "Pav Bhaji"}


def test_extract_json_rejects_empty_and_non_objects():
    with pytest.raises(ValueError):
        extract_json("")
    with pytest.raises(ValueError):
        extract_json("no json here")
    with pytest.raises(ValueError):
        extract_json("[1, 2]")
