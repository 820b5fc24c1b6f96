import json
from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError, BadRequestError

from extraction import llm_client
from extraction.to_manifest import (
    ExtractionError,
    call_vision_oracle,
    extract_manifest,
    parse_oracle_text,
    strip_code_fences,
)
from input_readers.image import NoteImage, image_to_data_url, read_note_image

ORACLE_JSON = {
    "ProductList": [
        {"ASIN": "B07ECS26RL", "QTY": 18, "Handwritten Note": "Box 2,4 9 each", "Boxes": {"2": 9, "4": 9}},
        {"ASIN": None, "FNSKU": "X001ABCDEF", "QTY": "10", "Handwritten Note": "Box 1", "Boxes": {"1": 10}},
    ],
    "Box Dimensions": [
        {"Box Number": 1, "Weight": 10, "Height": "12.5", "Width": 10, "Length": 14},
        {"Box Number": "2", "Weight": 20, "Height": 20, "Width": 20, "Length": 20},
    ],
}


_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def bad_request(message):
    return BadRequestError(message, response=httpx.Response(400, request=_REQUEST), body=None)


class FakeCompletions:
    def __init__(self, outputs, json_mode_error=None, error=None):
        self.outputs = list(outputs)
        self.json_mode_error = json_mode_error
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.json_mode_error is not None and "response_format" in kwargs:
            raise self.json_mode_error
        content = self.outputs.pop(0)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def fake_client():
    def install(outputs, json_mode_error=None, error=None):
        completions = FakeCompletions(outputs, json_mode_error, error)
        llm_client.set_client(SimpleNamespace(chat=SimpleNamespace(completions=completions)))
        return completions

    yield install
    llm_client.set_client(None)


class TestParseOracleText:
    def test_plain_json(self):
        manifest = parse_oracle_text(json.dumps(ORACLE_JSON))
        assert manifest.parsed
        assert len(manifest.products) == 2
        first = manifest.products[0]
        assert first.asin == "B07ECS26RL"
        assert first.quantity == 18
        assert first.handwritten_note == "Box 2,4 9 each"
        assert first.boxes == {2: 9, 4: 9}

    def test_box_keys_become_ints(self):
        manifest = parse_oracle_text(json.dumps(ORACLE_JSON))
        for product in manifest.products:
            assert all(isinstance(k, int) for k in product.boxes)

    def test_fnsku_and_numeric_strings(self):
        second = parse_oracle_text(json.dumps(ORACLE_JSON)).products[1]
        assert second.asin is None
        assert second.fnsku == "X001ABCDEF"
        assert second.identifier == "X001ABCDEF"
        assert second.quantity == 10

    def test_box_dimensions(self):
        dims = parse_oracle_text(json.dumps(ORACLE_JSON)).box_dimensions
        assert [d.box_number for d in dims] == [1, 2]
        assert dims[0].height == 12.5
        assert dims[0].length == 14.0

    def test_code_fences_are_stripped(self):
        text = "```json\n" + json.dumps(ORACLE_JSON) + "\n```"
        manifest = parse_oracle_text(text)
        assert manifest.parsed
        assert len(manifest.products) == 2
        assert manifest.raw_text == text

    def test_text_around_json(self):
        manifest = parse_oracle_text("Here is the result:\n" + json.dumps(ORACLE_JSON) + "\nDone.")
        assert manifest.parsed
        assert len(manifest.box_dimensions) == 2

    def test_trailing_commas_are_repaired(self):
        manifest = parse_oracle_text('{"ProductList": [{"ASIN": "B1", "Boxes": {"1": 2},},],}')
        assert manifest.parsed
        assert manifest.products[0].boxes == {1: 2}

    def test_malformed_json_gives_empty_unparsed_manifest(self):
        manifest = parse_oracle_text("sorry, I cannot read this image")
        assert not manifest.parsed
        assert manifest.is_empty
        assert manifest.raw_text == "sorry, I cannot read this image"

    def test_empty_result_is_parsed(self):
        manifest = parse_oracle_text('{"ProductList": [], "Box Dimensions": []}')
        assert manifest.parsed
        assert manifest.is_empty

    def test_missing_keys_give_empty_lists(self):
        manifest = parse_oracle_text('{"ProductList": [{"ASIN": "B1"}]}')
        assert manifest.parsed
        assert manifest.box_dimensions == []
        assert manifest.products[0].boxes == {}

    def test_loose_keys_and_values(self):
        text = json.dumps(
            {
                "productlist": [
                    {"asin": " B1 ", "qty": None, "boxes": {"Box 3": "4", "x": 1, "5": None}},
                    {"ASIN": "B2", "Boxes": ["not", "a", "map"]},
                    "junk",
                ],
                "BoxDimensions": [{"BoxNumber": "7", "Weight": "1,5"}, {"Weight": 3}],
            }
        )
        manifest = parse_oracle_text(text)
        assert [p.asin for p in manifest.products] == ["B1", "B2"]
        assert manifest.products[0].boxes == {3: 4}
        assert manifest.products[0].quantity is None
        assert manifest.products[1].boxes == {}
        assert len(manifest.box_dimensions) == 1
        assert manifest.box_dimensions[0].box_number == 7
        assert manifest.box_dimensions[0].weight == 1.5

    def test_non_finite_values_are_dropped(self):
        text = (
            '{"ProductList": [{"ASIN": "B1X", "Boxes": {"1": "nan", "2": NaN, "3": "Infinity", "4": 6}}],'
            ' "Box Dimensions": [{"Box Number": 1, "Weight": "inf", "Length": 30}]}'
        )
        manifest = parse_oracle_text(text)
        assert manifest.products[0].boxes == {4: 6}
        assert manifest.box_dimensions[0].weight is None
        assert manifest.box_dimensions[0].length == 30.0

    def test_non_object_json(self):
        assert not parse_oracle_text("[1, 2, 3]").parsed

    def test_strip_code_fences(self):
        assert strip_code_fences("```\n{\"a\": 1}\n```") == '{"a": 1}'
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


class TestVisionOracle:
    def test_sends_all_images_in_one_request(self, fake_client):
        completions = fake_client([json.dumps(ORACLE_JSON)])
        images = [NoteImage("page1.jpg", b"\xff\xd8one"), NoteImage("page2.png", b"\x89PNGtwo")]

        manifest = extract_manifest(images, model="gpt-4o")

        assert len(manifest.products) == 2
        assert len(completions.calls) == 1
        call = completions.calls[0]
        assert call["model"] == "gpt-4o"
        content = call["messages"][1]["content"]
        urls = [part["image_url"]["url"] for part in content if part["type"] == "image_url"]
        assert len(urls) == 2
        assert urls[0].startswith("data:image/jpeg;base64,")
        assert urls[1].startswith("data:image/png;base64,")

    def test_retries_without_json_mode(self, fake_client):
        completions = fake_client(
            [json.dumps(ORACLE_JSON)], json_mode_error=bad_request("response_format not supported")
        )
        raw = call_vision_oracle([NoteImage("page.jpg", b"data")])
        assert json.loads(raw) == ORACLE_JSON
        assert len(completions.calls) == 2
        assert "response_format" not in completions.calls[1]

    def test_connection_error_is_not_retried(self, fake_client):
        completions = fake_client([], error=APIConnectionError(request=_REQUEST))
        with pytest.raises(ExtractionError, match="request failed"):
            call_vision_oracle([NoteImage("page.jpg", b"data")])
        assert len(completions.calls) == 1

    def test_empty_response_raises(self, fake_client):
        fake_client([""])
        with pytest.raises(ExtractionError):
            call_vision_oracle([NoteImage("page.jpg", b"data")])

    def test_requires_images(self, fake_client):
        fake_client([])
        with pytest.raises(ExtractionError):
            call_vision_oracle([])

    def test_unsupported_image_type(self, fake_client):
        fake_client([])
        with pytest.raises(ValueError):
            call_vision_oracle([NoteImage("notes.pdf", b"%PDF")])


class TestNoteImages:
    def test_read_note_image(self, tmp_path):
        path = tmp_path / "page.png"
        path.write_bytes(b"\x89PNG")
        image = read_note_image(path)
        assert image == NoteImage("page.png", b"\x89PNG")
        assert image_to_data_url(image) == "data:image/png;base64,iVBORw=="

    def test_missing_and_empty_images(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_note_image(tmp_path / "nope.jpg")
        with pytest.raises(ValueError):
            image_to_data_url(NoteImage("empty.jpg", b""))
