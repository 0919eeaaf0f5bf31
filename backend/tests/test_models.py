import pytest

from transcoder.conversion.models import ConversionRequest, TaskResult


@pytest.mark.parametrize(
    "input_file, fmt, expected",
    [
        ("clip.mov", "mp4", "clip.mp4"),
        ("photo.final.png", "gif", "photo.final.gif"),
        ("voice", "mp3", "voice.mp3"),
        ("batch/clip.avi", "webm", "clip.webm"),
    ],
)
def test_output_name_replaces_last_extension(input_file, fmt, expected):
    assert ConversionRequest(input_file=input_file, format=fmt).output_name == expected


def test_from_payload_camel_case():
    request = ConversionRequest.from_payload(
        {"inputFile": "clip.mov", "format": " MP4 ", "resolution": "1280x720", "crf": "23", "bitrate": "2M"}
    )
    assert request.input_file == "clip.mov"
    assert request.format == "mp4"
    assert request.resolution == "1280x720"
    assert request.crf == 23
    assert request.bitrate == "2M"


def test_from_payload_snake_case_and_blanks():
    request = ConversionRequest.from_payload(
        {"input_file": "clip.mov", "format": "gif", "resolution": "  ", "crf": "", "bitrate": None}
    )
    assert request.resolution is None
    assert request.crf is None
    assert request.bitrate is None


def test_from_payload_fractional_crf():
    assert ConversionRequest.from_payload({"inputFile": "a.mov", "format": "mkv", "crf": 18.5}).crf == 18.5


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"format": "mp4"}, "inputFile is required"),
        ({"inputFile": "clip.mov"}, "Unsupported output format"),
        ({"inputFile": "clip.mov", "format": "exe"}, "Unsupported output format"),
        ({"inputFile": "../etc/passwd", "format": "mp4"}, "relative to the input directory"),
        ({"inputFile": "/tmp/clip.mov", "format": "mp4"}, "relative to the input directory"),
        ({"inputFile": "clip.mov", "format": "mp4", "crf": "high"}, "Invalid crf"),
        ({"inputFile": "clip.mov", "format": "mp4", "crf": True}, "Invalid crf"),
        ({"inputFile": "clip.mov", "format": "mp4", "crf": "inf"}, "Invalid crf"),
        ({"inputFile": "clip.mov", "format": "mp4", "crf": "-inf"}, "Invalid crf"),
        ({"inputFile": "clip.mov", "format": "mp4", "crf": "nan"}, "Invalid crf"),
        ({"inputFile": "clip.mov", "format": "mp4", "crf": float("inf")}, "Invalid crf"),
    ],
)
def test_from_payload_rejects_invalid(payload, message):
    with pytest.raises(ValueError, match=message):
        ConversionRequest.from_payload(payload)


def test_started_at_does_not_affect_equality():
    first = ConversionRequest(input_file="clip.mov", format="mp4", started_at=1.0)
    second = ConversionRequest(input_file="clip.mov", format="mp4", started_at=2.0)
    assert first == second


def test_task_result_wire_shapes():
    assert TaskResult.ok("clip.mp4").to_dict() == {"success": True, "outputName": "clip.mp4"}
    assert TaskResult.failed("Input file not found: x").to_dict() == {"error": "Input file not found: x"}
    assert TaskResult.ok("clip.mp4").success
    assert not TaskResult.failed("boom").success
