"""Tests for the command line entry point."""

import json

from main import build_parser, main


def test_parser_requires_subcommand():
    """Test that the parser knows both subcommands."""
    parser = build_parser()

    args = parser.parse_args(["patch", "doc.md", "response.txt", "--in-place"])
    assert args.command == "patch"
    assert args.in_place

    args = parser.parse_args(["synthesize", "response.txt", "--x", "10", "--y", "-5"])
    assert (args.x, args.y) == (10.0, -5.0)
    assert not args.keep_orphans


def test_patch_writes_result_to_stdout(tmp_path, capsys):
    """Test patching a document without touching the file."""
    document = tmp_path / "note.md"
    document.write_text("Hello wrld, welcome.", encoding="utf-8")
    response = tmp_path / "response.txt"
    response.write_text('[{"original": "Hello wrld", "new": "Hello world"}]', encoding="utf-8")

    exit_code = main(["patch", str(document), str(response)])

    assert exit_code == 0
    assert capsys.readouterr().out == "Hello world, welcome."
    assert document.read_text(encoding="utf-8") == "Hello wrld, welcome."


def test_patch_in_place_with_failures(tmp_path, capsys):
    """Test in-place patching and the failure exit code."""
    document = tmp_path / "note.md"
    document.write_text("One two three.", encoding="utf-8")
    response = tmp_path / "response.txt"
    response.write_text(
        json.dumps({"changes": [
            {"original": "two", "new": "2"},
            {"original": "a sentence that is not there", "new": "x"},
        ]}),
        encoding="utf-8"
    )

    exit_code = main(["patch", str(document), str(response), "--in-place"])

    assert exit_code == 1
    assert document.read_text(encoding="utf-8") == "One 2 three."
    assert "Unmatched: 'a sentence that is not there'" in capsys.readouterr().err


def test_synthesize_merges_into_canvas(tmp_path, capsys, canvas_payload):
    """Test synthesizing a response into an existing canvas file."""
    response = tmp_path / "response.txt"
    response.write_text(f"```json\n{json.dumps(canvas_payload)}\n```", encoding="utf-8")
    canvas = tmp_path / "board.canvas"
    canvas.write_text(json.dumps({
        "nodes": [{"id": "ghost", "type": "text", "x": 0, "y": 0, "width": 100, "height": 50, "text": "..."}],
        "edges": [],
    }), encoding="utf-8")

    exit_code = main([
        "synthesize", str(response), "--x", "100", "--y", "100",
        "--canvas", str(canvas), "--replace-node", "ghost",
    ])
    output = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert len(output["nodes"]) == 3
    assert "ghost" not in {n["id"] for n in output["nodes"]}
    assert all(isinstance(n["x"], int) for n in output["nodes"])
    assert output["edges"][1]["fromSide"] == "right"
    assert output["edges"][1]["toSide"] == "left"


def test_synthesize_without_canvas_prints_graph(tmp_path, capsys, canvas_payload):
    """Test that the graph alone is printed when no canvas is given."""
    response = tmp_path / "response.txt"
    response.write_text(json.dumps(canvas_payload), encoding="utf-8")

    assert main(["synthesize", str(response)]) == 0

    output = json.loads(capsys.readouterr().out)
    assert [n["text"] for n in output["nodes"]] == ["Main idea", "Supporting point", "Example"]


def test_unparseable_response_exits_with_error(tmp_path, capsys):
    """Test that reconciliation errors map to exit code 2."""
    response = tmp_path / "response.txt"
    response.write_text("No diagram today.", encoding="utf-8")

    assert main(["synthesize", str(response)]) == 2
    assert "Error:" in capsys.readouterr().err


def test_malformed_canvas_exits_with_error(tmp_path, capsys, canvas_payload):
    """Test that an unreadable canvas file is reported instead of crashing."""
    response = tmp_path / "response.txt"
    response.write_text(json.dumps(canvas_payload), encoding="utf-8")
    canvas = tmp_path / "board.canvas"
    canvas.write_text('{"nodes": [', encoding="utf-8")

    assert main(["synthesize", str(response), "--canvas", str(canvas)]) == 2
    assert "Invalid canvas file" in capsys.readouterr().err


def test_non_object_canvas_exits_with_error(tmp_path, capsys, canvas_payload):
    """Test that a canvas file holding a list is rejected."""
    response = tmp_path / "response.txt"
    response.write_text(json.dumps(canvas_payload), encoding="utf-8")
    canvas = tmp_path / "board.canvas"
    canvas.write_text("[]", encoding="utf-8")

    assert main(["synthesize", str(response), "--canvas", str(canvas)]) == 2
    assert "not an object" in capsys.readouterr().err


def test_oversized_number_in_response_exits_with_error(tmp_path, capsys):
    """Test that numbers the decoder cannot handle map to exit code 2."""
    response = tmp_path / "response.txt"
    response.write_text(
        '{"nodes": [{"id": "a", "x": ' + "9" * 5000 + ', "y": 0, "width": 10, "height": 10, "text": "t"}]}',
        encoding="utf-8"
    )

    assert main(["synthesize", str(response)]) == 2
    assert "Error:" in capsys.readouterr().err
