import json
from pathlib import Path

import main


def _build(tmp_path: Path) -> Path:
    output = tmp_path / "out" / "ebr2_systems.json"
    assert main.main(["build", "--output", str(output)]) == 0
    return output


def test_build_check_and_finalize(tmp_path: Path) -> None:
    output = _build(tmp_path)

    assert output.exists()
    assert main.main(["check", str(output)]) == 0
    assert main.main(["check", str(output), "--strict"]) == 0
    assert main.main(["stats", str(output)]) == 0
    assert main.main(["finalize", str(output)]) == 0


def test_check_fails_on_dangling_reference(tmp_path: Path) -> None:
    output = _build(tmp_path)
    data = json.loads(output.read_text(encoding="utf-8"))
    data["dependencies"]["DEP-PSS-EPS"]["supportingSystem"] = "NO-SUCH-SYSTEM"
    output.write_text(json.dumps(data), encoding="utf-8")

    assert main.main(["check", str(output)]) == 1
    assert main.main(["finalize", str(output), "--sign-off", "Reviewed"]) == 1


def test_unresolved_loop_needs_sign_off(tmp_path: Path) -> None:
    output = _build(tmp_path)
    data = json.loads(output.read_text(encoding="utf-8"))
    data["loopResolutions"] = {}
    data["processDocumentation"].pop("logicLoopResolutionsDocumentation")
    output.write_text(json.dumps(data), encoding="utf-8")

    assert main.main(["check", str(output)]) == 0
    assert main.main(["check", str(output), "--strict"]) == 1
    assert main.main(["finalize", str(output)]) == 1
    assert main.main(["finalize", str(output), "--sign-off", "Loop accepted"]) == 0


def test_missing_file_is_reported(tmp_path: Path) -> None:
    assert main.main(["stats", str(tmp_path / "absent.json")]) == 1


def test_malformed_field_value_is_reported_not_raised(tmp_path: Path) -> None:
    output = _build(tmp_path)
    data = json.loads(output.read_text(encoding="utf-8"))
    data["faultTrees"]["FT-RSS"]["nodes"]["RSS-RODS"]["gate"] = "bogus"
    output.write_text(json.dumps(data), encoding="utf-8")

    assert main.main(["check", str(output)]) == 1
    assert main.main(["stats", str(output)]) == 1
