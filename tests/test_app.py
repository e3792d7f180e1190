import importlib
import io

import pytest

pytest.importorskip("flask")

PUZZLE = """0:
#.
##

1:
##

2x2: 1 0
3x3: 0 4
3x1: 0 2
"""


@pytest.fixture
def app_module(tmp_path, monkeypatch):
    import progress

    monkeypatch.setattr(progress, "STATE_FILE", tmp_path / "state.json")
    monkeypatch.setattr(progress, "STATE_FILE_TMP", tmp_path / "state.json.tmp")
    module = importlib.import_module("app")
    monkeypatch.setattr(module.CFG, "WRITE_WITNESS", False, raising=False)
    return module


@pytest.fixture
def client(app_module):
    app_module.app.config["TESTING"] = True
    return app_module.app.test_client()


def test_solve_form_field_tallies_regions(client):
    resp = client.post("/solve", data={"puzzle": PUZZLE})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert (body["fit"], body["total"]) == (2, 3)
    assert [r["ok"] for r in body["regions"]] == [True, True, False]
    assert body["regions"][0]["strategy"] == "grid-bound"
    assert body["regions"][1]["strategy"] == "backtracking"
    assert body["regions"][1]["witness"].count("#") == 8
    assert body["regions"][2]["strategy"] == "area-bound"


def test_solve_accepts_uploaded_file(client):
    data = {"file": (io.BytesIO(PUZZLE.encode("utf-8")), "puzzle.txt")}
    resp = client.post("/solve", data=data, content_type="multipart/form-data")
    assert resp.status_code == 200
    assert resp.get_json()["fit"] == 2


def test_solve_rejects_malformed_puzzle(client):
    resp = client.post("/solve", data={"puzzle": "0:\n##\n#\n\n2x2: 1\n"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["ok"] is False
    assert body["reason"].startswith("Bad puzzle")


def test_progress_endpoint_is_not_cached(client):
    client.post("/solve", data={"puzzle": PUZZLE})
    resp = client.get("/progress")
    assert resp.status_code == 200
    assert resp.headers["Cache-Control"].startswith("no-store")
    snap = resp.get_json()
    assert snap["done"] is True
    assert snap["regions_fit"] == 2


def test_summarise_region_serialises_witness(app_module):
    from models import TreeRegion
    from shapes import build_present
    from solver.orchestrator import solve_region

    region = TreeRegion(3, 2, (2,))
    result = solve_region(region, [build_present(["#.", "##"])])
    summary = app_module._summarise_region(0, region, result)
    assert summary["region"] == "3x2"
    assert summary["witness"] == "###\n###"


def test_main_prints_fitting_region_count(app_module, tmp_path, capsys):
    path = tmp_path / "puzzle.txt"
    path.write_text(PUZZLE, encoding="utf-8")
    assert app_module.main([str(path)]) == 0
    assert capsys.readouterr().out.strip() == "2"


def test_solve_rejects_upload_that_is_not_utf8(client):
    data = {"file": (io.BytesIO(b"0:\n\xff#\n\n2x2: 1\n"), "puzzle.txt")}
    resp = client.post("/solve", data=data, content_type="multipart/form-data")
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["ok"] is False
    assert body["reason"].startswith("Bad puzzle")

    snap = client.get("/progress").get_json()
    assert snap["done"] is True
    assert snap["status"] == "Error"
