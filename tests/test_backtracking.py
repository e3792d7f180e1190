from itertools import islice

import pytest

import solver.backtracking as backtracking
from shapes import build_present
from solver.backtracking import first_packing, pack_presents
from solver.grid import build_empty_grid, occupied_count
from render import serialise_grid

MONOMINO = build_present(["#"])
DOMINO = build_present(["##"])
L_TROMINO = build_present(["#.", "##"])
SQUARE = build_present(["##", "##"])


def test_nothing_to_place_yields_the_input_grid():
    grid = build_empty_grid(2, 2)
    assert list(pack_presents(grid, [DOMINO], (0,))) == [grid]


def test_two_l_trominoes_tile_a_two_by_three_region():
    witness = first_packing(build_empty_grid(2, 3), [L_TROMINO], (2,))
    assert witness is not None
    assert serialise_grid(witness) == "###\n###"


def test_first_witness_follows_placement_priority():
    witness = first_packing(build_empty_grid(3, 3), [MONOMINO, DOMINO], (1, 1))
    # domino lands right of the monomino before anything opens a new row
    assert serialise_grid(witness) == "###\n...\n..."


def test_domino_rotates_into_a_one_column_region():
    witness = first_packing(build_empty_grid(2, 1), [DOMINO], (1,))
    assert witness is not None
    assert serialise_grid(witness) == "#\n#"


def test_two_squares_do_not_fit_three_by_three():
    assert first_packing(build_empty_grid(3, 3), [SQUARE], (2,)) is None


def test_area_rejected_region_is_also_infeasible_by_search():
    # two dominoes need 4 cells; 1x3 offers 3
    assert first_packing(build_empty_grid(1, 3), [DOMINO], (2,)) is None


def test_grid_bound_accepted_region_has_a_witness():
    # 4x4 holds four 2x2 slots, so the bound accepts four L-trominoes
    witness = first_packing(build_empty_grid(4, 4), [L_TROMINO], (4,))
    assert witness is not None
    assert occupied_count(witness) == 12


def test_mixed_present_types_are_all_placed():
    witness = first_packing(build_empty_grid(3, 4), [L_TROMINO, DOMINO, MONOMINO], (2, 2, 2))
    assert witness is not None
    assert occupied_count(witness) == 12


def test_every_witness_is_fully_packed():
    witnesses = list(islice(pack_presents(build_empty_grid(2, 2), [MONOMINO], (2,)), 20))
    assert witnesses
    assert all(occupied_count(w) == 2 for w in witnesses)


def test_search_stops_at_first_witness(monkeypatch):
    calls = []
    real = backtracking.placements_for_present

    def counting(grid, present):
        calls.append(present)
        return real(grid, present)

    monkeypatch.setattr(backtracking, "placements_for_present", counting)

    witness = first_packing(build_empty_grid(5, 5), [MONOMINO], (3,))
    assert witness is not None
    # one enumeration per level, no sibling branches opened
    assert len(calls) == 3


def test_deep_searches_do_not_hit_the_recursion_limit():
    witness = first_packing(build_empty_grid(35, 35), [MONOMINO], (1100,))
    assert witness is not None
    assert occupied_count(witness) == 1100


def test_count_vector_longer_than_presents_is_rejected():
    with pytest.raises(ValueError):
        first_packing(build_empty_grid(2, 2), [MONOMINO], (1, 1))
