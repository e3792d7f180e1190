import pytest

from models import InvalidShape, Present
from shapes import (
    build_present,
    compute_shape_variations,
    covered_area,
    flip_vertically,
    rotate_clockwise,
    serialise_shape,
    validate_shape,
)

L_TROMINO = ["#.", "##"]
F_PENTOMINO = [".##", "##.", ".#."]


def test_rotate_clockwise_turns_rows_into_columns():
    shape = validate_shape(["##.", "..#"])
    assert serialise_shape(rotate_clockwise(shape)) == ".#\n.#\n#."


def test_flip_vertically_reverses_row_order():
    shape = validate_shape(["#.", "##"])
    assert flip_vertically(shape) == validate_shape(["##", "#."])


def test_l_tromino_variations_follow_flip_then_rotate_order():
    variations = compute_shape_variations(validate_shape(L_TROMINO))
    assert [serialise_shape(v) for v in variations] == [
        "#.\n##",
        "##\n#.",
        "##\n.#",
        ".#\n##",
    ]


@pytest.mark.parametrize(
    "rows, expected",
    [
        (["#"], 1),
        (["##", "##"], 1),
        (["##"], 2),
        (["###", ".#."], 4),
        ([".##", "##."], 4),
        (F_PENTOMINO, 8),
        (["###", "#..", "###"], 4),
    ],
)
def test_variation_counts_reflect_symmetry(rows, expected):
    shape = validate_shape(rows)
    variations = compute_shape_variations(shape)
    assert len(variations) == expected
    assert 1 <= len(variations) <= 8
    assert len(set(variations)) == len(variations)
    assert all(covered_area(v) == covered_area(shape) for v in variations)


def test_first_variation_is_the_original_shape():
    shape = validate_shape(F_PENTOMINO)
    assert compute_shape_variations(shape)[0] == shape


def test_build_present_records_dimensions_and_area():
    present = build_present(["###", "##.", "##."], name="0")
    assert isinstance(present, Present)
    assert (present.width, present.height, present.covered_area) == (3, 3, 7)
    assert present.name == "0"
    assert len(present.shape_variations) == 8


def test_build_present_accepts_boolean_rows():
    present = build_present([[True, False], [True, True]])
    assert present.covered_area == 3
    assert len(present.shape_variations) == 4


def test_min_extents_cover_rotated_variants():
    present = build_present(["###"])
    assert (present.width, present.height) == (3, 1)
    assert (present.min_width, present.min_height) == (1, 1)


@pytest.mark.parametrize(
    "rows",
    [
        [],
        [""],
        ["##", "#"],
        ["..", ".."],
        ["#x"],
    ],
)
def test_malformed_shapes_are_rejected(rows):
    with pytest.raises(InvalidShape):
        validate_shape(rows)


def test_present_rejects_variations_with_different_areas():
    with pytest.raises(InvalidShape):
        Present(
            width=2,
            height=1,
            covered_area=2,
            shape_variations=(validate_shape(["##"]), validate_shape(["#."])),
        )


def test_invalid_shape_is_a_value_error():
    assert issubclass(InvalidShape, ValueError)


def test_present_rejects_box_that_disagrees_with_first_variation():
    with pytest.raises(InvalidShape):
        Present(
            width=1,
            height=2,
            covered_area=2,
            shape_variations=(validate_shape(["##"]), validate_shape(["#", "#"])),
        )
