import pytest
from hypothesis import given, strategies as st

from src.bom_merge import (
    BomLayout,
    DiagnosticKind,
    Part,
    PartType,
    aggregate_parts,
    detect_layout,
    is_noise_row,
    parse_generic_bom,
    parse_parts_list,
    parse_rows,
    parse_shopping_list,
)

# Standard Unit Tests


def test_shopping_list_layout(config, diagnostics):
    """Value first, type hint in the middle, quantity last."""
    rows = [
        ("SHOPPING LIST",),
        ("10k", "Resistor", "3"),
        ("100n", "Film capacitor", "2"),
        ("LED", "5mm red LED", "1"),
        ("TL072", "Dual op amp", "1"),
        ("Red", "5mm diffused LED", "1"),
        ("Mystery", "Gizmo", "1"),
        ("2N5088", "NPN", "transistor", "TO-92", "x", "1"),
    ]
    parts, stats = parse_rows(rows, source_name="Fuzz.pdf", config=config)

    assert stats["layout"] == "Shopping List"
    assert stats["rows_read"] == 7
    assert stats["parts_found"] == 8
    assert parts.count(Part(PartType.RESISTOR, "10K")) == 3
    assert parts.count(Part(PartType.FILM, "100n")) == 2
    assert Part(PartType.IC, "TL072") in parts
    # LED rows keep their whole description
    assert Part(PartType.LED, "Red 5mm diffused LED") in parts
    # Wide semiconductor rows keep the part number and the package
    assert Part(PartType.TRANSISTOR, "2N5088 NPN transistor TO-92 x") in parts

    assert stats["residuals"] == ["Mystery | Gizmo | 1"]
    assert [d["kind"] for d in diagnostics] == [DiagnosticKind.CLASSIFICATION_MISS]
    assert diagnostics[0]["source"] == "Fuzz.pdf"


def test_shopping_list_skips_indicator_led():
    """A first cell of exactly 'LED' is the on-board indicator, not a part."""
    assert parse_shopping_list([("LED", "5mm red LED", "1")]) == []


@pytest.mark.parametrize("quantity", ["two", "", "0", "-1"])
def test_shopping_list_bad_quantity(quantity, config, diagnostics):
    assert parse_shopping_list([("10k", "Resistor", quantity)], config) == []
    assert len(diagnostics) == 1
    assert diagnostics[0]["kind"] is DiagnosticKind.CLASSIFICATION_MISS


def test_parts_list_layout(config, diagnostics):
    rows = [
        ("LOCATION", "VALUE", "TYPE", "NOTES"),
        ("R1", "4k7", "Metal film resistor", ""),
        ("C1", "100n", "Film capacitor", "Box"),
        ("SW1", "Toggle", "SPDT", "(ON-OFF-ON)"),
        ("Q1", "2n5088", "NPN transistor", ""),
        ("X9", "??", "Widget", ""),
        ("Copyright 2023 PedalPCB", "", "", ""),
    ]
    parts, stats = parse_rows(rows, config=config)

    assert stats["layout"] == "Parts List"
    assert parts == [
        Part(PartType.RESISTOR, "4.7K"),
        Part(PartType.FILM, "100n"),
        Part(PartType.SWITCH, "SPDT (ON-OFF-ON)"),
        Part(PartType.TRANSISTOR, "2N5088"),
    ]
    assert stats["residuals"] == ["X9 | ?? | Widget | "]
    assert len(diagnostics) == 1


def test_parts_list_repeated_header_and_page_numbers_are_noise(config, diagnostics):
    rows = [
        ("LOCATION", "VALUE", "TYPE", "NOTES"),
        ("12", ""),
        ("R2", "1M", "Resistor", ""),
    ]
    assert parse_parts_list(rows, config) == [Part(PartType.RESISTOR, "1M")]
    assert diagnostics == []


def test_parts_list_switch_without_type_keyword():
    """Pole designations win even when nothing else names a switch."""
    parts = parse_parts_list([("S2", "Bypass", "DPDT", "(ON-ON)", "")])
    assert parts == [Part(PartType.SWITCH, "DPDT (ON-ON)")]


def test_parts_list_switch_pole_and_throw_in_one_cell():
    # The cell is both the pole and the qualifier; it is used once
    parts = parse_parts_list([("SW1", "Toggle", "SPDT (ON-ON)", "")])
    assert parts == [Part(PartType.SWITCH, "SPDT (ON-ON)")]


@pytest.mark.parametrize(
    "row",
    [
        (),
        ("LOCATION", "VALUE", "TYPE", "NOTES"),
        ("12",),
        ("3", "", "4"),
        ("Copyright 2024 PedalPCB",),
        ("© 2024",),
        ("www.pedalpcb.com",),
        ("RESISTORS",),
        ("Capacitors:",),
        ("Transistors",),
        ("INTEGRATED CIRCUITS",),
        ("Continued from previous page",),
        ("Page 3",),
        ("R1", "10k", "PAGE 2"),
        ("Next page...",),
        ("NEXT PAGE…",),
        ("•",),
        ("  • ",),
        ("See wiring diagram",),
        ("Type notes",),
    ],
)
def test_noise_rows(row):
    assert is_noise_row(row)


@pytest.mark.parametrize(
    "row",
    [
        ("Film Capacitors",),
        ("Resistors for the tone stack",),
        ("10k", "Resistor", "3"),
        ("R1", "10k"),
        ("Next page",),
        ("• Red LED",),
    ],
)
def test_component_rows_are_not_noise(row):
    """Headings only count as noise when they stand alone in the cell."""
    assert not is_noise_row(row)


def test_generic_layout_end_to_end():
    parts, stats = parse_rows([["R1", "4k7"], ["C2", "100nF"]])

    assert stats["layout"] == "Generic"
    assert aggregate_parts(parts) == [
        {"type": PartType.FILM, "value": "100n", "quantity": 1},
        {"type": PartType.RESISTOR, "value": "4.7K", "quantity": 1},
    ]


def test_generic_wide_rows_are_walked_in_pairs():
    rows = [("R1", "10k", "R2", "4k7", "C1", "22p")]
    assert parse_generic_bom(rows) == [
        Part(PartType.RESISTOR, "10K"),
        Part(PartType.RESISTOR, "4.7K"),
        Part(PartType.CERAMIC, "22p"),
    ]


def test_generic_skips_incomplete_pairs():
    # A dangling location without a value is ignored
    assert parse_generic_bom([("R1", "10k", "R2")]) == [Part(PartType.RESISTOR, "10K")]

    # Missing cells come through as empty strings
    parts, _ = parse_rows([["R1", None, "R2", "10k"]])
    assert parts == [Part(PartType.RESISTOR, "10K")]


def test_generic_skips_garbled_and_header_rows(config, diagnostics):
    rows = [
        ("R1", "10"),  # every cell is tiny: OCR debris
        ("Location", "Value"),  # words only: a column header
        ("PAGE 3",),
    ]
    assert parse_generic_bom(rows, config) == []
    assert diagnostics == []


def test_generic_unknown_pair_is_a_miss(config, diagnostics):
    parts, stats = parse_rows([("X1", "foo")], config=config)

    assert parts == []
    assert stats["residuals"] == ["X1 | foo"]
    assert diagnostics[0]["reason"] == "Could not classify part X1=foo"


def test_layout_detection():
    assert detect_layout([("R1", "10k")]) == (BomLayout.GENERIC, 0)
    assert detect_layout([("Intro",), ("LOCATION", "VALUE")]) == (
        BomLayout.PARTS_LIST,
        2,
    )
    assert detect_layout([("shopping list",)]) == (BomLayout.SHOPPING_LIST, 1)


def test_shopping_list_marker_outranks_parts_list():
    rows = [
        ("LOCATION", "VALUE", "TYPE", "NOTES"),
        ("SHOPPING LIST",),
        ("10k", "Resistor", "1"),
    ]
    assert detect_layout(rows) == (BomLayout.SHOPPING_LIST, 2)

    parts, stats = parse_rows(rows)
    assert stats["layout"] == "Shopping List"
    assert parts == [Part(PartType.RESISTOR, "10K")]


def test_empty_document():
    parts, stats = parse_rows([])
    assert parts == []
    assert stats["parts_found"] == 0
    assert stats["rows_read"] == 0


@pytest.mark.parametrize(
    "rows",
    [None, "R1 10k", b"R1 10k", 42, [("R1", "10k"), "R2"]],
)
def test_malformed_input_raises(rows):
    with pytest.raises(ValueError):
        parse_rows(rows)


# 2. Stress Testing

cells = st.text(max_size=12)
documents = st.lists(st.lists(cells, max_size=6), max_size=10)


@given(documents)
def test_parser_never_crashes(rows):
    """
    STRESS TEST: Feed the pipeline random cell text and make sure it never
    raises, and that the stats agree with the parts it returns.
    """
    parts, stats = parse_rows(rows)

    assert stats["parts_found"] == len(parts)
    assert all(isinstance(p.type, PartType) for p in parts)
