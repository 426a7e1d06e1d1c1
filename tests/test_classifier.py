import pytest

from src.bom_merge import (
    Part,
    PartType,
    classify_generic_pair,
    classify_location,
    normalize_type,
)


@pytest.mark.parametrize(
    "hint, expected",
    [
        ("Metal film resistor, 1/4W", PartType.RESISTOR),
        ("¼W", PartType.RESISTOR),
        ("Film capacitor", PartType.FILM),
        ("Electrolytic capacitor", PartType.ELECTROLYTIC),
        ("Ceramic capacitor (MLCC)", PartType.CERAMIC),
        ("Capacitor", PartType.CAPACITOR),
        ("Inductor", PartType.INDUCTOR),
        ("5mm diffused", PartType.LED),
        ("Zener diode", PartType.DIODE),
        ("Toggle", PartType.SWITCH),
        ("SPDT", PartType.SWITCH),
        ("3PDT (ON-ON)", PartType.SWITCH),
        ("Trimmer", PartType.TRIMPOT),
        ("VR1", PartType.TRIMPOT),
        ("16mm pot", PartType.POTENTIOMETER),
        ("Mono jack", PartType.JACK),
        ("DC connector", PartType.CONNECTOR),
        ("NPN transistor", PartType.TRANSISTOR),
        ("JFET", PartType.TRANSISTOR),
        ("Dual op amp", PartType.IC),
    ],
)
def test_normalize_type(hint, expected):
    assert normalize_type(hint) is expected


def test_normalize_type_priority():
    """First keyword in priority order wins."""
    # 'resistor' outranks 'film'
    assert normalize_type("Metal film resistor") is PartType.RESISTOR
    # 'film' outranks the generic 'capacitor'
    assert normalize_type("Box film capacitor") is PartType.FILM
    # 'led' outranks 'diode'
    assert normalize_type("LED diode") is PartType.LED


@pytest.mark.parametrize("hint", ["", None, "Nothing here", "   "])
def test_normalize_type_not_found(hint):
    assert normalize_type(hint) is None


@pytest.mark.parametrize(
    "location, value, expected",
    [
        ("R12", "10k", PartType.RESISTOR),
        ("r3", "1M", PartType.RESISTOR),
        ("C3", "22pF", PartType.CERAMIC),
        ("C3", "disk 47", PartType.CERAMIC),
        ("C4", "100n", PartType.FILM),
        ("C4", "mylar .1", PartType.FILM),
        ("C1", "10uF", PartType.ELECTROLYTIC),
        ("C1", "1µF", PartType.ELECTROLYTIC),
        ("C9", "Box", PartType.CAPACITOR),
        ("L1", "100mH", PartType.INDUCTOR),
        ("D2", "1N4148", PartType.DIODE),
        ("Q1", "2N3904", PartType.TRANSISTOR),
        ("IC1", "TL072", PartType.IC),
        ("LED", "Red", PartType.LED),
        ("LED2", "Red", PartType.LED),
        ("SW1", "On/Off", PartType.SWITCH),
        ("SWITCH", "On/Off", PartType.SWITCH),
        ("VR1", "100k", PartType.TRIMPOT),
        ("TRIM2", "10k", PartType.TRIMPOT),
        ("TPOT", "10k", PartType.TRIMPOT),
        ("POT1", "100k", PartType.POTENTIOMETER),
        ("16MM", "100k", PartType.POTENTIOMETER),
        ("J1", "Input", PartType.JACK),
        ("REG", "78L05", PartType.REGULATOR),
    ],
)
def test_classify_location(location, value, expected):
    assert classify_location(location, value) is expected


@pytest.mark.parametrize("location", ["X1", "R1234", "GAIN", ""])
def test_classify_location_unknown(location):
    assert classify_location(location, "10k") is None


def test_generic_pair_normalizes_value():
    assert classify_generic_pair("R1", "4k7", ("R1", "4k7")) == Part(
        PartType.RESISTOR, "4.7K"
    )
    assert classify_generic_pair("Q1", "bc549", ("Q1", "bc549")) == Part(
        PartType.TRANSISTOR, "BC549C"
    )


def test_generic_pair_led_value_is_verbatim():
    assert classify_generic_pair("LED1", "Red 3mm", ()) == Part(PartType.LED, "Red 3mm")


def test_generic_pair_switch_overrides():
    # Pole count in the value
    assert classify_generic_pair("SW1", "3PDT", ()) == Part(PartType.SWITCH, "3PDT")
    assert classify_generic_pair("X4", "SPDT (ON-ON)", ()) == Part(
        PartType.SWITCH, "SPDT (ON-ON)"
    )
    # Pole count in the location
    assert classify_generic_pair("3PDT", "Footswitch", ()) == Part(
        PartType.SWITCH, "Footswitch"
    )
    # DIP switch banks
    assert classify_generic_pair("DIP1", "4 position", ()) == Part(
        PartType.SWITCH, "4 position DIP"
    )


def test_generic_pair_taper_code_is_potentiometer():
    """Values like B100K are pots even when the location says otherwise."""
    assert classify_generic_pair("VOL", "B100K", ()) == Part(
        PartType.POTENTIOMETER, "B100K"
    )
    assert classify_generic_pair("R5", "A500K", ()) == Part(
        PartType.POTENTIOMETER, "A500K"
    )


def test_generic_pair_unknown():
    assert classify_generic_pair("X1", "foo", ("X1", "foo")) is None
