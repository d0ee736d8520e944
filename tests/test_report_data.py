from __future__ import annotations

from dataclasses import replace

from builders import make_job, make_snapshot, marker, photo, png_bytes, standard_pair, wheels

from vehiclepod.comparison import compare
from vehiclepod.config import default_config
from vehiclepod.domain_models import (
    ChargeLevel,
    DamageType,
    DamageView,
    Stage,
    TyreCondition,
    VehicleConditionReading,
)
from vehiclepod.report.report_data import (
    DAMAGE_ROWS_PER_BLOCK,
    PHOTOS_PER_BLOCK,
    SUMMARY_MAX_LINES,
    format_miles,
    fuel_text,
    key_count_text,
    map_report,
    signed,
    signed_fuel,
)


def _map(collection, delivery, job=None):
    return map_report(
        collection, delivery, job or make_job(), compare(collection, delivery), default_config()
    )


def test_formatting_helpers() -> None:
    assert format_miles(10150) == "10,150"
    assert signed(150) == "+150"
    assert signed(-20) == "-20"
    assert signed(0) == "0"
    assert fuel_text(6) == "6/8"
    assert signed_fuel(-2) == "-2/8"
    assert signed_fuel(3) == "+3/8"
    assert key_count_text(3) == "3"
    assert key_count_text(4) == "4+"


def test_fuel_radio_selects_eighths() -> None:
    data = _map(*standard_pair())
    fuel_rows = data.readings.rows[:2]
    assert [len(row.options) for row in fuel_rows] == [9, 9]
    assert fuel_rows[0].selected == 6
    assert fuel_rows[1].selected == 4
    assert fuel_rows[0].options[0] == "Empty"
    assert fuel_rows[0].options[-1] == "Full"
    assert data.readings.note == "Fuel change during transport: -2/8"


def test_charge_rows_only_when_recorded() -> None:
    collection, delivery = standard_pair()
    labels = [row.label for row in _map(collection, delivery).readings.rows]
    assert "Charge at collection" not in labels

    ev_collection = replace(
        make_snapshot(), condition=VehicleConditionReading(6, 100, ChargeLevel.HALF)
    )
    data = _map(ev_collection, make_snapshot(Stage.DELIVERY))
    charge = {row.label: row for row in data.readings.rows}
    assert charge["Charge at collection"].selected == list(ChargeLevel).index(ChargeLevel.HALF)
    assert charge["Charge at delivery"].selected is None


def test_weather_radio_rows() -> None:
    data = _map(*standard_pair())
    selected = {
        row.label: row.options[row.selected]
        for row in data.readings.rows
        if row.label.startswith("Weather") and row.selected is not None
    }
    assert selected == {"Weather at collection": "Dry", "Weather at delivery": "Wet"}


def test_checklist_rows_reflect_both_snapshots() -> None:
    collection = make_snapshot()
    delivery = make_snapshot(
        Stage.DELIVERY, wheel_checks=wheels(frontLeft=(True, TyreCondition.EXTREMELY_WORN))
    )
    rows = {row.label: row for row in _map(collection, delivery).checklist.rows}
    assert rows["V5 registration document provided"].at_collection is True
    assert rows["Front left wheel free of scuffs"].at_collection is True
    assert rows["Front left wheel free of scuffs"].at_delivery is False
    assert rows["Front left tyre condition OK"].at_delivery is False
    assert rows["Rear right tyre condition OK"].at_delivery is True


def test_equipment_rows_only_for_recorded_items() -> None:
    rows = {row.label: row for row in _map(*standard_pair()).checklist.rows}
    assert rows["Spare wheel"].at_collection is True
    assert rows["Handbook"].at_delivery is False
    assert "Jack" not in rows


def test_damage_groups_split_into_fixed_blocks() -> None:
    count = DAMAGE_ROWS_PER_BLOCK * 2 + 3
    collection = make_snapshot(markers=tuple(marker(f"c{i}") for i in range(count)))
    data = _map(collection, make_snapshot(Stage.DELIVERY))
    carried = [b for b in data.damage_blocks if b.tone == "warn"]
    assert [len(b.rows) for b in carried] == [DAMAGE_ROWS_PER_BLOCK, DAMAGE_ROWS_PER_BLOCK, 3]
    assert carried[0].title == "CARRIED-OVER DAMAGE (RECORDED AT COLLECTION)"
    assert carried[1].title.endswith("(continued)")
    assert [r.number for r in carried[2].rows] == [str(i) for i in range(21, 24)]
    new_block = data.damage_blocks[-1]
    assert new_block.tone == "success"
    assert new_block.banner == "NO NEW DAMAGE"


def test_new_damage_block_has_trailing_note_on_last_chunk_only() -> None:
    delivery = make_snapshot(
        Stage.DELIVERY,
        markers=tuple(marker(f"d{i}", stage=Stage.DELIVERY) for i in range(12)),
    )
    data = _map(make_snapshot(), delivery)
    new_blocks = [b for b in data.damage_blocks if b.tone == "error"]
    assert len(new_blocks) == 2
    assert new_blocks[0].trailing_note == ""
    assert "discovered during delivery inspection" in new_blocks[1].trailing_note


def test_damage_row_location_uses_view_and_rounded_percentages() -> None:
    collection = make_snapshot(markers=(marker("c1", x=12.4, y=87.6),))
    row = _map(collection, make_snapshot(Stage.DELIVERY)).damage_blocks[0].rows[0]
    assert row.location == "Front (12%, 88%)"
    assert row.damage_type == "Scratch"
    assert row.photos == "1"


def test_signature_parties() -> None:
    collection, delivery = standard_pair()
    parties = _map(collection, delivery).signatures.parties
    assert parties[0].signed is True
    assert parties[0].name_label == "Name: Alex Morgan"
    assert parties[1].heading == "OVM Ltd representative"
    assert parties[1].signed is True
    unsigned = _map(collection, delivery, make_job(driver_signature=None)).signatures.parties
    assert unsigned[1].signed is False


def test_warnings_collected_for_anomalies() -> None:
    collection = make_snapshot(mileage=500, key_count=3)
    delivery = make_snapshot(Stage.DELIVERY, mileage=400, key_count=2)
    warnings = _map(collection, delivery).warnings
    assert "mileage decreased by 100" in warnings
    assert "key count dropped by 1" in warnings
    assert "delivery not confirmed by customer" in warnings
    assert not any(w.startswith("fuel increased") for w in warnings)


def test_fuel_increase_is_a_warning() -> None:
    collection = make_snapshot(fuel=2)
    delivery = make_snapshot(Stage.DELIVERY, fuel=4, confirmed=True)
    warnings = _map(collection, delivery).warnings
    assert "fuel increased by 2/8" in warnings


def test_header_contact_includes_website() -> None:
    contact = _map(*standard_pair()).header.company_contact
    assert "www.ovmtransport.com" in contact
    assert contact.index("@") < contact.index("www.ovmtransport.com")


def test_summary_values_are_clamped() -> None:
    job = make_job(customer_name="Acme Vehicle Leasing " * 100)
    summary = _map(*standard_pair(), job=job).summary
    rows = [*summary.left_rows, *summary.right_rows]
    assert rows
    assert all(row.max_lines == SUMMARY_MAX_LINES for row in rows)


def test_photo_blocks_follow_damage_numbering() -> None:
    collection, delivery = standard_pair()
    blocks = _map(collection, delivery).photo_blocks
    assert len(blocks) == 1
    block = blocks[0]
    assert block.title == "PHOTO EVIDENCE"
    assert [cell.caption for cell in block.cells] == [
        "New damage 1: Dent, Rear",
        "Collection damage 1: Scratch, Front",
    ]
    assert all(cell.image is None for cell in block.cells)
    assert block.placeholder == "Photo on file"
    assert block.unreadable_text == "Photo could not be displayed"


def test_multiple_photos_are_numbered_and_gauges_follow_damage() -> None:
    image = png_bytes()
    roof_dent = marker(
        "d1", stage=Stage.DELIVERY, view=DamageView.ROOF, damage_type=DamageType.DENT, photos=2
    )
    delivery = replace(
        make_snapshot(Stage.DELIVERY, markers=(roof_dent,)),
        condition=VehicleConditionReading(
            fuel_level_eighths=6,
            mileage=10_000,
            odometer_photo_refs=(photo("odo", image),),
            fuel_gauge_photo_refs=(photo("fuel"),),
        ),
    )
    cells = [c for b in _map(make_snapshot(), delivery).photo_blocks for c in b.cells]
    assert [c.caption for c in cells] == [
        "New damage 1: Dent, Roof (1/2)",
        "New damage 1: Dent, Roof (2/2)",
        "Odometer at delivery",
        "Fuel gauge at delivery",
    ]
    assert cells[2].image == image
    assert cells[3].image is None


def test_photo_blocks_split_into_fixed_chunks() -> None:
    count = PHOTOS_PER_BLOCK * 2 + 1
    collection = make_snapshot(markers=tuple(marker(f"c{i}") for i in range(count)))
    blocks = _map(collection, make_snapshot(Stage.DELIVERY)).photo_blocks
    assert [len(b.cells) for b in blocks] == [PHOTOS_PER_BLOCK, PHOTOS_PER_BLOCK, 1]
    assert blocks[0].title == "PHOTO EVIDENCE"
    assert blocks[1].title == "PHOTO EVIDENCE (continued)"
    assert blocks[2].cells[0].caption == f"Collection damage {count}: Scratch, Front"


def test_no_photos_means_no_photo_blocks() -> None:
    collection = make_snapshot(markers=(marker("c1", photos=0),))
    assert _map(collection, make_snapshot(Stage.DELIVERY)).photo_blocks == ()
