import json
from pathlib import Path

from reactor_catalog import DEFAULT_REACTORS, InitCond, load_reactor_catalog

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def _minimal_entry(**overrides):
    entry = {
        "fuel_input": {"commodity": "uox", "recipe": "uox_fresh"},
        "fuel_output": {"commodity": "spent_uox", "recipe": "uox_spent"},
        "process_time": 5,
        "n_batches": 3,
        "batch_size": 10,
    }
    entry.update(overrides)
    return entry


def test_load_reactor_catalog_defaults_when_missing(tmp_path):
    catalog = load_reactor_catalog(tmp_path / "missing.json")

    assert set(catalog) == set(DEFAULT_REACTORS)


def test_repository_reactor_catalog_loads_every_entry():
    catalog = load_reactor_catalog(DATA_DIR / "reactors.json")

    assert set(catalog) == {"lwr", "cold_lwr", "mox_burner"}
    assert catalog["mox_burner"].initial_condition == InitCond(n_reserves=2, n_core=2, n_storage=1)
    assert catalog["lwr"].production.commodity == "power"


def test_optional_values_use_defaults(tmp_path):
    path = tmp_path / "reactors.json"
    path.write_text(json.dumps({"minimal": _minimal_entry()}))

    reactor = load_reactor_catalog(path)["minimal"]

    assert reactor.display_name == "minimal"
    assert reactor.batch_size == 10.0
    assert reactor.refuel_time == 0
    assert reactor.order_lookahead == 0
    assert reactor.n_reload == 1
    assert reactor.n_reserves == 1
    assert reactor.initial_condition == InitCond(0, 0, 0)
    assert reactor.production is None


def test_reserve_target_is_independent_of_reload_count(tmp_path):
    path = tmp_path / "reactors.json"
    path.write_text(json.dumps({"reloader": _minimal_entry(n_reload=3)}))

    reactor = load_reactor_catalog(path)["reloader"]

    assert reactor.n_reload == 3
    assert reactor.n_reserves == 1


def test_invalid_entries_are_skipped(tmp_path):
    path = tmp_path / "reactors.json"
    path.write_text(
        json.dumps(
            {
                "good": _minimal_entry(),
                "zero_batch": _minimal_entry(batch_size=0),
                "fractional_batches": _minimal_entry(n_batches=2.5),
                "negative_refuel": _minimal_entry(refuel_time=-1),
                "bool_time": _minimal_entry(process_time=True),
                "no_output": _minimal_entry(fuel_output=None),
                "bad_ics": _minimal_entry(initial_condition={"n_core": -1}),
                "bad_production": _minimal_entry(commodity_production={"commodity": "power"}),
            }
        )
    )

    catalog = load_reactor_catalog(path)

    assert list(catalog) == ["good"]


def test_falls_back_to_defaults_when_nothing_is_valid(tmp_path):
    path = tmp_path / "reactors.json"
    path.write_text(json.dumps({"broken": {"process_time": 3}}))

    catalog = load_reactor_catalog(path)

    assert set(catalog) == set(DEFAULT_REACTORS)


def test_integral_floats_are_accepted_for_counts(tmp_path):
    path = tmp_path / "reactors.json"
    path.write_text(json.dumps({"floaty": _minimal_entry(n_batches=4.0, initial_condition={"n_core": 2.0})}))

    reactor = load_reactor_catalog(path)["floaty"]

    assert reactor.n_batches == 4
    assert reactor.initial_condition.n_core == 2
