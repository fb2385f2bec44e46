import json
from unittest import mock

import pandas as pd
import pytest

from ohsansi.almacen import LocalStorage, MemoryStorage
from ohsansi.errores import ValidationError
from ohsansi.olimpistas import (
    COLS_OLIMPISTAS,
    LS_KEY,
    OlympianStore,
    SheetsOlympianStore,
    new_olympian,
)

ANA = {
    "OLI_NOMBRE": "Ana",
    "OLI_AP_PAT": "Rojas",
    "OLI_DEPTO": "La Paz",
    "AREA_NOM": "Química",
    "NIVEL_NOM": "Segundo",
}


def test_local_storage_persists(tmp_path):
    path = tmp_path / "storage.json"
    storage = LocalStorage(str(path))
    storage.set_item("a", 1)
    storage.set_item("b", "dos")
    storage.remove_item("a")

    reloaded = LocalStorage(str(path))
    assert reloaded.get_item("a") is None
    assert reloaded.get_item("b") == "dos"
    assert reloaded.keys() == ["b"]


def test_local_storage_ignores_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{no es json", encoding="utf-8")
    assert LocalStorage(str(path)).keys() == []


def test_add_and_delete_persist_across_reload(tmp_path):
    path = str(tmp_path / "storage.json")
    store = OlympianStore(LocalStorage(path))
    ana = store.add(ANA)
    luis = store.add(dict(ANA, OLI_NOMBRE="Luis"))

    assert store.delete(ana["id"]) is True

    reloaded = OlympianStore(LocalStorage(path))
    rows = reloaded.load()
    assert [r["id"] for r in rows] == [luis["id"]]


def test_delete_unknown_id():
    store = OlympianStore(MemoryStorage())
    store.add(ANA)
    assert store.delete("no-existe") is False
    assert len(store.load()) == 1


def test_add_requires_fields():
    store = OlympianStore(MemoryStorage())
    with pytest.raises(ValidationError) as exc:
        store.add(dict(ANA, OLI_NOMBRE="  ", AREA_NOM=None))
    assert set(exc.value.errors) == {"OLI_NOMBRE", "AREA_NOM"}
    assert store.load() == []


def test_corrupt_value_loads_empty():
    storage = MemoryStorage({LS_KEY: "[{roto"})
    assert OlympianStore(storage).load() == []
    storage.set_item(LS_KEY, json.dumps({"no": "lista"}))
    assert OlympianStore(storage).load() == []


def test_new_olympian_fills_all_headers():
    row = new_olympian({"OLI_NOMBRE": "Ana", "OLI_GRADO": 5})
    assert set(row) == set(COLS_OLIMPISTAS)
    assert row["OLI_GRADO"] == "5"
    assert row["TIPO_PART"] == "Individual"
    assert new_olympian({})["id"] != row["id"]


def test_as_dataframe_columns():
    store = OlympianStore(MemoryStorage())
    assert list(store.as_dataframe().columns) == COLS_OLIMPISTAS
    store.add(ANA)
    df = store.as_dataframe()
    assert list(df.columns) == COLS_OLIMPISTAS
    assert df.iloc[0]["OLI_NOMBRE"] == "Ana"


def test_sheets_store_roundtrip():
    worksheet = mock.Mock()
    existing = pd.DataFrame([dict(new_olympian(ANA), id="abc")])

    with mock.patch("ohsansi.olimpistas.get_as_dataframe", return_value=existing), \
            mock.patch("ohsansi.olimpistas.set_with_dataframe") as set_df:
        store = SheetsOlympianStore(worksheet)
        assert store.delete("abc") is True

    worksheet.clear.assert_called_once()
    written = set_df.call_args[0][1]
    assert list(written.columns) == COLS_OLIMPISTAS
    assert written.empty
