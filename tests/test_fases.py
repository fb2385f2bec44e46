"""Tests for the olympiad state and its phase history."""

import json
from datetime import datetime

import pytest

from ohsansi.almacen import MemoryStorage
from ohsansi.errores import FaseError
from ohsansi.fases import (
    CLASIFICACION,
    CONCLUIDA,
    FINAL,
    K_FASES,
    NO_INICIADA,
    FasesStore,
    format_fecha,
)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def fases(storage):
    return FasesStore(storage, clock=lambda: datetime(2025, 3, 14, 16, 20))


def test_starts_not_started(fases):
    assert fases.estado_id() == NO_INICIADA
    assert fases.estado() == "No Iniciada"
    assert fases.fase_actual() is None
    assert fases.historial() == []


def test_format_fecha():
    assert format_fecha(datetime(2025, 3, 5, 8, 30)) == "05/03/2025 - 08:30 hrs"


def test_full_cycle_is_recorded_newest_first(fases):
    fases.cambiar_estado(CLASIFICACION, "Ana García")
    fases.abrir_fase("Ana García")
    fases.cerrar_fase("Luis Torres")
    fases.publicar_resultados("Sofía Vargas")

    historial = fases.historial()
    assert [h["accion"] for h in historial] == ["Publicada", "Cerrada", "Abierta", "Iniciada"]
    assert [h["numero"] for h in historial] == [4, 3, 2, 1]
    assert historial[0] == {
        "numero": 4,
        "accion": "Publicada",
        "fechaHora": "14/03/2025 - 16:20 hrs",
        "administrador": "Sofía Vargas",
        "fase": "Clasificación",
        "estado": "Completado",
    }
    assert fases.situacion() == "Resultados publicados"


def test_state_survives_a_new_store(storage, fases):
    fases.cambiar_estado(FINAL, "Ana")
    fases.abrir_fase("Ana")

    again = FasesStore(storage)
    assert again.estado() == "Fase Final"
    assert again.situacion() == "Fase abierta"
    assert json.loads(storage.get_item(K_FASES))["abierta"] is True


def test_cannot_go_back_or_repeat(fases):
    fases.cambiar_estado(FINAL)
    with pytest.raises(FaseError, match="anterior"):
        fases.cambiar_estado(CLASIFICACION)
    with pytest.raises(FaseError, match="ya está"):
        fases.cambiar_estado(FINAL)
    with pytest.raises(FaseError):
        fases.cambiar_estado(9)


def test_open_phase_blocks_state_change(fases):
    fases.cambiar_estado(CLASIFICACION)
    fases.abrir_fase()
    with pytest.raises(FaseError, match="Cierre la fase"):
        fases.cambiar_estado(FINAL)


def test_phase_actions_need_a_phase(fases):
    with pytest.raises(FaseError, match="No hay una fase en curso"):
        fases.abrir_fase()
    fases.cambiar_estado(CONCLUIDA)
    with pytest.raises(FaseError):
        fases.publicar_resultados()


def test_phase_action_order(fases):
    fases.cambiar_estado(CLASIFICACION)
    with pytest.raises(FaseError, match="no está abierta"):
        fases.cerrar_fase()
    with pytest.raises(FaseError, match="antes de publicar"):
        fases.publicar_resultados()

    fases.abrir_fase()
    with pytest.raises(FaseError, match="ya está abierta"):
        fases.abrir_fase()
    fases.cerrar_fase()
    fases.publicar_resultados()
    with pytest.raises(FaseError, match="ya fueron publicados"):
        fases.abrir_fase()


def test_failed_action_leaves_history_untouched(fases):
    fases.cambiar_estado(CLASIFICACION)
    with pytest.raises(FaseError):
        fases.cerrar_fase()
    assert len(fases.historial()) == 1


def test_corrupt_storage_is_ignored(storage):
    storage.set_item(K_FASES, "{no es json")
    assert FasesStore(storage).estado_id() == NO_INICIADA
