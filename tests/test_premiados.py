from unittest import mock

import pytest

from ohsansi.errores import ApiError
from ohsansi.premiados import (
    PremiadosApi,
    contar_medallas,
    distincion,
    etiqueta_medalla,
    ganador_row,
    niveles_de,
    puede_enviar_correos,
)


@pytest.fixture
def client():
    return mock.Mock()


def test_medal_labels():
    assert etiqueta_medalla("ORO") == "Oro"
    assert etiqueta_medalla("MENCIÓN") == "Mención"
    assert etiqueta_medalla("mencion") == "Mención"
    assert distincion(None) == "Sin medalla"
    assert distincion("BRONCE") == "Bronce"


def test_contar_medallas():
    rows = [{"medalla": "ORO"}, {"medalla": "MENCIÓN"}, {"medalla": None}, {"medalla": "ORO"}]
    assert contar_medallas(rows) == {"oro": 2, "plata": 0, "bronce": 0, "mencion": 1}


def test_filtros_with_gestion(client):
    client.get.return_value = {"data": [{"area": "Física", "niveles": ["1S", "2S"]}]}
    filtros = PremiadosApi(client).filtros(gestion=2025)

    client.get.assert_called_once_with("/api/filtros/categorias", params={"gestion": 2025})
    assert niveles_de(filtros, "Física") == ["1S", "2S"]
    assert niveles_de(filtros, "Química") == []
    assert niveles_de(filtros, None) == []


def test_premiados_rows_and_counts(client):
    client.get.return_value = {
        "data": [
            {"id": 1, "nombreCompleto": "Ana", "unidadEducativa": "UE 1", "nota": 91.5,
             "modalidad": "INDIVIDUAL", "posicion": 1, "medalla": "ORO"},
            {"id": 2, "nombreCompleto": "Los Pumas", "unidadEducativa": "UE 2", "nota": 70,
             "modalidad": "GRUPAL", "posicion": 2, "medalla": None},
        ],
        "total": 2,
        "medallero": {"oros_final": 1, "platas_final": 1, "bronces_final": 1, "menciones_final": 0},
    }
    result = PremiadosApi(client).premiados("Física", "1S", 2025)

    client.get.assert_called_once_with(
        "/api/premiados", params={"area": "Física", "nivel": "1S", "gestion": 2025}
    )
    assert result["total"] == 2
    assert result["conteos"]["oro"] == 1
    assert result["premiados"][0]["nota"] == 91.5
    assert result["premiados"][1]["modalidad"] == "Grupal"
    assert result["premiados"][1]["distincion"] == "Sin medalla"
    assert result["medallero"]["oros_final"] == 1


def test_ganadores_requires_categoria(client):
    client.get.return_value = {"success": True, "data": None}
    with pytest.raises(ApiError):
        PremiadosApi(client).ganadores("Física", "1S")


def test_enviar_correos_message(client):
    client.post.return_value = {"data": {"enviados": 3, "fallidos": 1}}
    msg = PremiadosApi(client).enviar_correos("Física", "1S")

    client.post.assert_called_once_with(
        "/api/ganadores-certificados/enviar-correos", {"area": "Física", "nivel": "1S"}
    )
    assert msg == "Se procesaron los correos. Enviados: 3, fallidos: 1."


def test_emails_only_after_final_phase():
    data = {"ganadores": [{}], "fase_final": {"estado": "EN_EJECUCION"}}
    assert not puede_enviar_correos(data)
    data["fase_final"]["estado"] = "FINALIZADA"
    assert puede_enviar_correos(data)
    assert not puede_enviar_correos(dict(data, ganadores=[]))
    assert not puede_enviar_correos(None)


def test_ganador_row_lists_members():
    row = ganador_row({
        "modalidad": "GRUPAL", "medalla": "PLATA", "nota": 80,
        "nombre_equipo": "Los Pumas",
        "integrantes": [{"ci": "1", "nombre_completo": "Ana"}, {"ci": "2", "nombre_completo": "Luis"}],
    })
    assert row["medalla"] == "Plata"
    assert row["integrantes"] == "Ana, Luis"
    assert row["ci"] == ""
