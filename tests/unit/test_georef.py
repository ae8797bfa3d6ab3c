"""
Unit tests for the Georef provider
"""

from unittest.mock import patch

from address_mapper.geocoding import georef

GET = "address_mapper.geocoding.upstream.requests.get"


def _direccion(departamento="Comuna 9", dep_id="02009", provincia="Ciudad Autónoma de Buenos Aires",
               lat=-34.6521, lon=-58.5032):
    return {
        "calle": {"nombre": "AV. JUAN BAUTISTA ALBERDI"},
        "altura": {"valor": 6500, "unidad": None},
        "departamento": {"nombre": departamento, "id": dep_id},
        "localidad_censal": {"nombre": "Ciudad Autónoma de Buenos Aires"},
        "provincia": {"nombre": provincia},
        "ubicacion": {"lat": lat, "lon": lon},
    }


def _interseccion(provincia="Ciudad Autónoma de Buenos Aires", localidad="Ciudad Autónoma de Buenos Aires"):
    return {
        "localidad_censal": {"nombre": localidad},
        "provincia": {"nombre": provincia},
        "ubicacion": {"lat": -34.65, "lon": -58.50},
    }


class TestGeorefMapping:
    """Test cases for result normalization"""

    def test_map_direccion(self):
        result = georef.map_direccion(_direccion())

        assert result["lat"] == -34.6521
        assert result["lon"] == -58.5032
        assert result["geocoder"] == "georef"
        assert result["address"]["road"] == "AV. JUAN BAUTISTA ALBERDI"
        assert result["address"]["house_number"] == "6500"
        assert result["address"]["city_district"] == "Comuna 9"
        assert result["display_name"].startswith("AV. JUAN BAUTISTA ALBERDI 6500, ")
        assert result["display_name"].endswith("Argentina")

    def test_map_direccion_without_comuna(self):
        result = georef.map_direccion(_direccion(departamento="La Matanza", dep_id="06427"))
        assert result["address"]["city_district"] is None

    def test_map_interseccion(self):
        result = georef.map_interseccion(_interseccion(), "Lacarra", "Directorio")
        assert result["address"]["road"] == "Lacarra y Directorio"
        assert result["display_name"].startswith("Lacarra y Directorio, ")


class TestGeorefDirecciones:
    """Test cases for georef.geocode"""

    def test_unrestricted(self, make_response):
        payload = {"direcciones": [_direccion(), {"calle": {"nombre": "SIN UBICACION"}}]}
        with patch(GET, return_value=make_response(json_data=payload)) as mock_get:
            results = georef.geocode("Alberdi 6500")

        assert len(results) == 1
        params = mock_get.call_args.kwargs["params"]
        assert params["direccion"] == "Alberdi 6500"
        assert params["max"] == 10
        assert "provincia" not in params

    def test_restricted_filters_outside_comuna9(self, make_response):
        payload = {"direcciones": [
            _direccion(),
            _direccion(departamento="Comuna 1", dep_id="02001"),
            _direccion(provincia="Buenos Aires"),
        ]}
        with patch(GET, return_value=make_response(json_data=payload)) as mock_get:
            results = georef.geocode("Alberdi 6500", restrict=True)

        assert len(results) == 1
        assert results[0]["raw"]["departamento"]["nombre"] == "Comuna 9"
        params = mock_get.call_args.kwargs["params"]
        assert params["provincia"] == "Ciudad Autónoma de Buenos Aires"
        assert params["departamento"] == "Comuna 9"

    def test_restricted_widens_to_caba(self, make_response):
        responses = [
            make_response(json_data={"direcciones": []}),
            make_response(json_data={"direcciones": [_direccion(departamento="", dep_id="02009")]}),
        ]
        with patch(GET, side_effect=responses) as mock_get:
            results = georef.geocode("Alberdi 6500", restrict=True)

        assert len(results) == 1
        second = mock_get.call_args_list[1].kwargs["params"]
        assert second["provincia"] == "Ciudad Autónoma de Buenos Aires"
        assert "departamento" not in second


class TestGeorefIntersecciones:
    """Test cases for georef.geocode_intersection"""

    def test_params(self, make_response):
        payload = {"intersecciones": [_interseccion()]}
        with patch(GET, return_value=make_response(json_data=payload)) as mock_get:
            results = georef.geocode_intersection("Lacarra", "Directorio")

        assert len(results) == 1
        params = mock_get.call_args.kwargs["params"]
        assert params["calle_nombre"] == "Lacarra"
        assert params["interseccion_nombre"] == "Directorio"
        assert mock_get.call_args.args[0] == georef.INTERSECCIONES_URL

    def test_restricted_keeps_caba_only(self, make_response):
        payload = {"intersecciones": [_interseccion(), _interseccion(provincia="Córdoba", localidad="Córdoba")]}
        with patch(GET, return_value=make_response(json_data=payload)):
            results = georef.geocode_intersection("Lacarra", "Directorio", restrict=True)

        assert len(results) == 1
        assert results[0]["address"]["state"] == "Ciudad Autónoma de Buenos Aires"

    def test_restricted_keeps_row_by_locality(self, make_response):
        payload = {"intersecciones": [_interseccion(provincia="")]}
        with patch(GET, return_value=make_response(json_data=payload)):
            results = georef.geocode_intersection("Lacarra", "Directorio", restrict=True)

        assert len(results) == 1
        assert results[0]["address"]["state"] is None
        assert results[0]["address"]["city"] == "Ciudad Autónoma de Buenos Aires"

    def test_restricted_retries_without_department(self, make_response):
        responses = [
            make_response(json_data={"intersecciones": []}),
            make_response(json_data={"intersecciones": []}),
        ]
        with patch(GET, side_effect=responses) as mock_get:
            assert georef.geocode_intersection("Lacarra", "Directorio", restrict=True) == []

        assert mock_get.call_count == 2
        assert "departamento" in mock_get.call_args_list[0].kwargs["params"]
        assert "departamento" not in mock_get.call_args_list[1].kwargs["params"]
