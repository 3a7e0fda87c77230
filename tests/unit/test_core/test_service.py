from unittest.mock import patch

import pytest
from core.config import Settings
from core.errors import OutOfBoundsError, UnreachableFactorError
from core.models import FactorSet, RiskLevel
from core.service import FloodAnalysisService, create_service
from loaders.geo_factors import FACTOR_NAMES

# Urban point beside the Davao River mouth
CITY_LAT, CITY_LON = 7.06, 125.60


@pytest.fixture
def service():
    return create_service(Settings(seed=42))


class BrokenExtractor:
    """Extractor stub producing an out-of-range slope."""

    def extract(self, location):
        return FactorSet(
            elevation=10, slope=120, aspect=0, profile_curvature=-3,
            distance_to_river=40, rainfall=2300,
            land_use_class="Urban Built-Up", lithology="Alluvial Deposits",
        )


class TestAnalyzeLocation:

    def test_record_shape(self, service):
        record = service.analyze_location(CITY_LAT, CITY_LON).to_dict()

        assert set(record) == {"location", "factors", "prediction", "factorImportance", "timestamp"}
        assert record["location"] == {"latitude": CITY_LAT, "longitude": CITY_LON}
        assert set(record["factors"]) == set(FACTOR_NAMES)
        assert record["timestamp"].endswith("Z")
        assert record["prediction"]["riskLevel"] in [r.value for r in RiskLevel]

    def test_city_centre_near_river(self, service):
        record = service.analyze_location(CITY_LAT, CITY_LON)
        assert record.factors.land_use_class == "Urban Built-Up"
        assert record.prediction.probability > 0.35
        assert record.factor_importance

    def test_out_of_bounds_never_reaches_predictor(self, service):
        with pytest.raises(OutOfBoundsError):
            service.analyze_location(8.0, 125.5)
        assert not service.predictor.is_trained()

    def test_out_of_bounds_skips_extraction(self, service):
        with patch.object(service.extractor, "extract") as mock_extract:
            with pytest.raises(OutOfBoundsError):
                service.analyze_location(7.0, 125.9)
            mock_extract.assert_not_called()

    def test_rectangle_mode_accepts_points_outside_polygon(self):
        strict = create_service(Settings(seed=1))
        loose = create_service(Settings(seed=1, boundary_mode="rectangle"))

        with pytest.raises(OutOfBoundsError):
            strict.analyze_location(7.0, 125.7)
        assert loose.analyze_location(7.0, 125.7).location.latitude == 7.0

    def test_same_seed_same_result(self):
        first = create_service(Settings(seed=7)).analyze_location(CITY_LAT, CITY_LON)
        second = create_service(Settings(seed=7)).analyze_location(CITY_LAT, CITY_LON)

        assert first.factors == second.factors
        assert first.prediction == second.prediction

    def test_repeat_calls_on_one_service_agree(self, service):
        first = service.analyze_location(CITY_LAT, CITY_LON)
        service.get_factor_details(7.05, 125.59, "slope")
        service.analyze_location(7.08, 125.62)
        second = service.analyze_location(CITY_LAT, CITY_LON)

        assert first.factors == second.factors
        assert first.prediction == second.prediction
        assert first.factor_importance == second.factor_importance

    def test_factor_details_match_analysis(self, service):
        record = service.analyze_location(CITY_LAT, CITY_LON)
        details = service.get_factor_details(CITY_LAT, CITY_LON, "distanceToRiver")
        assert details["value"] == record.factors.distance_to_river

    def test_seeds_differ(self):
        a = create_service(Settings(seed=1)).analyze_location(CITY_LAT, CITY_LON)
        b = create_service(Settings(seed=2)).analyze_location(CITY_LAT, CITY_LON)
        assert a.factors != b.factors

    def test_strict_ranges_reject_bad_factors(self, service):
        strict = FloodAnalysisService(
            extractor=BrokenExtractor(),
            predictor=service.predictor,
            boundary=service.boundary,
            settings=Settings(strict_factor_ranges=True),
        )
        with pytest.raises(UnreachableFactorError) as exc:
            strict.analyze_location(CITY_LAT, CITY_LON)
        assert exc.value.factor == "slope"

    def test_lenient_ranges_pass_bad_factors_through(self, service):
        lenient = FloodAnalysisService(
            extractor=BrokenExtractor(),
            predictor=service.predictor,
            boundary=service.boundary,
        )
        record = lenient.analyze_location(CITY_LAT, CITY_LON)
        assert 0.0 <= record.prediction.probability <= 1.0


class TestServiceInfo:

    def test_model_info_reflects_training(self, service):
        info = service.get_model_info()
        assert info["trained"] is False
        assert info["factorsUsed"] == 8
        assert info["accuracy"]["ensemble"] == 0.87

        service.analyze_location(CITY_LAT, CITY_LON)
        assert service.get_model_info()["trained"] is True

    def test_factor_details(self, service):
        details = service.get_factor_details(CITY_LAT, CITY_LON, "rainfall")
        assert details["factor"] == "rainfall"
        assert 1600 <= details["value"] <= 2000

    def test_unknown_factor(self, service):
        with pytest.raises(ValueError):
            service.get_factor_details(CITY_LAT, CITY_LON, "soilMoisture")

    def test_flood_prone_areas(self, service):
        areas = service.get_flood_prone_areas()["areas"]
        assert len(areas) == 4
        assert {"name", "latitude", "longitude", "description", "riskLevel"} <= set(areas[0])

    def test_health_check(self, service):
        assert service.health_check() == "OK"
