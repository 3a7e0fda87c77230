import numpy as np
import pytest
from core.errors import NotReadyError
from core.models import FactorSet, RiskLevel
from inference.bagging import BaggedScorer, distance_score, elevation_score, land_use_score

HIGH_RISK = FactorSet(
    elevation=20, slope=1, aspect=90, profile_curvature=-4,
    distance_to_river=20, rainfall=2500,
    land_use_class="Urban Built-Up", lithology="Alluvial Deposits",
)

LOW_RISK = FactorSet(
    elevation=400, slope=40, aspect=180, profile_curvature=3,
    distance_to_river=1500, rainfall=1700,
    land_use_class="Forest", lithology="Volcanic Rock",
)


@pytest.fixture
def scorer():
    model = BaggedScorer()
    model.train([])
    return model


def test_untrained_predict_raises():
    with pytest.raises(NotReadyError):
        BaggedScorer().predict(HIGH_RISK)


def test_train_only_flips_flag():
    model = BaggedScorer()
    assert not model.is_trained()
    model.train([])
    assert model.is_trained()
    assert model.training_data == []


def test_first_tree_drops_distance_slope_rainfall():
    """Tree 0 keeps land use plus the two always-on terms."""
    model = BaggedScorer(num_trees=1)
    assert model.tree_vote(HIGH_RISK, 0) == pytest.approx((0.7 + 0.6 + 0.7) / (1.0 + 0.8 + 0.8))


def test_odd_tree_drops_land_use():
    model = BaggedScorer()
    expected = (0.9 + 0.8 + 0.7 + 0.6 + 0.7) / (1.5 + 1.2 + 1.0 + 0.8 + 0.8)
    assert model.tree_vote(HIGH_RISK, 1) == pytest.approx(expected)


def test_single_tree_confidence_is_one():
    model = BaggedScorer(num_trees=1)
    model.train([])
    result = model.predict(HIGH_RISK)
    assert result.probability == pytest.approx(2.0 / 2.6)
    assert result.confidence == 1.0


def test_high_risk_prediction(scorer):
    result = scorer.predict(HIGH_RISK)
    # every vote lies between 3.7/5.3 and 2.0/2.6
    assert 3.7 / 5.3 <= result.probability <= 2.0 / 2.6
    assert result.risk_level == RiskLevel.HIGH


def test_low_risk_prediction(scorer):
    result = scorer.predict(LOW_RISK)
    assert result.probability < 0.25
    assert result.risk_level == RiskLevel.LOW


def test_probability_is_mean_of_votes(scorer):
    votes = [scorer.tree_vote(HIGH_RISK, i) for i in range(scorer.num_trees)]
    result = scorer.predict(HIGH_RISK)
    assert result.probability == pytest.approx(sum(votes) / len(votes))
    assert result.confidence == pytest.approx(max(0.5, 1 - float(np.var(votes))))


def test_step_tables():
    assert distance_score(49) == 0.9
    assert distance_score(50) == 0.6
    assert distance_score(499) == 0.4
    assert distance_score(500) == 0.2
    assert elevation_score(150) == 0.0
    assert land_use_score("Urban") == 0.3  # prototype label falls through


def test_bounds_on_random_factors(scorer):
    """Probability in [0, 1] and confidence in [0.5, 1] for arbitrary inputs."""
    rng = np.random.default_rng(0)
    for _ in range(200):
        factors = FactorSet(
            elevation=float(rng.uniform(0, 600)),
            slope=float(rng.uniform(0, 90)),
            aspect=float(rng.uniform(0, 360)),
            profile_curvature=float(rng.uniform(-6, 6)),
            distance_to_river=float(rng.uniform(0, 3000)),
            rainfall=float(rng.uniform(1400, 2800)),
            land_use_class=str(rng.choice(["Urban Built-Up", "Agricultural Land", "Forest", "Grassland"])),
            lithology="Alluvial Deposits",
        )
        result = scorer.predict(factors)
        assert 0.0 <= result.probability <= 1.0
        assert 0.5 <= result.confidence <= 1.0


def test_invalid_tree_count():
    with pytest.raises(ValueError):
        BaggedScorer(num_trees=0)
